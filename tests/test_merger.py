"""Unit tests for the summary JSON merger.

WHY: The merged text is the input to the final summary. Parts out of
order, or a reply shape the merger does not understand, would scramble or
silently drop content.

HOW: extract_texts is tested on dicts; merge_file on files in tmp_path.
"""

import json

import pytest

from summarization_toolkit.core.merger import extract_texts, merge_file, merge_texts, part_index
from summarization_toolkit.errors import ArgumentError


class TestPartIndex:

    def test_index_from_key(self):
        assert part_index("talk_part_012.txt") == 12

    def test_key_without_index(self):
        assert part_index("talk_single_shot.txt") == 0


class TestExtractTexts:

    def test_string_values(self):
        data = {"t_part_002.txt": "second", "t_part_001.txt": "first"}
        assert extract_texts(data) == ["first", "second"]

    def test_numeric_order_beyond_padding(self):
        data = {"t_part_1000.txt": "last", "t_part_999.txt": "before"}
        assert extract_texts(data) == ["before", "last"]

    def test_koboldai_results_shape(self):
        data = {
            "t_part_001.txt": {"results": [{"text": "one"}, {"text": "two"}]},
            "t_part_002.txt": "three",
        }
        assert extract_texts(data) == ["one", "two", "three"]

    def test_unusable_values_skipped(self):
        data = {
            "a_part_001.txt": 42,
            "a_part_002.txt": {"results": "nope"},
            "a_part_003.txt": {"results": [{"text": 5}, {"other": "x"}]},
            "a_part_004.txt": "kept",
        }
        assert extract_texts(data) == ["kept"]

    def test_keys_without_index_sorted_by_name(self):
        assert extract_texts({"b.txt": "b", "a.txt": "a"}) == ["a", "b"]

    def test_merge_joins_with_newline(self):
        assert merge_texts(["a", "b", "c"]) == "a\nb\nc"
        assert merge_texts([]) == ""


class TestMergeFile:

    def test_writes_merged_text(self, tmp_path):
        src = tmp_path / "out.json"
        src.write_text(json.dumps({"x_part_002.txt": "B", "x_part_001.txt": "A"}), encoding="utf-8")
        dst = tmp_path / "merged.txt"

        assert merge_file(src, dst) == 2
        assert dst.read_text(encoding="utf-8") == "A\nB"

    def test_invalid_json(self, tmp_path):
        src = tmp_path / "out.json"
        src.write_text("{oops", encoding="utf-8")
        with pytest.raises(ArgumentError):
            merge_file(src, tmp_path / "m.txt")

    def test_non_object(self, tmp_path):
        src = tmp_path / "out.json"
        src.write_text('["a"]', encoding="utf-8")
        with pytest.raises(ArgumentError):
            merge_file(src, tmp_path / "m.txt")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            merge_file(tmp_path / "missing.json", tmp_path / "m.txt")

    def test_non_utf8_file(self, tmp_path):
        src = tmp_path / "out.json"
        src.write_bytes(b'{"a_part_001.txt": "caf\xe9"}')
        with pytest.raises(ArgumentError, match="not valid UTF-8"):
            merge_file(src, tmp_path / "m.txt")
