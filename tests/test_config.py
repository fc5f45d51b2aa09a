"""Unit tests for the config-file loaders.

WHY: A broken header/footer file would silently produce prompts without
instructions. The loader must reject it before anything is written.

HOW: Each test writes a config file into tmp_path and checks the loaded
value or the ConfigError raised.
"""

import json

import pytest

from summarization_toolkit.config import load_params, load_wrap_config
from summarization_toolkit.core.models import WrapConfig
from summarization_toolkit.errors import ConfigError


def _write(tmp_path, content, name="config.json"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadWrapConfig:

    def test_valid_config(self, config_file):
        assert load_wrap_config(config_file) == WrapConfig(header="H:", footer=":F")

    def test_strings_kept_verbatim(self, tmp_path):
        path = _write(tmp_path, json.dumps({"header": "Summarize:\n\n", "footer": "\n\nEND"}))
        config = load_wrap_config(path)
        assert config.header == "Summarize:\n\n"
        assert config.footer == "\n\nEND"

    def test_extra_keys_ignored(self, tmp_path):
        path = _write(tmp_path, json.dumps({"header": "a", "footer": "b", "model": "x"}))
        assert load_wrap_config(path) == WrapConfig(header="a", footer="b")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="missing.json"):
            load_wrap_config(tmp_path / "missing.json")

    def test_non_utf8_config(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"header": "\xff", "footer": ""}')
        with pytest.raises(ConfigError, match="not valid UTF-8"):
            load_wrap_config(path)

    def test_invalid_json(self, tmp_path):
        path = _write(tmp_path, "{header: nope")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_wrap_config(path)

    @pytest.mark.parametrize("data", [
        {"header": "only header"},
        {"footer": "only footer"},
        {"header": 1, "footer": "x"},
        {"header": "x", "footer": None},
        ["header", "footer"],
    ])
    def test_malformed_config(self, tmp_path, data):
        path = _write(tmp_path, json.dumps(data))
        with pytest.raises(ConfigError):
            load_wrap_config(path)


class TestLoadParams:

    def test_object_loaded(self, tmp_path):
        path = _write(tmp_path, json.dumps({"temperature": 0.2, "options": {"num_ctx": 4096}}), "p.json")
        assert load_params(path) == {"temperature": 0.2, "options": {"num_ctx": 4096}}

    def test_non_utf8_params(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_bytes(b'{"stop": "\xe9"}')
        with pytest.raises(ConfigError, match="p.json"):
            load_params(path)

    def test_non_object_rejected(self, tmp_path):
        path = _write(tmp_path, "[1, 2]", "p.json")
        with pytest.raises(ConfigError, match="JSON object"):
            load_params(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_params(tmp_path / "nope.json")
