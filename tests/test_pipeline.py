"""End-to-end tests for the subtitle-to-summary pipeline.

WHY: The pipeline chains every tool through temporary files. A wrong
intermediate name or a stale file in the final directory would send the
wrong prompt to the model in the last step.

HOW: A fake Ollama server (httpx.MockTransport) tags every reply with the
prompt it received, so the final file shows exactly which prompts were
sent and in what order.
"""

import asyncio
import json

import httpx
import pytest

from summarization_toolkit import pipeline
from summarization_toolkit.errors import ConfigError
from summarization_toolkit.pipeline import PipelineOptions, run_pipeline


def _fake_ollama(prompts, fail_on=None):
    def handler(request):
        prompt = json.loads(request.content)["prompt"]
        prompts.append(prompt)
        if fail_on and fail_on in prompt:
            return httpx.Response(503, text="busy")
        if prompt.startswith("F["):
            return httpx.Response(200, json={"response": "FINAL<" + prompt + ">"})
        return httpx.Response(200, json={"response": "sum:" + prompt})

    return httpx.MockTransport(handler)


@pytest.fixture
def final_config_file(tmp_path):
    path = tmp_path / "final.json"
    path.write_text(json.dumps({"header": "F[", "footer": "]"}), encoding="utf-8")
    return path


@pytest.fixture
def work_dir(tmp_path, monkeypatch):
    """Pin the pipeline's temporary directory so tests can check its removal."""
    work = tmp_path / "work"

    def fake_mkdtemp(prefix=None):
        work.mkdir()
        return str(work)

    monkeypatch.setattr(pipeline.tempfile, "mkdtemp", fake_mkdtemp)
    return work


def _options(tmp_path, srt_file, config_file, final_config_file, **kwargs):
    return PipelineOptions(
        srt_path=srt_file,
        start_config=config_file,
        final_config=final_config_file,
        output_dir=tmp_path / "out",
        max_tokens=5,
        **kwargs,
    )


class TestRunPipeline:

    def test_full_chain(self, tmp_path, srt_file, config_file, final_config_file, work_dir):
        prompts = []
        messages = []
        options = _options(tmp_path, srt_file, config_file, final_config_file)

        final_path = asyncio.run(
            run_pipeline(options, on_status=messages.append, transport=_fake_ollama(prompts))
        )

        assert prompts == [
            "H:Hello there general Kenobi You:F",
            "H:are a bold one:F",
            "F[sum:H:Hello there general Kenobi You:F\nsum:H:are a bold one:F]",
        ]
        assert final_path == tmp_path / "out" / "output_episode.txt"
        assert final_path.read_text(encoding="utf-8") == "FINAL<" + prompts[2] + ">"

        summary_map = json.loads((tmp_path / "out" / "out.json").read_text(encoding="utf-8"))
        assert list(summary_map) == ["subtitles_output_single_shot.txt"]
        assert messages[-1].startswith("Execution time: 0h 0m ")

    def test_only_results_left_in_output_dir(self, tmp_path, srt_file, config_file, final_config_file, work_dir):
        options = _options(tmp_path, srt_file, config_file, final_config_file)
        asyncio.run(run_pipeline(options, transport=_fake_ollama([])))

        assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["out.json", "output_episode.txt"]
        assert not work_dir.exists()

    def test_failed_part_skipped(self, tmp_path, srt_file, config_file, final_config_file, work_dir):
        prompts = []
        messages = []
        options = _options(tmp_path, srt_file, config_file, final_config_file)

        asyncio.run(
            run_pipeline(options, on_status=messages.append, transport=_fake_ollama(prompts, fail_on="Kenobi"))
        )

        assert prompts[-1] == "F[sum:H:are a bold one:F]"
        assert any(m.startswith("Error processing converted_subtitles_part_001.txt") for m in messages)

    def test_bad_final_config_sends_nothing(self, tmp_path, srt_file, config_file, work_dir):
        broken = tmp_path / "broken.json"
        broken.write_text('{"header": "only"}', encoding="utf-8")
        prompts = []
        options = _options(tmp_path, srt_file, config_file, broken)

        with pytest.raises(ConfigError):
            asyncio.run(run_pipeline(options, transport=_fake_ollama(prompts)))

        assert prompts == []
        assert not work_dir.exists()

    def test_work_dir_removed_on_failure(self, tmp_path, config_file, final_config_file, work_dir):
        options = _options(tmp_path, tmp_path / "missing.srt", config_file, final_config_file)

        with pytest.raises(OSError):
            asyncio.run(run_pipeline(options, transport=_fake_ollama([])))

        assert not work_dir.exists()
