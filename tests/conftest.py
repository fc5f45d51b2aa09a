"""Shared test fixtures for the summarization_toolkit test suite.

WHY: The splitter, converter, CLI, and pipeline tests all need the same
small transcript, subtitle file, and header/footer config. Centralizing
them keeps the expected outputs consistent across modules.

HOW: Plain constants for the sample texts plus fixtures that write them
into tmp_path.

RULES:
- All file fixtures live under tmp_path (no writes outside it)
- ANNOTATED_TRANSCRIPT is exactly what SAMPLE_SRT converts to
"""

import json

import pytest

from summarization_toolkit.core.models import WrapConfig

# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

SAMPLE_SRT = (
    "1\n"
    "00:00:01,000 --> 00:00:02,500\n"
    "Hello there\n"
    "general Kenobi\n"
    "\n"
    "2\n"
    "00:00:03,000 --> 00:00:04,000\n"
    "You are a bold one\n"
    "\n"
)

ANNOTATED_TRANSCRIPT = (
    "Script: Hello there general Kenobi\n"
    "Start Time: 1000\n"
    "End Time: 2500\n"
    "\n"
    "Script: You are a bold one\n"
    "Start Time: 3000\n"
    "End Time: 4000\n"
    "\n"
)

TRANSCRIPT_TOKENS = ["Hello", "there", "general", "Kenobi", "You", "are", "a", "bold", "one"]


@pytest.fixture
def wrap_config():
    return WrapConfig(header="H:", footer=":F")


@pytest.fixture
def config_file(tmp_path):
    """A valid header/footer config file."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"header": "H:", "footer": ":F"}), encoding="utf-8")
    return path


@pytest.fixture
def transcript_file(tmp_path):
    """The annotated transcript produced from SAMPLE_SRT."""
    path = tmp_path / "talk.txt"
    path.write_text(ANNOTATED_TRANSCRIPT, encoding="utf-8")
    return path


@pytest.fixture
def srt_file(tmp_path):
    path = tmp_path / "episode.srt"
    path.write_text(SAMPLE_SRT, encoding="utf-8")
    return path


@pytest.fixture
def annotated_transcript():
    return ANNOTATED_TRANSCRIPT


@pytest.fixture
def transcript_tokens():
    return list(TRANSCRIPT_TOKENS)
