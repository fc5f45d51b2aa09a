"""Configuration constants, .env loading, and config-file loaders.

WHY: Backend URLs, the default model, and timeouts differ between
machines. Keeping them as plain module-level values (overridable from the
environment) means nobody has to edit code to point the tools at a
different server. The header/footer file and the request-params file are
user-supplied JSON, so they are validated here before any work starts.

HOW: python-dotenv loads the .env file on import. Constants are read with
os.getenv defaults. load_wrap_config() validates the header/footer file
against WRAP_CONFIG_SCHEMA with jsonschema; load_params() reads a JSON
object of extra request parameters.

RULES:
- Both header and footer are mandatory strings; no defaults are substituted
- Unknown keys in the header/footer file are ignored
- Every loader failure is a ConfigError naming the file
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
from dotenv import load_dotenv

from summarization_toolkit.core.models import WrapConfig
from summarization_toolkit.errors import ConfigError

# Load .env from the directory the tools are run from
load_dotenv()

# ---------------------------------------------------------------------------
# Inference backend defaults
# ---------------------------------------------------------------------------

OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434/api/generate")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "phi3")
KOBOLDAI_URL = os.getenv("KOBOLDAI_URL", "http://localhost:5001/api/v1/generate")
DEFAULT_BACKEND = os.getenv("DEFAULT_BACKEND", "ollama")
REQUEST_TIMEOUT_S = float(os.getenv("REQUEST_TIMEOUT_S", "600"))

# ---------------------------------------------------------------------------
# Tool defaults
# ---------------------------------------------------------------------------

DEFAULT_MAX_TOKENS = int(os.getenv("DEFAULT_MAX_TOKENS", "500"))
"""Part size used by the pipeline driver when -s is not given."""

DEFAULT_SRT_OUTPUT = "converted_subtitles.txt"
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

WRAP_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "header": {"type": "string"},
        "footer": {"type": "string"},
    },
    "required": ["header", "footer"],
}


def _read_json(path: str | Path, what: str) -> Any:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {what} '{path}': {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(
            f"Cannot read {what} '{path}': not valid UTF-8 (byte {e.start})"
        ) from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{what.capitalize()} '{path}' is not valid JSON: {e}") from e


def load_wrap_config(path: str | Path) -> WrapConfig:
    """Load the header/footer configuration from a JSON file.

    WHY: Every part the splitter writes is wrapped in the same prompt
    header and footer. A typo in the file must stop the run before any
    output directory is touched.

    HOW: Reads the file as UTF-8 JSON and validates it against
    WRAP_CONFIG_SCHEMA.

    RULES:
    - Missing file, non-UTF-8 bytes, invalid JSON, or a missing/non-string
      field → ConfigError
    - Extra keys are ignored

    Args:
        path: Path to the JSON config file.

    Returns:
        The validated WrapConfig.
    """
    data = _read_json(path, "config file")
    try:
        jsonschema.validate(instance=data, schema=WRAP_CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Invalid config file '{path}': {e.message}") from e
    return WrapConfig(header=data["header"], footer=data["footer"])


def load_params(path: str | Path) -> dict[str, Any]:
    """Load extra request parameters from a JSON file.

    RULES:
    - The top-level value must be a JSON object
    - Contents are otherwise passed through untouched
    """
    data = _read_json(path, "params file")
    if not isinstance(data, dict):
        raise ConfigError(f"Params file '{path}' must contain a JSON object")
    return data
