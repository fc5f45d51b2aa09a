"""Merge the summaries in a summary JSON map into one text file.

WHY: The summarize tool writes one response per prompt file, keyed by the
file name ({stem}_part_001.txt, ...). The next pipeline stage needs those
responses as a single document, in part order.

HOW: extract_texts() orders the map's entries by the part number found in
the key, then pulls the text out of each value. merge_texts() joins the
texts with newlines.

RULES:
- Entry order: numeric part index from "_part_NNN" in the key (keys
  without one count as 0), then the key itself
- A string value is used as-is
- An object value contributes every string "text" field of its "results"
  list (the raw KoboldAI reply shape)
- Any other value contributes nothing
- Texts are joined with "\\n", no trailing newline
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from summarization_toolkit.errors import ArgumentError

logger = logging.getLogger(__name__)

_PART_RE = re.compile(r"_part_(\d+)")


def part_index(key: str) -> int:
    match = _PART_RE.search(key)
    return int(match.group(1)) if match else 0


def texts_from_value(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        results = value.get("results")
        if isinstance(results, list):
            return [
                item["text"]
                for item in results
                if isinstance(item, dict) and isinstance(item.get("text"), str)
            ]
    return []


def extract_texts(data: dict[str, Any]) -> list[str]:
    """Return every summary text in the map, in part order."""
    texts: list[str] = []
    for key in sorted(data, key=lambda k: (part_index(k), k)):
        found = texts_from_value(data[key])
        if not found:
            logger.warning("No text found for entry %s", key)
        texts.extend(found)
    return texts


def merge_texts(texts: list[str]) -> str:
    return "\n".join(texts)


def merge_file(json_path: str | Path, output_path: str | Path) -> int:
    """Read a summary JSON map, merge its texts, and write the result.

    RULES:
    - The file must be UTF-8 and contain a JSON object, otherwise ArgumentError
    - OSError from reading or writing propagates

    Returns:
        Number of texts merged.
    """
    json_path = Path(json_path)
    try:
        raw = json_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ArgumentError(f"Cannot read '{json_path}': not valid UTF-8 (byte {e.start})") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ArgumentError(f"'{json_path}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ArgumentError(f"'{json_path}' must contain a JSON object")

    texts = extract_texts(data)
    Path(output_path).write_text(merge_texts(texts), encoding="utf-8")
    logger.info("Merged %d text(s) from %s into %s", len(texts), json_path, output_path)
    return len(texts)
