"""SRT subtitle parsing and conversion to annotated transcript text.

WHY: Subtitles are the most common transcript source, but their numbered,
timestamped blocks waste prompt space and break sentences across cues.
The splitter consumes a simpler annotated format, one block per cue:

    Script: <cue text on one line>
    Start Time: <start in ms>
    End Time: <end in ms>

HOW: parse_srt() walks the lines once. A timing line closes the cue
being collected and records the new start/end; every other non-blank,
non-numeric line is appended to the current cue's text. render_cues()
turns the cues into annotated text.

RULES:
- Timing lines match HH:MM:SS,mmm --> HH:MM:SS,mmm anywhere in the line
- Blank lines and purely numeric lines (cue indices) are ignored
- Multi-line cue text is joined with single spaces
- A cue with no text is dropped
- Text before the first timing line becomes a cue of its own with 0/0
  timing, emitted when the first timing line arrives
- Files are read as UTF-8 with an optional BOM
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from summarization_toolkit.errors import ArgumentError

logger = logging.getLogger(__name__)

TIME_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2}),(\d{3}) --> (\d{2}):(\d{2}):(\d{2}),(\d{3})"
)


@dataclass
class Cue:
    """One subtitle cue: its text and timing in milliseconds."""

    script: str
    start_ms: int
    end_ms: int


def timestamp_to_ms(hours: str, minutes: str, seconds: str, millis: str) -> int:
    return (
        int(hours) * 3_600_000
        + int(minutes) * 60_000
        + int(seconds) * 1000
        + int(millis)
    )


def parse_srt(lines: Iterable[str]) -> list[Cue]:
    """Collect cues from the lines of an SRT file.

    Args:
        lines: Lines of the file, with or without trailing newlines.

    Returns:
        Cues in file order, text trimmed.
    """
    cues: list[Cue] = []
    current = ""
    start_ms = 0
    end_ms = 0

    for raw in lines:
        line = raw.rstrip("\r\n")
        match = TIME_RE.search(line)
        if match:
            if current:
                cues.append(Cue(current.strip(), start_ms, end_ms))
                current = ""
            groups = match.groups()
            start_ms = timestamp_to_ms(*groups[:4])
            end_ms = timestamp_to_ms(*groups[4:])
        elif line.strip() and not line.isnumeric():
            current += " " + line.strip()

    if current:
        cues.append(Cue(current.strip(), start_ms, end_ms))

    return cues


def render_cues(cues: Iterable[Cue]) -> str:
    return "".join(
        f"Script: {cue.script}\nStart Time: {cue.start_ms}\nEnd Time: {cue.end_ms}\n\n"
        for cue in cues
    )


def convert_srt_file(srt_path: str | Path, output_path: str | Path) -> int:
    """Convert an .srt file into annotated text and write it.

    RULES:
    - Input is decoded as UTF-8, a leading BOM is dropped
    - Output is overwritten if it exists
    - OSError propagates to the caller
    - Input that is not valid UTF-8 raises ArgumentError naming the file

    Returns:
        Number of cues written.
    """
    try:
        with open(srt_path, encoding="utf-8-sig") as f:
            cues = parse_srt(f)
    except UnicodeDecodeError as e:
        raise ArgumentError(f"Cannot read '{srt_path}': not valid UTF-8 (byte {e.start})") from e
    Path(output_path).write_text(render_cues(cues), encoding="utf-8")
    logger.info("Converted %d cue(s) from %s to %s", len(cues), srt_path, output_path)
    return len(cues)
