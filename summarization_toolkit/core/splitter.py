"""Token-bounded transcript splitter with header/footer wrapping.

WHY: Local LLM servers accept only a limited prompt. A long transcript has
to be cut into parts small enough for one request, and every part needs
the same instructions around it ("Summarize the following: ..."). The
splitter produces those prompt files from an annotated transcript.

HOW: Planning and writing are separate steps:
  1. filter_lines() drops "Start Time:"/"End Time:" lines and strips the
     "Script: " prefix, flatten() joins the survivors with spaces
  2. tokenize() splits on whitespace, split_tokens() cuts the token list
     into runs of at most max_tokens
  3. wrap() adds header + footer + blank line to each part
  4. plan_split()/plan_single_shot() name every artifact and resolve the
     output directory, returning a SplitPlan (pure, no I/O)
  5. write_plan() creates the directory and writes the files

RULES:
- Lines end at "\n" only; other line-break characters stay in the text
- A token is a maximal run of non-whitespace characters
- Segments partition the tokens exactly, in order; ceil(N / M) of them
- N = 0 produces zero segments (no files, directory still created)
- Part names: {stem}_part_{index:03d}{ext}, index starting at 1
- Single-shot name: {stem}_single_shot{ext}, content not filtered
- Default output dir: {cwd}/{stem}_splits
- Existing files with the same name are overwritten
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from summarization_toolkit.config import load_wrap_config
from summarization_toolkit.core.models import (
    OutputArtifact,
    Segment,
    SplitOptions,
    SplitPlan,
    WrapConfig,
)
from summarization_toolkit.errors import ArgumentError

logger = logging.getLogger(__name__)

METADATA_PREFIXES = ("Start Time:", "End Time:")
CONTENT_PREFIX = "Script: "

# Literal suffix after the footer; downstream tools expect it byte-for-byte.
ARTIFACT_TERMINATOR = "\n\n"


# ---------------------------------------------------------------------------
# Line filtering
# ---------------------------------------------------------------------------


def split_lines(text: str) -> list[str]:
    """Break a document into lines on "\\n" only.

    RULES:
    - One trailing "\\r" per line is removed (CRLF files)
    - Form feeds, lone "\\r" and Unicode separators stay inside the line
    - A final "\\n" does not produce an extra empty line
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def normalize_line(line: str) -> str | None:
    """Apply the filter rules to one raw line.

    Returns:
        None if the line is metadata and must be dropped, otherwise the
        content with the "Script: " prefix removed and whitespace trimmed.
    """
    if line.startswith(METADATA_PREFIXES):
        return None
    content = line.lstrip()
    if content.startswith(CONTENT_PREFIX):
        content = content.replace(CONTENT_PREFIX, "", 1)
    return content.strip()


def filter_lines(lines: Iterable[str]) -> list[str]:
    """Drop metadata lines and normalize the rest, preserving order.

    WHY: The SRT converter emits "Script:", "Start Time:" and "End Time:"
    lines. Only the script text belongs in a prompt.

    RULES:
    - Lines starting with a METADATA_PREFIXES entry are discarded
    - The first "Script: " is removed from lines that start with it
    - Lines are trimmed; empty results are kept (they add no tokens)
    """
    kept: list[str] = []
    for line in lines:
        content = normalize_line(line)
        if content is not None:
            kept.append(content)
    return kept


def flatten(lines: Iterable[str]) -> str:
    """Join content lines into one string with single spaces."""
    return " ".join(lines)


# ---------------------------------------------------------------------------
# Splitting and wrapping
# ---------------------------------------------------------------------------


def tokenize(text: str) -> list[str]:
    return text.split()


def split_tokens(tokens: list[str], max_tokens: int) -> list[Segment]:
    """Cut a token list into consecutive segments of at most max_tokens.

    WHY: Each segment becomes one request to the model, so none may exceed
    the configured size and none may lose or repeat a token.

    HOW: Slices [i*M, (i+1)*M) for i in 0..ceil(N/M)-1.

    RULES:
    - max_tokens < 1 raises ValueError
    - Empty token list → empty result
    - Only the last segment may be shorter than max_tokens

    Args:
        tokens: Tokens in document order.
        max_tokens: Maximum tokens per segment.

    Returns:
        Segments with 1-based indices.
    """
    if max_tokens < 1:
        raise ValueError(f"max_tokens must be at least 1, got {max_tokens}")
    return [
        Segment(index=number, tokens=tokens[start:start + max_tokens])
        for number, start in enumerate(range(0, len(tokens), max_tokens), start=1)
    ]


def wrap(text: str, config: WrapConfig) -> str:
    return config.header + text + config.footer + ARTIFACT_TERMINATOR


# ---------------------------------------------------------------------------
# Naming and output directory
# ---------------------------------------------------------------------------


def split_extension(input_path: str | Path) -> tuple[str, str]:
    """Return (stem, extension-with-dot) of the input file name.

    RULES:
    - "talk.txt" → ("talk", ".txt"); "notes.tar.gz" → ("notes.tar", ".gz")
    - A name without an extension gets an empty extension
    """
    path = Path(input_path)
    return path.stem, path.suffix


def part_filename(input_path: str | Path, index: int) -> str:
    stem, ext = split_extension(input_path)
    return f"{stem}_part_{index:03d}{ext}"


def single_shot_filename(input_path: str | Path) -> str:
    stem, ext = split_extension(input_path)
    return f"{stem}_single_shot{ext}"


def resolve_output_dir(
    input_path: str | Path,
    output_dir: str | Path | None = None,
    cwd: Path | None = None,
) -> Path:
    """Pick the directory the artifacts are written to.

    RULES:
    - An explicit output_dir is used verbatim
    - Otherwise {cwd}/{stem}_splits, cwd defaulting to the process CWD
    """
    if output_dir:
        return Path(output_dir)
    stem, _ = split_extension(input_path)
    base = cwd if cwd is not None else Path.cwd()
    return base / f"{stem}_splits"


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def plan_split(
    options: SplitOptions,
    config: WrapConfig,
    source_text: str,
    cwd: Path | None = None,
) -> SplitPlan:
    """Build the artifacts for split mode from the raw document text.

    HOW: filter → flatten → tokenize → split → wrap → name.

    Args:
        options: Validated options; max_tokens must be set.
        config: Header/footer to wrap each part with.
        source_text: The input document, unmodified.
        cwd: Base for the default output directory (tests pass tmp_path).

    Returns:
        A SplitPlan with one artifact per segment.
    """
    if options.max_tokens is None:
        raise ValueError("plan_split requires max_tokens")

    tokens = tokenize(flatten(filter_lines(split_lines(source_text))))
    segments = split_tokens(tokens, options.max_tokens)
    logger.debug(
        "%d tokens, limit %d → %d segment(s)",
        len(tokens), options.max_tokens, len(segments),
    )

    artifacts = [
        OutputArtifact(
            filename=part_filename(options.input_path, segment.index),
            content=wrap(segment.text, config),
        )
        for segment in segments
    ]
    return SplitPlan(
        output_dir=resolve_output_dir(options.input_path, options.output_dir, cwd),
        artifacts=artifacts,
    )


def plan_single_shot(
    options: SplitOptions,
    config: WrapConfig,
    source_text: str,
    cwd: Path | None = None,
) -> SplitPlan:
    """Build the single artifact that wraps the whole document untouched."""
    return SplitPlan(
        output_dir=resolve_output_dir(options.input_path, options.output_dir, cwd),
        artifacts=[
            OutputArtifact(
                filename=single_shot_filename(options.input_path),
                content=wrap(source_text, config),
            )
        ],
    )


def build_plan(
    options: SplitOptions,
    config: WrapConfig,
    source_text: str,
    cwd: Path | None = None,
) -> SplitPlan:
    if options.single_shot:
        return plan_single_shot(options, config, source_text, cwd)
    return plan_split(options, config, source_text, cwd)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_plan(plan: SplitPlan) -> list[Path]:
    """Create the output directory and write every artifact.

    RULES:
    - Missing parent directories are created; an existing directory is fine
    - Files are written as UTF-8, overwriting previous runs
    - Newlines are written as-is (no platform translation)

    Returns:
        Paths of the written files, in segment order.
    """
    plan.output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for artifact in plan.artifacts:
        path = plan.output_dir / artifact.filename
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(artifact.content)
        written.append(path)
    return written


def run_split(options: SplitOptions, cwd: Path | None = None) -> list[Path]:
    """Load config and input, plan, and write. The splitter's whole run.

    RULES:
    - Config and input are read before the output directory is created
    - ConfigError and OSError propagate to the caller
    - Input that is not valid UTF-8 raises ArgumentError naming the file
    """
    config = load_wrap_config(options.config_path)
    # newline="" keeps CRLF intact for single-shot output
    try:
        with open(options.input_path, encoding="utf-8", newline="") as f:
            source_text = f.read()
    except UnicodeDecodeError as e:
        raise ArgumentError(
            f"Cannot read input file '{options.input_path}': not valid UTF-8 (byte {e.start})"
        ) from e
    plan = build_plan(options, config, source_text, cwd)
    written = write_plan(plan)
    logger.info("Wrote %d file(s) to %s", len(written), plan.output_dir)
    return written
