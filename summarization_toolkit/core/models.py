"""Dataclasses for the transcript splitter.

WHY: The splitter is split into a pure planning step and a writing step.
The records passed between them (options, config, segments, artifacts,
plan) are plain dataclasses so each step can be tested on its own.

HOW: Five dataclasses:
  WrapConfig     — header/footer strings applied to every artifact
  SplitOptions   — the validated command-line options
  Segment        — one run of consecutive tokens
  OutputArtifact — one file to write (name + content)
  SplitPlan      — output directory plus every artifact for it

RULES:
- SplitOptions is built through SplitOptions.validate(), never by hand
  from raw CLI strings
- Segment indices are 1-based
- OutputArtifact.filename is a bare file name, never a path
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from summarization_toolkit.errors import ArgumentError


@dataclass(frozen=True)
class WrapConfig:
    """Header and footer wrapped around every emitted artifact.

    RULES:
    - Applied verbatim by concatenation, no interpolation
    """

    header: str
    footer: str


@dataclass(frozen=True)
class SplitOptions:
    """Validated inputs for one splitter run.

    WHY: Flags checked late let some work happen before a bad value is
    noticed. With everything validated up front, planning never sees a
    half-valid state.

    RULES:
    - input_path and config_path are always set
    - max_tokens is >= 1 in split mode and may be None in single-shot mode
    - output_dir None means "derive from the input stem" (see
      splitter.resolve_output_dir)
    """

    input_path: Path
    config_path: Path
    output_dir: Path | None = None
    max_tokens: int | None = None
    single_shot: bool = False

    @classmethod
    def validate(
        cls,
        input_path: str | Path | None,
        config_path: str | Path | None,
        output_dir: str | Path | None = None,
        max_tokens: int | str | None = None,
        single_shot: bool = False,
    ) -> SplitOptions:
        """Check raw option values and build a SplitOptions.

        Raises:
            ArgumentError: If a required option is missing or max_tokens
                is not a positive integer.
        """
        if not input_path:
            raise ArgumentError("Missing input file argument (-i)")
        if not config_path:
            raise ArgumentError("Missing config file argument (-c)")

        tokens: int | None = None
        if max_tokens is not None:
            try:
                tokens = int(max_tokens)
            except (TypeError, ValueError):
                raise ArgumentError(
                    f"Invalid value for max tokens per split: {max_tokens!r}"
                ) from None
            if tokens < 1:
                raise ArgumentError(
                    f"Max tokens per split must be at least 1, got {tokens}"
                )
        elif not single_shot:
            raise ArgumentError("Missing max tokens per split argument (-s)")

        return cls(
            input_path=Path(input_path),
            config_path=Path(config_path),
            output_dir=Path(output_dir) if output_dir else None,
            max_tokens=tokens,
            single_shot=single_shot,
        )


@dataclass
class Segment:
    """A contiguous run of tokens emitted as one part."""

    index: int
    tokens: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.tokens)


@dataclass
class OutputArtifact:
    """One output file: its name inside the output directory and its content."""

    filename: str
    content: str


@dataclass
class SplitPlan:
    """Everything a splitter run will write, computed before writing."""

    output_dir: Path
    artifacts: list[OutputArtifact] = field(default_factory=list)
