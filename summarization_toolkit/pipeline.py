"""End-to-end driver: subtitle file in, summary text file out.

WHY: The tools are useful on their own, but the common job is always the
same chain: convert subtitles, cut them into prompt-sized parts, summarize
each part, merge the part summaries, then summarize the merged text once
more for the final result. Running that chain by hand means juggling
temporary directories and intermediate file names.

HOW: run_pipeline() performs the chain inside a temporary work directory:
  1. srt → converted_subtitles.txt
  2. split into parts wrapped with the start config        (work/parts)
  3. summarize the parts → out.json, merge → subtitles_output.txt (work/final)
  4. single-shot wrap of the merged text with the final config
  5. summarize the single-shot prompt → {output_dir}/out.json
  6. merge → {output_dir}/output_{srt stem}.txt

RULES:
- The work directory is removed afterwards, also on failure
- Per-part request failures are reported and skipped (as in summarize)
- Config errors surface before any request is sent
- Only out.json and output_{stem}.txt are left in output_dir
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from summarization_toolkit.api.adapters import get_adapter
from summarization_toolkit.api.client import (
    SummarizationClient,
    summarize_directory,
    write_summary_map,
)
from summarization_toolkit.config import DEFAULT_BACKEND, DEFAULT_MAX_TOKENS, load_wrap_config
from summarization_toolkit.core.merger import merge_file
from summarization_toolkit.core.models import SplitOptions
from summarization_toolkit.core.splitter import run_split
from summarization_toolkit.core.subtitles import convert_srt_file

logger = logging.getLogger(__name__)

CONVERTED_NAME = "converted_subtitles.txt"
MERGED_NAME = "subtitles_output.txt"
SUMMARY_MAP_NAME = "out.json"


@dataclass
class PipelineOptions:
    """Inputs for one pipeline run."""

    srt_path: Path
    start_config: Path
    final_config: Path
    output_dir: Path = field(default_factory=Path.cwd)
    max_tokens: int = DEFAULT_MAX_TOKENS
    backend: str = DEFAULT_BACKEND
    url: str | None = None
    model: str | None = None
    params: dict[str, Any] | None = None
    show_progress: bool = False


async def run_pipeline(
    options: PipelineOptions,
    on_status: Callable[[str], None] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Path:
    """Run the full subtitle → summary chain.

    Args:
        options: Pipeline inputs.
        on_status: Optional callback for progress messages.
        transport: httpx transport override, for tests.

    Returns:
        Path of the final summary text file.
    """

    def status(msg: str) -> None:
        logger.info(msg)
        if on_status:
            on_status(msg)

    started = time.monotonic()

    # Fail on bad configs before doing any work
    load_wrap_config(options.start_config)
    load_wrap_config(options.final_config)
    adapter = get_adapter(options.backend, options.model)

    output_dir = Path(options.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    final_path = output_dir / "output_{}.txt".format(Path(options.srt_path).stem)

    work_dir = Path(tempfile.mkdtemp(prefix="summarization_"))
    parts_dir = work_dir / "parts"
    final_dir = work_dir / "final"
    try:
        converted = work_dir / CONVERTED_NAME
        cues = convert_srt_file(options.srt_path, converted)
        status("Converted {} subtitle cue(s)".format(cues))

        parts = run_split(
            SplitOptions.validate(
                input_path=converted,
                config_path=options.start_config,
                output_dir=parts_dir,
                max_tokens=options.max_tokens,
            )
        )
        status("Split transcript into {} part(s)".format(len(parts)))
        final_dir.mkdir(parents=True, exist_ok=True)

        async with SummarizationClient(
            adapter,
            url=options.url,
            params=options.params,
            transport=transport,
        ) as client:
            status("Summarizing parts with {}...".format(adapter.name))
            results = await summarize_directory(
                client, parts_dir, on_status=on_status, show_progress=options.show_progress
            )
            write_summary_map(results, final_dir / SUMMARY_MAP_NAME)

            merged = final_dir / MERGED_NAME
            merge_file(final_dir / SUMMARY_MAP_NAME, merged)
            run_split(
                SplitOptions.validate(
                    input_path=merged,
                    config_path=options.final_config,
                    output_dir=final_dir,
                    single_shot=True,
                )
            )
            merged.unlink()

            status("Summarizing merged summaries...")
            results = await summarize_directory(
                client, final_dir, on_status=on_status, show_progress=options.show_progress
            )
            write_summary_map(results, output_dir / SUMMARY_MAP_NAME)

        merge_file(output_dir / SUMMARY_MAP_NAME, final_path)
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)

    elapsed = int(time.monotonic() - started)
    status("Execution time: {}h {}m {}s".format(elapsed // 3600, (elapsed % 3600) // 60, elapsed % 60))
    return final_path
