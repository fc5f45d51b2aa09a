"""Command-line interface for the Summarization Toolkit.

WHY: Each tool is run from shell scripts and by hand. One entry point with
a subcommand per tool keeps flags consistent and gives every tool the same
error reporting and exit codes.

HOW: argparse with subparsers (split, summarize, merge, srt, pipeline).
Each subcommand handler turns the parsed namespace into validated options,
calls the core or api layer, and reports status on stderr. Async tools
run through asyncio.run(). main() maps the toolkit's exceptions to a
one-line "Error: ..." message and exit status 1.

RULES:
- Usage errors (unknown flag, missing subcommand) exit 2 via argparse
- ArgumentError, ConfigError, SummarizationAPIError, OSError → exit 1
- Ctrl-C → exit 130
- Status output goes to stderr (not stdout)
- split: -s is required unless --single-shot is given
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from summarization_toolkit import __version__
from summarization_toolkit.api.adapters import ADAPTERS, get_adapter
from summarization_toolkit.api.client import (
    SummarizationClient,
    summarize_directory,
    write_summary_map,
)
from summarization_toolkit.config import (
    DEFAULT_BACKEND,
    DEFAULT_MAX_TOKENS,
    DEFAULT_SRT_OUTPUT,
    LOG_LEVEL,
    load_params,
)
from summarization_toolkit.core.merger import merge_file
from summarization_toolkit.core.models import SplitOptions
from summarization_toolkit.core.splitter import run_split
from summarization_toolkit.core.subtitles import convert_srt_file
from summarization_toolkit.errors import ArgumentError, ConfigError, SummarizationAPIError
from summarization_toolkit.pipeline import PipelineOptions, run_pipeline

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


def _cmd_split(args: argparse.Namespace) -> None:
    options = SplitOptions.validate(
        input_path=args.input,
        config_path=args.config,
        output_dir=args.output_dir,
        max_tokens=args.max_tokens,
        single_shot=args.single_shot,
    )
    written = run_split(options)
    if written:
        _status("Wrote {} file(s) to {}".format(len(written), written[0].parent))
    else:
        _status("No text to split; nothing written.")


async def _summarize(args: argparse.Namespace) -> None:
    directory = Path(args.dir)
    if not directory.is_dir():
        raise ArgumentError("Directory not found: {}".format(directory))

    params = load_params(args.params) if args.params else None
    adapter = get_adapter(args.backend, args.model)

    async with SummarizationClient(adapter, url=args.url, params=params) as client:
        _status("Sending prompts from {} to {}...".format(directory, adapter.name))
        results = await summarize_directory(
            client, directory, on_status=_status, show_progress=True
        )

    written = write_summary_map(results, args.output)
    failed = sum(1 for r in results if not r.ok)
    _status("All files processed: {} summarized, {} failed.".format(written, failed))


def _cmd_summarize(args: argparse.Namespace) -> None:
    asyncio.run(_summarize(args))


def _cmd_merge(args: argparse.Namespace) -> None:
    count = merge_file(args.json_file, args.output_file)
    _status("Merged {} text(s) into {}".format(count, args.output_file))


def _cmd_srt(args: argparse.Namespace) -> None:
    count = convert_srt_file(args.srt_file, args.output)
    _status("Subtitles converted successfully ({} cues → {}).".format(count, args.output))


def _cmd_pipeline(args: argparse.Namespace) -> None:
    if args.max_tokens < 1:
        raise ArgumentError("Max tokens per split must be at least 1, got {}".format(args.max_tokens))
    options = PipelineOptions(
        srt_path=Path(args.srt_file),
        start_config=Path(args.start_config),
        final_config=Path(args.final_config),
        output_dir=Path(args.output_dir),
        max_tokens=args.max_tokens,
        backend=args.backend,
        url=args.url,
        model=args.model,
        params=load_params(args.params) if args.params else None,
        show_progress=True,
    )
    final_path = asyncio.run(run_pipeline(options, on_status=_status))
    _status("Done! Summary saved to {}".format(final_path))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_backend_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-b", "--backend",
        choices=sorted(ADAPTERS),
        default=DEFAULT_BACKEND,
        help="Inference backend (default: %(default)s).",
    )
    parser.add_argument(
        "-u", "--url",
        default=None,
        help="Generate endpoint URL (default: the backend's local endpoint).",
    )
    parser.add_argument(
        "-m", "--model",
        default=None,
        help="Model name sent to Ollama (ignored by KoboldAI).",
    )
    parser.add_argument(
        "-p", "--params",
        default=None,
        help="JSON file with extra request parameters (fills in missing keys).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for all subcommands.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running a tool.
    """
    parser = argparse.ArgumentParser(
        prog="summarization-toolkit",
        description="Split transcripts, summarize them with a local LLM, "
                    "and merge the results.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log more detail (-v info, -vv debug).",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    split = subparsers.add_parser(
        "split",
        help="Split a transcript into token-bounded parts wrapped with a header and footer.",
    )
    split.add_argument("-i", "--input", default=None, help="Input transcript file.")
    split.add_argument(
        "-o", "--output-dir",
        default=None,
        help="Output directory (default: ./{stem}_splits).",
    )
    split.add_argument(
        "-s", "--max-tokens",
        default=None,
        help="Maximum tokens (words) per part. Required unless --single-shot.",
    )
    split.add_argument(
        "-c", "--config",
        default=None,
        help='JSON file with "header" and "footer" strings.',
    )
    split.add_argument(
        "--single-shot",
        action="store_true",
        help="Wrap the whole file unchanged into one output file.",
    )
    split.set_defaults(handler=_cmd_split)

    summarize = subparsers.add_parser(
        "summarize",
        help="Send every .txt file in a directory to the model and save the replies as JSON.",
    )
    summarize.add_argument("-d", "--dir", required=True, help="Directory of prompt files.")
    summarize.add_argument("-o", "--output", required=True, help="Output JSON file.")
    _add_backend_arguments(summarize)
    summarize.set_defaults(handler=_cmd_summarize)

    merge = subparsers.add_parser(
        "merge",
        help="Merge the texts of a summary JSON file into one text file.",
    )
    merge.add_argument("json_file", help="Summary JSON file.")
    merge.add_argument("output_file", help="Output text file.")
    merge.set_defaults(handler=_cmd_merge)

    srt = subparsers.add_parser(
        "srt",
        help="Convert an .srt subtitle file into annotated transcript text.",
    )
    srt.add_argument("srt_file", help="Subtitle file.")
    srt.add_argument(
        "-o", "--output",
        default=DEFAULT_SRT_OUTPUT,
        help="Output text file (default: %(default)s).",
    )
    srt.set_defaults(handler=_cmd_srt)

    pipeline = subparsers.add_parser(
        "pipeline",
        help="Run srt → split → summarize → merge → final summary in one go.",
    )
    pipeline.add_argument("srt_file", help="Subtitle file.")
    pipeline.add_argument(
        "--start-config", required=True,
        help="Header/footer config for the per-part prompts.",
    )
    pipeline.add_argument(
        "--final-config", required=True,
        help="Header/footer config for the final prompt.",
    )
    pipeline.add_argument(
        "-s", "--max-tokens",
        type=int,
        default=DEFAULT_MAX_TOKENS,
        help="Maximum tokens per part (default: %(default)s).",
    )
    pipeline.add_argument(
        "--output-dir",
        default=".",
        help="Directory for out.json and the final summary (default: current directory).",
    )
    _add_backend_arguments(pipeline)
    pipeline.set_defaults(handler=_cmd_pipeline)

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        args.handler(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (ArgumentError, ConfigError, SummarizationAPIError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        logger.debug("I/O failure", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
