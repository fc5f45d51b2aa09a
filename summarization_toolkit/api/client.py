"""Async HTTP client for local LLM inference servers.

WHY: The summarize step sends every prompt file in a directory to a local
model and collects the replies. This module hides the HTTP details behind
one client class so the CLI and the pipeline driver only deal with
prompts and texts.

HOW: SummarizationClient wraps httpx.AsyncClient and delegates the
backend-specific body and reply handling to a RequestAdapter. Enter it as
an async context manager, then await summarize(prompt) per prompt.
summarize_directory() walks a directory's .txt files one at a time,
showing a tqdm progress bar, and write_summary_map() stores the replies
as a JSON map keyed by file name.

RULES:
- Always use the async context manager (async with SummarizationClient(...))
- Requests are sent one after another, never concurrently
- Non-2xx replies raise SummarizationAPIError with the status code
- In summarize_directory a failing file is recorded and skipped; the rest
  of the directory is still processed
- Only regular files ending in ".txt" are sent, in file-name order
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
from tqdm import tqdm

from summarization_toolkit.api.adapters import RequestAdapter
from summarization_toolkit.api.models import SummaryResult
from summarization_toolkit.config import REQUEST_TIMEOUT_S
from summarization_toolkit.errors import ArgumentError, SummarizationAPIError

logger = logging.getLogger(__name__)

PROMPT_SUFFIX = ".txt"


class SummarizationClient:
    """Async client sending prompts to one inference backend.

    WHY: Both backends share the same transport concerns (timeouts,
    headers, status handling); only the body and the reply differ.

    HOW: Holds an adapter, an optional URL override, and optional extra
    params merged into every request body.

    RULES:
    - url defaults to the adapter's default_url
    - transport is for tests (httpx.MockTransport); None uses the network
    """

    def __init__(
        self,
        adapter: RequestAdapter,
        url: str | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.adapter = adapter
        self.url = url
        self.params = params
        self._timeout = timeout if timeout is not None else REQUEST_TIMEOUT_S
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> SummarizationClient:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "SummarizationClient must be used as an async context manager: "
                "async with SummarizationClient(adapter) as client: ..."
            )
        return self._client

    async def summarize(self, prompt: str) -> str:
        """Send one prompt and return the generated text.

        Raises:
            SummarizationAPIError: Non-2xx status or unusable reply body.
            httpx.HTTPError: Connection failures and timeouts.
        """
        client = self._ensure_client()
        spec = self.adapter.build_request(prompt, self.params, self.url)
        logger.debug("POST %s (%d prompt chars)", spec.url, len(prompt))

        resp = await client.post(spec.url, json=spec.body, headers=spec.headers)
        if not resp.is_success:
            raise SummarizationAPIError(resp.status_code, resp.text)

        return self.adapter.parse_response(resp.content)


def list_prompt_files(directory: str | Path) -> list[Path]:
    """Return the .txt files directly inside directory, sorted by name."""
    return sorted(
        (p for p in Path(directory).iterdir() if p.is_file() and p.suffix == PROMPT_SUFFIX),
        key=lambda p: p.name,
    )


async def summarize_directory(
    client: SummarizationClient,
    directory: str | Path,
    on_status: Callable[[str], None] | None = None,
    show_progress: bool = False,
) -> list[SummaryResult]:
    """Summarize every prompt file in a directory, one request at a time.

    WHY: A long transcript is split into dozens of parts. One unreachable
    model call should not throw away the summaries already received.

    HOW: Reads each file as UTF-8, awaits client.summarize(), and records
    a SummaryResult. Request failures become a result with error set.

    RULES:
    - SummarizationAPIError and httpx.HTTPError are recorded, not raised
    - OSError reading a prompt file propagates (the directory is broken)
    - A prompt file that is not valid UTF-8 raises ArgumentError
    - on_status receives "Error processing <name>: <reason>" per failure

    Args:
        client: An entered SummarizationClient.
        directory: Directory containing the prompt files.
        on_status: Optional callback for per-file error messages.
        show_progress: Draw a tqdm progress bar on stderr.

    Returns:
        One SummaryResult per prompt file, in file-name order.
    """
    files = list_prompt_files(directory)
    results: list[SummaryResult] = []

    for path in tqdm(files, disable=not show_progress, file=sys.stderr, unit="file"):
        try:
            prompt = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ArgumentError(f"Cannot read '{path}': not valid UTF-8 (byte {e.start})") from e
        try:
            text = await client.summarize(prompt)
        except (SummarizationAPIError, httpx.HTTPError) as e:
            logger.warning("Request for %s failed: %s", path.name, e)
            if on_status:
                on_status("Error processing {}: {}".format(path.name, e))
            results.append(SummaryResult(filename=path.name, error=str(e)))
            continue
        results.append(SummaryResult(filename=path.name, text=text))

    return results


def write_summary_map(results: list[SummaryResult], output_path: str | Path) -> int:
    """Write successful results as a pretty-printed {filename: text} JSON map.

    Returns:
        Number of entries written.
    """
    summary_map = {r.filename: r.text for r in results if r.ok}
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(summary_map, f, ensure_ascii=False, indent=2)
    return len(summary_map)
