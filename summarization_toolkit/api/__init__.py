"""Summarization client package — HTTP interface to local LLM servers.

WHY: The summarize step needs to send prompt files to Ollama or KoboldAI
and collect the generated text. This package keeps all HTTP in one place.

HOW: client.py holds the httpx-based SummarizationClient, adapters.py the
per-backend request/reply handling, models.py the typed request, result,
and reply structures.

RULES:
- All HTTP calls go through SummarizationClient (no direct httpx elsewhere)
- Backend selection is by name through adapters.ADAPTERS
"""

from summarization_toolkit.api.adapters import ADAPTERS, RequestAdapter, get_adapter
from summarization_toolkit.api.client import SummarizationClient, summarize_directory
from summarization_toolkit.api.models import RequestSpec, SummaryResult

__all__ = [
    "ADAPTERS",
    "RequestAdapter",
    "RequestSpec",
    "SummarizationClient",
    "SummaryResult",
    "get_adapter",
    "summarize_directory",
]
