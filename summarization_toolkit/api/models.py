"""Request, result, and backend reply models for the summarization client.

WHY: The client talks to two inference servers with different JSON
shapes. Typed models make both shapes explicit and turn a malformed reply
into a validation error instead of a KeyError deep in the client.

HOW: RequestSpec and SummaryResult are plain dataclasses passed between
the adapters, the client, and the CLI. The backend replies are pydantic
models; unknown fields are ignored so newer server versions still parse.

RULES:
- OllamaReply.response is required (non-streaming /api/generate reply)
- KoboldAIReply.results is required; each result carries a "text" string
- SummaryResult has exactly one of text / error set
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

JSON_HEADERS: Dict[str, str] = {
    "accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass
class RequestSpec:
    """Everything needed to send one generate request."""

    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))


@dataclass
class SummaryResult:
    """Outcome of summarizing one prompt file."""

    filename: str
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Backend replies
# ---------------------------------------------------------------------------


class OllamaReply(BaseModel):
    """Body of a non-streaming Ollama /api/generate reply."""

    model: Optional[str] = None
    response: str = Field(description="Generated text")
    done: Optional[bool] = None


class KoboldAIResult(BaseModel):
    text: str


class KoboldAIReply(BaseModel):
    """Body of a KoboldAI /api/v1/generate reply."""

    results: List[KoboldAIResult] = Field(description="Generated texts, usually one")
