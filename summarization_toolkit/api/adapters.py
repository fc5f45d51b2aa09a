"""Request adapters: the backend-specific half of the summarization client.

WHY: Ollama and KoboldAI both take a prompt and return generated text,
but with different request bodies, default endpoints, and reply shapes.
Two near-identical clients would drift apart; one client with a small
adapter per backend keeps the HTTP handling in a single place.

HOW: RequestAdapter is an ABC with build_request() (prompt + params →
RequestSpec) and parse_response() (raw reply bytes → text). ADAPTERS
maps CLI backend names to adapter classes, the same way a format
registry maps names to formatter classes.

RULES:
- Prompts are stripped of surrounding whitespace before sending
- Extra params fill in keys the defaults lack; they never replace an
  existing scalar default (merge_params)
- parse_response raises SummarizationAPIError for unusable replies
- To add a backend: subclass RequestAdapter, register it in ADAPTERS
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from summarization_toolkit.api.models import (
    KoboldAIReply,
    OllamaReply,
    RequestSpec,
)
from summarization_toolkit.config import KOBOLDAI_URL, OLLAMA_MODEL, OLLAMA_URL
from summarization_toolkit.errors import ArgumentError, SummarizationAPIError

KOBOLDAI_DEFAULTS: dict[str, Any] = {
    "max_context_length": 512,
    "max_length": 100,
    "quiet": False,
    "rep_pen": 1.1,
    "rep_pen_range": 256,
    "rep_pen_slope": 1,
    "temperature": 0.5,
}


def merge_params(base: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """Merge extra request parameters into base, in place.

    RULES:
    - Keys missing from base are copied from extra
    - When both values are objects, they are merged recursively
    - Any other key already in base keeps its base value

    Returns:
        base, for chaining.
    """
    for key, value in extra.items():
        if key not in base:
            base[key] = copy.deepcopy(value)
        elif isinstance(base[key], dict) and isinstance(value, dict):
            merge_params(base[key], value)
    return base


class RequestAdapter(ABC):
    """Abstract base for inference backends."""

    default_url: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name, e.g. 'Ollama'."""

    @abstractmethod
    def default_body(self, prompt: str) -> dict[str, Any]:
        """Request body before extra params are merged in."""

    @abstractmethod
    def parse_response(self, payload: bytes) -> str:
        """Extract the generated text from a successful reply body."""

    def build_request(
        self,
        prompt: str,
        params: dict[str, Any] | None = None,
        url: str | None = None,
    ) -> RequestSpec:
        body = self.default_body(prompt.strip())
        if params:
            merge_params(body, params)
        return RequestSpec(url=url or self.default_url, body=body)


class OllamaAdapter(RequestAdapter):
    """Ollama /api/generate with streaming disabled."""

    default_url = OLLAMA_URL

    def __init__(self, model: str | None = None) -> None:
        self.model = model or OLLAMA_MODEL

    @property
    def name(self) -> str:
        return "Ollama"

    def default_body(self, prompt: str) -> dict[str, Any]:
        return {"model": self.model, "prompt": prompt, "stream": False}

    def parse_response(self, payload: bytes) -> str:
        try:
            reply = OllamaReply.model_validate_json(payload)
        except ValidationError as e:
            raise SummarizationAPIError(
                None, "No 'response' field found in JSON ({} error(s))".format(e.error_count())
            ) from e
        return reply.response


class KoboldAIAdapter(RequestAdapter):
    """KoboldAI /api/v1/generate with the sampler defaults the tools ship with."""

    default_url = KOBOLDAI_URL

    def __init__(self, model: str | None = None) -> None:
        # KoboldAI serves whatever model it was started with
        self.model = model

    @property
    def name(self) -> str:
        return "KoboldAI"

    def default_body(self, prompt: str) -> dict[str, Any]:
        body = dict(KOBOLDAI_DEFAULTS)
        body["prompt"] = prompt
        return body

    def parse_response(self, payload: bytes) -> str:
        try:
            reply = KoboldAIReply.model_validate_json(payload)
        except ValidationError as e:
            raise SummarizationAPIError(
                None, "No 'results' list found in JSON ({} error(s))".format(e.error_count())
            ) from e
        return "\n".join(result.text for result in reply.results)


ADAPTERS: dict[str, type[RequestAdapter]] = {
    "ollama": OllamaAdapter,
    "koboldai": KoboldAIAdapter,
}


def get_adapter(backend: str, model: str | None = None) -> RequestAdapter:
    """Instantiate the adapter registered under backend."""
    try:
        adapter_cls = ADAPTERS[backend]
    except KeyError:
        available = ", ".join(sorted(ADAPTERS))
        raise ArgumentError(
            f"Unknown backend '{backend}'. Available backends: {available}"
        ) from None
    return adapter_cls(model=model)
