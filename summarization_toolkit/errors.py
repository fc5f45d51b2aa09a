"""Typed exceptions shared by the toolkit's tools.

WHY: The CLI reports every failure as a one-line diagnostic and a
non-zero exit status. Typed exceptions let it tell a bad flag from a bad
config file from a failed HTTP call without string matching.

HOW: ArgumentError and ConfigError subclass ValueError (they describe bad
input). SummarizationAPIError carries the HTTP status code when there is
one. Plain I/O failures are left as the builtin OSError.

RULES:
- Messages name the offending flag, path, or URL
- Raised where the failure is detected, caught only in cli.main()
"""

from __future__ import annotations


class ArgumentError(ValueError):
    """Raised when a required input is missing or a flag value is invalid."""


class ConfigError(ValueError):
    """Raised when a configuration resource is unreadable or malformed.

    RULES:
    - Message includes the path of the resource
    - Never replaced by defaults: a broken config aborts the run
    """


class SummarizationAPIError(Exception):
    """Raised when the inference server rejects a request or answers garbage.

    WHY: Callers need to distinguish server-side failures from network
    errors (httpx.HTTPError) so they can report them per file.

    HOW: Wraps the HTTP status code (None when the status was fine but the
    body could not be used) and a message.
    """

    def __init__(self, status_code: int | None, message: str) -> None:
        self.status_code = status_code
        self.message = message
        if status_code is None:
            super().__init__(f"Invalid response: {message}")
        else:
            super().__init__(f"Request failed with status {status_code}: {message}")
