"""Exceptions raised by the Chipotle service client and its post-processing."""

from typing import List, Optional


class ChipotleError(RuntimeError):
    """Base class for failures talking to or interpreting the Chipotle services."""


class NetworkError(ChipotleError):
    """Raised when the request never produced a response (DNS, connect, timeout)."""


class UpstreamError(ChipotleError):
    """Raised when a Chipotle service answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str, url: Optional[str] = None) -> None:
        super().__init__(f"{url or 'request'} failed with status code {status_code}")
        self.status_code = status_code
        self.body = body
        self.url = url


class DecodeError(ChipotleError):
    """Raised when a response body is not JSON or lacks the expected shape."""


class ApiKeyNotFoundError(ChipotleError):
    """Raised when the web bundle does not contain a subscription key."""


class MenuSummaryError(ChipotleError):
    def __init__(self, missing: List[str]) -> None:
        super().__init__(f"menu is missing required fields: {', '.join(missing)}")
        self.missing = missing


class StorageError(ChipotleError):
    """Raised when a JSON snapshot cannot be read from disk."""
