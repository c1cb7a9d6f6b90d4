"""Exception classes for remote service failures."""

from typing import Any, Optional


class ServiceError(Exception):
    """Raised when the remote service answers with a non-2xx status.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code, or 0 when the request never completed.
        data: Parsed JSON body or raw text returned by the service.
    """

    def __init__(
        self,
        message: str = "Request failed",
        status_code: int = 0,
        data: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"ServiceError(status_code={self.status_code}, message={self.message!r})"
