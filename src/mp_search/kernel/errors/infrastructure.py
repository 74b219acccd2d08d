"""Infrastructure errors – failures of the outbound search engine call."""

from __future__ import annotations

from typing import Any

from mp_search.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O failure that is not caused by the request itself."""

    default_code = "infrastructure_error"


class SearchTransportError(InfrastructureError):
    """The call to the search engine failed."""

    default_code = "search_transport_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message or f"Search engine call '{operation}' failed",
            detail={"operation": operation, "status_code": status_code},
            **kwargs,
        )
        self.operation = operation
        self.status_code = status_code


class TransportConnectionError(SearchTransportError):
    """Could not reach the search engine."""

    default_code = "search_transport_connection_error"


class TransportTimeoutError(SearchTransportError):
    """The search engine did not answer in time."""

    default_code = "search_transport_timeout"


__all__ = [
    "InfrastructureError",
    "SearchTransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
]
