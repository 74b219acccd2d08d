"""Application search – SearchTransport port.

One coroutine per search engine operation the service uses; nothing is
dispatched dynamically. Implementations raise
:class:`~mp_search.kernel.errors.SearchTransportError` (or a subclass) when
the call fails and return the decoded response document otherwise.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SearchTransport(Protocol):
    async def search(
        self, index: str, document_type: str, body: dict[str, Any], scroll: str | None = None
    ) -> dict[str, Any]: ...

    async def index_document(
        self, index: str, document_type: str, body: dict[str, Any], id: str | None = None
    ) -> dict[str, Any]: ...

    async def get_document(self, index: str, document_type: str, id: str) -> dict[str, Any]: ...

    async def update_document(
        self, index: str, document_type: str, id: str, body: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def delete_document(self, index: str, document_type: str, id: str) -> dict[str, Any]: ...

    async def get_settings(self, index: str) -> dict[str, Any]: ...

    async def put_settings(self, index: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def get_mapping(self, index: str, document_type: str | None = None) -> dict[str, Any]: ...

    async def put_mapping(self, index: str, document_type: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def create_index(self, index: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def get_index(self, index: str) -> dict[str, Any]: ...

    async def delete_index(self, index: str) -> dict[str, Any]: ...


__all__ = ["SearchTransport"]
