"""Elasticsearch adapter – ElasticsearchTransport."""
from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

from mp_search.adapters.elasticsearch import client as client_mod
from mp_search.config.settings import SearchSettings, SettingsFactory
from mp_search.kernel.errors import (
    SearchTransportError,
    TransportConnectionError,
    TransportTimeoutError,
)

logger = logging.getLogger(__name__)


def _body(response: Any) -> dict[str, Any]:
    return getattr(response, "body", response)


# request body keys that are Python keywords or private names in the 8.x client
_RENAMED_KEYS = {"from": "from_", "_source": "source"}


def _keywords(body: dict[str, Any]) -> dict[str, Any]:
    return {_RENAMED_KEYS.get(key, key): value for key, value in body.items()}


class ElasticsearchTransport:
    """:class:`~mp_search.application.search.SearchTransport` over ``AsyncElasticsearch``.

    Elasticsearch 8 has no mapping types; ``document_type`` is accepted for
    the port contract and otherwise ignored.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: SearchSettings | None = None, **kwargs: Any) -> "ElasticsearchTransport":
        """Build the client from *settings*, or from ``ELASTICSEARCH_*`` variables when omitted."""
        if settings is None:
            settings = SettingsFactory.from_environment(SearchSettings)
        return cls(client_mod.build_client(settings, **kwargs))

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "ElasticsearchTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Search & documents
    # ------------------------------------------------------------------

    async def search(
        self, index: str, document_type: str, body: dict[str, Any], scroll: str | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"index": index, **_keywords(body)}
        if scroll is not None:
            params["scroll"] = scroll
        logger.debug("elasticsearch.search index=%s", index)
        return await self._call("search", self._client.search(**params))

    async def index_document(
        self, index: str, document_type: str, body: dict[str, Any], id: str | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"index": index, "document": body}
        if id is not None:
            params["id"] = id
        return await self._call("index", self._client.index(**params))

    async def get_document(self, index: str, document_type: str, id: str) -> dict[str, Any]:
        return await self._call("get", self._client.get(index=index, id=id))

    async def update_document(
        self, index: str, document_type: str, id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._call("update", self._client.update(index=index, id=id, **_keywords(body)))

    async def delete_document(self, index: str, document_type: str, id: str) -> dict[str, Any]:
        return await self._call("delete", self._client.delete(index=index, id=id))

    # ------------------------------------------------------------------
    # Indices
    # ------------------------------------------------------------------

    async def get_settings(self, index: str) -> dict[str, Any]:
        return await self._call("indices.get_settings", self._client.indices.get_settings(index=index))

    async def put_settings(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        settings = body.get("settings", body)
        return await self._call(
            "indices.put_settings", self._client.indices.put_settings(index=index, settings=settings)
        )

    async def get_mapping(self, index: str, document_type: str | None = None) -> dict[str, Any]:
        return await self._call("indices.get_mapping", self._client.indices.get_mapping(index=index))

    async def put_mapping(self, index: str, document_type: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call(
            "indices.put_mapping", self._client.indices.put_mapping(index=index, **_keywords(body))
        )

    async def create_index(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._call(
            "indices.create",
            self._client.indices.create(
                index=index,
                settings=body.get("settings") or None,
                mappings=body.get("mappings") or None,
            ),
        )

    async def get_index(self, index: str) -> dict[str, Any]:
        return await self._call("indices.get", self._client.indices.get(index=index))

    async def delete_index(self, index: str) -> dict[str, Any]:
        return await self._call("indices.delete", self._client.indices.delete(index=index))

    # ------------------------------------------------------------------

    async def _call(self, operation: str, call: Awaitable[Any]) -> dict[str, Any]:
        es = client_mod._require_elasticsearch()
        try:
            response = await call
        except es.ConnectionTimeout as exc:
            raise TransportTimeoutError(operation, f"Elasticsearch '{operation}' timed out", cause=exc) from exc
        except es.ConnectionError as exc:
            raise TransportConnectionError(
                operation, f"Could not reach Elasticsearch for '{operation}'", cause=exc
            ) from exc
        except es.ApiError as exc:
            status = getattr(getattr(exc, "meta", None), "status", None)
            raise SearchTransportError(
                operation,
                f"Elasticsearch '{operation}' failed with HTTP {status}",
                status_code=status,
                cause=exc,
            ) from exc
        except es.TransportError as exc:
            raise SearchTransportError(operation, str(exc), cause=exc) from exc
        return _body(response)


__all__ = ["ElasticsearchTransport"]
