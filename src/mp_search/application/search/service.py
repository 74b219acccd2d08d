"""Application search – SearchService.

Glues request building, aggregation descriptors and the transport port
together. Omitted ``index``/``document_type`` arguments are filled from the
schema catalog defaults.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any, TypeVar

from mp_search.application.pagination import SearchPage, total_hits
from mp_search.application.search.aggregations import AggregationDescriptor, extract_all, serialize_all
from mp_search.application.search.dates import DateRange, DateRangeResolver
from mp_search.application.search.filters import CompiledFilter, Occurrence, QueryFilterCompiler
from mp_search.application.search.request import (
    SearchOverrides,
    SearchRequest,
    SearchRequestBuilder,
    ValidationReport,
)
from mp_search.application.search.schema import SchemaCatalog
from mp_search.application.search.transport import SearchTransport
from mp_search.config.settings import SearchSettings
from mp_search.kernel.errors import SearchTransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class DailyAggregation:
    """Aggregation values for one daily bucket (``None`` when the call was suppressed)."""

    bucket: DateRange
    values: dict[str, Any] | None


class SearchService:
    """Execute validated searches and aggregations through a :class:`SearchTransport`."""

    def __init__(
        self,
        transport: SearchTransport,
        catalog: SchemaCatalog,
        settings: SearchSettings | None = None,
        resolver: DateRangeResolver | None = None,
        compiler: QueryFilterCompiler | None = None,
    ) -> None:
        self._transport = transport
        self._catalog = catalog
        self._settings = settings or SearchSettings()
        self._resolver = resolver or DateRangeResolver(timezone=self._settings.timezone)
        self._compiler = compiler or QueryFilterCompiler()
        self._builder = SearchRequestBuilder(catalog, self._resolver, self._compiler)

    @property
    def resolver(self) -> DateRangeResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Searching
    # ------------------------------------------------------------------

    def build_request(
        self,
        raw_query: Mapping[str, Any],
        overrides: SearchOverrides | None = None,
        document_type: str | None = None,
    ) -> tuple[SearchRequest, ValidationReport]:
        return self._builder.build(raw_query, overrides, document_type)

    async def search(self, request: SearchRequest, *, scroll: str | None = None) -> dict[str, Any] | None:
        """Run *request*; ``None`` if the call failed and failures are suppressed."""
        return await self._guard(
            "search",
            self._transport.search(request.index, request.document_type, request.to_body(), scroll),
        )

    async def search_page(
        self,
        raw_query: Mapping[str, Any],
        overrides: SearchOverrides | None = None,
        document_type: str | None = None,
    ) -> tuple[SearchPage, ValidationReport]:
        """Build, run and decode one page of hits from raw request parameters."""
        request, report = self.build_request(raw_query, overrides, document_type)
        response = await self.search(request)
        return SearchPage.from_response(response, request.page_size), report

    async def count(
        self,
        query: Mapping[str, Any] | None = None,
        date_range: DateRange | None = None,
        *,
        document_type: str | None = None,
        index: str | None = None,
    ) -> int:
        document_type, index = self._target(document_type, index)
        body: dict[str, Any] = {"size": 0, "track_total_hits": True}
        self._attach_query(body, query, date_range, document_type)
        response = await self._guard("count", self._transport.search(index, document_type, body))
        return total_hits(response)

    # ------------------------------------------------------------------
    # Aggregations
    # ------------------------------------------------------------------

    async def aggregate(
        self,
        descriptors: Sequence[AggregationDescriptor],
        query: Mapping[str, Any] | None = None,
        *,
        date_range: DateRange | None = None,
        options: Mapping[str, Any] | None = None,
        document_type: str | None = None,
        index: str | None = None,
    ) -> dict[str, Any] | None:
        """Run *descriptors* in one hit-less search and return ``{name: value}``.

        *query* is compiled with the same filter rules as a normal search.
        """
        document_type, index = self._target(document_type, index)
        known = self._catalog.defaults_of(document_type).aggregation_names
        unknown = [d.name for d in descriptors if known and d.name not in known]
        if unknown:
            logger.warning("search.unknown_aggregation_names type=%s names=%s", document_type, ",".join(unknown))

        body: dict[str, Any] = {"size": 0, "aggs": serialize_all(descriptors), **(options or {})}
        self._attach_query(body, query, date_range, document_type)
        response = await self._guard("aggregate", self._transport.search(index, document_type, body))
        if response is None:
            return None
        return extract_all(descriptors, response)

    async def aggregate_daily(
        self,
        descriptors: Sequence[AggregationDescriptor],
        date_range: DateRange,
        query: Mapping[str, Any] | None = None,
        *,
        document_type: str | None = None,
        index: str | None = None,
    ) -> list[DailyAggregation]:
        """One aggregation per daily bucket of *date_range*, issued concurrently.

        Results are returned in bucket order whatever order the calls finish in.
        """
        buckets = self._resolver.expand_to_daily_buckets(date_range)
        results = await asyncio.gather(
            *(
                self.aggregate(
                    descriptors, query, date_range=bucket, document_type=document_type, index=index
                )
                for bucket in buckets
            )
        )
        return [DailyAggregation(bucket, values) for bucket, values in zip(buckets, results)]

    # ------------------------------------------------------------------
    # Documents (pass-through)
    # ------------------------------------------------------------------

    async def index_document(
        self,
        body: dict[str, Any],
        *,
        id: str | None = None,
        document_type: str | None = None,
        index: str | None = None,
    ) -> dict[str, Any]:
        document_type, index = self._target(document_type, index)
        return await self._transport.index_document(index, document_type, body, id)

    async def get_document(
        self, id: str, *, document_type: str | None = None, index: str | None = None
    ) -> dict[str, Any]:
        document_type, index = self._target(document_type, index)
        return await self._transport.get_document(index, document_type, id)

    async def update_document(
        self,
        fields: dict[str, Any],
        id: str,
        *,
        document_type: str | None = None,
        index: str | None = None,
    ) -> dict[str, Any]:
        document_type, index = self._target(document_type, index)
        return await self._transport.update_document(index, document_type, id, {"doc": fields})

    async def delete_document(
        self, id: str, *, document_type: str | None = None, index: str | None = None
    ) -> dict[str, Any]:
        document_type, index = self._target(document_type, index)
        return await self._transport.delete_document(index, document_type, id)

    # ------------------------------------------------------------------
    # Index lifecycle (pass-through)
    # ------------------------------------------------------------------

    async def get_settings(self, index: str | None = None) -> dict[str, Any]:
        return await self._transport.get_settings(self._catalog.with_default_index(index))

    async def update_settings(self, settings: dict[str, Any], index: str | None = None) -> dict[str, Any]:
        index = self._catalog.with_default_index(index)
        return await self._transport.put_settings(index, {"settings": settings})

    async def get_mapping(self, index: str | None = None, document_type: str | None = None) -> dict[str, Any]:
        document_type, index = self._target(document_type, index)
        return await self._transport.get_mapping(index, document_type)

    async def update_mapping(
        self,
        properties: dict[str, Any],
        *,
        document_type: str | None = None,
        index: str | None = None,
    ) -> dict[str, Any]:
        document_type, index = self._target(document_type, index)
        body = {"_source": {"enabled": True}, "properties": properties}
        return await self._transport.put_mapping(index, document_type, body)

    async def create_index(
        self,
        mappings: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
        index: str | None = None,
        *,
        reset: bool = False,
    ) -> dict[str, Any]:
        """Create the index from the catalog mapping and settings unless given.

        With ``reset=True`` the existing index is deleted first.
        """
        document_type = self._catalog.with_default_type()
        index = self._catalog.with_default_index(index, document_type)
        if reset:
            await self._transport.delete_index(index)
            logger.warning("search.index_deleted index=%s", index)
        body = {
            "settings": settings if settings is not None else dict(self._catalog.index_settings),
            "mappings": mappings if mappings is not None else dict(self._catalog.mapping_body(document_type)),
        }
        response = await self._transport.create_index(index, body)
        logger.info("search.index_created index=%s reset=%s", index, reset)
        return response

    async def get_index(self, index: str | None = None) -> dict[str, Any]:
        return await self._transport.get_index(self._catalog.with_default_index(index))

    async def delete_index(self, index: str | None = None) -> dict[str, Any]:
        return await self._transport.delete_index(self._catalog.with_default_index(index))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _target(self, document_type: str | None, index: str | None) -> tuple[str, str]:
        document_type = self._catalog.with_default_type(document_type)
        return document_type, self._catalog.with_default_index(index, document_type)

    def _attach_query(
        self,
        body: dict[str, Any],
        query: Mapping[str, Any] | None,
        date_range: DateRange | None,
        document_type: str,
    ) -> None:
        compiled = self._compiler.compile(query or {}, self._catalog.fields_of(document_type))
        if date_range is not None:
            defaults = self._catalog.defaults_of(document_type)
            compiled = compiled.with_clause(
                Occurrence.MUST,
                date_range.to_range_clause(defaults.time_filter_field, self._resolver.timezone),
            )
        if not compiled.is_empty:
            existing = CompiledFilter.from_bool(body.get("query", {}).get("bool", {}))
            body["query"] = {"bool": existing.merge(compiled).to_bool()}

    async def _guard(self, operation: str, call: Awaitable[T]) -> T | None:
        try:
            return await call
        except SearchTransportError:
            if not self._settings.suppress_transport_errors:
                raise
            logger.exception("search.transport_failed operation=%s", operation)
            return None


__all__ = ["DailyAggregation", "SearchService"]
