"""Application search – SearchRequestBuilder, SearchRequest, ValidationReport."""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from mp_search.application.pagination import SearchAfterCursor, SortKey, SortOrder
from mp_search.application.search.dates import DateRange, DateRangeResolver, RangeToken
from mp_search.application.search.filters import CompiledFilter, Occurrence, QueryFilterCompiler
from mp_search.application.search.schema import FieldMapping, SchemaCatalog, TypeDefaults

logger = logging.getLogger(__name__)

# meta value of the ``src`` filter meaning "every source"
ALL_SOURCES = "all"


@dataclasses.dataclass(frozen=True)
class ValidationReport:
    """Which caller-supplied values were rejected and replaced by a default."""

    invalid_start: bool = False
    invalid_end: bool = False
    invalid_sort: bool = False
    invalid_order: bool = False
    invalid_size: bool = False

    @property
    def has_errors(self) -> bool:
        return any(self.as_dict().values())

    @property
    def rejected(self) -> tuple[str, ...]:
        return tuple(name for name, flagged in self.as_dict().items() if flagged)

    def as_dict(self) -> dict[str, bool]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True)
class SearchOverrides:
    """Caller-level defaults layered over the document type defaults."""

    sort: str | None = None
    order: SortOrder | str | None = None
    size: int | None = None


@dataclasses.dataclass(frozen=True)
class SearchRequest:
    """A validated search, ready to be rendered into a request body."""

    document_type: str
    index: str
    query: CompiledFilter
    sort: tuple[SortKey, ...]
    page_size: int
    time_filter_field: str
    timezone: str = "UTC"
    date_range: DateRange | None = None
    search_after: SearchAfterCursor | None = None
    validation: ValidationReport = dataclasses.field(default_factory=ValidationReport)
    applied: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def bool_query(self) -> CompiledFilter:
        """Compiled filters plus the date range as a ``must`` range clause."""
        if self.date_range is None or (self.date_range.start is None and self.date_range.end is None):
            return self.query
        return self.query.with_clause(
            Occurrence.MUST,
            self.date_range.to_range_clause(self.time_filter_field, self.timezone),
        )

    def to_body(self) -> dict[str, Any]:
        # ``from`` is disabled: deep paging goes through search_after
        body: dict[str, Any] = {
            "size": self.page_size,
            "from": -1,
            "sort": [key.to_clause() for key in self.sort],
        }
        if self.search_after is not None:
            body["search_after"] = self.search_after.as_list()
        bool_query = self.bool_query()
        if not bool_query.is_empty:
            body["query"] = {"bool": bool_query.to_bool()}
        return body


class SearchRequestBuilder:
    """Validate raw request parameters against the schema of a document type.

    Control parameters (``range``, ``start``, ``end``, ``sort``, ``order``,
    ``size``, ``search_after``) are read from the same raw mapping as the
    field filters; only keys declared in the mapping become filters.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        resolver: DateRangeResolver | None = None,
        compiler: QueryFilterCompiler | None = None,
    ) -> None:
        self._catalog = catalog
        self._resolver = resolver or DateRangeResolver()
        self._compiler = compiler or QueryFilterCompiler()

    def build(
        self,
        raw_query: Mapping[str, Any],
        overrides: SearchOverrides | None = None,
        document_type: str | None = None,
    ) -> tuple[SearchRequest, ValidationReport]:
        document_type = self._catalog.with_default_type(document_type)
        fields = self._catalog.fields_of(document_type)
        defaults = self._layer_defaults(self._catalog.defaults_of(document_type), overrides)

        filters = {key: raw_query[key] for key in fields if key in raw_query}
        if filters.get("src") == ALL_SOURCES:
            del filters["src"]
        query = self._compiler.compile(filters, fields)

        range_token = raw_query.get("range") or RangeToken.ALL_TIME.value
        date_range, invalid_start, invalid_end = self._resolve_range(
            range_token, raw_query.get("start"), raw_query.get("end")
        )

        sort_field, invalid_sort = self._resolve_sort(raw_query.get("sort", defaults.sort_field), fields, defaults)
        order, invalid_order = self._resolve_order(raw_query.get("order", defaults.sort_order), defaults)
        size, invalid_size = self._resolve_size(raw_query.get("size", defaults.page_size), defaults)

        sort_keys = [SortKey(sort_field, order)]
        if sort_field != defaults.tiebreaker_field:
            sort_keys.append(SortKey(defaults.tiebreaker_field, SortOrder.ASC))

        report = ValidationReport(
            invalid_start=invalid_start,
            invalid_end=invalid_end,
            invalid_sort=invalid_sort,
            invalid_order=invalid_order,
            invalid_size=invalid_size,
        )
        if report.has_errors:
            logger.info("search.params_replaced type=%s rejected=%s", document_type, ",".join(report.rejected))

        request = SearchRequest(
            document_type=document_type,
            index=defaults.index,
            query=query,
            sort=tuple(sort_keys),
            page_size=size,
            time_filter_field=defaults.time_filter_field,
            timezone=self._resolver.timezone,
            date_range=date_range,
            search_after=SearchAfterCursor.parse(raw_query.get("search_after")),
            validation=report,
            applied=self._applied(range_token, date_range, sort_field, order, size),
        )
        return request, report

    @staticmethod
    def _layer_defaults(defaults: TypeDefaults, overrides: SearchOverrides | None) -> TypeDefaults:
        # an unusable override keeps the type default, it never fails the request
        if overrides is None:
            return defaults
        changes: dict[str, Any] = {}
        if overrides.sort:
            changes["sort_field"] = overrides.sort
        if overrides.order is not None:
            try:
                changes["sort_order"] = SortOrder.parse(overrides.order)
            except ValueError:
                logger.warning("search.override_ignored name=order value=%r", overrides.order)
        if overrides.size is not None:
            if isinstance(overrides.size, int) and not isinstance(overrides.size, bool) and overrides.size >= 1:
                changes["page_size"] = overrides.size
            else:
                logger.warning("search.override_ignored name=size value=%r", overrides.size)
        return dataclasses.replace(defaults, **changes) if changes else defaults

    def _resolve_range(
        self, token: str, start: Any, end: Any
    ) -> tuple[DateRange | None, bool, bool]:
        if token == RangeToken.CUSTOM.value:
            resolution = self._resolver.parse_explicit(start, end)
            return resolution.range, resolution.invalid_start, resolution.invalid_end
        if token != RangeToken.ALL_TIME.value:
            return self._resolver.resolve_token(token), False, False
        return None, False, False

    def _resolve_sort(
        self, requested: Any, fields: Mapping[str, FieldMapping], defaults: TypeDefaults
    ) -> tuple[str, bool]:
        sort_field = requested
        invalid = False
        if not isinstance(requested, str) or requested not in fields:
            invalid = True
            sort_field = defaults.sort_field
            logger.debug("search.invalid_sort value=%r reason=unmapped", requested)

        mapping = fields.get(sort_field)
        if mapping is None or not mapping.is_text:
            return sort_field, invalid

        # text fields are not sortable, use their keyword sub-field instead
        sub_name = mapping.keyword_sub_field()
        if sub_name is not None:
            return f"{sort_field}.{sub_name}", False
        if sort_field == defaults.sort_field:
            logger.warning("search.unsortable_default_sort field=%s", sort_field)
            return sort_field, invalid
        return self._resolve_sort(defaults.sort_field, fields, defaults)[0], True

    @staticmethod
    def _resolve_order(requested: Any, defaults: TypeDefaults) -> tuple[SortOrder, bool]:
        try:
            return SortOrder.parse(requested), False
        except ValueError:
            logger.debug("search.invalid_order value=%r", requested)
            return defaults.sort_order, True

    @staticmethod
    def _resolve_size(requested: Any, defaults: TypeDefaults) -> tuple[int, bool]:
        try:
            size = requested if isinstance(requested, int) else int(str(requested).strip())
        except ValueError:
            size = 0
        if isinstance(size, bool) or size < 1:
            logger.debug("search.invalid_size value=%r", requested)
            return defaults.page_size, True
        return size, False

    def _applied(
        self,
        range_token: str,
        date_range: DateRange | None,
        sort_field: str,
        order: SortOrder,
        size: int,
    ) -> dict[str, Any]:
        applied: dict[str, Any] = {"range": range_token, "sort": sort_field, "order": order.value, "size": size}
        if date_range is not None:
            bounds = date_range.as_bounds("YYYY-MM-DD")
            if bounds["from"] is not None:
                applied["start"] = bounds["from"]
            if bounds["to"] is not None:
                applied["end"] = bounds["to"]
        return applied


__all__ = [
    "ALL_SOURCES",
    "SearchOverrides",
    "SearchRequest",
    "SearchRequestBuilder",
    "ValidationReport",
]
