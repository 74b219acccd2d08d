"""Unit tests for SearchRequestBuilder and the rendered request body."""
from __future__ import annotations

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mp_search.application.pagination import SearchAfterCursor, SortKey, SortOrder
from mp_search.application.search import (
    DateRangeResolver,
    SchemaCatalog,
    SearchOverrides,
    SearchRequestBuilder,
    ValidationReport,
)
from mp_search.kernel.errors import UnknownDocumentTypeError
from mp_search.testing.fakes import FakeClock


def _catalog(**defaults: object) -> SchemaCatalog:
    return SchemaCatalog.from_config(
        {
            "mappings": {
                "log": {
                    "properties": {
                        "status": {"type": "keyword"},
                        "src": {"type": "keyword"},
                        "message": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
                        "title": {"type": "text"},
                        "active": {"type": "boolean"},
                        "created_at": {"type": "date"},
                        "event_id": {"type": "keyword"},
                    }
                }
            },
            "defaults": {
                "index": "logs",
                "type": "log",
                "time_filter_field": "created_at",
                "tiebreaker": "event_id",
                **defaults,
            },
        }
    )


def _builder(**defaults: object) -> SearchRequestBuilder:
    return SearchRequestBuilder(_catalog(**defaults), DateRangeResolver(FakeClock()))


# ---------------------------------------------------------------------------
# Defaults and body shape
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_empty_query_uses_type_defaults(self) -> None:
        request, report = _builder().build({})
        assert request.index == "logs"
        assert request.document_type == "log"
        assert request.page_size == 30
        assert request.sort == (SortKey("created_at", SortOrder.DESC), SortKey("event_id", SortOrder.ASC))
        assert request.date_range is None
        assert report == ValidationReport()
        assert not report.has_errors

    def test_body_without_filters(self) -> None:
        request, _ = _builder().build({})
        assert request.to_body() == {
            "size": 30,
            "from": -1,
            "sort": [{"created_at": {"order": "desc"}}, {"event_id": {"order": "asc"}}],
        }

    def test_unknown_document_type(self) -> None:
        with pytest.raises(UnknownDocumentTypeError):
            _builder().build({}, document_type="metric")

    def test_applied_values_are_echoed(self) -> None:
        request, _ = _builder().build({"range": "today", "size": "10"})
        assert request.applied == {
            "range": "today",
            "sort": "created_at",
            "order": "desc",
            "size": 10,
            "start": "2026-01-15",
            "end": "2026-01-15",
        }


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


class TestSort:
    def test_text_field_sorts_on_keyword_sub_field(self) -> None:
        request, report = _builder().build({"sort": "message", "order": "asc"})
        assert request.sort[0] == SortKey("message.raw", SortOrder.ASC)
        assert not report.invalid_sort

    def test_text_field_without_keyword_falls_back(self) -> None:
        request, report = _builder().build({"sort": "title"})
        assert request.sort[0].field == "created_at"
        assert report.invalid_sort

    def test_unmapped_sort_falls_back(self) -> None:
        request, report = _builder().build({"sort": "nope"})
        assert request.sort[0].field == "created_at"
        assert report.invalid_sort
        assert report.rejected == ("invalid_sort",)

    def test_unmapped_default_sort_is_flagged(self) -> None:
        request, report = _builder(sort="missing").build({})
        assert request.sort[0].field == "missing"
        assert report.invalid_sort

    def test_tiebreaker_not_duplicated(self) -> None:
        request, _ = _builder(sort="status", tiebreaker="status").build({})
        assert request.sort == (SortKey("status", SortOrder.DESC),)

    @pytest.mark.parametrize("order", ["sideways", "ASC", ""])
    def test_invalid_order_falls_back(self, order: str) -> None:
        request, report = _builder().build({"order": order})
        assert request.sort[0].order is SortOrder.DESC
        assert report.invalid_order

    def test_rejected_values_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="mp_search.application.search.request"):
            _builder().build({"sort": "nope", "order": "sideways", "size": "abc"})
        assert "search.invalid_sort value='nope'" in caplog.text
        assert "search.invalid_order value='sideways'" in caplog.text
        assert "search.invalid_size value='abc'" in caplog.text


# ---------------------------------------------------------------------------
# Size and cursor
# ---------------------------------------------------------------------------


class TestSizeAndCursor:
    @pytest.mark.parametrize("size", ["abc", "0", -3, "2.5", True])
    def test_invalid_size_falls_back(self, size: object) -> None:
        request, report = _builder().build({"size": size})
        assert request.page_size == 30
        assert report.invalid_size

    def test_string_size_is_parsed(self) -> None:
        request, report = _builder().build({"size": " 25 "})
        assert request.page_size == 25
        assert not report.invalid_size

    def test_search_after_string_is_split(self) -> None:
        request, _ = _builder().build({"search_after": "1700000000000,abc"})
        assert request.search_after == SearchAfterCursor(("1700000000000", "abc"))
        assert request.to_body()["search_after"] == ["1700000000000", "abc"]

    def test_search_after_list_kept(self) -> None:
        request, _ = _builder().build({"search_after": [1700000000000, "abc"]})
        assert request.to_body()["search_after"] == [1700000000000, "abc"]


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------


class TestOverrides:
    def test_overrides_replace_type_defaults(self) -> None:
        overrides = SearchOverrides(sort="status", order="asc", size=5)
        request, report = _builder().build({}, overrides)
        assert request.sort[0] == SortKey("status", SortOrder.ASC)
        assert request.page_size == 5
        assert not report.has_errors

    def test_raw_values_beat_overrides(self) -> None:
        request, _ = _builder().build({"size": "7"}, SearchOverrides(size=5))
        assert request.page_size == 7

    def test_invalid_value_falls_back_to_override(self) -> None:
        request, report = _builder().build({"order": "up"}, SearchOverrides(order=SortOrder.ASC))
        assert request.sort[0].order is SortOrder.ASC
        assert report.invalid_order

    def test_unusable_order_override_keeps_type_default(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            request, report = _builder(order="asc").build({}, SearchOverrides(order="up"))
        assert request.sort[0].order is SortOrder.ASC
        assert not report.has_errors
        assert "search.override_ignored name=order value='up'" in caplog.text

    def test_valid_raw_order_with_unusable_override(self) -> None:
        request, report = _builder().build({"order": "asc"}, SearchOverrides(order="up"))
        assert request.sort[0].order is SortOrder.ASC
        assert not report.has_errors

    @pytest.mark.parametrize("size", [-5, 0, True])
    def test_unusable_size_override_keeps_type_default(self, size: int) -> None:
        request, report = _builder(size=12).build({}, SearchOverrides(size=size))
        assert request.page_size == 12
        assert not report.has_errors


# ---------------------------------------------------------------------------
# Filters and date ranges
# ---------------------------------------------------------------------------


class TestQuery:
    def test_src_all_is_not_a_filter(self) -> None:
        request, _ = _builder().build({"src": "all", "status": "ok"})
        assert request.query.filter == ({"term": {"status": "ok"}},)

    def test_src_value_is_a_filter(self) -> None:
        request, _ = _builder().build({"src": "nginx"})
        assert request.query.filter == ({"term": {"src": "nginx"}},)

    def test_control_parameters_are_not_filters(self) -> None:
        request, _ = _builder().build({"sort": "status", "size": "5", "range": "today"})
        assert request.query.is_empty

    def test_token_range_goes_under_must(self) -> None:
        request, _ = _builder().build({"range": "yesterday", "status": "ok"})
        body = request.to_body()
        assert body["query"]["bool"]["filter"] == [{"term": {"status": "ok"}}]
        assert body["query"]["bool"]["must"] == [
            {
                "range": {
                    "created_at": {
                        "gte": "2026-01-14 00:00:00",
                        "lte": "2026-01-14 23:59:59",
                        "format": "yyyy-MM-dd HH:mm:ss",
                        "time_zone": "UTC",
                    }
                }
            }
        ]

    def test_custom_range_with_bad_start(self) -> None:
        request, report = _builder().build({"range": "custom", "start": "not-a-date", "end": "2024-01-10"})
        assert report.invalid_start
        assert not report.invalid_end
        bounds = request.to_body()["query"]["bool"]["must"][0]["range"]["created_at"]
        assert bounds["gte"] == "2026-01-08 00:00:00"
        assert bounds["lte"] == "2024-01-10 23:59:59"

    def test_custom_range_without_bounds_adds_no_clause(self) -> None:
        request, report = _builder().build({"range": "custom"})
        assert "query" not in request.to_body()
        assert not report.has_errors

    def test_all_time_has_no_range(self) -> None:
        request, _ = _builder().build({"range": "all-time", "start": "2024-01-01"})
        assert request.date_range is None
        assert "query" not in request.to_body()


class TestSizeProperty:
    @given(size=st.one_of(st.integers(max_value=0), st.integers(max_value=0).map(str)))
    def test_non_positive_size_always_falls_back(self, size: object) -> None:
        request, report = _builder(size=12).build({"size": size})
        assert request.page_size == 12
        assert report.invalid_size
