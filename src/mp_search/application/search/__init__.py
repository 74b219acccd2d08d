"""Application search – schema-driven translation of raw requests into engine queries."""
from mp_search.application.search.aggregations import (
    AGGREGATION_TYPES,
    AggregationDescriptor,
    AggregationKind,
    AvgAggregation,
    CardinalityAggregation,
    HistogramAggregation,
    MaxAggregation,
    MinAggregation,
    StatsAggregation,
    SumAggregation,
    ValueCountAggregation,
    build_aggregation,
    extract_all,
    serialize_all,
)
from mp_search.application.search.dates import DateRange, DateRangeResolution, DateRangeResolver, RangeToken
from mp_search.application.search.filters import CompiledFilter, Occurrence, QueryFilterCompiler, parse_bool
from mp_search.application.search.request import (
    SearchOverrides,
    SearchRequest,
    SearchRequestBuilder,
    ValidationReport,
)
from mp_search.application.search.schema import (
    DataType,
    DocumentSchema,
    FieldMapping,
    SchemaCatalog,
    TypeDefaults,
)
from mp_search.application.search.service import DailyAggregation, SearchService
from mp_search.application.search.transport import SearchTransport

__all__ = [
    "AGGREGATION_TYPES",
    "AggregationDescriptor",
    "AggregationKind",
    "AvgAggregation",
    "CardinalityAggregation",
    "CompiledFilter",
    "DailyAggregation",
    "DataType",
    "DateRange",
    "DateRangeResolution",
    "DateRangeResolver",
    "DocumentSchema",
    "FieldMapping",
    "HistogramAggregation",
    "MaxAggregation",
    "MinAggregation",
    "Occurrence",
    "QueryFilterCompiler",
    "RangeToken",
    "SchemaCatalog",
    "SearchOverrides",
    "SearchRequest",
    "SearchRequestBuilder",
    "SearchService",
    "SearchTransport",
    "StatsAggregation",
    "SumAggregation",
    "TypeDefaults",
    "ValidationReport",
    "ValueCountAggregation",
    "build_aggregation",
    "extract_all",
    "parse_bool",
    "serialize_all",
]
