"""Application search – aggregation descriptors.

Every descriptor knows two things: how to render itself into the ``aggs``
section of a request, and how to read its value back out of the matching
section of the response. Adding a reducer means adding one subclass and
registering it in :data:`AGGREGATION_TYPES`.

Usage::

    aggs = [AvgAggregation("avg_latency", "latency_ms"), MaxAggregation("peak", "latency_ms")]
    body = {"size": 0, "aggs": serialize_all(aggs)}
    ...
    values = extract_all(aggs, response)   # {"avg_latency": 12.5, "peak": 80.0}
"""
from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, ClassVar

from mp_search.kernel.errors import AggregationResultError, DuplicateAggregationError


class AggregationKind(str, Enum):
    AVG = "avg"
    SUM = "sum"
    MIN = "min"
    MAX = "max"
    CARDINALITY = "cardinality"
    VALUE_COUNT = "value_count"
    STATS = "stats"
    HISTOGRAM = "histogram"


class AggregationDescriptor(abc.ABC):
    """A named aggregation over one source field."""

    kind: ClassVar[AggregationKind]

    def __init__(self, name: str, source_field: str) -> None:
        if not name:
            raise ValueError("aggregation name must not be empty")
        self.name = name
        self.source_field = source_field

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, source_field={self.source_field!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AggregationDescriptor):
            return NotImplemented
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self) -> int:
        return hash((type(self), self.name, self.source_field))

    def options(self) -> dict[str, Any]:
        """Body of the reducer, without the name and kind wrappers."""
        return {"field": self.source_field}

    def serialize(self) -> dict[str, Any]:
        return {self.name: {self.kind.value: self.options()}}

    @abc.abstractmethod
    def extract_result(self, fragment: Mapping[str, Any]) -> Any:
        """Read the reduced value from this aggregation's response section."""

    def extract_from_response(self, response: Mapping[str, Any]) -> Any:
        section = (response.get("aggregations") or {}).get(self.name)
        if section is None:
            raise AggregationResultError(self.name)
        return self.extract_result(section)


class _SingleValueAggregation(AggregationDescriptor):
    # single-value metric reducers all answer {"value": ...}

    def extract_result(self, fragment: Mapping[str, Any]) -> Any:
        return fragment["value"]


class AvgAggregation(_SingleValueAggregation):
    kind = AggregationKind.AVG


class SumAggregation(_SingleValueAggregation):
    kind = AggregationKind.SUM


class MinAggregation(_SingleValueAggregation):
    kind = AggregationKind.MIN


class MaxAggregation(_SingleValueAggregation):
    kind = AggregationKind.MAX


class CardinalityAggregation(_SingleValueAggregation):
    kind = AggregationKind.CARDINALITY


class ValueCountAggregation(_SingleValueAggregation):
    kind = AggregationKind.VALUE_COUNT


class StatsAggregation(AggregationDescriptor):
    """count/min/max/avg/sum in one round trip."""

    kind = AggregationKind.STATS
    _KEYS = ("count", "min", "max", "avg", "sum")

    def extract_result(self, fragment: Mapping[str, Any]) -> dict[str, Any]:
        return {key: fragment.get(key) for key in self._KEYS}


class HistogramAggregation(AggregationDescriptor):
    """Fixed-interval numeric histogram, decoded to ``{bucket key: doc_count}``."""

    kind = AggregationKind.HISTOGRAM

    def __init__(self, name: str, source_field: str, interval: float, min_doc_count: int = 0) -> None:
        if interval <= 0:
            raise ValueError("histogram interval must be positive")
        super().__init__(name, source_field)
        self.interval = interval
        self.min_doc_count = min_doc_count

    def options(self) -> dict[str, Any]:
        return {
            "field": self.source_field,
            "interval": self.interval,
            "min_doc_count": self.min_doc_count,
        }

    def extract_result(self, fragment: Mapping[str, Any]) -> dict[Any, int]:
        return {bucket["key"]: bucket["doc_count"] for bucket in fragment.get("buckets", [])}


AGGREGATION_TYPES: Mapping[AggregationKind, type[AggregationDescriptor]] = {
    cls.kind: cls
    for cls in (
        AvgAggregation,
        SumAggregation,
        MinAggregation,
        MaxAggregation,
        CardinalityAggregation,
        ValueCountAggregation,
        StatsAggregation,
        HistogramAggregation,
    )
}


def build_aggregation(
    kind: AggregationKind | str, name: str, source_field: str, **options: Any
) -> AggregationDescriptor:
    """Instantiate the descriptor registered for *kind* (``ValueError`` if unknown)."""
    return AGGREGATION_TYPES[AggregationKind(kind)](name, source_field, **options)


def serialize_all(descriptors: Iterable[AggregationDescriptor]) -> dict[str, Any]:
    """Merge descriptor bodies into one ``aggs`` section; names must be unique."""
    aggs: dict[str, Any] = {}
    for descriptor in descriptors:
        if descriptor.name in aggs:
            raise DuplicateAggregationError(descriptor.name)
        aggs.update(descriptor.serialize())
    return aggs


def extract_all(
    descriptors: Iterable[AggregationDescriptor], response: Mapping[str, Any]
) -> dict[str, Any]:
    return {descriptor.name: descriptor.extract_from_response(response) for descriptor in descriptors}


__all__ = [
    "AGGREGATION_TYPES",
    "AggregationDescriptor",
    "AggregationKind",
    "AvgAggregation",
    "CardinalityAggregation",
    "HistogramAggregation",
    "MaxAggregation",
    "MinAggregation",
    "StatsAggregation",
    "SumAggregation",
    "ValueCountAggregation",
    "build_aggregation",
    "extract_all",
    "serialize_all",
]
