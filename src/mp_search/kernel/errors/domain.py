"""Domain errors – schema lookups, request parameters, aggregations."""

from __future__ import annotations

from typing import Any

from mp_search.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a search request cannot be translated as asked."""

    default_code = "domain_error"


class UnknownDocumentTypeError(DomainError):
    """The document type was never registered in the schema catalog."""

    default_code = "unknown_document_type"

    def __init__(self, document_type: str, **kwargs: Any) -> None:
        super().__init__(
            f"Document type '{document_type}' is not registered",
            detail={"document_type": document_type},
            **kwargs,
        )
        self.document_type = document_type


class InvalidParameterError(DomainError):
    """A caller-supplied parameter was rejected.

    These are recoverable: the request builder records them in the
    validation report and substitutes a default.
    """

    default_code = "invalid_parameter"
    parameter: str = ""

    def __init__(self, value: Any, reason: str | None = None, **kwargs: Any) -> None:
        msg = f"Invalid {self.parameter or 'parameter'} {value!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, detail={"parameter": self.parameter, "value": value}, **kwargs)
        self.value = value


class InvalidDateFormatError(InvalidParameterError):
    default_code = "invalid_date_format"
    parameter = "date"


class InvalidSortError(InvalidParameterError):
    default_code = "invalid_sort"
    parameter = "sort"


class InvalidOrderError(InvalidParameterError):
    default_code = "invalid_order"
    parameter = "order"


class InvalidSizeError(InvalidParameterError):
    default_code = "invalid_size"
    parameter = "size"


class InvalidDateRangeError(DomainError):
    """A date range cannot be used for the requested operation."""

    default_code = "invalid_date_range"


class DuplicateAggregationError(DomainError):
    """Two aggregation descriptors share the same output name."""

    default_code = "duplicate_aggregation"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Aggregation '{name}' is declared more than once", **kwargs)
        self.name = name


class AggregationResultError(DomainError):
    """A search response has no section for the requested aggregation."""

    default_code = "aggregation_result_missing"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Response has no aggregation named '{name}'", **kwargs)
        self.name = name


__all__ = [
    "AggregationResultError",
    "DomainError",
    "DuplicateAggregationError",
    "InvalidDateFormatError",
    "InvalidDateRangeError",
    "InvalidOrderError",
    "InvalidParameterError",
    "InvalidSizeError",
    "InvalidSortError",
    "UnknownDocumentTypeError",
]
