"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError                    (domain.py)
    │   ├── UnknownDocumentTypeError
    │   ├── InvalidParameterError
    │   │   ├── InvalidDateFormatError
    │   │   ├── InvalidSortError
    │   │   ├── InvalidOrderError
    │   │   └── InvalidSizeError
    │   ├── InvalidDateRangeError
    │   ├── DuplicateAggregationError
    │   └── AggregationResultError
    └── InfrastructureError            (infrastructure.py)
        └── SearchTransportError
            ├── TransportConnectionError
            └── TransportTimeoutError

Configuration errors live in :mod:`mp_search.config.validation`.
"""

from mp_search.kernel.errors.base import BaseError
from mp_search.kernel.errors.domain import (
    AggregationResultError,
    DomainError,
    DuplicateAggregationError,
    InvalidDateFormatError,
    InvalidDateRangeError,
    InvalidOrderError,
    InvalidParameterError,
    InvalidSizeError,
    InvalidSortError,
    UnknownDocumentTypeError,
)
from mp_search.kernel.errors.infrastructure import (
    InfrastructureError,
    SearchTransportError,
    TransportConnectionError,
    TransportTimeoutError,
)

__all__ = [
    "AggregationResultError",
    "BaseError",
    "DomainError",
    "DuplicateAggregationError",
    "InfrastructureError",
    "InvalidDateFormatError",
    "InvalidDateRangeError",
    "InvalidOrderError",
    "InvalidParameterError",
    "InvalidSizeError",
    "InvalidSortError",
    "SearchTransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
    "UnknownDocumentTypeError",
]
