"""Application search – QueryFilterCompiler and CompiledFilter.

Raw filter parameters become bool-query clauses according to the declared
type of each field:

============================  ==================  ===========
type family                   clause              occurrence
============================  ==================  ===========
keyword, ip, integer, short,  ``term`` /          ``filter``
long                          ``terms`` (lists)
text                          ``match``           ``must``
boolean                       ``term``            ``filter``
============================  ==================  ===========

A string value starting with ``!`` negates the clause: it is moved to
``must_not`` and every leading ``!`` is stripped.
"""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from mp_search.application.search.schema import DataType, FieldMapping

logger = logging.getLogger(__name__)

KEYWORD_LIKE_TYPES = frozenset(
    t.value for t in (DataType.KEYWORD, DataType.IP, DataType.INTEGER, DataType.SHORT, DataType.LONG)
)
TEXT_TYPES = frozenset({DataType.TEXT.value})
BOOLEAN_TYPES = frozenset({DataType.BOOLEAN.value})

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


class Occurrence(str, Enum):
    MUST = "must"
    MUST_NOT = "must_not"
    FILTER = "filter"


Clause = dict[str, Any]


def parse_bool(value: Any) -> bool:
    """Permissive boolean parser.

    ``true/1/yes/on`` and ``false/0/no/off`` (any case) are accepted;
    anything else raises ``ValueError`` instead of guessing.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    normalized = str(value).strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclasses.dataclass(frozen=True)
class CompiledFilter:
    """Bool-query clauses grouped by occurrence. Never mutated once built."""

    must: tuple[Clause, ...] = ()
    must_not: tuple[Clause, ...] = ()
    filter: tuple[Clause, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.must or self.must_not or self.filter)

    def clauses(self, occurrence: Occurrence) -> tuple[Clause, ...]:
        return getattr(self, occurrence.value)

    def with_clause(self, occurrence: Occurrence, clause: Clause) -> CompiledFilter:
        return dataclasses.replace(
            self, **{occurrence.value: self.clauses(occurrence) + (clause,)}
        )

    def merge(self, other: CompiledFilter) -> CompiledFilter:
        return CompiledFilter(
            must=self.must + other.must,
            must_not=self.must_not + other.must_not,
            filter=self.filter + other.filter,
        )

    def to_bool(self) -> dict[str, list[Clause]]:
        """Render the ``bool`` body, leaving out empty occurrences."""
        return {
            occurrence.value: list(self.clauses(occurrence))
            for occurrence in Occurrence
            if self.clauses(occurrence)
        }

    @classmethod
    def from_bool(cls, body: Mapping[str, Sequence[Clause]]) -> CompiledFilter:
        return cls(
            must=tuple(body.get("must") or ()),
            must_not=tuple(body.get("must_not") or ()),
            filter=tuple(body.get("filter") or ()),
        )


def _is_empty_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, Sequence):
        return len(value) == 0
    return False


def _negation(value: Any) -> tuple[bool, Any]:
    if isinstance(value, str) and value.startswith("!"):
        return True, value.lstrip("!")
    return False, value


class QueryFilterCompiler:
    """Compile raw key/value filters into a :class:`CompiledFilter`."""

    def compile(
        self,
        raw_query: Mapping[str, Any],
        fields: Mapping[str, FieldMapping],
        base: CompiledFilter | None = None,
    ) -> CompiledFilter:
        query = {key: value for key, value in raw_query.items() if not _is_empty_value(value)}
        compiled = base or CompiledFilter()
        if not query:
            return compiled

        compiled = self._compile_pass(
            compiled, query, self.fields_of_types(fields, KEYWORD_LIKE_TYPES), "term", Occurrence.FILTER
        )
        compiled = self._compile_pass(
            compiled, query, self.fields_of_types(fields, TEXT_TYPES), "match", Occurrence.MUST
        )
        compiled = self._compile_pass(
            compiled,
            query,
            self.fields_of_types(fields, BOOLEAN_TYPES),
            "term",
            Occurrence.FILTER,
            coerce=parse_bool,
        )
        return compiled

    @staticmethod
    def fields_of_types(fields: Mapping[str, FieldMapping], data_types: frozenset[str]) -> list[str]:
        """Field names whose declared type is in *data_types*, in mapping order."""
        return [name for name, mapping in fields.items() if mapping.data_type in data_types]

    def _compile_pass(
        self,
        compiled: CompiledFilter,
        query: Mapping[str, Any],
        field_names: list[str],
        context: str,
        occurrence: Occurrence,
        coerce: Callable[[Any], Any] | None = None,
    ) -> CompiledFilter:
        for name in field_names:
            if name not in query:
                continue
            clause_occurrence = occurrence
            negated, value = _negation(query[name])
            if negated:
                clause_occurrence = Occurrence.MUST_NOT
            try:
                clause = self._build_clause(name, value, context, coerce)
            except ValueError:
                logger.warning("search.filter_dropped field=%s value=%r", name, query[name])
                continue
            compiled = compiled.with_clause(clause_occurrence, clause)
        return compiled

    @staticmethod
    def _build_clause(
        name: str, value: Any, context: str, coerce: Callable[[Any], Any] | None
    ) -> Clause:
        is_list = isinstance(value, Sequence) and not isinstance(value, str)
        if is_list:
            value = list(value)
            if coerce is not None:
                value = [coerce(item) for item in value]
            if context == "term":
                return {"terms": {name: value}}
            return {context: {name: " ".join(str(item) for item in value)}}
        if coerce is not None:
            value = coerce(value)
        return {context: {name: value}}


__all__ = [
    "BOOLEAN_TYPES",
    "KEYWORD_LIKE_TYPES",
    "TEXT_TYPES",
    "Clause",
    "CompiledFilter",
    "Occurrence",
    "QueryFilterCompiler",
    "parse_bool",
]
