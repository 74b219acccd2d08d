"""Application search – SchemaCatalog, FieldMapping, TypeDefaults.

The catalog is built once from a configuration bundle shaped like::

    {
        "mappings": {"log": {"properties": {"event_id": {"type": "keyword"}}}},
        "settings": {"number_of_shards": 1},
        "defaults": {
            "index": "logs",
            "type": "log",
            "time_filter_field": "created_at",
            "tiebreaker": "event_id",
            "aggregation_names": ["avg_latency"],
        },
    }

and is read-only afterwards, so one instance can be shared by any number of
concurrent request builders.
"""
from __future__ import annotations

import dataclasses
import types
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from mp_search.application.pagination import SortOrder
from mp_search.config.validation import (
    InvalidMappingError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from mp_search.kernel.errors import UnknownDocumentTypeError


class DataType(str, Enum):
    """Elasticsearch field types the translator knows by name."""

    TEXT = "text"
    KEYWORD = "keyword"
    IP = "ip"
    INTEGER = "integer"
    SHORT = "short"
    LONG = "long"
    BYTE = "byte"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    NESTED = "nested"


@dataclasses.dataclass(frozen=True)
class FieldMapping:
    """One document field.

    ``data_type`` is kept as the raw Elasticsearch type string so that types
    outside :class:`DataType` (``geo_point``, ``scaled_float`` …) survive
    loading; they are simply never filterable.
    """

    name: str
    data_type: str
    sub_fields: Mapping[str, FieldMapping] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.sub_fields and self.data_type != DataType.TEXT:
            raise InvalidMappingError(
                self.name, f"sub-fields are only allowed on text fields, not {self.data_type!r}"
            )
        object.__setattr__(self, "sub_fields", types.MappingProxyType(dict(self.sub_fields)))

    @property
    def is_text(self) -> bool:
        return self.data_type == DataType.TEXT

    def keyword_sub_field(self) -> str | None:
        """Name of the first keyword-typed sub-field, if any."""
        for sub_name, sub in self.sub_fields.items():
            if sub.data_type == DataType.KEYWORD:
                return sub_name
        return None

    @classmethod
    def from_mapping(cls, name: str, body: Mapping[str, Any]) -> FieldMapping:
        """Parse an Elasticsearch property body (``type`` plus optional ``fields``)."""
        if "type" in body:
            data_type = str(body["type"])
        elif "properties" in body:
            data_type = DataType.OBJECT.value
        else:
            raise InvalidMappingError(name, "property has neither 'type' nor 'properties'")
        sub_fields = {
            sub_name: cls.from_mapping(f"{name}.{sub_name}", sub_body)
            for sub_name, sub_body in (body.get("fields") or {}).items()
        }
        return cls(name=name, data_type=data_type, sub_fields=sub_fields)


@dataclasses.dataclass(frozen=True)
class TypeDefaults:
    """Per document type defaults for index, sorting and paging.

    ``tiebreaker_field`` ends every sort so that ``search_after`` paging is
    stable. It has no default: ``_id`` cannot be sorted on in Elasticsearch 8
    unless ``indices.id_field_data.enabled`` is switched on, so the document
    identifier has to be a mapped keyword (or numeric) field.
    """

    index: str
    time_filter_field: str
    tiebreaker_field: str
    sort_field: str = ""
    sort_order: SortOrder = SortOrder.DESC
    page_size: int = 30
    aggregation_names: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not self.index:
            raise InvalidSettingValueError("defaults.index", self.index, "must not be empty")
        if not self.time_filter_field:
            raise InvalidSettingValueError(
                "defaults.time_filter_field", self.time_filter_field, "must not be empty"
            )
        if not self.tiebreaker_field:
            raise InvalidSettingValueError(
                "defaults.tiebreaker", self.tiebreaker_field, "must not be empty"
            )
        if not self.sort_field:
            object.__setattr__(self, "sort_field", self.time_filter_field)
        try:
            object.__setattr__(self, "sort_order", SortOrder.parse(self.sort_order))
        except ValueError as exc:
            raise InvalidSettingValueError("defaults.order", self.sort_order, "must be asc or desc") from exc
        if not isinstance(self.page_size, int) or self.page_size < 1:
            raise InvalidSettingValueError("defaults.size", self.page_size, "must be a positive integer")
        object.__setattr__(self, "aggregation_names", frozenset(self.aggregation_names))


@dataclasses.dataclass(frozen=True)
class DocumentSchema:
    """Fields and defaults registered for one document type."""

    fields: Mapping[str, FieldMapping]
    defaults: TypeDefaults
    raw_mapping: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_properties(
        cls, properties: Mapping[str, Mapping[str, Any]], defaults: TypeDefaults
    ) -> DocumentSchema:
        fields = {name: FieldMapping.from_mapping(name, body) for name, body in properties.items()}
        return cls(fields=fields, defaults=defaults, raw_mapping={"properties": dict(properties)})


_UNSORTABLE = frozenset({DataType.TEXT.value, DataType.OBJECT.value, DataType.NESTED.value})


def _check_tiebreaker(document_type: str, schema: DocumentSchema) -> None:
    name = schema.defaults.tiebreaker_field
    mapping = schema.fields.get(name)
    if mapping is None:
        raise InvalidMappingError(name, f"tiebreaker is not mapped on type {document_type!r}")
    if mapping.data_type in _UNSORTABLE:
        raise InvalidMappingError(name, f"tiebreaker cannot be a {mapping.data_type} field")


class SchemaCatalog:
    """Read-only lookup of field mappings and defaults per document type."""

    def __init__(
        self,
        schemas: Mapping[str, DocumentSchema],
        *,
        default_type: str | None = None,
        index_settings: Mapping[str, Any] | None = None,
    ) -> None:
        if default_type is not None and default_type not in schemas:
            raise InvalidSettingValueError("defaults.type", default_type, "no mapping for this type")
        self._schemas = types.MappingProxyType(
            {
                name: dataclasses.replace(schema, fields=types.MappingProxyType(dict(schema.fields)))
                for name, schema in schemas.items()
            }
        )
        self._default_type = default_type
        self._index_settings = types.MappingProxyType(dict(index_settings or {}))

    @classmethod
    def from_config(cls, bundle: Mapping[str, Any]) -> SchemaCatalog:
        """Build a catalog from a ``mappings``/``settings``/``defaults`` bundle.

        The ``defaults`` block is shared by every mapped type. Raises
        :class:`MissingRequiredSettingError` when ``defaults.index`` or
        ``defaults.time_filter_field`` or ``defaults.tiebreaker`` is absent and
        :class:`InvalidMappingError` for a broken property or a tiebreaker
        that is not a sortable field of every mapped type.
        """
        defaults_cfg = bundle.get("defaults") or {}
        for key in ("index", "time_filter_field", "tiebreaker"):
            if not defaults_cfg.get(key):
                raise MissingRequiredSettingError(f"defaults.{key}")

        defaults = TypeDefaults(
            index=defaults_cfg["index"],
            time_filter_field=defaults_cfg["time_filter_field"],
            tiebreaker_field=defaults_cfg["tiebreaker"],
            sort_field=defaults_cfg.get("sort") or "",
            sort_order=defaults_cfg.get("order") or SortOrder.DESC,
            page_size=defaults_cfg.get("size", 30),
            aggregation_names=frozenset(defaults_cfg.get("aggregation_names") or ()),
        )
        schemas = {}
        for doc_type, mapping in (bundle.get("mappings") or {}).items():
            schema = DocumentSchema.from_properties(mapping.get("properties") or {}, defaults)
            _check_tiebreaker(doc_type, schema)
            schemas[doc_type] = dataclasses.replace(schema, raw_mapping=dict(mapping))
        return cls(
            schemas,
            default_type=defaults_cfg.get("type"),
            index_settings=bundle.get("settings"),
        )

    @property
    def document_types(self) -> Iterable[str]:
        return tuple(self._schemas)

    @property
    def index_settings(self) -> Mapping[str, Any]:
        return self._index_settings

    def schema_of(self, document_type: str) -> DocumentSchema:
        try:
            return self._schemas[document_type]
        except KeyError:
            raise UnknownDocumentTypeError(document_type) from None

    def fields_of(self, document_type: str) -> Mapping[str, FieldMapping]:
        return self.schema_of(document_type).fields

    def defaults_of(self, document_type: str) -> TypeDefaults:
        return self.schema_of(document_type).defaults

    def mapping_body(self, document_type: str) -> Mapping[str, Any]:
        return self.schema_of(document_type).raw_mapping

    def with_default_type(self, document_type: str | None = None) -> str:
        """Return *document_type*, or the configured default type when omitted."""
        if document_type:
            return document_type
        if self._default_type is None:
            if len(self._schemas) == 1:
                return next(iter(self._schemas))
            raise MissingRequiredSettingError("defaults.type")
        return self._default_type

    def with_default_index(self, index: str | None = None, document_type: str | None = None) -> str:
        """Return *index*, or the default index of the (default) document type."""
        if index:
            return index
        return self.defaults_of(self.with_default_type(document_type)).index


__all__ = [
    "DataType",
    "DocumentSchema",
    "FieldMapping",
    "SchemaCatalog",
    "TypeDefaults",
]
