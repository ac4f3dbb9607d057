"""
Schema resolution: turns a record type's `Column` markers into an ordered,
immutable list of column descriptors.
"""
import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel

from sheetbind.domain.formats import FieldKind
from sheetbind.domain.models import ColumnSpec, DiagnosticMessage, MessageCategory
from sheetbind.exceptions import SchemaDefinitionError
from sheetbind.schema.columns import Column
from sheetbind.sheets.messages import create_error, create_warning

logger = logging.getLogger(__name__)

# Record type -> Schema. Unlocked: concurrent first resolutions may each build,
# the results are identical and the last write wins.
_SCHEMA_CACHE: dict[type, "Schema"] = {}

_KIND_TYPES: dict[FieldKind, tuple[type, ...]] = {
    FieldKind.INTEGER: (int,),
    FieldKind.DECIMAL: (Decimal, float, int),
    FieldKind.CURRENCY: (Decimal, float, int),
    FieldKind.PERCENTAGE: (Decimal, float, int),
    FieldKind.BOOLEAN: (bool,),
}


@dataclass(frozen=True)
class Schema:
    record_type: type
    columns: tuple[ColumnSpec, ...] = field(default_factory=tuple)

    @property
    def headers(self) -> list[str]:
        return [c.header for c in self.columns]

    @property
    def input_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if c.is_input]

    @property
    def output_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if c.is_output]

    def get(self, header: str) -> Optional[ColumnSpec]:
        for column in self.columns:
            if column.header == header:
                return column
        return None

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self):
        return iter(self.columns)


def _model_classes(record_type: type) -> list[type]:
    """Base-first list of the pydantic model classes a record type is built from."""
    return [
        klass
        for klass in reversed(record_type.__mro__)
        if isinstance(klass, type) and issubclass(klass, BaseModel) and klass is not BaseModel
    ]


def _declared_fields(record_type: type) -> Iterable[tuple[str, Any, Optional[Column]]]:
    """
    Yields (name, annotation, marker) for every model field, base class first,
    each name once: the first declaration wins and redeclarations further down
    the hierarchy are ignored.
    """
    seen: set[str] = set()
    for klass in _model_classes(record_type):
        for name in inspect.get_annotations(klass):
            if name in seen:
                continue
            info = klass.model_fields.get(name)
            if info is None:
                continue
            seen.add(name)
            marker = next((m for m in info.metadata if isinstance(m, Column)), None)
            yield name, info.annotation, marker


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(annotation)
        rest = [a for a in args if a is not type(None)]
        nullable = len(rest) != len(args)
        return (rest[0] if len(rest) == 1 else annotation), nullable
    return annotation, annotation is None or annotation is Any


def field_base_type(record_type: type, field_name: str) -> Any:
    """Annotated type of a model field with any `Optional` stripped."""
    info = record_type.model_fields.get(field_name)
    if info is None:
        return Any
    base, _ = _unwrap_optional(info.annotation)
    return base


def _build(record_type: type) -> Schema:
    specs: list[tuple[int, ColumnSpec]] = []
    claimed_headers: set[str] = set()
    for index, (name, annotation, marker) in enumerate(_declared_fields(record_type)):
        if marker is None:
            continue
        header = marker.header.strip()
        if not header:
            raise SchemaDefinitionError(f"{record_type.__name__}.{name}: column header is empty")
        if header in claimed_headers:
            logger.debug("duplicate header ignored", extra={"record_type": record_type.__name__, "field": name})
            continue
        claimed_headers.add(header)
        _, nullable = _unwrap_optional(annotation)
        spec = ColumnSpec(
            field_name=name,
            header=header,
            kind=marker.kind,
            is_input=marker.is_input,
            format=marker.format,
            format_pattern=marker.format_pattern,
            order=marker.order,
            note=marker.note,
            validation=marker.validation,
            enable_validation=marker.enable_validation,
            json_name=marker.json_name,
            nullable=nullable,
        )
        specs.append((index, spec))

    specs.sort(key=lambda pair: pair[1].order if pair[1].has_explicit_order else pair[0])
    return Schema(record_type=record_type, columns=tuple(spec for _, spec in specs))


def resolve(record_type: type) -> Schema:
    """
    Returns the schema of a record type, building it on first use.
    """
    if not (isinstance(record_type, type) and issubclass(record_type, BaseModel)):
        raise SchemaDefinitionError(f"{record_type!r} is not a pydantic model class")
    schema = _SCHEMA_CACHE.get(record_type)
    if schema is None:
        schema = _build(record_type)
        _SCHEMA_CACHE[record_type] = schema
        logger.debug("schema resolved", extra={"record_type": record_type.__name__, "columns": len(schema)})
    return schema


def as_schema(schema_or_type: Union[Schema, type]) -> Schema:
    if isinstance(schema_or_type, Schema):
        return schema_or_type
    return resolve(schema_or_type)


def clear_cache() -> None:
    _SCHEMA_CACHE.clear()


def validate(record_type: Union[Schema, type], available_headers: Iterable[Any]) -> list[DiagnosticMessage]:
    """
    One ERROR per schema header that is not among `available_headers`.
    """
    schema = as_schema(record_type)
    name = schema.record_type.__name__
    available = {str(h).strip() for h in available_headers if h is not None}
    if not schema.columns:
        return [create_error(f"{name} declares no sheet columns", MessageCategory.SCHEMA)]
    return [
        create_error(f"{name}: required header [{column.header}] not found", MessageCategory.SCHEMA)
        for column in schema.columns
        if column.header not in available
    ]


def check_record_type(record_type: type) -> list[DiagnosticMessage]:
    """
    Declaration sanity checks: kinds that do not fit the field annotation and
    headers claimed by more than one field.
    """
    messages: list[DiagnosticMessage] = []
    name = record_type.__name__
    claimed: dict[str, str] = {}
    for field_name, annotation, marker in _declared_fields(record_type):
        if marker is None:
            continue
        header = marker.header.strip()
        if header in claimed:
            messages.append(
                create_warning(
                    f"{name}.{field_name}: header [{header}] already bound to {claimed[header]}; ignored",
                    MessageCategory.SCHEMA,
                )
            )
            continue
        claimed[header] = field_name

        base, _ = _unwrap_optional(annotation)
        expected = _KIND_TYPES.get(marker.kind, (str,))
        if base is Any:
            continue
        # bool is an int subclass; do not let it satisfy numeric kinds
        fits = isinstance(base, type) and issubclass(base, expected)
        if fits and base is bool and marker.kind != FieldKind.BOOLEAN:
            fits = False
        if not fits:
            messages.append(
                create_error(
                    f"{name}.{field_name}: kind {marker.kind.value} does not fit annotation {annotation!r}",
                    MessageCategory.SCHEMA,
                )
            )
    return messages
