"""Field specifications used by the request validator.

A validation schema maps field names to one of the frozen field classes below.
Every field shares the ``required`` / ``nullable`` / ``optional_required``
modifiers:

- ``required``: the field must be present, non-null and non-empty.
- ``nullable``: null is accepted unless set to ``False``.
- ``optional_required``: the field may be absent, but when present it must be
  non-null and non-empty. Used for fields required on create and optional on
  update.

Schemas can also be written as plain mappings
(``{"type": "string", "length": 40, "required": True}``) and converted with
:func:`field_from_dict` or :func:`build_schema`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import fields
from typing import Any
from typing import ClassVar
from typing import Union

from app.core.errors import SchemaDefinitionError


@dataclass(frozen=True, kw_only=True)
class FieldSpec:
    """Modifiers shared by every field type."""

    type_name: ClassVar[str] = ""
    numeric: ClassVar[bool] = False

    required: bool = False
    nullable: bool = True
    optional_required: bool = False

    @property
    def rejects_null(self) -> bool:
        return self.required or not self.nullable or self.optional_required


@dataclass(frozen=True, kw_only=True)
class StringField(FieldSpec):
    """String value; ``length`` caps the size, ``empty=False`` rejects blank values."""

    type_name: ClassVar[str] = "string"

    length: int | None = None
    empty: bool = True
    email: bool = False


@dataclass(frozen=True, kw_only=True)
class NumberField(FieldSpec):
    type_name: ClassVar[str] = "number"
    numeric: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class IntegerField(FieldSpec):
    type_name: ClassVar[str] = "integer"
    numeric: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class IdField(FieldSpec):
    """Database id. Never nullable."""

    type_name: ClassVar[str] = "id"
    numeric: ClassVar[bool] = True

    @property
    def rejects_null(self) -> bool:
        return True


@dataclass(frozen=True, kw_only=True)
class EnumField(FieldSpec):
    type_name: ClassVar[str] = "enum"

    values: tuple[Any, ...] = ()


@dataclass(frozen=True, kw_only=True)
class DateField(FieldSpec):
    """Date string in ``YYYY-MM-DD`` format."""

    type_name: ClassVar[str] = "date"


@dataclass(frozen=True, kw_only=True)
class DateTimeField(FieldSpec):
    """UTC date time string in ``YYYY-MM-DD HH:mm:ss`` format."""

    type_name: ClassVar[str] = "datetime"


AnyField = Union[StringField, NumberField, IntegerField, IdField, EnumField, DateField, DateTimeField]

FIELD_TYPES: dict[str, type[FieldSpec]] = {
    spec.type_name: spec
    for spec in (StringField, NumberField, IntegerField, IdField, EnumField, DateField, DateTimeField)
}


def field_from_dict(definition: Mapping[str, Any]) -> FieldSpec:
    """Build a field spec from its mapping form; fail on unknown types or attributes."""
    attributes = dict(definition)
    type_name = attributes.pop("type", None)
    spec_class = FIELD_TYPES.get(type_name)  # type: ignore[arg-type]
    if spec_class is None:
        raise SchemaDefinitionError(f"Unknown type: {type_name}")

    allowed = {item.name for item in fields(spec_class)}
    unknown = sorted(set(attributes) - allowed)
    if unknown:
        raise SchemaDefinitionError(f"Unknown attributes for {type_name} field: {', '.join(unknown)}")
    if "values" in attributes:
        attributes["values"] = tuple(attributes["values"])
    return spec_class(**attributes)


def build_schema(definition: Mapping[str, FieldSpec | Mapping[str, Any]]) -> dict[str, FieldSpec]:
    """Normalize a schema so that every entry is a field spec."""
    schema: dict[str, FieldSpec] = {}
    for name, spec in definition.items():
        if isinstance(spec, FieldSpec):
            schema[name] = spec
        elif isinstance(spec, Mapping):
            schema[name] = field_from_dict(spec)
        else:
            raise SchemaDefinitionError(f"Invalid definition for field {name!r}: {spec!r}")
    return schema
