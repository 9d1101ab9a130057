"""
Declarative document schema and the total repair function.

Model output is not guaranteed to match the requested shape, so missing structure
is filled from per-field defaults instead of being reported as an error. Only
structural completeness is guaranteed, never the quality of the content.
"""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    STRING = "string"
    STRING_ARRAY = "string_array"
    OBJECT = "object"
    OBJECT_ARRAY = "object_array"


_MISSING = object()


@dataclass(frozen=True)
class FieldSpec:
    """
    One declared field.

    - required: the field must exist after repair (type zero value if no default).
    - non_empty: arrays only; an empty array is replaced by the default.
    - fields: children of an OBJECT, or the item shape of an OBJECT_ARRAY.
    """
    name: str
    type: FieldType = FieldType.STRING
    default: Any = None
    required: bool = False
    non_empty: bool = False
    description: str = ""
    fields: tuple["FieldSpec", ...] = ()

    def __post_init__(self) -> None:
        nested = self.type in (FieldType.OBJECT, FieldType.OBJECT_ARRAY)
        if nested and not self.fields:
            raise ValueError(f"field {self.name!r}: {self.type.value} needs child fields")
        if not nested and self.fields:
            raise ValueError(f"field {self.name!r}: {self.type.value} cannot have child fields")
        # Objects get their default from their children.
        if self.type != FieldType.OBJECT and self.default is None and not self.required:
            raise ValueError(f"field {self.name!r} needs a default or required=True")
        if self.non_empty and self.type not in (FieldType.STRING_ARRAY, FieldType.OBJECT_ARRAY):
            raise ValueError(f"field {self.name!r}: non_empty only applies to arrays")
        if self.non_empty and not self.default:
            raise ValueError(f"field {self.name!r}: non_empty arrays need a non-empty default")
        if self.default is not None:
            _check_default(self)


def _check_default(spec: FieldSpec) -> None:
    default = spec.default
    if spec.type == FieldType.STRING:
        ok = isinstance(default, str) and bool(default.strip())
    elif spec.type == FieldType.STRING_ARRAY:
        ok = isinstance(default, list) and all(isinstance(v, str) and v.strip() for v in default)
    elif spec.type == FieldType.OBJECT_ARRAY:
        ok = isinstance(default, list) and all(isinstance(v, dict) for v in default)
    else:
        ok = False
    if not ok:
        raise ValueError(f"field {spec.name!r}: default does not match type {spec.type.value}")


@dataclass(frozen=True)
class SchemaDescriptor:
    name: str
    fields: tuple[FieldSpec, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"schema {self.name!r} has duplicate field names")

    def skeleton(self) -> dict[str, Any]:
        """JSON skeleton used to show the model the expected shape."""
        return _skeleton(self.fields)


def _skeleton(fields: tuple[FieldSpec, ...]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for spec in fields:
        hint = spec.description or spec.name
        if spec.type == FieldType.STRING:
            out[spec.name] = hint
        elif spec.type == FieldType.STRING_ARRAY:
            out[spec.name] = [hint]
        elif spec.type == FieldType.OBJECT:
            out[spec.name] = _skeleton(spec.fields)
        else:
            out[spec.name] = [_skeleton(spec.fields)]
    return out


def repair(parsed: Any, schema: SchemaDescriptor) -> dict[str, Any]:
    """
    Return a copy of parsed where every declared field is present and well typed.

    Never raises. Idempotent: repair(repair(t, s), s) == repair(t, s).
    Keys that the schema does not declare are carried over untouched.
    """
    return _repair_object(parsed, schema.fields)


def _repair_object(value: Any, fields: tuple[FieldSpec, ...]) -> dict[str, Any]:
    source = value if isinstance(value, dict) else {}
    out = {k: copy.deepcopy(v) for k, v in source.items()}
    for spec in fields:
        out[spec.name] = _repair_field(source.get(spec.name, _MISSING), spec)
    return out


def _repair_field(value: Any, spec: FieldSpec) -> Any:
    if spec.type == FieldType.STRING:
        if isinstance(value, str) and value.strip():
            return value
        return spec.default if spec.default is not None else ""

    if spec.type == FieldType.OBJECT:
        return _repair_object(value, spec.fields)

    if spec.type == FieldType.STRING_ARRAY:
        items = [v for v in value if isinstance(v, str) and v.strip()] if isinstance(value, list) else []
        if not items and (spec.non_empty or not isinstance(value, list)):
            return list(spec.default) if spec.default is not None else []
        return items

    # OBJECT_ARRAY
    if isinstance(value, list):
        items = [_repair_object(v, spec.fields) for v in value if isinstance(v, dict)]
    else:
        items = []
    if not items and (spec.non_empty or not isinstance(value, list)):
        defaults = spec.default if spec.default is not None else []
        return [_repair_object(v, spec.fields) for v in defaults]
    return items
