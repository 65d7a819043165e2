"""Declared input schemas and their enforcement.

A capability declares its fields as ``FieldSpec`` values.  The same
declaration renders the JSON schema shown by ``listTools`` and is
checked by ``validate_arguments`` before a handler runs.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping

from protocol.toolcall import INVALID_PARAMS

_MISSING: Any = object()

_PY_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "boolean": (bool,),
    "number": (int, float),
    "array": (list,),
    "object": (dict,),
}


class InvalidParamsError(Exception):
    """Raised when arguments do not satisfy a capability's schema."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        self.code = INVALID_PARAMS
        super().__init__("Invalid arguments: " + "; ".join(problems))


@dataclass(frozen=True, slots=True)
class FieldSpec:
    type: str
    description: str = ""
    required: bool = False
    enum: tuple[str, ...] | None = None
    default: Any = _MISSING
    items: "FieldSpec | None" = None
    properties: Mapping[str, "FieldSpec"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.type not in _PY_TYPES:
            raise ValueError(f"unsupported field type {self.type!r}")

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    def to_json_schema(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.type}
        if self.description:
            d["description"] = self.description
        if self.enum is not None:
            d["enum"] = list(self.enum)
        if self.has_default:
            d["default"] = self.default
        if self.items is not None:
            d["items"] = self.items.to_json_schema()
        if self.properties:
            d.update(object_schema(self.properties))
        return d

    def check(self, value: Any, path: str) -> tuple[Any, list[str]]:
        """Return the accepted value and any problems found at *path*."""
        # bool is an int subclass; keep it out of "number"
        if not isinstance(value, _PY_TYPES[self.type]) or (
            self.type == "number" and isinstance(value, bool)
        ):
            return value, [f"{path}: expected {self.type}"]

        if self.enum is not None and value not in self.enum:
            return value, [f"{path}: must be one of {', '.join(self.enum)}"]

        if self.type == "array" and self.items is not None:
            problems: list[str] = []
            checked = []
            for i, item in enumerate(value):
                item, item_problems = self.items.check(item, f"{path}[{i}]")
                checked.append(item)
                problems.extend(item_problems)
            return checked, problems

        if self.type == "object" and self.properties:
            return _validate(self.properties, value, prefix=f"{path}.")

        return value, []


# ── Declaration helpers ─────────────────────────────────────────────


def string(
    description: str = "",
    *,
    required: bool = False,
    enum: tuple[str, ...] | list[str] | None = None,
    default: Any = _MISSING,
) -> FieldSpec:
    return FieldSpec(
        "string",
        description,
        required=required,
        enum=tuple(enum) if enum is not None else None,
        default=default,
    )


def boolean(description: str = "", *, required: bool = False, default: Any = _MISSING) -> FieldSpec:
    return FieldSpec("boolean", description, required=required, default=default)


def array(description: str = "", *, required: bool = False, items: str = "string") -> FieldSpec:
    return FieldSpec("array", description, required=required, items=FieldSpec(items))


def obj(description: str = "", *, required: bool = False, **properties: FieldSpec) -> FieldSpec:
    return FieldSpec("object", description, required=required, properties=properties)


# ── Rendering & enforcement ─────────────────────────────────────────


def object_schema(fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
    """Render *fields* as a JSON-schema ``object``."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {name: spec.to_json_schema() for name, spec in fields.items()},
    }
    required = [name for name, spec in fields.items() if spec.required]
    if required:
        schema["required"] = required
    return schema


def _validate(
    fields: Mapping[str, FieldSpec],
    arguments: Mapping[str, Any],
    prefix: str = "",
) -> tuple[dict[str, Any], list[str]]:
    accepted: dict[str, Any] = {}
    problems: list[str] = []
    for name, spec in fields.items():
        value = arguments.get(name)
        if value is None:
            if spec.has_default:
                accepted[name] = copy.deepcopy(spec.default)
            elif spec.required:
                problems.append(f"{prefix}{name}: required")
            continue
        value, field_problems = spec.check(value, f"{prefix}{name}")
        problems.extend(field_problems)
        accepted[name] = value
    return accepted, problems


def validate_arguments(
    fields: Mapping[str, FieldSpec],
    arguments: Mapping[str, Any],
) -> dict[str, Any]:
    """Check *arguments* against *fields* and return the accepted subset.

    Defaults are filled in and undeclared keys are dropped.  Raises
    ``InvalidParamsError`` listing every problem found.
    """
    accepted, problems = _validate(fields, arguments)
    if problems:
        raise InvalidParamsError(problems)
    return accepted
