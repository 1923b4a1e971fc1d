from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence

from ..errors import ValidationError

ParamKind = Literal["string", "integer", "number", "boolean", "object", "array"]

_PY_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}


@dataclass(frozen=True)
class ParamSpec:
    name: str
    kind: ParamKind
    description: str = ""
    required: bool = False
    min_length: int | None = None  # strings only

    def __post_init__(self):
        if self.kind not in _PY_TYPES:
            raise ValueError(f"Unsupported parameter kind for {self.name!r}: {self.kind!r}")

    def matches(self, value: Any) -> bool:
        # bool is an int subclass, but JSON true is not a number
        if isinstance(value, bool) and self.kind != "boolean":
            return False
        return isinstance(value, _PY_TYPES[self.kind])

    def to_json_schema(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.kind}
        if self.description:
            d["description"] = self.description
        if self.min_length is not None:
            d["minLength"] = self.min_length
        return d


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    for kind in ("integer", "number", "string", "object", "array"):
        if isinstance(value, _PY_TYPES[kind]):
            return kind
    return type(value).__name__


def input_schema(params: Sequence[ParamSpec]) -> dict[str, Any]:
    """Render parameter specs as the JSON Schema object advertised to clients."""
    return {
        "type": "object",
        "properties": {p.name: p.to_json_schema() for p in params},
        "required": [p.name for p in params if p.required],
    }


def validate_arguments(params: Sequence[ParamSpec], arguments: Any) -> dict[str, Any]:
    """Check `arguments` against `params` and return only the declared ones.

    Raises ValidationError naming the first offending parameter, in
    declaration order.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ValidationError(f"Invalid arguments: expected an object, got {_type_name(arguments)}")

    out: dict[str, Any] = {}
    for p in params:
        if p.name not in arguments:
            if p.required:
                raise ValidationError(f"Missing required parameter: {p.name}", param=p.name)
            continue
        value = arguments[p.name]
        if not p.matches(value):
            raise ValidationError(
                f"Invalid type for parameter '{p.name}': expected {p.kind}, got {_type_name(value)}",
                param=p.name,
            )
        if p.min_length is not None and isinstance(value, str) and len(value) < p.min_length:
            raise ValidationError(
                f"Invalid value for parameter '{p.name}': must be at least {p.min_length} character(s)",
                param=p.name,
            )
        out[p.name] = value
    return out
