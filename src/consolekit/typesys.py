"""
Type tags understood by the console: primitives, enums, optionals and the
small numeric tuple types used for positions and colours.
"""

from __future__ import annotations

import types
from enum import Enum
from typing import Any, List, NamedTuple, Tuple, Union, get_args, get_origin

NoneType = type(None)


def _format_components(values: Tuple[float, ...]) -> str:
    return "(" + ", ".join(repr(float(v)) for v in values) + ")"


class Vector2(NamedTuple):
    x: float
    y: float

    def __str__(self) -> str:
        return _format_components(self)


class Vector3(NamedTuple):
    x: float
    y: float
    z: float

    def __str__(self) -> str:
        return _format_components(self)


class Vector4(NamedTuple):
    x: float
    y: float
    z: float
    w: float

    def __str__(self) -> str:
        return _format_components(self)


class Color(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 1.0

    def __str__(self) -> str:
        return "RGBA" + _format_components(self)


# (min, max) component counts accepted for each tuple type.
TUPLE_ARITY = {
    Vector2: (2, 2),
    Vector3: (3, 3),
    Vector4: (4, 4),
    Color: (3, 4),
}

_ALIASES = {
    "float": float,
    "single": float,
    "float32": float,
    "system.single": float,
    "double": float,
    "float64": float,
    "system.double": float,
    "int": int,
    "int32": int,
    "integer": int,
    "system.int32": int,
    "bool": bool,
    "boolean": bool,
    "system.boolean": bool,
    "str": str,
    "string": str,
    "system.string": str,
    "vector2": Vector2,
    "vector3": Vector3,
    "vector4": Vector4,
    "color": Color,
}

_PRIMITIVE_NAMES = {int: "int", float: "float", bool: "bool", str: "string"}


def canonical_type(tag: Any) -> Any:
    """Collapse alias spellings (``"float32"``, ``"System.Int32"``...) to one type."""
    if isinstance(tag, str):
        return _ALIASES.get(tag.strip().lower(), tag)
    return tag


def unwrap_optional(tag: Any) -> Tuple[Any, bool]:
    origin = get_origin(tag)
    if origin is Union or origin is types.UnionType:
        args = get_args(tag)
        inner = [arg for arg in args if arg is not NoneType]
        if len(inner) == 1 and len(args) == 2:
            return inner[0], True
    return tag, False


def is_void(tag: Any) -> bool:
    return tag is None or tag is NoneType


def is_enum(tag: Any) -> bool:
    return isinstance(tag, type) and issubclass(tag, Enum)


def is_bool(tag: Any) -> bool:
    return canonical_type(tag) is bool


def tuple_arity(tag: Any) -> Tuple[int, int] | None:
    return TUPLE_ARITY.get(tag)


def enum_names(tag: Any) -> List[str]:
    inner, _ = unwrap_optional(canonical_type(tag))
    if not is_enum(inner):
        return []
    return [member.name for member in inner]


def type_name(tag: Any) -> str:
    tag = canonical_type(tag)
    if is_void(tag):
        return "void"
    if tag is Any:
        return "object"
    inner, optional = unwrap_optional(tag)
    if optional:
        return f"{type_name(inner)}?"
    if tag in _PRIMITIVE_NAMES:
        return _PRIMITIVE_NAMES[tag]
    if isinstance(tag, str):
        return tag
    return getattr(tag, "__name__", str(tag))
