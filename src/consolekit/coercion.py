"""
Conversion of console text tokens into typed values, and back into text.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Any, Optional

from .directory import HostDirectory
from .errors import CoercionError
from .typesys import TUPLE_ARITY, canonical_type, is_enum, tuple_arity, type_name, unwrap_optional

_TRUE_LITERALS = {"true", "1"}
_FALSE_LITERALS = {"false", "0"}
_NUMERIC_PRIMITIVES = (int, float, complex, Decimal, Fraction)
# Digit separators are Python literal syntax, not console syntax.
_DIGIT_SEPARATOR = "_"


def _coerce_tuple(text: str, target_type: Any, arity: tuple[int, int]) -> Any:
    parts = [part.strip() for part in text.split(",")]
    low, high = arity
    if not low <= len(parts) <= high:
        expected = str(low) if low == high else f"{low}-{high}"
        raise CoercionError(
            f"Expected {expected} comma-separated components for {type_name(target_type)}, got {len(parts)} in '{text}'.",
            token=text,
            type_name=type_name(target_type),
        )
    try:
        if any(_DIGIT_SEPARATOR in part for part in parts):
            raise ValueError(text)
        components = [float(part) for part in parts]
    except ValueError:
        raise CoercionError(
            f"Cannot convert '{text}' to {type_name(target_type)}.",
            token=text,
            type_name=type_name(target_type),
        ) from None
    return target_type(*components)


def _coerce_enum(text: str, target_type: Any) -> Any:
    wanted = text.strip().lower()
    for member in target_type:
        if member.name.lower() == wanted:
            return member
    if wanted.lstrip("-").isdigit():
        try:
            return target_type(int(wanted))
        except ValueError:
            pass
    raise CoercionError(
        f"'{text}' is not a valid {type_name(target_type)}. Expected one of: {', '.join(m.name for m in target_type)}.",
        token=text,
        type_name=type_name(target_type),
    )


def _coerce_default(text: str, target_type: Any) -> Any:
    if target_type is str:
        return text
    if target_type in _NUMERIC_PRIMITIVES and _DIGIT_SEPARATOR not in text:
        try:
            return target_type(text.strip())
        except (ValueError, TypeError, ArithmeticError, InvalidOperation):
            pass
    raise CoercionError(
        f"Cannot convert '{text}' to {type_name(target_type)}.",
        token=text,
        type_name=type_name(target_type),
    )


def coerce(text: Optional[str], target_type: Any, directory: Optional[HostDirectory] = None) -> Any:
    """
    Convert ``text`` into a value of ``target_type``.

    Rules apply in order: optional wrapper, numeric tuples, booleans, enums,
    reference-by-name types (delegated to ``directory``), then primitive
    conversion. Raises :class:`CoercionError` when nothing fits.
    """

    if text is None:
        return None
    tag = canonical_type(target_type)
    inner, optional = unwrap_optional(tag)
    if optional:
        if text == "":
            return None
        tag = canonical_type(inner)

    if tag is Any or tag is object:
        return text

    arity = tuple_arity(tag)
    if arity is not None:
        return _coerce_tuple(text, tag, arity)

    if tag is bool:
        lowered = text.strip().lower()
        if lowered in _TRUE_LITERALS:
            return True
        if lowered in _FALSE_LITERALS:
            return False
        raise CoercionError(f"Cannot convert '{text}' to bool.", token=text, type_name="bool")

    if is_enum(tag):
        return _coerce_enum(text, tag)

    if (
        directory is not None
        and directory.reference_types
        and isinstance(tag, type)
        and issubclass(tag, directory.reference_types)
    ):
        found = directory.find_by_name(text)
        if found is None:
            raise CoercionError(
                f"No object named '{text}' found for {type_name(tag)}.",
                token=text,
                type_name=type_name(tag),
            )
        return found

    return _coerce_default(text, tag)


def format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return value.name
    if type(value) in TUPLE_ARITY:
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    return str(value)
