"""
Immutable records describing one declared command.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple

from .typesys import is_void, type_name


class MemberKind(str, Enum):
    CALLABLE = "callable"
    READABLE = "readable"
    WRITABLE = "writable"


class MemberCategory(str, Enum):
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    CALLBACK = "callback"


Invoker = Callable[[Any, Sequence[Any]], Any]
Reader = Callable[[Any], Any]
Writer = Callable[[Any, Any], None]


@dataclass(frozen=True)
class ParamSpec:
    declared_type: Any
    name: str

    def describe(self) -> str:
        return f"{type_name(self.declared_type)} {self.name}"


@dataclass(frozen=True)
class MemberDescriptor:
    """
    One command as captured at discovery time.

    ``invoke``/``read``/``write`` are closures bound to the declaring member;
    the instance argument is ``None`` for static commands.
    """

    name: str
    kind: MemberKind
    category: MemberCategory
    member_name: str
    owner_type: Any
    is_static: bool = False
    is_private: bool = False
    params: Tuple[ParamSpec, ...] = ()
    value_type: Any = None
    return_type: Any = None
    invoke: Optional[Invoker] = None
    read: Optional[Reader] = None
    write: Optional[Writer] = None

    @property
    def owner_name(self) -> str:
        return getattr(self.owner_type, "__name__", str(self.owner_type)).rsplit(".", 1)[-1]

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def returns_value(self) -> bool:
        return not is_void(self.return_type)

    def signature_text(self) -> str:
        return ", ".join(param.describe() for param in self.params)

    def type_info(self) -> str:
        """Human readable signature, e.g. ``(method) (float amount) returns float``."""
        if self.category is MemberCategory.METHOD:
            if not self.params:
                return f"(method) returns {type_name(self.return_type)}"
            return f"(method) ({self.signature_text()}) returns {type_name(self.return_type)}"
        if self.category is MemberCategory.CALLBACK:
            return f"(callback) ({self.signature_text()}) returns {type_name(self.return_type)}"
        return f"({self.category.value}) {type_name(self.value_type)}"
