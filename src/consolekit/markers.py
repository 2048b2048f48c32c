"""
Declaration markers: the decorators and field factories that application
code uses to expose members to the console.

    class Player:
        health: float = command_field(100.0)
        ammo: int = command_field(30, name="ammo")

        @command
        def resethealth(self) -> None: ...

        @command("god")
        def set_invincible(self, enabled: bool) -> None: ...

        @command
        @property
        def score(self) -> int: ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .errors import DeclarationError

MARKER_ATTR = "__command_marker__"


@dataclass(frozen=True)
class CommandMarker:
    name: Optional[str] = None
    include_private: bool = False

    def command_name(self, attr_name: str) -> str:
        return (self.name or attr_name).lower()


class CommandProperty(property):
    """A property carrying a command marker across getter/setter chaining."""

    marker: CommandMarker

    def getter(self, fget):
        prop = super().getter(fget)
        prop.marker = self.marker
        return prop

    def setter(self, fset):
        prop = super().setter(fset)
        prop.marker = self.marker
        return prop

    def deleter(self, fdel):
        prop = super().deleter(fdel)
        prop.marker = self.marker
        return prop


class CommandField:
    """
    Data descriptor for a console-visible field.

    Instance fields keep their value in the instance ``__dict__``; static
    fields hold a single class-wide value on the descriptor itself.
    """

    def __init__(
        self,
        default: Any = None,
        *,
        name: Optional[str] = None,
        static: bool = False,
        readonly: bool = False,
        include_private: bool = False,
        value_type: Any = None,
    ) -> None:
        self.default = default
        self.marker = CommandMarker(name=name.lower() if name else None, include_private=include_private)
        self.static = static
        self.readonly = readonly
        self.value_type = value_type
        self.attr_name: Optional[str] = None
        self.owner: Any = None
        self._static_value = default

    def __set_name__(self, owner: Any, name: str) -> None:
        self.attr_name = name
        self.owner = owner

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        if self.static:
            return self._static_value
        if instance is None:
            return self
        return instance.__dict__.get(self.attr_name, self.default)

    def __set__(self, instance: Any, value: Any) -> None:
        if self.static:
            self._static_value = value
            return
        instance.__dict__[self.attr_name] = value

    def get_static(self) -> Any:
        return self._static_value

    def set_static(self, value: Any) -> None:
        self._static_value = value


class CommandCallback(CommandField):
    """A field holding an invokable callback (or ``None`` when unassigned)."""

    def __init__(
        self,
        *params: Any,
        name: Optional[str] = None,
        static: bool = False,
        returns: Any = None,
        include_private: bool = False,
        default: Any = None,
    ) -> None:
        super().__init__(default, name=name, static=static, include_private=include_private)
        self.params: Sequence[Any] = params
        self.returns = returns


def _attach(target: Any, marker: CommandMarker) -> Any:
    if isinstance(target, property):
        marked = CommandProperty(target.fget, target.fset, target.fdel, target.__doc__)
        marked.marker = marker
        return marked
    if isinstance(target, (staticmethod, classmethod)):
        setattr(target.__func__, MARKER_ATTR, marker)
        return target
    if isinstance(target, CommandField):
        raise DeclarationError("Use command_field(name=...) instead of @command on a field")
    if callable(target):
        setattr(target, MARKER_ATTR, marker)
        return target
    raise DeclarationError(f"@command cannot mark objects of type {type(target).__name__}")


def command(target: Any = None, *, name: Optional[str] = None, include_private: bool = False) -> Any:
    """
    Mark a function, method, staticmethod, classmethod or property as a command.

    Usable bare (``@command``), with an explicit name (``@command("god")``) or
    with keywords (``@command(name="god", include_private=True)``).
    """

    if isinstance(target, str):
        name, target = target, None
    marker = CommandMarker(name=name.lower() if name else None, include_private=include_private)
    if target is None:
        return lambda obj: _attach(obj, marker)
    return _attach(target, marker)


def command_field(
    default: Any = None,
    *,
    name: Optional[str] = None,
    static: bool = False,
    readonly: bool = False,
    include_private: bool = False,
    value_type: Any = None,
) -> Any:
    return CommandField(
        default,
        name=name,
        static=static,
        readonly=readonly,
        include_private=include_private,
        value_type=value_type,
    )


def command_callback(
    *params: Any,
    name: Optional[str] = None,
    static: bool = False,
    returns: Any = None,
    include_private: bool = False,
    default: Any = None,
) -> Any:
    return CommandCallback(
        *params,
        name=name,
        static=static,
        returns=returns,
        include_private=include_private,
        default=default,
    )


def get_marker(obj: Any) -> Optional[CommandMarker]:
    if isinstance(obj, (CommandProperty, CommandField)):
        return obj.marker
    if isinstance(obj, (staticmethod, classmethod)):
        obj = obj.__func__
    marker = getattr(obj, MARKER_ATTR, None)
    return marker if isinstance(marker, CommandMarker) else None
