"""
Discovery of declared commands.

The decorators in :mod:`consolekit.markers` act as the registration table;
this module walks an explicit type universe (classes and modules), reads the
markers and captures typed invocation thunks for each marked member.
"""

from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, Callable, Dict, Iterable, Iterator, List, Sequence

from .descriptors import MemberCategory, MemberDescriptor, MemberKind, ParamSpec
from .errors import DeclarationError, InvocationError
from .markers import CommandCallback, CommandField, CommandMarker, CommandProperty, get_marker
from .typesys import unwrap_optional

logger = logging.getLogger("consolekit.discovery")


def is_private_name(name: str) -> bool:
    return name.startswith("_") and not (name.startswith("__") and name.endswith("__"))


def owner_namespace(owner: Any) -> str:
    if inspect.ismodule(owner):
        return owner.__name__
    return getattr(owner, "__module__", "") or ""


def owner_label(owner: Any) -> str:
    if inspect.ismodule(owner):
        return owner.__name__
    return f"{owner_namespace(owner)}.{getattr(owner, '__qualname__', owner)}"


def iter_owners(type_universe: Iterable[Any]) -> Iterator[Any]:
    """Expand modules into themselves plus the classes they define."""
    seen: set[int] = set()
    for entry in type_universe:
        candidates: List[Any] = []
        if inspect.ismodule(entry):
            candidates.append(entry)
            for value in list(vars(entry).values()):
                if inspect.isclass(value) and value.__module__ == entry.__name__:
                    candidates.append(value)
        elif inspect.isclass(entry):
            candidates.append(entry)
        else:
            logger.error("Skipping %r: type universe entries must be classes or modules", entry)
            continue
        for owner in candidates:
            if id(owner) in seen:
                continue
            seen.add(id(owner))
            yield owner


def _type_hints(obj: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception:  # unresolved forward references fall back to raw strings
        return dict(getattr(obj, "__annotations__", {}) or {})


def _signature(func: Callable[..., Any], skip_first: bool) -> tuple[tuple[ParamSpec, ...], Any]:
    hints = _type_hints(func)
    parameters = list(inspect.signature(func).parameters.values())
    if skip_first:
        parameters = parameters[1:]
    params: List[ParamSpec] = []
    for param in parameters:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            raise DeclarationError(f"Command '{func.__name__}' cannot declare variadic parameter '{param.name}'")
        params.append(ParamSpec(hints.get(param.name, str), param.name))
    return tuple(params), hints.get("return", Any)


def _method_invoker(attr_name: str) -> Callable[[Any, Sequence[Any]], Any]:
    def invoke(instance: Any, args: Sequence[Any]) -> Any:
        return getattr(instance, attr_name)(*args)

    return invoke


def _static_invoker(func: Callable[..., Any], bound: Any = None) -> Callable[[Any, Sequence[Any]], Any]:
    if bound is None:
        return lambda _instance, args: func(*args)
    return lambda _instance, args: func(bound, *args)


def _attr_reader(attr_name: str) -> Callable[[Any], Any]:
    return lambda instance: getattr(instance, attr_name)


def _attr_writer(attr_name: str) -> Callable[[Any, Any], None]:
    def write(instance: Any, value: Any) -> None:
        setattr(instance, attr_name, value)

    return write


def _describe_function(
    owner: Any, attr_name: str, raw: Any, name: str, private: bool
) -> MemberDescriptor:
    if inspect.ismodule(owner):
        func, skip_first, static, invoke = raw, False, True, _static_invoker(raw)
    elif isinstance(raw, staticmethod):
        func = raw.__func__
        skip_first, static, invoke = False, True, _static_invoker(func)
    elif isinstance(raw, classmethod):
        func = raw.__func__
        skip_first, static, invoke = True, True, _static_invoker(func, bound=owner)
    else:
        func, skip_first, static, invoke = raw, True, False, _method_invoker(attr_name)
    params, return_type = _signature(func, skip_first)
    return MemberDescriptor(
        name=name,
        kind=MemberKind.CALLABLE,
        category=MemberCategory.METHOD,
        member_name=attr_name,
        owner_type=owner,
        is_static=static,
        is_private=private,
        params=params,
        return_type=return_type,
        invoke=invoke,
    )


def _describe_property(
    owner: Any, attr_name: str, prop: CommandProperty, name: str, private: bool
) -> List[MemberDescriptor]:
    value_type: Any = None
    if prop.fget is not None:
        value_type = _type_hints(prop.fget).get("return")
    if value_type is None and prop.fset is not None:
        setter_params, _ = _signature(prop.fset, skip_first=True)
        if setter_params:
            value_type = setter_params[0].declared_type
    value_type = value_type if value_type is not None else Any

    base = dict(
        name=name,
        category=MemberCategory.PROPERTY,
        member_name=attr_name,
        owner_type=owner,
        is_private=private,
        value_type=value_type,
    )
    descriptors: List[MemberDescriptor] = []
    if prop.fget is not None:
        descriptors.append(MemberDescriptor(kind=MemberKind.READABLE, read=_attr_reader(attr_name), **base))
    if prop.fset is not None:
        descriptors.append(MemberDescriptor(kind=MemberKind.WRITABLE, write=_attr_writer(attr_name), **base))
    return descriptors


def _field_value_type(field: CommandField, attr_name: str, hints: Dict[str, Any]) -> Any:
    if field.value_type is not None:
        return field.value_type
    if attr_name in hints:
        return hints[attr_name]
    if field.default is not None:
        return type(field.default)
    return str


def _describe_field(
    owner: Any, attr_name: str, field: CommandField, name: str, private: bool, hints: Dict[str, Any]
) -> List[MemberDescriptor]:
    if field.static:
        read = lambda _instance: field.get_static()  # noqa: E731
        write = lambda _instance, value: field.set_static(value)  # noqa: E731
    else:
        read = _attr_reader(attr_name)
        write = _attr_writer(attr_name)
    base = dict(
        name=name,
        category=MemberCategory.FIELD,
        member_name=attr_name,
        owner_type=owner,
        is_static=field.static,
        is_private=private,
        value_type=_field_value_type(field, attr_name, hints),
    )
    descriptors = [MemberDescriptor(kind=MemberKind.READABLE, read=read, **base)]
    if not field.readonly:
        descriptors.append(MemberDescriptor(kind=MemberKind.WRITABLE, write=write, **base))
    return descriptors


def _callback_signature(
    callback: CommandCallback, attr_name: str, hints: Dict[str, Any]
) -> tuple[tuple[ParamSpec, ...], Any]:
    if callback.params:
        params: List[ParamSpec] = []
        for index, spec in enumerate(callback.params):
            if isinstance(spec, tuple):
                param_name, declared = spec
                params.append(ParamSpec(declared, param_name))
            else:
                params.append(ParamSpec(spec, f"arg{index}"))
        return tuple(params), callback.returns
    annotation, _ = unwrap_optional(hints.get(attr_name))
    args = typing.get_args(annotation)
    if args and isinstance(args[0], list):
        params = tuple(ParamSpec(declared, f"arg{index}") for index, declared in enumerate(args[0]))
        returns = callback.returns if callback.returns is not None else args[1]
        return params, returns
    return (), callback.returns


def _describe_callback(
    owner: Any, attr_name: str, callback: CommandCallback, name: str, private: bool, hints: Dict[str, Any]
) -> MemberDescriptor:
    params, return_type = _callback_signature(callback, attr_name, hints)

    def invoke(instance: Any, args: Sequence[Any]) -> Any:
        target = callback.get_static() if callback.static else getattr(instance, attr_name)
        if target is None:
            raise InvocationError("callback is not assigned.")
        return target(*args)

    return MemberDescriptor(
        name=name,
        kind=MemberKind.CALLABLE,
        category=MemberCategory.CALLBACK,
        member_name=attr_name,
        owner_type=owner,
        is_static=callback.static,
        is_private=private,
        params=params,
        return_type=return_type,
        invoke=invoke,
    )


def describe_owner(owner: Any, include_private: bool = False) -> List[MemberDescriptor]:
    """Describe every marked member declared directly on ``owner``."""
    is_module = inspect.ismodule(owner)
    hints = {} if is_module else _type_hints(owner)
    descriptors: List[MemberDescriptor] = []
    for attr_name, raw in list(vars(owner).items()):
        marker: CommandMarker | None = get_marker(raw)
        if marker is None:
            continue
        private = is_private_name(attr_name)
        if private and not (include_private or marker.include_private):
            continue
        name = marker.command_name(attr_name)
        if isinstance(raw, CommandCallback):
            descriptors.append(_describe_callback(owner, attr_name, raw, name, private, hints))
        elif isinstance(raw, CommandField):
            descriptors.extend(_describe_field(owner, attr_name, raw, name, private, hints))
        elif isinstance(raw, CommandProperty):
            descriptors.extend(_describe_property(owner, attr_name, raw, name, private))
        elif is_module:
            if inspect.isfunction(raw) and raw.__module__ == owner.__name__:
                descriptors.append(_describe_function(owner, attr_name, raw, name, private))
        else:
            descriptors.append(_describe_function(owner, attr_name, raw, name, private))
    return descriptors


def discover_commands(type_universe: Iterable[Any], include_private: bool = False) -> List[MemberDescriptor]:
    descriptors: List[MemberDescriptor] = []
    for owner in iter_owners(type_universe):
        try:
            descriptors.extend(describe_owner(owner, include_private=include_private))
        except Exception as exc:
            logger.error("Error processing %s: %s", owner_label(owner), exc)
    return descriptors
