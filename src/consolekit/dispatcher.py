"""
Execution of parsed commands against a cache snapshot and resolved targets.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence

from .cache import CommandCache
from .coercion import coerce, format_value
from .descriptors import MemberCategory, MemberDescriptor, MemberKind
from .directory import HostDirectory
from .errors import ArityError, CommandNotFoundError, ConsoleError, ResolutionError
from .grammar import ParsedCommand, Verb
from .resolver import TargetResolver

logger = logging.getLogger("consolekit.dispatch")

VERB_KINDS = {
    Verb.GET: MemberKind.READABLE,
    Verb.SET: MemberKind.WRITABLE,
    Verb.CALL: MemberKind.CALLABLE,
}

# (owner, label) -> result line; owner and label are None for static commands.
Action = Callable[[Any, Optional[str]], str]


def _qualified(label: Optional[str], member: str) -> str:
    return f"{label}.{member}" if label else member


def lookup_for_verb(cache: CommandCache, verb: Verb, name: str) -> MemberDescriptor:
    descriptor = cache.lookup(name, VERB_KINDS[verb])
    if descriptor is not None:
        return descriptor
    if verb is Verb.SET and cache.lookup(name, MemberKind.READABLE) is not None:
        raise CommandNotFoundError(f"'{name}' is read-only.", command_name=name)
    if verb is Verb.GET and cache.lookup(name, MemberKind.WRITABLE) is not None:
        raise CommandNotFoundError(f"'{name}' has no getter.", command_name=name)
    if verb is Verb.CALL:
        raise CommandNotFoundError(f"No method or callback command found with name '{name}'.", command_name=name)
    raise CommandNotFoundError(f"No property or field command found with name '{name}'.", command_name=name)


class Dispatcher:
    def __init__(self, directory: HostDirectory, resolver: Optional[TargetResolver] = None) -> None:
        self.directory = directory
        self.resolver = resolver or TargetResolver(directory)

    def execute(self, parsed: ParsedCommand, cache: CommandCache) -> str:
        descriptor = lookup_for_verb(cache, parsed.verb, parsed.command_name)
        targets = self._targets_for(descriptor, parsed)
        if parsed.verb is Verb.GET:
            return self._get(descriptor, targets)
        if parsed.verb is Verb.SET:
            return self._set(descriptor, parsed, targets)
        return self._call(descriptor, parsed, targets)

    def _targets_for(self, descriptor: MemberDescriptor, parsed: ParsedCommand) -> List[Any]:
        if descriptor.is_static:
            # Static commands run once in an owner-less context; any selector is ignored.
            return [None]
        requirement = (
            f"Non-static command '{parsed.command_name}' requires a target object. "
            "Use an @ or # selector, or 'select' in an interactive session."
        )
        if parsed.target.is_none:
            raise ResolutionError(requirement)
        targets = self.resolver.resolve(parsed.target)
        if not targets:
            raise ResolutionError(requirement)
        return targets

    def _each(self, descriptor: MemberDescriptor, targets: Sequence[Any], action: Action) -> str:
        lines: List[str] = []
        for target in targets:
            owner: Any = None
            label: Optional[str] = None
            try:
                if target is not None:
                    label = self.directory.display_name(target)
                    owner = self.directory.owner_for(target, descriptor.owner_type)
                    if owner is None:
                        lines.append(f"Error: {label} has no {descriptor.owner_name} component.")
                        continue
                lines.append(action(owner, label))
            except ConsoleError as exc:
                qualified = _qualified(label, descriptor.member_name)
                lines.append(f"Error: {qualified}: {exc.message}")
            except Exception as exc:
                qualified = _qualified(label, descriptor.member_name)
                logger.debug("Command '%s' failed on %s", descriptor.name, qualified, exc_info=True)
                lines.append(f"Error: {qualified} raised {type(exc).__name__}: {exc}")
        return "\n".join(lines)

    def _get(self, descriptor: MemberDescriptor, targets: Sequence[Any]) -> str:
        def action(owner: Any, label: Optional[str]) -> str:
            value = descriptor.read(owner)
            return f"{_qualified(label, descriptor.member_name)} = {format_value(value)}"

        return self._each(descriptor, targets, action)

    def _set(self, descriptor: MemberDescriptor, parsed: ParsedCommand, targets: Sequence[Any]) -> str:
        if parsed.value is None:
            raise ArityError(f"Missing value for 'set {parsed.command_name}'.", expected=1, received=0)
        value = coerce(parsed.value, descriptor.value_type, self.directory)

        def action(owner: Any, label: Optional[str]) -> str:
            descriptor.write(owner, value)
            return f"Set {_qualified(label, descriptor.member_name)} = {format_value(value)}"

        return self._each(descriptor, targets, action)

    def _call(self, descriptor: MemberDescriptor, parsed: ParsedCommand, targets: Sequence[Any]) -> str:
        if len(parsed.args) != descriptor.arity:
            raise ArityError(
                f"Wrong number of arguments for '{parsed.command_name}': "
                f"expected {descriptor.arity}, got {len(parsed.args)}.",
                expected=descriptor.arity,
                received=len(parsed.args),
            )
        values = [
            coerce(text, param.declared_type, self.directory)
            for text, param in zip(parsed.args, descriptor.params)
        ]
        is_callback = descriptor.category is MemberCategory.CALLBACK

        def action(owner: Any, label: Optional[str]) -> str:
            result = descriptor.invoke(owner, values)
            qualified = _qualified(label, descriptor.member_name)
            returned = descriptor.returns_value and not (result is None and descriptor.return_type is Any)
            if is_callback:
                return f"Callback {qualified} returned: {format_value(result)}" if returned else f"Invoked callback {qualified}"
            return f"{qualified}() returned: {format_value(result)}" if returned else f"Called {qualified}()"

        return self._each(descriptor, targets, action)
