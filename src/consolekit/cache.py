"""
Build-once command cache and the process-wide slot that holds it.

A cache is never mutated after ``build``; a rebuild produces a new cache and
swaps the reference, so calls already running on the old snapshot finish
against it undisturbed.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .descriptors import MemberDescriptor, MemberKind
from .discovery import discover_commands, owner_namespace

logger = logging.getLogger("consolekit.cache")

EXAMPLES_NAMESPACE = "consolekit.demo"


def _empty_map() -> Mapping[str, Any]:
    return MappingProxyType({})


def _matches_namespace(namespace: str, prefixes: Sequence[str]) -> bool:
    lowered = namespace.lower()
    return any(lowered.startswith(prefix.lower()) for prefix in prefixes)


@dataclass(frozen=True)
class CommandCache:
    callables: Mapping[str, MemberDescriptor] = field(default_factory=_empty_map)
    readables: Mapping[str, MemberDescriptor] = field(default_factory=_empty_map)
    writables: Mapping[str, MemberDescriptor] = field(default_factory=_empty_map)
    owner_types: Mapping[str, Any] = field(default_factory=_empty_map)
    static_flags: Mapping[str, bool] = field(default_factory=_empty_map)
    built_at: float = field(default_factory=time.time)

    @classmethod
    def empty(cls) -> "CommandCache":
        return cls()

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[MemberDescriptor]) -> "CommandCache":
        maps: Dict[MemberKind, Dict[str, MemberDescriptor]] = {kind: {} for kind in MemberKind}
        owner_types: Dict[str, Any] = {}
        static_flags: Dict[str, bool] = {}
        for descriptor in descriptors:
            # Later registrations shadow earlier ones.
            maps[descriptor.kind][descriptor.name] = descriptor
            owner_types[descriptor.name] = descriptor.owner_type
            static_flags[descriptor.name] = descriptor.is_static
        return cls(
            callables=MappingProxyType(maps[MemberKind.CALLABLE]),
            readables=MappingProxyType(maps[MemberKind.READABLE]),
            writables=MappingProxyType(maps[MemberKind.WRITABLE]),
            owner_types=MappingProxyType(owner_types),
            static_flags=MappingProxyType(static_flags),
        )

    @classmethod
    def build(
        cls,
        type_universe: Iterable[Any],
        include_private: bool = False,
        include_namespaces: Sequence[str] = (),
        exclude_namespaces: Sequence[str] = (),
        include_examples: bool = True,
    ) -> "CommandCache":
        descriptors: List[MemberDescriptor] = []
        for descriptor in discover_commands(type_universe, include_private=include_private):
            namespace = owner_namespace(descriptor.owner_type)
            if exclude_namespaces and _matches_namespace(namespace, exclude_namespaces):
                continue
            if include_namespaces and not _matches_namespace(namespace, include_namespaces):
                continue
            if not include_examples and _matches_namespace(namespace, [EXAMPLES_NAMESPACE]):
                continue
            descriptors.append(descriptor)
        cache = cls.from_descriptors(descriptors)
        logger.info("%d commands registered", len(descriptors))
        return cache

    def _map_for(self, kind: MemberKind) -> Mapping[str, MemberDescriptor]:
        if kind is MemberKind.CALLABLE:
            return self.callables
        if kind is MemberKind.READABLE:
            return self.readables
        return self.writables

    def lookup(self, name: str, kind: MemberKind) -> Optional[MemberDescriptor]:
        if not name:
            return None
        return self._map_for(kind).get(name.lower())

    def names_for(self, kind: MemberKind) -> List[str]:
        return sorted(self._map_for(kind))

    def describe(self, name: str) -> Optional[MemberDescriptor]:
        for kind in MemberKind:
            descriptor = self.lookup(name, kind)
            if descriptor is not None:
                return descriptor
        return None

    def command_names(self) -> List[str]:
        names = set(self.callables) | set(self.readables) | set(self.writables)
        return sorted(names)

    def total_count(self) -> int:
        return len(self.callables) + len(self.readables) + len(self.writables)

    def is_empty(self) -> bool:
        return self.total_count() == 0


class CacheHolder:
    """
    Slot holding the current cache snapshot.

    Readers take ``snapshot()`` once per call; writers replace the reference
    wholesale after a build completes.
    """

    def __init__(self, cache: Optional[CommandCache] = None) -> None:
        self._cache = cache or CommandCache.empty()
        self._write_lock = threading.Lock()
        self.generation = 0

    def snapshot(self) -> CommandCache:
        return self._cache

    def install(self, cache: CommandCache) -> CommandCache:
        with self._write_lock:
            self._cache = cache
            self.generation += 1
        return cache

    def rebuild(self, type_universe: Iterable[Any], **build_options: Any) -> CommandCache:
        return self.install(CommandCache.build(type_universe, **build_options))


_GLOBAL_HOLDER = CacheHolder()


def global_holder() -> CacheHolder:
    return _GLOBAL_HOLDER
