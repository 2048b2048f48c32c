"""
Host directory: the collaborator that knows how to enumerate owner objects.

The console core never walks an object graph itself. It asks a
``HostDirectory`` for objects by name or tag, for the current selection, and
whether an object owns the member a command was declared on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple


def matches_type(instance: Any, owner_type: Any) -> bool:
    """
    ``isinstance``, extended to classes re-created by a module reload.

    A reloaded declaration is a new class object; instances built from the
    previous one still match when module and qualified name agree.
    """
    if not isinstance(owner_type, type):
        return False
    if isinstance(instance, owner_type):
        return True
    key = (owner_type.__module__, owner_type.__qualname__)
    return any((cls.__module__, cls.__qualname__) == key for cls in type(instance).__mro__)


class HostDirectory(ABC):
    #: Types that coercion resolves by looking up an object name.
    reference_types: Tuple[type, ...] = ()

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Any]:
        ...

    @abstractmethod
    def find_all_by_name(self, name: str) -> List[Any]:
        ...

    @abstractmethod
    def find_first_by_tag(self, tag: str) -> Optional[Any]:
        ...

    @abstractmethod
    def find_all_by_tag(self, tag: str) -> List[Any]:
        ...

    def current_selection(self) -> List[Any]:
        return []

    def is_interactive(self) -> bool:
        return False

    def known_names(self) -> List[str]:
        return []

    def known_tags(self) -> List[str]:
        return []

    def owner_for(self, instance: Any, owner_type: Any) -> Optional[Any]:
        """Return the object that owns ``owner_type`` members on ``instance``, if any."""
        if matches_type(instance, owner_type):
            return instance
        return None

    def display_name(self, instance: Any) -> str:
        return str(getattr(instance, "name", None) or type(instance).__name__)


class NullDirectory(HostDirectory):
    """A directory with no objects; only static commands can run against it."""

    def find_by_name(self, name: str) -> Optional[Any]:
        return None

    def find_all_by_name(self, name: str) -> List[Any]:
        return []

    def find_first_by_tag(self, tag: str) -> Optional[Any]:
        return None

    def find_all_by_tag(self, tag: str) -> List[Any]:
        return []


@dataclass(eq=False)
class SceneObject:
    """A named, tagged container of components."""

    name: str
    tags: List[str] = field(default_factory=list)
    components: List[Any] = field(default_factory=list)

    def add_component(self, component: Any) -> Any:
        self.components.append(component)
        return component

    def get_component(self, component_type: Any) -> Optional[Any]:
        for component in self.components:
            if matches_type(component, component_type):
                return component
        return None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"SceneObject({self.name!r}, tags={self.tags!r})"


class SceneDirectory(HostDirectory):
    """In-memory scene of :class:`SceneObject` entries, in insertion order."""

    reference_types = (SceneObject,)

    def __init__(self, objects: Iterable[SceneObject] = (), interactive: bool = False) -> None:
        self._objects: List[SceneObject] = list(objects)
        self._selection: List[SceneObject] = []
        self.interactive = interactive

    @property
    def objects(self) -> List[SceneObject]:
        return list(self._objects)

    def add(self, obj: SceneObject) -> SceneObject:
        self._objects.append(obj)
        return obj

    def spawn(self, name: str, *components: Any, tags: Iterable[str] = ()) -> SceneObject:
        return self.add(SceneObject(name=name, tags=list(tags), components=list(components)))

    def remove(self, obj: SceneObject) -> None:
        self._objects = [item for item in self._objects if item is not obj]
        self._selection = [item for item in self._selection if item is not obj]

    def select(self, *objects: SceneObject) -> None:
        self._selection = list(objects)

    def find_by_name(self, name: str) -> Optional[SceneObject]:
        for obj in self._objects:
            if obj.name == name:
                return obj
        return None

    def find_all_by_name(self, name: str) -> List[SceneObject]:
        return [obj for obj in self._objects if obj.name == name]

    def find_first_by_tag(self, tag: str) -> Optional[SceneObject]:
        for obj in self._objects:
            if tag in obj.tags:
                return obj
        return None

    def find_all_by_tag(self, tag: str) -> List[SceneObject]:
        return [obj for obj in self._objects if tag in obj.tags]

    def current_selection(self) -> List[SceneObject]:
        return list(self._selection)

    def is_interactive(self) -> bool:
        return self.interactive

    def known_names(self) -> List[str]:
        return list(dict.fromkeys(obj.name for obj in self._objects))

    def known_tags(self) -> List[str]:
        return list(dict.fromkeys(tag for obj in self._objects for tag in obj.tags))

    def owner_for(self, instance: Any, owner_type: Any) -> Optional[Any]:
        owner = super().owner_for(instance, owner_type)
        if owner is None and isinstance(instance, SceneObject):
            owner = instance.get_component(owner_type)
        return owner

    def display_name(self, instance: Any) -> str:
        if isinstance(instance, SceneObject):
            return instance.name
        return super().display_name(instance)
