"""
Selector semantics on top of the host directory.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .directory import HostDirectory
from .errors import ResolutionError
from .grammar import TargetKind, TargetSpec


class TargetResolver:
    def __init__(self, directory: HostDirectory, interactive: Optional[bool] = None) -> None:
        self.directory = directory
        self.interactive = interactive

    def is_interactive(self) -> bool:
        if self.interactive is not None:
            return self.interactive
        return self.directory.is_interactive()

    def resolve(self, spec: TargetSpec) -> List[Any]:
        kind, ident = spec.kind, spec.identifier or ""
        if kind is TargetKind.NONE:
            return []
        if kind is TargetKind.BY_NAME:
            found = self.directory.find_by_name(ident)
            if found is None:
                raise ResolutionError(f"Object with name '{ident}' not found.")
            return [found]
        if kind is TargetKind.ALL_BY_NAME:
            matches = list(self.directory.find_all_by_name(ident))
            if not matches:
                raise ResolutionError(f"No objects with name '{ident}' found.")
            return matches
        if kind is TargetKind.BY_TAG:
            found = self.directory.find_first_by_tag(ident)
            if found is None:
                raise ResolutionError(f"No objects with tag '{ident}' found.")
            return [found]
        if kind is TargetKind.ALL_BY_TAG:
            matches = list(self.directory.find_all_by_tag(ident))
            if not matches:
                raise ResolutionError(f"No objects with tag '{ident}' found.")
            return matches
        if kind is TargetKind.SELECTION:
            if not self.is_interactive():
                raise ResolutionError("'select' can only be used in an interactive session.")
            selection = list(self.directory.current_selection())
            if not selection:
                raise ResolutionError("No object selected.")
            return selection
        raise ResolutionError(f"Unknown target selector '{spec}'.")
