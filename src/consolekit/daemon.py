"""
Reload daemon: re-imports command modules and rebuilds the cache when their
source files change.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .cache import CommandCache
from .console import CommandConsole
from .errors import ConsoleError
from .logs import log_event
from .markers import CommandCallback, CommandField

logger = logging.getLogger("consolekit.daemon")


def _format_error(exc: Exception, module_name: Optional[str] = None) -> str:
    prefix = module_name or "command modules"
    if isinstance(exc, ConsoleError):
        return f"{prefix}: [{exc.code}] {exc.message}"
    return f"{prefix}: {type(exc).__name__}: {exc}"


def _static_fields(module: Any) -> Iterator[Tuple[Tuple[str, str], CommandField]]:
    for owner in list(vars(module).values()):
        if not inspect.isclass(owner) or owner.__module__ != module.__name__:
            continue
        for attr_name, raw in list(vars(owner).items()):
            # Callbacks keep the defaults of the fresh source.
            if isinstance(raw, CommandField) and raw.static and not isinstance(raw, CommandCallback):
                yield (owner.__qualname__, attr_name), raw


def _load_module(name: str) -> Any:
    """Import ``name``, or reload it keeping the values of its static command fields."""
    module = sys.modules.get(name)
    if module is None:
        return importlib.import_module(name)
    saved: Dict[Tuple[str, str], Any] = {key: raw.get_static() for key, raw in _static_fields(module)}
    module = importlib.reload(module)
    for key, raw in _static_fields(module):
        if key in saved:
            raw.set_static(saved[key])
    return module


def _module_dir(module: Any) -> Optional[Path]:
    source = getattr(module, "__file__", None)
    return Path(source).resolve().parent if source else None


@dataclass
class ConsoleDaemon:
    """
    Keeps a console's cache in step with the command modules on disk.

    ``module_names`` are re-imported on every reload; ``extra_owners`` (classes
    or modules that are not reloaded) are appended to the type universe as-is.
    """

    console: CommandConsole
    module_names: Sequence[str] = ()
    extra_owners: Sequence[Any] = ()
    watch_paths: List[Path] = field(default_factory=list)
    last_error: str | None = None
    last_built_at: float | None = None
    _observer: Optional[Observer] = None
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def logs(self):
        return self.console.logs

    def ensure_cache(self, raise_on_error: bool = True) -> CommandCache | None:
        current: Optional[str] = None
        try:
            universe: List[Any] = []
            for name in self.module_names:
                current = name
                universe.append(_load_module(name))
            current = None
            universe.extend(self.extra_owners)
            cache = self.console.build(universe)
        except Exception as exc:
            message = _format_error(exc, current)
            logger.error("Reload failed: %s", message)
            with self._lock:
                self.last_error = message
            log_event(self.logs, "cache_reload_error", level="error", message=message)
            if raise_on_error:
                raise RuntimeError(message) from exc
            return None
        with self._lock:
            self.last_error = None
            self.last_built_at = time.time()
        logger.info("Reloaded %d commands", cache.total_count())
        log_event(self.logs, "cache_reloaded", level="info", commands=cache.total_count())
        return cache

    def resolve_watch_paths(self) -> List[Path]:
        if self.watch_paths:
            return list(self.watch_paths)
        paths: List[Path] = []
        for name in self.module_names:
            module_path = _module_dir(sys.modules.get(name))
            if module_path is not None and module_path not in paths:
                paths.append(module_path)
        return paths

    def start_watcher(self, debounce_seconds: float = 0.5) -> bool:
        if self._observer is not None:
            return False
        paths = self.resolve_watch_paths()
        if not paths:
            return False
        handler = _SourceFileEventHandler(self, debounce_seconds=debounce_seconds)
        observer = Observer()
        for path in paths:
            observer.schedule(handler, str(path), recursive=True)
        observer.start()
        self._observer = observer
        log_event(self.logs, "watcher_started", level="info", paths=[str(p) for p in paths])
        return True

    def stop_watcher(self) -> None:
        observer = self._observer
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=2)
        self._observer = None
        log_event(self.logs, "watcher_stopped", level="info")


class _SourceFileEventHandler(FileSystemEventHandler):  # pragma: no cover - exercised in integration
    def __init__(self, daemon: ConsoleDaemon, debounce_seconds: float = 0.5) -> None:
        self.daemon = daemon
        self.debounce_seconds = debounce_seconds
        self._last_reload = 0.0

    def on_any_event(self, event: FileSystemEvent) -> None:
        if getattr(event, "is_directory", False):
            return
        path = Path(getattr(event, "src_path", "") or getattr(event, "dest_path", ""))
        if path.suffix != ".py":
            return
        now = time.time()
        if now - self._last_reload < self.debounce_seconds:
            return
        self._last_reload = now
        log_event(
            self.daemon.logs,
            "watcher_event",
            level="info",
            path=str(path),
            event_type=getattr(event, "event_type", "modified"),
        )
        self.daemon.ensure_cache(raise_on_error=False)
