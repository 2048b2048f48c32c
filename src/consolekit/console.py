"""
The command console facade: one object wiring cache, directory, dispatcher,
predictor, history and transcript together behind the query API a UI uses.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .cache import CacheHolder, CommandCache
from .config import ConsoleConfig, load_config
from .directory import HostDirectory, NullDirectory
from .dispatcher import Dispatcher
from .errors import ERROR_PREFIX, ConsoleError, is_error_result
from .grammar import is_select_keyword, parse_command, parse_verb, split_selector
from .history import CommandHistory
from .logs import LogBuffer
from .prediction import Predictor
from .resolver import TargetResolver

logger = logging.getLogger("consolekit.console")

HELP_TEXT = "Type a command or use @ to target objects"


class CommandConsole:
    def __init__(
        self,
        directory: Optional[HostDirectory] = None,
        config: Optional[ConsoleConfig] = None,
        holder: Optional[CacheHolder] = None,
        type_universe: Optional[Iterable[Any]] = None,
    ) -> None:
        self.config = config or load_config()
        self.directory = directory or NullDirectory()
        self.holder = holder or CacheHolder()
        self.history = CommandHistory(self.config.history_size)
        self.logs = LogBuffer(self.config.log_buffer_size)
        self.resolver = TargetResolver(self.directory, interactive=True if self.config.interactive else None)
        self.dispatcher = Dispatcher(self.directory, self.resolver)
        self.predictor = Predictor(self.holder.snapshot, self.directory)
        self._type_universe: List[Any] = []
        if type_universe is not None:
            self.build(type_universe)

    @property
    def cache(self) -> CommandCache:
        return self.holder.snapshot()

    @property
    def type_universe(self) -> List[Any]:
        return list(self._type_universe)

    def build(self, type_universe: Optional[Iterable[Any]] = None) -> CommandCache:
        """Scan the type universe and swap in a freshly built cache."""
        if type_universe is not None:
            self._type_universe = list(type_universe)
        return self.holder.rebuild(
            self._type_universe,
            include_private=self.config.include_private,
            include_namespaces=self.config.include_namespaces,
            exclude_namespaces=self.config.exclude_namespaces,
            include_examples=self.config.include_examples,
        )

    def rebuild(self) -> CommandCache:
        return self.build()

    def execute_command(self, line: str, record: bool = True) -> str:
        if record:
            self.history.add(line)
            self.logs.record_command(line)
        result = self._execute(line)
        if record:
            self.logs.record_result(line, result)
        return result

    def _execute(self, line: str) -> str:
        cache = self.holder.snapshot()
        try:
            parsed = parse_command(line)
            return self.dispatcher.execute(parsed, cache)
        except ConsoleError as exc:
            return f"{ERROR_PREFIX}: {exc.message}"
        except Exception as exc:
            logger.exception("Unexpected failure executing %r", line)
            return f"{ERROR_PREFIX} executing command: {exc}"

    def predict(self, partial_input: str) -> List[str]:
        return self.predictor.predict(partial_input)

    def hint(self, partial_input: str) -> Optional[str]:
        return self.predictor.hint(partial_input)

    def accept_prediction(self, text: str) -> str:
        return self.predictor.accept(text)

    def get_all_command_names(self) -> List[str]:
        return self.cache.command_names()

    def get_command_type_info(self, name: str) -> Optional[str]:
        descriptor = self.cache.describe((name or "").lower())
        return descriptor.type_info() if descriptor else None

    def is_valid_token(self, token: str) -> bool:
        if split_selector(token) is not None or is_select_keyword(token):
            return True
        if parse_verb(token) is not None:
            return True
        return token.lower() in self.get_all_command_names()

    def help_text(self) -> str:
        return HELP_TEXT


__all__ = ["CommandConsole", "ERROR_PREFIX", "HELP_TEXT", "is_error_result"]
