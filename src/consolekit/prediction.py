"""
Incremental completion for partially typed command lines.

The predictor re-tokenizes the raw input on every call and tolerates lines
the strict parser rejects.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from .cache import CommandCache
from .descriptors import MemberDescriptor
from .directory import HostDirectory
from .dispatcher import VERB_KINDS
from .grammar import (
    SELECT_KEYWORD,
    VERBS,
    Verb,
    is_select_keyword,
    is_target_token,
    parse_verb,
    split_selector,
    tokenize,
)
from .typesys import enum_names, is_bool, type_name, unwrap_optional

logger = logging.getLogger("consolekit.prediction")

DISPLAY_PREFIXES = ("@", "@@", "#", "##")
BOOL_LITERALS = ("true", "false")


def _starts_with(candidate: str, partial: str) -> bool:
    return candidate.lower().startswith(partial.lower())


def _filter(candidates: Iterable[str], partial: str) -> List[str]:
    return [candidate for candidate in candidates if _starts_with(candidate, partial)]


def value_candidates(value_type, partial: str = "") -> List[str]:
    """Enum member names or boolean literals, those matching ``partial`` first."""
    inner, _ = unwrap_optional(value_type)
    names = enum_names(inner) or (list(BOOL_LITERALS) if is_bool(inner) else [])
    matching = _filter(names, partial)
    return matching + [name for name in names if name not in matching]


class _Position:
    """Where the cursor sits in the grammar, derived from raw tokens."""

    def __init__(self, tokens: List[str]) -> None:
        self.tokens = tokens
        self.has_target = bool(tokens) and is_target_token(tokens[0])
        self.offset = 1 if self.has_target else 0
        # 0 = target, 1 = verb, 2 = command name, 3+ = values
        self.index = len(tokens) - 1 + (0 if self.has_target else 1)
        self.verb: Optional[Verb] = parse_verb(tokens[self.offset]) if len(tokens) > self.offset else None

    @property
    def command_name(self) -> Optional[str]:
        position = self.offset + 1
        return self.tokens[position].lower() if len(self.tokens) > position else None

    @property
    def current(self) -> str:
        return self.tokens[-1] if self.tokens else ""


class Predictor:
    def __init__(self, cache_source: Callable[[], CommandCache], directory: HostDirectory) -> None:
        self.cache_source = cache_source
        self.directory = directory

    def predict(self, partial_input: str) -> List[str]:
        try:
            return self._predict(tokenize(partial_input), self.cache_source())
        except Exception:
            logger.debug("Prediction failed for %r", partial_input, exc_info=True)
            return []

    def hint(self, partial_input: str) -> Optional[str]:
        try:
            return self._hint(tokenize(partial_input), self.cache_source())
        except Exception:
            logger.debug("Hint failed for %r", partial_input, exc_info=True)
            return None

    def _predict(self, tokens: List[str], cache: CommandCache) -> List[str]:
        if not tokens:
            return []
        if len(tokens) == 1:
            return self._first_token(tokens[0])
        position = _Position(tokens)
        if position.has_target and len(tokens) == 2:
            return _filter(VERBS, tokens[1])
        if position.verb is None:
            return []
        if position.index == 2:
            return self._command_candidates(cache, position.verb, position.current, position.has_target)
        descriptor = cache.lookup(position.command_name or "", VERB_KINDS[position.verb])
        if descriptor is None:
            return []
        value_index = position.index - 3
        if position.verb is Verb.SET and value_index == 0:
            return value_candidates(descriptor.value_type, position.current)
        if position.verb is Verb.CALL and value_index < descriptor.arity:
            return value_candidates(descriptor.params[value_index].declared_type, position.current)
        return []

    def _first_token(self, token: str) -> List[str]:
        selector = split_selector(token)
        if selector is not None:
            return self._target_candidates(*selector)
        if is_select_keyword(token):
            return list(VERBS)
        return _filter((*DISPLAY_PREFIXES, SELECT_KEYWORD), token)

    def _target_candidates(self, prefix: str, partial: str) -> List[str]:
        if prefix.startswith("@"):
            known = self.directory.known_names()
        else:
            known = self.directory.known_tags()
        return [prefix + name for name in dict.fromkeys(_filter(known, partial))]

    def _command_candidates(self, cache: CommandCache, verb: Verb, partial: str, has_target: bool) -> List[str]:
        kind = VERB_KINDS[verb]
        candidates: List[str] = []
        for name in cache.names_for(kind):
            descriptor: MemberDescriptor = cache.lookup(name, kind)
            # A target selects instance commands; no target offers only static ones.
            if descriptor.is_static == has_target:
                continue
            if _starts_with(name, partial):
                candidates.append(name)
        return candidates

    def _hint(self, tokens: List[str], cache: CommandCache) -> Optional[str]:
        if len(tokens) < 2:
            return None
        position = _Position(tokens)
        if position.verb is None:
            return None
        if position.index == 2:
            candidates = self._command_candidates(cache, position.verb, position.current, position.has_target)
            descriptor = cache.describe(candidates[0]) if candidates else None
            return descriptor.type_info() if descriptor else None
        descriptor = cache.lookup(position.command_name or "", VERB_KINDS[position.verb])
        if descriptor is None:
            return None
        value_index = position.index - 3
        if position.verb is Verb.CALL and value_index < descriptor.arity:
            return descriptor.params[value_index].describe()
        if position.verb is Verb.SET and value_index == 0:
            return type_name(descriptor.value_type)
        return None

    def accept(self, text: str) -> str:
        """Apply the first candidate: extend the last token, or append a new one."""
        candidates = self.predict(text)
        if not candidates:
            return text
        tokens = tokenize(text)
        first = candidates[0]
        if tokens and _starts_with(first, tokens[-1]):
            tokens[-1] = first
            return " ".join(tokens)
        return f"{text.rstrip()} {first}"
