"""
Tokenizer and parser for console command lines.

    command    := [target-sel WS] verb WS command-name [WS arg-list]
    target-sel := "@" ident | "@@" ident | "#" ident | "##" ident | "select"
    verb       := "get" | "set" | "call"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .errors import ParseError

# Longest prefixes first so "@@x" is not read as "@" + "@x".
SELECTOR_PREFIXES: Tuple[str, ...] = ("@@", "@", "##", "#")
SELECT_KEYWORD = "select"


class Verb(str, Enum):
    GET = "get"
    SET = "set"
    CALL = "call"


VERBS: Tuple[str, ...] = tuple(verb.value for verb in Verb)


class TargetKind(str, Enum):
    NONE = "none"
    BY_NAME = "by_name"
    ALL_BY_NAME = "all_by_name"
    BY_TAG = "by_tag"
    ALL_BY_TAG = "all_by_tag"
    SELECTION = "selection"


_PREFIX_KINDS = {
    "@": TargetKind.BY_NAME,
    "@@": TargetKind.ALL_BY_NAME,
    "#": TargetKind.BY_TAG,
    "##": TargetKind.ALL_BY_TAG,
}


@dataclass(frozen=True)
class TargetSpec:
    kind: TargetKind = TargetKind.NONE
    identifier: Optional[str] = None

    @classmethod
    def none(cls) -> "TargetSpec":
        return cls()

    @property
    def is_none(self) -> bool:
        return self.kind is TargetKind.NONE

    def __str__(self) -> str:
        if self.kind is TargetKind.SELECTION:
            return SELECT_KEYWORD
        for prefix, kind in _PREFIX_KINDS.items():
            if kind is self.kind:
                return f"{prefix}{self.identifier}"
        return ""


@dataclass(frozen=True)
class ParsedCommand:
    target: TargetSpec
    verb: Verb
    command_name: str
    args: Tuple[str, ...] = ()

    @property
    def value(self) -> Optional[str]:
        """The joined value string of a ``set`` command."""
        return self.args[0] if self.args else None


def tokenize(line: str) -> List[str]:
    return (line or "").split()


def split_selector(token: str) -> Optional[Tuple[str, str]]:
    for prefix in SELECTOR_PREFIXES:
        if token.startswith(prefix):
            return prefix, token[len(prefix):]
    return None


def is_select_keyword(token: str) -> bool:
    return token.lower() == SELECT_KEYWORD


def is_target_token(token: str) -> bool:
    return split_selector(token) is not None or is_select_keyword(token)


def parse_verb(token: str) -> Optional[Verb]:
    try:
        return Verb(token.lower())
    except ValueError:
        return None


def parse_target(token: str) -> Optional[TargetSpec]:
    if is_select_keyword(token):
        return TargetSpec(TargetKind.SELECTION)
    selector = split_selector(token)
    if selector is None:
        return None
    prefix, identifier = selector
    if not identifier:
        raise ParseError(f"Missing target name after '{prefix}'.")
    return TargetSpec(_PREFIX_KINDS[prefix], identifier)


def parse_command(line: str) -> ParsedCommand:
    tokens = tokenize(line)
    if not tokens:
        raise ParseError("Empty command.")

    index = 0
    target = parse_target(tokens[0])
    if target is None:
        target = TargetSpec.none()
    else:
        index += 1
        if index >= len(tokens):
            raise ParseError("Missing console command (get, set, call) after target.")

    verb = parse_verb(tokens[index])
    if verb is None:
        raise ParseError(
            f"Invalid console command '{tokens[index].lower()}'. Valid commands are: {', '.join(VERBS)}."
        )
    index += 1

    if index >= len(tokens):
        raise ParseError(f"Missing command name after '{verb.value}'.")
    command_name = tokens[index].lower()
    index += 1

    rest = tokens[index:]
    if verb is Verb.SET:
        args: Tuple[str, ...] = (" ".join(rest),) if rest else ()
    else:
        args = tuple(rest)
    return ParsedCommand(target=target, verb=verb, command_name=command_name, args=args)
