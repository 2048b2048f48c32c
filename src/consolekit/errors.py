"""
Error types for the command console.

Every layer raises one of these; only the console facade turns them into
``"Error: ..."`` result strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ERROR_PREFIX = "Error"


def is_error_result(text: str) -> bool:
    """True for result strings the console produced from a failure."""
    return text.lower().startswith(ERROR_PREFIX.lower())


@dataclass
class ConsoleError(Exception):
    """Base error carrying a user-facing message and a stable code."""

    message: str
    code: str = "CK-1000"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass
class ParseError(ConsoleError):
    """The command line does not follow the console grammar."""

    code: str = "CK-1101"


@dataclass
class ResolutionError(ConsoleError):
    """A target selector matched nothing or is not allowed here."""

    code: str = "CK-1201"


@dataclass
class CommandNotFoundError(ConsoleError):
    """No command with the given name exists for the requested verb."""

    command_name: Optional[str] = None
    code: str = "CK-1301"


@dataclass
class ArityError(ConsoleError):
    """Wrong number of arguments, or a missing value for ``set``."""

    expected: Optional[int] = None
    received: Optional[int] = None
    code: str = "CK-1401"


@dataclass
class CoercionError(ConsoleError):
    """A text token could not be converted to the declared type."""

    token: Optional[str] = None
    type_name: Optional[str] = None
    code: str = "CK-1501"


@dataclass
class InvocationError(ConsoleError):
    """Target code could not be invoked for one instance."""

    code: str = "CK-1601"


@dataclass
class DeclarationError(ConsoleError):
    """A command marker was applied to something it cannot describe."""

    code: str = "CK-1701"
