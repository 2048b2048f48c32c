"""
consolekit: an embeddable text command console.
"""

from .version import __version__  # noqa: F401
from .cache import CacheHolder, CommandCache, global_holder  # noqa: F401
from .console import CommandConsole  # noqa: F401
from .directory import HostDirectory, NullDirectory, SceneDirectory, SceneObject  # noqa: F401
from .errors import ConsoleError  # noqa: F401
from .markers import command, command_callback, command_field  # noqa: F401
from .typesys import Color, Vector2, Vector3, Vector4  # noqa: F401

__all__ = [
    "CacheHolder",
    "Color",
    "CommandCache",
    "CommandConsole",
    "ConsoleError",
    "HostDirectory",
    "NullDirectory",
    "SceneDirectory",
    "SceneObject",
    "Vector2",
    "Vector3",
    "Vector4",
    "command",
    "command_callback",
    "command_field",
    "global_holder",
    "__version__",
]
