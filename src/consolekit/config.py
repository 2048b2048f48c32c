"""
Centralized configuration loader for the command console.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ConsoleConfig:
    include_private: bool = False
    include_examples: bool = True
    include_namespaces: List[str] = field(default_factory=list)
    exclude_namespaces: List[str] = field(default_factory=list)
    command_modules: List[str] = field(default_factory=list)
    history_size: int = 50
    log_buffer_size: int = 300
    interactive: bool = False
    log_level: str = "info"


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    val = environ.get(name)
    if val is None or not str(val).strip():
        return default
    return str(val).strip().lower() in _TRUTHY


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        value = int(environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_list(environ: Mapping[str, str], name: str) -> List[str]:
    raw = environ.get(name) or ""
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_config(env: Optional[Mapping[str, str]] = None) -> ConsoleConfig:
    environ = os.environ if env is None else env
    return ConsoleConfig(
        include_private=_env_bool(environ, "CK_INCLUDE_PRIVATE", False),
        include_examples=_env_bool(environ, "CK_INCLUDE_EXAMPLES", True),
        include_namespaces=_env_list(environ, "CK_INCLUDE_NAMESPACES"),
        exclude_namespaces=_env_list(environ, "CK_EXCLUDE_NAMESPACES"),
        command_modules=_env_list(environ, "CK_COMMAND_MODULES"),
        history_size=_env_int(environ, "CK_HISTORY_SIZE", 50),
        log_buffer_size=_env_int(environ, "CK_LOG_BUFFER_SIZE", 300),
        interactive=_env_bool(environ, "CK_INTERACTIVE", False),
        log_level=(environ.get("CK_LOG_LEVEL") or "info").strip().lower(),
    )
