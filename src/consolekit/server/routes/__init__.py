"""Route builders for the console HTTP surface."""

from __future__ import annotations

from .commands import build_commands_router
from .health import build_health_router

__all__ = ["build_commands_router", "build_health_router"]
