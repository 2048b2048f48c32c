"""Application factory that builds the FastAPI app around a console."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from ..console import CommandConsole
from ..demo import build_demo_scene, demo_universe
from ..version import __version__
from .routes import build_commands_router, build_health_router


def create_app(console: Optional[CommandConsole] = None) -> FastAPI:
    """Create the FastAPI app; without a console the demo scene is served."""
    if console is None:
        console = CommandConsole(directory=build_demo_scene(), type_universe=demo_universe())
    app = FastAPI(title="consolekit", version=__version__)
    app.state.console = console
    app.include_router(build_health_router(console))
    app.include_router(build_commands_router(console))
    return app
