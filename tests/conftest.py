import pytest

from consolekit.config import ConsoleConfig
from consolekit.console import CommandConsole
from consolekit.demo import ExampleCommands, build_demo_scene, demo_universe


@pytest.fixture(autouse=True)
def _reset_static_commands():
    """Static command values live on the class; restore them after each test."""
    yield
    ExampleCommands.__dict__["gametime"].set_static(0.0)
    ExampleCommands.__dict__["difficulty"].set_static(1)


@pytest.fixture
def scene():
    return build_demo_scene()


@pytest.fixture
def console(scene):
    return CommandConsole(directory=scene, config=ConsoleConfig(), type_universe=demo_universe())