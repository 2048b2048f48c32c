import sys
import textwrap

import pytest

from consolekit.config import ConsoleConfig
from consolekit.console import CommandConsole
from consolekit.daemon import ConsoleDaemon
from consolekit.directory import SceneDirectory


@pytest.fixture
def command_module(tmp_path, monkeypatch):
    monkeypatch.syspath_prepend(str(tmp_path))
    path = tmp_path / "ck_reload_target.py"

    def write(body):
        path.write_text(textwrap.dedent(body), encoding="utf-8")

    write(
        """
        from consolekit.markers import command

        @command
        def ping() -> str:
            return "pong"
        """
    )
    yield write, path
    sys.modules.pop("ck_reload_target", None)


def make_console():
    return CommandConsole(directory=SceneDirectory(), config=ConsoleConfig())


def test_ensure_cache_imports_and_builds(command_module):
    console = make_console()
    daemon = ConsoleDaemon(console=console, module_names=["ck_reload_target"])
    cache = daemon.ensure_cache()
    assert cache.command_names() == ["ping"]
    assert console.execute_command("call ping") == "ping() returned: pong"
    assert daemon.last_error is None
    assert daemon.last_built_at is not None
    assert daemon.logs.history()[-1].event == "cache_reloaded"


def test_ensure_cache_reloads_changed_source(command_module):
    write, _ = command_module
    console = make_console()
    daemon = ConsoleDaemon(console=console, module_names=["ck_reload_target"])
    daemon.ensure_cache()
    write(
        """
        from consolekit.markers import command

        @command
        def ping() -> str:
            return "pong v2"

        @command
        def extra() -> None:
            pass
        """
    )
    daemon.ensure_cache()
    assert console.get_all_command_names() == ["extra", "ping"]
    assert console.execute_command("call ping") == "ping() returned: pong v2"


def test_reload_error_keeps_previous_cache(command_module):
    write, _ = command_module
    console = make_console()
    daemon = ConsoleDaemon(console=console, module_names=["ck_reload_target"])
    daemon.ensure_cache()
    write("def broken(:\n")
    assert daemon.ensure_cache(raise_on_error=False) is None
    assert "ck_reload_target" in daemon.last_error
    assert daemon.logs.history()[-1].event == "cache_reload_error"
    assert console.get_all_command_names() == ["ping"]
    with pytest.raises(RuntimeError):
        daemon.ensure_cache()


def test_watch_paths_default_to_module_directories(command_module):
    _, path = command_module
    daemon = ConsoleDaemon(console=make_console(), module_names=["ck_reload_target"])
    daemon.ensure_cache()
    assert daemon.resolve_watch_paths() == [path.parent.resolve()]


def test_watcher_start_and_stop(command_module, tmp_path):
    daemon = ConsoleDaemon(console=make_console(), module_names=["ck_reload_target"], watch_paths=[tmp_path])
    daemon.ensure_cache()
    assert daemon.start_watcher() is True
    assert daemon.start_watcher() is False
    daemon.stop_watcher()
    events = [entry.event for entry in daemon.logs.history()]
    assert "watcher_started" in events and "watcher_stopped" in events


PLAYER_SOURCE = """
from consolekit.markers import command, command_field


class Player:
    health: float = command_field(100.0)
    round: int = command_field(1, static=True)

    @command
    def heal(self, amount: float) -> float:
        self.health += amount
        return self.health
"""


def test_reload_keeps_existing_instances_and_static_values(tmp_path, monkeypatch):
    monkeypatch.syspath_prepend(str(tmp_path))
    source = tmp_path / "ck_reload_player.py"
    source.write_text(PLAYER_SOURCE, encoding="utf-8")
    try:
        scene = SceneDirectory()
        console = CommandConsole(directory=scene, config=ConsoleConfig())
        daemon = ConsoleDaemon(console=console, module_names=["ck_reload_player"])
        daemon.ensure_cache()
        old_class = sys.modules["ck_reload_player"].Player
        scene.spawn("P", old_class())
        assert console.execute_command("@P get health") == "P.health = 100.0"
        assert console.execute_command("set round 4") == "Set round = 4"

        source.write_text(PLAYER_SOURCE + "\n# touched\n", encoding="utf-8")
        daemon.ensure_cache()

        assert sys.modules["ck_reload_player"].Player is not old_class
        assert console.execute_command("@P get health") == "P.health = 100.0"
        assert console.execute_command("@P call heal 5") == "P.heal() returned: 105.0"
        assert console.execute_command("get round") == "round = 4"
    finally:
        sys.modules.pop("ck_reload_player", None)
