import threading

from consolekit.cache import CommandCache
from consolekit.config import ConsoleConfig
from consolekit.console import HELP_TEXT, CommandConsole, is_error_result
from consolekit.demo import build_demo_scene, demo_universe
from consolekit.descriptors import MemberKind
from consolekit.dispatcher import Dispatcher
from consolekit.markers import command


class Clock:
    @command
    @staticmethod
    def tick() -> str:
        return "tock"


def test_empty_and_blank_lines_share_one_error(console):
    assert console.execute_command("") == "Error: Empty command."
    assert console.execute_command("   ") == "Error: Empty command."


def test_command_names_and_type_info(console):
    names = console.get_all_command_names()
    assert names == sorted(names)
    assert {"health", "ammo", "restart", "onhealthchanged", "ongamepaused", "echo"} <= set(names)
    assert "_ammunition" not in names
    assert console.get_command_type_info("addhealth") == "(method) (float amount) returns float"
    assert console.get_command_type_info("RESTART") == "(method) returns void"
    assert console.get_command_type_info("health") == "(field) float"
    assert console.get_command_type_info("score") == "(property) int"
    assert console.get_command_type_info("onhealthchanged") == "(callback) (float health) returns void"
    assert console.get_command_type_info("nothing") is None


def test_private_field_with_explicit_opt_in(console):
    assert console.execute_command("@Player1 get ammo") == "Player1._ammunition = 30"


def test_module_level_command(console):
    assert console.execute_command("call echo hi") == "echo() returned: hi"


def test_execute_records_history_and_transcript(console):
    console.execute_command("call restart")
    console.execute_command("call restart")
    console.execute_command("get score")
    assert console.history.entries() == ["get score", "call restart"]
    events = console.logs.history()
    assert [entry.event for entry in events] == ["command", "result"] * 3
    assert events[-1].is_error
    assert events[1].details == {"line": "call restart", "text": "Called restart()"}
    [(entered, result)] = console.logs.transcript(limit=1)
    assert entered == "get score"
    assert is_error_result(result)


def test_execute_without_recording(console):
    console.execute_command("call restart", record=False)
    assert len(console.history) == 0
    assert console.logs.history() == []


def test_unexpected_errors_are_contained(console, monkeypatch):
    def explode(parsed, cache):
        raise KeyError("bad")

    monkeypatch.setattr(console.dispatcher, "execute", explode)
    assert console.execute_command("call restart") == "Error executing command: 'bad'"


def test_query_helpers(console):
    assert console.predict("@Play") == ["@Player1", "@Player2"]
    assert console.hint("@Player1 call addhealth 3") == "float amount"
    assert console.accept_prediction("@Player1 g") == "@Player1 get"
    assert console.help_text() == HELP_TEXT
    assert console.is_valid_token("@Player1")
    assert console.is_valid_token("CALL")
    assert console.is_valid_token("select")
    assert console.is_valid_token("health")
    assert not console.is_valid_token("bogus")


def test_config_excludes_examples():
    console = CommandConsole(
        directory=build_demo_scene(),
        config=ConsoleConfig(include_examples=False),
        type_universe=[Clock, *demo_universe()],
    )
    assert console.get_all_command_names() == ["tick"]
    assert console.execute_command("call tick") == "tick() returned: tock"


def test_interactive_config_allows_select():
    scene = build_demo_scene()
    scene.select(scene.find_by_name("Player2"))
    strict = CommandConsole(directory=scene, config=ConsoleConfig(), type_universe=demo_universe())
    assert strict.execute_command("select get score") == (
        "Error: 'select' can only be used in an interactive session."
    )
    interactive = CommandConsole(
        directory=scene, config=ConsoleConfig(interactive=True), type_universe=demo_universe()
    )
    assert interactive.execute_command("select get score") == "Player2.score = 0"


def test_rebuild_keeps_universe(console):
    before = console.cache
    rebuilt = console.rebuild()
    assert rebuilt is console.cache
    assert rebuilt is not before
    assert rebuilt.command_names() == before.command_names()


def test_in_flight_execute_keeps_its_snapshot(console, monkeypatch):
    started = threading.Event()
    release = threading.Event()
    original = Dispatcher.execute
    seen = {}

    def slow_execute(self, parsed, cache):
        seen["cache"] = cache
        started.set()
        release.wait(timeout=5)
        return original(self, parsed, cache)

    monkeypatch.setattr(Dispatcher, "execute", slow_execute)
    results = []
    worker = threading.Thread(target=lambda: results.append(console.execute_command("call restart")))
    worker.start()
    assert started.wait(timeout=5)
    old = seen["cache"]
    console.holder.install(CommandCache.empty())
    release.set()
    worker.join(timeout=5)
    assert results == ["Called restart()"]
    assert old.lookup("restart", MemberKind.CALLABLE) is not None
    assert console.execute_command("call restart") == (
        "Error: No method or callback command found with name 'restart'."
    )


def test_is_error_result():
    assert is_error_result("Error: nope")
    assert not is_error_result("Called restart()")
