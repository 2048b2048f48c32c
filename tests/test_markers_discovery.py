import sys
from typing import Callable, Optional

import pytest

from consolekit.descriptors import MemberCategory, MemberKind
from consolekit.discovery import describe_owner, discover_commands, is_private_name, iter_owners
from consolekit.errors import DeclarationError, InvocationError
from consolekit.markers import command, command_callback, command_field, get_marker


class Turret:
    ammo: int = command_field(10)
    _secret: str = command_field("hidden")
    _forced: int = command_field(3, name="Forced", include_private=True)
    serial: str = command_field("T-1", readonly=True)
    counter: int = command_field(0, static=True)
    on_fire: Optional[Callable[[int, str], bool]] = command_callback()
    on_reload = command_callback(("rounds", int), returns=int)

    def __init__(self) -> None:
        self._heat = 0.0

    @command
    def fire(self, times: int) -> int:
        self.ammo -= times
        return self.ammo

    @command("Cool")
    def cool_down(self) -> None:
        self._heat = 0.0

    @command
    def label(self, text) -> str:
        return text

    @command
    def _vent(self) -> None:
        pass

    @command
    @property
    def heat(self) -> float:
        return self._heat

    @heat.setter
    def heat(self, value: float) -> None:
        self._heat = value

    @command(name="temperature")
    @property
    def temperature(self) -> float:
        return self._heat * 10

    @command
    @staticmethod
    def ping(host: str) -> str:
        return f"pong {host}"

    @command
    @classmethod
    def kind(cls) -> str:
        return cls.__name__

    def not_a_command(self) -> None:
        pass


class HeavyTurret(Turret):
    @command
    def overdrive(self) -> None:
        pass


@command
def module_level(value: float) -> float:
    return value * 2


def by_name(descriptors, name, kind):
    return next(d for d in descriptors if d.name == name and d.kind is kind)


def test_command_marker_names_are_lowercased():
    assert get_marker(Turret.__dict__["cool_down"]).name == "cool"
    assert get_marker(Turret.__dict__["fire"]).name is None
    assert get_marker(Turret.__dict__["not_a_command"]) is None


def test_marker_rejects_non_callables():
    with pytest.raises(DeclarationError):
        command(42)
    with pytest.raises(DeclarationError):
        command(command_field(1))


def test_property_marker_survives_setter_chaining():
    marker = get_marker(Turret.__dict__["heat"])
    assert marker is not None
    assert Turret.__dict__["heat"].fset is not None


def test_describe_owner_names_and_kinds():
    descriptors = describe_owner(Turret)
    names = {(d.name, d.kind) for d in descriptors}
    assert ("fire", MemberKind.CALLABLE) in names
    assert ("cool", MemberKind.CALLABLE) in names
    assert ("heat", MemberKind.READABLE) in names
    assert ("heat", MemberKind.WRITABLE) in names
    assert ("temperature", MemberKind.READABLE) in names
    assert ("temperature", MemberKind.WRITABLE) not in names
    assert ("serial", MemberKind.WRITABLE) not in names
    assert ("not_a_command", MemberKind.CALLABLE) not in names


def test_private_members_need_opt_in():
    names = {d.name for d in describe_owner(Turret)}
    assert "_secret" not in names
    assert "_vent" not in names
    assert "forced" in names
    everything = {d.name for d in describe_owner(Turret, include_private=True)}
    assert {"_secret", "_vent"} <= everything


def test_signatures_and_defaults():
    descriptors = describe_owner(Turret)
    fire = by_name(descriptors, "fire", MemberKind.CALLABLE)
    assert [p.describe() for p in fire.params] == ["int times"]
    assert fire.type_info() == "(method) (int times) returns int"
    label = by_name(descriptors, "label", MemberKind.CALLABLE)
    assert label.params[0].declared_type is str
    cool = by_name(descriptors, "cool", MemberKind.CALLABLE)
    assert cool.type_info() == "(method) returns void"
    assert not cool.returns_value


def test_static_members():
    descriptors = describe_owner(Turret)
    assert by_name(descriptors, "ping", MemberKind.CALLABLE).is_static
    assert by_name(descriptors, "kind", MemberKind.CALLABLE).invoke(None, []) == "Turret"
    assert by_name(descriptors, "counter", MemberKind.READABLE).is_static
    assert not by_name(descriptors, "fire", MemberKind.CALLABLE).is_static


def test_field_thunks_read_and_write_instances():
    descriptors = describe_owner(Turret)
    turret = Turret()
    ammo_get = by_name(descriptors, "ammo", MemberKind.READABLE)
    ammo_set = by_name(descriptors, "ammo", MemberKind.WRITABLE)
    assert ammo_get.value_type is int
    assert ammo_get.read(turret) == 10
    ammo_set.write(turret, 4)
    assert turret.ammo == 4
    assert Turret().ammo == 10


def test_callback_signatures():
    descriptors = describe_owner(Turret)
    on_fire = by_name(descriptors, "on_fire", MemberKind.CALLABLE)
    assert on_fire.category is MemberCategory.CALLBACK
    assert [p.describe() for p in on_fire.params] == ["int arg0", "string arg1"]
    assert on_fire.type_info() == "(callback) (int arg0, string arg1) returns bool"
    on_reload = by_name(descriptors, "on_reload", MemberKind.CALLABLE)
    assert on_reload.type_info() == "(callback) (int rounds) returns int"


def test_unassigned_callback_raises_invocation_error():
    descriptors = describe_owner(Turret)
    on_reload = by_name(descriptors, "on_reload", MemberKind.CALLABLE)
    turret = Turret()
    with pytest.raises(InvocationError):
        on_reload.invoke(turret, [5])
    turret.on_reload = lambda rounds: rounds * 2
    assert on_reload.invoke(turret, [5]) == 10


def test_module_owner_contributes_functions_and_classes():
    module = sys.modules[__name__]
    owners = list(iter_owners([module, Turret]))
    assert owners[0] is module
    assert owners.count(Turret) == 1
    descriptors = discover_commands([module])
    module_fn = by_name(descriptors, "module_level", MemberKind.CALLABLE)
    assert module_fn.is_static
    assert module_fn.invoke(None, [2.0]) == 4.0
    assert {"overdrive", "fire"} <= {d.name for d in descriptors}


def test_subclass_only_declares_its_own_members():
    names = {d.name for d in describe_owner(HeavyTurret)}
    assert names == {"overdrive"}


def test_private_name_rule():
    assert is_private_name("_x")
    assert not is_private_name("__init__")
    assert not is_private_name("x")


def test_discovery_skips_non_type_entries():
    assert discover_commands([42]) == []
    assert len(discover_commands([42, Turret])) == len(discover_commands([Turret]))
