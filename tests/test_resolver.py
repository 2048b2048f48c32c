import pytest

from consolekit.directory import NullDirectory, SceneDirectory, SceneObject
from consolekit.errors import ResolutionError
from consolekit.grammar import TargetKind, TargetSpec
from consolekit.resolver import TargetResolver


@pytest.fixture
def objects():
    return {
        "a": SceneObject("Guard", tags=["Enemy"]),
        "b": SceneObject("Guard", tags=["Enemy", "Boss"]),
        "c": SceneObject("Hero", tags=["Player"]),
    }


@pytest.fixture
def directory(objects):
    return SceneDirectory([objects["a"], objects["b"], objects["c"]])


def test_none_resolves_to_nothing(directory):
    assert TargetResolver(directory).resolve(TargetSpec.none()) == []


def test_by_name_returns_first_match(directory, objects):
    assert TargetResolver(directory).resolve(TargetSpec(TargetKind.BY_NAME, "Guard")) == [objects["a"]]


def test_all_by_name_keeps_directory_order(directory, objects):
    resolved = TargetResolver(directory).resolve(TargetSpec(TargetKind.ALL_BY_NAME, "Guard"))
    assert resolved == [objects["a"], objects["b"]]


def test_by_tag_and_all_by_tag(directory, objects):
    resolver = TargetResolver(directory)
    assert resolver.resolve(TargetSpec(TargetKind.BY_TAG, "Boss")) == [objects["b"]]
    assert resolver.resolve(TargetSpec(TargetKind.ALL_BY_TAG, "Enemy")) == [objects["a"], objects["b"]]


@pytest.mark.parametrize(
    "kind, message",
    [
        (TargetKind.BY_NAME, "Object with name 'Nobody' not found."),
        (TargetKind.ALL_BY_NAME, "No objects with name 'Nobody' found."),
        (TargetKind.BY_TAG, "No objects with tag 'Nobody' found."),
        (TargetKind.ALL_BY_TAG, "No objects with tag 'Nobody' found."),
    ],
)
def test_unmatched_selectors_fail(directory, kind, message):
    with pytest.raises(ResolutionError) as excinfo:
        TargetResolver(directory).resolve(TargetSpec(kind, "Nobody"))
    assert excinfo.value.message == message


def test_selection_requires_interactive_session(directory, objects):
    directory.select(objects["c"])
    with pytest.raises(ResolutionError) as excinfo:
        TargetResolver(directory).resolve(TargetSpec(TargetKind.SELECTION))
    assert "interactive" in excinfo.value.message
    assert TargetResolver(directory, interactive=True).resolve(TargetSpec(TargetKind.SELECTION)) == [objects["c"]]


def test_interactive_selection_must_not_be_empty(objects):
    directory = SceneDirectory([objects["c"]], interactive=True)
    with pytest.raises(ResolutionError) as excinfo:
        TargetResolver(directory).resolve(TargetSpec(TargetKind.SELECTION))
    assert excinfo.value.message == "No object selected."


def test_null_directory_finds_nothing():
    with pytest.raises(ResolutionError):
        TargetResolver(NullDirectory()).resolve(TargetSpec(TargetKind.BY_NAME, "x"))


def test_owner_matching_survives_class_recreation():
    class Marker:
        pass

    stale = Marker()

    class Marker:  # noqa: F811
        pass

    obj = SceneObject("Thing", components=[stale])
    directory = SceneDirectory([obj])
    assert directory.owner_for(obj, Marker) is stale
    assert directory.owner_for(obj, int) is None
