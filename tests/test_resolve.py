import pytest

from cliobj import AmbiguousNameError, NameComparison, SchemaBuilder
from cliobj.resolve import resolve_name


@pytest.fixture
def schema():
    return (
        SchemaBuilder()
        .add("Hello", aliases="H")
        .add("Help", bool, aliases="?")
        .add("Goodbye", aliases="G")
        .add("StuffILike", list[str], aliases=("S", "Stuff", "Crap"))
        .build()
    )


@pytest.mark.parametrize(
    "token, expected",
    [
        ("Hello", "Hello"),
        ("hello", "Hello"),
        ("H", "Hello"),
        ("Hell", "Hello"),
        ("Help", "Help"),
        ("?", "Help"),
        ("g", "Goodbye"),
        ("Good", "Goodbye"),
        ("Stuff", "StuffILike"),
        ("StuffI", "StuffILike"),
        ("cr", "StuffILike"),
    ],
)
def test_resolve_name(schema, token, expected):
    descriptor = resolve_name(schema, token)
    assert descriptor is not None
    assert descriptor.name == expected


def test_resolve_name_exact_beats_prefix():
    schema = SchemaBuilder().add("Name").add("NameList", list[str]).build()
    descriptor = resolve_name(schema, "name")
    assert descriptor is not None
    assert descriptor.name == "Name"


@pytest.mark.parametrize("token", ["Missing", "Hellos", "x"])
def test_resolve_name_not_found(schema, token):
    assert resolve_name(schema, token) is None


def test_resolve_name_ambiguous(schema):
    with pytest.raises(AmbiguousNameError) as e:
        resolve_name(schema, "He")
    assert e.value.token == "He"
    assert [c.name for c in e.value.candidates] == ["Hello", "Help"]
    assert str(e.value) == (
        "The command-line argument name 'He' matches the following arguments: Hello, Help. "
        "You must disambiguate the argument name by using either an alias or include additional "
        "characters in the name."
    )


def test_resolve_name_exact_comparison():
    schema = SchemaBuilder(comparison=NameComparison.EXACT).add("Hello").build()
    assert resolve_name(schema, "Hel") is not None
    assert resolve_name(schema, "hel") is None
