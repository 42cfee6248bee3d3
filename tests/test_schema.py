from dataclasses import dataclass
from typing import Annotated

import attrs
import pytest

from cliobj import Arg, ArgumentSchema, CmdLine, NameComparison, Options, SchemaBuilder, SchemaError, ValueKind
from cliobj.options import options


def test_schema_duplicate_alias_different_case():
    @dataclass
    class Args:
        family: Annotated[str | None, Arg(name="Family", alias=["F", "f"])] = None

    with pytest.raises(SchemaError):
        ArgumentSchema.from_class(Args)


def test_schema_duplicate_alias_exact_comparison():
    schema = SchemaBuilder(comparison=NameComparison.EXACT).add("Family", aliases=["F", "f"]).build()
    assert schema.lookup("F") is schema.lookup("f")
    assert schema.lookup("FAMILY") is None


def test_schema_duplicate_across_descriptors():
    builder = SchemaBuilder().add("Name", aliases="N").add("Number", aliases="n")
    with pytest.raises(SchemaError):
        builder.build()


def test_schema_duplicate_before_parse():
    @dataclass
    class Args:
        a: Annotated[str, Arg(name="Same")] = ""
        b: Annotated[str, Arg(name="same")] = ""

    cmdline = CmdLine(Args())
    with pytest.raises(SchemaError):
        cmdline.initialize_empty()


def test_schema_casefold():
    schema = SchemaBuilder(comparison="casefold").add("Strasse").build()
    assert schema.lookup("STRASSE") is not None
    assert schema.lookup("straße") is schema.lookup("Strasse")


def test_schema_name_and_alias_resolve_same_descriptor(my_args):
    schema = CmdLine(my_args).schema
    for descriptor in schema:
        if descriptor.aliases:
            assert schema.resolve(descriptor.name) is schema.resolve(descriptor.aliases[0]) is descriptor


def test_schema_from_class_discovery(my_args):
    schema = ArgumentSchema.from_class(type(my_args))
    assert [d.name for d in schema] == [
        "Hello",
        "Goodbye",
        "DoesLikeIceCream",
        "NumberOfScoops",
        "FavoriteNumbers",
        "FavoriteCar",
        "StuffILike",
        "SampleColor",
        "SampleColor2",
        "Help",
    ]
    assert "not_an_argument" not in schema
    assert schema.description == "Test application."
    assert schema["Hello"].help == "Says hello to user."
    assert schema["StuffILike"].aliases == ("S", "Stuff", "Crap")
    assert schema["SampleColor"].default == "blue"


def test_schema_kinds(my_args):
    schema = ArgumentSchema.from_class(type(my_args))
    assert schema["Hello"].kind is ValueKind.SCALAR
    assert schema["DoesLikeIceCream"].kind is ValueKind.BOOLEAN
    assert schema["FavoriteNumbers"].kind is ValueKind.ARRAY
    assert schema["FavoriteNumbers"].element_type is int
    assert schema["FavoriteCar"].is_enum


def test_schema_help_argument(my_args):
    schema = ArgumentSchema.from_class(type(my_args))
    help_ = schema.help_descriptor
    assert help_ is not None
    assert help_.aliases == ("?",)
    assert help_.shown_in_usage
    assert not help_.allow_save
    assert help_.state_backed
    assert help_.help == "Displays command-line usage information."


def test_schema_no_help_argument():
    @options(help=False)
    @dataclass
    class Args:
        name: Annotated[str, Arg(name="Name")] = ""

    schema = ArgumentSchema.from_class(Args)
    assert [d.name for d in schema] == ["Name"]
    assert schema.help_descriptor is None


def test_schema_user_defined_help():
    @dataclass
    class Args:
        help: Annotated[str, Arg(name="help")] = ""

    schema = ArgumentSchema.from_class(Args)
    assert [d.name for d in schema] == ["help"]
    assert schema.help_descriptor is None


def test_schema_positional(family_args, parents_args):
    schema = ArgumentSchema.from_class(type(family_args))
    assert [d.name for d in schema.positional] == ["Family"]
    assert schema["Family"].positional
    assert not schema["Father"].positional

    schema = ArgumentSchema.from_class(type(parents_args))
    assert [d.name for d in schema.positional] == ["Father", "Mother"]


def test_schema_positional_unknown():
    with pytest.raises(SchemaError):
        SchemaBuilder().add("Name").positional("Missing").build()


def test_schema_positional_ambiguous():
    with pytest.raises(SchemaError):
        SchemaBuilder().add("Name").add("Number", int).positional("N").build()


def test_schema_positional_prefix():
    schema = SchemaBuilder().add("Name").add("Count", int).positional("Na").build()
    assert [d.name for d in schema.positional] == ["Name"]


def test_schema_fixed_length_tuple():
    @dataclass
    class Args:
        pair: Annotated[tuple[int, int], Arg(name="Pair")] = (0, 0)

    with pytest.raises(SchemaError):
        ArgumentSchema.from_class(Args)

    cmdline = CmdLine(Args())
    with pytest.raises(SchemaError):
        cmdline.initialize_from_cmdline(["/Pair", "1", "2"])
    assert not cmdline.is_initialized


def test_schema_variable_length_tuple():
    schema = SchemaBuilder().add("Pairs", tuple[int, ...]).build()
    assert schema["Pairs"].is_array


def test_schema_positional_repeated():
    with pytest.raises(SchemaError):
        SchemaBuilder().add("Name", aliases="N").positional("Name", "N").build()


def test_schema_getter_setter_pair():
    with pytest.raises(SchemaError):
        SchemaBuilder().add("Name", getter=lambda target: None)


def test_schema_custom_accessors():
    store = {}
    schema = (
        SchemaBuilder()
        .add("Name", getter=lambda target: target.get("name"), setter=lambda target, v: target.update(name=v))
        .build()
    )
    cmdline = CmdLine(store, schema=schema)
    cmdline.initialize_from_cmdline(["/Name", "John"])
    assert store == {"name": "John"}
    assert cmdline.value_of("Name") == "John"


def test_schema_from_attrs_class():
    @attrs.define
    class Args:
        """Attrs based.

        Parameters
        ----------
        names: list[str]
            Names to greet.
        """

        names: Annotated[list[str], Arg(name="Names", alias="N")] = attrs.field(factory=lambda: ["World"])
        loud: Annotated[bool, Arg(name="Loud")] = False

    schema = ArgumentSchema.from_class(Args)
    assert schema["Names"].default == ["World"]
    assert schema["Names"].help == "Names to greet."
    assert schema.description == "Attrs based."

    args = Args()
    CmdLine(args).initialize_from_cmdline(["/N", "a", "b", "/Loud"])
    assert args.names == ["a", "b"]
    assert args.loud is True


def test_schema_from_plain_class():
    class Args:
        count: Annotated[int, Arg(name="Count", help="How many.")] = 3
        skipped: int = 0

    schema = ArgumentSchema.from_class(Args)
    assert [d.name for d in schema] == ["Count", "Help"]
    assert schema["Count"].default == 3
    assert schema["Count"].help == "How many."


def test_schema_prototype_defaults():
    @dataclass
    class Args:
        name: Annotated[str, Arg(name="Name")] = "class default"

    schema = ArgumentSchema.from_class(Args, prototype=Args(name="instance default"))
    assert schema["Name"].default == "instance default"


def test_schema_explicit_options():
    @dataclass
    class Args:
        name: Annotated[str, Arg(name="Name", alias="N")] = ""

    schema = ArgumentSchema.from_class(Args, options=Options(positional="N", comparison=NameComparison.EXACT))
    assert schema.comparison is NameComparison.EXACT
    assert [d.name for d in schema.positional] == ["Name"]
    assert schema.lookup("name") is None


def test_schema_getitem_unknown(my_args):
    schema = ArgumentSchema.from_class(type(my_args))
    with pytest.raises(KeyError):
        schema["Nope"]
