from dataclasses import dataclass
from typing import Annotated

import pytest

from cliobj import Arg, CmdLine, SchemaBuilder, ValidationError
from cliobj.bind import ParseState
from cliobj.validate import validate


@dataclass
class RequiredArgs:
    name: Annotated[str | None, Arg(name="Name", required=True)] = None
    count: Annotated[int, Arg(name="Count", required=True)] = 0


def test_validate_number_of_scoops(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/NumberOfScoops", "2"])
    assert my_args.number_of_scoops == 2
    assert cmdline.is_valid()


def test_validate_coercion_error(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/NumberOfScoops", "chocolate"])
    assert my_args.number_of_scoops == 1
    assert not cmdline.was_set("NumberOfScoops")
    assert not cmdline.is_valid()
    assert cmdline.error_text == (
        "NumberOfScoops has an error: 'chocolate' is not valid. The argument must be an int."
    )


def test_validate_array(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/FavoriteNumbers", "1", "2", "3"])
    assert my_args.favorite_numbers == [1, 2, 3]
    assert cmdline.is_valid()


def test_validate_array_coercion_error(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/FavoriteNumbers", "Red", "Green", "Blue"])
    assert my_args.favorite_numbers is None
    assert not cmdline.is_valid()
    assert cmdline.errors == [
        ValidationError(
            "FavoriteNumbers",
            "FavoriteNumbers has an error: [Red, Green, Blue] is not valid. "
            "FavoriteNumbers must be able to convert to an array of int.",
        )
    ]


def test_validate_enum(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/FavoriteCar", "kia"])
    assert my_args.favorite_car is not None
    assert my_args.favorite_car.name == "Kia"
    assert cmdline.is_valid()

    cmdline.initialize_from_cmdline(["/FavoriteCar", "Ford"])
    assert not cmdline.is_valid()
    assert cmdline.error_text == (
        "FavoriteCar has an error: 'Ford' is not valid. "
        "The argument must be one of these values: [Tesla, Ferrari, Lamborghini, Kia]."
    )


def test_validate_number_validator(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/NumberOfScoops", "5"])
    assert my_args.number_of_scoops == 5
    assert not cmdline.is_valid()
    assert cmdline.error_text == "The field NumberOfScoops must be >= 1 and <= 3."


@pytest.mark.parametrize("color", ["red", "green", "blue", "Blue"])
def test_validate_set_valid(my_args, color):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/SampleColor", color])
    assert my_args.sample_color == color
    assert cmdline.is_valid()


def test_validate_set_invalid(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/SampleColor", "purple"])
    assert not cmdline.is_valid()
    assert cmdline.error_text == "The field SampleColor must be one of these values: [red, green, blue]."


def test_validate_required():
    args = RequiredArgs()
    cmdline = CmdLine(args)
    cmdline.initialize_from_cmdline([])
    assert not cmdline.is_valid()
    assert [e.field_name for e in cmdline.errors] == ["Name", "Count"]
    assert cmdline.error_text == "Name is required.\nCount is required."


def test_validate_required_default_does_not_count():
    args = RequiredArgs(name="preset")
    cmdline = CmdLine(args)
    cmdline.initialize_from_cmdline(["/Count", "3"])
    assert cmdline.error_text == "Name is required."


def test_validate_order():
    """Required, then coercion errors, then field validators, then object validators."""

    class Target:
        a = None
        b = 0
        c = 0

    def positive(type_, value):
        if value <= 0:
            raise ValueError("Must be positive.")

    def object_check(obj):
        raise AssertionError("Object is never valid.")

    schema = (
        SchemaBuilder()
        .add("C", int, attribute="c", validators=positive)
        .add("B", int, attribute="b")
        .add("A", str, attribute="a", required=True)
        .validator(object_check)
        .build()
    )
    target = Target()
    cmdline = CmdLine(target, schema=schema)
    cmdline.initialize_from_cmdline(["/B", "x"])
    assert [e.message for e in cmdline.errors] == [
        "A is required.",
        "B has an error: 'x' is not valid. The argument must be an int.",
        'Invalid value "0" for "C". Must be positive.',
        "Object is never valid.",
    ]


def test_validate_not_cumulative(my_args):
    cmdline = CmdLine(my_args)
    cmdline.initialize_from_cmdline(["/SampleColor", "purple"])
    assert not cmdline.is_valid()
    assert not cmdline.is_valid()
    assert len(cmdline.errors) == 1

    my_args.sample_color = "red"
    assert cmdline.is_valid()
    assert cmdline.errors == []


def test_validate_skips_none():
    def never(type_, value):
        raise ValueError("Should not be called.")

    class Target:
        value = None

    schema = SchemaBuilder().add("Value", str, attribute="value", validators=never).build()
    assert validate(schema, Target(), ParseState()) == []


def test_validation_error_str():
    assert str(ValidationError("Name", "Name is required.")) == "Name is required."
