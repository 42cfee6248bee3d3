from dataclasses import dataclass
from enum import Enum
from typing import Annotated

import pytest
from rich.console import Console

from cliobj import Arg, default_registry
from cliobj.options import options
from cliobj.validators import Number, Set


class Car(Enum):
    Tesla = 1
    Ferrari = 2
    Lamborghini = 3
    Kia = 4


@options(positional="Hello", application_name="TESTAPP")
@dataclass
class MyArgs:
    """Test application.

    Attributes
    ----------
    hello: str
        Says hello to user.
    goodbye: str
        Says goodbye to user.
    does_like_ice_cream: bool
        Determines whether user likes ice cream or not.
    stuff_i_like: list[str]
        List of things the user likes.
    """

    hello: Annotated[str | None, Arg(name="Hello", alias="H", show_in_usage=True)] = None
    goodbye: Annotated[str | None, Arg(name="Goodbye", alias="G")] = None
    does_like_ice_cream: Annotated[bool, Arg(name="DoesLikeIceCream", alias="I")] = False
    number_of_scoops: Annotated[int, Arg(name="NumberOfScoops", validator=Number(gte=1, lte=3))] = 1
    favorite_numbers: Annotated[list[int] | None, Arg(name="FavoriteNumbers")] = None
    favorite_car: Annotated[Car | None, Arg(name="FavoriteCar", show_in_usage=True)] = None
    stuff_i_like: Annotated[list[str] | None, Arg(name="StuffILike", alias=["S", "Stuff", "Crap"])] = None
    sample_color: Annotated[
        str, Arg(name="SampleColor", validator=Set("red", "green", "blue", ignore_case=True))
    ] = "blue"
    sample_color2: Annotated[str | None, Arg(name="SampleColor2")] = None
    not_an_argument: str = "untouched"


@options(positional="F")
@dataclass
class FamilyArgs:
    family: Annotated[list[str] | None, Arg(name="Family", alias="F")] = None
    father: Annotated[str | None, Arg(name="Father", alias="D")] = None


@options(positional=["F", "M"])
@dataclass
class ParentsArgs:
    mother: Annotated[str | None, Arg(name="Mother", alias="M")] = None
    father: Annotated[str | None, Arg(name="Father", alias="F")] = None
    children: Annotated[list[str] | None, Arg(name="Children", alias="C")] = None


@dataclass
class DefaultDelimiterArgs:
    name: Annotated[str | None, Arg(name="Name", show_in_usage=True, help="The name of the user")] = None


@options(assignment_delimiters=":", application_name="prog")
@dataclass
class ColonArgs:
    name: Annotated[str | None, Arg(name="Name", show_in_usage=True, help="The name of the user")] = None
    count: Annotated[int, Arg(name="Count")] = 0


@options(assignment_delimiters=":")
@dataclass
class ColonArrayArgs:
    names: Annotated[list[str] | None, Arg(name="Names")] = None


@pytest.fixture(autouse=True)
def clear_default_registry():
    yield
    default_registry.clear()


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def error_console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def my_args():
    return MyArgs()


@pytest.fixture
def family_args():
    return FamilyArgs()


@pytest.fixture
def parents_args():
    return ParentsArgs()


@pytest.fixture
def default_delimiter_args():
    return DefaultDelimiterArgs()


@pytest.fixture
def colon_args():
    return ColonArgs()


@pytest.fixture
def colon_array_args():
    return ColonArrayArgs()
