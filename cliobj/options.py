import sys
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar, cast

from attrs import define, evolve, field

from cliobj.utils import to_tuple_converter

T = TypeVar("T")

OPTIONS_ATTRIBUTE = "__cliobj_options__"


class NameComparison(Enum):
    """Rule used to compare argument names and aliases.

    Fixed when an :class:`.ArgumentSchema` is built.
    """

    EXACT = "exact"
    """Case-sensitive, character-for-character comparison."""

    IGNORE_CASE = "ignore_case"
    """Compare ``str.lower()`` forms."""

    CASEFOLD = "casefold"
    """Compare ``str.casefold()`` forms; aggressive unicode-aware caseless matching."""

    def key(self, s: str) -> str:
        """Normalized form of ``s`` under this rule; equal keys mean equal names."""
        if self is NameComparison.EXACT:
            return s
        elif self is NameComparison.IGNORE_CASE:
            return s.lower()
        else:
            return s.casefold()

    def startswith(self, s: str, prefix: str) -> bool:
        return self.key(s).startswith(self.key(prefix))


def _default_application_name() -> str:
    return Path(sys.argv[0]).name if sys.argv and sys.argv[0] else ""


def _delimiters_converter(value) -> tuple[str, ...]:
    if isinstance(value, str) and len(value) > 1:
        value = tuple(value)
    delimiters = cast(tuple[str, ...], to_tuple_converter(value))
    # A space is the natural token boundary; it never needs to be configured.
    return tuple(d for d in delimiters if d != " ")


@define(kw_only=True)
class Options:
    """Behavior and presentation settings for a command-line object."""

    title: str = "Command-line options."
    """Shown at the top of the help text."""

    application_name: str = field(factory=_default_application_name)
    """Program name used in the usage synopsis. Defaults to the running script's file name."""

    usage: str | None = None
    """Override of the generated usage synopsis."""

    description: str | None = None
    """Long description of the application. Shown in the help text."""

    # This can ONLY ever be a Tuple[str, ...]
    positional: None | str | Iterable[str] = field(default=(), converter=to_tuple_converter)
    """Names/aliases of the arguments filled from leading non-prefixed tokens, in order."""

    prefix: str = "/"
    """String that marks a token as an argument name (commonly ``/``, ``--`` or ``+``)."""

    # This can ONLY ever be a Tuple[str, ...]
    assignment_delimiters: None | str | Iterable[str] = field(default=(), converter=_delimiters_converter)
    """
    Additional characters that may separate a name from its value inside a single token,
    e.g. ``:`` accepts ``/Name:John`` as well as ``/Name John``.
    """

    comparison: NameComparison = field(default=NameComparison.IGNORE_CASE, converter=NameComparison)
    """Rule for comparing names and aliases."""

    help: bool = True
    """Append the built-in ``Help`` (``?``) argument."""

    def __attrs_post_init__(self):
        if not self.prefix:
            raise ValueError("prefix must be a non-empty string.")

    @property
    def assignment_delimiter(self) -> str:
        """Delimiter used when rendering usage."""
        delimiters = cast(tuple[str, ...], self.assignment_delimiters)
        return delimiters[0] if delimiters else " "

    def evolve(self, **kwargs) -> "Options":
        return evolve(self, **kwargs)


def options(**kwargs: Any) -> Callable[[type[T]], type[T]]:
    """Class decorator attaching :class:`Options` to a configuration class.

    .. code-block:: python

        @options(prefix="--", positional="Family", application_name="family")
        @dataclass
        class FamilyArgs: ...

    Parameters
    ----------
    **kwargs
        Forwarded to :class:`Options`.
    """
    opts = Options(**kwargs)

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, OPTIONS_ATTRIBUTE, opts)
        return cls

    return decorator


def get_options(cls: type) -> Options:
    """Options attached to ``cls`` with :func:`options`, else defaults."""
    opts = getattr(cls, OPTIONS_ATTRIBUTE, None)
    return opts if isinstance(opts, Options) else Options()
