from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, get_args

from attrs import define, field

from cliobj.annotations import get_hint_name, is_enum, is_literal, resolve

if TYPE_CHECKING:
    from cliobj.descriptor import ArgumentDescriptor


__all__ = [
    "AmbiguousNameError",
    "CliobjError",
    "CoercionError",
    "NotInitializedError",
    "SchemaError",
]


@define
class CliobjError(Exception):
    """Root exception for cliobj errors."""

    msg: str | None = None
    """
    If set, override automatic message generation.
    """

    def __str__(self):
        return "" if self.msg is None else self.msg


@define
class SchemaError(CliobjError):
    """The argument declarations are inconsistent.

    Raised while an :class:`.ArgumentSchema` is being built (e.g. two arguments share a name or alias).
    This is a programming mistake in the configuration definition, never a runtime parsing error.
    """


@define
class NotInitializedError(CliobjError):
    """The command-line object was used before one of the ``initialize_*`` methods was called."""

    def __str__(self):
        return self.msg or "The command-line object has not been initialized yet."


@define(kw_only=True)
class AmbiguousNameError(CliobjError):
    """A (partial) argument name matches more than one argument."""

    token: str
    """The argument name as supplied on the command line (prefix removed)."""

    candidates: tuple["ArgumentDescriptor", ...] = field(converter=tuple)
    """Every argument whose name or alias starts with ``token``."""

    def __str__(self):
        if self.msg is not None:
            return self.msg
        names = ", ".join(c.name for c in self.candidates)
        return (
            f"The command-line argument name '{self.token}' matches the following arguments: {names}. "
            "You must disambiguate the argument name by using either an alias or include additional "
            "characters in the name."
        )


def _article(word: str) -> str:
    return "an" if word[:1].lower() in "aeiou" else "a"


@define(kw_only=True)
class CoercionError(CliobjError):
    """There was an error performing automatic type coercion."""

    target_type: Any = None
    """
    Intended type to coerce into.
    For array-valued arguments this is the **element** type.
    """

    value: str | Sequence[str] | None = None
    """
    Input token(s) that couldn't be coerced.
    """

    array: bool = False
    """The whole run was being coerced into an array of ``target_type``."""

    name: str | None = None
    """Argument name, if known."""

    def __str__(self):
        if self.msg is not None:
            return self.msg

        target_type = resolve(self.target_type)
        target_type_name = get_hint_name(target_type)

        if self.array:
            values = self.value if isinstance(self.value, Sequence) and not isinstance(self.value, str) else ()
            subject = self.name or "The value"
            return (
                f"[{', '.join(values)}] is not valid. "
                f"{subject} must be able to convert to an array of {target_type_name}."
            )

        if is_enum(target_type):
            choices = ", ".join(target_type.__members__)
            return f"'{self.value}' is not valid. The argument must be one of these values: [{choices}]."
        if is_literal(target_type):
            choices = ", ".join(str(x) for x in get_args(target_type))
            return f"'{self.value}' is not valid. The argument must be one of these values: [{choices}]."

        return f"'{self.value}' is not valid. The argument must be {_article(target_type_name)} {target_type_name}."
