from collections.abc import Callable, Iterable
from typing import Any, Union, cast, get_args

from attrs import field

from cliobj.annotations import is_annotated
from cliobj.utils import frozen, to_tuple_converter


def _aliases_converter(value) -> tuple[str, ...]:
    return cast(tuple[str, ...], to_tuple_converter(value))


@frozen(kw_only=True)
class Arg:
    """Marks a field as bindable from the command line; used with :obj:`~typing.Annotated`.

    Example usage:

    .. code-block:: python

        from dataclasses import dataclass, field
        from typing import Annotated

        from cliobj import Arg


        @dataclass
        class Settings:
            hello: Annotated[str | None, Arg(name="Hello", alias="H")] = None
            stuff: Annotated[list[str], Arg(alias=["S", "Stuff"])] = field(default_factory=list)

    Fields without an :class:`Arg` are ignored by :meth:`.ArgumentSchema.from_class`.
    """

    name: str | None = None
    """Command-line name. Defaults to the python field name."""

    _alias: Union[None, str, Iterable[str]] = field(default=(), converter=_aliases_converter, alias="alias")
    """Alternate names. It is recommended that the first alias be a single character."""

    required: bool = False
    """The argument must be supplied on the command line."""

    usage: str = ""
    """Short hint used in the usage synopsis instead of the argument name."""

    show_in_usage: bool | None = None
    """
    Display the argument in the usage synopsis.
    :obj:`None` (default) only shows required arguments.
    """

    show_default: bool | None = None
    """
    Display the default value in the help text.
    :obj:`None` (default) hides empty defaults.
    """

    allow_save: bool = True
    """Include the argument when saving settings."""

    help: str | None = None
    """Description shown in the help text. Defaults to the field's docstring entry."""

    # This can ONLY ever be a Tuple[Callable, ...]
    validator: Union[None, Callable[[Any, Any], Any], Iterable[Callable[[Any, Any], Any]]] = field(
        default=(),
        converter=lambda x: cast(tuple[Callable[[Any, Any], Any], ...], to_tuple_converter(x)),
    )

    @classmethod
    def from_annotation(cls, type_: Any) -> "tuple[Any, Arg | None]":
        """Split an :obj:`~typing.Annotated` hint into the inner type and its :class:`Arg`, if any.

        If multiple :class:`Arg` are present, the last one wins.
        """
        if not is_annotated(type_):
            return type_, None

        inner, *metadata = get_args(type_)
        arg = None
        for meta in metadata:
            if isinstance(meta, cls):
                arg = meta
        return inner, arg

    @property
    def aliases(self) -> tuple[str, ...]:
        return cast(tuple[str, ...], self._alias)
