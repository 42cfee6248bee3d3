import dataclasses
import logging
import sys
import typing
from collections.abc import Callable, Iterable, Iterator
from typing import Any, cast

import attrs
import docstring_parser
from attrs import field

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from cliobj.arg import Arg
from cliobj.coercion import element_type, is_array_hint
from cliobj.descriptor import ArgumentDescriptor, Getter, Setter, attribute_accessors
from cliobj.exceptions import AmbiguousNameError, SchemaError
from cliobj.options import NameComparison, Options, get_options
from cliobj.resolve import resolve_name
from cliobj.utils import UNSET, to_tuple_converter

logger = logging.getLogger(__name__)

HELP_DESCRIPTION = "Displays command-line usage information."

ObjectValidator = Callable[[Any], Any]


@attrs.frozen(eq=False, kw_only=True)
class ArgumentSchema:
    """Immutable, ordered set of :class:`.ArgumentDescriptor` plus a name/alias lookup index.

    Building a schema registers every name and alias; the first collision raises :class:`.SchemaError`.
    Schemas hold no per-parse state and can be shared by any number of bound objects.
    """

    descriptors: tuple[ArgumentDescriptor, ...] = field(converter=tuple)

    comparison: NameComparison = field(default=NameComparison.IGNORE_CASE, converter=NameComparison)

    # This can ONLY ever be a Tuple[str, ...]
    positional_names: tuple[str, ...] = field(default=(), converter=to_tuple_converter)
    """Names/aliases of the positional-default arguments, in consumption order."""

    # This can ONLY ever be a Tuple[Callable, ...]
    validators: tuple[ObjectValidator, ...] = field(default=(), converter=to_tuple_converter)
    """Object-level validators; each receives the whole configuration object."""

    description: str | None = None
    """Application description discovered while building (e.g. from a class docstring)."""

    _index: dict[str, ArgumentDescriptor] = field(init=False, factory=dict, repr=False)

    positional: tuple[ArgumentDescriptor, ...] = field(init=False, default=())
    """Resolved positional-default arguments, in consumption order."""

    def __attrs_post_init__(self):
        for descriptor in self.descriptors:
            for name in descriptor.names:
                self._register(name, descriptor)

        positional = []
        for name in self.positional_names:
            try:
                descriptor = resolve_name(self, name)
            except AmbiguousNameError as e:
                raise SchemaError(f"The positional argument '{name}' is ambiguous: {e}") from e
            if descriptor is None:
                raise SchemaError(f"The positional argument '{name}' is not defined.")
            if descriptor in positional:
                raise SchemaError(f"The positional argument '{name}' is listed more than once.")
            positional.append(descriptor)

        if positional:
            marked = {id(d): attrs.evolve(d, positional=True) for d in positional}
            # Circumvent frozen protection; the schema is still under construction.
            object.__setattr__(self, "descriptors", tuple(marked.get(id(d), d) for d in self.descriptors))
            for key, descriptor in list(self._index.items()):
                self._index[key] = marked.get(id(descriptor), descriptor)
            object.__setattr__(self, "positional", tuple(marked[id(d)] for d in positional))

        logger.debug("Built schema with arguments %s.", [d.name for d in self.descriptors])

    def _register(self, name: str, descriptor: ArgumentDescriptor):
        if not name:
            raise SchemaError(f"Argument '{descriptor.name}' has an empty name or alias.")
        key = self.comparison.key(name)
        if key in self._index:
            raise SchemaError(f"The command-line name '{name}' is already defined.")
        self._index[key] = descriptor

    def __iter__(self) -> Iterator[ArgumentDescriptor]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def lookup(self, name: str) -> ArgumentDescriptor | None:
        """Exact (under :attr:`comparison`) name or alias lookup."""
        return self._index.get(self.comparison.key(name))

    def resolve(self, token: str) -> ArgumentDescriptor | None:
        """Exact match, then unique-prefix match. See :func:`.resolve_name`."""
        return resolve_name(self, token)

    def __getitem__(self, name: str) -> ArgumentDescriptor:
        descriptor = self.resolve(name)
        if descriptor is None:
            raise KeyError(name)
        return descriptor

    @property
    def help_descriptor(self) -> ArgumentDescriptor | None:
        descriptor = self.lookup("Help")
        return descriptor if descriptor is not None and descriptor.is_bool else None

    @classmethod
    def from_class(cls, type_: type, prototype: Any = None, options: Options | None = None) -> "ArgumentSchema":
        """Build a schema from the ``Annotated[..., Arg(...)]`` fields of a class.

        Parameters
        ----------
        type_: type
            Dataclass, attrs class, or plain class with annotations.
        prototype: Any
            Instance whose current field values become the defaults.
            If omitted, defaults come from the class definition.
        options: Options | None
            Defaults to the options attached with :func:`.options`.
        """
        options = get_options(type_) if options is None else options
        builder = SchemaBuilder(comparison=options.comparison)

        docstring = docstring_parser.parse(_class_docstring(type_))
        field_help = {p.arg_name: p.description or "" for p in docstring.params}
        builder.description = "\n\n".join(
            x for x in (docstring.short_description, docstring.long_description) if x
        ) or None

        defaults = _class_defaults(type_)
        for attribute, annotation in typing.get_type_hints(type_, include_extras=True).items():
            hint, arg = Arg.from_annotation(annotation)
            if arg is None:
                continue
            if prototype is not None:
                default = getattr(prototype, attribute, None)
            else:
                default = defaults.get(attribute)
            builder.add(
                arg.name or attribute,
                hint,
                aliases=arg.aliases,
                required=arg.required,
                usage=arg.usage,
                show_in_usage=arg.show_in_usage,
                default=default,
                validators=arg.validator,
                help=field_help.get(attribute, "") if arg.help is None else arg.help,
                allow_save=arg.allow_save,
                show_default=arg.show_default,
                attribute=attribute,
            )

        if options.help and not any(d.name.lower() == "help" for d in builder):
            builder.add_help()
        builder.positional(*cast(tuple[str, ...], options.positional))
        return builder.build()


def _class_docstring(type_: type) -> str:
    doc = type_.__doc__ or ""
    # dataclasses synthesize "Name(field: type, ...)" when no docstring is written.
    if dataclasses.is_dataclass(type_) and doc.startswith(f"{type_.__name__}("):
        return ""
    return doc


def _class_defaults(type_: type) -> dict[str, Any]:
    out = {}
    if dataclasses.is_dataclass(type_):
        for f in dataclasses.fields(type_):
            if f.default is not dataclasses.MISSING:
                out[f.name] = f.default
            elif f.default_factory is not dataclasses.MISSING:
                out[f.name] = f.default_factory()
    elif attrs.has(type_):
        for a in attrs.fields(type_):
            if isinstance(a.default, attrs.Factory):  # pyright: ignore
                # Self-referencing factories can't be evaluated without an instance.
                out[a.name] = None if a.default.takes_self else a.default.factory()
            elif a.default is not attrs.NOTHING:
                out[a.name] = a.default
    else:
        for name in typing.get_type_hints(type_):
            value = getattr(type_, name, UNSET)
            if value is not UNSET:
                out[name] = value
    return out


class SchemaBuilder:
    """Explicit, code-written registration of arguments.

    .. code-block:: python

        schema = (
            SchemaBuilder()
            .add("Hello", str, aliases="H", show_in_usage=True)
            .add("StuffILike", list[str], aliases=("S", "Stuff"))
            .add_help()
            .positional("Hello")
            .build()
        )
    """

    def __init__(self, *, comparison: NameComparison = NameComparison.IGNORE_CASE, description: str | None = None):
        self.comparison = NameComparison(comparison)
        self.description = description
        self._descriptors: list[ArgumentDescriptor] = []
        self._positional: tuple[str, ...] = ()
        self._validators: list[ObjectValidator] = []

    def __iter__(self) -> Iterator[ArgumentDescriptor]:
        return iter(self._descriptors)

    def add(
        self,
        name: str,
        hint: Any = str,
        *,
        aliases: str | Iterable[str] = (),
        required: bool = False,
        usage: str = "",
        show_in_usage: bool | None = None,
        default: Any = None,
        validators: Callable[[Any, Any], Any] | Iterable[Callable[[Any, Any], Any]] = (),
        help: str = "",
        allow_save: bool = True,
        show_default: bool | None = None,
        attribute: str | None = None,
        getter: Getter | None = None,
        setter: Setter | None = None,
        state: bool = False,
    ) -> Self:
        """Register an argument.

        Parameters
        ----------
        name: str
            Primary command-line name.
        hint: Any
            Python type of the value; ``bool`` gets flag semantics, ``list[T]``/``tuple[T, ...]`` array semantics.
        attribute: str | None
            Attribute of the target object backing this argument. Defaults to ``name``.
        getter: Getter | None
            Custom accessor; must be given together with ``setter``.
        state: bool
            Keep the value in the per-instance parse state instead of on the target object.
        """
        if (getter is None) != (setter is None):
            raise SchemaError(f"Argument '{name}' must provide both a getter and a setter, or neither.")
        if is_array_hint(hint):
            try:
                element_type(hint)
            except ValueError as e:
                raise SchemaError(f"Argument '{name}': {e}") from e
        if state:
            getter = setter = None
        elif getter is None:
            getter, setter = attribute_accessors(attribute or name)

        self._descriptors.append(
            ArgumentDescriptor(
                name=name,
                aliases=aliases,
                hint=hint,
                required=required,
                usage=usage,
                show_in_usage=show_in_usage,
                default=default,
                validators=validators,
                help=help,
                allow_save=allow_save,
                show_default=show_default,
                getter=getter,
                setter=setter,
            )
        )
        return self

    def add_help(self) -> Self:
        """Register the built-in ``Help`` flag (alias ``?``), stored in the parse state."""
        return self.add(
            "Help",
            bool,
            aliases="?",
            show_in_usage=True,
            default=False,
            help=HELP_DESCRIPTION,
            allow_save=False,
            state=True,
        )

    def positional(self, *names: str) -> Self:
        """Set the positional-default arguments, in consumption order. Replaces any prior call."""
        self._positional = names
        return self

    def validator(self, fn: ObjectValidator) -> Self:
        """Register an object-level validator; it raises ``ValueError``/``TypeError``/``AssertionError`` on failure."""
        self._validators.append(fn)
        return self

    def build(self) -> ArgumentSchema:
        return ArgumentSchema(
            descriptors=self._descriptors,
            comparison=self.comparison,
            positional_names=self._positional,
            validators=self._validators,
            description=self.description,
        )
