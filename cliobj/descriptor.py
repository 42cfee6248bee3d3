from collections.abc import Callable, MutableMapping
from enum import Enum
from typing import Any, cast

import attrs
from attrs import field

from cliobj.annotations import get_hint_name, is_enum, resolve
from cliobj.coercion import element_type, is_array_hint
from cliobj.utils import is_empty, to_tuple_converter


class ValueKind(Enum):
    """Semantic type tag of an argument's value."""

    SCALAR = "scalar"
    BOOLEAN = "boolean"
    ARRAY = "array"


Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


def attribute_accessors(attribute: str) -> tuple[Getter, Setter]:
    """Getter/setter pair that reads/writes ``attribute`` on the target object."""

    def getter(target):
        return getattr(target, attribute)

    def setter(target, value):
        setattr(target, attribute, value)

    return getter, setter


def item_accessors(key: str) -> tuple[Getter, Setter]:
    """Getter/setter pair that reads/writes ``target[key]``; for mapping-backed configurations."""

    def getter(target):
        return target.get(key)

    def setter(target, value):
        target[key] = value

    return getter, setter


@attrs.frozen(eq=False, kw_only=True)
class ArgumentDescriptor:
    """Immutable metadata and value accessors for one bindable field.

    Descriptors are shared by every object bound with the same :class:`.ArgumentSchema`;
    per-parse state (explicitly-set flags, coercion errors) lives in :class:`.ParseState`.
    """

    name: str
    """Primary name; unique within a schema."""

    # This can ONLY ever be a Tuple[str, ...]
    aliases: tuple[str, ...] = field(default=(), converter=lambda x: cast(tuple[str, ...], to_tuple_converter(x)))

    hint: Any = str
    """Python type of the field's value."""

    required: bool = False

    usage: str = ""
    """Short hint used in the usage synopsis. Falls back to ``name``."""

    show_in_usage: bool | None = None
    """Tri-state; :obj:`None` means "shown only if required"."""

    default: Any = None
    """Field value captured when the descriptor was built."""

    # This can ONLY ever be a Tuple[Callable, ...]
    validators: tuple[Callable[[Any, Any], Any], ...] = field(default=(), converter=to_tuple_converter)

    help: str = ""
    """Description shown in the help text."""

    allow_save: bool = True

    _show_default: bool | None = field(default=None, alias="show_default")

    positional: bool = False
    """This argument is (one of) the positional-default arguments of its schema."""

    getter: Getter | None = None
    """Reads the value from the target object; :obj:`None` keeps the value in the parse state."""

    setter: Setter | None = None

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,) + self.aliases

    @property
    def kind(self) -> ValueKind:
        if is_array_hint(self.hint):
            return ValueKind.ARRAY
        elif resolve(self.hint) is bool:
            return ValueKind.BOOLEAN
        else:
            return ValueKind.SCALAR

    @property
    def is_bool(self) -> bool:
        return self.kind is ValueKind.BOOLEAN

    @property
    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    @property
    def element_type(self) -> Any:
        """Element type for arrays; the resolved hint otherwise."""
        return element_type(self.hint) if self.is_array else resolve(self.hint)

    @property
    def is_enum(self) -> bool:
        return not self.is_array and is_enum(resolve(self.hint))

    @property
    def type_name(self) -> str:
        return get_hint_name(self.element_type)

    @property
    def usage_hint(self) -> str:
        return self.usage or self.name

    @property
    def identifier(self) -> str:
        """Name used in the usage synopsis; the first alias if there is one."""
        return self.aliases[0] if self.aliases else self.name

    @property
    def shown_in_usage(self) -> bool:
        return self.required if self.show_in_usage is None else self.show_in_usage

    @property
    def show_default(self) -> bool:
        if self._show_default is None:
            return not is_empty(self.default)
        return self._show_default

    @property
    def state_backed(self) -> bool:
        return self.getter is None

    def get(self, target: Any, values: MutableMapping[str, Any]) -> Any:
        """Current value of this argument.

        Parameters
        ----------
        target: Any
            The configuration object.
        values: MutableMapping[str, Any]
            Per-instance storage used by state-backed descriptors.
        """
        if self.getter is None:
            return values.get(self.name, self.default)
        return self.getter(target)

    def set(self, target: Any, values: MutableMapping[str, Any], value: Any) -> None:
        if self.setter is None:
            values[self.name] = value
        else:
            self.setter(target, value)

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, aliases={self.aliases!r}, hint={get_hint_name(self.hint)})"
