"""ValueBinder: writes coerced value runs through descriptors into the target object."""

import logging
from collections.abc import Sequence
from typing import Any

from attrs import define, field

from cliobj.coercion import convert
from cliobj.descriptor import ArgumentDescriptor
from cliobj.exceptions import CoercionError
from cliobj.token import ValueRun

logger = logging.getLogger(__name__)


@define
class ParseState:
    """Mutable per-instance state of one ``initialize_*`` call.

    Descriptors are shared through the schema; everything that changes while parsing lives here.
    """

    explicitly_set: set[str] = field(factory=set)
    """Names of the arguments bound from the input."""

    errors: dict[str, str] = field(factory=dict)
    """Last coercion error message, by argument name."""

    values: dict[str, Any] = field(factory=dict)
    """Values of state-backed arguments (e.g. ``Help``)."""

    def was_set(self, descriptor: ArgumentDescriptor) -> bool:
        return descriptor.name in self.explicitly_set

    def error_for(self, descriptor: ArgumentDescriptor) -> str | None:
        return self.errors.get(descriptor.name)


def assign(target: Any, state: ParseState, descriptor: ArgumentDescriptor, value: Any):
    descriptor.set(target, state.values, value)
    state.explicitly_set.add(descriptor.name)
    state.errors.pop(descriptor.name, None)


def bind_value(target: Any, state: ParseState, descriptor: ArgumentDescriptor, value: str | Sequence[str]) -> bool:
    """Coerce ``value`` to the descriptor's type and assign it.

    A :class:`.CoercionError` is recorded in ``state`` rather than raised;
    the field keeps its prior value and is not marked as set.

    Returns
    -------
    bool
        :obj:`True` if the value was assigned.
    """
    try:
        converted = convert(descriptor.hint, value)
    except CoercionError as e:
        e.name = descriptor.name
        state.errors[descriptor.name] = str(e)
        logger.debug("Could not coerce %r for %s: %s", value, descriptor.name, e)
        return False
    assign(target, state, descriptor, converted)
    return True


def bind_run(target: Any, state: ParseState, run: ValueRun) -> None:
    """Apply one :class:`.ValueRun`.

    * booleans: a trailing ``-`` means :obj:`False`; otherwise the first token is coerced,
      and a missing or unrecognized token means :obj:`True`.
    * arrays: every token is coerced into an element.
    * scalars: only the first token is used; an empty run leaves the field untouched.
    """
    descriptor = run.descriptor

    if descriptor.is_bool:
        if run.negated:
            value = False
        elif run.values:
            try:
                value = convert(bool, run.values[0])
            except CoercionError:
                value = True
        else:
            value = True
        assign(target, state, descriptor, value)
    elif descriptor.is_array:
        bind_value(target, state, descriptor, run.values)
    elif run.values:
        bind_value(target, state, descriptor, run.values[0])
