import logging
from collections.abc import Sequence
from typing import Any

from cliobj.bind import ParseState
from cliobj.coercion import to_string
from cliobj.descriptor import ArgumentDescriptor
from cliobj.schema import ArgumentSchema
from cliobj.utils import frozen

logger = logging.getLogger(__name__)


@frozen
class ValidationError:
    """One problem found by :func:`validate`."""

    field_name: str
    """Argument name; empty for object-level validators."""

    message: str

    def __str__(self):
        return self.message


def render_value(value: Any) -> str:
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return "[" + ", ".join(to_string(v) for v in value) + "]"
    return to_string(value)


def field_validator_message(validator: Any, descriptor: ArgumentDescriptor) -> str | None:
    """Static description of ``validator`` for ``descriptor``, if the validator provides one."""
    format_message = getattr(validator, "format_message", None)
    return None if format_message is None else format_message(descriptor.name)


def validate(schema: ArgumentSchema, target: Any, state: ParseState) -> list[ValidationError]:
    """Check ``target`` after binding.

    Order: missing required arguments, recorded coercion errors, field validators
    (declaration order), object-level validators.

    Field validators are skipped for :obj:`None` values.
    """
    errors = []

    for descriptor in schema:
        if descriptor.required and not state.was_set(descriptor):
            errors.append(ValidationError(descriptor.name, f"{descriptor.name} is required."))

    for descriptor in schema:
        error = state.error_for(descriptor)
        if error:
            errors.append(ValidationError(descriptor.name, f"{descriptor.name} has an error: {error}"))

    for descriptor in schema:
        if not descriptor.validators:
            continue
        value = descriptor.get(target, state.values)
        if value is None:
            continue
        for validator in descriptor.validators:
            try:
                validator(descriptor.hint, value)
            except (ValueError, TypeError, AssertionError) as e:
                message = field_validator_message(validator, descriptor)
                if message is None:
                    message = f'Invalid value "{render_value(value)}" for "{descriptor.name}". {e}'.rstrip()
                errors.append(ValidationError(descriptor.name, message))

    for validator in schema.validators:
        try:
            validator(target)
        except (ValueError, TypeError, AssertionError) as e:
            errors.append(ValidationError("", str(e)))

    if errors:
        logger.debug("Validation produced %d error(s).", len(errors))
    return errors
