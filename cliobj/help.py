"""Usage synopsis and help text rendering."""

import textwrap
from collections.abc import Sequence
from typing import Any

from cliobj.coercion import to_string
from cliobj.descriptor import ArgumentDescriptor
from cliobj.options import Options
from cliobj.schema import ArgumentSchema
from cliobj.utils import is_empty, is_iterable
from cliobj.validate import field_validator_message

# Room for " (S): " after the longest name.
NAME_MARGIN = 6

ERROR_INDENT = "    "


def wrap(text: str | None, width: int) -> list[str]:
    """Word-wrap ``text`` to ``width`` columns, keeping existing line breaks.

    Words longer than ``width`` are split. A non-positive ``width`` disables wrapping.
    """
    if not text:
        return []
    if width <= 0:
        return text.splitlines()
    lines = []
    for line in text.splitlines():
        lines.extend(textwrap.wrap(line, width, break_on_hyphens=False) or [""])
    return lines


def _argument_usage(descriptor: ArgumentDescriptor, options: Options) -> str:
    identifier = options.prefix + descriptor.identifier
    if descriptor.is_bool:
        return f"{identifier}[-]"
    return f"{identifier}{options.assignment_delimiter}<{descriptor.usage_hint}>"


def format_usage(schema: ArgumentSchema, options: Options) -> str:
    """One-line usage synopsis, e.g. ``app <File> /N <Name> [/?[-]]``.

    :attr:`.Options.usage`, when set, is returned verbatim.
    """
    if options.usage:
        return options.usage

    parts = [options.application_name]
    parts.extend(f"<{d.usage_hint}>" for d in schema.positional)
    parts.extend(_argument_usage(d, options) for d in schema if d.required)
    parts.extend(f"[{_argument_usage(d, options)}]" for d in schema if not d.required and d.shown_in_usage)
    return " ".join(p for p in parts if p)


def format_default(value: Any) -> str:
    """Render a default value for the help text; string arrays are quoted."""
    if is_iterable(value) and not isinstance(value, bytes):
        values = list(value)
        if all(isinstance(v, str) for v in values):
            return "[" + ", ".join(f'"{v}"' for v in values) + "]"
        return "[" + ", ".join(to_string(v) for v in values) + "]"
    return to_string(value)


def _descriptor_block(descriptor: ArgumentDescriptor, name_width: int, width: int) -> list[str]:
    indent = " " * name_width
    desc_width = width - name_width

    label = descriptor.name
    if descriptor.aliases:
        label += f" ({', '.join(descriptor.aliases)})"
    label += ": "

    description = wrap(descriptor.help, desc_width)
    lines = [label.ljust(name_width) + (description[0] if description else "")]
    lines.extend(indent + line for line in description[1:])

    if descriptor.required:
        lines.append(indent + "REQUIRED")
    elif descriptor.show_default and not is_empty(descriptor.default):
        lines.append(indent + f"Default Value: {format_default(descriptor.default)}")

    if descriptor.is_enum:
        choices = ", ".join(descriptor.element_type.__members__)
        line = indent + f"Possible Values: [{choices}]"
        if len(line) < width:
            lines.append(line)

    for validator in descriptor.validators:
        message = field_validator_message(validator, descriptor)
        if message:
            lines.extend(indent + line for line in wrap(message, desc_width))

    return lines


def format_help(
    schema: ArgumentSchema,
    options: Options,
    errors: Sequence[Any] = (),
    width: int = 80,
) -> str:
    """Full help document.

    Parameters
    ----------
    schema: ArgumentSchema
        Arguments to document, in declaration order.
    options: Options
        Title, description, application name and prefix.
    errors: Sequence[Any]
        Errors to list first; the first is prefixed with ``ERROR:``, the rest are indented.
    width: int
        Maximum line width.

    Returns
    -------
    str
        Newline-terminated text without trailing whitespace on any line.
    """
    lines = []

    if errors:
        lines.extend(wrap(f"ERROR: {errors[0]}", width))
        for error in errors[1:]:
            lines.extend(ERROR_INDENT + line for line in wrap(str(error), width - len(ERROR_INDENT)))
        lines.append("")

    lines.append(options.title)
    lines.extend(wrap(options.description or schema.description, width))
    lines.append("Usage: " + format_usage(schema, options))
    lines.append("")

    if len(schema):
        name_width = max(len(d.name) for d in schema) + NAME_MARGIN
        for descriptor in schema:
            lines.extend(_descriptor_block(descriptor, name_width, width))

    return "\n".join(line.rstrip() for line in lines) + "\n"
