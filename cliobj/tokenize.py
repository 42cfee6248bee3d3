"""Tokenizer: splits raw arguments into :class:`.ValueRun` groups."""

import logging
import shlex
from collections.abc import Sequence
from urllib.parse import parse_qsl

from cliobj.options import Options
from cliobj.schema import ArgumentSchema
from cliobj.token import ValueRun
from cliobj.utils import dequote

logger = logging.getLogger(__name__)


def split_command_line(command_line: str) -> list[str]:
    """Split a raw command line with POSIX shell quoting rules."""
    return shlex.split(command_line)


def parse_query_string(query: str) -> list[tuple[str, str]]:
    """URL-decoded ``(key, value)`` pairs of ``key=value&key2=value2``.

    A leading ``?`` is allowed; blank values are kept.
    """
    if query.startswith("?"):
        query = query[1:]
    return parse_qsl(query, keep_blank_values=True)


def _split_assignment(segment: str, delimiters: Sequence[str]) -> tuple[str, str | None]:
    """Split ``name:value`` at the first configured delimiter."""
    matches = [(i, -len(d)) for d, i in ((d, segment.find(d)) for d in delimiters) if i >= 0]
    if not matches:
        return segment, None
    # Earliest match; the longest delimiter wins a tie.
    i, neg_len = min(matches)
    return segment[:i], segment[i - neg_len :]


def _value_run(tokens: Sequence[str], start: int, prefix: str) -> list[str]:
    """Maximal run of tokens from ``start`` that don't begin with ``prefix``."""
    run = []
    for token in tokens[start:]:
        if token.startswith(prefix):
            break
        run.append(dequote(token))
    return run


def tokenize(schema: ArgumentSchema, tokens: Sequence[str], options: Options | None = None) -> list[ValueRun]:
    """Group ``tokens`` into resolved :class:`.ValueRun`.

    Parameters
    ----------
    schema: ArgumentSchema
        Arguments to resolve names against.
    tokens: Sequence[str]
        Raw arguments, program path excluded.
    options: Options | None
        Supplies the prefix and assignment delimiters. Defaults to :class:`.Options`.

    Raises
    ------
    AmbiguousNameError
        A name segment matches more than one argument.

    Returns
    -------
    list[ValueRun]
        In command-line order. Unknown names are dropped.
    """
    options = Options() if options is None else options
    prefix = options.prefix
    delimiters = tuple(options.assignment_delimiters)  # pyright: ignore[reportArgumentType]
    out = []

    i = 0
    if tokens and not tokens[0].startswith(prefix) and schema.positional:
        run = _value_run(tokens, 0, prefix)
        i = len(run)
        if len(schema.positional) == 1:
            out.append(ValueRun(keyword="", descriptor=schema.positional[0], values=run))
        else:
            for descriptor, value in zip(schema.positional, run):
                out.append(ValueRun(keyword="", descriptor=descriptor, values=(value,)))
            if len(run) > len(schema.positional):
                logger.debug("Discarding surplus positional tokens %s.", run[len(schema.positional) :])

    while i < len(tokens):
        token = tokens[i]
        if not token.startswith(prefix):
            logger.debug("Skipping stray value %r.", token)
            i += 1
            continue

        name, inline = _split_assignment(token[len(prefix) :], delimiters)
        negated = name.endswith("-")
        if negated:
            name = name[:-1]

        run = _value_run(tokens, i + 1, prefix)
        if inline is not None:
            run.insert(0, dequote(inline))

        descriptor = schema.resolve(name) if name else None
        if descriptor is not None and negated and not descriptor.is_bool:
            # The "-" suffix only exists for flags; "Count-" is not a known name.
            descriptor = None
        if descriptor is None:
            logger.debug("Ignoring unknown argument %r.", token)
            i += 1 + len(run) - (inline is not None)
            continue

        if negated:
            # The following tokens are not consumed by a negated flag.
            out.append(ValueRun(keyword=name, descriptor=descriptor, negated=True, index=i))
            i += 1
            continue

        out.append(ValueRun(keyword=name, descriptor=descriptor, values=run, index=i))
        i += 1 + len(run) - (inline is not None)

    return out
