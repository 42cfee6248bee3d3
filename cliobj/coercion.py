"""Type Coercion Service.

Turns raw command-line strings into typed Python values (and back again for persistence).
"""

import collections.abc
import typing
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, get_args, get_origin

from cliobj.annotations import is_enum, is_literal, is_union, resolve
from cliobj.exceptions import CoercionError

ITERABLE_TYPES = {
    Iterable,
    typing.Sequence,
    Sequence,
    collections.abc.MutableSequence,
    frozenset,
    list,
    set,
    tuple,
}


def _bool(s: str) -> bool:
    s = s.lower()
    if s in {"no", "n", "0", "false", "f"}:
        return False
    elif s in {"yes", "y", "1", "-1", "true", "t"}:
        return True
    else:
        # Unrecognized tokens are not silently treated as False.
        raise CoercionError(target_type=bool)


def _int(s: str) -> int:
    s = s.lower()
    if s.startswith("0x"):
        return int(s, 16)
    elif s.startswith("0o"):
        return int(s, 8)
    elif s.startswith("0b"):
        return int(s, 2)
    elif "." in s:
        # Casting to a float first allows for things like "30.0"
        # We handle this conditionally because very large integers can lose
        # meaningful precision when cast to a float.
        return int(round(float(s)))
    else:
        return int(s)


def _bytes(s: str) -> bytes:
    return bytes(s, encoding="utf8")


def _date(s: str) -> date:
    return date.fromisoformat(s)


def _time(s: str) -> time:
    return time.fromisoformat(s)


def _datetime(s: str) -> datetime:
    """Parse a datetime string.

    Returns
    -------
    datetime.datetime
    """
    formats = [
        "%Y-%m-%d",  # 1956-01-31
        "%Y-%m-%dT%H:%M:%S",  # 1956-01-31T10:00:00
        "%Y-%m-%d %H:%M:%S",  # 1956-01-31 10:00:00
        "%Y-%m-%dT%H:%M:%S%z",  # 1956-01-31T10:00:00+0000
        "%Y-%m-%dT%H:%M:%S.%f",  # 1956-01-31T10:00:00.123456
        "%Y-%m-%d %H:%M:%S.%f",  # 1956-01-31 10:00:00.123456
        "%Y-%m-%dT%H:%M:%S.%f%z",  # 1956-01-31T10:00:00.123456+0000
        "%Y-%m-%d %H:%M:%S%z",  # 1956-01-31 10:00:00+00:00
        "%Y-%m-%d %H:%M:%S.%f%z",  # 1956-01-31 10:00:00.123456+00:00
    ]

    for fmt in formats:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue

    raise ValueError


def _timedelta(s: str) -> timedelta:
    """Parse ``[D day[s], ]HH:MM:SS[.ffffff]`` (as written by :func:`to_string`) or a number of seconds."""
    days = 0
    if " day" in s:
        day_str, _, s = s.partition(",")
        days = int(day_str.split()[0])
        s = s.strip() or "0:00:00"

    negative = s.startswith("-")
    if negative:
        s = s[1:]

    parts = s.split(":")
    if len(parts) == 1:
        seconds = float(parts[0])
    elif len(parts) == 3:
        seconds = int(parts[0]) * 3600 + int(parts[1]) * 60 + float(parts[2])
    else:
        raise ValueError(f"Could not parse duration string: {s}")

    return timedelta(days=days, seconds=-seconds if negative else seconds)


def get_enum_member(type_: type[Enum], value: str) -> Enum:
    """Match a string to an enum's member, by name, ignoring case."""
    value_lower = value.lower()
    for name, member in type_.__members__.items():
        if name.lower() == value_lower:
            return member
    raise CoercionError(target_type=type_, value=value)


def _convert_literal(type_: Any, value: str) -> Any:
    for choice in get_args(type_):
        try:
            candidate = convert(type(choice), value)
        except CoercionError:
            continue
        if candidate == choice:
            return choice
    raise CoercionError(target_type=type_, value=value)


# For types that need more logic than just invoking their type
_converters: dict[Any, Callable[[str], Any]] = {
    bool: _bool,
    int: _int,
    bytes: _bytes,
    date: _date,
    time: _time,
    datetime: _datetime,
    timedelta: _timedelta,
}


def is_array_hint(type_: Any) -> bool:
    """Whether ``type_`` (after resolving ``Optional``/``Annotated``) holds a sequence of values."""
    type_ = resolve(type_)
    return type_ in ITERABLE_TYPES or get_origin(type_) in ITERABLE_TYPES


def element_type(type_: Any) -> Any:
    """Element type of an array hint; ``str`` if not specified."""
    type_ = resolve(type_)
    args = [x for x in get_args(type_) if x is not ...]
    if not args:
        return str
    if len(args) > 1:
        raise ValueError(f"Fixed-length tuple {type_!r} is not supported; use tuple[T, ...].")
    return args[0]


def _container_type(type_: Any) -> type:
    type_ = resolve(type_)
    origin = get_origin(type_) or type_
    if origin in (tuple, set, frozenset):
        return origin
    return list


def _convert_scalar(type_: Any, value: str) -> Any:
    type_ = resolve(type_)

    if type_ is Any or type_ is str:
        return value

    if is_union(type_):
        for member in get_args(type_):
            try:
                return _convert_scalar(member, value)
            except CoercionError:
                continue
        raise CoercionError(target_type=type_, value=value)

    if is_literal(type_):
        return _convert_literal(type_, value)

    if is_enum(type_):
        return get_enum_member(type_, value)

    converter = _converters.get(type_, type_)
    try:
        return converter(value)
    except CoercionError as e:
        if e.value is None:
            e.value = value
        raise
    except (ValueError, TypeError, ArithmeticError) as e:
        raise CoercionError(target_type=type_, value=value) from e


def convert(type_: Any, value: str | Sequence[str]) -> Any:
    """Coerce string(s) into ``type_``.

    Parameters
    ----------
    type_: Any
        Target type. Array hints (``list[int]``, ``tuple[str, ...]``, ``set[Path]``, ...) consume
        every supplied string; scalar hints consume exactly one.
    value: str | Sequence[str]
        A single string, or a sequence of strings.

    Raises
    ------
    CoercionError
        A value could not be converted.

    Returns
    -------
    Any
        Converted value.
    """
    if is_array_hint(type_):
        values = (value,) if isinstance(value, str) else tuple(value)
        inner = element_type(type_)
        try:
            converted = [_convert_scalar(inner, v) for v in values]
        except CoercionError as e:
            raise CoercionError(target_type=inner, value=values, array=True) from e
        return _container_type(type_)(converted)

    if not isinstance(value, str):
        if not value:
            raise CoercionError(msg="No value supplied.", target_type=type_)
        value = value[0]
    return _convert_scalar(type_, value)


def to_string(value: Any) -> str:
    """Render a scalar value as a string that :func:`convert` parses back into an equal value."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bytes):
        return value.decode("utf8")
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date | time):
        return value.isoformat()
    if isinstance(value, float | Decimal):
        return repr(value) if isinstance(value, float) else str(value)
    if isinstance(value, Path):
        return value.as_posix()
    return str(value)


__all__ = ["ITERABLE_TYPES", "convert", "element_type", "is_array_hint", "to_string"]
