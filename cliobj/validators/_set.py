from typing import Any

from attrs import field

from cliobj.coercion import to_string
from cliobj.utils import frozen, is_iterable


@frozen
class Set:
    """Restrict values to a fixed set.

    .. code-block:: python

        language: Annotated[str, Arg(name="Lang", validator=validators.Set("en", "fr", ignore_case=True))] = "en"

    Array values are checked element by element.
    """

    values: tuple[Any, ...] = field(converter=tuple)

    ignore_case: bool = field(default=False, kw_only=True)
    """Compare strings with ``str.lower()``."""

    def __init__(self, *values: Any, ignore_case: bool = False):
        self.__attrs_init__(values, ignore_case=ignore_case)  # pyright: ignore[reportAttributeAccessIssue]

    def _normalize(self, value: Any) -> Any:
        if self.ignore_case and isinstance(value, str):
            return value.lower()
        return value

    def __call__(self, type_: Any, value: Any):
        if is_iterable(value):
            for v in value:
                self(type_, v)
            return

        allowed = {self._normalize(v) for v in self.values}
        if self._normalize(value) not in allowed:
            raise ValueError(f"Must be one of: {self._choices()}.")

    def _choices(self) -> str:
        return "[" + ", ".join(to_string(v) for v in self.values) + "]"

    def format_message(self, name: str) -> str:
        return f"The field {name} must be one of these values: {self._choices()}."
