from collections.abc import Sequence
from typing import Any

from cliobj.utils import frozen


@frozen(kw_only=True)
class Number:
    """Limit input number to a value range.

    Example Usage:

    .. code-block:: python

        from dataclasses import dataclass
        from typing import Annotated

        from cliobj import Arg, validators


        @dataclass
        class Settings:
            age: Annotated[int, Arg(name="Age", validator=validators.Number(gte=0, lte=150))] = 0

    .. code-block:: console

        $ my-script /Age 200
        ERROR: The field Age must be >= 0 and <= 150.
    """

    lt: int | float | None = None
    """Input value must be **less than** this value."""

    lte: int | float | None = None
    """Input value must be **less than or equal** this value."""

    gt: int | float | None = None
    """Input value must be **greater than** this value."""

    gte: int | float | None = None
    """Input value must be **greater than or equal** this value."""

    modulo: int | float | None = None
    """Input value must be a multiple of this value."""

    def _rules(self):
        return (
            (">", self.gt, lambda v, b: v > b),
            (">=", self.gte, lambda v, b: v >= b),
            ("<", self.lt, lambda v, b: v < b),
            ("<=", self.lte, lambda v, b: v <= b),
        )

    def __call__(self, type_: Any, value: Any):
        if isinstance(value, str):
            raise TypeError
        if isinstance(value, Sequence):
            for v in value:
                self(type_, v)
            return
        if not isinstance(value, int | float):
            return

        for op, bound, check in self._rules():
            if bound is not None and not check(value, bound):
                raise ValueError(f"Must be {op} {bound}.")
        if self.modulo is not None and value % self.modulo:
            raise ValueError(f"Must be a multiple of {self.modulo}.")

    def format_message(self, name: str) -> str:
        """Describe the accepted range of ``name``; used in error and help text."""
        rules = [f"{op} {bound}" for op, bound, _ in self._rules() if bound is not None]
        if self.modulo is not None:
            rules.append(f"a multiple of {self.modulo}")
        if not rules:
            return f"The field {name} must be a number."
        return f"The field {name} must be {' and '.join(rules)}."
