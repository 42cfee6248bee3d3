from attrs import field

from cliobj.descriptor import ArgumentDescriptor
from cliobj.utils import frozen


@frozen(kw_only=True)
class ValueRun:
    """A resolved argument name plus the tokens that follow it."""

    keyword: str
    """The name as it appeared on the command line, prefix and trailing ``-`` removed.
    Empty for positional-default tokens."""

    descriptor: ArgumentDescriptor = field(hash=False)

    # This can ONLY ever be a Tuple[str, ...]
    values: tuple[str, ...] = field(default=(), converter=tuple)
    """De-quoted value tokens; possibly empty."""

    negated: bool = False
    """The name carried a trailing ``-``."""

    index: int = 0
    """Position of the name token in the source token list."""
