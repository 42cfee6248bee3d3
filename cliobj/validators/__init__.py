__all__ = [
    "Number",
    "Set",
]

from cliobj.validators._number import Number
from cliobj.validators._set import Set
