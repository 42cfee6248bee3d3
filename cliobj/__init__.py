__version__ = "0.1.0"

__all__ = [
    "AmbiguousNameError",
    "Arg",
    "ArgumentDescriptor",
    "ArgumentSchema",
    "CliobjError",
    "CliobjPanel",
    "CmdLine",
    "CoercionError",
    "NameComparison",
    "NotInitializedError",
    "Options",
    "ParseState",
    "SchemaBuilder",
    "SchemaError",
    "SchemaRegistry",
    "UNSET",
    "ValidationError",
    "ValueKind",
    "ValueRun",
    "convert",
    "default_registry",
    "run",
    "validators",
]

from cliobj import validators
from cliobj._run import run
from cliobj.arg import Arg
from cliobj.bind import ParseState
from cliobj.coercion import convert
from cliobj.core import CmdLine
from cliobj.descriptor import ArgumentDescriptor, ValueKind
from cliobj.exceptions import (
    AmbiguousNameError,
    CliobjError,
    CoercionError,
    NotInitializedError,
    SchemaError,
)
from cliobj.options import NameComparison, Options
from cliobj.panel import CliobjPanel
from cliobj.registry import SchemaRegistry, default_registry
from cliobj.schema import ArgumentSchema, SchemaBuilder
from cliobj.token import ValueRun
from cliobj.utils import UNSET
from cliobj.validate import ValidationError
