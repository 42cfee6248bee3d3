import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from attrs import define, field

from cliobj import persist
from cliobj.bind import ParseState, bind_run
from cliobj.descriptor import ArgumentDescriptor
from cliobj.exceptions import NotInitializedError
from cliobj.help import format_help, format_usage
from cliobj.options import Options, get_options
from cliobj.registry import SchemaRegistry, default_registry
from cliobj.schema import ArgumentSchema
from cliobj.token import ValueRun
from cliobj.tokenize import parse_query_string, split_command_line, tokenize
from cliobj.validate import ValidationError, validate

logger = logging.getLogger(__name__)


@define(eq=False)
class CmdLine:
    """Binds command-line input onto any configuration object.

    .. code-block:: python

        from dataclasses import dataclass
        from typing import Annotated

        from cliobj import Arg, CmdLine


        @dataclass
        class Settings:
            hello: Annotated[str, Arg(name="Hello", alias="H")] = ""


        settings = Settings()
        cmdline = CmdLine(settings)
        cmdline.initialize_from_cmdline(["/H", "World"])
        assert settings.hello == "World"

    The schema is taken from ``registry`` (built from the target's class on first use)
    unless one is given explicitly. Passing ``options`` builds a private schema with
    those options instead of using the registry.
    """

    target: Any

    _schema: ArgumentSchema | None = field(default=None, alias="schema", kw_only=True)

    _options: Options | None = field(default=None, alias="options", kw_only=True)

    registry: SchemaRegistry = field(factory=lambda: default_registry, kw_only=True)

    _state: ParseState | None = field(default=None, init=False)

    _errors: list[ValidationError] = field(factory=list, init=False)

    @property
    def options(self) -> Options:
        if self._options is None:
            return get_options(type(self.target))
        return self._options

    @property
    def schema(self) -> ArgumentSchema:
        if self._schema is None:
            if self._options is None:
                self._schema = self.registry.get(type(self.target), prototype=self.target)
            else:
                # Explicit options can change comparison and positionals, so the schema is not cached.
                self._schema = ArgumentSchema.from_class(
                    type(self.target), prototype=self.target, options=self._options
                )
        return self._schema

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    def _require_state(self) -> ParseState:
        if self._state is None:
            raise NotInitializedError
        return self._state

    def _initialize(self, runs: Sequence[ValueRun]) -> None:
        state = ParseState()
        for run in runs:
            bind_run(self.target, state, run)
        self._state = state
        self._errors = validate(self.schema, self.target, state)

    def initialize_from_cmdline(self, tokens: Sequence[str] | None = None) -> None:
        """Parse command-line tokens into the target.

        Parameters
        ----------
        tokens: Sequence[str] | None
            Arguments without the program path. Defaults to ``sys.argv[1:]``.

        Raises
        ------
        AmbiguousNameError
            An abbreviated name matches more than one argument.
        """
        tokens = sys.argv[1:] if tokens is None else tokens
        schema = self.schema
        logger.debug("Initializing %s from %s.", type(self.target).__qualname__, tokens)
        self._state = None
        self._initialize(tokenize(schema, tokens, self.options))

    def initialize_from_command_line(self, command_line: str) -> None:
        """Like :meth:`initialize_from_cmdline`, for an unsplit command line (POSIX quoting)."""
        self.initialize_from_cmdline(split_command_line(command_line))

    def initialize_from_query_string(self, query: str) -> None:
        """Bind ``key=value&...`` pairs. Keys are resolved like argument names; unknown keys are ignored."""
        schema = self.schema
        runs = []
        for key, value in parse_query_string(query):
            descriptor = schema.resolve(key)
            if descriptor is None:
                logger.debug("Ignoring unknown query key %r.", key)
                continue
            runs.append(ValueRun(keyword=key, descriptor=descriptor, values=(value,)))
        self._state = None
        self._initialize(runs)

    def initialize_empty(self) -> None:
        """Enter the initialized state without binding anything."""
        self._state = None
        self._initialize(())

    def is_valid(self) -> bool:
        """Re-run validation; :obj:`True` if there are no errors."""
        state = self._require_state()
        self._errors = validate(self.schema, self.target, state)
        return not self._errors

    @property
    def errors(self) -> list[ValidationError]:
        """Errors from the latest validation."""
        self._require_state()
        return list(self._errors)

    @property
    def error_text(self) -> str:
        return "\n".join(e.message for e in self.errors)

    @property
    def help(self) -> bool:
        """Whether the built-in help argument was given."""
        descriptor = self.schema.help_descriptor
        if descriptor is None or self._state is None:
            return False
        return bool(descriptor.get(self.target, self._state.values))

    @property
    def usage(self) -> str:
        return format_usage(self.schema, self.options)

    def get_help_text(self, width: int = 80) -> str:
        self._require_state()
        return format_help(self.schema, self.options, [e.message for e in self._errors], width=width)

    def save(self, path: str | Path) -> None:
        """Write every savable argument to an XML settings file."""
        state = self._require_state()
        persist.save(path, self.schema, self.target, state)

    def restore(self, path: str | Path) -> bool:
        """Load an XML settings file written by :meth:`save`.

        Initializes empty first if needed.

        Returns
        -------
        bool
            :obj:`False` if the file does not exist.
        """
        if self._state is None:
            self.initialize_empty()
        state = self._require_state()
        restored = persist.restore(path, self.schema, self.target, state)
        if restored:
            self._errors = validate(self.schema, self.target, state)
        return restored

    def _descriptor(self, name: str) -> ArgumentDescriptor:
        return self.schema[name]

    def was_set(self, name: str) -> bool:
        """Whether argument ``name`` was bound from the input."""
        return self._state is not None and self._state.was_set(self._descriptor(name))

    def error_for(self, name: str) -> str | None:
        """Coercion error recorded for argument ``name``, if any."""
        if self._state is None:
            return None
        return self._state.error_for(self._descriptor(name))

    def value_of(self, name: str) -> Any:
        descriptor = self._descriptor(name)
        values = {} if self._state is None else self._state.values
        return descriptor.get(self.target, values)

    def __str__(self):
        return self.usage
