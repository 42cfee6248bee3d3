import logging
import threading
from typing import Any

from cliobj.options import Options
from cliobj.schema import ArgumentSchema

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Per-configuration-type cache of :class:`.ArgumentSchema`.

    Schemas are built outside the lock and published under it; if two threads race
    on first use, the first published schema wins and both callers receive it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._schemas: dict[type, ArgumentSchema] = {}

    def __contains__(self, type_: type) -> bool:
        return type_ in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def get(self, type_: type, prototype: Any = None, options: Options | None = None) -> ArgumentSchema:
        """Cached schema for ``type_``, built with :meth:`.ArgumentSchema.from_class` on first use.

        ``prototype`` and ``options`` only influence the first build.
        """
        schema = self._schemas.get(type_)
        if schema is not None:
            return schema

        logger.debug("Schema cache miss for %s.", type_.__qualname__)
        schema = ArgumentSchema.from_class(type_, prototype=prototype, options=options)
        with self._lock:
            return self._schemas.setdefault(type_, schema)

    def register(self, type_: type, schema: ArgumentSchema) -> ArgumentSchema:
        """Publish an explicitly built schema for ``type_``; an existing entry is kept."""
        with self._lock:
            return self._schemas.setdefault(type_, schema)

    def clear(self):
        with self._lock:
            self._schemas.clear()


default_registry = SchemaRegistry()
"""Registry used by :class:`.CmdLine` when none is supplied."""
