import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from cliobj.core import CmdLine
from cliobj.exceptions import AmbiguousNameError
from cliobj.panel import CliobjPanel
from cliobj.utils import create_error_console_from_console

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _run_maybe_async(main: Callable[[Any], Any], target: Any) -> Any:
    if inspect.iscoroutinefunction(main):
        return asyncio.run(main(target))
    return main(target)


def _print_text(console: "Console", text: str):
    console.print(text, markup=False, highlight=False, soft_wrap=True, end="")


def run(
    cls_or_obj: Any,
    main: Callable[[Any], Any],
    tokens: Sequence[str] | None = None,
    *,
    console: "Console | None" = None,
    error_console: "Console | None" = None,
    width: int | None = None,
) -> int:
    """Parse the command line into a configuration object and run ``main`` with it.

    .. code-block:: python

        def main(settings: Settings):
            print(f"Hello {settings.hello}")


        if __name__ == "__main__":
            sys.exit(cliobj.run(Settings, main))

    Parameters
    ----------
    cls_or_obj: Any
        Configuration class (instantiated without arguments) or instance.
    main: Callable[[Any], Any]
        Receives the populated configuration object. May be ``async``.
    tokens: Sequence[str] | None
        Defaults to ``sys.argv[1:]``.
    console: rich.console.Console | None
        Receives help text.
    error_console: rich.console.Console | None
        Receives error panels. Defaults to a stderr copy of ``console``.
    width: int | None
        Help text width. Defaults to the console width.

    Returns
    -------
    int
        ``0`` on success or when help was shown, ``2`` for invalid arguments,
        ``1`` if ``main`` raised.
    """
    from rich.console import Console

    console = Console() if console is None else console
    error_console = create_error_console_from_console(console) if error_console is None else error_console
    width = console.width if width is None else width

    target = cls_or_obj() if inspect.isclass(cls_or_obj) else cls_or_obj
    cmdline = CmdLine(target)
    try:
        cmdline.initialize_from_cmdline(tokens)
    except AmbiguousNameError as e:
        error_console.print(CliobjPanel(e))
        return EXIT_USAGE

    if cmdline.help:
        _print_text(console, cmdline.get_help_text(width))
        return EXIT_OK

    if not cmdline.is_valid():
        _print_text(console, cmdline.get_help_text(width))
        return EXIT_USAGE

    try:
        _run_maybe_async(main, target)
    except Exception as e:
        logger.debug("Command raised.", exc_info=True)
        error_console.print(CliobjPanel(e))
        return EXIT_FAILURE
    return EXIT_OK
