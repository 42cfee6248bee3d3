"""Rich rendering of errors reported by :func:`cliobj.run`."""

from typing import TYPE_CHECKING

from cliobj.exceptions import CliobjError

if TYPE_CHECKING:
    from rich.panel import Panel


def CliobjPanel(error: BaseException | str, title: str | None = None, style: str = "red") -> "Panel":  # noqa: N802
    """Wrap an error message in a rounded, left-titled :class:`~rich.panel.Panel`.

    .. code-block:: text

        ╭─ Error ──────────────────────────────────╮
        │ Message content here.                    │
        ╰──────────────────────────────────────────╯

    Parameters
    ----------
    error: BaseException | str
        Body of the panel.
    title: str | None
        Defaults to ``"Error"`` for strings and :class:`.CliobjError`,
        otherwise to the exception's class name.
    style: str
        Rich style for the panel border.
    """
    from rich import box
    from rich.panel import Panel
    from rich.text import Text

    if title is None:
        if isinstance(error, str | CliobjError):
            title = "Error"
        else:
            title = type(error).__name__

    return Panel(Text(str(error), "default"), title=title, style=style, box=box.ROUNDED, title_align="left")
