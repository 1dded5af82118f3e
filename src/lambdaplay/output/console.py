"""Rich Console factory, theme, and expression styling.

Consoles render into a StringIO buffer so renderers can return plain
strings. Rich drops color codes on its own when stdout is not a terminal,
which covers CliRunner and pipes.
"""

from __future__ import annotations

import re
from io import StringIO

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

LAMBDA_THEME = Theme(
    {
        "lp.ok": "bold green",
        "lp.error": "bold red",
        "lp.warning": "bold yellow",
        "lp.op": "bold cyan",
        "lp.key": "dim",
        "lp.name": "bold blue",
        "lp.expr": "bold",
        "lp.expanded": "magenta",
        "lp.arrow": "dim",
        "lp.lambda": "bold magenta",
        "lp.param": "cyan",
    }
)

# A lambda sign (or backslash) and the parameter that follows it.
_BINDER = re.compile(r"([λ\\])([^\W\d][^\Wλ]*)?")


def create_console(*, width: int = 120) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(file=StringIO(), theme=LAMBDA_THEME, highlight=False, width=width)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    if not isinstance(console.file, StringIO):
        msg = "get_output needs a console made by create_console"
        raise TypeError(msg)
    return console.file.getvalue()


def expression_text(source: str, style: str = "lp.expr") -> Text:
    """Styled Text for a lambda expression: binders and parameters stand out."""
    text = Text(source, style=style)
    for match in _BINDER.finditer(source):
        text.stylize("lp.lambda", match.start(1), match.end(1))
        if match.group(2):
            text.stylize("lp.param", match.start(2), match.end(2))
    return text
