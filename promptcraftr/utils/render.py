import html
import re
from typing import Iterable, Tuple

from rich.table import Table
from rich.text import Text

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_CODE = re.compile(r"`([^`]+)`")

STATUS_STYLES = {
    "Captured": "green",
    "In progress": "bold yellow",
    "Pending": "dim",
}


def _styled(text: str, pattern: re.Pattern, style: str) -> Text:
    out = Text()
    pos = 0
    for match in pattern.finditer(text):
        out.append(text[pos:match.start()])
        body = Text(match.group(1))
        body.stylize(style)
        out.append_text(body)
        pos = match.end()
    out.append(text[pos:])
    return out


def _code_only(text: str) -> Text:
    return _styled(text, _CODE, "cyan")


def to_console_text(text: str) -> Text:
    """
    Convert chat text to a rich ``Text``.

    Only ``**bold**`` and inline ``code`` are recognised; newlines are kept
    as line breaks. Everything else, brackets and backslashes included, is
    shown literally.
    """
    plain = text or ""
    out = Text()
    pos = 0
    for match in _BOLD.finditer(plain):
        out.append_text(_code_only(plain[pos:match.start()]))
        body = _code_only(match.group(1))
        body.stylize("bold")
        out.append_text(body)
        pos = match.end()
    out.append_text(_code_only(plain[pos:]))
    return out


def markdown_to_html(text: str) -> str:
    """Escape ``text`` for HTML, then render bold, inline code and line breaks."""
    out = html.escape(text or "", quote=False)
    out = _BOLD.sub(r"<strong>\1</strong>", out)
    out = _CODE.sub(r"<code>\1</code>", out)
    return out.replace("\n", "<br/>")


def progress_markdown(rows: Iterable[Tuple[int, str, str]]) -> str:
    lines = ["| # | Step | Status |", "|---|---|---|"]
    for number, label, status in rows:
        cell = f"**{status}**" if status == "In progress" else status
        lines.append(f"| {number} | {label} | {cell} |")
    return "\n".join(lines)


def progress_table(rows: Iterable[Tuple[int, str, str]]) -> Table:
    table = Table(title="Progress")
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Status")
    for number, label, status in rows:
        table.add_row(str(number), label, Text(status, style=STATUS_STYLES.get(status, "")))
    return table
