from __future__ import annotations

from collections.abc import Iterable

from rich.style import Style
from rich.table import Table
from rich.text import Text

from .tag import Rounding, Tag, to_int

SEPARATOR = " "

# Terminal stand-ins for font sizes, smallest weight first.
WEIGHT_STYLES = ("dim", "default", "cyan", "bold cyan", "bold magenta")


def weight_level(weight: int, max_weight: float, levels: int = len(WEIGHT_STYLES)) -> int:
    if max_weight <= 0 or levels <= 1:
        return 0
    ratio = min(max(weight / max_weight, 0.0), 1.0)
    return min(levels - 1, to_int(ratio * (levels - 1), Rounding.ROUND))


def render_plain(
    tags: Iterable[Tag], rounding: Rounding | None = None, *, show_weights: bool = False
) -> str:
    parts: list[str] = []
    for tag in tags:
        name = tag.name or ""
        if show_weights:
            parts.append(f"{name}({tag.weight_as_int(rounding)})")
        else:
            parts.append(name)
    return SEPARATOR.join(parts)


def render_rich(
    tags: Iterable[Tag], rounding: Rounding | None = None, *, max_weight: float = 4.0
) -> Text:
    text = Text()
    for tag in tags:
        level = weight_level(tag.weight_as_int(rounding), max_weight)
        style = Style.parse(WEIGHT_STYLES[level])
        if tag.link:
            style = style + Style(link=tag.link)
        text.append(tag.name or "", style=style)
        text.append(SEPARATOR)
    text.rstrip()
    return text


def weight_table(tags: Iterable[Tag], rounding: Rounding | None = None) -> Table:
    table = Table(title="Tag cloud")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Link", overflow="fold")
    for tag in tags:
        table.add_row(
            tag.name or "",
            f"{tag.score:g}",
            str(tag.weight_as_int(rounding)),
            tag.link or "",
        )
    return table
