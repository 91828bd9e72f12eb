"""Fold lexed SGR items into styled spans.

Each Text item becomes one span carrying the style active at that point:
  [StyledSpan("hello", ResolvedStyle(fg="rgb(0, 170, 0)", bg="inherit", bold=True)), ...]
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from sgr_parser import (
    Command,
    ControlCommand,
    DecodeError,
    ResetAll,
    ResetBackground,
    ResetForeground,
    SequenceItem,
    SetBackground,
    SetBold,
    SetForeground,
    Text,
    lex,
)

logger = logging.getLogger(__name__)

INHERIT = "inherit"

# Backgrounds are looked up here too, at code - 10.
COLOR_TABLE: Mapping[int, str] = MappingProxyType({
    30: "rgb(0, 0, 0)", 31: "rgb(170, 0, 0)", 32: "rgb(0, 170, 0)", 33: "rgb(170, 85, 0)",
    34: "rgb(0, 0, 170)", 35: "rgb(170, 0, 170)", 36: "rgb(0, 170, 170)", 37: "rgb(170, 170, 170)",
    90: "rgb(85, 85, 85)", 91: "rgb(255, 85, 85)", 92: "rgb(85, 255, 85)", 93: "rgb(255, 255, 85)",
    94: "rgb(85, 85, 255)", 95: "rgb(255, 85, 255)", 96: "rgb(85, 255, 255)", 97: "rgb(255, 255, 255)",
})

_BG_OFFSET = 10


class PaletteError(LookupError):
    """A color code reached the renderer that the palette does not cover."""


def _lookup(code: int) -> str:
    try:
        return COLOR_TABLE[code]
    except KeyError:
        raise PaletteError(f"Unknown color code: {code}") from None


@dataclass(frozen=True)
class ResolvedStyle:
    fg: str = INHERIT
    bg: str = INHERIT
    bold: bool = False

    def css(self) -> str:
        weight = "bold" if self.bold else "normal"
        return f"color: {self.fg}; background-color: {self.bg}; font-weight: {weight}"


@dataclass(frozen=True)
class StyledSpan:
    text: str
    style: ResolvedStyle

    def to_html(self) -> str:
        return f'<span style="{self.style.css()}">{html.escape(self.text, quote=True)}</span>'

    def to_run(self) -> dict[str, Any]:
        """Build a compact run dict, omitting inherited fields."""
        run: dict[str, Any] = {"t": self.text}
        if self.style.fg != INHERIT:
            run["fg"] = self.style.fg
        if self.style.bg != INHERIT:
            run["bg"] = self.style.bg
        if self.style.bold:
            run["b"] = True
        return run


class StyleState:
    __slots__ = ("bold", "fg", "bg")

    def __init__(self) -> None:
        self.bold: bool = False
        self.fg: int | None = None
        self.bg: int | None = None

    def reset(self) -> None:
        self.bold = False
        self.fg = None
        self.bg = None

    def resolve(self) -> ResolvedStyle:
        fg = INHERIT if self.fg is None else _lookup(self.fg)
        bg = INHERIT if self.bg is None else _lookup(self.bg - _BG_OFFSET)
        return ResolvedStyle(fg=fg, bg=bg, bold=self.bold)


@dataclass
class RenderResult:
    spans: list[StyledSpan] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    def to_html(self) -> str:
        return "".join(span.to_html() for span in self.spans)

    def to_runs(self) -> list[dict[str, Any]]:
        return [span.to_run() for span in self.spans]


def _apply(state: StyleState, command: ControlCommand) -> None:
    match command:
        case ResetAll():
            state.reset()
        case SetBold():
            state.bold = True
        case ResetForeground():
            state.fg = None
        case ResetBackground():
            state.bg = None
        case SetForeground(code=code):
            state.fg = code
        case SetBackground(code=code):
            state.bg = code
        case _:
            raise TypeError(f"Unhandled control command: {command!r}")


def render(items: Iterable[SequenceItem]) -> RenderResult:
    """Run the style state machine over *items*.

    Decode errors are logged and collected as diagnostics; they never change
    the style. Raises PaletteError if a color code misses COLOR_TABLE.
    """
    state = StyleState()
    result = RenderResult()
    for item in items:
        match item:
            case DecodeError(message=message):
                logger.warning("%s", message)
                result.diagnostics.append(message)
            case Command(command=command):
                _apply(state, command)
            case Text(value=value):
                result.spans.append(StyledSpan(value, state.resolve()))
            case _:
                raise TypeError(f"Unhandled sequence item: {item!r}")
    return result


def convert(text: str) -> RenderResult:
    return render(lex(text))


def to_html(text: str) -> str:
    """Convert raw terminal text straight to HTML with inline styles."""
    return convert(text).to_html()
