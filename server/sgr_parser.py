"""ANSI SGR escape sequence lexer.

Splits raw terminal text into an ordered list of items:
  [Text("diff "), Command(SetBold()), Text("--git"), DecodeError("..."), ...]

Only ``ESC [ ... m`` sequences are recognised. Each ``;``-separated parameter
is decoded on its own, so one bad parameter never discards its siblings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ESC = "\x1b"
_CSI = ESC + "["
_TERMINATOR = "m"
_SEPARATOR = ";"


@dataclass(frozen=True)
class ResetAll:
    pass


@dataclass(frozen=True)
class ResetForeground:
    pass


@dataclass(frozen=True)
class ResetBackground:
    pass


@dataclass(frozen=True)
class SetBold:
    pass


@dataclass(frozen=True)
class SetForeground:
    code: int


@dataclass(frozen=True)
class SetBackground:
    code: int


ControlCommand = Union[
    ResetAll, ResetForeground, ResetBackground, SetBold, SetForeground, SetBackground
]


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Command:
    command: ControlCommand


@dataclass(frozen=True)
class DecodeError:
    message: str


SequenceItem = Union[Text, Command, DecodeError]

_LITERALS: dict[str, ControlCommand] = {
    "0": ResetAll(),
    "1": SetBold(),
    "39": ResetForeground(),
    "49": ResetBackground(),
}


def _fg_code(n: int) -> bool:
    return 30 <= n <= 37 or 90 <= n <= 97


def _bg_code(n: int) -> bool:
    return 40 <= n <= 47 or 100 <= n <= 107


def decode(param: str) -> ControlCommand | DecodeError:
    """Map one SGR parameter to a command, or a DecodeError naming it."""
    literal = _LITERALS.get(param)
    if literal is not None:
        return literal
    # Digits only: "+31", " 31", "31x" and "3_1" are rejected on purpose,
    # unlike a lenient parseInt-style prefix parse.
    if param.isascii() and param.isdigit():
        n = int(param)
        if _fg_code(n):
            return SetForeground(n)
        if _bg_code(n):
            return SetBackground(n)
    return DecodeError(f"Unrecognized control command parameter: {param!r}")


def _decode_body(body: str) -> list[SequenceItem]:
    items: list[SequenceItem] = []
    for param in body.split(_SEPARATOR):
        result = decode(param)
        if isinstance(result, DecodeError):
            items.append(result)
        else:
            items.append(Command(result))
    return items


def lex(text: str) -> list[SequenceItem]:
    """Split *text* into Text, Command and DecodeError items, in order.

    An ``ESC [`` without a closing ``m`` swallows the rest of the input and
    is reported as a single DecodeError.
    """
    items: list[SequenceItem] = []
    pending: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text.startswith(_CSI, i):
            if pending:
                items.append(Text("".join(pending)))
                pending = []
            end = text.find(_TERMINATOR, i + len(_CSI))
            if end == -1:
                items.append(DecodeError(f"Unterminated escape sequence: {text[i:]!r}"))
                return items
            items.extend(_decode_body(text[i + len(_CSI):end]))
            i = end + 1
        else:
            pending.append(text[i])
            i += 1
    if pending:
        items.append(Text("".join(pending)))
    return items


def text_content(items: list[SequenceItem]) -> str:
    """Concatenate the literal text of *items*, dropping commands and errors."""
    return "".join(item.value for item in items if isinstance(item, Text))
