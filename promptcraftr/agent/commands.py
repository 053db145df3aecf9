"""
Chat input parsing.

Every line typed into the chat becomes exactly one of the variants below.
Slash-prefixed lines are commands; anything else is an answer to the active
step. Unrecognised slash commands parse to ``Unknown`` and a ``/set`` without
a ``<field>: <value>`` argument parses to ``Malformed``, so the wizard can
report them instead of recording them as answers.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Answer:
    text: str


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Show:
    pass


@dataclass(frozen=True)
class Compile:
    pass


@dataclass(frozen=True)
class Import:
    payload: str


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class Set:
    field: str
    value: str


@dataclass(frozen=True)
class Malformed:
    """A known command with arguments it cannot use."""

    raw: str


@dataclass(frozen=True)
class Unknown:
    raw: str


Command = Union[Answer, Reset, Show, Compile, Import, Back, Skip, Set, Malformed, Unknown]

_SIMPLE = {
    "/reset": Reset,
    "/show": Show,
    "/compile": Compile,
    "/back": Back,
    "/skip": Skip,
}


def _parse_set(raw: str, rest: str) -> Command:
    # /set <field>: <value>
    field, sep, value = rest.partition(":")
    if not sep or not field.strip():
        return Malformed(raw)
    return Set(field.strip(), value.strip())


def parse_command(text: str) -> Command:
    """
    Parse one trimmed chat line.

    Args:
        text (str): User input, already stripped of surrounding whitespace.

    Returns:
        Command: The matching variant.
    """
    if not text.startswith("/"):
        return Answer(text)

    parts = text.split(None, 1)
    head = parts[0]
    rest = parts[1].strip() if len(parts) > 1 else ""
    if head in _SIMPLE:
        return _SIMPLE[head]()
    if head == "/import":
        return Import(rest)
    if head == "/set":
        return _parse_set(text, rest)
    return Unknown(text)
