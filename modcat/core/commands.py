"""
Parses a shell input line into one of a closed set of commands.
"""

from dataclasses import dataclass
from enum import Enum


class CommandKind(str, Enum):
    SEARCH = "search"
    DOWNLOAD = "download"
    PRINT = "print"
    CLEAR = "clear"
    SAVE = "save"
    QUIT = "quit"


# Keyword -> (kind, whether at least one argument is required)
_KEYWORDS: dict[str, tuple[CommandKind, bool]] = {
    "search": (CommandKind.SEARCH, True),
    "download": (CommandKind.DOWNLOAD, True),
    "print": (CommandKind.PRINT, True),
    "update": (CommandKind.CLEAR, False),
    "clear": (CommandKind.CLEAR, False),
    "save": (CommandKind.SAVE, False),
    "quit": (CommandKind.QUIT, False),
    "exit": (CommandKind.QUIT, False),
}


@dataclass(frozen=True)
class ParsedCommand:
    kind: CommandKind
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class NoMatch:
    """The input is not a recognized command."""

    line: str


def parse_command(tokens: list[str]) -> ParsedCommand | NoMatch:
    """
    Maps whitespace-split tokens to a command.

    Keywords are case-sensitive. `search`, `download` and `print` need at
    least one argument; the other commands ignore trailing tokens.
    """
    if not tokens:
        return NoMatch("")

    entry = _KEYWORDS.get(tokens[0])
    if entry is None:
        return NoMatch(" ".join(tokens))

    kind, needs_args = entry
    args = tuple(tokens[1:])
    if needs_args and not args:
        return NoMatch(" ".join(tokens))
    return ParsedCommand(kind, args if needs_args else ())


def parse_mod_ids(tokens: tuple[str, ...] | list[str]) -> tuple[list[int], list[str]]:
    """Splits tokens into valid positive integer ids and rejected tokens."""
    ids: list[int] = []
    invalid: list[str] = []
    for token in tokens:
        if token.isdigit() and int(token) > 0:
            ids.append(int(token))
        else:
            invalid.append(token)
    return ids, invalid
