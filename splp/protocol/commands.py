from __future__ import annotations

from enum import StrEnum
from typing import Dict, Iterable, Optional, Union


class Direction(StrEnum):
    """Which peer sent a message."""

    A_TO_B = "A_TO_B"
    B_TO_A = "B_TO_A"


# Transcript notations accepted on top of the enum values.
DIRECTION_ALIASES: Dict[str, Direction] = {
    "A->B": Direction.A_TO_B,
    "B<-A": Direction.A_TO_B,
    "B->A": Direction.B_TO_A,
    "A<-B": Direction.B_TO_A,
}


class MsgType(StrEnum):
    """
    Literal command words of SPLPv1.
    VERSION and B64 only ever appear as the head of a reply carrying a body.
    """

    # Handshake
    CONNECT = "CONNECT"
    CONNECT_OK = "CONNECT_OK"

    # Requests issued by A once connected
    GET_VER = "GET_VER"
    GET_DATA = "GET_DATA"
    GET_FILE = "GET_FILE"
    GET_COMMAND = "GET_COMMAND"
    GET_B64 = "GET_B64"

    # Replies from B
    VERSION = "VERSION"
    B64 = "B64:"

    # Teardown
    DISCONNECT = "DISCONNECT"
    DISCONNECT_OK = "DISCONNECT_OK"


COMMAND_GROUPS: Dict[str, str] = {
    MsgType.CONNECT.value: "handshake",
    MsgType.CONNECT_OK.value: "handshake",
    MsgType.GET_VER.value: "request",
    MsgType.GET_DATA.value: "data",
    MsgType.GET_FILE.value: "data",
    MsgType.GET_COMMAND.value: "data",
    MsgType.GET_B64.value: "request",
    MsgType.VERSION.value: "reply",
    MsgType.B64.value: "reply",
    MsgType.DISCONNECT.value: "teardown",
    MsgType.DISCONNECT_OK.value: "teardown",
}


def normalize_command(command: Union[str, MsgType]) -> str:
    """Convert enum/string into canonical command text."""
    return command.value if isinstance(command, MsgType) else str(command)


def is_command(value: str) -> bool:
    """Check if `value` is a known command word."""
    try:
        MsgType(value)
        return True
    except ValueError:
        return False


def commands_in_group(group: str) -> Iterable[str]:
    """Yield commands belonging to the specified group."""
    for command, grp in COMMAND_GROUPS.items():
        if grp == group:
            yield command


def parse_direction(value: Union[str, Direction]) -> Optional[Direction]:
    """Map `A_TO_B`, `A->B` and friends onto a Direction, None if unknown."""
    if isinstance(value, Direction):
        return value
    text = str(value).strip()
    if text in DIRECTION_ALIASES:
        return DIRECTION_ALIASES[text]
    try:
        return Direction(text.upper())
    except ValueError:
        return None


DATA_COMMANDS = frozenset(MsgType(command) for command in commands_in_group("data"))
REPLY_COMMANDS = frozenset(MsgType(command) for command in commands_in_group("reply"))

# Everything except VERSION and B64: may be sent as a bare word.
BARE_COMMANDS = frozenset(MsgType(command) for command in COMMAND_GROUPS) - REPLY_COMMANDS
# Data tags also head the reply carrying the data.
BODY_COMMANDS = REPLY_COMMANDS | DATA_COMMANDS


__all__ = [
    "Direction",
    "DIRECTION_ALIASES",
    "MsgType",
    "COMMAND_GROUPS",
    "BARE_COMMANDS",
    "BODY_COMMANDS",
    "DATA_COMMANDS",
    "REPLY_COMMANDS",
    "normalize_command",
    "is_command",
    "commands_in_group",
    "parse_direction",
]
