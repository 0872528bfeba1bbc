from __future__ import annotations

import pytest
from pydantic import ValidationError

from splp.protocol import Direction, Message, MsgType, ProtocolError, RejectReason, parse_direction, parse_message
from splp.protocol.commands import BARE_COMMANDS, BODY_COMMANDS, commands_in_group, is_command, normalize_command


def test_message_accepts_arrow_notation():
    assert Message(direction="A->B", text="CONNECT").direction is Direction.A_TO_B
    assert Message(direction="A<-B", text="CONNECT_OK").direction is Direction.B_TO_A
    assert Message(direction="b_to_a", text="CONNECT_OK").direction is Direction.B_TO_A
    assert str(Message(direction=Direction.B_TO_A, text="VERSION 2")) == "B->A VERSION 2"


def test_message_is_immutable():
    msg = Message(direction=Direction.A_TO_B, text="CONNECT")
    with pytest.raises(ValidationError):
        msg.text = "DISCONNECT"


@pytest.mark.parametrize(
    "data",
    [
        {"direction": "A_TO_B", "text": "CONNECT\x00"},
        {"direction": "A_TO_B", "text": "CONNÉCT"},
        {"direction": "SIDEWAYS", "text": "CONNECT"},
        {"direction": "A_TO_B"},
        {"direction": "A_TO_B", "text": 5},
    ],
)
def test_from_dict_rejects_bad_input(data):
    with pytest.raises(ProtocolError) as exc_info:
        Message.from_dict(data)
    assert exc_info.value.reason is RejectReason.BAD_INPUT
    assert exc_info.value.to_payload()["reason"] == "BAD_INPUT"


@pytest.mark.parametrize(
    "text, command, body",
    [
        ("CONNECT", MsgType.CONNECT, None),
        ("GET_DATA", MsgType.GET_DATA, None),
        ("GET_DATA a GET_DATA", MsgType.GET_DATA, "a GET_DATA"),
        ("VERSION 3", MsgType.VERSION, "3"),
        ("VERSION ", MsgType.VERSION, ""),
        ("B64: SGVsbG8=", MsgType.B64, "SGVsbG8="),
        ("B64:  x", MsgType.B64, " x"),
    ],
)
def test_parse_message_recognizes(text, command, body):
    parsed = parse_message(text)
    assert parsed.recognized
    assert parsed.command is command
    assert parsed.body == body


@pytest.mark.parametrize("text", ["", "VERSION", "B64:", "B64:x", "CONNECT now", "GET_VER 1", "connect", "NOPE x"])
def test_parse_message_unrecognized(text):
    parsed = parse_message(text)
    assert not parsed.recognized
    assert not parsed.has_body


def test_command_helpers():
    assert is_command("GET_B64")
    assert not is_command("GET_BASE64")
    assert normalize_command(MsgType.B64) == "B64:"
    assert sorted(commands_in_group("data")) == ["GET_COMMAND", "GET_DATA", "GET_FILE"]
    assert parse_direction("B->A") is Direction.B_TO_A
    assert parse_direction("up") is None


def test_command_sets_follow_groups():
    assert BODY_COMMANDS == {MsgType.VERSION, MsgType.B64, MsgType.GET_DATA, MsgType.GET_FILE, MsgType.GET_COMMAND}
    assert MsgType.VERSION not in BARE_COMMANDS and MsgType.B64 not in BARE_COMMANDS
    assert BARE_COMMANDS | BODY_COMMANDS == set(MsgType)
    assert BARE_COMMANDS & BODY_COMMANDS == {MsgType.GET_DATA, MsgType.GET_FILE, MsgType.GET_COMMAND}
