from __future__ import annotations

import pytest

from splp.protocol import MsgType, ProtocolError, RejectReason
from splp.protocol.grammar import (
    is_b64_char,
    is_b64_tail_char,
    is_data_char,
    is_digit,
    validate_b64_payload,
    validate_body,
    validate_tagged_payload,
    validate_version_payload,
)


@pytest.mark.parametrize("body", ["3", "0", "007", "1234567890"])
def test_version_accepts_digits(body):
    validate_version_payload(body)


@pytest.mark.parametrize("body", ["", " 3", "3 ", "-1", "+1", "3.1", "v3", "3a", "1:2"])
def test_version_rejects_non_digits(body):
    with pytest.raises(ProtocolError) as exc_info:
        validate_version_payload(body)
    assert exc_info.value.reason is RejectReason.MALFORMED_PAYLOAD


@pytest.mark.parametrize(
    "body, tag",
    [
        ("a GET_DATA", MsgType.GET_DATA),
        ("report.2024.txt GET_FILE", MsgType.GET_FILE),
        ("ls2 GET_COMMAND", MsgType.GET_COMMAND),
        (" GET_DATA", MsgType.GET_DATA),
        ("x GET_DATA", "GET_DATA"),
    ],
)
def test_tagged_payload_accepts(body, tag):
    validate_tagged_payload(body, tag)


@pytest.mark.parametrize(
    "body, tag",
    [
        ("a", MsgType.GET_DATA),
        ("", MsgType.GET_DATA),
        ("Abc GET_DATA", MsgType.GET_DATA),
        ("a:b GET_DATA", MsgType.GET_DATA),
        ("a;b GET_DATA", MsgType.GET_DATA),
        ("a_b GET_DATA", MsgType.GET_DATA),
    ],
)
def test_tagged_payload_rejects_bad_data(body, tag):
    with pytest.raises(ProtocolError) as exc_info:
        validate_tagged_payload(body, tag)
    assert exc_info.value.reason is RejectReason.MALFORMED_PAYLOAD


@pytest.mark.parametrize(
    "body, tag",
    [
        ("a GET_FILE", MsgType.GET_DATA),
        ("a GET_DATA ", MsgType.GET_DATA),
        ("a b GET_DATA", MsgType.GET_DATA),
        ("a get_data", MsgType.GET_DATA),
        ("a ", MsgType.GET_COMMAND),
    ],
)
def test_tagged_payload_rejects_wrong_closing_tag(body, tag):
    with pytest.raises(ProtocolError) as exc_info:
        validate_tagged_payload(body, tag)
    assert exc_info.value.reason is RejectReason.TAG_MISMATCH


@pytest.mark.parametrize("body", ["SGVsbG8=", "SGVsbA==", "QUJD", "ab+/", "AAA=", "AA==", "AAAAAAAA"])
def test_b64_accepts(body):
    validate_b64_payload(body)


@pytest.mark.parametrize(
    "body",
    [
        "",
        "Q",
        "==",
        "SGVsbG8",
        "SGVs=G8=",
        "SGVsbG=8",
        "=AAA",
        "A===",
        "SGVsbG8 ",
        "SGV-bG8=",
        "SGVsbG8==",
    ],
)
def test_b64_rejects(body):
    with pytest.raises(ProtocolError) as exc_info:
        validate_b64_payload(body)
    assert exc_info.value.reason is RejectReason.MALFORMED_PAYLOAD


def test_character_predicates():
    assert is_digit("0") and is_digit("9")
    assert not is_digit(":") and not is_digit(";")
    assert is_data_char("a") and is_data_char(".") and is_data_char("5")
    assert not is_data_char("A") and not is_data_char(":") and not is_data_char(" ")
    assert is_b64_char("+") and is_b64_char("/") and is_b64_char("Z")
    assert not is_b64_char("=")
    assert is_b64_tail_char("=")


def test_validate_body_dispatches_by_command():
    validate_body(MsgType.VERSION, "2")
    validate_body(MsgType.B64, "SGVsbG8=")
    validate_body(MsgType.GET_FILE, "a.txt GET_FILE")
    with pytest.raises(ProtocolError):
        validate_body(MsgType.GET_FILE, "a.txt GET_DATA")


def test_validate_body_rejects_bare_commands():
    with pytest.raises(ProtocolError) as exc_info:
        validate_body(MsgType.CONNECT, "x")
    assert exc_info.value.reason is RejectReason.UNEXPECTED_MESSAGE


@pytest.mark.parametrize("command", ["FOO", "", "version"])
def test_validate_body_rejects_unknown_commands(command):
    with pytest.raises(ProtocolError) as exc_info:
        validate_body(command, "x")
    assert exc_info.value.reason is RejectReason.UNEXPECTED_MESSAGE
