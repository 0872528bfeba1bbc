"""
Lexical checks for the bodies carried by SPLPv1 replies.

Each validator receives the text that follows the reply head and its single
space, and raises ProtocolError when the body does not match its grammar.
"""

from __future__ import annotations

from typing import Callable, Dict, Union

from .commands import DATA_COMMANDS, MsgType, is_command, normalize_command
from .constants import B64_ALPHABET, B64_BLOCK, B64_PAD, DATA_CHARS, DIGITS
from .errors import ProtocolError, RejectReason


def is_digit(ch: str) -> bool:
    return ch in DIGITS


def is_data_char(ch: str) -> bool:
    """Lowercase latin letter, ASCII digit or '.'."""
    return ch in DATA_CHARS


def is_b64_char(ch: str) -> bool:
    return ch in B64_ALPHABET


def is_b64_tail_char(ch: str) -> bool:
    """Base64 symbol or the padding character."""
    return ch in B64_ALPHABET or ch == B64_PAD


def validate_version_payload(body: str) -> None:
    """Version number: one or more ASCII digits and nothing else."""
    if not body:
        raise ProtocolError(RejectReason.MALFORMED_PAYLOAD, "Version number is empty")
    for pos, ch in enumerate(body):
        if not is_digit(ch):
            raise ProtocolError(
                RejectReason.MALFORMED_PAYLOAD,
                f"Version number has non-digit {ch!r} at offset {pos}",
            )


def validate_tagged_payload(body: str, tag: Union[str, MsgType]) -> None:
    """
    Check `<data> <tag>` where data is a run of [a-z0-9.] and the closing
    tag repeats the command that requested it.
    """
    tag_text = normalize_command(tag)
    pos = 0
    while pos < len(body) and body[pos] != " ":
        if not is_data_char(body[pos]):
            raise ProtocolError(
                RejectReason.MALFORMED_PAYLOAD,
                f"Character {body[pos]!r} not allowed in data at offset {pos}",
            )
        pos += 1
    if pos == len(body):
        raise ProtocolError(RejectReason.MALFORMED_PAYLOAD, f"Missing closing {tag_text} tag")
    closing = body[pos + 1 :]
    if closing != tag_text:
        raise ProtocolError(
            RejectReason.TAG_MISMATCH,
            f"Closing tag {closing!r} does not match {tag_text}",
        )


def validate_b64_payload(body: str) -> None:
    """Base64 text: alphabet check, at most two trailing '=', length multiple of 4."""
    if len(body) < 2:
        raise ProtocolError(RejectReason.MALFORMED_PAYLOAD, "Base64 payload too short")
    head, before_last, last = body[:-2], body[-2], body[-1]
    for pos, ch in enumerate(head):
        if not is_b64_char(ch):
            raise ProtocolError(
                RejectReason.MALFORMED_PAYLOAD,
                f"Character {ch!r} not allowed in base64 at offset {pos}",
            )
    if is_b64_char(before_last):
        if not is_b64_tail_char(last):
            raise ProtocolError(RejectReason.MALFORMED_PAYLOAD, f"Bad final base64 character {last!r}")
    elif not (before_last == B64_PAD and last == B64_PAD):
        raise ProtocolError(RejectReason.MALFORMED_PAYLOAD, "Bad base64 padding")
    if len(body) % B64_BLOCK != 0:
        raise ProtocolError(
            RejectReason.MALFORMED_PAYLOAD,
            f"Base64 length {len(body)} is not a multiple of {B64_BLOCK}",
        )


BodyValidator = Callable[[str], None]


def _tagged(tag: MsgType) -> BodyValidator:
    def check(body: str) -> None:
        validate_tagged_payload(body, tag)

    return check


BODY_GRAMMARS: Dict[MsgType, BodyValidator] = {
    MsgType.VERSION: validate_version_payload,
    MsgType.B64: validate_b64_payload,
    **{command: _tagged(command) for command in DATA_COMMANDS},
}


def validate_body(command: Union[str, MsgType], body: str) -> None:
    """Dispatch `body` to the grammar registered for `command`."""
    command_text = normalize_command(command)
    if not is_command(command_text):
        raise ProtocolError(RejectReason.UNEXPECTED_MESSAGE, f"{command_text!r} is not an SPLPv1 command")
    checker = BODY_GRAMMARS.get(MsgType(command_text))
    if checker is None:
        raise ProtocolError(RejectReason.UNEXPECTED_MESSAGE, f"{command} does not carry a body")
    checker(body)


__all__ = [
    "is_digit",
    "is_data_char",
    "is_b64_char",
    "is_b64_tail_char",
    "validate_version_payload",
    "validate_tagged_payload",
    "validate_b64_payload",
    "validate_body",
    "BODY_GRAMMARS",
]
