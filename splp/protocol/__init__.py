"""
SPLPv1 protocol package: command words, message model, payload grammars,
the session state machine and transcript loading.
"""

from .commands import DATA_COMMANDS, Direction, MsgType, commands_in_group, is_command, normalize_command, parse_direction
from .constants import ENCODING, PROTOCOL_NAME, TERMINATOR
from .errors import ProtocolError, RejectReason, ValidationOutcome
from .grammar import (
    is_b64_char,
    is_data_char,
    is_digit,
    validate_b64_payload,
    validate_body,
    validate_tagged_payload,
    validate_version_payload,
)
from .messages import Message, ParsedMessage, parse_message
from .transcript import decode_transcript_json, iter_transcript_lines, load_transcript, parse_transcript_line
from .validator import (
    DEFAULT_SESSION,
    SESSION_RULES,
    ProtocolSession,
    SessionState,
    ValidationResult,
    check_message,
    reset_default_session,
    validate_message,
)

__all__ = [
    "Direction",
    "MsgType",
    "DATA_COMMANDS",
    "commands_in_group",
    "is_command",
    "normalize_command",
    "parse_direction",
    "PROTOCOL_NAME",
    "ENCODING",
    "TERMINATOR",
    "ProtocolError",
    "RejectReason",
    "ValidationOutcome",
    "is_digit",
    "is_data_char",
    "is_b64_char",
    "validate_version_payload",
    "validate_tagged_payload",
    "validate_b64_payload",
    "validate_body",
    "Message",
    "ParsedMessage",
    "parse_message",
    "parse_transcript_line",
    "iter_transcript_lines",
    "decode_transcript_json",
    "load_transcript",
    "SessionState",
    "SESSION_RULES",
    "ValidationResult",
    "ProtocolSession",
    "DEFAULT_SESSION",
    "validate_message",
    "check_message",
    "reset_default_session",
]
