"""
Conformance checker for the SPLPv1 text protocol between peers A and B.
"""

from splp.protocol import (
    Direction,
    Message,
    ProtocolError,
    ProtocolSession,
    RejectReason,
    SessionState,
    ValidationOutcome,
    ValidationResult,
    check_message,
    validate_message,
)
from splp.registry import SessionRegistry

__version__ = "0.1.0"

__all__ = [
    "Direction",
    "Message",
    "ProtocolError",
    "ProtocolSession",
    "RejectReason",
    "SessionRegistry",
    "SessionState",
    "ValidationOutcome",
    "ValidationResult",
    "check_message",
    "validate_message",
]
