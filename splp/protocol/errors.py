from __future__ import annotations

from enum import IntEnum


class ValidationOutcome(IntEnum):
    """Pass/fail gate returned for every message."""

    INVALID = 0
    VALID = 1


class RejectReason(IntEnum):
    """Diagnostic codes attached to an INVALID outcome."""

    WRONG_DIRECTION = 1001
    UNEXPECTED_MESSAGE = 1002
    MALFORMED_PAYLOAD = 1003
    TAG_MISMATCH = 1004
    BAD_INPUT = 1005


class ProtocolError(Exception):
    """Structured protocol exception carrying a reject reason + message."""

    def __init__(self, reason: RejectReason, message: str = "") -> None:
        self.reason = reason
        self.message = message
        super().__init__(f"{reason.name} ({int(reason)}): {message}")

    def to_payload(self) -> dict:
        """Map error into a flat dict for reports."""
        return {
            "outcome": ValidationOutcome.INVALID.name,
            "reason": self.reason.name,
            "error_code": int(self.reason),
            "error_message": self.message,
        }


__all__ = ["ValidationOutcome", "RejectReason", "ProtocolError"]
