from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .commands import BARE_COMMANDS, BODY_COMMANDS, Direction, MsgType, is_command, parse_direction
from .constants import TERMINATOR
from .errors import ProtocolError, RejectReason


class Message(BaseModel):
    """One directed SPLPv1 message as seen on the wire, terminator stripped."""

    model_config = ConfigDict(frozen=True)

    direction: Direction = Field(..., description="A_TO_B or B_TO_A")
    text: str = Field(..., description="Message text without the terminator")

    @field_validator("direction", mode="before")
    @classmethod
    def _coerce_direction(cls, value: Any) -> Any:
        return parse_direction(value) or value

    @field_validator("text")
    @classmethod
    def _check_text(cls, value: str) -> str:
        if not value.isascii():
            raise ValueError("text must be ASCII")
        if TERMINATOR in value:
            raise ValueError("text must not contain the sequence terminator")
        return value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        try:
            return cls(**data)
        except (TypeError, ValidationError) as exc:
            raise ProtocolError(RejectReason.BAD_INPUT, f"Message validation failed: {exc}") from exc

    def __str__(self) -> str:
        arrow = "A->B" if self.direction is Direction.A_TO_B else "B->A"
        return f"{arrow} {self.text}"


class ParsedMessage(BaseModel):
    """
    Text classified once into a recognized command and an optional body.
    `command` is None for text that does not start with any SPLPv1 word.
    """

    model_config = ConfigDict(frozen=True)

    command: Optional[MsgType] = None
    body: Optional[str] = None

    @property
    def recognized(self) -> bool:
        return self.command is not None

    @property
    def has_body(self) -> bool:
        return self.body is not None


def parse_message(text: str) -> ParsedMessage:
    """Split `text` into its head word and, for replies, the body after one space."""
    if is_command(text) and MsgType(text) in BARE_COMMANDS:
        return ParsedMessage(command=MsgType(text))
    head, sep, rest = text.partition(" ")
    if sep and is_command(head) and MsgType(head) in BODY_COMMANDS:
        return ParsedMessage(command=MsgType(head), body=rest)
    return ParsedMessage()


__all__ = ["Message", "ParsedMessage", "parse_message"]
