"""
Session state machine for SPLPv1.

A ProtocolSession holds the current protocol state of one conversation and
checks each directed message against the rule of that state. Any violation
resets the session to INIT; a rejected message in INIT leaves it there.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Mapping, Optional, Union

from splp.settings import SETTINGS
from splp.utils.common import generate_session_id, utc_timestamp

from .commands import DATA_COMMANDS, Direction, MsgType
from .errors import ProtocolError, RejectReason, ValidationOutcome
from .grammar import validate_body
from .messages import Message, parse_message

logger = logging.getLogger(__name__)


class SessionState(Enum):
    INIT = "INIT"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    WAITING_VER = "WAITING_VER"
    WAITING_DATA = "WAITING_DATA"
    WAITING_B64_DATA = "WAITING_B64_DATA"
    DISCONNECTING = "DISCONNECTING"


@dataclass(frozen=True)
class StateRule:
    """Who may speak in a state, which commands they may send, and where each leads."""

    direction: Direction
    transitions: Mapping[MsgType, SessionState]
    carries_body: bool = False


SESSION_RULES: Dict[SessionState, StateRule] = {
    SessionState.INIT: StateRule(
        Direction.A_TO_B,
        {MsgType.CONNECT: SessionState.CONNECTING},
    ),
    SessionState.CONNECTING: StateRule(
        Direction.B_TO_A,
        {MsgType.CONNECT_OK: SessionState.CONNECTED},
    ),
    SessionState.CONNECTED: StateRule(
        Direction.A_TO_B,
        {
            MsgType.GET_VER: SessionState.WAITING_VER,
            MsgType.GET_DATA: SessionState.WAITING_DATA,
            MsgType.GET_FILE: SessionState.WAITING_DATA,
            MsgType.GET_COMMAND: SessionState.WAITING_DATA,
            MsgType.GET_B64: SessionState.WAITING_B64_DATA,
            MsgType.DISCONNECT: SessionState.DISCONNECTING,
        },
    ),
    SessionState.WAITING_VER: StateRule(
        Direction.B_TO_A,
        {MsgType.VERSION: SessionState.CONNECTED},
        carries_body=True,
    ),
    SessionState.WAITING_DATA: StateRule(
        Direction.B_TO_A,
        {command: SessionState.CONNECTED for command in DATA_COMMANDS},
        carries_body=True,
    ),
    SessionState.WAITING_B64_DATA: StateRule(
        Direction.B_TO_A,
        {MsgType.B64: SessionState.CONNECTED},
        carries_body=True,
    ),
    SessionState.DISCONNECTING: StateRule(
        Direction.B_TO_A,
        {MsgType.DISCONNECT_OK: SessionState.INIT},
    ),
}

def check_rule_table(rules: Dict[SessionState, StateRule]) -> None:
    """Raise RuntimeError unless every SessionState has a rule."""
    unruled = set(SessionState) - set(rules)
    if unruled:
        raise RuntimeError(f"No session rule for {sorted(state.value for state in unruled)}")


check_rule_table(SESSION_RULES)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one message plus the diagnostics behind it."""

    outcome: ValidationOutcome
    previous_state: SessionState
    state: SessionState
    message: Optional[Message] = None
    reason: Optional[RejectReason] = None
    detail: str = ""
    timestamp: float = field(default_factory=utc_timestamp)

    @property
    def valid(self) -> bool:
        return self.outcome is ValidationOutcome.VALID

    def __bool__(self) -> bool:
        return self.valid

    def to_payload(self) -> dict:
        return {
            "direction": self.message.direction.value if self.message else None,
            "text": self.message.text if self.message else None,
            "outcome": self.outcome.name,
            "previous_state": self.previous_state.value,
            "state": self.state.value,
            "reason": self.reason.name if self.reason else None,
            "detail": self.detail,
        }


class ProtocolSession:
    """State of one SPLPv1 conversation between peers A and B."""

    def __init__(self, session_id: Optional[str] = None, history_limit: Optional[int] = None) -> None:
        self.session_id = session_id or generate_session_id("splp")
        limit = SETTINGS.history_limit if history_limit is None else history_limit
        self._state = SessionState.INIT
        # Data command A issued; its reply must close with the same tag.
        self._pending_command: Optional[MsgType] = None
        self._history: Deque[ValidationResult] = deque(maxlen=limit)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending_command(self) -> Optional[MsgType]:
        return self._pending_command

    @property
    def history(self) -> List[ValidationResult]:
        return list(self._history)

    def reset(self) -> None:
        self._state = SessionState.INIT
        self._pending_command = None

    def set_history_limit(self, limit: int) -> None:
        """Resize the history buffer, keeping the newest results."""
        self._history = deque(self._history, maxlen=limit)

    def validate(self, message: Message) -> ValidationOutcome:
        """Check `message` against the current state and apply the transition."""
        return self.check(message).outcome

    def check(self, message: Message) -> ValidationResult:
        """Like validate(), but returns the full result with the reject reason."""
        previous = self._state
        try:
            next_state, command = self._next_state(message)
        except ProtocolError as exc:
            self.reset()
            result = ValidationResult(
                outcome=ValidationOutcome.INVALID,
                previous_state=previous,
                state=self._state,
                message=message,
                reason=exc.reason,
                detail=exc.message,
            )
            logger.info("[%s] %s rejected in %s: %s", self.session_id, message, previous.value, exc)
        else:
            self._state = next_state
            self._pending_command = command if next_state is SessionState.WAITING_DATA else None
            result = ValidationResult(
                outcome=ValidationOutcome.VALID,
                previous_state=previous,
                state=next_state,
                message=message,
            )
            logger.debug("[%s] %s: %s -> %s", self.session_id, message, previous.value, next_state.value)
        self._history.append(result)
        return result

    def reject(self, error: ProtocolError) -> ValidationResult:
        """Record a message that could not even be built, resetting like any violation."""
        previous = self._state
        self.reset()
        result = ValidationResult(
            outcome=ValidationOutcome.INVALID,
            previous_state=previous,
            state=self._state,
            reason=error.reason,
            detail=error.message,
        )
        logger.info("[%s] input rejected in %s: %s", self.session_id, previous.value, error)
        self._history.append(result)
        return result

    def _next_state(self, message: Message) -> tuple[SessionState, MsgType]:
        """Return the state `message` leads to, raising ProtocolError when it is not allowed."""
        rule = SESSION_RULES[self._state]
        if message.direction is not rule.direction:
            raise ProtocolError(
                RejectReason.WRONG_DIRECTION,
                f"{self._state.value} expects {rule.direction.value}",
            )
        parsed = parse_message(message.text)
        if (
            not parsed.recognized
            or parsed.command not in rule.transitions
            or parsed.has_body != rule.carries_body
        ):
            raise ProtocolError(
                RejectReason.UNEXPECTED_MESSAGE,
                f"{message.text!r} is not allowed in {self._state.value}",
            )
        if self._state is SessionState.WAITING_DATA and parsed.command is not self._pending_command:
            raise ProtocolError(
                RejectReason.TAG_MISMATCH,
                f"Reply opens with {parsed.command.value}, expected {self._pending_command}",
            )
        if parsed.has_body:
            validate_body(parsed.command, parsed.body)
        return rule.transitions[parsed.command], parsed.command

    def __repr__(self) -> str:
        return f"ProtocolSession(session_id={self.session_id!r}, state={self._state.value})"


# Single process-wide conversation, for callers that track exactly one peer pair.
# Its history limit is re-read from SETTINGS on reset_default_session().
DEFAULT_SESSION = ProtocolSession(session_id="default")


def validate_message(
    direction: Union[str, Direction],
    text: str,
    session: Optional[ProtocolSession] = None,
) -> ValidationOutcome:
    """Validate one message against `session` (the default session if omitted)."""
    return check_message(direction, text, session).outcome


def check_message(
    direction: Union[str, Direction],
    text: str,
    session: Optional[ProtocolSession] = None,
) -> ValidationResult:
    target = session or DEFAULT_SESSION
    try:
        message = Message.from_dict({"direction": direction, "text": text})
    except ProtocolError as exc:
        return target.reject(exc)
    return target.check(message)


def reset_default_session() -> None:
    DEFAULT_SESSION.reset()
    DEFAULT_SESSION.set_history_limit(SETTINGS.history_limit)


__all__ = [
    "SessionState",
    "StateRule",
    "SESSION_RULES",
    "check_rule_table",
    "ValidationResult",
    "ProtocolSession",
    "DEFAULT_SESSION",
    "validate_message",
    "check_message",
    "reset_default_session",
]
