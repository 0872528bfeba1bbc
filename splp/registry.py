from __future__ import annotations

import threading
from typing import Dict, List, Optional

from splp.protocol.errors import ValidationOutcome
from splp.protocol.messages import Message
from splp.protocol.validator import ProtocolSession, ValidationResult


class SessionRegistry:
    """Keeps one ProtocolSession per conversation id."""

    def __init__(self, history_limit: Optional[int] = None) -> None:
        self._sessions: Dict[str, ProtocolSession] = {}
        self._history_limit = history_limit
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str) -> ProtocolSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = ProtocolSession(session_id=session_id, history_limit=self._history_limit)
                self._sessions[session_id] = session
            return session

    def get(self, session_id: str) -> Optional[ProtocolSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[ProtocolSession]:
        with self._lock:
            return self._sessions.pop(session_id, None)

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions.keys())

    def check(self, session_id: str, message: Message) -> ValidationResult:
        return self.get_or_create(session_id).check(message)

    def validate(self, session_id: str, message: Message) -> ValidationOutcome:
        return self.check(session_id, message).outcome

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
