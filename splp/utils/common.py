from __future__ import annotations

import time
from typing import Optional
from uuid import uuid4


def generate_session_id(prefix: Optional[str] = None) -> str:
    """Generate a random session identifier."""
    base = uuid4().hex
    return f"{prefix}-{base}" if prefix else base


def utc_timestamp() -> float:
    """Current UTC timestamp in seconds."""
    return time.time()


__all__ = ["generate_session_id", "utc_timestamp"]
