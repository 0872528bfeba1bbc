from .common import generate_session_id, utc_timestamp

__all__ = ["generate_session_id", "utc_timestamp"]
