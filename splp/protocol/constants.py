"""Protocol-wide constants for SPLPv1."""

import string

PROTOCOL_NAME = "SPLPv1"
ENCODING = "ascii"
# Sequence terminator; never part of a message text.
TERMINATOR = "\x00"

DIGITS = frozenset(string.digits)
DATA_CHARS = frozenset(string.ascii_lowercase + string.digits + ".")
B64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")
B64_PAD = "="
B64_BLOCK = 4

__all__ = [
    "PROTOCOL_NAME",
    "ENCODING",
    "TERMINATOR",
    "DIGITS",
    "DATA_CHARS",
    "B64_ALPHABET",
    "B64_PAD",
    "B64_BLOCK",
]
