from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import jsonschema

from .constants import ENCODING
from .errors import ProtocolError, RejectReason
from .messages import Message

SCHEMA_DIR = Path(__file__).parent / "schemas"
TRANSCRIPT_SCHEMA = "transcript.json"
COMMENT_PREFIX = "#"


@lru_cache(maxsize=4)
def load_schema(name: str = TRANSCRIPT_SCHEMA) -> dict:
    """Load a bundled JSON schema."""
    path = SCHEMA_DIR / name
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


def parse_transcript_line(line: str) -> Optional[Message]:
    """
    Parse `<direction> <text>` into a Message.
    Blank lines and comments give None. Only the line break is stripped,
    so the text keeps any spaces the peer actually sent.
    """
    line = line.rstrip("\r\n")
    if not line.strip() or line.lstrip().startswith(COMMENT_PREFIX):
        return None
    direction, sep, text = line.partition(" ")
    if not sep:
        raise ProtocolError(RejectReason.BAD_INPUT, f"Missing message text in line {line!r}")
    return Message.from_dict({"direction": direction, "text": text})


def iter_transcript_lines(lines: Iterable[str]) -> Iterator[Message]:
    for lineno, line in enumerate(lines, start=1):
        try:
            message = parse_transcript_line(line)
        except ProtocolError as exc:
            raise ProtocolError(exc.reason, f"line {lineno}: {exc.message}") from exc
        if message is not None:
            yield message


def decode_transcript_json(document: Union[str, bytes, dict]) -> List[Message]:
    """Validate a JSON transcript against the bundled schema and build its messages."""
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as exc:
            raise ProtocolError(RejectReason.BAD_INPUT, f"Decode failed: {exc}") from exc
    try:
        jsonschema.validate(instance=document, schema=load_schema())
    except jsonschema.ValidationError as exc:
        raise ProtocolError(RejectReason.BAD_INPUT, f"Schema validation failed: {exc.message}") from exc
    return [Message.from_dict(item) for item in document["messages"]]


def load_transcript(path: Union[str, Path], encoding: str = ENCODING) -> List[Message]:
    """Read a transcript file; `.json` files use the JSON format, anything else the line format."""
    path = Path(path)
    try:
        raw = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError, LookupError) as exc:
        raise ProtocolError(RejectReason.BAD_INPUT, f"Cannot read transcript {path}: {exc}") from exc
    if path.suffix.lower() == ".json":
        return decode_transcript_json(raw)
    return list(iter_transcript_lines(raw.splitlines()))


__all__ = [
    "load_schema",
    "parse_transcript_line",
    "iter_transcript_lines",
    "decode_transcript_json",
    "load_transcript",
]
