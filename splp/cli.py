from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable, List, Optional, TextIO

from splp.protocol.constants import PROTOCOL_NAME
from splp.protocol.errors import ProtocolError
from splp.protocol.messages import Message
from splp.protocol.transcript import load_transcript, parse_transcript_line
from splp.protocol.validator import ProtocolSession, ValidationResult
from splp.settings import LOG_LEVELS, SETTINGS, ConfigError, load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_BAD_INPUT = 2


def format_result(index: int, result: ValidationResult) -> str:
    shown = str(result.message) if result.message else "<unreadable>"
    line = f"{index:>4}  {shown:<40} {result.outcome.name:<8} {result.state.value}"
    if result.reason:
        line += f"  ({result.reason.name}: {result.detail})"
    return line


class ValidatorCLI:
    """Feeds messages through one session and reports each outcome."""

    def __init__(self, session: Optional[ProtocolSession] = None, out: Optional[TextIO] = None, as_json: bool = False) -> None:
        self.session = session or ProtocolSession()
        self.out = out or sys.stdout
        self.as_json = as_json
        self.results: List[ValidationResult] = []

    @property
    def all_valid(self) -> bool:
        return all(self.results)

    def feed(self, message: Message) -> ValidationResult:
        return self._record(self.session.check(message))

    def run_messages(self, messages: Iterable[Message], stop_on_invalid: bool = False) -> bool:
        for message in messages:
            if not self.feed(message) and stop_on_invalid:
                break
        self.finish()
        return self.all_valid

    def run_interactive(self, stream: TextIO, prompt: str = "") -> bool:
        """Read `<direction> <text>` lines; `state`, `reset`, `help` and `quit` are local commands."""
        while True:
            if prompt:
                print(prompt, end="", file=self.out, flush=True)
            line = stream.readline()
            if not line:
                break
            match line.strip():
                case "help":
                    self._show_help()
                case "state":
                    print(self.session.state.value, file=self.out)
                case "reset":
                    self.session.reset()
                    print(self.session.state.value, file=self.out)
                case "quit":
                    break
                case _:
                    self._feed_line(line)
        self.finish()
        return self.all_valid

    def finish(self) -> None:
        if self.as_json:
            json.dump([result.to_payload() for result in self.results], self.out, indent=2)
            print(file=self.out)

    def _feed_line(self, line: str) -> None:
        try:
            message = parse_transcript_line(line)
        except ProtocolError as exc:
            self._record(self.session.reject(exc))
            return
        if message is not None:
            self.feed(message)

    def _record(self, result: ValidationResult) -> ValidationResult:
        self.results.append(result)
        if not self.as_json:
            print(format_result(len(self.results), result), file=self.out)
        return result

    def _show_help(self) -> None:
        print(
            "Enter messages as '<A->B|B->A> <text>', e.g. 'A->B CONNECT'. "
            "Commands: state, reset, help, quit",
            file=self.out,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="splp-validate",
        description=f"Check {PROTOCOL_NAME} messages against the protocol state machine.",
    )
    parser.add_argument("transcript", nargs="?", help="transcript file (.json or line format); stdin when omitted")
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    parser.add_argument("--stop-on-invalid", action="store_true", help="stop at the first invalid message")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="override SPLP_LOG_LEVEL")
    parser.add_argument("--env-file", default=".env", help="dotenv file to load (default: .env)")
    return parser


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = build_parser().parse_args(argv)
    try:
        load_settings(args.env_file)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT
    level = args.log_level or SETTINGS.log_level
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)

    cli = ValidatorCLI(out=stdout, as_json=args.json)
    if args.transcript:
        try:
            messages = load_transcript(args.transcript, encoding=SETTINGS.transcript_encoding)
        except ProtocolError as exc:
            logger.error("Cannot load transcript: %s", exc)
            print(f"error: {exc.message}", file=sys.stderr)
            return EXIT_BAD_INPUT
        ok = cli.run_messages(messages, stop_on_invalid=args.stop_on_invalid)
    else:
        ok = cli.run_interactive(stdin, prompt="> " if stdin.isatty() else "")
    return EXIT_OK if ok else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
