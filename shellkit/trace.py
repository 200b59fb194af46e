"""Command trace — timestamped file + colored stderr."""

from __future__ import annotations

import os
import re
import sys
from datetime import datetime
from typing import TextIO

from shellkit.models import TraceConfig


# ── ANSI color constants ────────────────────────────────────

GRAY = "\033[90m"
GREEN = "\033[32m"
CYAN = "\033[36m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
RESET = "\033[0m"


def _color_enabled(stream: TextIO | None = None) -> bool:
    """Check whether colored output should be used."""
    if os.environ.get("NO_COLOR") or os.environ.get("SHELLKIT_NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, color: str) -> str:
    """Wrap text in ANSI color codes."""
    return f"{color}{text}{RESET}"


# Patterns for auto-detecting message color
_COLOR_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"signal \d+"), YELLOW),
    (re.compile(r"rc=(?!0\b)|^failed:"), RED),      # non-zero exit code
    (re.compile(r"^ok:"), GREEN),
    (re.compile(r"^exec:"), CYAN),
    (re.compile(r"^read:"), BLUE),
]


def _detect_color(message: str) -> str | None:
    """Return the ANSI color for a message based on pattern matching."""
    for pattern, color in _COLOR_RULES:
        if pattern.search(message):
            return color
    return None


class CommandTrace:
    """Logs every command line an executor is about to run, and its outcome.

    Plain text goes to the optional file, colored text to the stream.
    """

    def __init__(self, path: str | None = None, stream: TextIO | None = None):
        self.path = path
        self._stream = stream if stream is not None else sys.stderr
        self._file = None
        if path:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._file = open(path, "a")
        self._use_color = _color_enabled(self._stream)

    @classmethod
    def from_config(cls, config: TraceConfig) -> CommandTrace | None:
        if not config.enabled:
            return None
        return cls(path=config.file)

    def log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")

        # Plain text to file
        plain_line = f"[{timestamp}] {message}\n"
        if self._file:
            self._file.write(plain_line)
            self._file.flush()

        # Colored text to terminal
        if self._use_color:
            ts = colorize(f"[{timestamp}]", GRAY)
            color = _detect_color(message)
            msg = colorize(message, color) if color else message
            print(f"{ts} {msg}", file=self._stream, flush=True)
        else:
            print(plain_line, end="", file=self._stream, flush=True)

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
