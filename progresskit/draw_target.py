"""Where progress output is painted, and how often."""

from __future__ import annotations

import enum
import os
import re
import sys
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TextIO

from wcwidth import wcswidth, wcwidth

MAX_BURST = 20
_FALLBACK_WIDTH = 80
_ANSI_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b[@-Z\\-_]"
)


def measure_text_width(text: str) -> int:
    """Return the number of terminal columns ``text`` takes, ignoring ANSI codes."""
    plain = _ANSI_RE.sub("", text)
    width = wcswidth(plain)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in plain)


class MultiProgressAlignment(enum.Enum):
    """Vertical alignment of a group of bars when some of them are removed."""

    TOP = "top"
    BOTTOM = "bottom"


@dataclass
class DrawState:
    """The lines to draw for one element, and how to draw them."""

    lines: list[str] = field(default_factory=list)
    orphan_lines_count: int = 0
    move_cursor: bool = False
    alignment: MultiProgressAlignment = MultiProgressAlignment.TOP

    def draw_to_term(self, term: Any, last_line_count: int) -> int:
        """Replace the previously drawn lines on ``term``; return the new line count."""
        if self.lines and self.move_cursor:
            term.move_cursor_up(last_line_count)
        else:
            n = last_line_count
            term.move_cursor_up(max(n - 1, 0))
            for i in range(n):
                term.clear_line()
                if i + 1 != n:
                    term.move_cursor_down(1)
            term.move_cursor_up(max(n - 1, 0))

        shift = 0
        if self.alignment is MultiProgressAlignment.BOTTOM and len(self.lines) < last_line_count:
            shift = last_line_count - len(self.lines)
            for _ in range(shift):
                term.write_line("")

        if self.lines:
            *head, last = self.lines
            for line in head:
                term.write_line(line)
            # no newline after the last line; pad so later output starts on a fresh line
            term.write_str(last)
            term.write_str(" " * max(term.width() - measure_text_width(last), 0))

        term.flush()
        return len(self.lines) - self.orphan_lines_count + shift

    def reset(self) -> None:
        """Forget the lines to draw and the orphan count."""
        self.lines.clear()
        self.orphan_lines_count = 0


class RateLimiter:
    """Limit draws to ``rate`` per second while allowing short bursts.

    Times are monotonic nanoseconds, as from :func:`time.monotonic_ns`.
    """

    def __init__(self, rate: int, now: int) -> None:
        if not 1 <= rate <= 255:
            raise ValueError("refresh rate must be between 1 and 255")
        self.interval_ms = 1000 // rate
        self.capacity = MAX_BURST
        self.prev = now

    def allow(self, now: int) -> bool:
        """Return True if a draw may happen at ``now``, consuming capacity."""
        if now < self.prev:
            return False
        elapsed = now - self.prev
        interval_ns = self.interval_ms * 1_000_000
        if self.capacity == 0 and elapsed < interval_ns:
            return False
        new, remainder = divmod(elapsed, interval_ns)
        self.capacity = min(MAX_BURST, self.capacity + new - 1)
        self.prev = now - remainder
        return True


class StreamTerm:
    """A buffered terminal over a text stream; output is written on flush."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._buffer: list[str] = []

    def is_term(self) -> bool:
        try:
            return bool(self.stream.isatty())
        except (AttributeError, ValueError, OSError):
            return False

    def width(self) -> int:
        try:
            return os.get_terminal_size(self.stream.fileno()).columns
        except (AttributeError, ValueError, OSError):
            return _FALLBACK_WIDTH

    def _move(self, n: int, code: str) -> None:
        if n > 0:
            self._buffer.append(f"\x1b[{n}{code}")

    def move_cursor_up(self, n: int) -> None:
        self._move(n, "A")

    def move_cursor_down(self, n: int) -> None:
        self._move(n, "B")

    def write_line(self, s: str) -> None:
        self._buffer.append(s + "\n")

    def write_str(self, s: str) -> None:
        self._buffer.append(s)

    def clear_line(self) -> None:
        self._buffer.append("\r\x1b[2K")

    def flush(self) -> None:
        if self._buffer:
            self.stream.write("".join(self._buffer))
            self._buffer.clear()
        self.stream.flush()


class _Kind(enum.Enum):
    TERM = "term"
    TERM_LIKE = "term_like"
    HIDDEN = "hidden"


class ProgressDrawTarget:
    """Where a progress display is painted, with rate limiting for terminals.

    Build one with the class methods; a terminal that is not attended by a
    user is treated as hidden so that piped output stays free of escape codes.
    """

    def __init__(self, kind: _Kind, term: Any = None, refresh_rate: int | None = None) -> None:
        self._kind = kind
        self._term = term
        self._rate_limiter = (
            RateLimiter(refresh_rate, time.monotonic_ns()) if refresh_rate is not None else None
        )
        self._draw_state = DrawState()
        self.last_line_count = 0

    def __repr__(self) -> str:
        return f"ProgressDrawTarget(kind={self._kind.value})"

    @classmethod
    def stdout(cls) -> ProgressDrawTarget:
        """Draw to standard output at most 20 times a second."""
        return cls.term(StreamTerm(sys.stdout), 20)

    @classmethod
    def stderr(cls) -> ProgressDrawTarget:
        """Draw to standard error at most 20 times a second."""
        return cls.term(StreamTerm(sys.stderr), 20)

    @classmethod
    def stdout_with_hz(cls, refresh_rate: int) -> ProgressDrawTarget:
        return cls.term(StreamTerm(sys.stdout), refresh_rate)

    @classmethod
    def stderr_with_hz(cls, refresh_rate: int) -> ProgressDrawTarget:
        return cls.term(StreamTerm(sys.stderr), refresh_rate)

    @classmethod
    def term(cls, term: Any, refresh_rate: int) -> ProgressDrawTarget:
        """Draw to a terminal object at most ``refresh_rate`` times a second."""
        return cls(_Kind.TERM, term, refresh_rate)

    @classmethod
    def term_like(cls, term_like: Any) -> ProgressDrawTarget:
        """Draw to any terminal-like object, without rate limiting."""
        return cls(_Kind.TERM_LIKE, term_like)

    @classmethod
    def hidden(cls) -> ProgressDrawTarget:
        """A target that draws nothing."""
        return cls(_Kind.HIDDEN)

    def is_hidden(self) -> bool:
        if self._kind is _Kind.HIDDEN:
            return True
        if self._kind is _Kind.TERM:
            return not self._term.is_term()
        return False

    def width(self) -> int:
        if self._kind is _Kind.HIDDEN:
            return 0
        return self._term.width()

    def draw(
        self,
        lines: Iterable[str] | DrawState,
        force_draw: bool = False,
        now: int | None = None,
    ) -> bool:
        """Draw ``lines`` (or a complete DrawState); return True if anything was drawn."""
        if self._kind is _Kind.HIDDEN:
            return False
        if self._kind is _Kind.TERM:
            if not self._term.is_term():
                return False
            when = time.monotonic_ns() if now is None else now
            if not force_draw and not self._rate_limiter.allow(when):
                return False

        state = self._draw_state
        state.reset()
        if isinstance(lines, DrawState):
            state.lines.extend(lines.lines)
            state.orphan_lines_count = lines.orphan_lines_count
            state.move_cursor = lines.move_cursor
            state.alignment = lines.alignment
        else:
            state.lines.extend(lines)
        self.last_line_count = state.draw_to_term(self._term, self.last_line_count)
        return True

    def clear(self, now: int | None = None) -> bool:
        """Erase what was last drawn; return True if the target was touched."""
        return self.draw([], force_draw=True, now=now)