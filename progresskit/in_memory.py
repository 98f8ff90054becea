"""A terminal kept in memory, for checking what would be drawn."""

from __future__ import annotations

import threading

from wcwidth import wcwidth

_WIDE_TAIL = None  # marks the right half of a double-width character


class _Screen:
    """A small VT100-style screen: printable text, cursor movement and erasing."""

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self.grid: list[list[str | None]] = [self._blank_row() for _ in range(rows)]
        self.row = 0
        self.col = 0
        self._mode = "ground"
        self._params = ""

    def _blank_row(self) -> list[str | None]:
        return [""] * self.cols

    def feed(self, text: str) -> None:
        for char in text:
            self._feed_char(char)

    def _feed_char(self, char: str) -> None:
        if self._mode == "esc":
            if char == "[":
                self._mode, self._params = "csi", ""
            elif char == "]":
                self._mode = "osc"
            else:
                self._mode = "ground"
        elif self._mode == "csi":
            if "\x40" <= char <= "\x7e":
                self._mode = "ground"
                self._execute_csi(char, self._params)
            else:
                self._params += char
        elif self._mode == "osc":
            if char == "\x07":
                self._mode = "ground"
            elif char == "\x1b":
                self._mode = "esc"
        elif char == "\x1b":
            self._mode = "esc"
        elif char == "\r":
            self.col = 0
        elif char == "\n":
            self._line_feed()
        elif char == "\b":
            self.col = max(0, min(self.col, self.cols - 1) - 1)
        elif char == "\t":
            self.col = min(self.cols - 1, (min(self.col, self.cols - 1) // 8 + 1) * 8)
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            pass
        else:
            self._print(char)

    def _line_feed(self) -> None:
        if self.row == self.rows - 1:
            self.grid.pop(0)
            self.grid.append(self._blank_row())
        else:
            self.row += 1

    def _print(self, char: str) -> None:
        width = wcwidth(char)
        if width == 0:
            if self.col > 0:
                target = self.grid[self.row]
                idx = min(self.col, self.cols) - 1
                if target[idx] is _WIDE_TAIL and idx > 0:
                    idx -= 1
                target[idx] = (target[idx] or "") + char
            return
        if width < 0 or width > self.cols:
            width = 1
        if self.col + width > self.cols:
            self.col = 0
            self._line_feed()
        line = self.grid[self.row]
        line[self.col] = char
        if width == 2:
            line[self.col + 1] = _WIDE_TAIL
        self.col += width

    def _execute_csi(self, final: str, params: str) -> None:
        if params.startswith(("?", ">", "=")):
            return
        values = []
        for part in params.split(";"):
            values.append(int(part) if part.isdigit() else 0)
        first = values[0] if values else 0
        count = max(first, 1)
        col = min(self.col, self.cols - 1)
        if final == "A":
            self.row = max(0, self.row - count)
            self.col = col
        elif final == "B":
            self.row = min(self.rows - 1, self.row + count)
            self.col = col
        elif final == "C":
            self.col = min(self.cols - 1, col + count)
        elif final == "D":
            self.col = max(0, col - count)
        elif final == "G":
            self.col = min(self.cols - 1, count - 1)
        elif final in "Hf":
            row = values[0] if values and values[0] else 1
            column = values[1] if len(values) > 1 and values[1] else 1
            self.row = min(self.rows - 1, row - 1)
            self.col = min(self.cols - 1, column - 1)
        elif final == "K":
            self._erase_line(first)
        elif final == "J":
            self._erase_display(first)

    def _erase_line(self, mode: int) -> None:
        line = self.grid[self.row]
        col = min(self.col, self.cols - 1)
        if mode == 0:
            span = range(col, self.cols)
        elif mode == 1:
            span = range(0, col + 1)
        else:
            span = range(self.cols)
        for idx in span:
            line[idx] = ""

    def _erase_display(self, mode: int) -> None:
        if mode == 0:
            self._erase_line(0)
            rows = range(self.row + 1, self.rows)
        elif mode == 1:
            self._erase_line(1)
            rows = range(0, self.row)
        else:
            rows = range(self.rows)
        for idx in rows:
            self.grid[idx] = self._blank_row()

    def render_row(self, line: list[str | None]) -> str:
        last = max((idx for idx, cell in enumerate(line) if cell), default=-1)
        pieces = []
        for cell in line[: last + 1]:
            if cell is _WIDE_TAIL:
                continue
            pieces.append(cell or " ")
        return "".join(pieces)


class InMemoryTerm:
    """A thread-safe terminal emulator that records output in a screen buffer.

    Written text is queued and applied to the screen on :meth:`flush`, or
    whenever the screen is inspected.
    """

    def __init__(self, rows: int, cols: int) -> None:
        if rows <= 0:
            raise ValueError("rows must be > 0")
        if cols <= 0:
            raise ValueError("cols must be > 0")
        self._lock = threading.Lock()
        self._screen = _Screen(rows, cols)
        self._pending: list[str] = []

    def __repr__(self) -> str:
        return f"InMemoryTerm(rows={self._screen.rows}, cols={self._screen.cols})"

    def _drain(self) -> None:
        # Caller holds the lock.
        if self._pending:
            text = "".join(self._pending)
            self._pending.clear()
            self._screen.feed(text)

    def reset(self) -> None:
        """Clear the screen and put the cursor back at the top left."""
        with self._lock:
            self._pending.clear()
            self._screen = _Screen(self._screen.rows, self._screen.cols)

    def contents(self) -> str:
        """Return the visible text, one line per row, without trailing blanks."""
        with self._lock:
            self._drain()
            lines = [self._screen.render_row(line).rstrip() for line in self._screen.grid]
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)

    def cursor_position(self) -> tuple[int, int]:
        """Return the cursor as ``(row, column)``, both zero-based."""
        with self._lock:
            self._drain()
            return self._screen.row, self._screen.col

    def width(self) -> int:
        with self._lock:
            return self._screen.cols

    def _move(self, n: int, code: str) -> None:
        if n:
            self.write_str(f"\x1b[{n}{code}")

    def move_cursor_up(self, n: int) -> None:
        self._move(n, "A")

    def move_cursor_down(self, n: int) -> None:
        self._move(n, "B")

    def move_cursor_right(self, n: int) -> None:
        self._move(n, "C")

    def move_cursor_left(self, n: int) -> None:
        self._move(n, "D")

    def write_line(self, s: str) -> None:
        """Write ``s`` and move to the start of the next line."""
        if len(s.splitlines()) > 1:
            raise ValueError("write_line does not accept embedded newlines")
        with self._lock:
            self._pending.append(s)
            self._pending.append("\r\n")

    def write_str(self, s: str) -> None:
        with self._lock:
            self._pending.append(s)

    def clear_line(self) -> None:
        self.write_str("\r\x1b[2K")

    def flush(self) -> None:
        """Apply all queued output to the screen."""
        with self._lock:
            self._drain()