"""Several progress displays drawn together on one target."""

from __future__ import annotations

import threading
import time
import weakref
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from progresskit.draw_target import DrawState, MultiProgressAlignment, ProgressDrawTarget

T = TypeVar("T")


def _split_lines(text: str) -> list[str]:
    """Split into lines; a trailing newline does not start a new line."""
    if not text:
        return [""]
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass
class _Slot:
    draw_state: DrawState | None = None
    ref: weakref.ref | None = None
    is_zombie: bool = False


class MultiMember:
    """A handle on one display line group inside a :class:`MultiProgress`."""

    def __init__(self, multi: MultiProgress, index: int) -> None:
        self._multi = multi
        self._index: int | None = index

    def __repr__(self) -> str:
        return f"MultiMember(index={self._index})"

    def index(self) -> int | None:
        """Return the slot this member occupies, or None once removed."""
        return self._index

    def is_hidden(self) -> bool:
        if self._index is None:
            return True
        return self._multi.is_hidden()

    def draw(self, lines: Iterable[str] | DrawState, force_draw: bool = False) -> bool:
        """Replace this member's lines and redraw; return True if anything was drawn.

        Given a DrawState, its first ``orphan_lines_count`` lines are printed
        once above all members and then forgotten.
        """
        if isinstance(lines, DrawState):
            new_lines, orphans = list(lines.lines), lines.orphan_lines_count
        else:
            new_lines, orphans = list(lines), 0
        return self._multi._draw_member(self, new_lines, orphans, force_draw)

    def clear(self) -> bool:
        """Remove this member's lines from the display."""
        return self._multi._draw_member(self, [], 0, True)


@dataclass
class _State:
    draw_target: ProgressDrawTarget
    members: list[_Slot] = field(default_factory=list)
    free_set: list[int] = field(default_factory=list)
    ordering: list[int] = field(default_factory=list)
    move_cursor: bool = False
    alignment: MultiProgressAlignment = MultiProgressAlignment.TOP
    orphan_lines: list[str] = field(default_factory=list)


class MultiProgress:
    """Manages a group of displays, possibly updated from different threads."""

    def __init__(self, draw_target: ProgressDrawTarget | None = None) -> None:
        if draw_target is None:
            draw_target = ProgressDrawTarget.stderr()
        self._lock = threading.RLock()
        self._state = _State(draw_target)

    def __repr__(self) -> str:
        return f"MultiProgress(ordering={self.ordering()})"

    def set_draw_target(self, target: ProgressDrawTarget) -> None:
        with self._lock:
            self._state.draw_target = target

    def set_move_cursor(self, move_cursor: bool) -> None:
        """Move the cursor up instead of clearing lines; avoid if members change."""
        with self._lock:
            self._state.move_cursor = move_cursor

    def set_alignment(self, alignment: MultiProgressAlignment) -> None:
        with self._lock:
            self._state.alignment = alignment

    def add(self) -> MultiMember:
        """Add a member at the end."""
        return self._internalize(lambda ordering: len(ordering))

    def insert(self, index: int) -> MultiMember:
        """Insert a member at ``index``, or at the end if ``index`` is past it."""
        return self._internalize(lambda ordering: min(index, len(ordering)))

    def insert_from_back(self, index: int) -> MultiMember:
        """Insert a member ``index`` places from the end, or at the start."""
        return self._internalize(lambda ordering: max(len(ordering) - index, 0))

    def insert_before(self, before: MultiMember) -> MultiMember:
        target = self._owned_index(before)
        return self._internalize(lambda ordering: ordering.index(target))

    def insert_after(self, after: MultiMember) -> MultiMember:
        target = self._owned_index(after)
        return self._internalize(lambda ordering: ordering.index(target) + 1)

    def remove(self, member: MultiMember) -> None:
        """Remove a member; removing it again does nothing."""
        with self._lock:
            if member._multi is not self:
                raise ValueError("member belongs to a different MultiProgress")
            idx = member._index
            if idx is None:
                return
            member._index = None
            self._remove_idx(idx)

    def ordering(self) -> list[int]:
        """Return the slot indices in display order."""
        with self._lock:
            return list(self._state.ordering)

    def println(self, msg: str) -> bool:
        """Print ``msg`` above all members; return True if it was drawn."""
        with self._lock:
            return self._draw(True, _split_lines(msg), time.monotonic_ns())

    def suspend(self, f: Callable[[], T]) -> T:
        """Clear the display, run ``f``, then draw everything again."""
        with self._lock:
            self._state.draw_target.clear(time.monotonic_ns())
            result = f()
            self._draw(True, None, time.monotonic_ns())
            return result

    def clear(self) -> bool:
        with self._lock:
            return self._state.draw_target.clear(time.monotonic_ns())

    def is_hidden(self) -> bool:
        with self._lock:
            return self._state.draw_target.is_hidden()

    def _owned_index(self, member: MultiMember) -> int:
        if member._multi is not self:
            raise ValueError("member belongs to a different MultiProgress")
        idx = member._index
        if idx is None:
            raise ValueError("member has been removed")
        return idx

    def _internalize(self, position: Callable[[list[int]], int]) -> MultiMember:
        with self._lock:
            state = self._state
            pos = position(state.ordering)
            if state.free_set:
                idx = state.free_set.pop()
                state.members[idx] = _Slot()
            else:
                state.members.append(_Slot())
                idx = len(state.members) - 1
            state.ordering.insert(pos, idx)
            member = MultiMember(self, idx)
            state.members[idx].ref = weakref.ref(member)
            return member

    def _remove_idx(self, idx: int) -> None:
        state = self._state
        if idx in state.free_set:
            return
        state.members[idx] = _Slot()
        state.free_set.append(idx)
        state.ordering.remove(idx)

    def _draw_member(
        self, member: MultiMember, lines: list[str], orphans: int, force_draw: bool
    ) -> bool:
        with self._lock:
            idx = member._index
            if idx is None:
                return False
            state = self._state
            slot = state.members[idx]
            if slot.draw_state is None:
                slot.draw_state = DrawState(
                    move_cursor=state.move_cursor, alignment=state.alignment
                )
            draw_state = slot.draw_state
            draw_state.reset()
            draw_state.lines.extend(lines)
            state.orphan_lines.extend(draw_state.lines[:orphans])
            del draw_state.lines[:orphans]
            return self._draw(force_draw, None, time.monotonic_ns())

    def _draw(self, force_draw: bool, extra_lines: list[str] | None, now: int) -> bool:
        state = self._state

        # reap dead members at the head of the list
        adjust = 0
        while state.ordering:
            slot = state.members[state.ordering[0]]
            if not slot.is_zombie:
                break
            if slot.draw_state is not None:
                adjust += len(slot.draw_state.lines)
            self._remove_idx(state.ordering[0])
        target = state.draw_target
        target.last_line_count = max(target.last_line_count - adjust, 0)

        extra = extra_lines or []
        orphan_count = len(state.orphan_lines)
        force_draw = force_draw or orphan_count > 0

        lines = [*extra, *state.orphan_lines]
        for idx in state.ordering:
            slot = state.members[idx]
            if slot.draw_state is not None:
                lines.extend(slot.draw_state.lines)
        frame = DrawState(
            lines=lines,
            orphan_lines_count=orphan_count + len(extra),
            move_cursor=state.move_cursor,
            alignment=state.alignment,
        )
        if not target.draw(frame, force_draw, now):
            return False

        state.orphan_lines.clear()
        for idx in state.ordering:
            slot = state.members[idx]
            if slot.ref is None or slot.ref() is None:
                slot.is_zombie = True
        return True