# progresskit

Building blocks for progress reporting in terminal applications:

- **Human-readable formatting** of durations, byte sizes and counts
  (`progresskit.format`).
- **Draw targets** that paint lines to a terminal, with rate limiting,
  cursor handling and top or bottom alignment (`progresskit.draw_target`).
- **Multi-line layouts** through `MultiProgress`, which keeps several groups
  of lines in order and prints log lines above them (`progresskit.multi`).
- **An in-memory terminal** through `InMemoryTerm`, which you can use to test
  rendering without a real terminal (`progresskit.in_memory`).

## Installation

```
pip install progresskit
```

## Formatting values

```python
from datetime import timedelta

from progresskit.format import HumanBytes, HumanCount, HumanDuration, HumanFloatCount

str(HumanBytes(3 * 1024 * 1024))            # '3.00 MiB'
str(HumanDuration(timedelta(seconds=8)))    # '8 seconds'
f"{HumanDuration(timedelta(minutes=2)):#}"  # '2m'
str(HumanCount(33857009))                   # '33,857,009'
str(HumanFloatCount(33857009.123456))       # '33,857,009.1235'
```

Durations may be given as a `timedelta` or as a number of seconds; negative
durations raise `ValueError`. `FormattedDuration` gives the `HH:MM:SS` form,
with a day prefix such as `2d 03:04:05` when needed. `HumanBytes` and
`BinaryBytes` use 1024-based prefixes (`KiB`, `MiB`, ...), `DecimalBytes`
uses 1000-based ones (`kB`, `MB`, ...).

## Drawing to a terminal

```python
from progresskit.draw_target import ProgressDrawTarget

target = ProgressDrawTarget.stderr()   # at most 20 redraws a second
target.draw(["working... 10/100"])
target.draw(["working... 20/100"])
target.clear()
```

Each call to `draw` replaces the lines drawn before it and returns `True` if
anything was painted. Draws beyond the refresh rate are skipped unless
`force_draw=True` is passed; short bursts above the rate are allowed.
`stdout_with_hz` and `stderr_with_hz` choose another rate (1 to 255).

When the stream is not a terminal, the target is hidden and draws nothing, so
piping output to a file leaves no escape codes behind. Use
`ProgressDrawTarget.hidden()` to turn drawing off on purpose, and
`ProgressDrawTarget.term_like(...)` to draw, without rate limiting, to any
object that has the terminal methods (`width`, `move_cursor_up`,
`move_cursor_down`, `write_line`, `write_str`, `clear_line`, `flush`), such as
`InMemoryTerm`. `measure_text_width` gives the column width of a string,
ignoring ANSI escape codes.

## Several lines at once

```python
from progresskit.draw_target import ProgressDrawTarget
from progresskit.in_memory import InMemoryTerm
from progresskit.multi import MultiProgress

term = InMemoryTerm(10, 40)
multi = MultiProgress(ProgressDrawTarget.term_like(term))

first = multi.add()
second = multi.insert_after(first)

first.draw(["first: 1/3"], force_draw=True)
second.draw(["second: 0/5"], force_draw=True)
multi.println("starting!")

print(term.contents())
# starting!
# first: 1/3
# second: 0/5
```

`MultiProgress()` with no argument draws to standard error. Members are
placed with `add`, `insert`, `insert_from_back`, `insert_before` and
`insert_after`, and taken out with `remove`; removing a member twice does
nothing, and a removed slot is reused by the next insertion. `ordering()`
returns the slot indices in display order. `set_alignment` with
`MultiProgressAlignment.TOP` or `MultiProgressAlignment.BOTTOM` chooses where
the block stays when lines go away, and `set_move_cursor(True)` moves the
cursor up instead of clearing lines. `suspend(f)` hides every line while `f`
runs and then draws them again. Members whose handles have been dropped are
cleaned up on later draws.

## What this package does not do

There is no progress bar or spinner object here: nothing keeps a position,
length or message, works out rates or ETAs, or renders templates. You build
each line of text yourself and hand it to a draw target or a `MultiProgress`
member. There is also no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```