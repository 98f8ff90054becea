"""Human-friendly formatting of durations, byte sizes and counts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta

_MICRO = timedelta(microseconds=1)

_SECOND = 1_000_000
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_YEAR = 365 * _DAY

# (length in microseconds, long name, short name), largest first
_UNITS = (
    (_YEAR, "year", "y"),
    (_WEEK, "week", "w"),
    (_DAY, "day", "d"),
    (_HOUR, "hour", "h"),
    (_MINUTE, "minute", "m"),
    (_SECOND, "second", "s"),
)

_BINARY_PREFIXES = ("Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi")
_DECIMAL_PREFIXES = ("k", "M", "G", "T", "P", "E", "Z", "Y")


def _to_micros(value: timedelta | float | int) -> int:
    """Convert a duration (timedelta or seconds) to whole microseconds."""
    micros = value // _MICRO if isinstance(value, timedelta) else round(value * 1_000_000)
    if micros < 0:
        raise ValueError("durations must not be negative")
    return micros


def _group_thousands(digits: str) -> str:
    """Insert a comma before every group of three trailing characters."""
    out = []
    length = len(digits)
    for idx, char in enumerate(digits):
        out.append(char)
        remaining = length - idx - 1
        if remaining > 0 and remaining % 3 == 0:
            out.append(",")
    return "".join(out)


def _prefixed_bytes(amount: int, base: int, prefixes: tuple[str, ...]) -> str:
    number = float(amount)
    if number < base:
        return f"{number:.0f}B"
    index = -1
    while number >= base and index < len(prefixes) - 1:
        number /= base
        index += 1
    return f"{number:.2f} {prefixes[index]}B"


@dataclass(frozen=True)
class FormattedDuration:
    """A duration shown as ``HH:MM:SS``, with a day count when needed."""

    value: timedelta | float | int

    def __str__(self) -> str:
        total = _to_micros(self.value) // _SECOND
        total, seconds = divmod(total, 60)
        total, minutes = divmod(total, 60)
        days, hours = divmod(total, 24)
        if days > 0:
            return f"{days}d {hours:02}:{minutes:02}:{seconds:02}"
        return f"{hours:02}:{minutes:02}:{seconds:02}"


@dataclass(frozen=True)
class HumanDuration:
    """A duration rounded to the most readable unit, e.g. ``3 minutes``.

    Formatting with the ``#`` spec gives the short form, e.g. ``3m``.
    """

    value: timedelta | float | int

    def _parts(self) -> tuple[int, str, str]:
        micros = _to_micros(self.value)
        chosen = len(_UNITS) - 1
        for idx, (current, _, _) in enumerate(_UNITS[:-1]):
            following = _UNITS[idx + 1][0]
            if micros + following // 2 >= current + current // 2:
                chosen = idx
                break
        unit, name, alt = _UNITS[chosen]
        # round half away from zero
        count = (2 * micros + unit) // (2 * unit)
        if chosen < len(_UNITS) - 1:
            count = max(count, 2)
        return count, name, alt

    def __str__(self) -> str:
        count, name, _ = self._parts()
        return f"{count} {name}" if count == 1 else f"{count} {name}s"

    def __format__(self, spec: str) -> str:
        if spec.startswith("#"):
            count, _, alt = self._parts()
            return format(f"{count}{alt}", spec[1:])
        return format(str(self), spec)


@dataclass(frozen=True)
class HumanBytes:
    """A byte count with binary (1024-based) prefixes."""

    value: int

    def __str__(self) -> str:
        return _prefixed_bytes(self.value, 1024, _BINARY_PREFIXES)


@dataclass(frozen=True)
class DecimalBytes:
    """A byte count with SI (1000-based) prefixes."""

    value: int

    def __str__(self) -> str:
        return _prefixed_bytes(self.value, 1000, _DECIMAL_PREFIXES)


@dataclass(frozen=True)
class BinaryBytes:
    """A byte count with ISO/IEC (1024-based) prefixes."""

    value: int

    def __str__(self) -> str:
        return _prefixed_bytes(self.value, 1024, _BINARY_PREFIXES)


@dataclass(frozen=True)
class HumanCount:
    """An integer count with comma thousands separators."""

    value: int

    def __str__(self) -> str:
        return _group_thousands(str(self.value))


@dataclass(frozen=True)
class HumanFloatCount:
    """A float with comma thousands separators and at most four decimals."""

    value: float

    def __str__(self) -> str:
        if math.isnan(self.value):
            return "NaN"
        if math.isinf(self.value):
            return "inf" if self.value > 0 else "-inf"
        int_part, _, frac_part = f"{self.value:.4f}".partition(".")
        text = _group_thousands(int_part)
        frac_trimmed = frac_part.rstrip("0")
        if frac_trimmed:
            text += "." + frac_trimmed
        return text