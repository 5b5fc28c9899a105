"""Duration strings in the "1h30m" / "2m0s" notation used by the jobs API."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

_UNIT_NANOS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a sequence of decimal numbers with unit suffixes, e.g. "300ms", "1.5h" or "2h45m".

    A bare "0" is accepted as zero. Precision is limited to microseconds.
    """
    if not isinstance(text, str):
        raise ValueError(f"invalid duration {text!r}: expected a string")

    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        m = _COMPONENT.match(s, pos)
        if m is None or m.group(1) in ("", "."):
            raise ValueError(f"invalid duration {text!r}")
        try:
            total += Decimal(m.group(1)) * _UNIT_NANOS[m.group(2)]
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration {text!r}") from exc
        pos = m.end()

    micros = int((total / 1000).to_integral_value(rounding=ROUND_HALF_EVEN))
    try:
        return timedelta(microseconds=-micros if negative else micros)
    except OverflowError as exc:
        raise ValueError(f"invalid duration {text!r}: out of range") from exc


def _with_fraction(value: int, unit: int) -> str:
    whole, rem = divmod(value, unit)
    if not rem:
        return str(whole)
    digits = str(rem).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(value: timedelta) -> str:
    """Render a duration in canonical form: "2m0s", "1h0m0s", "1.5s", "250ms"."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_with_fraction(micros, 1_000)}ms"

    seconds = _with_fraction(micros % 60_000_000, 1_000_000) + "s"
    total_minutes = micros // 60_000_000
    if total_minutes == 0:
        return f"{sign}{seconds}"

    hours, minutes = divmod(total_minutes, 60)
    out = f"{minutes}m{seconds}"
    if hours:
        out = f"{hours}h{out}"
    return f"{sign}{out}"
