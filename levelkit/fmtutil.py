"""Compact formatting of strings, byte sizes and signed counts."""

from __future__ import annotations

_UNITS = ("", "Ki", "Mi", "Gi", "Ti")


def shorten(text: str) -> str:
    """Shorten strings longer than 8 characters to their ends joined by ``..``."""
    if len(text) <= 8:
        return text
    return f"{text[:3]}..{text[-3:]}"


def shorten_bytes(n: int) -> str:
    """Format a byte count with a binary unit prefix."""
    unit = 0
    while n > 1024 and unit < 4:
        n //= 1024
        unit += 1
    return f"{n}{_UNITS[unit]}B"


def signed_shorten_bytes(n: int) -> str:
    """Format a byte delta with an explicit sign; zero is ``~``."""
    if n == 0:
        return "~"
    sign = "-" if n < 0 else "+"
    return sign + shorten_bytes(abs(n))


def signed_int(x: int) -> str:
    """Format an integer delta with an explicit sign; zero is ``~``."""
    if x == 0:
        return "~"
    sign = "-" if x < 0 else "+"
    return f"{sign}{abs(x)}"