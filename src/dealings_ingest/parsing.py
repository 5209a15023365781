"""Helpers for turning cell text into typed values."""
from __future__ import annotations

import math
import re
import struct
from decimal import Decimal

INTEGER = re.compile(r"^\d+$")
DECIMAL = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")

INT64_MAX = 2**63 - 1

# Nine significant digits always round-trip a single-precision float.
FLOAT32_DIGITS = 9


def _to_float32(number: float) -> float:
    return struct.unpack("<f", struct.pack("<f", number))[0]


def narrow_to_float32(number: float) -> Decimal:
    """Round ``number`` to the nearest float32 and return its shortest decimal form.

    ``16777217`` becomes ``16777216`` and ``12.34`` stays ``12.34`` rather than
    ``12.340000152587891``.
    """

    try:
        narrowed = _to_float32(number)
    except OverflowError as exc:
        raise ValueError(f"out of single-precision range: {number!r}") from exc
    if not math.isfinite(narrowed):
        raise ValueError(f"out of single-precision range: {number!r}")
    for digits in range(1, FLOAT32_DIGITS + 1):
        text = f"{narrowed:.{digits}g}"
        if _to_float32(float(text)) == narrowed:
            return Decimal(text)
    return Decimal(f"{narrowed:.{FLOAT32_DIGITS}g}")  # pragma: no cover


def _strip_separators(value: str | None) -> str:
    return (value or "").strip().replace(",", "")


def parse_text(value: str | None) -> str:
    """Return trimmed cell text."""

    return (value or "").strip()


def parse_int(value: str | None) -> int:
    """Parse a thousands-separated, non-negative integer such as ``1,234,567``."""

    cleaned = _strip_separators(value)
    if not INTEGER.match(cleaned):
        raise ValueError(f"not an integer: {value!r}")
    number = int(cleaned)
    if number > INT64_MAX:
        raise ValueError(f"integer out of 64-bit range: {value!r}")
    return number


def parse_price(value: str | None) -> Decimal:
    """Parse a per-share price such as ``1,020.50`` narrowed to single precision."""

    cleaned = _strip_separators(value)
    if not DECIMAL.match(cleaned):
        raise ValueError(f"not a decimal number: {value!r}")
    return narrow_to_float32(float(cleaned))


__all__ = ["parse_text", "parse_int", "parse_price", "narrow_to_float32", "INT64_MAX"]
