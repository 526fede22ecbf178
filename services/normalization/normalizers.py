"""Normalizers turning raw extracted strings into comparable values.

All functions are total: they accept ``str``, numbers or ``None`` and never
raise. Each one is idempotent, so values can be normalized again safely.
"""

import re

# Weights below this magnitude are reported in tonnes without a unit marker.
TONNE_THRESHOLD = 100
WEIGHT_PRECISION = 3

RawValue = str | int | float | None

_UNIT_PATTERNS = (
    re.compile(r"kg", re.IGNORECASE),
    re.compile(r"kilo", re.IGNORECASE),
    re.compile(r"t\b|tonelada|ton", re.IGNORECASE),
)
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_STATE_SUFFIX = re.compile(r"/\s*[A-Z]{2}$", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^A-Z0-9]", re.IGNORECASE)
_LEADING_ZEROS = re.compile(r"^[\s0]+")


def _parse_leading_float(text: str) -> float | None:
    match = _LEADING_NUMBER.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def normalize_weight(raw: RawValue) -> float:
    """Convert a raw weight into kilograms.

    Unit tokens are stripped and a decimal comma is accepted. Values below
    100 are assumed to be tonnes and converted to kilograms. Numbers passed
    in directly are taken as kilograms already.

    Args:
        raw: Weight as found in the document (e.g. "24.500", "4520 kg", "45,2")

    Returns:
        Weight in kilograms rounded to 3 decimals, 0.0 when unparsable
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, int | float):
        return round(float(raw), WEIGHT_PRECISION)

    text = str(raw).strip().lower()
    if not text:
        return 0.0

    for pattern in _UNIT_PATTERNS:
        text = pattern.sub("", text)
    text = text.replace(",", ".", 1)

    value = _parse_leading_float(text)
    if value is None:
        return 0.0

    if value < TONNE_THRESHOLD:
        value *= 1000

    return round(value, WEIGHT_PRECISION)


def normalize_plate(raw: RawValue) -> str:
    """Reduce a vehicle plate to bare upper-case alphanumerics.

    "abc-1d23/SP" becomes "ABC1D23".
    """
    if raw is None:
        return ""
    text = _STATE_SUFFIX.sub("", str(raw).strip()).strip()
    return _NON_ALNUM.sub("", text).upper()


def normalize_invoice_number(raw: RawValue) -> str:
    """Strip whitespace and leading zeros from an invoice number."""
    if raw is None:
        return ""
    return _LEADING_ZEROS.sub("", str(raw)).strip()
