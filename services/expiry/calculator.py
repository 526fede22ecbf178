"""Shelf-life lookup and expiry date calculation.

Products are grouped by shelf life in days. The table is ordered: if a
product code ever appears in more than one group, the first group wins.
"""

import logging
from datetime import date, timedelta

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"  # pt-BR display convention

SHELF_LIFE_TABLE: tuple[tuple[int, frozenset[int]], ...] = (
    (180, frozenset({223, 201})),
    (7, frozenset({104, 120})),
    (15, frozenset({106, 122})),
    (60, frozenset({250, 290})),
    (365, frozenset({300, 304, 305, 306, 307, 308})),
)


def shelf_life_days(product_code: str | int | None) -> int | None:
    """Shelf life in days for a product code, None if the code is unknown."""
    try:
        code = int(str(product_code).strip())
    except (TypeError, ValueError):
        return None

    for days, codes in SHELF_LIFE_TABLE:
        if code in codes:
            return days
    return None


def parse_production_date(value: str | None) -> date | None:
    """Parse a DD/MM/YYYY date; None unless it has exactly three numeric parts."""
    if not value:
        return None
    parts = [part.strip() for part in value.strip().split("/")]
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    day, month, year = (int(part) for part in parts)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def compute_expiry(product_code: str | int | None, production_date: str | None) -> str:
    """Compute the expiry date of a product.

    Args:
        product_code: Numeric product code (e.g. "223")
        production_date: Production date as DD/MM/YYYY

    Returns:
        Expiry date as DD/MM/YYYY, or "" if the code is unknown, the date is invalid
        or the expiry falls past the last representable date

    Example:
        >>> compute_expiry("223", "01/01/2024")
        '29/06/2024'
    """
    days = shelf_life_days(product_code)
    if days is None:
        return ""

    produced = parse_production_date(production_date)
    if produced is None:
        logger.debug(f"Invalid production date for product {product_code}: {production_date!r}")
        return ""

    try:
        expiry = produced + timedelta(days=days)
    except OverflowError:
        logger.debug(f"Expiry out of range for product {product_code}: {production_date!r}")
        return ""

    return expiry.strftime(DATE_FORMAT)
