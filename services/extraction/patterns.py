"""Regular expressions shared by the invoice and lab report extractors."""

import re

# Brazilian plate: 3 letters, optional dash, 1 digit, 3 alphanumerics (old and Mercosul).
PLATE = r"[A-Z]{3}-?\d[A-Z0-9]{3}"
# Same plate optionally followed by the state code ("ABC1234/SP").
PLATE_WITH_STATE = rf"{PLATE}(?:/[A-Z]{{2}})?"

PLATE_RE = re.compile(PLATE, re.IGNORECASE)
PLATE_WITH_STATE_RE = re.compile(PLATE_WITH_STATE, re.IGNORECASE)
SEALS_RE = re.compile(r"Lacres?:\s*([0-9-]+)", re.IGNORECASE)
DATE_RE = re.compile(r"\d{2}/\d{2}/\d{4}")


def labelled_plate_re(label: str) -> re.Pattern[str]:
    """Pattern for a plate written right after a label, e.g. "Carreta: ABC-1234"."""
    return re.compile(rf"{label}[:\s]*({PLATE_WITH_STATE})", re.IGNORECASE)


def find_seals(text: str) -> str:
    """Return the digits/dashes following a "Lacre(s):" label, or ""."""
    match = SEALS_RE.search(text)
    return match.group(1).strip() if match else ""
