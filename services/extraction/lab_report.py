"""Extractor for the CSV lab report ("laudo").

The report is not well-formed CSV: fields are spread over free-form rows and
separated by commas, semicolons or tabs. Each field has its own line rule;
the report is scanned top to bottom and the first line a rule accepts wins.
"""

import logging
import re
from collections.abc import Callable, Sequence

from services.expiry.calculator import compute_expiry
from services.extraction.base import DocumentExtractor, ExtractionResult
from services.extraction.patterns import DATE_RE, PLATE_RE, find_seals
from services.extraction.schema import LabReportRecord

logger = logging.getLogger(__name__)

LineRule = Callable[[str], str]

_NOTA_RE = re.compile(r"nota", re.IGNORECASE)
_PRODUTO_RE = re.compile(r"produto", re.IGNORECASE)
_LACRE_RE = re.compile(r"lacres?", re.IGNORECASE)
_INVOICE_DIGITS_RE = re.compile(r"\d{4,}")
_FIELD_SEPARATORS_RE = re.compile(r"[,;\t]")


def split_lines(text: str) -> list[str]:
    """Non-empty, trimmed lines of the report."""
    lines = text.replace("\r", "").split("\n")
    return [line.strip() for line in lines if line.strip()]


def invoice_ref_rule(line: str) -> str:
    if not _NOTA_RE.search(line):
        return ""
    match = _INVOICE_DIGITS_RE.search(line)
    return match.group(0) if match else ""


def plate_rule(line: str) -> str:
    match = PLATE_RE.search(line)
    return match.group(0).upper() if match else ""


def product_code_rule(line: str) -> str:
    if not _PRODUTO_RE.search(line):
        return ""
    for field in _FIELD_SEPARATORS_RE.split(line):
        field = field.strip()
        if field.isascii() and field.isdigit():
            return field
    return ""


def production_date_rule(line: str) -> str:
    match = DATE_RE.search(line)
    return match.group(0) if match else ""


def seals_rule(line: str) -> str:
    if not _LACRE_RE.search(line):
        return ""
    return find_seals(line)


def first_match(lines: Sequence[str], rule: LineRule) -> str:
    """Value from the first line accepted by ``rule``, or ""."""
    for line in lines:
        value = rule(line)
        if value:
            return value
    return ""


def parse_lab_report(text: str) -> LabReportRecord:
    """Build a LabReportRecord from report text, deriving the expiry date."""
    lines = split_lines(text)
    product_code = first_match(lines, product_code_rule)
    production_date = first_match(lines, production_date_rule)

    return LabReportRecord(
        invoice_number_ref=first_match(lines, invoice_ref_rule),
        plate=first_match(lines, plate_rule),
        production_date=production_date,
        product_code=product_code,
        seals=first_match(lines, seals_rule),
        expiry_date=compute_expiry(product_code, production_date),
    )


class LabReportExtractor(DocumentExtractor[LabReportRecord]):
    """Best-effort extractor for the CSV lab report."""

    @property
    def extractor_name(self) -> str:
        return "lab_report"

    def empty_record(self) -> LabReportRecord:
        return LabReportRecord()

    def extract(self, text: str) -> ExtractionResult[LabReportRecord]:
        """Extract lab report fields from CSV text.

        Args:
            text: Report content (already decoded)

        Returns:
            ExtractionResult with the lab report record
        """
        if not text or not text.strip():
            return self.failed("Empty lab report")

        record = parse_lab_report(text)
        logger.info(
            f"Lab report extracted: product={record.product_code or '-'} "
            f"production={record.production_date or '-'} expiry={record.expiry_date or '-'}"
        )
        return ExtractionResult[LabReportRecord](
            record=record, success=True, extractor=self.extractor_name
        )
