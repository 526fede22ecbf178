"""Reconciliation of two invoices against a lab report.

Extracts the three documents, normalizes the values and compares them field
by field. The engine never raises: missing or unreadable documents simply
produce empty records, which show up as "N/A" or "erro" rows.

Comparison rules:
- Invoice number: invoice A vs lab report. Invoice B is shown as N/A and
  never compared.
- Net/gross weight: invoice A vs invoice B, within ``weight_tolerance_kg``.
- Trailer plate: lab plate must equal the plate of invoice A or invoice B.
- Seals: lab seals must equal the seals of invoice A or invoice B; N/A when
  the lab report has no seals.
"""

import asyncio
import logging

from prometheus_client import Counter

from services.extraction.base import DocumentExtractor, ExtractionResult, RecordT
from services.extraction.invoice_xml import InvoiceXmlExtractor
from services.extraction.lab_report import LabReportExtractor
from services.extraction.schema import InvoiceRecord, LabReportRecord
from services.ingestion.reader import DocumentReader, DocumentReadError, DocumentSource
from services.normalization.normalizers import (
    normalize_invoice_number,
    normalize_plate,
    normalize_weight,
)
from services.reconciliation.schema import (
    NOT_APPLICABLE,
    CellValue,
    ComparisonRow,
    ComparisonStatus,
    ProductSummary,
    ReconciliationResult,
)
from services.shared.config import Settings, get_settings

logger = logging.getLogger(__name__)

LABEL_INVOICE_NUMBER = "Invoice Number"
LABEL_NET_WEIGHT = "Net Weight (kg)"
LABEL_GROSS_WEIGHT = "Gross Weight (kg)"
LABEL_TRAILER_PLATE = "Trailer Plate"
LABEL_SEALS = "Seals"

ROW_LABELS = (
    LABEL_INVOICE_NUMBER,
    LABEL_NET_WEIGHT,
    LABEL_GROSS_WEIGHT,
    LABEL_TRAILER_PLATE,
    LABEL_SEALS,
)

# Prometheus metrics for extraction and comparison outcomes
extractions_total = Counter(
    "document_extractions_total",
    "Total document extractions",
    ["extractor", "status"],  # status: success, failed
)

comparison_rows_total = Counter(
    "reconciliation_rows_total",
    "Total comparison rows produced",
    ["field", "status"],  # status: ok, erro, N/A
)


def display(value: CellValue) -> CellValue:
    """Value shown in the table; empty values are shown as N/A."""
    return value if value else NOT_APPLICABLE


def weights_match(a: float, b: float, tolerance: float) -> bool:
    return round(abs(a - b), 9) <= tolerance


def compare_invoice_number(invoice_a: InvoiceRecord, lab: LabReportRecord) -> ComparisonRow:
    number_a = normalize_invoice_number(invoice_a.invoice_number)
    number_lab = normalize_invoice_number(lab.invoice_number_ref)

    if not number_a and not number_lab:
        status = ComparisonStatus.NOT_APPLICABLE
    elif number_a == number_lab:
        status = ComparisonStatus.OK
    else:
        status = ComparisonStatus.ERROR

    return ComparisonRow(
        label=LABEL_INVOICE_NUMBER,
        value_a=display(invoice_a.invoice_number),
        value_b=NOT_APPLICABLE,
        value_c=display(lab.invoice_number_ref),
        status=status,
    )


def compare_weight(label: str, raw_a: str, raw_b: str, tolerance: float) -> ComparisonRow:
    weight_a = normalize_weight(raw_a)
    weight_b = normalize_weight(raw_b)

    if not weight_a and not weight_b:
        status = ComparisonStatus.NOT_APPLICABLE
    elif weights_match(weight_a, weight_b, tolerance):
        status = ComparisonStatus.OK
    else:
        status = ComparisonStatus.ERROR

    return ComparisonRow(
        label=label,
        value_a=display(weight_a),
        value_b=display(weight_b),
        value_c=NOT_APPLICABLE,
        status=status,
    )


def compare_plate(
    invoice_a: InvoiceRecord, invoice_b: InvoiceRecord, lab: LabReportRecord
) -> ComparisonRow:
    plate_a = normalize_plate(invoice_a.plate)
    plate_b = normalize_plate(invoice_b.plate)
    plate_lab = normalize_plate(lab.plate)

    if not plate_lab:
        status = ComparisonStatus.NOT_APPLICABLE
    elif plate_lab in (plate_a, plate_b):
        status = ComparisonStatus.OK
    else:
        status = ComparisonStatus.ERROR

    return ComparisonRow(
        label=LABEL_TRAILER_PLATE,
        value_a=display(plate_a),
        value_b=display(plate_b),
        value_c=display(plate_lab),
        status=status,
    )


def compare_seals(
    invoice_a: InvoiceRecord, invoice_b: InvoiceRecord, lab: LabReportRecord
) -> ComparisonRow:
    if not lab.seals:
        status = ComparisonStatus.NOT_APPLICABLE
    elif lab.seals in (invoice_a.seals, invoice_b.seals):
        status = ComparisonStatus.OK
    else:
        status = ComparisonStatus.ERROR

    return ComparisonRow(
        label=LABEL_SEALS,
        value_a=display(invoice_a.seals),
        value_b=display(invoice_b.seals),
        value_c=display(lab.seals),
        status=status,
    )


def summarize_product(lab: LabReportRecord) -> ProductSummary:
    return ProductSummary(
        product_code=display(lab.product_code),
        manufacture_date=display(lab.production_date),
        expiry_date=display(lab.expiry_date),
    )


def build_result(
    invoice_a: InvoiceRecord,
    invoice_b: InvoiceRecord,
    lab: LabReportRecord,
    weight_tolerance_kg: float = 0.001,
) -> ReconciliationResult:
    """Compare already extracted records.

    Args:
        invoice_a: Record from the first invoice
        invoice_b: Record from the second invoice
        lab: Record from the lab report
        weight_tolerance_kg: Allowed weight difference in kilograms

    Returns:
        ReconciliationResult with exactly five rows
    """
    rows = [
        compare_invoice_number(invoice_a, lab),
        compare_weight(
            LABEL_NET_WEIGHT, invoice_a.net_weight, invoice_b.net_weight, weight_tolerance_kg
        ),
        compare_weight(
            LABEL_GROSS_WEIGHT, invoice_a.gross_weight, invoice_b.gross_weight, weight_tolerance_kg
        ),
        compare_plate(invoice_a, invoice_b, lab),
        compare_seals(invoice_a, invoice_b, lab),
    ]
    for row in rows:
        comparison_rows_total.labels(field=row.label, status=row.status.value).inc()

    return ReconciliationResult(rows=rows, product_summary=summarize_product(lab))


class ReconciliationEngine:
    """Extracts, normalizes and compares the three shipment documents."""

    def __init__(self, settings: Settings, reader: DocumentReader | None = None) -> None:
        """Initialize engine.

        Args:
            settings: Application settings
            reader: File acquisition layer (defaults to DocumentReader)
        """
        self.settings = settings
        self.reader = reader or DocumentReader(settings)
        self.invoice_extractor = InvoiceXmlExtractor()
        self.lab_extractor = LabReportExtractor()

    def _safe_extract(
        self, extractor: DocumentExtractor[RecordT], text: str
    ) -> ExtractionResult[RecordT]:
        try:
            result = extractor.extract(text)
        except Exception as e:
            logger.error(f"{extractor.extractor_name} extraction failed: {e}", exc_info=True)
            result = extractor.failed(f"Extraction failed: {str(e)}")

        status = "success" if result.success else "failed"
        extractions_total.labels(extractor=extractor.extractor_name, status=status).inc()
        return result

    def reconcile(self, doc_a: str, doc_b: str, lab_doc: str) -> ReconciliationResult:
        """Reconcile documents given as decoded text.

        Args:
            doc_a: XML content of invoice A
            doc_b: XML content of invoice B
            lab_doc: CSV content of the lab report

        Returns:
            ReconciliationResult (never raises)
        """
        invoice_a = self._safe_extract(self.invoice_extractor, doc_a).record
        invoice_b = self._safe_extract(self.invoice_extractor, doc_b).record
        lab = self._safe_extract(self.lab_extractor, lab_doc).record
        return build_result(invoice_a, invoice_b, lab, self.settings.weight_tolerance_kg)

    async def _read_and_extract(
        self,
        extractor: DocumentExtractor[RecordT],
        source: DocumentSource | None,
        encoding: str | None,
    ) -> RecordT:
        if source is None:
            logger.warning(f"No document provided for {extractor.extractor_name}")
            return extractor.empty_record()

        try:
            text = await self.reader.read_as_text(source, encoding=encoding)
        except DocumentReadError as e:
            logger.warning(f"{extractor.extractor_name}: {e}")
            extractions_total.labels(extractor=extractor.extractor_name, status="failed").inc()
            return extractor.empty_record()

        return self._safe_extract(extractor, text).record

    async def reconcile_sources(
        self,
        source_a: DocumentSource | None,
        source_b: DocumentSource | None,
        lab_source: DocumentSource | None,
    ) -> ReconciliationResult:
        """Read and extract the three documents concurrently, then compare.

        Args:
            source_a: Path or bytes of invoice A
            source_b: Path or bytes of invoice B
            lab_source: Path or bytes of the lab report

        Returns:
            ReconciliationResult (never raises)
        """
        invoice_a, invoice_b, lab = await asyncio.gather(
            self._read_and_extract(self.invoice_extractor, source_a, None),
            self._read_and_extract(self.invoice_extractor, source_b, None),
            self._read_and_extract(
                self.lab_extractor, lab_source, self.settings.lab_report_encoding
            ),
        )
        return build_result(invoice_a, invoice_b, lab, self.settings.weight_tolerance_kg)


def reconcile(
    doc_a: str, doc_b: str, lab_doc: str, settings: Settings | None = None
) -> ReconciliationResult:
    """Convenience wrapper around ReconciliationEngine.reconcile."""
    return ReconciliationEngine(settings or get_settings()).reconcile(doc_a, doc_b, lab_doc)
