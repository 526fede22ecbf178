"""Abstract base class for document extractors.

Both document kinds (XML invoices and the CSV lab report) go through the same
interface so the reconciliation engine can treat them uniformly.

Extraction is best-effort: an extractor never raises for bad input. A failure
is reported through ``ExtractionResult.success`` while ``record`` still holds
an all-empty record.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from services.extraction.schema import InvoiceRecord, LabReportRecord

RecordT = TypeVar("RecordT", InvoiceRecord, LabReportRecord)


class ExtractionResult(BaseModel, Generic[RecordT]):
    """Result of extraction operation.

    Attributes:
        record: Extracted record (empty record if extraction failed)
        success: Whether operation succeeded
        error: Error message if operation failed
        extractor: Name of extractor that produced the record
    """

    record: RecordT
    success: bool
    error: str | None = None
    extractor: str


class DocumentExtractor(ABC, Generic[RecordT]):
    """Interface for a best-effort document extractor."""

    @abstractmethod
    def extract(self, text: str) -> ExtractionResult[RecordT]:
        """Extract a record from already decoded document text.

        Args:
            text: Document content

        Returns:
            ExtractionResult whose record is never None
        """
        pass

    @abstractmethod
    def empty_record(self) -> RecordT:
        """Record returned when nothing could be extracted."""
        pass

    @property
    @abstractmethod
    def extractor_name(self) -> str:
        """Get extractor name for logging/metrics."""
        pass

    def failed(self, error: str) -> ExtractionResult[RecordT]:
        """Build a failed result carrying an empty record."""
        return ExtractionResult(
            record=self.empty_record(),
            success=False,
            error=error,
            extractor=self.extractor_name,
        )
