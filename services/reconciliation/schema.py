"""Result models for shipment reconciliation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field

NOT_APPLICABLE = "N/A"


class ComparisonStatus(str, Enum):
    """Outcome of comparing one field across documents."""

    OK = "ok"
    ERROR = "erro"
    NOT_APPLICABLE = NOT_APPLICABLE


CellValue = str | float


class ComparisonRow(BaseModel):
    """One compared field.

    Attributes:
        label: Field label
        value_a: Value from invoice A
        value_b: Value from invoice B
        value_c: Value from the lab report
        status: Comparison outcome
        note: Reserved slot, always empty
    """

    model_config = ConfigDict(frozen=True)

    label: str
    value_a: CellValue = NOT_APPLICABLE
    value_b: CellValue = NOT_APPLICABLE
    value_c: CellValue = NOT_APPLICABLE
    status: ComparisonStatus
    note: str = ""

    def as_list(self) -> list[CellValue]:
        return [self.label, self.value_a, self.value_b, self.value_c, self.status.value, self.note]


class ProductSummary(BaseModel):
    """Product information surfaced next to the comparison table.

    The status is always "ok"; it is shown for display only.
    """

    model_config = ConfigDict(frozen=True)

    product_code: str = NOT_APPLICABLE
    manufacture_date: str = NOT_APPLICABLE
    expiry_date: str = NOT_APPLICABLE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> ComparisonStatus:
        return ComparisonStatus.OK


class ReconciliationResult(BaseModel):
    """Comparison rows plus product summary."""

    model_config = ConfigDict(frozen=True)

    rows: list[ComparisonRow]
    product_summary: ProductSummary

    def as_table(self) -> list[list[CellValue]]:
        """Rows as ``[label, a, b, lab, status, ""]`` lists."""
        return [row.as_list() for row in self.rows]

    def row(self, label: str) -> ComparisonRow:
        """Look up a row by label.

        Raises:
            KeyError: If no row has that label
        """
        for row in self.rows:
            if row.label == label:
                return row
        raise KeyError(label)
