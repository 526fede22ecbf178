"""Record models produced by the document extractors.

Every field defaults to an empty string: a field that cannot be found is not
an error, it is simply empty.
"""

from pydantic import BaseModel, ConfigDict, Field


class InvoiceRecord(BaseModel):
    """Fields extracted from one NF-e style XML invoice."""

    model_config = ConfigDict(frozen=True)

    invoice_number: str = Field("", description="Invoice number (nNF) as written")
    net_weight: str = Field("", description="Raw net weight (pesoL)")
    gross_weight: str = Field("", description="Raw gross weight (pesoB)")
    plate: str = Field("", description="Trailer plate, upper-cased")
    seals: str = Field("", description="Seal identifiers from the free-text field")


class LabReportRecord(BaseModel):
    """Fields extracted from the CSV lab report."""

    model_config = ConfigDict(frozen=True)

    invoice_number_ref: str = Field("", description="Invoice number referenced by the report")
    plate: str = Field("", description="Plate recorded by the lab technician")
    production_date: str = Field("", description="Production date (DD/MM/YYYY)")
    product_code: str = Field("", description="Numeric product code")
    seals: str = Field("", description="Seal identifiers")
    expiry_date: str = Field("", description="Derived expiry date (DD/MM/YYYY)")
