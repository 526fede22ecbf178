"""Extractor for NF-e style XML invoices.

Fields are looked up by tag name, ignoring namespaces, with a list of
aliases per field. The trailer plate is resolved through an ordered chain of
strategies because issuers put it in different places:

1. ``<placa>`` tags (the second one belongs to the trailer when there are two)
2. elements named after the trailer (``<reboque>``, ``<carreta>``, ...)
3. "Carreta:" / "Reboque:" labels in the complementary information text
4. the last plate-shaped string in the complementary information text
"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator

from services.extraction.base import DocumentExtractor, ExtractionResult
from services.extraction.patterns import (
    PLATE_RE,
    PLATE_WITH_STATE_RE,
    find_seals,
    labelled_plate_re,
)
from services.extraction.schema import InvoiceRecord

logger = logging.getLogger(__name__)

INVOICE_NUMBER_TAGS = ("nNF", "NFNumero", "numero")
NET_WEIGHT_TAGS = ("pesoL", "pesoLiquido")
GROSS_WEIGHT_TAGS = ("pesoB", "pesoBruto")
PLATE_TAG = "placa"
FREE_TEXT_TAG = "infCpl"

TRAILER_KEYWORDS = ("carreta", "reboque", "trailer", "reboques", "carroceria")
TRAILER_LABELS = ("Carreta", "Reboque")


def local_name(tag: str) -> str:
    """Strip a namespace URI ("{ns}tag") or prefix ("ns:tag") from a tag."""
    if "}" in tag:
        tag = tag.rsplit("}", 1)[1]
    if ":" in tag:
        tag = tag.rsplit(":", 1)[1]
    return tag


def element_text(element: ET.Element) -> str:
    """All text inside an element and its descendants, stripped."""
    return "".join(element.itertext()).strip()


class InvoiceDocument:
    """Namespace-tolerant, read-only view over a parsed invoice tree."""

    def __init__(self, root: ET.Element) -> None:
        self._elements = [el for el in root.iter() if isinstance(el.tag, str)]

    def __iter__(self) -> Iterator[tuple[str, ET.Element]]:
        for element in self._elements:
            yield local_name(element.tag), element

    def elements_named(self, tag: str) -> list[ET.Element]:
        return [element for name, element in self if name == tag]

    def lookup(self, tag: str) -> str:
        """Text of the first element called ``tag``.

        Exact local name wins; a case-insensitive match is the fallback.
        """
        exact = self.elements_named(tag)
        if exact:
            return element_text(exact[0])
        wanted = tag.lower()
        for name, element in self:
            if name.lower() == wanted:
                return element_text(element)
        return ""

    def find_text(self, *tags: str) -> str:
        """First non-empty value among ``tags``, tried in order."""
        for tag in tags:
            text = self.lookup(tag)
            if text:
                return text
        return ""

    @property
    def free_text(self) -> str:
        return self.lookup(FREE_TEXT_TAG)


PlateStrategy = Callable[[InvoiceDocument], str]


def plate_from_plate_tags(document: InvoiceDocument) -> str:
    plates = document.elements_named(PLATE_TAG)
    if len(plates) > 1:
        # First <placa> is the tractor unit, second the trailer
        return element_text(plates[1])
    return document.lookup(PLATE_TAG)


def plate_from_trailer_elements(document: InvoiceDocument) -> str:
    for name, element in document:
        lowered = name.lower()
        if not any(keyword in lowered for keyword in TRAILER_KEYWORDS):
            continue
        match = PLATE_RE.search(element_text(element))
        if match:
            return match.group(0).upper()
    return ""


def plate_from_labelled_free_text(document: InvoiceDocument) -> str:
    free_text = document.free_text
    for label in TRAILER_LABELS:
        match = labelled_plate_re(label).search(free_text)
        if match:
            return match.group(1).upper()
    return ""


def plate_from_last_free_text_match(document: InvoiceDocument) -> str:
    # Tractor plate tends to be written before the trailer's
    matches = PLATE_WITH_STATE_RE.findall(document.free_text)
    return matches[-1].upper() if matches else ""


PLATE_STRATEGIES: tuple[PlateStrategy, ...] = (
    plate_from_plate_tags,
    plate_from_trailer_elements,
    plate_from_labelled_free_text,
    plate_from_last_free_text_match,
)


def resolve_plate(
    document: InvoiceDocument, strategies: tuple[PlateStrategy, ...] = PLATE_STRATEGIES
) -> str:
    """Run plate strategies in order and return the first non-empty result."""
    for strategy in strategies:
        plate = strategy(document)
        if plate:
            logger.debug(f"Plate resolved by {strategy.__name__}: {plate}")
            return plate
    return ""


def parse_invoice(document: InvoiceDocument) -> InvoiceRecord:
    """Build an InvoiceRecord from a parsed invoice."""
    return InvoiceRecord(
        invoice_number=document.find_text(*INVOICE_NUMBER_TAGS),
        net_weight=document.find_text(*NET_WEIGHT_TAGS),
        gross_weight=document.find_text(*GROSS_WEIGHT_TAGS),
        plate=resolve_plate(document),
        seals=find_seals(document.free_text),
    )


class InvoiceXmlExtractor(DocumentExtractor[InvoiceRecord]):
    """Best-effort extractor for XML invoices."""

    @property
    def extractor_name(self) -> str:
        return "invoice_xml"

    def empty_record(self) -> InvoiceRecord:
        return InvoiceRecord()

    def extract(self, text: str) -> ExtractionResult[InvoiceRecord]:
        """Extract invoice fields from XML text.

        Args:
            text: XML document content

        Returns:
            ExtractionResult; malformed XML yields an empty record with success=False
        """
        content = (text or "").lstrip("\ufeff").strip()
        if not content:
            return self.failed("Empty invoice document")

        try:
            root = ET.fromstring(content)
        except (ET.ParseError, ValueError) as e:
            logger.warning(f"Malformed invoice XML: {e}")
            return self.failed(f"Malformed invoice XML: {e}")

        record = parse_invoice(InvoiceDocument(root))
        logger.info(
            f"Invoice extracted: number={record.invoice_number or '-'} "
            f"plate={record.plate or '-'}"
        )
        return ExtractionResult[InvoiceRecord](
            record=record, success=True, extractor=self.extractor_name
        )
