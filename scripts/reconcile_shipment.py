#!/usr/bin/env python3
"""Reconcile two NF-e invoices against a lab report from the command line.

Usage:
    python -m scripts.reconcile_shipment nf1.xml nf2.xml laudo.csv
    python -m scripts.reconcile_shipment nf1.xml nf2.xml laudo.csv --json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from services.reconciliation.engine import ReconciliationEngine
from services.reconciliation.schema import ComparisonStatus, ReconciliationResult
from services.shared.config import get_settings

logger = logging.getLogger(__name__)

STATUS_MARKS = {
    ComparisonStatus.OK: "OK",
    ComparisonStatus.ERROR: "ERRO",
    ComparisonStatus.NOT_APPLICABLE: "-",
}


def format_table(result: ReconciliationResult) -> str:
    """Render the comparison rows and product summary as plain text."""
    header = ("Field", "Invoice A", "Invoice B", "Lab report", "Status")
    body = [
        (row.label, str(row.value_a), str(row.value_b), str(row.value_c), STATUS_MARKS[row.status])
        for row in result.rows
    ]
    widths = [max(len(line[i]) for line in [header, *body]) for i in range(len(header))]

    def render(line: tuple[str, ...]) -> str:
        return " | ".join(cell.ljust(width) for cell, width in zip(line, widths, strict=True))

    lines = [render(header), "-+-".join("-" * width for width in widths)]
    lines.extend(render(line) for line in body)

    summary = result.product_summary
    lines.append("")
    lines.append(
        f"Product: {summary.product_code} | Manufactured: {summary.manufacture_date} | "
        f"Expires: {summary.expiry_date} | {STATUS_MARKS[summary.status]}"
    )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Run a reconciliation and print the result.

    Returns:
        Exit code: 0 when no row is "erro", 1 otherwise
    """
    parser = argparse.ArgumentParser(description="Reconcile shipment documents")
    parser.add_argument("invoice_a", type=Path, help="First NF-e XML invoice")
    parser.add_argument("invoice_b", type=Path, help="Second NF-e XML invoice")
    parser.add_argument("lab_report", type=Path, help="CSV lab report (UTF-8)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = ReconciliationEngine(settings)
    result = asyncio.run(engine.reconcile_sources(args.invoice_a, args.invoice_b, args.lab_report))

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(format_table(result))

    mismatch = any(row.status == ComparisonStatus.ERROR for row in result.rows)
    if mismatch:
        logger.info("Reconciliation found mismatches")
    return 1 if mismatch else 0


if __name__ == "__main__":
    sys.exit(main())
