"""Unit tests for the reconcile_shipment command line script."""

import json
from pathlib import Path

import pytest

from scripts.reconcile_shipment import format_table, main
from services.reconciliation.engine import reconcile


@pytest.fixture
def document_paths(
    tmp_path: Path, invoice_a_xml: str, invoice_b_xml: str, lab_report_csv: str
) -> list[str]:
    """Write the sample documents to disk."""
    paths = []
    for name, content in (
        ("nf1.xml", invoice_a_xml),
        ("nf2.xml", invoice_b_xml),
        ("laudo.csv", lab_report_csv),
    ):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        paths.append(str(path))
    return paths


def test_format_table(invoice_a_xml: str, invoice_b_xml: str, lab_report_csv: str) -> None:
    """Table lists every row and the product line."""
    table = format_table(reconcile(invoice_a_xml, invoice_b_xml, lab_report_csv))

    lines = table.splitlines()
    assert lines[0].startswith("Field")
    assert any(line.startswith("Trailer Plate") and "XYZ9K87" in line for line in lines)
    assert lines[-1] == "Product: 223 | Manufactured: 01/01/2024 | Expires: 29/06/2024 | OK"


def test_main_matching_documents(
    document_paths: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(document_paths)

    assert exit_code == 0
    assert "Invoice Number" in capsys.readouterr().out


def test_main_json_output(document_paths: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    main([*document_paths, "--json"])

    data = json.loads(capsys.readouterr().out)
    assert len(data["rows"]) == 5
    assert data["product_summary"]["status"] == "ok"


def test_main_mismatch_exit_code(
    document_paths: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Any erro row makes the script exit with 1."""
    lab = tmp_path / "other.csv"
    lab.write_text("Nota Fiscal;9999\nPlaca;QQQ0000", encoding="utf-8")

    exit_code = main([document_paths[0], document_paths[1], str(lab)])

    assert exit_code == 1
    assert "ERRO" in capsys.readouterr().out
