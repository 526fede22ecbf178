"""Shared sample documents for reconciliation tests.

Invoice A carries the trailer plate in a second <placa> tag; invoice B only
mentions it in the complementary information text. Both describe the same
shipment as the lab report.
"""

import pytest

INVOICE_A_XML = """<?xml version="1.0" encoding="UTF-8"?>
<nfeProc xmlns="http://www.portalfiscal.inf.br/nfe" versao="4.00">
  <NFe>
    <infNFe versao="4.00">
      <ide><nNF>0001234</nNF></ide>
      <transp>
        <veicTransp><placa>ABC1D23</placa><UF>SP</UF></veicTransp>
        <reboque><placa>XYZ9K87</placa><UF>SP</UF></reboque>
        <vol><pesoL>24.500</pesoL><pesoB>25.100</pesoB></vol>
      </transp>
      <infAdic><infCpl>Motorista: Joao da Silva. Lacres: 4455-66</infCpl></infAdic>
    </infNFe>
  </NFe>
</nfeProc>
"""

INVOICE_B_XML = """<?xml version="1.0" encoding="UTF-8"?>
<nfeProc xmlns="http://www.portalfiscal.inf.br/nfe" versao="4.00">
  <NFe>
    <infNFe versao="4.00">
      <ide><nNF>5678</nNF></ide>
      <transp>
        <vol><pesoL>24500</pesoL><pesoB>25100 kg</pesoB></vol>
      </transp>
      <infAdic>
        <infCpl>Cavalo ABC-1D23/SP Carreta: XYZ-9K87/SP Lacres: 4455-66</infCpl>
      </infAdic>
    </infNFe>
  </NFe>
</nfeProc>
"""

LAB_REPORT_CSV = "\r\n".join(
    [
        "Laudo de Analise;;",
        "Nota Fiscal;1234;",
        "Placa;XYZ-9K87;",
        "Produto;223;Queijo Mussarela",
        "Data de Fabricacao;01/01/2024;",
        "Lacres: 4455-66",
        "",
    ]
)


@pytest.fixture
def invoice_a_xml() -> str:
    """First invoice (plate in <reboque>)."""
    return INVOICE_A_XML


@pytest.fixture
def invoice_b_xml() -> str:
    """Second invoice (plate in free text)."""
    return INVOICE_B_XML


@pytest.fixture
def lab_report_csv() -> str:
    """Lab report matching both invoices."""
    return LAB_REPORT_CSV
