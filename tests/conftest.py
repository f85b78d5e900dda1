"""
Pytest fixtures: packing workbooks built on the fly and settings pointing at tmp_path.
"""

import dataclasses

import openpyxl
import pytest

from procesador_packing.settings import Settings


def write_packing_xlsx(path, data_rows, header_rows=3):
    """Create a packing workbook: `header_rows` metadata rows, then one row per dict.

    Each dict maps a 1-based column index to its cell value.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "PACKING"
    ws.cell(row=1, column=1, value="PACKING LIST")
    if header_rows >= 2:
        ws.cell(row=2, column=1, value="Proveedor: Textiles del Sur")
    if header_rows >= 3:
        for col, name in ((1, "ITEM"), (2, "PARTIDA"), (5, "ARTICULO"), (18, "KG")):
            ws.cell(row=3, column=col, value=name)

    for offset, values in enumerate(data_rows, start=header_rows + 1):
        for col, value in values.items():
            ws.cell(row=offset, column=col, value=value)

    wb.save(path)
    return path


def full_row(overrides=None):
    row = {
        1: 1,
        2: "6006.32",
        5: "Tela jersey",
        6: "Algodón peinado",
        10: "Azul marino",
        13: 4021,
        16: 12,
        18: "25,5",
    }
    row.update(overrides or {})
    return row


@pytest.fixture
def settings(tmp_path):
    return dataclasses.replace(
        Settings(),
        OUTPUT_DIR=tmp_path / "Documentos",
        DATABASE_URL=f"sqlite:///{(tmp_path / 'packing.sqlite').as_posix()}",
        DB_TABLE="PackingItems",
        DB_CONNECT_TIMEOUT=0,
        ROWS_TO_SKIP=3,
        DEBUG=False,
    )


@pytest.fixture
def packing_file(tmp_path):
    """3 header rows, row 4 valid, row 5 missing nombre_del_articulo."""
    return write_packing_xlsx(
        tmp_path / "embarque.xlsx",
        [
            full_row(),
            {1: 2, 2: "6006.33", 6: "Sin nombre", 16: 3},
        ],
    )
