import dataclasses
import json
from pathlib import Path

import openpyxl

from conftest import write_packing_xlsx
from procesador_packing.db import create_engine_from_url, init_db
from procesador_packing.excel_export import SHEET_TITLE
from procesador_packing.services import PackingService


def test_select_and_import(settings, packing_file):
    result = PackingService(settings).select_and_import(str(packing_file))

    assert result["success"] is True
    assert result["processedRows"] == 1
    out = Path(result["outputPath"])
    assert out.name == "embarque_PACKING_limpio.xlsx"
    assert out.parent == settings.OUTPUT_DIR.resolve()
    ws = openpyxl.load_workbook(out)[SHEET_TITLE]
    assert ws["C2"].value == "Tela jersey"


def test_select_and_import_without_valid_rows(settings, tmp_path):
    path = write_packing_xlsx(tmp_path / "malo.xlsx", [{1: 1, 2: "A"}])
    result = PackingService(settings).select_and_import(path)

    assert result == {"success": False, "error": "No se encontraron datos válidos para exportar"}


def test_select_and_import_bad_paths(settings, tmp_path):
    service = PackingService(settings)

    assert service.select_and_import(None)["success"] is False
    assert service.select_and_import("  ")["success"] is False
    missing = service.select_and_import(tmp_path / "no.xlsx")
    assert missing["success"] is False
    assert "no existe" in missing["error"]


def test_debug_adds_stack(settings, tmp_path):
    service = PackingService(dataclasses.replace(settings, DEBUG=True))
    result = service.select_and_import(tmp_path / "no.xlsx")

    assert "FileAccessError" in result["stack"]


def test_read_cleaned_is_json_ready(settings, packing_file):
    result = PackingService(settings).read_cleaned(packing_file)

    assert result["success"] is True
    assert result["data"] == [
        {
            "item": 1,
            "n_partida": "6006.32",
            "nombre_del_articulo": "Tela jersey",
            "articulo_descripcion": "Algodón peinado",
            "colores": "Azul marino",
            "cod_colores": 4021,
            "pqt": 12,
            "kg": 25.5,
        }
    ]
    json.dumps(result)


def test_read_cleaned_empty_is_failure(settings, tmp_path):
    path = write_packing_xlsx(tmp_path / "vacio.xlsx", [])
    result = PackingService(settings).read_cleaned(path)

    assert result["success"] is False
    assert "no contiene datos válidos" in result["error"]


def test_load_to_database_from_read_result(settings, packing_file):
    engine = create_engine_from_url(settings.DATABASE_URL)
    init_db(engine, settings.DB_TABLE)
    engine.dispose()

    service = PackingService(settings)
    data = service.read_cleaned(packing_file)["data"]

    assert service.load_to_database(data) == {"success": True, "insertedRows": 1}


def test_load_to_database_rejects_incomplete_mapping(settings):
    result = PackingService(settings).load_to_database([{"item": 1, "n_partida": "A"}])

    assert result["success"] is False
    assert "nombre_del_articulo" in result["error"]


def test_load_to_database_empty(settings):
    result = PackingService(settings).load_to_database([])
    assert result == {"success": False, "error": "No hay datos para enviar a la base de datos."}


def test_system_info(settings):
    result = PackingService(settings).system_info()

    assert result["success"] is True
    assert result["data"]["cpuCount"] >= 1
    assert result["data"]["totalMemoryGB"] > 0


def test_load_to_database_rejects_fractional_integers(settings):
    record = {"item": 1, "n_partida": "A", "nombre_del_articulo": "Tela", "pqt": 1.7}
    result = PackingService(settings).load_to_database([record])

    assert result["success"] is False
    assert "pqt" in result["error"]


def test_load_to_database_rejects_kg_out_of_range(settings):
    record = {"item": 1, "n_partida": "A", "nombre_del_articulo": "Tela", "kg": 1e30}
    result = PackingService(settings).load_to_database([record])

    assert result["success"] is False
    assert "kg" in result["error"]


def test_mapping_accepts_integral_floats():
    from procesador_packing.tipos_packing import PackingRecord

    rec = PackingRecord.from_mapping(
        {"item": 3.0, "n_partida": "A", "nombre_del_articulo": "Tela", "cod_colores": "12", "kg": 0.125}
    )
    assert rec.item == 3
    assert rec.cod_colores == 12
    assert str(rec.kg) == "0.13"
