from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from procesador_packing.errores import ValidationError, WriteError
from procesador_packing.settings import Settings
from procesador_packing.tipos_packing import PackingRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportColumn:
    header: str
    key: str
    width: int
    number_format: str | None = None


COLUMNS: tuple[ExportColumn, ...] = (
    ExportColumn("Item", "item", 15, "0"),
    ExportColumn("No. Partida", "n_partida", 20),
    ExportColumn("Nombre del Artículo", "nombre_del_articulo", 40),
    ExportColumn("Descripción del Artículo", "articulo_descripcion", 50),
    ExportColumn("Colores", "colores", 25),
    ExportColumn("Cod. Colores", "cod_colores", 15, "0"),
    ExportColumn("Paquete (PQT)", "pqt", 15, "#,##0"),
    ExportColumn("Kilogramos (KG)", "kg", 15, "#,##0.00"),
)

SHEET_TITLE = "Datos Limpios"
MAX_COLUMN_WIDTH = 50
HEADER_FILL = "FFD3D3D3"


class SheetWriter:
    def __init__(self, settings: Settings):
        self.creator = settings.WORKBOOK_CREATOR

    @staticmethod
    def _rendered_len(value) -> int:
        return len(str(value)) if value not in (None, "") else 0

    def _build(self, records: Sequence[PackingRecord]) -> Workbook:
        wb = Workbook()
        wb.properties.creator = self.creator
        wb.properties.created = datetime.now()

        ws = wb.active
        ws.title = SHEET_TITLE
        ws.page_setup.paperSize = ws.PAPERSIZE_A4
        ws.page_setup.orientation = ws.ORIENTATION_LANDSCAPE

        ws.append([c.header for c in COLUMNS])
        for r in records:
            ws.append([getattr(r, c.key) for c in COLUMNS])

        header_font = Font(bold=True)
        header_align = Alignment(horizontal="center", vertical="center")
        header_fill = PatternFill(fill_type="solid", start_color=HEADER_FILL, end_color=HEADER_FILL)
        for cell in ws[1]:
            cell.font = header_font
            cell.alignment = header_align
            cell.fill = header_fill

        for idx, col in enumerate(COLUMNS, start=1):
            letter = get_column_letter(idx)
            max_len = 0
            for (cell,) in ws.iter_rows(min_col=idx, max_col=idx):
                if col.number_format and cell.row > 1:
                    cell.number_format = col.number_format
                max_len = max(max_len, self._rendered_len(cell.value))
            ws.column_dimensions[letter].width = min(max(col.width, max_len + 2), MAX_COLUMN_WIDTH)

        # Selecting is allowed, editing is not (empty password).
        ws.protection.sheet = True
        ws.protection.selectLockedCells = False
        ws.protection.selectUnlockedCells = False
        return wb

    def write(self, records: Sequence[PackingRecord], output_path: Path | str) -> Path:
        if not isinstance(records, (list, tuple)) or len(records) == 0:
            raise ValidationError("No hay datos válidos para exportar")

        p = Path(output_path).expanduser()
        logger.info("Iniciando exportación a: %s", p)
        try:
            wb = self._build(records)
            p.parent.mkdir(parents=True, exist_ok=True)
            wb.save(p)
        except Exception as e:
            logger.error("Error al exportar el archivo Excel: %s", e)
            raise WriteError(f"Error al guardar el archivo: {e}") from e

        logger.info("Archivo exportado exitosamente: %s", p)
        return p
