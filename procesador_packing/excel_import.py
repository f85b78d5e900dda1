from __future__ import annotations

import logging
import os
import zipfile
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from procesador_packing.errores import FileAccessError, FormatError
from procesador_packing.normalizacion import RowNormalizer
from procesador_packing.settings import Settings
from procesador_packing.tipos_packing import PackingRecord, TupleRow

logger = logging.getLogger(__name__)


def check_readable(path: Path) -> None:
    if not path.exists():
        raise FileAccessError(f"El archivo no existe: {path}")
    if not path.is_file():
        raise FileAccessError(f"La ruta no es un archivo: {path}")
    if not os.access(path, os.R_OK):
        raise FileAccessError(f"No se puede leer el archivo: {path}")
    if path.stat().st_size == 0:
        raise FileAccessError("El archivo está vacío")


class SheetReader:
    def __init__(self, settings: Settings, normalizer: RowNormalizer | None = None):
        self.rows_to_skip = int(settings.ROWS_TO_SKIP)
        self.normalizer = normalizer or RowNormalizer(settings)

    def _open(self, path: Path):
        # read_only=True is dramatically faster and avoids huge memory spikes.
        try:
            return load_workbook(filename=path, data_only=True, read_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
            raise FormatError(f"No se pudo procesar el archivo: {e}") from e

    def read(self, path: Path | str) -> list[PackingRecord]:
        p = Path(path).expanduser()
        check_readable(p)

        wb = self._open(p)
        try:
            if not wb.worksheets:
                raise FormatError("El archivo Excel no contiene hojas de trabajo")
            ws = wb.worksheets[0]

            out: list[PackingRecord] = []
            for row_number, values in enumerate(ws.iter_rows(values_only=True), start=1):
                if row_number <= self.rows_to_skip:
                    continue
                row = TupleRow(values)
                if row.is_empty():
                    continue
                record = self.normalizer.normalize(row, row_number)
                if record is not None:
                    out.append(record)
        finally:
            wb.close()

        logger.info("Procesamiento completado: %s filas válidas encontradas.", len(out))
        return out
