from __future__ import annotations

import ctypes
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Any, Mapping, Sequence

from procesador_packing.carga_bd import BulkLoader
from procesador_packing.errores import FileAccessError, PackingError
from procesador_packing.excel_export import SheetWriter
from procesador_packing.excel_import import SheetReader
from procesador_packing.settings import Settings
from procesador_packing.tipos_packing import PackingRecord

logger = logging.getLogger(__name__)


def _total_memory_bytes() -> int:
    if os.name == "nt":

        class MEMORYSTATUSEX(ctypes.Structure):
            _fields_ = [
                ("dwLength", ctypes.c_ulong),
                ("dwMemoryLoad", ctypes.c_ulong),
                ("ullTotalPhys", ctypes.c_ulonglong),
                ("ullAvailPhys", ctypes.c_ulonglong),
                ("ullTotalPageFile", ctypes.c_ulonglong),
                ("ullAvailPageFile", ctypes.c_ulonglong),
                ("ullTotalVirtual", ctypes.c_ulonglong),
                ("ullAvailVirtual", ctypes.c_ulonglong),
                ("sullAvailExtendedVirtual", ctypes.c_ulonglong),
            ]

        stat = MEMORYSTATUSEX()
        stat.dwLength = ctypes.sizeof(MEMORYSTATUSEX)
        ctypes.windll.kernel32.GlobalMemoryStatusEx(ctypes.byref(stat))  # type: ignore[attr-defined]
        return int(stat.ullTotalPhys)

    if sys.platform == "darwin":
        import subprocess

        out = subprocess.run(["sysctl", "-n", "hw.memsize"], capture_output=True, text=True, check=True)
        return int(out.stdout.strip())

    return int(os.sysconf("SC_PAGE_SIZE")) * int(os.sysconf("SC_PHYS_PAGES"))


class PackingService:
    """Operaciones que consume la interfaz (ventana, IPC o CLI).

    Ninguna lanza excepciones: todas devuelven un dict JSON-serializable con
    `success` y, si falla, `error`.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        reader: SheetReader | None = None,
        writer: SheetWriter | None = None,
        loader: BulkLoader | None = None,
    ):
        self._settings = settings
        self.reader = reader or SheetReader(settings)
        self.writer = writer or SheetWriter(settings)
        self.loader = loader or BulkLoader(settings)

    def _failure(self, error: Exception | str) -> dict:
        out: dict[str, Any] = {"success": False, "error": str(error)}
        if self._settings.DEBUG and isinstance(error, Exception):
            out["stack"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return out

    @staticmethod
    def _require_path(path: str | Path | None) -> Path:
        if not path or not str(path).strip():
            raise FileAccessError("No se proporcionó una ruta de archivo válida")
        return Path(str(path).strip()).expanduser()

    def select_and_import(self, path: str | Path | None) -> dict:
        try:
            p = self._require_path(path)
            cleaned = self.reader.read(p)
            if not cleaned:
                raise PackingError("No se encontraron datos válidos para exportar")
            saved = self.writer.write(cleaned, self._settings.output_path_for(p))
            return {"success": True, "outputPath": str(saved), "processedRows": len(cleaned)}
        except Exception as e:
            logger.error("Error al procesar el archivo: %s", e)
            return self._failure(e)

    def read_cleaned(self, path: str | Path | None) -> dict:
        try:
            p = self._require_path(path)
            data = self.reader.read(p)
        except Exception as e:
            logger.error("Error al leer el archivo para la BD: %s", e)
            return self._failure(e)
        if not data:
            return {"success": False, "error": "El archivo no contiene datos válidos después de la limpieza."}
        return {"success": True, "data": [r.as_dict() for r in data]}

    def load_to_database(self, records: Sequence[PackingRecord | Mapping[str, Any]] | None) -> dict:
        try:
            converted = [r if isinstance(r, PackingRecord) else PackingRecord.from_mapping(r) for r in (records or [])]
        except Exception as e:
            logger.error("Datos inválidos para la BD: %s", e)
            return self._failure(e)
        try:
            return self.loader.load(converted)
        except Exception as e:
            logger.exception("Error inesperado en la carga a la BD")
            return self._failure(e)

    def system_info(self) -> dict:
        try:
            return {
                "success": True,
                "data": {
                    "cpuCount": int(os.cpu_count() or 0),
                    "totalMemoryGB": round(_total_memory_bytes() / (1024**3), 2),
                },
            }
        except Exception:
            return {"success": False, "error": "No se pudo obtener la información del sistema."}
