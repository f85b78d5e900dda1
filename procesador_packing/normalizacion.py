from __future__ import annotations

import logging
import math
import re
from typing import Any

from procesador_packing.errores import ValidationError
from procesador_packing.settings import Settings
from procesador_packing.tipos_packing import (
    FIELD_KINDS,
    INTEGER_FIELDS,
    NUMBER,
    PackingRecord,
    RowAccessor,
    kg_in_range,
    to_kg,
)

logger = logging.getLogger(__name__)

# Leading numeric prefix, the same way a lenient float parser reads "7 kg" as 7.
_NUMBER_PREFIX_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float | None:
    """Convierte el texto de una celda a float, o None si no es numérico.

    Acepta coma decimal ("12,5") y el formato latino con miles ("1.234,56").
    Los campos enteros (item, cod_colores, pqt) solo aceptan el resultado si
    no tiene decimales: "1,5" en item queda sin valor y la fila se descarta.
    """
    s = str(value).strip()
    if not s:
        return None

    # Common LatAm: 1.234,56 -> dots are thousands separators.
    if "." in s and "," in s and s.rfind(",") > s.rfind("."):
        s = s.replace(".", "")
    s = s.replace(",", ".", 1)

    m = _NUMBER_PREFIX_RE.match(s)
    if not m:
        return None
    try:
        n = float(m.group(0))
    except ValueError:
        return None
    if math.isnan(n) or math.isinf(n):
        return None
    return n


class RowNormalizer:
    def __init__(self, settings: Settings):
        self.columns = settings.column_index
        self.required = tuple(settings.REQUIRED_FIELDS)

    @staticmethod
    def _is_absent(raw: Any) -> bool:
        return raw is None or raw == ""

    def _cell_value(self, row: RowAccessor, row_number: int, field: str) -> Any:
        col = self.columns[field]
        kind = FIELD_KINDS[field]
        required = field in self.required

        raw = row.cell_at(col)
        if self._is_absent(raw):
            if required:
                raise ValidationError(f"Celda requerida vacía en la fila {row_number}, columna {col}")
            return None if kind == NUMBER else ""

        if kind != NUMBER:
            return str(raw).strip()

        n = parse_number(raw)
        if n is None:
            return None
        if field in INTEGER_FIELDS:
            return int(n) if n.is_integer() else None
        if field == "kg":
            # Outside decimal(18,2) counts as no value.
            return to_kg(n) if kg_in_range(n) else None
        return n

    def normalize(self, row: RowAccessor, row_number: int) -> PackingRecord | None:
        try:
            data = {field: self._cell_value(row, row_number, field) for field in self.columns}

            missing = [f for f in self.required if data.get(f) is None or data.get(f) == ""]
            if missing:
                logger.warning("Fila %s: Campos requeridos faltantes: %s", row_number, ", ".join(missing))
                return None

            return PackingRecord(**data)
        except Exception as e:
            logger.error("Error procesando fila %s: %s", row_number, e)
            return None
