from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Protocol, Sequence

from procesador_packing.errores import ValidationError

# Field kinds drive how the normalizer coerces each cell.
NUMBER = "number"
STRING = "string"


@dataclass(frozen=True)
class PackingRecord:
    """Una línea validada del packing list.

    Nota: los campos numéricos opcionales usan None para "sin valor", nunca 0.
    """

    item: int
    n_partida: str
    nombre_del_articulo: str
    articulo_descripcion: str = ""
    colores: str = ""
    cod_colores: int | None = None
    pqt: int | None = None
    kg: Decimal | None = None

    def as_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.kg is not None:
            d["kg"] = float(self.kg)
        return d

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PackingRecord":
        missing = [f for f in ("item", "n_partida", "nombre_del_articulo") if data.get(f) in (None, "")]
        if missing:
            raise ValidationError(f"Registro incompleto, faltan: {', '.join(missing)}")

        def as_int(field: str) -> int | None:
            v = data.get(field)
            if v in (None, ""):
                return None
            n = float(v)
            if not n.is_integer():
                raise ValidationError(f"Valor no entero en {field}: {v}")
            return int(n)

        kg = data.get("kg")
        if kg not in (None, "") and not kg_in_range(kg):
            raise ValidationError(f"Valor fuera de rango en kg: {kg}")
        return cls(
            item=as_int("item"),
            n_partida=str(data["n_partida"]),
            nombre_del_articulo=str(data["nombre_del_articulo"]),
            articulo_descripcion=str(data.get("articulo_descripcion") or ""),
            colores=str(data.get("colores") or ""),
            cod_colores=as_int("cod_colores"),
            pqt=as_int("pqt"),
            kg=None if kg in (None, "") else to_kg(kg),
        )


FIELD_KINDS: dict[str, str] = {
    "item": NUMBER,
    "n_partida": STRING,
    "nombre_del_articulo": STRING,
    "articulo_descripcion": STRING,
    "colores": STRING,
    "cod_colores": NUMBER,
    "pqt": NUMBER,
    "kg": NUMBER,
}

INTEGER_FIELDS = frozenset({"item", "cod_colores", "pqt"})


# decimal(18,2): at most 16 integer digits.
KG_LIMIT = Decimal("1e16")


def kg_in_range(x: float | int | str | Decimal) -> bool:
    d = x if isinstance(x, Decimal) else Decimal(str(x))
    return d.is_finite() and abs(d) < KG_LIMIT


def to_kg(x: float | int | str | Decimal) -> Decimal:
    d = x if isinstance(x, Decimal) else Decimal(str(x))
    return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class RowAccessor(Protocol):
    def cell_at(self, index: int) -> Any | None:
        """Valor de la celda en la columna `index` (base 1), o None."""
        ...


class TupleRow:
    """Adapta una tupla de `iter_rows(values_only=True)` a RowAccessor."""

    __slots__ = ("_values",)

    def __init__(self, values: Sequence[Any]):
        self._values = tuple(values)

    def cell_at(self, index: int) -> Any | None:
        # Guard against short rows
        i0 = index - 1
        return self._values[i0] if 0 <= i0 < len(self._values) else None

    def is_empty(self) -> bool:
        return all(v is None or v == "" for v in self._values)
