from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Numeric, Table, Unicode


def packing_items_table(name: str = "PackingItems", metadata: MetaData | None = None) -> Table:
    """Tabla destino de la carga masiva.

    Unicode se traduce a NVARCHAR en SQL Server. La tabla no tiene clave propia:
    cada carga agrega filas tal como vienen del Excel.
    """
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("item", Integer, nullable=False),
        Column("n_partida", Unicode(255), nullable=False),
        Column("nombre_del_articulo", Unicode(255), nullable=False),
        Column("articulo_descripcion", Unicode(None), nullable=True),
        Column("colores", Unicode(255), nullable=True),
        Column("cod_colores", Integer, nullable=True),
        Column("pqt", Integer, nullable=True),
        Column("kg", Numeric(18, 2), nullable=True),
    )
