from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import NullPool

from procesador_packing.models import packing_items_table


def _timeout_args(database_url: str, connect_timeout: int) -> dict:
    if connect_timeout <= 0:
        return {}
    url = make_url(database_url)
    driver = url.get_driver_name()
    if driver == "pyodbc":
        return {"timeout": connect_timeout}
    if driver == "pymssql":
        return {"login_timeout": connect_timeout}
    if url.get_backend_name() == "sqlite":
        return {"timeout": connect_timeout}
    return {"connect_timeout": connect_timeout}


def create_engine_from_url(database_url: str, *, connect_timeout: int = 0) -> Engine:
    connect_args = _timeout_args(database_url, int(connect_timeout or 0))
    if database_url.startswith("sqlite:"):
        connect_args["check_same_thread"] = False
    # One connection per load; no pool to keep around between invocations.
    return create_engine(database_url, future=True, connect_args=connect_args, poolclass=NullPool)


def init_db(engine: Engine, table_name: str = "PackingItems") -> None:
    table = packing_items_table(table_name)
    table.metadata.create_all(engine)
