from __future__ import annotations

import logging
import threading
from typing import Sequence

from sqlalchemy import event, insert
from sqlalchemy.engine import Connection, Engine

from procesador_packing.db import create_engine_from_url
from procesador_packing.errores import DbConnectionError, InsertError
from procesador_packing.models import packing_items_table
from procesador_packing.settings import Settings
from procesador_packing.tipos_packing import PackingRecord

logger = logging.getLogger(__name__)


class ResultadoUnico:
    """Resultado que se resuelve una sola vez.

    El primer desenlace gana (conexión, inserción o error de red); cualquier
    resolución posterior se descarta y queda registrada en el log.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._resuelto = False
        self._valor: dict | None = None

    @property
    def resuelto(self) -> bool:
        return self._resuelto

    @property
    def valor(self) -> dict | None:
        return self._valor

    def resolver(self, valor: dict) -> bool:
        with self._lock:
            if self._resuelto:
                logger.warning("Resultado de la carga ya resuelto; se descarta: %s", valor.get("error") or valor)
                return False
            self._resuelto = True
            self._valor = valor
            return True


class BulkLoader:
    def __init__(self, settings: Settings, engine: Engine | None = None):
        self._settings = settings
        self._engine = engine
        self.table = packing_items_table(settings.DB_TABLE)

    def _make_engine(self) -> Engine:
        url = str(self._settings.DATABASE_URL or "").strip()
        if not url:
            raise DbConnectionError(
                "Error de conexión: base de datos no configurada. Revisa DATABASE_URL o DB_SERVER en el archivo .env"
            )
        try:
            return create_engine_from_url(url, connect_timeout=self._settings.DB_CONNECT_TIMEOUT)
        except Exception as e:
            # Bad URL or missing DBAPI driver (e.g. pyodbc not installed).
            raise DbConnectionError(f"Error de conexión: {e}") from e

    @staticmethod
    def _connect(engine: Engine) -> Connection:
        try:
            return engine.connect()
        except Exception as e:
            raise DbConnectionError(f"Error de conexión: {e}") from e

    def _insert(self, conn: Connection, rows: list[dict]) -> int:
        try:
            with conn.begin():
                result = conn.execute(insert(self.table), rows)
        except Exception as e:
            raise InsertError(f"Error al insertar datos: {e}") from e
        n = result.rowcount
        return int(n) if n is not None and n >= 0 else len(rows)

    @staticmethod
    def _params(r: PackingRecord) -> dict:
        return {
            "item": r.item,
            "n_partida": r.n_partida,
            "nombre_del_articulo": r.nombre_del_articulo,
            "articulo_descripcion": r.articulo_descripcion,
            "colores": r.colores,
            "cod_colores": r.cod_colores,
            "pqt": r.pqt,
            "kg": r.kg,
        }

    def load(self, records: Sequence[PackingRecord]) -> dict:
        if not records:
            return {"success": False, "error": "No hay datos para enviar a la base de datos."}

        resultado = ResultadoUnico()
        rows = [self._params(r) for r in records]

        owns_engine = self._engine is None
        try:
            engine = self._engine or self._make_engine()
        except DbConnectionError as e:
            logger.error("Error de conexión a la BD: %s", e)
            resultado.resolver({"success": False, "error": str(e)})
            return resultado.valor

        def on_error(ctx) -> None:
            # Connect failures arrive without a connection; _connect reports those.
            if ctx.connection is None or not ctx.is_disconnect:
                return
            logger.error("Error general de la conexión a la BD: %s", ctx.original_exception)
            resultado.resolver({"success": False, "error": f"Error de red o conexión: {ctx.original_exception}"})

        event.listen(engine, "handle_error", on_error)
        try:
            try:
                conn = self._connect(engine)
            except DbConnectionError as e:
                logger.error("Error de conexión a la BD: %s", e)
                resultado.resolver({"success": False, "error": str(e)})
                return resultado.valor

            logger.info("Conectado a la base de datos. Iniciando inserción masiva...")
            try:
                n = self._insert(conn, rows)
            except InsertError as e:
                logger.error("Error en Bulk Insert: %s", e)
                resultado.resolver({"success": False, "error": str(e)})
            else:
                logger.info("%s filas insertadas exitosamente.", n)
                resultado.resolver({"success": True, "insertedRows": n})
            finally:
                conn.close()
        finally:
            event.remove(engine, "handle_error", on_error)
            if owns_engine:
                engine.dispose()

        return resultado.valor
