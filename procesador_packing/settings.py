from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "si", "sí")


def _default_documents_dir() -> Path:
    home = Path.home()
    docs = home / "Documents"
    return docs if docs.is_dir() else home


@dataclass(frozen=True)
class Settings:
    # App
    APP_NAME: str = os.environ.get("APP_NAME", "Procesador de Excel")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    DEBUG: bool = _env_bool("DEBUG", "false")

    # Layout of the packing worksheet (1-based columns)
    ROWS_TO_SKIP: int = int(os.environ.get("PACKING_ROWS_TO_SKIP", "3"))
    REQUIRED_FIELDS: tuple[str, ...] = ("item", "n_partida", "nombre_del_articulo")
    COLUMN_MAP: tuple[tuple[str, int], ...] = (
        ("item", 1),
        ("n_partida", 2),
        ("nombre_del_articulo", 5),
        ("articulo_descripcion", 6),
        ("colores", 10),
        ("cod_colores", 13),
        ("pqt", 16),
        ("kg", 18),
    )

    # Cleaned copy
    OUTPUT_FILENAME: str = os.environ.get("PACKING_OUTPUT_FILENAME", "PACKING_limpio.xlsx")
    OUTPUT_DIR: Path = Path(os.environ.get("PACKING_OUTPUT_DIR") or _default_documents_dir())
    WORKBOOK_CREATOR: str = "Excel Processor App"

    # Database (SQL Server by default, any SQLAlchemy URL works)
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")
    DB_SERVER: str = os.environ.get("DB_SERVER", "")
    DB_USER: str = os.environ.get("DB_USER", "")
    DB_PASSWORD: str = os.environ.get("DB_PASSWORD", "")
    DB_NAME: str = os.environ.get("DB_NAME", "")
    DB_DRIVER: str = os.environ.get("DB_DRIVER", "ODBC Driver 18 for SQL Server")
    DB_ENCRYPT: bool = _env_bool("DB_ENCRYPT", "true")
    DB_TRUST_SERVER_CERTIFICATE: bool = _env_bool("DB_TRUST_SERVER_CERTIFICATE", "true")
    DB_TABLE: str = os.environ.get("DB_TABLE", "PackingItems")
    # Seconds; 0 leaves the driver default (no timeout).
    DB_CONNECT_TIMEOUT: int = int(os.environ.get("DB_CONNECT_TIMEOUT", "0"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "OUTPUT_DIR", Path(self.OUTPUT_DIR).expanduser())
        object.__setattr__(self, "ROWS_TO_SKIP", max(0, int(self.ROWS_TO_SKIP)))

        unknown = set(self.REQUIRED_FIELDS) - {name for name, _ in self.COLUMN_MAP}
        if unknown:
            raise ValueError(f"REQUIRED_FIELDS sin columna asignada: {', '.join(sorted(unknown))}")

        # If DATABASE_URL was not explicitly provided, assemble it from the DB_* pieces.
        db = str(self.DATABASE_URL or "").strip()
        if not db and self.DB_SERVER:
            query = {
                "driver": self.DB_DRIVER,
                "Encrypt": "yes" if self.DB_ENCRYPT else "no",
                "TrustServerCertificate": "yes" if self.DB_TRUST_SERVER_CERTIFICATE else "no",
            }
            url = URL.create(
                "mssql+pyodbc",
                username=self.DB_USER or None,
                password=self.DB_PASSWORD or None,
                host=self.DB_SERVER,
                database=self.DB_NAME or None,
                query=query,
            )
            db = url.render_as_string(hide_password=False)
        object.__setattr__(self, "DATABASE_URL", db)

    @property
    def column_index(self) -> dict[str, int]:
        return dict(self.COLUMN_MAP)

    def output_path_for(self, input_path: Path | str) -> Path:
        """`<OUTPUT_DIR>/<input stem>_<OUTPUT_FILENAME>`."""
        stem = Path(input_path).stem
        return (self.OUTPUT_DIR / f"{stem}_{self.OUTPUT_FILENAME}").resolve()
