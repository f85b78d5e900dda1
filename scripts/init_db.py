from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from procesador_packing.db import create_engine_from_url, init_db
from procesador_packing.settings import Settings


def main() -> int:
    settings = Settings()
    if not settings.DATABASE_URL:
        print("ERROR: configura DATABASE_URL o DB_SERVER en el archivo .env")
        return 1

    engine = create_engine_from_url(settings.DATABASE_URL, connect_timeout=settings.DB_CONNECT_TIMEOUT)
    init_db(engine, settings.DB_TABLE)
    engine.dispose()

    print("OK: tabla", settings.DB_TABLE, "lista")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
