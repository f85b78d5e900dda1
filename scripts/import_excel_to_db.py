from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from procesador_packing.carga_bd import BulkLoader
from procesador_packing.excel_import import SheetReader
from procesador_packing.settings import Settings


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("uso: import_excel_to_db.py <archivo.xlsx>")
        return 2

    settings = Settings()

    xlsx = Path(argv[0])
    if not xlsx.is_absolute():
        xlsx = (Path.cwd() / xlsx).resolve()

    records = SheetReader(settings).read(xlsx)
    result = BulkLoader(settings).load(records)

    if not result.get("success"):
        print("ERROR:", result.get("error"))
        return 1
    print("read", len(records), "inserted", result.get("insertedRows"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
