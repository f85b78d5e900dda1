from __future__ import annotations

import argparse
import json
import logging

from procesador_packing.services import PackingService
from procesador_packing.settings import Settings


def _print(result: dict) -> int:
    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    return 0 if result.get("success") else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Procesador de Excel - limpieza de packing list")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_imp = sub.add_parser("importar", help="Limpia el Excel y guarda la copia en Documentos")
    p_imp.add_argument("xlsx", help="Ruta del archivo Excel de packing")

    p_leer = sub.add_parser("leer", help="Muestra las filas válidas en JSON")
    p_leer.add_argument("xlsx")

    p_cargar = sub.add_parser("cargar", help="Limpia el Excel y lo inserta en la base de datos")
    p_cargar.add_argument("xlsx")

    sub.add_parser("info", help="Información del sistema")

    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    service = PackingService(settings)

    if args.cmd == "importar":
        return _print(service.select_and_import(args.xlsx))
    if args.cmd == "leer":
        return _print(service.read_cleaned(args.xlsx))
    if args.cmd == "cargar":
        read = service.read_cleaned(args.xlsx)
        if not read.get("success"):
            return _print(read)
        return _print(service.load_to_database(read["data"]))
    return _print(service.system_info())


if __name__ == "__main__":
    raise SystemExit(main())
