"""Punto de entrada principal."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from .config import get_config, set_config
from .core.errors import StepCourseError
from .logging_setup import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stepcourse", description="Reproductor de cursos por pasos")
    parser.add_argument("--data-dir", type=Path, help="Directorio de datos")
    parser.add_argument("--catalog", type=Path, help="Catálogo YAML de módulos")
    parser.add_argument("--content-dir", type=Path, help="Directorio con el contenido de los pasos")
    parser.add_argument("--profile", help="Perfil de progreso")
    parser.add_argument("--log-level", help="Nivel de logging (DEBUG, INFO, WARNING...)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Ejecutar aplicación."""
    args = build_parser().parse_args(argv)

    overrides = {
        "data_dir": args.data_dir,
        "catalog_path": args.catalog,
        "content_dir": args.content_dir,
        "profile": args.profile,
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    config = dataclasses.replace(
        get_config(), **{k: v for k, v in overrides.items() if v is not None}
    )
    set_config(config)
    configure_logging(config.log_level)

    from .tui.app import PlayerApp

    try:
        app = PlayerApp(config=config)
    except (StepCourseError, FileNotFoundError) as e:
        print(f"\033[31m✗ {e}\033[0m", file=sys.stderr)
        return 1

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
