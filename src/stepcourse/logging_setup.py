"""Configuración de logging para el reproductor de consola."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = "WARNING") -> None:
    """Configurar el logger raíz del paquete."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("stepcourse").setLevel(level)
