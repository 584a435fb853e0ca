"""Configuración global de la aplicación."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_data_dir


def _default_data_dir() -> Path:
    return Path(user_data_dir("stepcourse", "stepcourse"))


@dataclass(frozen=True)
class Config:
    """Configuración inmutable de la aplicación."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    profiles_dir: Path = field(init=False)
    catalog_path: Path | None = None
    content_dir: Path | None = None

    # Progreso
    profile: str = "default"
    initial_module: str | None = None

    # App
    log_level: str = "WARNING"
    app_name: str = "StepCourse"

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_dir", Path(self.data_dir))
        object.__setattr__(self, "profiles_dir", self.data_dir / "profiles")

    @classmethod
    def from_env(cls) -> Config:
        """Crear configuración desde variables de entorno."""
        data_dir = os.getenv("STEPCOURSE_DATA_DIR")
        catalog = os.getenv("STEPCOURSE_CATALOG")
        content = os.getenv("STEPCOURSE_CONTENT_DIR")

        return cls(
            data_dir=Path(data_dir) if data_dir else _default_data_dir(),
            catalog_path=Path(catalog) if catalog else None,
            content_dir=Path(content) if content else None,
            profile=os.getenv("STEPCOURSE_PROFILE", "default"),
            initial_module=os.getenv("STEPCOURSE_INITIAL_MODULE") or None,
            log_level=os.getenv("STEPCOURSE_LOG_LEVEL", "WARNING").upper(),
        )

    def profile_path(self, profile: str | None = None) -> Path:
        """Ruta del documento de progreso de un perfil."""
        name = re.sub(r"[^A-Za-z0-9_.-]+", "-", profile or self.profile).strip(".-")
        return self.profiles_dir / f"{name or 'default'}.json"


# Instancia global
_config: Config | None = None


def get_config() -> Config:
    """Obtener instancia de configuración (singleton)."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_config(config: Config | None) -> None:
    """Establecer configuración (para tests)."""
    global _config
    _config = config
