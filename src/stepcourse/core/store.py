"""Capa de persistencia del progreso."""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .errors import StorageDegraded

logger = logging.getLogger(__name__)

CURRENT_MODULE_KEY = "current_module"
PROGRESS_KEY = "module_progress"


class ProgressStore(ABC):
    """Almacén clave/valor de un perfil.

    ``get`` y ``set`` nunca propagan errores de almacenamiento: una lectura
    fallida devuelve ``None`` y una escritura fallida solo se registra.
    """

    def __init__(self) -> None:
        self.degraded = False

    def get(self, key: str) -> Any | None:
        """Leer un valor, ``None`` si falta o no se puede leer."""
        try:
            return self._read(key)
        except StorageDegraded as e:
            self._degrade(f"read of {key!r} failed: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        """Guardar un valor (best effort)."""
        try:
            self._write(key, value)
        except StorageDegraded as e:
            self._degrade(f"write of {key!r} failed: {e}")
        else:
            self.degraded = False

    def _degrade(self, message: str) -> None:
        self.degraded = True
        logger.warning("Progress storage degraded: %s", message)

    @abstractmethod
    def _read(self, key: str) -> Any | None:
        """Leer un valor; errores como ``StorageDegraded``."""
        pass

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        """Escribir un valor; errores como ``StorageDegraded``."""
        pass


class _CorruptDocument(StorageDegraded):
    """Documento ilegible que se puede sustituir al escribir."""

    pass


class MemoryProgressStore(ProgressStore):
    """Almacén en memoria (tests y sesiones sin persistencia)."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def _read(self, key: str) -> Any | None:
        return copy.deepcopy(self.data.get(key))

    def _write(self, key: str, value: Any) -> None:
        try:
            # Mismas restricciones que el almacén JSON
            json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageDegraded(f"value is not serializable: {e}") from e
        self.data[key] = copy.deepcopy(value)


class JsonFileProgressStore(ProgressStore):
    """Un documento JSON por perfil.

    El documento completo se reescribe en cada ``set`` a través de un fichero
    temporal, así un fallo a mitad de escritura no deja el perfil corrupto.
    """

    def __init__(self, path: Path) -> None:
        """Inicializar con la ruta del documento."""
        super().__init__()
        self.path = Path(path)

    def _load_document(self) -> dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageDegraded(f"cannot load {self.path}: {e}") from e
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise _CorruptDocument(f"cannot decode {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise _CorruptDocument(f"{self.path} does not contain a JSON object")
        return data

    def _read(self, key: str) -> Any | None:
        return self._load_document().get(key)

    def _write(self, key: str, value: Any) -> None:
        try:
            document = self._load_document()
        except _CorruptDocument as e:
            # Documento corrupto: se sustituye en lugar de bloquear la escritura
            logger.warning("Replacing unreadable progress document: %s", e)
            document = {}
        document[key] = value

        try:
            payload = json.dumps(document, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageDegraded(f"value is not serializable: {e}") from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageDegraded(f"cannot write {self.path}: {e}") from e
