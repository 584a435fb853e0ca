"""Registro de contenido por (módulo, paso)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)

_STEP_FILE = re.compile(r"^(\d+)[-_]?(.*)\.md$")


class _Unavailable:
    """Centinela para pasos sin contenido."""

    _instance: _Unavailable | None = None

    def __new__(cls) -> _Unavailable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE = _Unavailable()


@dataclass(frozen=True)
class StepContent:
    """Contenido renderizable de un paso."""

    title: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        return {"title": self.title, "body": self.body}


class ContentRegistry:
    """Contenido de los pasos resuelto bajo demanda.

    Cada entrada es un valor o una función sin argumentos que lo produce;
    las funciones se llaman la primera vez que se resuelve el paso.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, int], Any] = {}
        self._resolved: dict[tuple[str, int], Any] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, module_id: str, step_index: int, content: Any) -> None:
        """Registrar contenido o una factory para un paso."""
        if step_index < 0:
            raise ValueError(f"Step index must be >= 0, got {step_index}")
        key = (module_id, step_index)
        if key in self._entries:
            logger.warning("Content for %s step %d registered twice, replacing it", module_id, step_index)
        self._entries[key] = content
        self._resolved.pop(key, None)

    def register_module(self, module_id: str, steps: Iterable[Any]) -> None:
        """Registrar los pasos de un módulo en orden."""
        for index, content in enumerate(steps):
            self.register(module_id, index, content)

    def step(self, module_id: str, step_index: int) -> Callable[[Callable[[], Any]], Callable[[], Any]]:
        """Decorador para registrar una factory."""

        def decorator(factory: Callable[[], Any]) -> Callable[[], Any]:
            self.register(module_id, step_index, factory)
            return factory

        return decorator

    def steps_for(self, module_id: str) -> list[int]:
        """Índices registrados de un módulo."""
        return sorted(index for mid, index in self._entries if mid == module_id)

    def resolve(self, module_id: str, step_index: int) -> Any:
        """Devolver el contenido del paso o ``UNAVAILABLE``."""
        key = (module_id, step_index)
        if key in self._resolved:
            return self._resolved[key]
        if key not in self._entries:
            return UNAVAILABLE

        entry = self._entries[key]
        if callable(entry):
            try:
                entry = entry()
            except Exception:
                logger.exception("Content for %s step %d failed to load", module_id, step_index)
                return UNAVAILABLE

        if entry is None:
            entry = UNAVAILABLE
        self._resolved[key] = entry
        return entry

    @classmethod
    def from_directory(cls, path: Path) -> ContentRegistry:
        """Cargar pasos Markdown desde ``<path>/<module_id>/<NN>-<slug>.md``."""
        registry = cls()
        path = Path(path)
        if not path.is_dir():
            logger.warning("Content directory %s does not exist", path)
            return registry

        for module_dir in sorted(p for p in path.iterdir() if p.is_dir()):
            for step_file in sorted(module_dir.glob("*.md")):
                match = _STEP_FILE.match(step_file.name)
                if not match:
                    continue
                index = int(match.group(1))
                fallback = match.group(2).replace("-", " ").strip() or f"Step {index}"
                registry.register(
                    module_dir.name, index, _markdown_loader(step_file, fallback)
                )

        logger.debug("Loaded %d content steps from %s", len(registry), path)
        return registry


def _markdown_loader(path: Path, fallback_title: str) -> Callable[[], StepContent]:
    def load() -> StepContent:
        text = path.read_text(encoding="utf-8")
        title = fallback_title
        lines = text.splitlines()
        if lines and lines[0].startswith("# "):
            title = lines[0][2:].strip()
            text = "\n".join(lines[1:]).lstrip("\n")
        return StepContent(title=title, body=text)

    return load
