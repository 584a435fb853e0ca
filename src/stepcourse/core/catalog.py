"""Catálogo estático de módulos y sus pasos."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import yaml

from .errors import CatalogError, ConfigInconsistency


@dataclass(frozen=True)
class ModuleDescriptor:
    """Un módulo del curso."""

    module_id: str
    step_count: int | None = None  # None o 0 = bloqueado
    title: str = ""

    @property
    def locked(self) -> bool:
        return not self.step_count

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        data: dict[str, Any] = {"id": self.module_id}
        if self.title:
            data["title"] = self.title
        if self.step_count:
            data["steps"] = self.step_count
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleDescriptor:
        """Crear desde diccionario.

        ``steps`` puede ser un entero o la lista de títulos de los pasos.
        """
        if not isinstance(data, dict) or "id" not in data:
            raise CatalogError(f"Module entry without id: {data!r}")

        steps = data.get("steps")
        if isinstance(steps, list):
            step_count: int | None = len(steps)
        elif steps is None:
            step_count = None
        elif isinstance(steps, int) and not isinstance(steps, bool):
            step_count = steps
        else:
            raise CatalogError(f"Invalid steps for module {data['id']!r}: {steps!r}")

        if step_count is not None and step_count < 0:
            raise CatalogError(f"Negative step count for module {data['id']!r}")

        return cls(
            module_id=str(data["id"]),
            step_count=step_count or None,
            title=str(data.get("title") or ""),
        )


class ModuleCatalog:
    """Registro ordenado e inmutable de módulos.

    El orden de declaración es el orden de presentación.
    """

    def __init__(
        self,
        modules: list[ModuleDescriptor],
        initial_module: str | None = None,
    ) -> None:
        """Inicializar con la lista de módulos."""
        by_id: dict[str, ModuleDescriptor] = {}
        for module in modules:
            if module.module_id in by_id:
                raise CatalogError(f"Duplicate module id: {module.module_id!r}")
            by_id[module.module_id] = module

        if initial_module is not None and initial_module not in by_id:
            raise CatalogError(f"Initial module {initial_module!r} is not in the catalog")

        self._modules = by_id
        self._initial_module = initial_module

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    def __iter__(self) -> Iterator[ModuleDescriptor]:
        return iter(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)

    @property
    def initial_module(self) -> str | None:
        """Módulo inicial declarado, o el primero seleccionable."""
        if self._initial_module is not None:
            return self._initial_module
        for module in self:
            if not module.locked:
                return module.module_id
        return None

    def get(self, module_id: str) -> ModuleDescriptor | None:
        """Obtener descriptor por id."""
        return self._modules.get(module_id)

    def list_module_ids(self) -> list[str]:
        """Ids en orden de presentación."""
        return list(self._modules)

    def step_count(self, module_id: str) -> int | None:
        """Número de pasos, ``None`` si el módulo está bloqueado o no existe."""
        module = self._modules.get(module_id)
        if module is None:
            return None
        return module.step_count

    def is_selectable(self, module_id: str) -> bool:
        """True si el módulo existe y tiene pasos."""
        return bool(self.step_count(module_id))

    def to_dict(self) -> dict[str, Any]:
        """Convertir a diccionario."""
        data: dict[str, Any] = {"modules": [m.to_dict() for m in self]}
        if self._initial_module is not None:
            data["initial_module"] = self._initial_module
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleCatalog:
        """Crear desde diccionario."""
        if not isinstance(data, dict) or not isinstance(data.get("modules"), list):
            raise CatalogError("Catalog must be a mapping with a 'modules' list")

        modules = [ModuleDescriptor.from_dict(entry) for entry in data["modules"]]
        initial = data.get("initial_module")
        if isinstance(initial, bool) or not isinstance(initial, (str, int, type(None))):
            raise CatalogError(f"Invalid initial_module: {initial!r}")
        # Los ids se normalizan a str, el módulo inicial también
        return cls(modules, initial_module=str(initial) if initial is not None else None)

    @classmethod
    def load(cls, path: Path) -> ModuleCatalog:
        """Cargar catálogo desde un YAML."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise CatalogError(f"Invalid YAML in {path}: {e}") from e

        return cls.from_dict(data)


def check_step_index(module_id: str, value: int, step_count: int) -> int:
    """Validar un índice persistido contra el rango ``[0, step_count - 1]``."""
    if value < 0 or value > step_count - 1:
        raise ConfigInconsistency(module_id, value, step_count)
    return value


DEFAULT_INITIAL_MODULE = "0-introduction"

DEFAULT_CATALOG = ModuleCatalog(
    [
        ModuleDescriptor("0-introduction", 6, "Introduction"),
        ModuleDescriptor("1-react-fundamentals", 8, "React Fundamentals"),
        ModuleDescriptor("2-state-and-event-handlers", title="State and Event Handlers"),
        ModuleDescriptor("3-effects-and-data-fetching", title="Effects and Data Fetching"),
        ModuleDescriptor("4-routes-and-navigation", title="Routes and Navigation"),
        ModuleDescriptor("5-hooks-and-performance", title="Hooks and Performance"),
        ModuleDescriptor("6-state-management", title="State Management"),
        ModuleDescriptor("7-forms-and-authentication", title="Forms and Authentication"),
        ModuleDescriptor("8-deploying", title="Deploying"),
    ],
    initial_module=DEFAULT_INITIAL_MODULE,
)
