"""Máquina de estados de navegación y progreso."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from .catalog import ModuleCatalog, check_step_index
from .errors import ConfigInconsistency, DegenerateRangeError, InvalidModuleError
from .store import CURRENT_MODULE_KEY, PROGRESS_KEY, ProgressStore

if TYPE_CHECKING:
    from ..content.registry import ContentRegistry

logger = logging.getLogger(__name__)

COMPLETED_LABEL = "Completed"


class ProgressController:
    """Módulo actual y progreso por módulo de un perfil.

    El avance se detiene en el último paso (``step_count - 1``), que cuenta
    como completado y equivale al 100 %. Los cambios se aplican primero en
    memoria y después se notifican al almacén; un almacén que falla no
    afecta a la navegación de la sesión.
    """

    def __init__(
        self,
        catalog: ModuleCatalog,
        store: ProgressStore,
        initial_module_id: str | None = None,
        content: ContentRegistry | None = None,
    ) -> None:
        """Inicializar leyendo el estado persistido."""
        self.catalog = catalog
        self.store = store
        self.content = content
        self.storage_degraded = False
        self._listeners: list[Callable[[ProgressController], None]] = []

        initial = initial_module_id or catalog.initial_module
        if initial is None or not catalog.is_selectable(initial):
            raise InvalidModuleError(initial, "not a valid initial module")
        self.initial_module_id = initial

        self._current_module_id = self._load_current_module()
        self._progress = self._load_progress()

    # -------------------------------------------------------------------------
    # Inicialización
    # -------------------------------------------------------------------------

    def _load_current_module(self) -> str:
        stored = self._store_get(CURRENT_MODULE_KEY)
        if isinstance(stored, str) and self.catalog.is_selectable(stored):
            return stored

        if stored is not None:
            logger.info(
                "Stored module %r is no longer selectable, falling back to %r",
                stored,
                self.initial_module_id,
            )
        self._store_set(CURRENT_MODULE_KEY, self.initial_module_id)
        return self.initial_module_id

    def _load_progress(self) -> dict[str, int]:
        stored = self._store_get(PROGRESS_KEY)
        if not isinstance(stored, dict):
            if stored is not None:
                logger.warning("Stored progress is not a mapping, starting fresh")
            defaults = {module_id: 0 for module_id in self.catalog.list_module_ids()}
            self._store_set(PROGRESS_KEY, defaults)
            return dict(defaults)

        progress: dict[str, int] = {}
        for module_id, value in stored.items():
            if isinstance(value, int) and not isinstance(value, bool):
                progress[str(module_id)] = value
            else:
                logger.warning("Discarding invalid stored step %r for %r", value, module_id)
        return progress

    # -------------------------------------------------------------------------
    # Persistencia
    # -------------------------------------------------------------------------

    def _store_get(self, key: str) -> Any | None:
        try:
            value = self.store.get(key)
        except Exception:
            self._mark_degraded("read", key)
            return None
        if getattr(self.store, "degraded", False):
            self.storage_degraded = True
        return value

    def _store_set(self, key: str, value: Any) -> None:
        try:
            self.store.set(key, value)
        except Exception:
            self._mark_degraded("write", key)
            return
        # Refleja el resultado de la última escritura
        self.storage_degraded = bool(getattr(self.store, "degraded", False))

    def _mark_degraded(self, operation: str, key: str) -> None:
        self.storage_degraded = True
        logger.warning(
            "Progress store %s of %r failed, continuing in memory", operation, key, exc_info=True
        )

    def _persist_progress(self) -> None:
        self._store_set(PROGRESS_KEY, dict(self._progress))

    # -------------------------------------------------------------------------
    # Notificaciones
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Callable[[ProgressController], None]) -> Callable[[], None]:
        """Registrar un callback tras cada cambio; devuelve la función para darse de baja."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Progress listener %r failed", callback)

    # -------------------------------------------------------------------------
    # Lectura
    # -------------------------------------------------------------------------

    @property
    def current_module_id(self) -> str:
        return self._current_module_id

    def step_count(self, module_id: str) -> int | None:
        """Número de pasos del módulo (``None`` si está bloqueado)."""
        return self.catalog.step_count(module_id)

    def step_index(self, module_id: str) -> int:
        """Paso guardado del módulo, ajustado al rango del catálogo."""
        value = self._progress.get(module_id, 0)
        count = self.catalog.step_count(module_id)
        if not count:
            return 0

        try:
            return check_step_index(module_id, value, count)
        except ConfigInconsistency as e:
            clamped = max(0, min(value, count - 1))
            logger.warning("%s; clamping to %d", e, clamped)
            self._progress[module_id] = clamped
            return clamped

    def current_step(self) -> int:
        """Paso actual del módulo seleccionado."""
        return self.step_index(self._current_module_id)

    def current_step_count(self) -> int:
        # El módulo actual siempre es seleccionable
        return self.catalog.step_count(self._current_module_id) or 0

    def progress(self) -> dict[str, int]:
        """Progreso de todos los módulos del catálogo."""
        return {
            module_id: self.step_index(module_id)
            for module_id in self.catalog.list_module_ids()
        }

    def is_completed(self, module_id: str) -> bool:
        """True si el módulo está en su último paso."""
        count = self.catalog.step_count(module_id)
        if not count:
            return False
        return self.step_index(module_id) + 1 == count

    def progress_percentage(self, module_id: str) -> float:
        """Porcentaje completado del módulo."""
        count = self.catalog.step_count(module_id)
        if count is None or count <= 1:
            raise DegenerateRangeError(module_id, count)
        return self.step_index(module_id) / (count - 1) * 100

    def module_label(self, module_id: str) -> str | None:
        """Etiqueta del selector de módulos; ``None`` si está bloqueado."""
        count = self.catalog.step_count(module_id)
        if not count:
            return None

        position = self.step_index(module_id) + 1
        if position == count:
            return COMPLETED_LABEL
        return f"({position} of {count} tasks)"

    def can_retreat(self) -> bool:
        return self.current_step() > 0

    def can_advance(self) -> bool:
        return self.current_step() < self.current_step_count() - 1

    def resolve_step_content(self, module_id: str, step_index: int) -> Any:
        """Contenido de un paso o ``UNAVAILABLE``."""
        from ..content.registry import UNAVAILABLE

        if self.content is None:
            return UNAVAILABLE
        return self.content.resolve(module_id, step_index)

    def current_content(self) -> Any:
        """Contenido del paso actual."""
        return self.resolve_step_content(self._current_module_id, self.current_step())

    def snapshot(self) -> dict[str, Any]:
        """Copia del estado para la capa de presentación."""
        return {
            "current_module_id": self._current_module_id,
            "current_step": self.current_step(),
            "progress": self.progress(),
        }

    # -------------------------------------------------------------------------
    # Navegación
    # -------------------------------------------------------------------------

    def select_module(self, module_id: str) -> None:
        """Cambiar de módulo."""
        if not self.catalog.is_selectable(module_id):
            logger.info("Rejected selection of module %r", module_id)
            raise InvalidModuleError(module_id)

        self._current_module_id = module_id
        self._store_set(CURRENT_MODULE_KEY, module_id)
        self._notify()

    def retreat_step(self) -> int:
        """Volver un paso; sin efecto en el primero."""
        step = self.current_step()
        if step > 0:
            self._progress[self._current_module_id] = step - 1
            self._persist_progress()
            self._notify()
        return self.current_step()

    def advance_step(self) -> int:
        """Avanzar un paso; sin efecto en el último."""
        step = self.current_step()
        if step < self.current_step_count() - 1:
            self._progress[self._current_module_id] = step + 1
            self._persist_progress()
            self._notify()
        return self.current_step()
