"""Errores del núcleo de progreso."""

from __future__ import annotations


class StepCourseError(Exception):
    """Error base de stepcourse."""

    pass


class CatalogError(StepCourseError):
    """Catálogo de módulos mal formado."""

    pass


class InvalidModuleError(StepCourseError):
    """Módulo bloqueado o desconocido."""

    def __init__(self, module_id: object, reason: str = "not selectable") -> None:
        self.module_id = module_id
        self.reason = reason
        super().__init__(f"Module {module_id!r} is {reason}")


class StorageDegraded(StepCourseError):
    """Fallo de lectura/escritura en el almacén de progreso."""

    pass


class ConfigInconsistency(StepCourseError):
    """Valor de progreso persistido fuera del rango del catálogo."""

    def __init__(self, module_id: str, value: int, step_count: int) -> None:
        self.module_id = module_id
        self.value = value
        self.step_count = step_count
        super().__init__(
            f"Stored step {value} for {module_id!r} is outside [0, {step_count - 1}]"
        )


class DegenerateRangeError(StepCourseError):
    """Porcentaje pedido para un módulo con uno o ningún paso."""

    def __init__(self, module_id: str, step_count: int | None) -> None:
        self.module_id = module_id
        self.step_count = step_count
        super().__init__(
            f"Module {module_id!r} has no progress range (step_count={step_count})"
        )
