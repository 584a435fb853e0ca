"""Core: catálogo, persistencia y controlador de progreso."""

from .catalog import DEFAULT_CATALOG, ModuleCatalog, ModuleDescriptor
from .controller import COMPLETED_LABEL, ProgressController
from .errors import (
    CatalogError,
    ConfigInconsistency,
    DegenerateRangeError,
    InvalidModuleError,
    StepCourseError,
    StorageDegraded,
)
from .store import JsonFileProgressStore, MemoryProgressStore, ProgressStore

__all__ = [
    "DEFAULT_CATALOG",
    "ModuleCatalog",
    "ModuleDescriptor",
    "COMPLETED_LABEL",
    "ProgressController",
    "CatalogError",
    "ConfigInconsistency",
    "DegenerateRangeError",
    "InvalidModuleError",
    "StepCourseError",
    "StorageDegraded",
    "JsonFileProgressStore",
    "MemoryProgressStore",
    "ProgressStore",
]
