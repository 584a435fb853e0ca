"""Contenido de los pasos."""

from .registry import UNAVAILABLE, ContentRegistry, StepContent

__all__ = ["UNAVAILABLE", "ContentRegistry", "StepContent"]
