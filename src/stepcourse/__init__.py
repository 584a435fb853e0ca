"""stepcourse: progreso y navegación de cursos por pasos."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("stepcourse")
except PackageNotFoundError:
    __version__ = "0+unknown"

__all__ = ["__version__"]
