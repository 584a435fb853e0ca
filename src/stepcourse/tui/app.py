"""Reproductor de consola simple - StepCourse."""

from __future__ import annotations

import sys
from typing import Callable

from ..config import Config, get_config
from ..content.registry import UNAVAILABLE, ContentRegistry, StepContent
from ..core.catalog import DEFAULT_CATALOG, ModuleCatalog
from ..core.controller import ProgressController
from ..core.errors import DegenerateRangeError, InvalidModuleError
from ..core.store import JsonFileProgressStore, ProgressStore

if sys.platform == "win32":
    import colorama
    colorama.init()

BAR_WIDTH = 30


def build_controller(config: Config, store: ProgressStore | None = None) -> ProgressController:
    """Crear el controlador a partir de la configuración."""
    catalog = ModuleCatalog.load(config.catalog_path) if config.catalog_path else DEFAULT_CATALOG
    content = ContentRegistry.from_directory(config.content_dir) if config.content_dir else None
    if store is None:
        store = JsonFileProgressStore(config.profile_path())
    return ProgressController(
        catalog,
        store,
        initial_module_id=config.initial_module,
        content=content,
    )


def render_bar(percentage: float, width: int = BAR_WIDTH) -> str:
    """Barra de progreso de texto."""
    filled = int(round(width * percentage / 100))
    return "█" * filled + "░" * (width - filled)


class PlayerApp:
    """Reproductor de cursos por pasos en consola."""

    def __init__(
        self,
        controller: ProgressController | None = None,
        config: Config | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        self.config = config or get_config()
        self.controller = controller or build_controller(self.config)
        self.input_func = input_func or input
        self.running = False

    def print_header(self) -> None:
        """Imprimir encabezado."""
        print("\033[33m" + "=" * 50 + "\033[0m")
        print("\033[33m" + f"           {self.config.app_name}" + "\033[0m")
        print("\033[33m" + "=" * 50 + "\033[0m")
        print()

    def print_info(self, message: str) -> None:
        """Imprimir mensaje informativo."""
        print(f"\033[38;5;208mℹ {message}\033[0m")

    def print_success(self, message: str) -> None:
        """Imprimir mensaje de éxito."""
        print(f"\033[32m✓ {message}\033[0m")

    def print_error(self, message: str) -> None:
        """Imprimir mensaje de error."""
        print(f"\033[31m✗ {message}\033[0m")

    def get_input(self, prompt: str = "> ") -> str:
        """Obtener input del usuario; ``quit`` al cerrar la entrada."""
        try:
            return self.input_func(f"\033[38;5;208m{prompt}\033[0m").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\033[33m¡Hasta luego!\033[0m")
            return "quit"

    def show_progress(self) -> None:
        """Mostrar barra de progreso del módulo actual."""
        ctrl = self.controller
        module_id = ctrl.current_module_id
        try:
            percentage = ctrl.progress_percentage(module_id)
        except DegenerateRangeError:
            # Módulo de un solo paso: sin barra
            print(f"\033[36m{module_id}\033[0m")
            return
        print(f"\033[36m{module_id}\033[0m  {render_bar(percentage)} {percentage:.0f}%")

    def show_modules(self) -> None:
        """Listar módulos con su etiqueta."""
        ctrl = self.controller
        for module_id in ctrl.catalog.list_module_ids():
            marker = "▶" if module_id == ctrl.current_module_id else " "
            if not ctrl.catalog.is_selectable(module_id):
                print(f"\033[90m{marker} {module_id} (locked)\033[0m")
                continue
            print(f"{marker} {module_id} \033[37m{ctrl.module_label(module_id)}\033[0m")

    def show_step(self) -> None:
        """Mostrar contenido del paso actual."""
        ctrl = self.controller
        step = ctrl.current_step()
        print(f"\033[33mStep {step + 1} of {ctrl.current_step_count()}\033[0m")

        content = ctrl.current_content()
        if content is UNAVAILABLE:
            self.print_info("No hay contenido para este paso")
        elif isinstance(content, StepContent):
            print(f"\033[1m{content.title}\033[0m")
            print(content.body)
        else:
            print(content)

    def show_status(self) -> None:
        self.show_progress()
        self.show_step()
        if self.controller.storage_degraded:
            self.print_error("El progreso no se está guardando en disco")

    def show_help(self) -> None:
        """Mostrar ayuda."""
        print("\033[33mComandos:\033[0m")
        print("  \033[36mn, next\033[0m          - Completar paso y avanzar")
        print("  \033[36mp, prev\033[0m          - Volver al paso anterior")
        print("  \033[36ml, list\033[0m          - Listar módulos")
        print("  \033[36mm <módulo>\033[0m       - Cambiar de módulo")
        print("  \033[36ms, status\033[0m        - Ver paso actual")
        print("  \033[36mq, quit\033[0m          - Salir")

    def cmd_next(self, args: list[str]) -> None:
        if not self.controller.can_advance():
            self.print_info("Ya estás en el último paso")
            return
        self.controller.advance_step()
        self.show_status()

    def cmd_prev(self, args: list[str]) -> None:
        if not self.controller.can_retreat():
            self.print_info("Ya estás en el primer paso")
            return
        self.controller.retreat_step()
        self.show_status()

    def cmd_module(self, args: list[str]) -> None:
        if not args:
            self.show_modules()
            return
        try:
            self.controller.select_module(args[0])
        except InvalidModuleError as e:
            self.print_error(f"Módulo no disponible: {e.module_id}")
            return
        self.print_success(f"Módulo actual: {args[0]}")
        self.show_status()

    def cmd_list(self, args: list[str]) -> None:
        self.show_modules()

    def cmd_status(self, args: list[str]) -> None:
        self.show_status()

    def cmd_help(self, args: list[str]) -> None:
        self.show_help()

    def cmd_quit(self, args: list[str]) -> None:
        self.running = False

    def process_command(self, command: str) -> None:
        """Procesar comando del usuario."""
        parts = command.split()
        cmd = parts[0].lower().lstrip("/")
        args = parts[1:]

        handlers = {
            "n": self.cmd_next,
            "next": self.cmd_next,
            "p": self.cmd_prev,
            "prev": self.cmd_prev,
            "m": self.cmd_module,
            "module": self.cmd_module,
            "l": self.cmd_list,
            "list": self.cmd_list,
            "s": self.cmd_status,
            "status": self.cmd_status,
            "h": self.cmd_help,
            "help": self.cmd_help,
            "q": self.cmd_quit,
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
        }

        handler = handlers.get(cmd)
        if handler:
            handler(args)
        else:
            self.print_error(f"Comando desconocido: {cmd}")
            self.print_info("Escribe 'help' para ver los comandos disponibles")

    def run(self) -> None:
        """Ejecutar la aplicación."""
        self.print_header()
        self.show_status()
        self.print_info("Escribe 'help' para ver todos los comandos")
        print()

        self.running = True
        while self.running:
            command = self.get_input()
            if not command:
                continue
            self.process_command(command)
