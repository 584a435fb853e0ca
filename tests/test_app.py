"""Tests para el reproductor de consola."""

from pathlib import Path

import pytest

from stepcourse.__main__ import main
from stepcourse.config import Config, set_config
from stepcourse.content.registry import ContentRegistry, StepContent
from stepcourse.core.catalog import DEFAULT_CATALOG, ModuleCatalog, ModuleDescriptor
from stepcourse.core.controller import ProgressController
from stepcourse.core.store import JsonFileProgressStore, MemoryProgressStore
from stepcourse.tui.app import PlayerApp, build_controller, render_bar


def scripted(*commands: str):
    queue = list(commands)

    def fake_input(prompt: str) -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    return fake_input


@pytest.fixture
def controller() -> ProgressController:
    catalog = ModuleCatalog(
        [ModuleDescriptor("intro", 3), ModuleDescriptor("single", 1), ModuleDescriptor("locked")]
    )
    content = ContentRegistry()
    content.register_module(
        "intro",
        [StepContent("Welcome", "Start here"), StepContent("Setup", "Install"), "All done"],
    )
    return ProgressController(catalog, MemoryProgressStore(), content=content)


@pytest.fixture(autouse=True)
def reset_config():
    set_config(None)
    yield
    set_config(None)


class TestPlayerApp:
    """Tests de comandos del reproductor."""

    def make_app(self, controller, *commands, tmp_path=None) -> PlayerApp:
        config = Config(data_dir=tmp_path or Path("unused"))
        return PlayerApp(controller=controller, config=config, input_func=scripted(*commands))

    def test_navigation_session(self, controller, capsys) -> None:
        """Test sesión completa de comandos."""
        app = self.make_app(controller, "next", "n", "n", "prev", "quit")
        app.run()

        out = capsys.readouterr().out
        assert "Welcome" in out
        assert "Setup" in out
        assert "All done" in out
        assert "último paso" in out
        assert controller.current_step() == 1
        assert not app.running

    def test_prev_at_first_step(self, controller, capsys) -> None:
        app = self.make_app(controller)
        app.process_command("p")
        assert "primer paso" in capsys.readouterr().out
        assert controller.current_step() == 0

    def test_module_list_shows_labels(self, controller, capsys) -> None:
        app = self.make_app(controller)
        controller.advance_step()
        app.process_command("list")

        out = capsys.readouterr().out
        assert "(2 of 3 tasks)" in out
        assert "Completed" in out
        assert "locked (locked)" in out

    def test_select_locked_module(self, controller, capsys) -> None:
        app = self.make_app(controller)
        app.process_command("m locked")

        assert "Módulo no disponible: locked" in capsys.readouterr().out
        assert controller.current_module_id == "intro"

    def test_select_single_step_module_omits_bar(self, controller, capsys) -> None:
        app = self.make_app(controller)
        app.process_command("/module single")

        out = capsys.readouterr().out
        assert "Módulo actual: single" in out
        assert "%" not in out
        assert "No hay contenido" in out

    def test_unknown_command(self, controller, capsys) -> None:
        app = self.make_app(controller)
        app.process_command("dance")
        assert "Comando desconocido: dance" in capsys.readouterr().out

    def test_eof_quits(self, controller) -> None:
        app = self.make_app(controller)
        app.run()
        assert not app.running

    def test_healed_profile_shows_no_storage_warning(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "profile.json"
        path.write_text("{garbage", encoding="utf-8")
        controller = ProgressController(DEFAULT_CATALOG, JsonFileProgressStore(path))
        app = self.make_app(controller)

        app.process_command("next")

        assert "no se está guardando" not in capsys.readouterr().out

    def test_unusable_profile_shows_storage_warning(self, tmp_path: Path, capsys) -> None:
        store = JsonFileProgressStore(tmp_path / ("z" * 300) / "profile.json")
        app = self.make_app(ProgressController(DEFAULT_CATALOG, store))

        app.process_command("status")

        assert "no se está guardando" in capsys.readouterr().out

    def test_render_bar(self) -> None:
        assert render_bar(0, width=10) == "░" * 10
        assert render_bar(50, width=10) == "█" * 5 + "░" * 5
        assert render_bar(100, width=10) == "█" * 10


class TestEntrypoint:
    """Tests del punto de entrada."""

    def test_build_controller_from_config(self, tmp_path: Path) -> None:
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text("modules:\n  - id: only\n    steps: 2\n", encoding="utf-8")
        content = tmp_path / "content" / "only"
        content.mkdir(parents=True)
        (content / "00-hello.md").write_text("# Hello\nWorld", encoding="utf-8")

        config = Config(data_dir=tmp_path, catalog_path=catalog, content_dir=tmp_path / "content")
        controller = build_controller(config)

        assert controller.current_module_id == "only"
        assert controller.current_content() == StepContent("Hello", "World")
        assert (tmp_path / "profiles" / "default.json").exists()

    def test_main_runs_session(self, tmp_path: Path, monkeypatch, capsys) -> None:
        commands = iter(["n", "q"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(commands))

        code = main(["--data-dir", str(tmp_path), "--profile", "carol"])

        assert code == 0
        assert (tmp_path / "profiles" / "carol.json").exists()
        assert "0-introduction" in capsys.readouterr().out

    def test_main_missing_catalog(self, tmp_path: Path, capsys) -> None:
        code = main(["--data-dir", str(tmp_path), "--catalog", str(tmp_path / "missing.yaml")])

        assert code == 1
        assert "Catalog file not found" in capsys.readouterr().err
