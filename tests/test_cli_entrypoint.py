from __future__ import annotations

import importlib

import pytest


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("dreamland_engine.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_recipe_commands_print_results(tmp_path, monkeypatch) -> None:
    pytest.importorskip("typer")
    from typer.testing import CliRunner

    from dreamland_engine.main import app

    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    cost = runner.invoke(app, ["recipe-cost", "iron_sword"])
    time = runner.invoke(app, ["craft-time", "iron_sword"])
    unknown = runner.invoke(app, ["craft-time", "moon_hammer"])

    assert cost.exit_code == 0
    assert "iron_ore" in cost.output
    assert time.exit_code == 0
    assert "35" in time.output
    assert unknown.exit_code == 1


def test_simulate_writes_save(tmp_path, monkeypatch) -> None:
    pytest.importorskip("typer")
    from typer.testing import CliRunner

    from dreamland_engine.main import app

    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(app, ["simulate", "--ticks", "3", "--width", "3", "--height", "3", "--seed", "1", "--save", "demo"])

    assert result.exit_code == 0
    assert (tmp_path / "saves" / "demo.json").exists()
