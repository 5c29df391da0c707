from __future__ import annotations

import importlib
from pathlib import Path

import pytest

typer_testing = pytest.importorskip("typer.testing")


def test_console_entrypoint_exposes_app() -> None:
    module = importlib.import_module("cardshifter.main")

    assert hasattr(module, "app")
    assert module.app is not None


@pytest.fixture()
def cli(monkeypatch):
    module = importlib.import_module("cardshifter.main")
    monkeypatch.setattr(module, "configure_logging", lambda level: None)
    return module.app, typer_testing.CliRunner()


def test_mods_lists_builtins_and_discovered(cli, tmp_path: Path) -> None:
    app, runner = cli
    mod_dir = tmp_path / "Foo"
    mod_dir.mkdir()
    (mod_dir / "game.py").write_text("def setup(game):\n    game.add_player('Foo')\n", encoding="utf-8")

    result = runner.invoke(app, ["mods", "--mods-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "Vanilla" in result.output
    assert "Foo" in result.output
    assert "Fighter" in result.output


def test_play_with_ai_reaches_a_result(cli, tmp_path: Path) -> None:
    app, runner = cli

    result = runner.invoke(app, ["play", "--ai", "Fighter", "--seed", "3", "--mods-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert "actions_performed" in result.output


def test_play_console_exits_on_stop_token(cli, tmp_path: Path) -> None:
    app, runner = cli

    result = runner.invoke(app, ["play", "--seed", "1", "--mods-dir", str(tmp_path)], input="7\nexit\n")

    assert result.exit_code == 0
    assert "Illegal action index: 7" in result.output
    assert "Game over!" in result.output


def test_play_with_python_script(cli, tmp_path: Path) -> None:
    app, runner = cli
    script = tmp_path / "solo.py"
    script.write_text(
        "from cardshifter.actions import UsableAction\n\n"
        "def setup(game):\n"
        "    player = game.add_player('Solo')\n"
        "    player.add_action(UsableAction('Win', player, perform=lambda: game.end_game(player)))\n",
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["play", "--script", str(script), "--ai", "Loser", "--mods-dir", str(tmp_path / "none")],
    )

    assert result.exit_code == 0
    assert "'winner': 'Solo'" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["play", "--seed", "abc"],
        ["play", "--mod", "Nope"],
        ["play", "--ai", "Genius"],
        ["play", "--max-steps", "0"],
    ],
)
def test_malformed_configuration_aborts_with_usage(cli, tmp_path: Path, args: list[str]) -> None:
    app, runner = cli

    result = runner.invoke(app, [*args, "--mods-dir", str(tmp_path)])

    assert result.exit_code == 2
    assert "Usage" in result.output


def test_unsupported_script_suffix_is_rejected(cli, tmp_path: Path) -> None:
    app, runner = cli
    script = tmp_path / "rules.txt"
    script.write_text("nothing", encoding="utf-8")

    result = runner.invoke(app, ["play", "--script", str(script), "--mods-dir", str(tmp_path)])

    assert result.exit_code == 2
    assert "Unsupported" in result.output
