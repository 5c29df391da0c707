from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cardshifter.bridges import PythonScriptBridge, ScriptedRuleset
from cardshifter.game import Game
from cardshifter.mods import DirectoryModLoader, ModLoadError, ModRegistry
from cardshifter.rulesets import VanillaRuleset

FOO_GAME = '''
from cardshifter.actions import UsableAction


def setup(game):
    player = game.add_player("Foo Player")
    player.data["foo"] = "bar"
    player.add_action(UsableAction("Win", player, perform=lambda: game.end_game(player)))
'''

EXPLODING_GAME = '''
raise RuntimeError("mod exploded while importing")

def setup(game):
    pass
'''


def _write_mod(root: Path, name: str, source: str = FOO_GAME, marker: str = "game.py") -> Path:
    mod_dir = root / name
    mod_dir.mkdir(parents=True)
    (mod_dir / marker).write_text(source, encoding="utf-8")
    return mod_dir


def _registry() -> ModRegistry:
    registry = ModRegistry(bridges=[PythonScriptBridge()], include_builtins=False)
    registry.register("Vanilla", VanillaRuleset)
    registry.register("ScriptA", VanillaRuleset)
    return registry


def test_builtins_are_registered_in_order() -> None:
    registry = ModRegistry()

    assert registry.available_mods() == ["Vanilla", "LuaStart"]
    assert list(registry.ais) == ["Loser", "Idiot", "Fighter"]


def test_external_mods_are_added_and_loaded_lazily(tmp_path: Path) -> None:
    _write_mod(tmp_path / "mods", "Foo")
    registry = _registry()

    discovered = registry.load_external(tmp_path / "mods")
    foo = registry.instantiate("Foo")

    assert discovered == ["Foo"]
    assert {"Vanilla", "ScriptA", "Foo"} <= set(registry.available_mods())
    assert isinstance(foo, ScriptedRuleset)
    game = Game(foo)
    game.start()
    assert game.players[0].name == "Foo Player"
    assert list(game.metadata(game.players[0])) == [("foo", "bar")]
    assert registry.instantiate("Bar") is None


def test_loading_same_directory_twice_does_not_duplicate(tmp_path: Path) -> None:
    _write_mod(tmp_path, "Foo")
    registry = _registry()

    registry.load_external(tmp_path)
    registry.load_external(tmp_path)
    names = registry.available_mods()

    assert len(names) == len(set(names))
    assert names == ["Vanilla", "ScriptA", "Foo"]


def test_missing_directory_is_a_logged_noop(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    registry = _registry()
    before = registry.available_mods()
    caplog.set_level(logging.WARNING, logger="cardshifter.mods.registry")

    discovered = registry.load_external(tmp_path / "does-not-exist")

    assert discovered == []
    assert registry.available_mods() == before
    assert "mod_directory_missing" in caplog.text


def test_regular_file_is_not_a_mod_directory(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    regular = tmp_path / "mods.txt"
    regular.write_text("not a directory", encoding="utf-8")
    registry = _registry()
    before = registry.available_mods()
    caplog.set_level(logging.WARNING, logger="cardshifter.mods.registry")

    registry.load_external(regular)

    assert registry.available_mods() == before
    assert "mod_directory_missing" in caplog.text


def test_unreadable_directory_is_a_logged_noop(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    registry = _registry()
    before = registry.available_mods()
    caplog.set_level(logging.WARNING, logger="cardshifter.mods.registry")

    def refuse(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", refuse)

    discovered = registry.load_external(tmp_path)

    assert discovered == []
    assert registry.available_mods() == before
    assert "mod_directory_missing" in caplog.text


def test_instantiate_unknown_returns_none() -> None:
    assert _registry().instantiate("Bar") is None


def test_broken_mod_is_logged_and_returns_none(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write_mod(tmp_path, "Exploding", EXPLODING_GAME)
    registry = _registry()
    registry.load_external(tmp_path)
    caplog.set_level(logging.WARNING, logger="cardshifter.mods.registry")

    result = registry.instantiate("Exploding")

    assert result is None
    assert "mod_instantiate_failed" in caplog.text
    assert "Exploding" in registry.available_mods()


def test_instantiate_swallows_any_factory_error() -> None:
    registry = _registry()

    def factory():
        raise ValueError("bad config")

    registry.register("Faulty", factory)

    assert registry.instantiate("Faulty") is None


def test_register_last_write_wins_and_keeps_position() -> None:
    registry = _registry()
    replacement = VanillaRuleset(starting_health=3)
    registry.register("Vanilla", lambda: replacement)

    assert registry.available_mods() == ["Vanilla", "ScriptA"]
    assert registry.instantiate("Vanilla") is replacement


def test_external_mod_can_shadow_builtin(tmp_path: Path) -> None:
    _write_mod(tmp_path, "Vanilla")
    registry = _registry()

    registry.load_external(tmp_path)

    assert registry.available_mods() == ["Vanilla", "ScriptA"]
    assert isinstance(registry.instantiate("Vanilla"), ScriptedRuleset)


def test_instantiate_returns_fresh_instances() -> None:
    registry = _registry()

    assert registry.instantiate("Vanilla") is not registry.instantiate("Vanilla")


def test_default_mod_location(tmp_path: Path) -> None:
    assert ModRegistry(include_builtins=False).default_mod_location() == Path.home() / "cardshifter-mods"
    assert ModRegistry(include_builtins=False, default_location=tmp_path).default_mod_location() == tmp_path


def test_discovery_skips_unrecognized_entries(tmp_path: Path) -> None:
    _write_mod(tmp_path, "Zeta")
    _write_mod(tmp_path, "Alpha")
    (tmp_path / "Empty").mkdir()
    (tmp_path / "notes.txt").write_text("hello", encoding="utf-8")
    _write_mod(tmp_path, "Other", marker="readme.md")

    loader = DirectoryModLoader(tmp_path, [PythonScriptBridge()])

    assert loader.available_mods() == ["Alpha", "Zeta"]


def test_discovery_does_not_execute_mod_code(tmp_path: Path) -> None:
    _write_mod(tmp_path, "Exploding", EXPLODING_GAME)
    loader = DirectoryModLoader(tmp_path, [PythonScriptBridge()])

    assert loader.available_mods() == ["Exploding"]
    with pytest.raises(ModLoadError, match="mod exploded"):
        loader.load("Exploding")


def test_discovery_load_rejects_unknown_and_unrecognized(tmp_path: Path) -> None:
    (tmp_path / "Empty").mkdir()
    loader = DirectoryModLoader(tmp_path, [PythonScriptBridge()])

    with pytest.raises(ModLoadError):
        loader.load("Missing")
    with pytest.raises(ModLoadError, match="game.py"):
        loader.load("Empty")


def test_discovery_of_missing_directory_is_empty(tmp_path: Path) -> None:
    assert DirectoryModLoader(tmp_path / "nope", [PythonScriptBridge()]).available_mods() == []
