"""CLI startup entrypoint for cardshifter."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import print

from cardshifter.ai import AIController
from cardshifter.bridges import ModLoadError, Ruleset, default_bridges, load_script
from cardshifter.config import settings
from cardshifter.console import ConsoleController
from cardshifter.dispatch import ActionDispatcher
from cardshifter.game import Game, GameEvents
from cardshifter.mods import ModRegistry
from cardshifter.telemetry import LoggingEventSink, configure_logging

app = typer.Typer(help="Cardshifter turn-based card game engine")


def _build_registry(mods_dir: Path | None) -> ModRegistry:
    registry = ModRegistry(default_location=settings.mods_directory)
    registry.load_external(mods_dir or registry.default_mod_location())
    return registry


def _ruleset_from_script(script: Path) -> Ruleset:
    for bridge in default_bridges():
        if script.suffix == bridge.suffix:
            try:
                return load_script(bridge, script)
            except (ModLoadError, RuntimeError) as exc:
                print({"error": str(exc)})
                raise typer.Exit(code=1)
    suffixes = ", ".join(bridge.suffix for bridge in default_bridges())
    raise typer.BadParameter(f"Unsupported script type {script.suffix or '(none)'}; expected one of {suffixes}")


def _ruleset_from_registry(registry: ModRegistry, mod: str) -> Ruleset:
    if mod not in registry.available_mods():
        raise typer.BadParameter(f"Unknown mod {mod}; available: {', '.join(registry.available_mods())}")
    ruleset = registry.instantiate(mod)
    if ruleset is None:
        print({"error": f"Mod {mod} could not be loaded, see log output for details"})
        raise typer.Exit(code=1)
    return ruleset


@app.command()
def play(
    script: Path = typer.Option(None, exists=True, dir_okay=False, help="Rule-set script (.py or .lua)"),
    mod: str = typer.Option(None, help="Registered mod name, e.g. Vanilla"),
    seed: int = typer.Option(None, help="Random seed for a reproducible game"),
    mods_dir: Path = typer.Option(None, help="Directory with external mods"),
    ai: str = typer.Option(None, help="Let a built-in AI play every seat instead of the console"),
    max_steps: int = typer.Option(500, min=1, help="Step limit for AI play"),
) -> None:
    """Start a game and run it in the console, or let an AI play it out."""
    configure_logging(settings.log_level)
    if script is not None and mod is not None:
        raise typer.BadParameter("Use either --script or --mod, not both")

    registry = _build_registry(mods_dir)
    if ai is not None and ai not in registry.ais:
        raise typer.BadParameter(f"Unknown AI {ai}; available: {', '.join(registry.ais)}")

    if script is not None:
        ruleset = _ruleset_from_script(script)
    else:
        ruleset = _ruleset_from_registry(registry, mod or settings.default_mod)

    events = GameEvents(sink=LoggingEventSink() if settings.telemetry_enabled else None)
    game = Game(ruleset, seed if seed is not None else settings.default_seed, events=events)
    game.start()
    dispatcher = ActionDispatcher(game)

    if ai is None:
        ConsoleController(game, dispatcher).play()
        return

    performed = AIController(dispatcher, registry.ais[ai]).play(max_steps=max_steps)
    print(
        {
            "ruleset": ruleset.name,
            "ai": ai,
            "actions_performed": performed,
            "game_over": game.is_game_over,
            "winner": game.winner.name if game.winner else None,
        }
    )


@app.command()
def mods(mods_dir: Path = typer.Option(None, help="Directory with external mods")) -> None:
    """List built-in and discovered mods plus the available AIs."""
    configure_logging(settings.log_level)
    registry = _build_registry(mods_dir)
    print({"mods": registry.available_mods(), "ais": list(registry.ais)})


if __name__ == "__main__":
    app()
