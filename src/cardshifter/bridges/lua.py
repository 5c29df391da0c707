"""Rule-set backend for Lua scripts, powered by ``lupa``.

Each loaded script gets its own ``LuaRuntime``. Binding a game injects a small
set of helper functions into the Lua globals so the script can create
entities whose metadata is a native Lua table, and register actions backed by
Lua functions:

    new_player(name)                          -> Player
    new_zone(name, owner, visibility)         -> Zone ("public"/"owner"/"hidden")
    new_card(name, zone)                      -> Card
    usable_action(owner, name, allowed, perform)
    target_action(owner, name, allowed, targets, perform)
    move_card(card, zone), top_card(zone), count(zone), opponents(player)
    next_turn(), end_game(winner)

The script itself must define a global ``setup(game)`` function.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from cardshifter.actions import TargetAction, UsableAction

from .interfaces import ModLoadError, TableIterator

if TYPE_CHECKING:
    from cardshifter.game import Card, Game, Player, Zone


@dataclass(slots=True)
class LuaScriptHandle:
    path: Path
    runtime: Any


class LuaScriptBridge:
    """Loads ``game.lua`` scripts into isolated Lua runtimes."""

    name = "lua"
    marker = "game.lua"
    suffix = ".lua"

    def recognizes(self, directory: Path) -> bool:
        return (Path(directory) / self.marker).is_file()

    def load_ruleset(self, script_path: Path) -> LuaScriptHandle:
        path = Path(script_path)
        mod_name = path.parent.name if path.name == self.marker else path.stem
        lupa = self._lupa()

        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ModLoadError(mod_name, f"cannot read {path}: {exc}") from exc

        runtime = lupa.LuaRuntime(unpack_returned_tuples=True)
        try:
            runtime.execute(source)
        except lupa.LuaError as exc:
            raise ModLoadError(mod_name, f"Lua error: {exc}") from exc

        if lupa.lua_type(runtime.globals()["setup"]) != "function":
            raise ModLoadError(mod_name, f"{path} does not define a global setup(game) function")
        return LuaScriptHandle(path=path, runtime=runtime)

    def bind_game(self, handle: LuaScriptHandle, game: Game) -> None:
        runtime = handle.runtime
        lua_globals = runtime.globals()
        for helper_name, helper in self._helpers(runtime, game).items():
            lua_globals[helper_name] = helper
        lua_globals["game"] = game
        lua_globals["setup"](game)

    def expose_table(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        data = entity.data
        if isinstance(data, Mapping):
            return TableIterator.from_mapping(data)

        def _lookup(key: Any) -> Any:
            value = data[key]
            if value is None:
                raise KeyError(key)
            return value

        return TableIterator(data.keys(), _lookup)

    @staticmethod
    def _lupa() -> Any:
        try:
            import lupa
        except ImportError as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Lua scripting backend unavailable. Install extras with: pip install 'cardshifter[lua]'"
            ) from exc
        return lupa

    @staticmethod
    def _helpers(runtime: Any, game: Game) -> dict[str, Callable[..., Any]]:
        def as_list(table: Any) -> list[Any]:
            if table is None:
                return []
            return [table[i] for i in range(1, len(table) + 1)]

        def new_player(name: str) -> Player:
            return game.add_player(name, data=runtime.table())

        def new_zone(name: str, owner: Player | None = None, visibility: str = "public") -> Zone:
            return game.add_zone(name, owner=owner, visibility=visibility)

        def new_card(name: str, zone: Zone) -> Card:
            return game.create_card(name, zone, data=runtime.table())

        def usable_action(owner: Any, name: str, allowed: Any, perform: Any) -> UsableAction:
            return owner.add_action(UsableAction(name, owner, allowed=allowed, perform=perform))

        def target_action(owner: Any, name: str, allowed: Any, targets: Any, perform: Any) -> TargetAction:
            action = TargetAction(
                name,
                owner,
                allowed=allowed,
                targets=lambda: as_list(targets()),
                perform=perform,
            )
            return owner.add_action(action)

        def move_card(card: Card, zone: Zone) -> None:
            card.move_to(zone)

        def opponents(player: Player) -> Any:
            return runtime.table_from(game.opponents_of(player))

        return {
            "new_player": new_player,
            "new_zone": new_zone,
            "new_card": new_card,
            "usable_action": usable_action,
            "target_action": target_action,
            "move_card": move_card,
            "top_card": lambda zone: zone.top(),
            "count": lambda zone: len(zone.cards),
            "opponents": opponents,
            "next_turn": game.next_turn,
            "end_game": game.end_game,
        }
