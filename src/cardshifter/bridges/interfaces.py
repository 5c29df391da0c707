"""Contracts shared by every rule-set backend (native, Python script, Lua)."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from cardshifter.game import Game


class ModLoadError(RuntimeError):
    """Raised when a mod or script cannot be turned into a rule-set."""

    def __init__(self, mod_name: str, reason: str) -> None:
        super().__init__(f"Unable to load mod {mod_name}: {reason}")
        self.mod_name = mod_name
        self.reason = reason


class TableIterator:
    """Iterates (key, value) pairs over a key sequence snapshotted up front.

    Keys removed after the snapshot are skipped and keys added are not
    visited, so a table with ``k`` keys is exhausted in at most ``k + 1``
    calls to ``next()``.
    """

    def __init__(self, keys: Iterable[Any], lookup: Callable[[Any], Any]) -> None:
        self._keys = list(keys)
        self._lookup = lookup
        self._position = 0

    @classmethod
    def from_mapping(cls, table: Mapping) -> TableIterator:
        return cls(table.keys(), table.__getitem__)

    def __iter__(self) -> TableIterator:
        return self

    def __next__(self) -> tuple[Any, Any]:
        while self._position < len(self._keys):
            key = self._keys[self._position]
            self._position += 1
            try:
                value = self._lookup(key)
            except KeyError:
                continue
            return key, value
        raise StopIteration


class Ruleset(Protocol):
    """A pluggable implementation of game rules."""

    name: str

    def setup(self, game: Game) -> None:
        """Create players, zones, cards and actions on a fresh game."""

    def expose_table(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        """Iterate the metadata table of a player, card or game."""


class ScriptBridge(Protocol):
    """Adapter an embedded scripting backend implements to drive a game."""

    name: str
    marker: str
    suffix: str

    def recognizes(self, directory: Path) -> bool:
        """Return True when ``directory`` holds this backend's marker file."""

    def load_ruleset(self, script_path: Path) -> Any:
        """Load a script and return an opaque handle; raise ``ModLoadError`` on failure."""

    def bind_game(self, handle: Any, game: Game) -> None:
        """Expose ``game`` to the script behind ``handle`` and run its setup."""

    def expose_table(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        """Iterate an entity's metadata table in the backend's native order."""


@dataclass(slots=True)
class ScriptedRuleset:
    """Adapts a loaded script handle to the ``Ruleset`` contract."""

    name: str
    bridge: ScriptBridge
    handle: Any

    def setup(self, game: Game) -> None:
        self.bridge.bind_game(self.handle, game)

    def expose_table(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        return self.bridge.expose_table(entity)


def load_script(bridge: ScriptBridge, script_path: Path, name: str | None = None) -> ScriptedRuleset:
    """Load a single script file into a rule-set through ``bridge``."""
    path = Path(script_path)
    handle = bridge.load_ruleset(path)
    return ScriptedRuleset(name=name or path.stem, bridge=bridge, handle=handle)
