"""Discovers externally supplied mods in a directory of per-mod folders."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from cardshifter.bridges.interfaces import ModLoadError, ScriptBridge, ScriptedRuleset


class DirectoryModLoader:
    """Recognizes ``<directory>/<ModName>/<marker>`` layouts and loads them on demand.

    Listing never executes mod code; scripts only run when ``load`` is called.
    """

    def __init__(
        self,
        directory: str | Path,
        bridges: Sequence[ScriptBridge],
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._directory = Path(directory).expanduser()
        self._bridges = list(bridges)
        self._logger = logger or logging.getLogger("cardshifter.mods.discovery")

    @property
    def directory(self) -> Path:
        return self._directory

    def available_mods(self) -> list[str]:
        """Names of subdirectories that some bridge recognizes, sorted by name."""
        if not self._directory.is_dir():
            return []
        try:
            names = [
                entry.name
                for entry in self._directory.iterdir()
                if entry.is_dir() and self._bridge_for(entry) is not None
            ]
        except OSError as exc:
            self._logger.warning(
                "mod_directory_missing",
                extra={"directory": str(self._directory), "detail": f"{self._directory} is unreadable: {exc}"},
            )
            return []
        return sorted(names)

    def load(self, name: str) -> ScriptedRuleset:
        mod_dir = self._directory / name
        if not mod_dir.is_dir():
            raise ModLoadError(name, f"{mod_dir} is not a directory")

        bridge = self._bridge_for(mod_dir)
        if bridge is None:
            markers = ", ".join(b.marker for b in self._bridges)
            raise ModLoadError(name, f"{mod_dir} contains none of: {markers}")

        try:
            handle = bridge.load_ruleset(mod_dir / bridge.marker)
        except ModLoadError:
            raise
        except RuntimeError as exc:
            raise ModLoadError(name, str(exc)) from exc

        self._logger.debug("mod_loaded", extra={"mod": name, "backend": bridge.name})
        return ScriptedRuleset(name=name, bridge=bridge, handle=handle)

    def _bridge_for(self, mod_dir: Path) -> ScriptBridge | None:
        for bridge in self._bridges:
            if bridge.recognizes(mod_dir):
                return bridge
        return None
