"""Catalogue of rule-set mods and AI strategies available to a session."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Sequence

from cardshifter.ai import AIStrategy, builtin_ais
from cardshifter.bridges import LuaScriptBridge, ScriptBridge, default_bridges, load_script
from cardshifter.bridges.interfaces import Ruleset
from cardshifter.rulesets import DEFAULT_LUA_SCRIPT, VanillaRuleset

from .discovery import DirectoryModLoader

RulesetFactory = Callable[[], "Ruleset | None"]

VANILLA = "Vanilla"
LUA_START = "LuaStart"
DEFAULT_MOD_DIRECTORY = Path.home() / "cardshifter-mods"


class ModRegistry:
    """Maps mod names to lazy rule-set factories.

    Names are unique: registering an existing name replaces its factory and
    keeps its original position. ``instantiate`` never raises; any failure is
    logged and reported as ``None``.
    """

    def __init__(
        self,
        *,
        bridges: Sequence[ScriptBridge] | None = None,
        logger: logging.Logger | None = None,
        include_builtins: bool = True,
        default_location: Path | None = None,
    ) -> None:
        self._bridges = list(bridges) if bridges is not None else default_bridges()
        self._logger = logger or logging.getLogger("cardshifter.mods.registry")
        self._default_location = default_location or DEFAULT_MOD_DIRECTORY
        self._mods: dict[str, RulesetFactory] = {}
        self._ais: dict[str, AIStrategy] = {}

        if include_builtins:
            self._ais.update(builtin_ais())
            self.register(VANILLA, VanillaRuleset)
            self.register(LUA_START, lambda: load_script(LuaScriptBridge(), DEFAULT_LUA_SCRIPT, name=LUA_START))

    @property
    def ais(self) -> Mapping[str, AIStrategy]:
        return MappingProxyType(self._ais)

    def register(self, name: str, factory: RulesetFactory) -> None:
        replaced = name in self._mods
        self._mods[name] = factory
        self._logger.debug("mod_registered", extra={"mod": name, "replaced": replaced})

    def available_mods(self) -> list[str]:
        """Registered names in insertion order."""
        return list(self._mods)

    def instantiate(self, name: str) -> Ruleset | None:
        factory = self._mods.get(name)
        if factory is None:
            self._logger.warning("mod_unknown", extra={"mod": name})
            return None
        try:
            ruleset = factory()
        except Exception:  # noqa: BLE001 - a broken mod must never take the caller down.
            self._logger.exception("mod_instantiate_failed", extra={"mod": name})
            return None
        if ruleset is None:
            self._logger.warning("mod_instantiate_failed", extra={"mod": name, "reason": "factory returned None"})
        return ruleset

    def load_external(self, directory: str | Path) -> list[str]:
        """Register a lazy factory for every mod found under ``directory``."""
        path = Path(directory).expanduser()
        if not path.is_dir():
            self._logger.warning(
                "mod_directory_missing",
                extra={"directory": str(path), "detail": f"{path} not found. No external mods loaded"},
            )
            return []

        loader = DirectoryModLoader(path, self._bridges, logger=self._logger)
        discovered = loader.available_mods()
        for mod_name in discovered:
            self.register(mod_name, self._lazy_loader(loader, mod_name))
        self._logger.info("mod_discovered", extra={"directory": str(path), "mods": discovered})
        return discovered

    def default_mod_location(self) -> Path:
        return self._default_location

    @staticmethod
    def _lazy_loader(loader: DirectoryModLoader, mod_name: str) -> RulesetFactory:
        return lambda: loader.load(mod_name)
