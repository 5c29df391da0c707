"""Rule-set backend for plain Python scripts defining ``setup(game)``."""

from __future__ import annotations

import importlib.util
import re
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from .interfaces import ModLoadError, TableIterator

if TYPE_CHECKING:
    from cardshifter.game import Game

_UNSAFE_CHARS = re.compile(r"\W")


@dataclass(slots=True)
class PythonScriptHandle:
    path: Path
    module: ModuleType


class PythonScriptBridge:
    """Imports ``game.py`` from a mod directory under a private module name."""

    name = "python"
    marker = "game.py"
    suffix = ".py"

    def recognizes(self, directory: Path) -> bool:
        return (Path(directory) / self.marker).is_file()

    def load_ruleset(self, script_path: Path) -> PythonScriptHandle:
        path = Path(script_path)
        mod_name = path.parent.name if path.name == self.marker else path.stem
        module_name = f"cardshifter_mod_{_UNSAFE_CHARS.sub('_', mod_name)}_{uuid4().hex[:8]}"

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ModLoadError(mod_name, f"{path} is not an importable Python file")

        module = importlib.util.module_from_spec(spec)
        # Dataclasses and typing resolve string annotations through sys.modules.
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:  # noqa: BLE001 - any script error means the mod is unusable.
            sys.modules.pop(module_name, None)
            raise ModLoadError(mod_name, f"{type(exc).__name__}: {exc}") from exc

        if not callable(getattr(module, "setup", None)):
            sys.modules.pop(module_name, None)
            raise ModLoadError(mod_name, f"{path} does not define setup(game)")
        return PythonScriptHandle(path=path, module=module)

    def bind_game(self, handle: PythonScriptHandle, game: Game) -> None:
        handle.module.setup(game)

    def expose_table(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        return TableIterator.from_mapping(entity.data)
