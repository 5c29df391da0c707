"""Script bridges: the uniform adapter between scripting backends and the core."""

from .interfaces import ModLoadError, Ruleset, ScriptBridge, ScriptedRuleset, TableIterator, load_script
from .lua import LuaScriptBridge
from .python_script import PythonScriptBridge

__all__ = [
    "LuaScriptBridge",
    "ModLoadError",
    "PythonScriptBridge",
    "Ruleset",
    "ScriptBridge",
    "ScriptedRuleset",
    "TableIterator",
    "default_bridges",
    "load_script",
]


def default_bridges() -> list[ScriptBridge]:
    """Bridges for every backend shipped with cardshifter."""
    return [PythonScriptBridge(), LuaScriptBridge()]
