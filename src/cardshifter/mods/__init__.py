"""Mod discovery and the rule-set registry."""

from cardshifter.bridges.interfaces import ModLoadError

from .discovery import DirectoryModLoader
from .registry import DEFAULT_MOD_DIRECTORY, LUA_START, VANILLA, ModRegistry

__all__ = [
    "DEFAULT_MOD_DIRECTORY",
    "DirectoryModLoader",
    "LUA_START",
    "ModLoadError",
    "ModRegistry",
    "VANILLA",
]
