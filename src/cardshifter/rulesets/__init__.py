"""Rule-sets shipped with cardshifter."""

from pathlib import Path

from .vanilla import VanillaRuleset

DEFAULT_LUA_SCRIPT = Path(__file__).with_name("start.lua")

__all__ = ["DEFAULT_LUA_SCRIPT", "VanillaRuleset"]
