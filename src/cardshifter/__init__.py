"""Cardshifter interaction core: action dispatch, game model and mod registry."""

from .actions import TargetAction, Targetable, UsableAction
from .dispatch import ActionDispatcher, DispatchOutcome, DispatchResult
from .game import Card, Game, GameEvents, MetadataTable, Player, Zone, ZoneVisibility

__all__ = [
    "ActionDispatcher",
    "Card",
    "DispatchOutcome",
    "DispatchResult",
    "Game",
    "GameEvents",
    "MetadataTable",
    "Player",
    "TargetAction",
    "Targetable",
    "UsableAction",
    "Zone",
    "ZoneVisibility",
]
