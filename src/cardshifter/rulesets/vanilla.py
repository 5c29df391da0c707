"""Native built-in rule-set: two players summon creatures and attack until one falls."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from cardshifter.actions import TargetAction, Targetable, UsableAction
from cardshifter.bridges.interfaces import TableIterator
from cardshifter.game import Card, Game, Player, Zone, ZoneVisibility

STARTING_HEALTH = 10
OPENING_HAND = 3
MAX_MANA = 10

# (name, attack, health, cost)
CREATURES = (
    ("Bio Drone", 1, 1, 1),
    ("Spareparts", 1, 2, 1),
    ("Gun Runner", 2, 1, 2),
    ("Conscript", 2, 2, 2),
    ("Cyberpimp", 2, 3, 3),
    ("Field Medic", 1, 4, 3),
    ("Mech Trooper", 3, 3, 4),
    ("Scout Mech", 4, 2, 4),
    ("Assault Mech", 5, 4, 6),
    ("Supply Mech", 2, 6, 5),
)


@dataclass(slots=True)
class PlayerZones:
    deck: Zone
    hand: Zone
    battlefield: Zone
    graveyard: Zone


class VanillaRuleset:
    """Creature combat rules implemented directly against the game API."""

    name = "Vanilla"

    def __init__(self, *, starting_health: int = STARTING_HEALTH, opening_hand: int = OPENING_HAND) -> None:
        self.starting_health = starting_health
        self.opening_hand = opening_hand
        self._zones: dict[str, PlayerZones] = {}

    def setup(self, game: Game) -> None:
        for seat in (1, 2):
            player = game.add_player(f"Player {seat}")
            mana = 1 if seat == 1 else 0
            player.data.update(health=self.starting_health, mana=mana, max_mana=mana, drawn=False)
            zones = PlayerZones(
                deck=game.add_zone("Deck", player, ZoneVisibility.HIDDEN),
                hand=game.add_zone("Hand", player, ZoneVisibility.OWNER),
                battlefield=game.add_zone("Battlefield", player, ZoneVisibility.PUBLIC),
                graveyard=game.add_zone("Graveyard", player, ZoneVisibility.PUBLIC),
            )
            self._zones[player.name] = zones
            for name, attack, health, cost in CREATURES:
                card = game.create_card(name, zones.deck)
                card.data.update(attack=attack, health=health, cost=cost, sick=True, attacked=False)
                self._add_card_actions(game, player, card)
            zones.deck.shuffle(game.random)
            self._add_player_actions(game, player)

        game.events.on("start_game", self._deal_opening_hands)

    def expose_table(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        return TableIterator.from_mapping(entity.data)

    def _deal_opening_hands(self, game: Game, payload: dict) -> None:
        for player in game.players:
            zones = self._zones[player.name]
            for _ in range(self.opening_hand):
                card = zones.deck.top()
                if card is not None:
                    zones.hand.add(card)

    def _add_player_actions(self, game: Game, player: Player) -> None:
        zones = self._zones[player.name]

        def draw() -> None:
            zones.hand.add(zones.deck.top())
            player.data["drawn"] = True

        def end_turn() -> None:
            following = game.next_turn()
            following.data["max_mana"] = min(MAX_MANA, following.data["max_mana"] + 1)
            following.data["mana"] = following.data["max_mana"]
            following.data["drawn"] = False
            for card in self._zones[following.name].battlefield.cards:
                card.data["sick"] = False
                card.data["attacked"] = False

        player.add_action(
            UsableAction(
                "Draw Card",
                player,
                allowed=lambda: self._is_turn_of(game, player) and len(zones.deck) > 0 and not player.data["drawn"],
                perform=draw,
            )
        )
        player.add_action(UsableAction("End Turn", player, allowed=lambda: self._is_turn_of(game, player), perform=end_turn))

    def _add_card_actions(self, game: Game, owner: Player, card: Card) -> None:
        zones = self._zones[owner.name]

        def can_play() -> bool:
            return (
                self._is_turn_of(game, owner)
                and card.zone is zones.hand
                and card.data["cost"] <= owner.data["mana"]
            )

        def play() -> None:
            owner.data["mana"] -= card.data["cost"]
            zones.battlefield.add(card)
            card.data["sick"] = True

        def can_attack() -> bool:
            return (
                self._is_turn_of(game, owner)
                and card.zone is zones.battlefield
                and not card.data["sick"]
                and not card.data["attacked"]
            )

        def targets() -> list[Targetable]:
            found: list[Targetable] = []
            for opponent in game.opponents_of(owner):
                found.append(opponent)
                found.extend(self._zones[opponent.name].battlefield.cards)
            return found

        def attack(target: Targetable) -> None:
            card.data["attacked"] = True
            if isinstance(target, Player):
                target.data["health"] -= card.data["attack"]
                if target.data["health"] <= 0:
                    game.end_game(winner=owner)
                return
            target.data["health"] -= card.data["attack"]
            card.data["health"] -= target.data["attack"]
            for fighter in (target, card):
                if fighter.data["health"] <= 0:
                    self._zones[self._owner_name(fighter)].graveyard.add(fighter)

        card.add_action(UsableAction("Play", card, allowed=can_play, perform=play))
        card.add_action(TargetAction("Attack", card, allowed=can_attack, targets=targets, perform=attack))

    def _owner_name(self, card: Card) -> str:
        return card.zone.owner.name

    @staticmethod
    def _is_turn_of(game: Game, player: Player) -> bool:
        return not game.is_game_over and game.current_player is player
