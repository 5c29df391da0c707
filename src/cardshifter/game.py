"""Game aggregate: players, zones, cards and the event channel."""

from __future__ import annotations

import random
from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from cardshifter.actions import UsableAction
from cardshifter.telemetry.logging import EventSink

if TYPE_CHECKING:
    from cardshifter.bridges.interfaces import Ruleset


class MetadataTable(MutableMapping):
    """Insertion-ordered key/value state written by rule-sets during play."""

    def __init__(self, initial: dict | None = None) -> None:
        self._values: dict[Any, Any] = dict(initial or {})

    def __getitem__(self, key: Any) -> Any:
        return self._values[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: Any) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MetadataTable({self._values!r})"


class ZoneVisibility(str, Enum):
    """Who may observe the cards inside a zone."""

    PUBLIC = "public"
    OWNER = "owner"
    HIDDEN = "hidden"


class Player:
    def __init__(self, name: str, index: int, data: Any = None) -> None:
        self.name = name
        self.index = index
        self.actions: dict[str, UsableAction] = {}
        self.data = MetadataTable() if data is None else data

    def add_action(self, action: UsableAction) -> UsableAction:
        self.actions[action.name] = action
        return action

    def __str__(self) -> str:
        return f"Player {self.name}"

    def __repr__(self) -> str:
        return f"Player({self.name!r})"


class Card:
    def __init__(self, name: str, data: Any = None) -> None:
        self.name = name
        self.zone: Zone | None = None
        self.actions: dict[str, UsableAction] = {}
        self.data = MetadataTable() if data is None else data

    def add_action(self, action: UsableAction) -> UsableAction:
        self.actions[action.name] = action
        return action

    def move_to(self, zone: Zone) -> None:
        zone.add(self)

    def __str__(self) -> str:
        return f"Card {self.name}"

    def __repr__(self) -> str:
        return f"Card({self.name!r})"


class Zone:
    """Ordered container of cards; the first card is the top of the zone."""

    def __init__(
        self,
        name: str,
        owner: Player | None = None,
        visibility: ZoneVisibility = ZoneVisibility.PUBLIC,
    ) -> None:
        self.name = name
        self.owner = owner
        self.visibility = ZoneVisibility(visibility)
        self.cards: list[Card] = []

    def is_known_to_player(self, player: Player | None) -> bool:
        if self.visibility == ZoneVisibility.PUBLIC:
            return True
        if self.visibility == ZoneVisibility.OWNER:
            return player is not None and player is self.owner
        return False

    def add(self, card: Card) -> Card:
        if card.zone is not None:
            card.zone.remove(card)
        self.cards.append(card)
        card.zone = self
        return card

    def remove(self, card: Card) -> None:
        self.cards.remove(card)
        card.zone = None

    def top(self) -> Card | None:
        return self.cards[0] if self.cards else None

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        owner = f" of {self.owner.name}" if self.owner else ""
        return f"Zone {self.name}{owner} ({len(self.cards)} cards)"


@dataclass(slots=True)
class ActionRecord:
    """One performed action, appended to ``Game.history``."""

    turn: int
    player: str | None
    action: str
    target: str | None = None


GameListener = Callable[["Game", dict], None]


class GameEvents:
    """Notification point fired on game state transitions."""

    def __init__(self, sink: EventSink | None = None) -> None:
        self._listeners: dict[str, list[GameListener]] = {}
        self._sink = sink

    def on(self, event_name: str, listener: GameListener) -> None:
        self._listeners.setdefault(event_name, []).append(listener)

    def fire(self, event_name: str, game: Game, payload: dict | None = None) -> None:
        payload = payload or {}
        for listener in list(self._listeners.get(event_name, ())):
            listener(game, payload)
        if self._sink is not None:
            self._sink.emit(event_name, payload)

    def start_game(self, game: Game) -> None:
        self.fire("start_game", game, {"seed": game.seed, "players": [p.name for p in game.players]})


class Game:
    """Session state driven by one rule-set and a deterministic random seed."""

    def __init__(self, ruleset: Ruleset, seed: int | None = None, *, events: GameEvents | None = None) -> None:
        self.ruleset = ruleset
        self.seed = seed
        self.random = random.Random(seed)
        self.events = events or GameEvents()
        self.players: list[Player] = []
        self.zones: list[Zone] = []
        self.history: list[ActionRecord] = []
        self.data = MetadataTable()
        self.turn = 1
        self._current_index = 0
        self._started = False
        self._game_over = False
        self._winner: Player | None = None

    def start(self) -> None:
        """Run rule-set setup, freeze the player list and fire ``start_game``."""
        if self._started:
            raise RuntimeError("Game already started")
        self.ruleset.setup(self)
        self._started = True
        self.events.start_game(self)

    def add_player(self, name: str, data: Any = None) -> Player:
        if self._started:
            raise RuntimeError("Players are fixed once the game has started")
        player = Player(name, index=len(self.players), data=data)
        self.players.append(player)
        return player

    def add_zone(
        self,
        name: str,
        owner: Player | None = None,
        visibility: ZoneVisibility | str = ZoneVisibility.PUBLIC,
    ) -> Zone:
        zone = Zone(name, owner=owner, visibility=ZoneVisibility(visibility))
        self.zones.append(zone)
        return zone

    def create_card(self, name: str, zone: Zone, data: Any = None) -> Card:
        return zone.add(Card(name, data=data))

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self._current_index]

    def opponents_of(self, player: Player) -> list[Player]:
        return [other for other in self.players if other is not player]

    def next_turn(self) -> Player | None:
        if not self.players:
            return None
        self._current_index = (self._current_index + 1) % len(self.players)
        if self._current_index == 0:
            self.turn += 1
        return self.current_player

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def winner(self) -> Player | None:
        return self._winner

    def end_game(self, winner: Player | None = None) -> None:
        """Mark the game as over; repeated calls keep the first winner."""
        if self._game_over:
            return
        self._game_over = True
        self._winner = winner
        self.events.fire("game_over", self, {"winner": winner.name if winner else None})

    def all_actions(self) -> list[UsableAction]:
        actions: list[UsableAction] = []
        for player in self.players:
            actions.extend(player.actions.values())
        for zone in self.zones:
            for card in zone.cards:
                actions.extend(card.actions.values())
        return actions

    def metadata(self, entity: Any) -> Iterator[tuple[Any, Any]]:
        """Iterate an entity's metadata through the rule-set's table view."""
        return self.ruleset.expose_table(entity)

    def record(
        self,
        action: UsableAction,
        target: Any = None,
        *,
        player: Player | None = None,
        turn: int | None = None,
    ) -> ActionRecord:
        """Append a history entry; ``player`` and ``turn`` default to the current ones."""
        actor = player if player is not None else self.current_player
        entry = ActionRecord(
            turn=self.turn if turn is None else turn,
            player=actor.name if actor else None,
            action=action.name,
            target=getattr(target, "name", None) if target is not None else None,
        )
        self.history.append(entry)
        return entry

    def __str__(self) -> str:
        current = self.current_player
        status = "over" if self._game_over else "running"
        return f"Game turn {self.turn}, current player {current.name if current else '-'} ({status})"
