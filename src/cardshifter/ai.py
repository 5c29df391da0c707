"""Built-in AI strategies that drive a game through the action dispatcher."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from cardshifter.actions import TargetAction, Targetable, UsableAction
from cardshifter.dispatch import ActionDispatcher, DispatchResult
from cardshifter.game import Player

END_TURN = "End Turn"


class AIStrategy(Protocol):
    """Chooses an action index and, for targeted actions, a target index."""

    name: str

    def choose_action(self, actions: Sequence[UsableAction]) -> int:
        """Return the index of the action to perform."""

    def choose_target(self, action: TargetAction, targets: Sequence[Targetable]) -> int:
        """Return the index of the target to use."""


class LoserAI:
    """Never does anything except pass the turn when it can."""

    name = "Loser"

    def choose_action(self, actions: Sequence[UsableAction]) -> int:
        for index, action in enumerate(actions):
            if action.name == END_TURN:
                return index
        return len(actions) - 1

    def choose_target(self, action: TargetAction, targets: Sequence[Targetable]) -> int:
        return 0


@dataclass(slots=True)
class IdiotAI:
    """Picks uniformly at random among allowed actions and targets."""

    seed: int | None = None
    name: str = "Idiot"
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose_action(self, actions: Sequence[UsableAction]) -> int:
        return self._rng.randrange(len(actions))

    def choose_target(self, action: TargetAction, targets: Sequence[Targetable]) -> int:
        return self._rng.randrange(len(targets))


class FighterAI:
    """Attacks whenever possible, aiming at players first, and ends the turn last."""

    name = "Fighter"

    def choose_action(self, actions: Sequence[UsableAction]) -> int:
        ranked = sorted(range(len(actions)), key=lambda index: self._rank(actions[index]))
        return ranked[0]

    def choose_target(self, action: TargetAction, targets: Sequence[Targetable]) -> int:
        for index, target in enumerate(targets):
            if isinstance(target, Player):
                return index
        return 0

    @staticmethod
    def _rank(action: UsableAction) -> int:
        if isinstance(action, TargetAction):
            return 0
        if action.name == END_TURN:
            return 3
        if action.name == "Play":
            return 1
        return 2


def builtin_ais() -> dict[str, AIStrategy]:
    return {
        "Loser": LoserAI(),
        "Idiot": IdiotAI(),
        "Fighter": FighterAI(),
    }


class AIController:
    """Plays every seat of a game with one strategy until game over or a step limit."""

    def __init__(
        self,
        dispatcher: ActionDispatcher,
        strategy: AIStrategy,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._strategy = strategy
        self._logger = logger or logging.getLogger("cardshifter.ai")

    def step(self) -> DispatchResult | None:
        """Dispatch one AI choice; None when nothing is allowed.

        A rejected choice is dropped and the strategy chooses again among the
        remaining actions, so the returned result is only a rejection when
        every allowed action was rejected.
        """
        listed = self._dispatcher.list_actions()
        remaining = list(range(len(listed)))
        result: DispatchResult | None = None
        while remaining:
            choice = remaining[self._strategy.choose_action([listed[i] for i in remaining])]
            action = listed[choice]

            def resolve(targets: Sequence[Targetable], action: UsableAction = action) -> int:
                return self._strategy.choose_target(action, targets)  # type: ignore[arg-type]

            result = self._dispatcher.dispatch(choice, resolve)
            if result.performed:
                return result
            self._logger.debug(
                "ai_choice_rejected",
                extra={"strategy": self._strategy.name, "action": action.name, "outcome": result.outcome.value},
            )
            remaining.remove(choice)
        return result

    def play(self, max_steps: int = 1_000) -> int:
        """Run until the game ends, no action is allowed, or ``max_steps`` is hit."""
        performed = 0
        game = self._dispatcher.game
        for _ in range(max_steps):
            if game.is_game_over:
                break
            result = self.step()
            if result is None:
                self._logger.info("ai_no_actions", extra={"strategy": self._strategy.name})
                break
            if not result.performed:
                self._logger.info("ai_no_performable_actions", extra={"strategy": self._strategy.name})
                break
            performed += 1
        return performed
