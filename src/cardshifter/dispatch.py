"""Action/target dispatch engine driving every player move."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence

from cardshifter.actions import TargetAction, Targetable, UsableAction
from cardshifter.game import Game, Player

TargetResolver = Callable[[Sequence[Targetable]], "int | str | None"]


class DispatchOutcome(str, Enum):
    """Terminal states of one dispatch cycle."""

    PERFORMED = "performed"
    INVALID_INDEX = "invalid_index"
    NOT_ALLOWED = "not_allowed"
    NO_TARGETS = "no_targets"
    INVALID_TARGET = "invalid_target"


@dataclass(slots=True)
class DispatchResult:
    """Outcome of a dispatch, with a message suitable for the front-end."""

    outcome: DispatchOutcome
    message: str
    action: UsableAction | None = None
    target: Targetable | None = None

    @property
    def performed(self) -> bool:
        return self.outcome == DispatchOutcome.PERFORMED


def parse_index(value: Any, size: int) -> int | None:
    """Return ``value`` as an index into a sequence of ``size`` items, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        index = value
    elif isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdecimal()):
            return None
        index = int(text)
    else:
        return None
    if index < 0 or index >= size:
        return None
    return index


class ActionDispatcher:
    """Lists allowed actions and performs the one a front-end picks.

    Every rejected dispatch is a no-op on game state: the only mutation point
    is the single ``perform()`` call of a successful cycle.
    """

    def __init__(self, game: Game, *, logger: logging.Logger | None = None) -> None:
        self._game = game
        self._logger = logger or logging.getLogger("cardshifter.dispatch")
        self._listed: list[UsableAction] = []

    @property
    def game(self) -> Game:
        return self._game

    def list_actions(self) -> list[UsableAction]:
        """Return the currently allowed actions and remember them for ``dispatch``."""
        self._listed = [action for action in self._game.all_actions() if action.is_allowed()]
        return list(self._listed)

    def dispatch(self, choice: int | str, target_resolver: TargetResolver) -> DispatchResult:
        """Perform the listed action at ``choice``, resolving a target if it needs one."""
        index = parse_index(choice, len(self._listed))
        if index is None:
            return self._reject(DispatchOutcome.INVALID_INDEX, f"Illegal action index: {choice}")

        action = self._listed[index]
        if not action.is_allowed():
            return self._reject(DispatchOutcome.NOT_ALLOWED, "Action is not allowed", action=action)

        # perform() may pass the turn, so the actor is taken beforehand.
        actor = self._game.current_player
        turn = self._game.turn

        if isinstance(action, TargetAction):
            targets = action.find_targets()
            if not targets:
                return self._reject(DispatchOutcome.NO_TARGETS, "No available targets for action", action=action)

            raw_target = target_resolver(targets)
            target_index = parse_index(raw_target, len(targets))
            if target_index is None:
                return self._reject(
                    DispatchOutcome.INVALID_TARGET,
                    f"Target index out of range: {raw_target}",
                    action=action,
                )
            target = targets[target_index]
            action.perform(target)
            return self._performed(action, target, actor, turn)

        action.perform()
        return self._performed(action, None, actor, turn)

    def _performed(
        self,
        action: UsableAction,
        target: Targetable | None,
        actor: Player | None,
        turn: int,
    ) -> DispatchResult:
        record = self._game.record(action, target, player=actor, turn=turn)
        self._logger.info(
            "action_performed",
            extra={"action": action.name, "target": record.target, "turn": record.turn},
        )
        self._game.events.fire(
            "action_performed",
            self._game,
            {"action": action.name, "target": record.target, "player": record.player},
        )
        return DispatchResult(DispatchOutcome.PERFORMED, "Action performed", action=action, target=target)

    def _reject(
        self,
        outcome: DispatchOutcome,
        message: str,
        *,
        action: UsableAction | None = None,
    ) -> DispatchResult:
        self._logger.info(
            "action_rejected",
            extra={"outcome": outcome.value, "action": action.name if action else None},
        )
        return DispatchResult(outcome, message, action=action)
