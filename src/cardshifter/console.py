"""Text front-end that dumps game state and feeds typed choices to the dispatcher."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from rich.console import Console

from cardshifter.actions import Targetable
from cardshifter.dispatch import ActionDispatcher, DispatchResult
from cardshifter.game import Game

STOP_TOKEN = "exit"
SEPARATOR = "------------------"


class ConsoleController:
    """Interactive loop: show state, list allowed actions, read an index, dispatch."""

    def __init__(
        self,
        game: Game,
        dispatcher: ActionDispatcher | None = None,
        *,
        input_func: Callable[[], str] = input,
        console: Console | None = None,
    ) -> None:
        self._game = game
        self._dispatcher = dispatcher or ActionDispatcher(game)
        self._input = input_func
        self._console = console or Console(highlight=False)

    def play(self) -> None:
        while not self._game.is_game_over:
            self.output_game_state()
            actions = self._dispatcher.list_actions()
            self.output_list(actions)

            line = self._read_line()
            if line is None or line.strip() == STOP_TOKEN:
                break
            self.handle_action_input(line)

        self._print("--------------------------------------------")
        self.output_game_state()
        self._print("Game over!")

    def handle_action_input(self, line: str) -> DispatchResult:
        result = self._dispatcher.dispatch(line, self._prompt_target)
        if result.action is not None:
            self._print(f"Action {result.action}")
        self._print(result.message)
        return result

    def output_list(self, items: Sequence[Any]) -> None:
        self._print(SEPARATOR)
        for index, item in enumerate(items):
            self._print(f"{index}: {item}")

    def output_game_state(self) -> None:
        game = self._game
        self._print(SEPARATOR)
        self._print(game)
        for player in game.players:
            self._print(player)
            for action in player.actions.values():
                self._print(f"Action: {action}", indent=4)
            self._print_metadata(player, indent=4)

        viewer = game.current_player
        for zone in game.zones:
            self._print(zone)
            if not zone.is_known_to_player(viewer):
                continue
            for card in zone.cards:
                self._print(card, indent=4)
                for action in card.actions.values():
                    self._print(f"Action: {action}", indent=8)
                self._print_metadata(card, indent=8)

    def _prompt_target(self, targets: Sequence[Targetable]) -> str | None:
        self.output_list(targets)
        self._print("Enter target index:")
        return self._read_line()

    def _print_metadata(self, entity: Any, *, indent: int) -> None:
        for key, value in self._game.metadata(entity):
            self._print(f"{key}: {value}", indent=indent)

    def _read_line(self) -> str | None:
        try:
            return self._input()
        except EOFError:
            return None

    def _print(self, value: Any, *, indent: int = 0) -> None:
        self._console.print(" " * indent + str(value), markup=False, highlight=False)
