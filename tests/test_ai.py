from __future__ import annotations

from cardshifter.actions import TargetAction, UsableAction
from cardshifter.ai import AIController, FighterAI, IdiotAI, LoserAI
from cardshifter.config import Settings
from cardshifter.dispatch import ActionDispatcher
from cardshifter.game import Game, Player
from cardshifter.rulesets import VanillaRuleset


def test_fighter_prefers_attacks_and_players() -> None:
    owner = Player("Alice", 0)
    bob = Player("Bob", 1)
    actions = [
        UsableAction("End Turn", owner),
        UsableAction("Play", owner),
        TargetAction("Attack", owner, targets=lambda: [bob]),
    ]
    fighter = FighterAI()

    assert fighter.choose_action(actions) == 2
    assert fighter.choose_target(actions[2], ["card", bob]) == 1


def test_loser_only_ends_turns() -> None:
    owner = Player("Alice", 0)
    actions = [UsableAction("Draw Card", owner), UsableAction("End Turn", owner)]

    assert LoserAI().choose_action(actions) == 1


def test_idiot_is_reproducible_with_seed() -> None:
    actions = [UsableAction(str(i), None) for i in range(10)]

    first = [IdiotAI(seed=9).choose_action(actions) for _ in range(3)]
    second = [IdiotAI(seed=9).choose_action(actions) for _ in range(3)]

    assert first == second


def test_fighter_finishes_a_vanilla_game() -> None:
    game = Game(VanillaRuleset(starting_health=3), seed=11)
    game.start()
    controller = AIController(ActionDispatcher(game), FighterAI())

    performed = controller.play(max_steps=1_000)

    assert game.is_game_over is True
    assert game.winner is not None
    assert performed == len(game.history)


def test_controller_respects_step_limit() -> None:
    game = Game(VanillaRuleset(), seed=2)
    game.start()
    controller = AIController(ActionDispatcher(game), LoserAI())

    performed = controller.play(max_steps=4)

    assert performed == 4
    assert game.is_game_over is False


def test_settings_read_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("CARDSHIFTER_MODS_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("CARDSHIFTER_DEFAULT_SEED", "12")

    configured = Settings()

    assert configured.mods_directory == tmp_path
    assert configured.default_seed == 12
    assert configured.default_mod == "Vanilla"


class EmptyAttackRuleset:
    """An attack that is allowed but never has anyone to hit."""

    name = "EmptyAttack"

    def __init__(self, can_end_turn: bool = True) -> None:
        self.can_end_turn = can_end_turn

    def setup(self, game: Game) -> None:
        player = game.add_player("Alice")
        player.add_action(TargetAction("Attack", player, targets=lambda: [], perform=lambda target: None))
        if self.can_end_turn:
            player.add_action(UsableAction("End Turn", player, perform=game.next_turn))

    def expose_table(self, entity):
        return iter(())


def test_controller_skips_attack_without_targets() -> None:
    game = Game(EmptyAttackRuleset())
    game.start()
    controller = AIController(ActionDispatcher(game), FighterAI())

    performed = controller.play(max_steps=5)

    assert performed == 5
    assert [entry.action for entry in game.history] == ["End Turn"] * 5


def test_controller_stops_when_every_choice_is_rejected() -> None:
    game = Game(EmptyAttackRuleset(can_end_turn=False))
    game.start()
    controller = AIController(ActionDispatcher(game), FighterAI())

    assert controller.play(max_steps=50) == 0
    assert game.history == []
