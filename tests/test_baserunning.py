"""
Tests for baserunning and run crediting.

Run with: pytest tests/test_baserunning.py -v
"""
import random

import pytest

from diamond.engine.baserunning import FIRST, SECOND, THIRD, advance_runners, reach_on_error
from diamond.engine.game_engine import GameEngine
from diamond.engine.outcomes import Outcome
from diamond.models.player import Player, Position
from diamond.models.team import Team


class ScriptedRandom(random.Random):
    """random() replays the given values, then returns 0.99"""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0) if self.values else 0.99

    def getrandbits(self, k):
        return super().getrandbits(k)


def create_mock_player(name: str, is_pitcher: bool = False) -> Player:
    return Player(
        name=name,
        position=Position.PITCHER if is_pitcher else Position.DESIGNATED_HITTER,
        is_pitcher=is_pitcher,
        hit=60, power=50, speed=50, defense=60, arm=60,
        pitching=70 if is_pitcher else 0,
    )


def create_test_team(name: str) -> Team:
    players = [create_mock_player(f"{name} Batter {i}") for i in range(1, 10)]
    players.append(create_mock_player(f"{name} Pitcher", is_pitcher=True))
    for index, player in enumerate(players):
        player.lineup_order = index
    return Team(name=name, players=players)


@pytest.fixture
def game():
    engine = GameEngine(random.Random(7))
    return engine.start_game(create_test_team("Home"), create_test_team("Away"))


def batters(game):
    """Away position players; the away side bats first"""
    return [p for p in game.away.players if not p.pitches]


def load_bases(game, *bases):
    hitters = batters(game)
    for index, base in enumerate(bases):
        game.bases[base] = hitters[index].id
    return hitters


class TestWalk:
    def test_bases_loaded_walk_forces_in_a_run(self, game):
        hitters = load_bases(game, FIRST, SECOND, THIRD)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.WALK, batter)

        assert runs == 1
        assert game.score_away == 1
        assert game.bases == [batter.id, hitters[0].id, hitters[1].id]
        assert game.line(hitters[2]).runs == 1
        assert game.line(batter).rbi == 1

    def test_walk_does_not_move_unforced_runner(self, game):
        hitters = load_bases(game, SECOND)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.WALK, batter)

        assert runs == 0
        assert game.bases == [batter.id, hitters[0].id, None]

    def test_walk_with_runners_on_first_and_third(self, game):
        hitters = load_bases(game, FIRST, THIRD)
        batter = hitters[5]

        advance_runners(game, Outcome.WALK, batter)

        assert game.bases == [batter.id, hitters[0].id, hitters[1].id]


class TestHits:
    def test_grand_slam_scores_four_and_clears_bases(self, game):
        hitters = load_bases(game, FIRST, SECOND, THIRD)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.HOME_RUN, batter)

        assert runs == 4
        assert game.bases == [None, None, None]
        assert game.score_away == 4
        assert game.box.team(game.away.id).runs == 4
        assert game.line(batter).rbi == 4
        assert game.line(batter).runs == 1
        for runner in hitters[:3]:
            assert game.line(runner).runs == 1

    def test_solo_home_run(self, game):
        batter = batters(game)[0]

        runs = advance_runners(game, Outcome.HOME_RUN, batter)

        assert runs == 1
        assert game.line(batter).rbi == 1
        assert game.line(batter).runs == 1

    def test_double_scores_runner_from_second(self, game):
        hitters = load_bases(game, SECOND)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.DOUBLE, batter)

        assert runs == 1
        assert game.bases == [None, batter.id, None]
        assert game.line(batter).rbi == 1

    def test_double_moves_runner_from_first_to_third(self, game):
        hitters = load_bases(game, FIRST)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.DOUBLE, batter)

        assert runs == 0
        assert game.bases == [None, batter.id, hitters[0].id]

    def test_single_scores_from_third_and_moves_everyone_up(self, game):
        hitters = load_bases(game, FIRST, SECOND, THIRD)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.SINGLE, batter)

        assert runs == 1
        assert game.bases == [batter.id, hitters[0].id, hitters[1].id]

    def test_triple_clears_bases(self, game):
        hitters = load_bases(game, FIRST, THIRD)
        batter = hitters[5]

        runs = advance_runners(game, Outcome.TRIPLE, batter)

        assert runs == 2
        assert game.bases == [None, None, batter.id]

    def test_runs_go_to_home_team_in_bottom_half(self, game):
        game.top = False
        batter = [p for p in game.home.players if not p.pitches][0]

        advance_runners(game, Outcome.HOME_RUN, batter)

        assert game.score_home == 1
        assert game.score_away == 0


class TestReachOnError:
    def test_bases_loaded_error_forces_run_without_rbi(self, game):
        hitters = load_bases(game, FIRST, SECOND, THIRD)
        batter = hitters[5]

        runs = reach_on_error(game, batter, ScriptedRandom([]))

        assert runs == 1
        assert game.bases == [batter.id, hitters[0].id, hitters[1].id]
        assert game.line(batter).rbi == 0
        assert game.line(hitters[2]).runs == 1

    def test_unforced_runner_on_second_may_take_third(self, game):
        hitters = load_bases(game, SECOND)
        batter = hitters[5]

        reach_on_error(game, batter, ScriptedRandom([0.0]))

        assert game.bases == [batter.id, None, hitters[0].id]

    def test_unforced_runner_on_second_may_hold(self, game):
        hitters = load_bases(game, SECOND)
        batter = hitters[5]

        reach_on_error(game, batter, ScriptedRandom([0.99]))

        assert game.bases == [batter.id, hitters[0].id, None]

    def test_runner_on_second_holds_when_third_is_taken(self, game):
        hitters = load_bases(game, SECOND, THIRD)
        batter = hitters[5]

        runs = reach_on_error(game, batter, ScriptedRandom([0.0]))

        assert runs == 0
        assert game.bases == [batter.id, hitters[0].id, hitters[1].id]


class TestBatterAlreadyOnBase:
    def test_walk_moves_batter_off_their_old_base(self, game):
        hitters = load_bases(game, FIRST, SECOND)
        batter = hitters[1]

        runs = advance_runners(game, Outcome.WALK, batter)

        assert runs == 0
        assert game.bases == [batter.id, hitters[0].id, None]

    def test_home_run_scores_batter_once(self, game):
        hitters = load_bases(game, FIRST, THIRD)
        batter = hitters[1]

        runs = advance_runners(game, Outcome.HOME_RUN, batter)

        assert runs == 2
        assert game.line(batter).runs == 1
        assert game.bases == [None, None, None]

    def test_error_moves_batter_off_their_old_base(self, game):
        hitters = load_bases(game, SECOND)
        batter = hitters[0]

        reach_on_error(game, batter, ScriptedRandom([0.0]))

        assert game.bases == [batter.id, None, None]
