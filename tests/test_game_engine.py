"""
Pytest tests for the game loop: special plays, half innings and game completion.

Run with: pytest tests/test_game_engine.py -v
"""
import random

import pytest

from diamond.engine.baserunning import FIRST, SECOND, THIRD
from diamond.engine.errors import GameSetupError
from diamond.engine.game_engine import GameEngine, PlayKind
from diamond.engine.game_state import GamePhase
from diamond.engine.outcomes import Outcome, OutcomeResolver
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


def create_mock_player(
    name: str,
    hit: int = 60,
    power: int = 50,
    speed: int = 50,
    pitching: int = 0,
    is_pitcher: bool = False,
    is_star: bool = False,
) -> Player:
    """Create a mock player for testing"""
    return Player(
        name=name,
        position=Position.PITCHER if is_pitcher else Position.DESIGNATED_HITTER,
        is_pitcher=is_pitcher,
        is_star=is_star,
        hit=hit,
        power=power,
        speed=speed,
        defense=60,
        arm=60,
        pitching=pitching,
    )


def create_test_team(name: str, skill_level: int = 60) -> Team:
    """Nine position players followed by an ace and a reliever"""
    players = [create_mock_player(f"{name} Batter {i}", hit=skill_level, power=skill_level) for i in range(1, 10)]
    players.append(create_mock_player(f"{name} Ace", hit=20, pitching=skill_level + 15, is_pitcher=True))
    players.append(create_mock_player(f"{name} Reliever", hit=20, pitching=skill_level, is_pitcher=True))
    for index, player in enumerate(players):
        player.lineup_order = index
    return Team(name=name, city="Test City", players=players)


@pytest.fixture
def teams():
    return create_test_team("Home"), create_test_team("Away")


def strikeout_draw(batter, pitcher, team) -> float:
    """A random() value that lands the first draw on STRIKEOUT"""
    w = OutcomeResolver.calculate_weights(batter, pitcher, team)
    return (w.walk + w.strikeout / 2) / (w.walk + w.strikeout + w.in_play)


class TestGameSetup:
    def test_picks_best_flagged_pitcher(self, teams):
        home, away = teams
        game = GameEngine(random.Random(1)).start_game(home, away)

        assert game.pitcher_home.name == "Home Ace"
        assert game.pitcher_away.name == "Away Ace"
        assert game.phase == GamePhase.AWAITING_PLAY
        assert (game.inning, game.top, game.outs) == (1, True, 0)

    def test_pitcher_falls_back_to_best_pit_rating(self):
        players = [
            create_mock_player("Lefty", pitching=30),
            create_mock_player("Righty", pitching=55),
            create_mock_player("Other", pitching=55),
        ]
        team = Team(name="No Staff", players=players)

        assert GameEngine.pick_pitcher(team).name == "Righty"

    def test_lineup_skips_pitchers(self, teams):
        home, _ = teams
        lineup = GameEngine.build_lineup(home)

        assert len(lineup) == 9
        assert not any(p.pitches for p in lineup)

    def test_all_pitcher_roster_bats_everyone(self):
        team = Team(name="Arms", players=[
            create_mock_player(f"Arm {i}", pitching=70, is_pitcher=True) for i in range(3)
        ])

        assert len(GameEngine.build_lineup(team)) == 3

    def test_rejects_tiny_roster(self, teams):
        home, _ = teams
        tiny = Team(name="Tiny", players=[create_mock_player("Solo")])

        with pytest.raises(GameSetupError) as exc:
            GameEngine(random.Random(1)).start_game(home, tiny)
        assert exc.value.errors

    def test_rejects_same_team(self, teams):
        home, _ = teams
        with pytest.raises(GameSetupError):
            GameEngine(random.Random(1)).start_game(home, home)

    def test_rejects_missing_team(self, teams):
        home, _ = teams
        with pytest.raises(GameSetupError):
            GameEngine(random.Random(1)).start_game(home, None)


class TestLineupRotation:
    def test_cursor_wraps_per_team(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(1))
        game = engine.start_game(home, away)

        names = [engine.next_batter(game).name for _ in range(10)]

        assert names[0] == "Away Batter 1"
        assert names[8] == "Away Batter 9"
        assert names[9] == "Away Batter 1"
        assert game.lineup_cursor[home.id] == 0


class TestSteals:
    def test_successful_steal_of_second(self, teams):
        home, away = teams
        engine = GameEngine(ScriptedRandom([0.0, 0.0]))
        game = engine.start_game(home, away)
        runner = away.players[0]
        game.bases[FIRST] = runner.id

        result = engine.next_play(game)

        assert result.kind == PlayKind.STOLEN_BASE
        assert game.bases == [None, runner.id, None]
        assert game.line(runner).stolen_bases == 1
        assert game.outs == 0
        assert result.highlight.player_id == runner.id

    def test_caught_stealing_records_out(self, teams):
        home, away = teams
        engine = GameEngine(ScriptedRandom([0.0, 0.999]))
        game = engine.start_game(home, away)
        runner = away.players[0]
        game.bases[FIRST] = runner.id

        result = engine.next_play(game)

        assert result.kind == PlayKind.CAUGHT_STEALING
        assert game.bases == [None, None, None]
        assert game.outs == 1
        assert game.line(runner).caught_stealing == 1
        assert game.line(game.pitcher_home).outs_recorded == 1

    def test_lead_runner_on_second_steals_third(self, teams):
        home, away = teams
        engine = GameEngine(ScriptedRandom([0.0, 0.0]))
        game = engine.start_game(home, away)
        trail, lead = away.players[0], away.players[1]
        game.bases[FIRST] = trail.id
        game.bases[SECOND] = lead.id

        result = engine.attempt_steal(game)

        assert result.runner_id == lead.id
        assert game.bases == [trail.id, None, lead.id]

    def test_no_steal_with_two_outs(self, teams):
        home, away = teams
        engine = GameEngine(ScriptedRandom([0.0, 0.0]))
        game = engine.start_game(home, away)
        game.bases[FIRST] = away.players[0].id
        game.outs = 2

        assert engine.attempt_steal(game) is None

    def test_no_steal_when_next_bases_are_full(self, teams):
        home, away = teams
        engine = GameEngine(ScriptedRandom([0.0, 0.0]))
        game = engine.start_game(home, away)
        game.bases = [away.players[0].id, away.players[1].id, away.players[2].id]

        assert engine.attempt_steal(game) is None
        assert len(engine.rng.values) == 2


class TestBallsInPlay:
    def test_strikeout(self, teams):
        home, away = teams
        draw = strikeout_draw(away.players[0], home.players[9], home)
        engine = GameEngine(ScriptedRandom([draw, 0.99]))
        game = engine.start_game(home, away)

        result = engine.next_play(game)

        assert result.outcome == Outcome.STRIKEOUT
        assert game.outs == 1
        batter_line = game.line(away.players[0])
        assert (batter_line.at_bats, batter_line.strikeouts) == (1, 1)
        pitcher_line = game.line(game.pitcher_home)
        assert pitcher_line.strikeouts_allowed == 1
        assert pitcher_line.batters_faced == 1

    def test_double_play_removes_runner_and_adds_two_outs(self, teams):
        home, away = teams
        # no steal, ball in play, out, double play
        engine = GameEngine(ScriptedRandom([0.999, 0.999, 0.0, 0.0]))
        game = engine.start_game(home, away)
        runner = away.players[8]
        game.bases[FIRST] = runner.id

        result = engine.next_play(game)

        assert result.kind == PlayKind.DOUBLE_PLAY
        assert result.outs_recorded == 2
        assert game.outs == 2
        assert game.bases[FIRST] is None
        assert game.line(game.pitcher_home).outs_recorded == 2

    def test_double_play_ending_the_inning_resets_state(self, teams):
        home, away = teams
        engine = GameEngine(ScriptedRandom([0.999, 0.999, 0.0, 0.0]))
        game = engine.start_game(home, away)
        game.outs = 1
        game.bases[FIRST] = away.players[8].id
        game.bases[THIRD] = away.players[7].id

        result = engine.next_play(game)

        assert result.half_inning_over
        assert game.outs == 0
        assert game.bases == [None, None, None]
        assert game.top is False
        assert game.inning == 1

    def test_error_puts_batter_on_first(self, teams):
        home, away = teams
        # ball in play, out, error
        engine = GameEngine(ScriptedRandom([0.999, 0.0, 0.0]))
        game = engine.start_game(home, away)
        batter = away.players[0]

        result = engine.next_play(game)

        assert result.kind == PlayKind.ERROR
        assert game.outs == 0
        assert game.bases[FIRST] == batter.id
        assert game.box.team(home.id).errors == 1
        assert game.line(batter).hits == 0
        assert game.line(batter).at_bats == 1

    def test_clean_out(self, teams):
        home, away = teams
        # ball in play, out, no error
        engine = GameEngine(ScriptedRandom([0.999, 0.0, 0.999]))
        game = engine.start_game(home, away)

        result = engine.next_play(game)

        assert result.kind == PlayKind.PLATE_APPEARANCE
        assert result.outcome == Outcome.OUT
        assert game.outs == 1
        assert game.line(game.pitcher_home).outs_recorded == 1


class TestGameFlow:
    def test_outs_stay_below_three_after_every_play(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(42))
        game = engine.start_game(home, away)

        while not game.is_complete:
            engine.next_play(game)
            assert game.outs in (0, 1, 2)
            assert all(b is None or b in game.roster for b in game.bases)

    def test_half_inning_ends_with_side_change(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(3))
        game = engine.start_game(home, away)

        results = engine.sim_half_inning(game)

        assert results[-1].half_inning_over
        assert not any(r.half_inning_over for r in results[:-1])
        assert (game.inning, game.top, game.outs) == (1, False, 0)
        assert game.bases == [None, None, None]
        assert sum(r.outs_recorded for r in results) >= 3

    def test_full_game_completes(self, teams):
        home, away = teams
        for seed in range(10):
            engine = GameEngine(random.Random(seed))
            game = engine.start_game(home, away)

            engine.sim_full_game(game)

            assert game.is_complete
            assert game.phase == GamePhase.GAME_OVER
            assert game.inning >= 10
            assert game.inning <= engine.inning_cap + 1
            if game.inning <= engine.inning_cap:
                assert game.score_home != game.score_away

    def test_inning_cap_stops_game(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(5), inning_cap=1)
        game = engine.start_game(home, away)

        engine.sim_full_game(game)

        assert (game.inning, game.top) == (2, True)

    def test_score_matches_team_lines_and_runs(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(11))
        game = engine.start_game(home, away)
        results = engine.sim_full_game(game)

        assert game.box.team(home.id).runs == game.score_home
        assert game.box.team(away.id).runs == game.score_away
        assert sum(r.runs for r in results) == game.score_home + game.score_away
        away_runs = sum(game.box.players[p.id].runs for p in away.players if p.id in game.box.players)
        assert away_runs == game.score_away

    def test_hits_match_team_line(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(12))
        game = engine.start_game(home, away)
        engine.sim_full_game(game)

        for team in (home, away):
            hits = sum(game.box.players[p.id].hits for p in team.players if p.id in game.box.players)
            assert hits == game.box.team(team.id).hits

    def test_finalize_charges_starters_once(self, teams):
        home, away = teams
        engine = GameEngine(random.Random(13))
        game = engine.start_game(home, away)
        engine.sim_full_game(game)
        engine.finalize_game(game)

        assert game.line(game.pitcher_home).earned_runs == game.score_away
        assert game.line(game.pitcher_away).earned_runs == game.score_home

    def test_same_seed_same_game(self, teams):
        home, away = teams
        scores = []
        for _ in range(2):
            engine = GameEngine(random.Random(99))
            game = engine.start_game(home, away)
            engine.sim_full_game(game)
            scores.append((game.score_home, game.score_away, game.inning))

        assert scores[0] == scores[1]


class TestShortLineups:
    """Lineups short enough that a batter's turn comes round while they are on base"""

    @staticmethod
    def short_team(name: str, batters: int) -> Team:
        players = [create_mock_player(f"{name} Batter {i}", hit=80, power=70, speed=60) for i in range(batters)]
        players.append(create_mock_player(f"{name} Pitcher", pitching=20, is_pitcher=True))
        return Team(name=name, players=players)

    @pytest.mark.parametrize("batters", [1, 2, 3])
    def test_runner_never_holds_two_bases(self, batters):
        home, away = self.short_team("Home", batters), self.short_team("Away", batters)
        for seed in range(15):
            engine = GameEngine(random.Random(seed))
            game = engine.start_game(home, away)

            while not game.is_complete:
                engine.next_play(game)
                occupied = [b for b in game.bases if b is not None]
                assert len(occupied) == len(set(occupied))

    def test_batter_leaves_base_to_hit(self):
        home, away = self.short_team("Home", 1), self.short_team("Away", 1)
        engine = GameEngine(random.Random(1))
        game = engine.start_game(home, away)
        batter = away.players[0]
        game.bases[SECOND] = batter.id

        assert engine.next_batter(game) is batter
        assert batter.id not in game.bases

    def test_runs_match_score_with_one_batter(self):
        home, away = self.short_team("Home", 1), self.short_team("Away", 1)
        engine = GameEngine(random.Random(8))
        game = engine.start_game(home, away)
        engine.sim_full_game(game)

        assert game.line(away.players[0]).runs == game.score_away
        assert game.line(home.players[0]).runs == game.score_home
