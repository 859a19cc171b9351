"""
Tests for weighted selection and the plate appearance outcome tables.
"""
import random
from collections import Counter

import pytest

from diamond.engine.outcomes import (
    Outcome, OutcomeResolver, contact_rating, defense_factor, rating, team_defense_quality,
)
from diamond.engine.weighted import clamp01, roll, weighted_choice
from diamond.models.player import Player
from diamond.models.team import Team


class FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value

    def getrandbits(self, k):
        return super().getrandbits(k)


class TestWeightedChoice:
    def test_first_item_reaching_the_draw_wins(self):
        items = [("a", 1.0), ("b", 1.0), ("c", 2.0)]

        assert weighted_choice(items, FixedRandom(0.0)) == "a"
        assert weighted_choice(items, FixedRandom(0.3)) == "b"
        assert weighted_choice(items, FixedRandom(0.6)) == "c"

    def test_zero_weight_items_are_never_picked(self):
        items = [("never", 0.0), ("always", 1.0)]

        assert weighted_choice(items, FixedRandom(0.0)) == "always"

    def test_negative_weights_count_as_zero(self):
        items = [("bad", -5.0), ("good", 1.0)]

        assert weighted_choice(items, FixedRandom(0.0)) == "good"

    def test_all_zero_weights_fall_back_to_last(self):
        items = [("a", 0.0), ("b", 0.0), ("c", 0.0)]

        assert weighted_choice(items, FixedRandom(0.5)) == "c"

    def test_empty_items_rejected(self):
        with pytest.raises(ValueError):
            weighted_choice([], random.Random(1))

    def test_distribution_follows_weights(self):
        rng = random.Random(2024)
        counts = Counter(weighted_choice([("x", 1.0), ("y", 3.0)], rng) for _ in range(8000))

        assert 0.70 < counts["y"] / 8000 < 0.80

    def test_roll_clamps_chance(self):
        assert roll(FixedRandom(0.999), 1.5)
        assert not roll(FixedRandom(0.0), -0.2)
        assert clamp01(2.0) == 1.0


class TestRatings:
    def test_missing_rating_is_neutral(self):
        player = Player(name="Blank")
        player.hit = None

        assert rating(player, "hit") == 0.5
        assert rating(None, "power") == 0.5

    def test_empty_team_defense_is_average(self):
        assert team_defense_quality(Team(name="Empty")) == 0.5
        assert team_defense_quality(None) == 0.5

    def test_defense_uses_best_nine_gloves(self):
        players = [Player(name=f"Glove {i}", defense=90) for i in range(9)]
        players.append(Player(name="Stone Hands", defense=0))

        assert team_defense_quality(Team(name="Gloves", players=players)) == pytest.approx(0.9)

    def test_defense_factor_range(self):
        assert defense_factor(0.0) == pytest.approx(0.85)
        assert defense_factor(1.0) == pytest.approx(1.15)

    def test_contact_stays_in_unit_range(self):
        for hit in (0.0, 0.5, 1.0):
            for pit in (0.0, 0.5, 1.0):
                assert 0.0 <= contact_rating(hit, pit) <= 1.0


class TestOutcomeWeights:
    @pytest.mark.parametrize("level", [0, 25, 50, 75, 100])
    def test_weights_never_negative(self, level):
        batter = Player(name="Batter", hit=level, power=100 - level, speed=level)
        pitcher = Player(name="Pitcher", pitching=100 - level, is_pitcher=True)
        defense = Team(name="D", players=[Player(name="Glove", defense=level)])

        weights = OutcomeResolver.calculate_weights(batter, pitcher, defense)

        for _, weight in weights.primary() + weights.batted_ball():
            assert weight >= 0.0

    def test_better_pitching_means_more_strikeouts(self):
        batter = Player(name="Batter")
        weak = OutcomeResolver.calculate_weights(batter, Player(name="Weak", pitching=10), None)
        strong = OutcomeResolver.calculate_weights(batter, Player(name="Strong", pitching=95), None)

        assert strong.strikeout > weak.strikeout
        assert strong.walk < weak.walk
        assert strong.contact < weak.contact

    def test_better_defense_means_more_outs(self):
        batter = Player(name="Batter")
        pitcher = Player(name="Pitcher", pitching=50)
        poor = Team(name="Poor", players=[Player(name="P", defense=10)])
        elite = Team(name="Elite", players=[Player(name="E", defense=95)])

        assert (
            OutcomeResolver.calculate_weights(batter, pitcher, elite).out
            > OutcomeResolver.calculate_weights(batter, pitcher, poor).out
        )

    def test_slugger_against_weak_pitcher(self):
        batter = Player(name="Slugger", hit=90, power=80, speed=70, defense=50, arm=50)
        pitcher = Player(name="Batting Practice", pitching=20, is_pitcher=True)

        weights = OutcomeResolver.calculate_weights(batter, pitcher, None)
        assert weights.contact > 0.8

        resolver = OutcomeResolver(random.Random(7))
        results = Counter(resolver.resolve(batter, pitcher, None) for _ in range(5000))
        extra_bases = results[Outcome.DOUBLE] + results[Outcome.TRIPLE] + results[Outcome.HOME_RUN]

        assert extra_bases > results[Outcome.OUT]
        assert results[Outcome.HOME_RUN] > 0

    def test_hit_outcomes(self):
        assert Outcome.SINGLE.is_hit
        assert Outcome.HOME_RUN.is_hit
        assert not Outcome.WALK.is_hit
        assert not Outcome.OUT.is_hit
