"""
Outcome Resolver - batter vs pitcher plate appearance tables
"""
import enum
import random
from dataclasses import dataclass
from typing import Optional

from diamond.models.player import Player, DEFAULT_RATING
from diamond.models.team import Team, LINEUP_SIZE
from diamond.engine.weighted import clamp01, weighted_choice


class Outcome(enum.Enum):
    WALK = "walk"
    STRIKEOUT = "strikeout"
    OUT = "out"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOME_RUN = "home_run"

    @property
    def is_hit(self) -> bool:
        return self in HITS


HITS = frozenset({Outcome.SINGLE, Outcome.DOUBLE, Outcome.TRIPLE, Outcome.HOME_RUN})

# Primary split before the ball is put in play
IN_PLAY = "in_play"


def rating(player: Optional[Player], attr: str) -> float:
    """A player rating as a 0-1 fraction; absent data is neutral"""
    value = getattr(player, attr, None) if player is not None else None
    if value is None:
        value = DEFAULT_RATING
    return clamp01(value / 100)


def team_defense_quality(team: Optional[Team]) -> float:
    """Average DEF of the nine best gloves (or the whole roster), as 0-1"""
    players = list(team.players) if team is not None else []
    if not players:
        return DEFAULT_RATING / 100
    gloves = sorted((rating(p, "defense") for p in players), reverse=True)[:LINEUP_SIZE]
    return sum(gloves) / len(gloves)


def defense_factor(quality: float) -> float:
    """0.85 for the worst defense, 1.15 for the best"""
    return 0.85 + clamp01(quality) * 0.30


def contact_rating(hit: float, pit: float) -> float:
    return clamp01(hit * (1 - pit * 0.70) + (hit - 0.50) * 0.20)


@dataclass
class OutcomeWeights:
    """Weights for both draws of a single plate appearance"""
    contact: float
    walk: float
    strikeout: float
    in_play: float
    out: float
    single: float
    double: float
    triple: float
    home_run: float

    def primary(self) -> list[tuple]:
        return [
            (Outcome.WALK, self.walk),
            (Outcome.STRIKEOUT, self.strikeout),
            (IN_PLAY, self.in_play),
        ]

    def batted_ball(self) -> list[tuple]:
        return [
            (Outcome.OUT, self.out),
            (Outcome.SINGLE, self.single),
            (Outcome.DOUBLE, self.double),
            (Outcome.TRIPLE, self.triple),
            (Outcome.HOME_RUN, self.home_run),
        ]


class OutcomeResolver:
    """
    Resolves a plate appearance with two weighted draws: walk / strikeout /
    ball in play, then the batted-ball result. Pitching pulls contact down and
    strikeouts up; power shifts hits towards extra bases; a good defense turns
    more balls in play into outs.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def calculate_weights(batter: Player, pitcher: Player, defending_team: Optional[Team]) -> OutcomeWeights:
        hit = rating(batter, "hit")
        pwr = rating(batter, "power")
        spd = rating(batter, "speed")
        pit = rating(pitcher, "pitching")
        df = defense_factor(team_defense_quality(defending_team))

        contact = contact_rating(hit, pit)

        walk = clamp01(0.05 + (1 - pit) * 0.07)        # 0.05..0.12
        strikeout = clamp01(0.10 + pit * 0.18)         # 0.10..0.28
        in_play = clamp01(1 - walk - strikeout)

        return OutcomeWeights(
            contact=contact,
            walk=walk,
            strikeout=strikeout,
            in_play=in_play,
            out=max(0.0, (1 - contact) * 1.15 * df),
            single=max(0.0, contact * (0.62 - pwr * 0.18) / df),
            double=max(0.0, contact * (0.22 + pwr * 0.08) / df),
            triple=max(0.0, contact * (0.03 + spd * 0.03) / df),
            home_run=max(0.0, contact * (0.05 + pwr * 0.22) / df),
        )

    def resolve(self, batter: Player, pitcher: Player, defending_team: Optional[Team]) -> Outcome:
        weights = self.calculate_weights(batter, pitcher, defending_team)
        primary = weighted_choice(weights.primary(), self.rng)
        if primary != IN_PLAY:
            return primary
        return weighted_choice(weights.batted_ball(), self.rng)
