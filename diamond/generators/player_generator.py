import random
from typing import Optional
from faker import Faker
from diamond.models.player import Player, Position, clamp_rating

fake = Faker('en_US')


class PlayerGenerator:
    """Generates fictional baseball players from rating presets"""

    # Rating presets: HIT, PWR, SPD, DEF, ARM, PIT
    PRESETS = {
        "custom":    {"hit": 65, "power": 50, "speed": 55, "defense": 55, "arm": 55, "pitching": 0},
        "contact":   {"hit": 82, "power": 42, "speed": 60, "defense": 55, "arm": 52, "pitching": 0},
        "slugger":   {"hit": 62, "power": 88, "speed": 45, "defense": 52, "arm": 55, "pitching": 0},
        "speedster": {"hit": 68, "power": 40, "speed": 92, "defense": 60, "arm": 52, "pitching": 0},
        "glove":     {"hit": 60, "power": 45, "speed": 58, "defense": 92, "arm": 70, "pitching": 0},
        "cannon":    {"hit": 58, "power": 52, "speed": 55, "defense": 72, "arm": 92, "pitching": 0},
        "ace":       {"hit": 30, "power": 20, "speed": 40, "defense": 60, "arm": 65, "pitching": 90},
        "reliever":  {"hit": 25, "power": 20, "speed": 45, "defense": 62, "arm": 70, "pitching": 82},
    }

    PITCHING_PRESETS = ("ace", "reliever")

    # Position player slots and the presets that suit them
    FIELD_POSITIONS = [
        (Position.CATCHER, ["glove", "cannon"]),
        (Position.FIRST_BASE, ["slugger", "contact"]),
        (Position.SECOND_BASE, ["contact", "speedster", "glove"]),
        (Position.THIRD_BASE, ["cannon", "slugger"]),
        (Position.SHORTSTOP, ["glove", "speedster"]),
        (Position.LEFT_FIELD, ["slugger", "contact"]),
        (Position.CENTER_FIELD, ["speedster", "glove"]),
        (Position.RIGHT_FIELD, ["cannon", "slugger"]),
        (Position.DESIGNATED_HITTER, ["slugger", "contact", "custom"]),
    ]

    STAR_CHANCE = 0.12

    @classmethod
    def preset(cls, name: str) -> dict:
        """Ratings for a preset; unknown names fall back to the balanced custom preset"""
        return dict(cls.PRESETS.get(name, cls.PRESETS["custom"]))

    @staticmethod
    def _jitter(ratings: dict, variance: int, rng: random.Random) -> dict:
        """Spread preset ratings; a zero rating (non-pitcher PIT) stays low"""
        jittered = {}
        for attr, value in ratings.items():
            if value == 0:
                jittered[attr] = rng.randint(0, 15)
            else:
                jittered[attr] = clamp_rating(value + rng.randint(-variance, variance))
        return jittered

    @classmethod
    def generate_player(
        cls,
        preset: str = "custom",
        position: Optional[Position] = None,
        variance: int = 8,
        rng: Optional[random.Random] = None,
    ) -> Player:
        """Generate a single player built around a preset"""
        rng = rng or random.Random()
        is_pitcher = preset in cls.PITCHING_PRESETS
        if position is None:
            position = Position.PITCHER if is_pitcher else Position.UTILITY

        ratings = cls._jitter(cls.preset(preset), variance, rng)
        # Names follow the same random source as the ratings
        fake.seed_instance(rng.getrandbits(32))
        return Player(
            name=fake.name_male(),
            position=position,
            is_pitcher=is_pitcher or position == Position.PITCHER,
            is_star=rng.random() < cls.STAR_CHANCE,
            **ratings,
        )

    @classmethod
    def generate_roster(cls, pitchers: int = 3, rng: Optional[random.Random] = None) -> list[Player]:
        """
        A full roster: one player per field position (batting order) followed
        by an ace and relievers.
        """
        rng = rng or random.Random()
        players = []
        for position, presets in cls.FIELD_POSITIONS:
            players.append(cls.generate_player(rng.choice(presets), position, rng=rng))
        for i in range(pitchers):
            players.append(cls.generate_player("ace" if i == 0 else "reliever", Position.PITCHER, rng=rng))

        for index, player in enumerate(players):
            player.lineup_order = index
        return players
