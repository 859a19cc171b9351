from diamond.models.player import Player, Position
from diamond.models.team import Team
from diamond.models.season import SavedSeason

__all__ = [
    "Player",
    "Position",
    "Team",
    "SavedSeason",
]
