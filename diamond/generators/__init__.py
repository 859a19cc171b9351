from diamond.generators.player_generator import PlayerGenerator
from diamond.generators.team_generator import TeamGenerator

__all__ = ["PlayerGenerator", "TeamGenerator"]
