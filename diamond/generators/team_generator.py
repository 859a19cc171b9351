"""
Team Generator - Creates a fictional league of teams with full rosters
"""
import random
from typing import Optional
from diamond.models.team import Team
from diamond.database import session_scope
from diamond.generators.player_generator import PlayerGenerator


# Fictional league clubs
LEAGUE_TEAMS = [
    {
        "name": "Harbor Hawks",
        "city": "Bayport",
        "stadium": "Lighthouse Field",
        "colors": ["#0B3D91", "#F2A900", "#FFFFFF"],
    },
    {
        "name": "Canyon Comets",
        "city": "Red Mesa",
        "stadium": "Sandstone Park",
        "colors": ["#B22222", "#FFD700", "#1C1C1C"],
    },
    {
        "name": "Timber Wolves",
        "city": "Pine Ridge",
        "stadium": "Evergreen Grounds",
        "colors": ["#1B5E20", "#8D6E63", "#F5F5F5"],
    },
    {
        "name": "River Kings",
        "city": "Delta City",
        "stadium": "Riverside Yard",
        "colors": ["#4A148C", "#FFC107", "#FFFFFF"],
    },
    {
        "name": "Summit Goats",
        "city": "High Peak",
        "stadium": "Alpine Diamond",
        "colors": ["#37474F", "#90CAF9", "#FFFFFF"],
    },
    {
        "name": "Prairie Dogs",
        "city": "Wheatfield",
        "stadium": "Golden Acres Stadium",
        "colors": ["#E65100", "#FFF3E0", "#3E2723"],
    },
    {
        "name": "Neon Knights",
        "city": "Metro Bay",
        "stadium": "Circuit Park",
        "colors": ["#00E5FF", "#D500F9", "#000000"],
    },
    {
        "name": "Coastline Crabs",
        "city": "Saltwater",
        "stadium": "Tidepool Field",
        "colors": ["#D84315", "#0277BD", "#FFF8E1"],
    },
]


class TeamGenerator:
    """Generates league teams with generated rosters"""

    @classmethod
    def create_teams(cls, count: int = len(LEAGUE_TEAMS), rng: Optional[random.Random] = None) -> list[Team]:
        """
        Create up to eight league teams.

        Args:
            count: Number of teams (1-8)
            rng: Random source for the rosters

        Returns:
            List of Team objects (not yet saved to DB)
        """
        rng = rng or random.Random()
        teams = []
        for team_data in LEAGUE_TEAMS[:count]:
            primary, secondary, accent = team_data["colors"]
            team = Team(
                name=team_data["name"],
                city=team_data["city"],
                stadium=team_data["stadium"],
                home_advantage=rng.randint(0, 3),
                primary_color=primary,
                secondary_color=secondary,
                accent_color=accent,
                players=PlayerGenerator.generate_roster(rng=rng),
            )
            teams.append(team)
        return teams

    @classmethod
    def save_teams_to_db(cls, teams: list[Team], factory=None) -> list[Team]:
        """Save teams to database and return them, still loaded"""
        with session_scope(factory) as session:
            # Keep rosters readable after the session closes
            session.expire_on_commit = False
            session.add_all(teams)
        return teams
