"""
Box Score Aggregator - per-player and per-team counting stats
"""
from dataclasses import dataclass, field, fields
from typing import Optional

from diamond.models.player import Player

# Floor on innings pitched so a pitcher with no outs still has an ERA
MIN_INNINGS = 0.1

COUNTING_STATS = (
    "at_bats", "hits", "doubles", "triples", "home_runs", "walks", "strikeouts",
    "runs", "rbi", "stolen_bases", "caught_stealing",
    "batters_faced", "outs_recorded", "hits_allowed", "walks_allowed",
    "strikeouts_allowed", "earned_runs",
)


@dataclass
class BoxScoreLine:
    """Counting stats for one player in one game (or summed over a season)"""
    name: str = ""
    team_id: Optional[str] = None

    # Batting
    at_bats: int = 0
    hits: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    walks: int = 0
    strikeouts: int = 0
    runs: int = 0
    rbi: int = 0
    stolen_bases: int = 0
    caught_stealing: int = 0

    # Pitching
    batters_faced: int = 0
    outs_recorded: int = 0
    hits_allowed: int = 0
    walks_allowed: int = 0
    strikeouts_allowed: int = 0
    earned_runs: int = 0

    @property
    def batting_average(self) -> float:
        if self.at_bats == 0:
            return 0.0
        return self.hits / self.at_bats

    @property
    def innings_pitched(self) -> float:
        return self.outs_recorded / 3

    @property
    def era(self) -> float:
        return self.earned_runs * 9 / max(MIN_INNINGS, self.innings_pitched)

    @property
    def innings_display(self) -> str:
        return f"{self.outs_recorded // 3}.{self.outs_recorded % 3}"

    def merge(self, other: "BoxScoreLine") -> None:
        """Add another line's counting stats into this one"""
        for stat in COUNTING_STATS:
            setattr(self, stat, getattr(self, stat) + getattr(other, stat))
        if not self.name:
            self.name = other.name
        if self.team_id is None:
            self.team_id = other.team_id

    def copy(self) -> "BoxScoreLine":
        return BoxScoreLine(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass
class TeamLine:
    """Runs, hits and errors for one team in one game"""
    runs: int = 0
    hits: int = 0
    errors: int = 0


@dataclass
class BoxScore:
    """Game box score. Lines are created on first reference and never reset."""
    players: dict = field(default_factory=dict)  # player_id -> BoxScoreLine
    teams: dict = field(default_factory=dict)    # team_id -> TeamLine

    def line(self, player: Player, team_id: Optional[str] = None) -> BoxScoreLine:
        entry = self.players.get(player.id)
        if entry is None:
            entry = BoxScoreLine(name=player.name, team_id=team_id or player.team_id)
            self.players[player.id] = entry
        return entry

    def team(self, team_id: str) -> TeamLine:
        return self.teams.setdefault(team_id, TeamLine())


def merge_player_stats(aggregate: dict, box: BoxScore) -> dict:
    """Fold a finished game's player lines into a season-level aggregate"""
    for player_id, line in box.players.items():
        season_line = aggregate.get(player_id)
        if season_line is None:
            aggregate[player_id] = line.copy()
        else:
            season_line.merge(line)
    return aggregate
