"""
Season Engine - Handles fixtures, standings and league leaders
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from itertools import combinations
from typing import Iterable, Optional

from diamond.config import settings
from diamond.models.player import new_id
from diamond.models.team import Team
from diamond.engine.box_score import BoxScoreLine, merge_player_stats
from diamond.engine.errors import GameSetupError, SeasonSetupError
from diamond.engine.game_engine import GameEngine
from diamond.engine.game_state import GameState

logger = logging.getLogger(__name__)

LEADERS_LIMIT = 8
MIN_AT_BATS = 10
MIN_BATTERS_FACED = 10


@dataclass
class Fixture:
    """A scheduled game in a season"""
    home_id: str
    away_id: str
    sequence: int
    id: str = field(default_factory=new_id)
    played: bool = False
    skipped: bool = False  # Marked played without a game (team missing or unfit)
    score_home: int = 0
    score_away: int = 0

    @property
    def winner_id(self) -> Optional[str]:
        if not self.played or self.skipped:
            return None
        # Games still level at the inning cap go to the visitors
        return self.home_id if self.score_home > self.score_away else self.away_id


@dataclass
class TeamRecord:
    wins: int = 0
    losses: int = 0
    runs_scored: int = 0
    runs_allowed: int = 0

    @property
    def decisions(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        if self.decisions == 0:
            return 0.0
        return self.wins / self.decisions

    @property
    def run_differential(self) -> int:
        return self.runs_scored - self.runs_allowed


@dataclass
class Season:
    """A league season: schedule, cursor, team records and aggregate player stats"""
    name: str
    team_ids: list
    games_per_team: int = settings.DEFAULT_GAMES_PER_TEAM
    id: str = field(default_factory=new_id)
    schedule: list = field(default_factory=list)      # [Fixture]
    cursor: int = 0
    records: dict = field(default_factory=dict)       # team_id -> TeamRecord
    player_stats: dict = field(default_factory=dict)  # player_id -> BoxScoreLine
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def ensure_records(self) -> None:
        for team_id in self.team_ids:
            self.records.setdefault(team_id, TeamRecord())

    @property
    def games_played(self) -> int:
        return sum(1 for f in self.schedule if f.played and not f.skipped)

    @property
    def games_remaining(self) -> int:
        return sum(1 for f in self.schedule if not f.played)

    @property
    def is_complete(self) -> bool:
        return self.games_remaining == 0


@dataclass
class Standing:
    """Team standing in league table"""
    position: int
    team_id: str
    team_name: str
    wins: int
    losses: int
    win_pct: float
    runs_scored: int
    runs_allowed: int
    run_differential: int


@dataclass
class LeaderEntry:
    player_id: str
    line: BoxScoreLine


@dataclass
class Leaders:
    batting: list = field(default_factory=list)   # [LeaderEntry]
    pitching: list = field(default_factory=list)  # [LeaderEntry]


def generate_schedule(team_ids: list, games_per_team: int, rng: random.Random) -> list[Fixture]:
    """
    Build fixtures from every pairing of teams. The pair list is reshuffled
    each pass and home/away is a coin flip, until there are
    floor(teams * games_per_team / 2) games. Pairs come up evenly, but this is
    not a balanced round robin.
    """
    pairs = list(combinations(team_ids, 2))
    target = max(1, len(team_ids) * games_per_team // 2)
    fixtures = []

    while len(fixtures) < target:
        shuffled = pairs[:]
        rng.shuffle(shuffled)
        for a, b in shuffled:
            home_first = rng.random() < 0.5
            fixtures.append(Fixture(
                home_id=a if home_first else b,
                away_id=b if home_first else a,
                sequence=len(fixtures),
            ))
            if len(fixtures) >= target:
                break

    return fixtures


class SeasonEngine:
    """
    Manages season progression: schedule, playing fixtures through the game
    engine, standings and leaders. Teams are supplied by the caller; a fixture
    whose team is no longer available is marked played without a result.
    """

    def __init__(
        self,
        season: Season,
        teams: Iterable[Team],
        rng: Optional[random.Random] = None,
        game_engine: Optional[GameEngine] = None,
    ):
        self.season = season
        self.teams = {t.id: t for t in teams}
        self.rng = rng or random.Random(settings.SIM_SEED)
        self._game_engine = game_engine or GameEngine(self.rng)
        self.season.ensure_records()

    @staticmethod
    def create_season(
        name: str,
        team_ids: list,
        games_per_team: int = settings.DEFAULT_GAMES_PER_TEAM,
        rng: Optional[random.Random] = None,
    ) -> Season:
        """Create a season with a fresh schedule"""
        team_ids = list(dict.fromkeys(team_ids))
        if len(team_ids) < 2:
            raise SeasonSetupError(f"Season needs at least 2 teams, got {len(team_ids)}")
        if games_per_team < 1:
            raise SeasonSetupError(f"Games per team must be at least 1, got {games_per_team}")

        season = Season(name=name or "Season", team_ids=team_ids, games_per_team=games_per_team)
        season.ensure_records()
        season.schedule = generate_schedule(team_ids, games_per_team, rng or random.Random(settings.SIM_SEED))
        logger.info(
            "Season created: %s with %d teams and %d scheduled games",
            season.name, len(team_ids), len(season.schedule),
        )
        return season

    def next_unplayed_index(self) -> int:
        """Move the cursor past played fixtures; len(schedule) when finished"""
        index = self.season.cursor
        while index < len(self.season.schedule) and self.season.schedule[index].played:
            index += 1
        self.season.cursor = index
        return index

    def _skip(self, fixture: Fixture, reason: str) -> None:
        logger.warning("Skipping fixture #%d: %s", fixture.sequence, reason)
        fixture.played = True
        fixture.skipped = True

    def simulate_fixture(self, fixture: Fixture) -> Optional[GameState]:
        """Play one fixture to completion and fold it into the season"""
        home = self.teams.get(fixture.home_id)
        away = self.teams.get(fixture.away_id)
        if home is None or away is None:
            self._skip(fixture, "team no longer exists")
            return None

        try:
            game = self._game_engine.start_game(home, away)
        except GameSetupError as e:
            self._skip(fixture, str(e))
            return None

        self._game_engine.sim_full_game(game)

        fixture.played = True
        fixture.score_home = game.score_home
        fixture.score_away = game.score_away

        self._update_records(fixture)
        merge_player_stats(self.season.player_stats, game.box)
        return game

    def _update_records(self, fixture: Fixture) -> None:
        records = self.season.records
        home = records.setdefault(fixture.home_id, TeamRecord())
        away = records.setdefault(fixture.away_id, TeamRecord())

        home.runs_scored += fixture.score_home
        home.runs_allowed += fixture.score_away
        away.runs_scored += fixture.score_away
        away.runs_allowed += fixture.score_home

        if fixture.winner_id == fixture.home_id:
            home.wins += 1
            away.losses += 1
        else:
            away.wins += 1
            home.losses += 1

    def play_games(self, count: int) -> int:
        """Play up to `count` unplayed fixtures in order. Returns games actually played."""
        played = 0
        while played < count:
            index = self.next_unplayed_index()
            if index >= len(self.season.schedule):
                break

            fixture = self.season.schedule[index]
            game = self.simulate_fixture(fixture)
            self.season.cursor = index + 1
            if game is None:
                continue

            self.season.updated_at = datetime.utcnow()
            played += 1

        if played:
            logger.info("Season %s: played %d game%s", self.season.name, played, "" if played == 1 else "s")
        else:
            logger.info("Season %s is finished", self.season.name)
        return played

    def play_remaining(self) -> int:
        return self.play_games(len(self.season.schedule))

    def get_standings(self) -> list[Standing]:
        """Standings by win pct, then run differential, then runs scored"""
        ranked = sorted(
            self.season.records.items(),
            key=lambda item: (item[1].win_pct, item[1].run_differential, item[1].runs_scored),
            reverse=True,
        )

        standings = []
        for position, (team_id, record) in enumerate(ranked, 1):
            team = self.teams.get(team_id)
            standings.append(Standing(
                position=position,
                team_id=team_id,
                team_name=team.display_name if team else "Unknown team",
                wins=record.wins,
                losses=record.losses,
                win_pct=record.win_pct,
                runs_scored=record.runs_scored,
                runs_allowed=record.runs_allowed,
                run_differential=record.run_differential,
            ))
        return standings

    def get_leaders(self, limit: int = LEADERS_LIMIT) -> Leaders:
        """
        Batting leaders (10+ AB) by HR, RBI, AVG. Pitching leaders (10+ BF) by
        ERA, then strikeouts.
        """
        stats = self.season.player_stats.items()

        batting = sorted(
            (LeaderEntry(pid, line) for pid, line in stats if line.at_bats >= MIN_AT_BATS),
            key=lambda e: (e.line.home_runs, e.line.rbi, e.line.batting_average),
            reverse=True,
        )
        pitching = sorted(
            (LeaderEntry(pid, line) for pid, line in stats if line.batters_faced >= MIN_BATTERS_FACED),
            key=lambda e: (e.line.era, -e.line.strikeouts_allowed),
        )
        return Leaders(batting=batting[:limit], pitching=pitching[:limit])
