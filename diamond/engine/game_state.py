"""
Game state for a single simulated contest
"""
import enum
from dataclasses import dataclass, field
from typing import Optional

from diamond.models.player import Player, new_id
from diamond.models.team import Team
from diamond.engine.box_score import BoxScore, BoxScoreLine

REGULATION_INNINGS = 9
DEFAULT_INNING_CAP = 14


class GamePhase(enum.Enum):
    AWAITING_PLAY = "awaiting_play"
    HALF_INNING_BREAK = "half_inning_break"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """
    Mutable state of one game. Bases hold player ids of runners from the
    batting team; the Player records themselves stay in the rosters.
    """
    home: Team
    away: Team
    pitcher_home: Player
    pitcher_away: Player
    id: str = field(default_factory=new_id)
    inning: int = 1
    top: bool = True
    outs: int = 0
    score_home: int = 0
    score_away: int = 0
    bases: list = field(default_factory=lambda: [None, None, None])
    lineup_cursor: dict = field(default_factory=dict)  # team_id -> next lineup index
    box: BoxScore = field(default_factory=BoxScore)
    inning_cap: int = DEFAULT_INNING_CAP
    plays: int = 0
    half_inning_over: bool = False
    finalized: bool = False
    roster: dict = field(default_factory=dict)        # player_id -> Player
    roster_team: dict = field(default_factory=dict)   # player_id -> team_id

    def __post_init__(self):
        for team in (self.away, self.home):
            self.lineup_cursor.setdefault(team.id, 0)
            self.box.team(team.id)
            for player in team.players:
                self.roster[player.id] = player
                self.roster_team[player.id] = team.id

    @property
    def offense(self) -> Team:
        return self.away if self.top else self.home

    @property
    def defense(self) -> Team:
        return self.home if self.top else self.away

    @property
    def defending_pitcher(self) -> Player:
        return self.pitcher_home if self.top else self.pitcher_away

    @property
    def half(self) -> str:
        return "top" if self.top else "bottom"

    @property
    def is_tied(self) -> bool:
        return self.score_home == self.score_away

    @property
    def is_complete(self) -> bool:
        """
        Regulation is over and a bottom half just finished with the score
        unequal, or the extra-inning cap has been passed.
        """
        if self.inning > self.inning_cap:
            return True
        return self.top and self.inning > REGULATION_INNINGS and not self.is_tied

    @property
    def phase(self) -> GamePhase:
        if self.is_complete:
            return GamePhase.GAME_OVER
        if self.half_inning_over:
            return GamePhase.HALF_INNING_BREAK
        return GamePhase.AWAITING_PLAY

    @property
    def winner_id(self) -> Optional[str]:
        if self.score_home > self.score_away:
            return self.home.id
        if self.score_away > self.score_home:
            return self.away.id
        return None

    def runner(self, base: int) -> Optional[Player]:
        runner_id = self.bases[base]
        return self.roster.get(runner_id) if runner_id else None

    def clear_runner(self, player_id: str) -> None:
        """Take a player off the bases, e.g. when their turn to bat comes round again"""
        self.bases[:] = [None if b == player_id else b for b in self.bases]

    def line(self, player: Player) -> BoxScoreLine:
        return self.box.line(player, self.roster_team.get(player.id))

    def add_runs(self, runs: int) -> None:
        if runs <= 0:
            return
        if self.top:
            self.score_away += runs
        else:
            self.score_home += runs
        self.box.team(self.offense.id).runs += runs

    def record_out(self, count: int = 1) -> None:
        self.outs += count

    def end_half_inning_if_needed(self) -> bool:
        """Three outs: reset outs and bases, flip sides, bump inning on top"""
        if self.outs < 3:
            return False
        self.outs = 0
        self.bases = [None, None, None]
        self.top = not self.top
        if self.top:
            self.inning += 1
        self.half_inning_over = True
        return True

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "home_id": self.home.id,
            "away_id": self.away.id,
            "inning": self.inning,
            "half": self.half,
            "outs": self.outs,
            "score_home": self.score_home,
            "score_away": self.score_away,
            "bases": list(self.bases),
            "phase": self.phase.value,
            "plays": self.plays,
            "winner_id": self.winner_id if self.is_complete else None,
        }
