"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from diamond.models.player import Position


# Player Schemas
class PlayerBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    image: Optional[str] = None
    position: Position = Position.DESIGNATED_HITTER
    is_pitcher: bool = False
    is_star: bool = False
    hit: int = 50
    power: int = 50
    speed: int = 50
    defense: int = 50
    arm: int = 50
    pitching: int = 0


class PlayerCreate(PlayerBase):
    pass


class PresetPlayerCreate(BaseModel):
    """Add a generated player built around a rating preset"""
    preset: str = "custom"
    position: Optional[Position] = None


class PlayerResponse(PlayerBase):
    id: str
    team_id: Optional[str] = None
    lineup_order: int
    overall_rating: int

    class Config:
        from_attributes = True


# Team Schemas
class TeamBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    city: str = ""
    stadium: str = ""
    home_advantage: int = 0
    primary_color: str = "#3b82f6"
    secondary_color: str = "#22c55e"
    accent_color: str = "#f59e0b"
    logo: Optional[str] = None


class TeamCreate(TeamBase):
    pass


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    city: Optional[str] = None
    stadium: Optional[str] = None
    home_advantage: Optional[int] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    logo: Optional[str] = None


class TeamResponse(TeamBase):
    id: str
    display_name: str
    overall_rating: int
    squad_size: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeamDetail(TeamResponse):
    players: list[PlayerResponse] = []


# Game Schemas
class StartGameRequest(BaseModel):
    home_team_id: str
    away_team_id: str
    seed: Optional[int] = None


class HighlightResponse(BaseModel):
    player_id: str
    player_name: str
    image: Optional[str] = None
    caption: str


class PlayResultResponse(BaseModel):
    kind: str
    outcome: Optional[str] = None
    text: str
    runs: int
    outs_recorded: int
    half_inning_over: bool
    log: list[str]
    highlight: Optional[HighlightResponse] = None


class TeamLineResponse(BaseModel):
    team_id: str
    team_name: str
    runs: int
    hits: int
    errors: int


class StatLineResponse(BaseModel):
    player_id: str
    name: str
    team_id: Optional[str] = None
    at_bats: int
    hits: int
    doubles: int
    triples: int
    home_runs: int
    walks: int
    strikeouts: int
    runs: int
    rbi: int
    stolen_bases: int
    caught_stealing: int
    batters_faced: int
    outs_recorded: int
    hits_allowed: int
    walks_allowed: int
    strikeouts_allowed: int
    earned_runs: int


class GameStateResponse(BaseModel):
    id: str
    home_team_id: str
    home_team_name: str
    away_team_id: str
    away_team_name: str
    home_pitcher: str
    away_pitcher: str
    inning: int
    half: str
    outs: int
    score_home: int
    score_away: int
    bases: list[Optional[str]]  # Runner names, first to third
    phase: str
    is_complete: bool
    winner_id: Optional[str] = None
    plays: int
    team_lines: list[TeamLineResponse]
    box_score: list[StatLineResponse]


class PlaysResponse(BaseModel):
    plays: list[PlayResultResponse]
    state: GameStateResponse


# Season Schemas
class SeasonCreate(BaseModel):
    name: str = "Season"
    team_ids: list[str] = []  # Empty means every team
    games_per_team: int = Field(20, ge=1, le=162)
    seed: Optional[int] = None


class PlayGamesRequest(BaseModel):
    count: int = Field(1, ge=1)
    seed: Optional[int] = None


class SeasonResponse(BaseModel):
    id: str
    name: str
    games_per_team: int
    team_ids: list[str]
    total_games: int
    games_played: int
    games_remaining: int
    cursor: int
    is_complete: bool
    created_at: datetime
    updated_at: datetime


class PlayGamesResponse(BaseModel):
    games_played: int
    season: SeasonResponse


class FixtureResponse(BaseModel):
    id: str
    sequence: int
    home_id: str
    away_id: str
    home_name: str
    away_name: str
    played: bool
    skipped: bool
    score_home: int
    score_away: int
    winner_id: Optional[str] = None


class StandingResponse(BaseModel):
    position: int
    team_id: str
    team_name: str
    wins: int
    losses: int
    win_pct: float
    runs_scored: int
    runs_allowed: int
    run_differential: int


class BatterLeaderboardEntry(BaseModel):
    player_id: str
    name: str
    team_id: Optional[str] = None
    at_bats: int
    hits: int
    home_runs: int
    rbi: int
    stolen_bases: int
    average: float


class PitcherLeaderboardEntry(BaseModel):
    player_id: str
    name: str
    team_id: Optional[str] = None
    batters_faced: int
    innings_pitched: str
    strikeouts: int
    walks: int
    earned_runs: int
    era: float


class LeaderboardsResponse(BaseModel):
    batting: list[BatterLeaderboardEntry]
    pitching: list[PitcherLeaderboardEntry]
