"""
JSON exchange formats for seasons and teams.

Field aliases follow the exported file layout (camelCase keys, short stat
names) so files written by earlier versions of the league still import.
"""
import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from diamond.models.player import Player, Position, new_id
from diamond.models.team import Team
from diamond.engine.box_score import BoxScoreLine
from diamond.engine.errors import SeasonImportError, TeamImportError
from diamond.engine.season_engine import Fixture, Season, TeamRecord

TEAM_EXPORT_TYPE = "bb_team"
TEAM_EXPORT_VERSION = 1


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ----- season -----

class StatLinePayload(_Payload):
    name: str = ""
    team_id: Optional[str] = Field(None, alias="teamId")
    at_bats: int = Field(0, alias="AB", ge=0)
    hits: int = Field(0, alias="H", ge=0)
    doubles: int = Field(0, alias="_2B", ge=0)
    triples: int = Field(0, alias="_3B", ge=0)
    home_runs: int = Field(0, alias="HR", ge=0)
    walks: int = Field(0, alias="BB", ge=0)
    strikeouts: int = Field(0, alias="K", ge=0)
    runs: int = Field(0, alias="R", ge=0)
    rbi: int = Field(0, alias="RBI", ge=0)
    stolen_bases: int = Field(0, alias="SB", ge=0)
    caught_stealing: int = Field(0, alias="CS", ge=0)
    batters_faced: int = Field(0, alias="BF", ge=0)
    outs_recorded: int = Field(0, alias="P_OUTS", ge=0)
    hits_allowed: int = Field(0, alias="P_H", ge=0)
    walks_allowed: int = Field(0, alias="P_BB", ge=0)
    strikeouts_allowed: int = Field(0, alias="P_K", ge=0)
    earned_runs: int = Field(0, alias="ER", ge=0)


class FixturePayload(_Payload):
    id: str = Field(default_factory=new_id)
    home_id: str = Field(alias="homeId")
    away_id: str = Field(alias="awayId")
    played: bool = False
    skipped: bool = False
    score_home: int = Field(0, alias="scoreHome", ge=0)
    score_away: int = Field(0, alias="scoreAway", ge=0)
    sequence: int = Field(0, alias="dateIdx", ge=0)


class RecordPayload(_Payload):
    wins: int = Field(0, alias="W", ge=0)
    losses: int = Field(0, alias="L", ge=0)
    runs_scored: int = Field(0, alias="RS", ge=0)
    runs_allowed: int = Field(0, alias="RA", ge=0)


class SeasonPayload(_Payload):
    id: str = Field(default_factory=new_id)
    name: str = "Season"
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=datetime.utcnow, alias="updatedAt")
    team_ids: list[str] = Field(alias="teamIds")
    games_per_team: int = Field(20, alias="gamesPerTeam", ge=1)
    schedule: list[FixturePayload]
    cursor: int = Field(0, ge=0)
    records: dict[str, RecordPayload] = Field(default_factory=dict)
    player_stats: dict[str, StatLinePayload] = Field(default_factory=dict, alias="playerStats")

    @model_validator(mode="after")
    def _check_cursor(self):
        if self.cursor > len(self.schedule):
            raise ValueError(f"cursor {self.cursor} is past the end of a {len(self.schedule)}-game schedule")
        return self


def season_to_dict(season: Season) -> dict:
    payload = SeasonPayload(
        id=season.id,
        name=season.name,
        created_at=season.created_at,
        updated_at=season.updated_at,
        team_ids=list(season.team_ids),
        games_per_team=season.games_per_team,
        schedule=[
            FixturePayload(
                id=f.id,
                home_id=f.home_id,
                away_id=f.away_id,
                played=f.played,
                skipped=f.skipped,
                score_home=f.score_home,
                score_away=f.score_away,
                sequence=f.sequence,
            )
            for f in season.schedule
        ],
        cursor=season.cursor,
        records={tid: RecordPayload(**vars(r)) for tid, r in season.records.items()},
        player_stats={pid: StatLinePayload(**vars(line)) for pid, line in season.player_stats.items()},
    )
    return payload.model_dump(mode="json", by_alias=True)


def season_from_dict(data) -> Season:
    """Build a Season from exported data; nothing is created if it is malformed"""
    if not isinstance(data, dict):
        raise SeasonImportError("That doesn't look like a season file")
    try:
        payload = SeasonPayload.model_validate(data)
    except ValidationError as e:
        raise SeasonImportError(f"That doesn't look like a season file: {e.error_count()} invalid field(s)") from e

    season = Season(
        id=payload.id,
        name=payload.name,
        team_ids=list(payload.team_ids),
        games_per_team=payload.games_per_team,
        schedule=[
            Fixture(
                id=f.id,
                home_id=f.home_id,
                away_id=f.away_id,
                sequence=f.sequence,
                played=f.played,
                skipped=f.skipped,
                score_home=f.score_home,
                score_away=f.score_away,
            )
            for f in payload.schedule
        ],
        cursor=payload.cursor,
        records={tid: TeamRecord(**r.model_dump()) for tid, r in payload.records.items()},
        player_stats={pid: BoxScoreLine(**s.model_dump()) for pid, s in payload.player_stats.items()},
        created_at=payload.created_at,
        updated_at=payload.updated_at,
    )
    season.ensure_records()
    return season


def season_to_json(season: Season) -> str:
    return json.dumps(season_to_dict(season), indent=2)


def season_from_json(text: str) -> Season:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise SeasonImportError(f"Season file is not valid JSON: {e}") from e
    return season_from_dict(data)


# ----- team -----

class PlayerPayload(_Payload):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    image: Optional[str] = Field(None, alias="img")
    position: Position = Field(Position.DESIGNATED_HITTER, alias="pos")
    is_pitcher: bool = Field(False, alias="isPitcher")
    is_star: bool = Field(False, alias="isStar")
    hit: Optional[float] = Field(None, alias="HIT")
    power: Optional[float] = Field(None, alias="PWR")
    speed: Optional[float] = Field(None, alias="SPD")
    defense: Optional[float] = Field(None, alias="DEF")
    arm: Optional[float] = Field(None, alias="ARM")
    pitching: Optional[float] = Field(None, alias="PIT")

    @field_validator("position", mode="before")
    @classmethod
    def _known_position(cls, value):
        # Unrecognised position tags import as utility players
        if isinstance(value, Position):
            return value
        known = {p.value for p in Position}
        return value if value in known else Position.UTILITY.value


class TeamPayload(_Payload):
    id: str = Field(default_factory=new_id)
    name: str = ""
    city: str = ""
    stadium: str = ""
    home_advantage: int = Field(0, alias="homeAdv")
    colors: list[str] = Field(default_factory=lambda: ["#3b82f6", "#22c55e", "#f59e0b"])
    logo: Optional[str] = None
    players: list[PlayerPayload] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class TeamExport(_Payload):
    type: str
    version: int = TEAM_EXPORT_VERSION
    team: TeamPayload


def team_to_export(team: Team) -> dict:
    payload = TeamExport(
        type=TEAM_EXPORT_TYPE,
        team=TeamPayload(
            id=team.id,
            name=team.name,
            city=team.city or "",
            stadium=team.stadium or "",
            home_advantage=team.home_advantage or 0,
            colors=team.colors,
            logo=team.logo,
            players=[
                PlayerPayload(
                    id=p.id,
                    name=p.name,
                    image=p.image,
                    position=p.position,
                    is_pitcher=p.is_pitcher,
                    is_star=p.is_star,
                    **p.ratings(),
                )
                for p in team.players
            ],
            created_at=team.created_at,
            updated_at=team.updated_at,
        ),
    )
    return payload.model_dump(mode="json", by_alias=True)


def team_from_export(data, existing_ids: set = frozenset()) -> Team:
    """
    Build a new Team from an export. The team keeps its id unless it collides
    with an existing one; players always get fresh ids.
    """
    if not isinstance(data, dict) or data.get("type") != TEAM_EXPORT_TYPE or not data.get("team"):
        raise TeamImportError("Not a team export")
    try:
        export = TeamExport.model_validate(data)
    except ValidationError as e:
        raise TeamImportError(f"Not a team export: {e.error_count()} invalid field(s)") from e

    payload = export.team
    colors = (payload.colors + ["#3b82f6", "#22c55e", "#f59e0b"])[:3]
    now = datetime.utcnow()
    players = []
    for index, p in enumerate(payload.players):
        players.append(Player(
            id=new_id(),
            name=p.name.strip(),
            image=p.image,
            position=p.position,
            is_pitcher=p.is_pitcher or p.position == Position.PITCHER,
            is_star=p.is_star,
            hit=p.hit,
            power=p.power,
            speed=p.speed,
            defense=p.defense,
            arm=p.arm,
            pitching=p.pitching if p.pitching is not None else 0,
            lineup_order=index,
        ))

    return Team(
        id=new_id() if payload.id in existing_ids else payload.id,
        name=payload.name.strip() or "Imported Team",
        city=payload.city.strip(),
        stadium=payload.stadium.strip(),
        home_advantage=payload.home_advantage,
        primary_color=colors[0],
        secondary_color=colors[1],
        accent_color=colors[2],
        logo=payload.logo,
        players=players,
        created_at=payload.created_at or now,
        updated_at=now,
    )
