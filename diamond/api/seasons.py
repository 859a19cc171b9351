import logging
import random
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from diamond.database import get_db
from diamond.models.team import Team
from diamond.models.season import SavedSeason
from diamond.models.player import new_id
from diamond.engine.errors import SimulationError
from diamond.engine.season_engine import Season, SeasonEngine, LEADERS_LIMIT
from diamond.engine.serialization import season_to_dict, season_from_dict, season_to_json, season_from_json
from diamond.api.schemas import (
    SeasonCreate, SeasonResponse, PlayGamesRequest, PlayGamesResponse, FixtureResponse,
    StandingResponse, LeaderboardsResponse, BatterLeaderboardEntry, PitcherLeaderboardEntry,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/seasons", tags=["Seasons"])


def _get_saved(season_id: str, db: Session) -> SavedSeason:
    saved = db.get(SavedSeason, season_id)
    if not saved:
        raise HTTPException(status_code=404, detail="Season not found")
    return saved


def _load_season(season_id: str, db: Session) -> Season:
    return season_from_json(_get_saved(season_id, db).payload)


def _load_engine(season: Season, db: Session, rng: Optional[random.Random] = None) -> SeasonEngine:
    """Season engine over whichever of the season's teams still exist"""
    teams = (
        db.query(Team)
        .options(selectinload(Team.players))
        .filter(Team.id.in_(season.team_ids))
        .all()
    )
    return SeasonEngine(season, teams, rng=rng)


def _save_season(season: Season, db: Session) -> SavedSeason:
    saved = db.get(SavedSeason, season.id)
    if saved is None:
        saved = SavedSeason(id=season.id, name=season.name, created_at=season.created_at)
        db.add(saved)
    saved.name = season.name
    saved.payload = season_to_json(season)
    saved.updated_at = season.updated_at
    db.commit()
    return saved


def _season_response(season: Season) -> SeasonResponse:
    return SeasonResponse(
        id=season.id,
        name=season.name,
        games_per_team=season.games_per_team,
        team_ids=list(season.team_ids),
        total_games=len(season.schedule),
        games_played=season.games_played,
        games_remaining=season.games_remaining,
        cursor=season.cursor,
        is_complete=season.is_complete,
        created_at=season.created_at,
        updated_at=season.updated_at,
    )


@router.get("", response_model=list[SeasonResponse])
def list_seasons(db: Session = Depends(get_db)):
    saved = db.query(SavedSeason).order_by(SavedSeason.created_at).all()
    return [_season_response(season_from_json(s.payload)) for s in saved]


@router.post("", response_model=SeasonResponse, status_code=201)
def create_season(request: SeasonCreate, db: Session = Depends(get_db)):
    """Create a season for the given teams, or every team when none are given"""
    team_ids = request.team_ids or [team_id for (team_id,) in db.query(Team.id).order_by(Team.created_at).all()]
    known = {team_id for (team_id,) in db.query(Team.id).filter(Team.id.in_(team_ids)).all()}
    missing = [team_id for team_id in team_ids if team_id not in known]
    if missing:
        raise HTTPException(status_code=404, detail=f"Team not found: {missing[0]}")

    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        season = SeasonEngine.create_season(request.name, team_ids, request.games_per_team, rng)
    except SimulationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _save_season(season, db)
    return _season_response(season)


@router.post("/import", response_model=SeasonResponse, status_code=201)
def import_season(data: dict = Body(...), db: Session = Depends(get_db)):
    """Import a season export; an id clash with a saved season gets a fresh id"""
    try:
        season = season_from_dict(data)
    except SimulationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if db.get(SavedSeason, season.id):
        season.id = new_id()
    _save_season(season, db)
    logger.info("Imported season %s (%d fixtures)", season.name, len(season.schedule))
    return _season_response(season)


@router.get("/{season_id}", response_model=SeasonResponse)
def get_season(season_id: str, db: Session = Depends(get_db)):
    return _season_response(_load_season(season_id, db))


@router.delete("/{season_id}")
def delete_season(season_id: str, db: Session = Depends(get_db)):
    db.delete(_get_saved(season_id, db))
    db.commit()
    return {"deleted": season_id}


@router.post("/{season_id}/play", response_model=PlayGamesResponse)
def play_games(season_id: str, request: PlayGamesRequest, db: Session = Depends(get_db)):
    """Play the next `count` unplayed fixtures"""
    season = _load_season(season_id, db)
    rng = random.Random(request.seed) if request.seed is not None else None
    engine = _load_engine(season, db, rng)

    played = engine.play_games(request.count)
    _save_season(season, db)
    return PlayGamesResponse(games_played=played, season=_season_response(season))


@router.get("/{season_id}/fixtures", response_model=list[FixtureResponse])
def get_fixtures(season_id: str, db: Session = Depends(get_db)):
    season = _load_season(season_id, db)
    names = {t.id: t.display_name for t in db.query(Team).filter(Team.id.in_(season.team_ids)).all()}
    return [
        FixtureResponse(
            id=f.id,
            sequence=f.sequence,
            home_id=f.home_id,
            away_id=f.away_id,
            home_name=names.get(f.home_id, "Unknown team"),
            away_name=names.get(f.away_id, "Unknown team"),
            played=f.played,
            skipped=f.skipped,
            score_home=f.score_home,
            score_away=f.score_away,
            winner_id=f.winner_id,
        )
        for f in season.schedule
    ]


@router.get("/{season_id}/standings", response_model=list[StandingResponse])
def get_standings(season_id: str, db: Session = Depends(get_db)):
    season = _load_season(season_id, db)
    return [vars(s) for s in _load_engine(season, db).get_standings()]


@router.get("/{season_id}/leaders", response_model=LeaderboardsResponse)
def get_leaders(season_id: str, limit: int = LEADERS_LIMIT, db: Session = Depends(get_db)):
    season = _load_season(season_id, db)
    leaders = _load_engine(season, db).get_leaders(limit)

    batting = [
        BatterLeaderboardEntry(
            player_id=e.player_id,
            name=e.line.name,
            team_id=e.line.team_id,
            at_bats=e.line.at_bats,
            hits=e.line.hits,
            home_runs=e.line.home_runs,
            rbi=e.line.rbi,
            stolen_bases=e.line.stolen_bases,
            average=round(e.line.batting_average, 3),
        )
        for e in leaders.batting
    ]
    pitching = [
        PitcherLeaderboardEntry(
            player_id=e.player_id,
            name=e.line.name,
            team_id=e.line.team_id,
            batters_faced=e.line.batters_faced,
            innings_pitched=e.line.innings_display,
            strikeouts=e.line.strikeouts_allowed,
            walks=e.line.walks_allowed,
            earned_runs=e.line.earned_runs,
            era=round(e.line.era, 2),
        )
        for e in leaders.pitching
    ]
    return LeaderboardsResponse(batting=batting, pitching=pitching)


@router.get("/{season_id}/export")
def export_season(season_id: str, db: Session = Depends(get_db)):
    return season_to_dict(_load_season(season_id, db))
