import logging
import random
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from diamond.database import get_db
from diamond.models.team import Team
from diamond.models.player import Player
from diamond.engine.errors import TeamImportError
from diamond.engine.serialization import team_to_export, team_from_export
from diamond.generators.player_generator import PlayerGenerator
from diamond.validators.lineup_validator import LineupValidator
from diamond.api.schemas import (
    TeamCreate, TeamUpdate, TeamResponse, TeamDetail,
    PlayerCreate, PresetPlayerCreate, PlayerResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["Teams"])


def _get_team(team_id: str, db: Session) -> Team:
    team = db.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


def _get_player(team: Team, player_id: str) -> Player:
    player = next((p for p in team.players if p.id == player_id), None)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


def _existing_team_ids(db: Session) -> set:
    return {team_id for (team_id,) in db.query(Team.id).all()}


@router.get("", response_model=list[TeamResponse])
def list_teams(db: Session = Depends(get_db)):
    return db.query(Team).order_by(Team.created_at).all()


@router.post("", response_model=TeamDetail, status_code=201)
def create_team(request: TeamCreate, db: Session = Depends(get_db)):
    team = Team(**request.model_dump())
    db.add(team)
    db.commit()
    db.refresh(team)
    logger.info("Created team %s", team.display_name)
    return team


@router.post("/import", response_model=TeamDetail, status_code=201)
def import_team(data: dict = Body(...), db: Session = Depends(get_db)):
    """Import a team from a bb_team export"""
    try:
        team = team_from_export(data, _existing_team_ids(db))
    except TeamImportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.add(team)
    db.commit()
    db.refresh(team)
    logger.info("Imported team %s with %d players", team.display_name, team.squad_size)
    return team


@router.get("/{team_id}", response_model=TeamDetail)
def get_team(team_id: str, db: Session = Depends(get_db)):
    return _get_team(team_id, db)


@router.put("/{team_id}", response_model=TeamDetail)
def update_team(team_id: str, request: TeamUpdate, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(team, key, value)
    db.commit()
    db.refresh(team)
    return team


@router.delete("/{team_id}")
def delete_team(team_id: str, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    db.delete(team)
    db.commit()
    logger.info("Deleted team %s", team_id)
    return {"deleted": team_id}


@router.post("/{team_id}/duplicate", response_model=TeamDetail, status_code=201)
def duplicate_team(team_id: str, db: Session = Depends(get_db)):
    """Copy a team and its roster under new ids"""
    team = _get_team(team_id, db)
    copy = team_from_export(team_to_export(team), _existing_team_ids(db))
    copy.name = f"{team.name} (Copy)"
    db.add(copy)
    db.commit()
    db.refresh(copy)
    return copy


@router.get("/{team_id}/export")
def export_team(team_id: str, db: Session = Depends(get_db)):
    return team_to_export(_get_team(team_id, db))


@router.get("/{team_id}/validate")
def validate_team(team_id: str, db: Session = Depends(get_db)):
    return LineupValidator.validate(_get_team(team_id, db))


# ----- roster -----

@router.post("/{team_id}/players", response_model=PlayerResponse, status_code=201)
def add_player(team_id: str, request: PlayerCreate, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    player = Player(**request.model_dump(), lineup_order=len(team.players))
    team.players.append(player)
    db.commit()
    db.refresh(player)
    return player


@router.post("/{team_id}/players/generate", response_model=PlayerResponse, status_code=201)
def generate_player(team_id: str, request: PresetPlayerCreate, db: Session = Depends(get_db)):
    """Add a generated player built around a rating preset"""
    if request.preset not in PlayerGenerator.PRESETS:
        raise HTTPException(status_code=400, detail=f"Unknown preset: {request.preset}")
    team = _get_team(team_id, db)
    player = PlayerGenerator.generate_player(request.preset, request.position)
    player.lineup_order = len(team.players)
    team.players.append(player)
    db.commit()
    db.refresh(player)
    return player


@router.put("/{team_id}/players/{player_id}", response_model=PlayerResponse)
def update_player(team_id: str, player_id: str, request: PlayerCreate, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    player = _get_player(team, player_id)
    for key, value in request.model_dump().items():
        setattr(player, key, value)
    db.commit()
    db.refresh(player)
    return player


@router.delete("/{team_id}/players/{player_id}", response_model=TeamDetail)
def remove_player(team_id: str, player_id: str, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    team.players.remove(_get_player(team, player_id))
    team.renumber_lineup()
    db.commit()
    db.refresh(team)
    return team


@router.delete("/{team_id}/players", response_model=TeamDetail)
def clear_roster(team_id: str, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    team.players.clear()
    db.commit()
    db.refresh(team)
    return team


# ----- lineup -----

@router.put("/{team_id}/lineup", response_model=TeamDetail)
def set_lineup(team_id: str, player_ids: list[str] = Body(...), db: Session = Depends(get_db)):
    """Reorder the roster; the ids must be exactly the team's players"""
    team = _get_team(team_id, db)
    by_id = {p.id: p for p in team.players}
    if sorted(player_ids) != sorted(by_id):
        raise HTTPException(status_code=400, detail="Lineup must list every player on the team exactly once")

    for index, player_id in enumerate(player_ids):
        by_id[player_id].lineup_order = index
    db.commit()
    db.refresh(team)
    return team


@router.post("/{team_id}/lineup/auto", response_model=TeamDetail)
def auto_lineup(team_id: str, db: Session = Depends(get_db)):
    """Position players by OVR, best first, then pitchers by OVR"""
    team = _get_team(team_id, db)
    ordered = sorted(team.players, key=lambda p: (p.pitches, -p.overall_rating))
    for index, player in enumerate(ordered):
        player.lineup_order = index
    db.commit()
    db.refresh(team)
    return team


@router.post("/{team_id}/lineup/shuffle", response_model=TeamDetail)
def shuffle_lineup(team_id: str, db: Session = Depends(get_db)):
    team = _get_team(team_id, db)
    ordered = list(team.players)
    random.shuffle(ordered)
    for index, player in enumerate(ordered):
        player.lineup_order = index
    db.commit()
    db.refresh(team)
    return team
