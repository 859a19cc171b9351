import random
from dataclasses import dataclass
from typing import Dict
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from diamond.database import get_db
from diamond.models.team import Team
from diamond.engine.errors import SimulationError
from diamond.engine.game_engine import GameEngine, PlayResult
from diamond.engine.game_state import GameState
from diamond.api.schemas import (
    StartGameRequest, GameStateResponse, PlaysResponse, PlayResultResponse,
    HighlightResponse, TeamLineResponse, StatLineResponse,
)

router = APIRouter(prefix="/games", tags=["Games"])


@dataclass
class ActiveGame:
    engine: GameEngine
    state: GameState


# In-memory store for games in progress
active_games: Dict[str, ActiveGame] = {}


def _get_active(game_id: str) -> ActiveGame:
    active = active_games.get(game_id)
    if not active:
        raise HTTPException(status_code=404, detail="Game not found")
    return active


def _game_state_response(game: GameState) -> GameStateResponse:
    bases = []
    for base in range(3):
        runner = game.runner(base)
        bases.append(runner.name if runner else None)

    team_names = {game.home.id: game.home.display_name, game.away.id: game.away.display_name}
    team_lines = [
        TeamLineResponse(
            team_id=team_id,
            team_name=team_names.get(team_id, "Unknown team"),
            runs=line.runs,
            hits=line.hits,
            errors=line.errors,
        )
        for team_id, line in game.box.teams.items()
    ]
    box_score = [
        StatLineResponse(player_id=player_id, **vars(line))
        for player_id, line in game.box.players.items()
    ]

    return GameStateResponse(
        id=game.id,
        home_team_id=game.home.id,
        home_team_name=game.home.display_name,
        away_team_id=game.away.id,
        away_team_name=game.away.display_name,
        home_pitcher=game.pitcher_home.name,
        away_pitcher=game.pitcher_away.name,
        inning=game.inning,
        half=game.half,
        outs=game.outs,
        score_home=game.score_home,
        score_away=game.score_away,
        bases=bases,
        phase=game.phase.value,
        is_complete=game.is_complete,
        winner_id=game.winner_id if game.is_complete else None,
        plays=game.plays,
        team_lines=team_lines,
        box_score=box_score,
    )


def _play_response(game: GameState, result: PlayResult) -> PlayResultResponse:
    highlight = None
    if result.highlight:
        player = game.roster.get(result.highlight.player_id)
        highlight = HighlightResponse(
            player_id=result.highlight.player_id,
            player_name=player.name if player else "",
            image=player.image if player else None,
            caption=result.highlight.caption,
        )
    return PlayResultResponse(
        kind=result.kind.value,
        outcome=result.outcome.value if result.outcome else None,
        text=result.text,
        runs=result.runs,
        outs_recorded=result.outs_recorded,
        half_inning_over=result.half_inning_over,
        log=result.log_lines(),
        highlight=highlight,
    )


def _plays_response(active: ActiveGame, results: list) -> PlaysResponse:
    game = active.state
    if game.is_complete:
        active.engine.finalize_game(game)
    return PlaysResponse(
        plays=[_play_response(game, r) for r in results],
        state=_game_state_response(game),
    )


def _check_in_progress(active: ActiveGame):
    if active.state.is_complete:
        raise HTTPException(status_code=400, detail="Game is over")


@router.post("/start", response_model=GameStateResponse)
def start_game(request: StartGameRequest, db: Session = Depends(get_db)):
    """Start a game between two saved teams"""
    teams = {
        t.id: t
        for t in db.query(Team)
        .options(selectinload(Team.players))
        .filter(Team.id.in_([request.home_team_id, request.away_team_id]))
        .all()
    }
    home = teams.get(request.home_team_id)
    away = teams.get(request.away_team_id)
    if home is None or away is None:
        raise HTTPException(status_code=404, detail="Team not found")

    engine = GameEngine(random.Random(request.seed) if request.seed is not None else None)
    try:
        game = engine.start_game(home, away)
    except SimulationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    active_games[game.id] = ActiveGame(engine=engine, state=game)
    return _game_state_response(game)


@router.get("/{game_id}", response_model=GameStateResponse)
def get_game_state(game_id: str):
    return _game_state_response(_get_active(game_id).state)


@router.post("/{game_id}/next-play", response_model=PlaysResponse)
def next_play(game_id: str):
    active = _get_active(game_id)
    _check_in_progress(active)
    result = active.engine.next_play(active.state)
    return _plays_response(active, [result])


@router.post("/{game_id}/half-inning", response_model=PlaysResponse)
def sim_half_inning(game_id: str):
    active = _get_active(game_id)
    _check_in_progress(active)
    results = active.engine.sim_half_inning(active.state)
    return _plays_response(active, results)


@router.post("/{game_id}/full-game", response_model=PlaysResponse)
def sim_full_game(game_id: str):
    active = _get_active(game_id)
    _check_in_progress(active)
    results = active.engine.sim_full_game(active.state)
    return _plays_response(active, results)


@router.delete("/{game_id}")
def end_game(game_id: str):
    _get_active(game_id)
    del active_games[game_id]
    return {"deleted": game_id}
