from diamond.engine.outcomes import Outcome, OutcomeResolver
from diamond.engine.game_engine import GameEngine, PlayResult, PlayKind
from diamond.engine.game_state import GameState, GamePhase
from diamond.engine.season_engine import SeasonEngine, Season, Fixture
from diamond.engine.errors import (
    SimulationError, GameSetupError, SeasonSetupError, SeasonImportError, TeamImportError,
)

__all__ = [
    "Outcome",
    "OutcomeResolver",
    "GameEngine",
    "PlayResult",
    "PlayKind",
    "GameState",
    "GamePhase",
    "SeasonEngine",
    "Season",
    "Fixture",
    "SimulationError",
    "GameSetupError",
    "SeasonSetupError",
    "SeasonImportError",
    "TeamImportError",
]
