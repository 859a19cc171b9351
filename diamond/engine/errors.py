"""
Engine failures. All of them are recoverable precondition checks.
"""


class SimulationError(ValueError):
    """Base class for rejected engine operations"""


class GameSetupError(SimulationError):
    """A matchup cannot be started (roster too small, no pitcher or batter)"""

    def __init__(self, message: str, errors: list[str] = None):
        super().__init__(message)
        self.errors = errors or [message]


class SeasonSetupError(SimulationError):
    """A season cannot be created from the given teams"""


class SeasonImportError(SimulationError):
    """Imported season data is malformed"""


class TeamImportError(SimulationError):
    """Imported team data is malformed"""
