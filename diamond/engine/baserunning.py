"""
Baserunning & Scoring - moves runners for an outcome and credits R/RBI.

Bases are indexed 0 (first), 1 (second), 2 (third). Lead runners always move
before trailing ones so a base is vacated before anyone is placed on it.
"""
import random
from typing import Optional

from diamond.models.player import Player
from diamond.engine.game_state import GameState
from diamond.engine.outcomes import Outcome
from diamond.engine.weighted import roll

FIRST, SECOND, THIRD = 0, 1, 2

# Chance an unforced runner on second takes third on an error
ERROR_EXTRA_BASE_CHANCE = 0.55


def _move(game: GameState, src: int, dst: int) -> None:
    if game.bases[dst] is not None:
        raise RuntimeError(f"Base {dst + 1} is already occupied")
    game.bases[dst] = game.bases[src]
    game.bases[src] = None


def _score(game: GameState, base: int, batter: Optional[Player]) -> int:
    """Score the runner on a base; the batter (if any) gets the RBI"""
    runner = game.runner(base)
    game.bases[base] = None
    if runner is None:
        return 0
    game.line(runner).runs += 1
    if batter is not None:
        game.line(batter).rbi += 1
    return 1


def advance_runners(game: GameState, outcome: Outcome, batter: Player) -> int:
    """Apply a walk or hit to the bases and the score. Returns runs scored."""
    game.clear_runner(batter.id)
    bases = game.bases
    runs = 0

    if outcome == Outcome.WALK:
        if all(bases):
            runs += _score(game, THIRD, batter)
        if bases[FIRST] and bases[SECOND]:
            _move(game, SECOND, THIRD)
        if bases[FIRST]:
            _move(game, FIRST, SECOND)
        bases[FIRST] = batter.id

    elif outcome == Outcome.SINGLE:
        runs += _score(game, THIRD, batter)
        if bases[SECOND]:
            _move(game, SECOND, THIRD)
        if bases[FIRST]:
            _move(game, FIRST, SECOND)
        bases[FIRST] = batter.id

    elif outcome == Outcome.DOUBLE:
        runs += _score(game, THIRD, batter)
        runs += _score(game, SECOND, batter)
        if bases[FIRST]:
            _move(game, FIRST, THIRD)
        bases[SECOND] = batter.id

    elif outcome == Outcome.TRIPLE:
        for base in (THIRD, SECOND, FIRST):
            runs += _score(game, base, batter)
        bases[THIRD] = batter.id

    elif outcome == Outcome.HOME_RUN:
        for base in (THIRD, SECOND, FIRST):
            runs += _score(game, base, batter)
        line = game.line(batter)
        line.runs += 1
        line.rbi += 1
        runs += 1

    game.add_runs(runs)
    return runs


def reach_on_error(game: GameState, batter: Player, rng: random.Random) -> int:
    """
    Batter reaches first on an error. Forced runners move up; an unforced
    runner on second may take third. Runs forced in are not credited as RBI.
    """
    game.clear_runner(batter.id)
    bases = game.bases
    runs = 0

    if all(bases):
        runs += _score(game, THIRD, None)
    if bases[SECOND] and (bases[FIRST] or (bases[THIRD] is None and roll(rng, ERROR_EXTRA_BASE_CHANCE))):
        _move(game, SECOND, THIRD)
    if bases[FIRST]:
        _move(game, FIRST, SECOND)
    bases[FIRST] = batter.id

    game.add_runs(runs)
    return runs
