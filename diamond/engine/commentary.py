"""
Play-by-play lines. Wording is presentation only; callers rely on the
structured PlayResult, not on these strings.
"""
import random

from diamond.engine.outcomes import Outcome

OFFENSE_LINES = {
    Outcome.WALK: [
        "{batter} works a walk. No panic, just patience.",
        "{batter} watches four go by. Take your base!",
    ],
    Outcome.STRIKEOUT: [
        "{batter} goes down swinging. Nasty pitch.",
        "Strike three! {batter} is retired.",
    ],
    Outcome.SINGLE: [
        "{batter} slaps a clean single through the infield!",
        "{batter} pokes one into right for a hit!",
    ],
    Outcome.DOUBLE: [
        "{batter} smokes a double into the gap!",
        "{batter} bangs one off the wall. Stand-up double!",
    ],
    Outcome.TRIPLE: [
        "{batter} runs forever and ends up with a triple!",
        "{batter} splits the outfield. Triple!",
    ],
    Outcome.HOME_RUN: [
        "{batter} unloads... DEEP... GONE! Home run!",
        "{batter} turns on it. Goodbye, baseball!",
    ],
}

FIELDING_LINES = [
    "{fielder} makes the routine play and retires {batter}.",
    "{batter} hits a sharp grounder; {fielder} snags it and throws them out!",
    "{fielder} camps under it and puts it away for the out.",
]


def offense_line(rng: random.Random, outcome: Outcome, batter: str, runs: int = 0) -> str:
    text = rng.choice(OFFENSE_LINES[outcome]).format(batter=batter)
    if runs > 0:
        text += f" ({runs} run{'' if runs == 1 else 's'} score!)"
    return text


def fielding_line(rng: random.Random, fielder: str, batter: str) -> str:
    return rng.choice(FIELDING_LINES).format(fielder=fielder, batter=batter)


def stolen_base_line(runner: str) -> str:
    return f"{runner} takes off... SAFE! Stolen base!"


def caught_stealing_line(runner: str) -> str:
    return f"{runner} is gunned down trying to steal! Caught stealing."


def double_play_line(team: str) -> str:
    return f"Double play! {team} turns two and wipes out the threat."


def error_line(team: str, batter: str) -> str:
    return f"Error! {team} boots the ball and {batter} reaches safely."


def half_inning_line() -> str:
    return "Half-inning over."


def final_line(home: str, score_home: int, score_away: int, away: str) -> str:
    return f"Final: {home} {score_home} - {score_away} {away}"
