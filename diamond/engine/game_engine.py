"""
Game Loop - drives plate appearances and special plays through a game.
"""
import enum
import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from diamond.config import settings
from diamond.models.player import Player
from diamond.models.team import Team
from diamond.validators.lineup_validator import LineupValidator
from diamond.engine import commentary
from diamond.engine.baserunning import FIRST, SECOND, THIRD, advance_runners, reach_on_error
from diamond.engine.box_score import BoxScoreLine
from diamond.engine.errors import GameSetupError
from diamond.engine.game_state import GameState
from diamond.engine.outcomes import Outcome, OutcomeResolver, rating, team_defense_quality
from diamond.engine.weighted import clamp01, roll

logger = logging.getLogger(__name__)


class PlayKind(enum.Enum):
    PLATE_APPEARANCE = "plate_appearance"
    STOLEN_BASE = "stolen_base"
    CAUGHT_STEALING = "caught_stealing"
    DOUBLE_PLAY = "double_play"
    ERROR = "error"


@dataclass
class Highlight:
    """A player to feature in the UI, with a caption"""
    player_id: str
    caption: str


@dataclass
class PlayResult:
    """Everything one call to next_play changed"""
    kind: PlayKind
    text: str
    outcome: Optional[Outcome] = None
    batter_id: Optional[str] = None
    runner_id: Optional[str] = None
    runs: int = 0
    outs_recorded: int = 0
    highlight: Optional[Highlight] = None
    half_inning_over: bool = False
    state: dict = field(default_factory=dict)

    def log_lines(self) -> list[str]:
        lines = [self.text]
        if self.half_inning_over:
            lines.append(commentary.half_inning_line())
        return lines


class GameEngine:
    """
    Baseball game simulation engine.
    Simulates games one play at a time with probability-based outcomes.
    """

    HIGHLIGHT_CHANCE = 0.30
    STAR_HIGHLIGHT_CHANCE = 0.60
    FIELDING_HIGHLIGHT_CHANCE = 0.35

    def __init__(self, rng: Optional[random.Random] = None, inning_cap: Optional[int] = None):
        self.rng = rng or random.Random(settings.SIM_SEED)
        self.resolver = OutcomeResolver(self.rng)
        self.inning_cap = inning_cap or settings.EXTRA_INNING_CAP

    # ----- setup -----

    @staticmethod
    def pick_pitcher(team: Team) -> Optional[Player]:
        """Highest PIT among pitchers, else highest PIT on the roster; first wins ties"""
        players = list(team.players)
        pool = [p for p in players if p.pitches] or players
        if not pool:
            return None
        return max(pool, key=lambda p: rating(p, "pitching"))

    @staticmethod
    def build_lineup(team: Team) -> list[Player]:
        """Position players in roster order; everyone if the whole roster pitches"""
        players = list(team.players)
        return [p for p in players if not p.pitches] or players

    def start_game(self, home: Team, away: Team) -> GameState:
        result = LineupValidator.validate_matchup(home, away)
        if not result["valid"]:
            logger.info("Rejected game setup: %s", "; ".join(result["errors"]))
            raise GameSetupError("Invalid game setup: " + "; ".join(result["errors"]), result["errors"])

        game = GameState(
            home=home,
            away=away,
            pitcher_home=self.pick_pitcher(home),
            pitcher_away=self.pick_pitcher(away),
            inning_cap=self.inning_cap,
        )
        logger.debug(
            "New game %s: %s vs %s (%s vs %s on the mound)",
            game.id, home.display_name, away.display_name,
            game.pitcher_home.name, game.pitcher_away.name,
        )
        return game

    def next_batter(self, game: GameState) -> Player:
        team = game.offense
        lineup = self.build_lineup(team)
        index = game.lineup_cursor[team.id] % len(lineup)
        game.lineup_cursor[team.id] = (index + 1) % len(lineup)
        batter = lineup[index]
        game.clear_runner(batter.id)
        return batter

    # ----- special plays -----

    def attempt_steal(self, game: GameState) -> Optional[PlayResult]:
        """
        With fewer than two outs a runner may try for the next base: the runner
        on first if second is open, else the runner on second if third is open.
        """
        if game.outs >= 2:
            return None

        if game.bases[FIRST] and not game.bases[SECOND]:
            base_from = FIRST
        elif game.bases[SECOND] and not game.bases[THIRD]:
            base_from = SECOND
        else:
            return None

        runner = game.runner(base_from)
        defense = list(game.defense.players)
        pitcher = game.defending_pitcher
        speed = rating(runner, "speed")
        arm_avg = clamp01(sum(rating(p, "arm") for p in defense) / max(1, len(defense)))
        pit = rating(pitcher, "pitching")

        try_chance = 0.04 + speed * 0.20 + (0.06 if runner.is_star else 0)
        if not roll(self.rng, try_chance):
            return None

        success = 0.55 + speed * 0.35 - arm_avg * 0.22 - pit * 0.12
        game.bases[base_from] = None

        if roll(self.rng, success):
            game.bases[base_from + 1] = runner.id
            game.line(runner).stolen_bases += 1
            return self._finish(game, PlayResult(
                kind=PlayKind.STOLEN_BASE,
                text=commentary.stolen_base_line(runner.name),
                runner_id=runner.id,
                highlight=Highlight(runner.id, f"{runner.name} steals a base!"),
            ))

        game.record_out()
        game.line(runner).caught_stealing += 1
        game.line(pitcher).outs_recorded += 1
        arm = max(defense, key=lambda p: rating(p, "arm"), default=pitcher)
        return self._finish(game, PlayResult(
            kind=PlayKind.CAUGHT_STEALING,
            text=commentary.caught_stealing_line(runner.name),
            runner_id=runner.id,
            outs_recorded=1,
            highlight=Highlight(arm.id, f"{arm.name} throws out {runner.name}!"),
        ))

    def _double_play(self, game: GameState, batter: Player, pitcher_line: BoxScoreLine) -> Optional[PlayResult]:
        if game.outs >= 2 or not game.bases[FIRST]:
            return None

        runner = game.runner(FIRST)
        quality = team_defense_quality(game.defense)
        chance = 0.22 + quality * 0.18 - rating(runner, "speed") * 0.20
        if not roll(self.rng, chance):
            return None

        game.bases[FIRST] = None
        game.record_out(2)
        game.line(batter).at_bats += 1
        pitcher_line.outs_recorded += 2

        fielder = max(game.defense.players, key=lambda p: rating(p, "defense"))
        return PlayResult(
            kind=PlayKind.DOUBLE_PLAY,
            text=commentary.double_play_line(game.defense.name),
            outcome=Outcome.OUT,
            batter_id=batter.id,
            runner_id=runner.id,
            outs_recorded=2,
            highlight=Highlight(fielder.id, f"{fielder.name} starts the double play!"),
        )

    def _error(self, game: GameState, batter: Player) -> Optional[PlayResult]:
        quality = team_defense_quality(game.defense)
        if not roll(self.rng, 0.045 - (quality - 0.5) * 0.05):
            return None

        game.line(batter).at_bats += 1
        game.box.team(game.defense.id).errors += 1
        runs = reach_on_error(game, batter, self.rng)
        return PlayResult(
            kind=PlayKind.ERROR,
            text=commentary.error_line(game.defense.name, batter.name),
            outcome=Outcome.OUT,
            batter_id=batter.id,
            runs=runs,
            highlight=Highlight(batter.id, f"{batter.name} reaches on an error!"),
        )

    # ----- plays -----

    def _maybe_highlight(self, player: Player, caption: str, chance: float) -> Optional[Highlight]:
        if self.rng.random() < chance:
            return Highlight(player.id, caption)
        return None

    def _fielder(self, game: GameState, batter: Player) -> Player:
        players = list(game.defense.players)
        candidates = [p for p in players if not p.pitches] or players or [batter]
        return self.rng.choice(candidates)

    def _finish(self, game: GameState, result: PlayResult) -> PlayResult:
        game.plays += 1
        result.half_inning_over = game.end_half_inning_if_needed()
        result.state = game.snapshot()
        for line in result.log_lines():
            logger.debug("[%s %s%d] %s", game.id[:8], game.half[0].upper(), game.inning, line)
        return result

    def next_play(self, game: GameState) -> PlayResult:
        """
        Resolve one play: a steal attempt if one happens, otherwise a plate
        appearance (with double play and error checks on balls in play).
        """
        game.half_inning_over = False

        steal = self.attempt_steal(game)
        if steal is not None:
            return steal

        batter = self.next_batter(game)
        pitcher = game.defending_pitcher
        batter_line = game.line(batter)
        pitcher_line = game.line(pitcher)
        pitcher_line.batters_faced += 1

        outcome = self.resolver.resolve(batter, pitcher, game.defense)
        highlight_chance = self.STAR_HIGHLIGHT_CHANCE if batter.is_star else self.HIGHLIGHT_CHANCE

        if outcome == Outcome.STRIKEOUT:
            game.record_out()
            batter_line.at_bats += 1
            batter_line.strikeouts += 1
            pitcher_line.strikeouts_allowed += 1
            pitcher_line.outs_recorded += 1
            result = PlayResult(
                kind=PlayKind.PLATE_APPEARANCE,
                text=commentary.offense_line(self.rng, outcome, batter.name),
                outcome=outcome,
                batter_id=batter.id,
                outs_recorded=1,
                highlight=self._maybe_highlight(
                    pitcher, f"{pitcher.name} paints the corner for a strikeout!", highlight_chance
                ),
            )

        elif outcome == Outcome.OUT:
            result = self._double_play(game, batter, pitcher_line) or self._error(game, batter)
            if result is None:
                game.record_out()
                batter_line.at_bats += 1
                pitcher_line.outs_recorded += 1
                fielder = self._fielder(game, batter)
                result = PlayResult(
                    kind=PlayKind.PLATE_APPEARANCE,
                    text=commentary.fielding_line(self.rng, fielder.name, batter.name),
                    outcome=outcome,
                    batter_id=batter.id,
                    outs_recorded=1,
                    highlight=self._maybe_highlight(
                        fielder, f"{fielder.name} flashes the glove!", self.FIELDING_HIGHLIGHT_CHANCE
                    ),
                )

        else:
            runs = advance_runners(game, outcome, batter)
            if outcome == Outcome.WALK:
                batter_line.walks += 1
                pitcher_line.walks_allowed += 1
                caption = f"{batter.name} draws a big-time walk."
            elif outcome.is_hit:
                batter_line.at_bats += 1
                batter_line.hits += 1
                if outcome == Outcome.DOUBLE:
                    batter_line.doubles += 1
                elif outcome == Outcome.TRIPLE:
                    batter_line.triples += 1
                elif outcome == Outcome.HOME_RUN:
                    batter_line.home_runs += 1
                game.box.team(game.offense.id).hits += 1
                pitcher_line.hits_allowed += 1
                caption = f"{batter.name} with the {outcome.value.replace('_', ' ')}!"
            result = PlayResult(
                kind=PlayKind.PLATE_APPEARANCE,
                text=commentary.offense_line(self.rng, outcome, batter.name, runs),
                outcome=outcome,
                batter_id=batter.id,
                runs=runs,
                highlight=self._maybe_highlight(batter, caption, highlight_chance),
            )

        return self._finish(game, result)

    def sim_half_inning(self, game: GameState) -> list[PlayResult]:
        """Play until the side or the inning changes"""
        start = (game.top, game.inning)
        results = []
        while (game.top, game.inning) == start:
            results.append(self.next_play(game))
        return results

    def sim_full_game(self, game: GameState) -> list[PlayResult]:
        """Play half innings until the game is over, then settle pitching lines"""
        results = []
        while not game.is_complete:
            results.extend(self.sim_half_inning(game))
        self.finalize_game(game)
        return results

    def finalize_game(self, game: GameState) -> None:
        """
        Charge each starter with every run the opponent scored. Starters pitch
        the whole game, so runs allowed stand in for earned runs.
        """
        if game.finalized:
            return
        game.line(game.pitcher_home).earned_runs += game.score_away
        game.line(game.pitcher_away).earned_runs += game.score_home
        game.finalized = True
        logger.debug(
            commentary.final_line(
                game.home.display_name, game.score_home, game.score_away, game.away.display_name
            )
        )
