#!/usr/bin/env python3
"""
CLI for the Diamond League baseball simulation
"""
import random
from collections import Counter
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import track
from sqlalchemy.orm import selectinload

from diamond.config import settings
from diamond.database import init_db, get_session
from diamond.logging_config import configure_logging
from diamond.models import Team
from diamond.generators import TeamGenerator
from diamond.engine import GameEngine, GameState, SeasonEngine
from diamond.engine.errors import SimulationError

console = Console()


def _load_teams(session) -> list[Team]:
    return session.query(Team).options(selectinload(Team.players)).order_by(Team.created_at).all()


def _rng(seed: Optional[int]) -> random.Random:
    return random.Random(seed if seed is not None else settings.SIM_SEED)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL (DEBUG shows play-by-play)")
def cli(log_level: Optional[str]):
    """Diamond League - Baseball Game Simulation"""
    configure_logging(log_level)


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--count", default=8, type=click.IntRange(1, 8), help="Number of teams to generate")
@click.option("--seed", default=None, type=int, help="Random seed for the rosters")
def generate_teams(count: int, seed: Optional[int]):
    """Generate a league of fictional teams"""
    console.print(f"[yellow]Generating {count} teams...[/yellow]")

    init_db()
    teams = TeamGenerator.create_teams(count, rng=_rng(seed))

    # Build the table before saving to avoid detached instance issues
    table = Table(title="Generated Teams")
    table.add_column("Team", style="cyan")
    table.add_column("Stadium")
    table.add_column("Players", justify="right")
    table.add_column("Pitchers", justify="right")
    table.add_column("OVR", justify="right", style="green")
    for team in teams:
        table.add_row(
            team.display_name,
            team.stadium,
            str(team.squad_size),
            str(team.pitcher_count),
            str(team.overall_rating),
        )

    TeamGenerator.save_teams_to_db(teams)
    console.print(table)
    console.print(f"[green]{len(teams)} teams saved to database![/green]")


@cli.command()
def list_teams():
    """List all teams in the database"""
    session = get_session()
    teams = _load_teams(session)

    if not teams:
        console.print("[red]No teams found. Run 'generate-teams' first.[/red]")
        session.close()
        return

    table = Table(title=f"All Teams ({len(teams)} total)")
    table.add_column("ID")
    table.add_column("Team", style="cyan")
    table.add_column("Players", justify="right")
    table.add_column("Ace", style="magenta")
    table.add_column("OVR", justify="right", style="green")
    for team in teams:
        ace = GameEngine.pick_pitcher(team)
        table.add_row(
            team.id[:8],
            team.display_name,
            str(team.squad_size),
            ace.name if ace else "-",
            str(team.overall_rating),
        )

    console.print(table)
    session.close()


def _print_box_score(game: GameState):
    """Print line score and batting/pitching lines"""
    line_table = Table(title="Line Score")
    line_table.add_column("Team", style="cyan")
    line_table.add_column("R", justify="right")
    line_table.add_column("H", justify="right")
    line_table.add_column("E", justify="right")
    for team in (game.away, game.home):
        line = game.box.team(team.id)
        line_table.add_row(team.display_name, str(line.runs), str(line.hits), str(line.errors))
    console.print(line_table)

    for team in (game.away, game.home):
        bat_table = Table(title=f"{team.name} Batting")
        bat_table.add_column("Batter", style="cyan")
        for column in ("AB", "H", "2B", "3B", "HR", "BB", "K", "R", "RBI", "SB"):
            bat_table.add_column(column, justify="right")

        pitch_table = Table(title=f"{team.name} Pitching")
        pitch_table.add_column("Pitcher", style="magenta")
        for column in ("IP", "BF", "H", "BB", "K", "ER", "ERA"):
            pitch_table.add_column(column, justify="right")

        for player in team.players:
            line = game.box.players.get(player.id)
            if line is None:
                continue
            if line.at_bats or line.walks or line.stolen_bases or line.caught_stealing:
                bat_table.add_row(line.name, *(str(v) for v in (
                    line.at_bats, line.hits, line.doubles, line.triples, line.home_runs,
                    line.walks, line.strikeouts, line.runs, line.rbi, line.stolen_bases,
                )))
            if line.batters_faced:
                pitch_table.add_row(
                    line.name,
                    line.innings_display,
                    str(line.batters_faced),
                    str(line.hits_allowed),
                    str(line.walks_allowed),
                    str(line.strikeouts_allowed),
                    str(line.earned_runs),
                    f"{line.era:.2f}",
                )

        console.print(bat_table)
        console.print(pitch_table)


@cli.command()
@click.option("--home", "home_id", default=None, help="Home team id (defaults to the first team)")
@click.option("--away", "away_id", default=None, help="Away team id (defaults to the second team)")
@click.option("--seed", default=None, type=int, help="Random seed")
@click.option("--plays/--no-plays", default=False, help="Print play-by-play")
def simulate(home_id: Optional[str], away_id: Optional[str], seed: Optional[int], plays: bool):
    """Simulate one game and print the box score"""
    session = get_session()
    teams = _load_teams(session)

    if len(teams) < 2:
        console.print("[red]Not enough teams. Run 'generate-teams' first.[/red]")
        session.close()
        return

    by_id = {t.id: t for t in teams}
    home = by_id.get(home_id) if home_id else teams[0]
    away = by_id.get(away_id) if away_id else teams[1]

    engine = GameEngine(_rng(seed))
    try:
        game = engine.start_game(home, away)
    except SimulationError as e:
        console.print(f"[red]{e}[/red]")
        session.close()
        return

    console.print(Panel(
        f"[bold]{away.display_name}[/bold] at [bold]{home.display_name}[/bold]\n"
        f"{game.pitcher_away.name} vs {game.pitcher_home.name}"
    ))

    results = engine.sim_full_game(game)
    if plays:
        for result in results:
            for line in result.log_lines():
                console.print(f"  {line}")

    console.print(Panel(
        f"[bold green]Final: {away.display_name} {game.score_away}, "
        f"{home.display_name} {game.score_home}[/bold green] ({game.inning - 1 if game.top else game.inning} innings)"
    ))
    _print_box_score(game)
    session.close()


@cli.command()
@click.option("--name", default="Season", help="Season name")
@click.option("--games", "games_per_team", default=settings.DEFAULT_GAMES_PER_TEAM, help="Games per team")
@click.option("--seed", default=None, type=int, help="Random seed")
def season(name: str, games_per_team: int, seed: Optional[int]):
    """Create and play a full season with every team, then show standings and leaders"""
    session = get_session()
    teams = _load_teams(session)
    rng = _rng(seed)

    try:
        new_season = SeasonEngine.create_season(name, [t.id for t in teams], games_per_team, rng)
    except SimulationError as e:
        console.print(f"[red]{e}[/red]")
        session.close()
        return

    engine = SeasonEngine(new_season, teams, rng=rng)
    for _ in track(range(len(new_season.schedule)), description="Simulating..."):
        engine.play_games(1)

    table = Table(title=f"{new_season.name} Standings")
    table.add_column("#", justify="right")
    table.add_column("Team", style="cyan")
    table.add_column("W", justify="right")
    table.add_column("L", justify="right")
    table.add_column("PCT", justify="right")
    table.add_column("RS", justify="right")
    table.add_column("RA", justify="right")
    table.add_column("DIFF", justify="right", style="green")
    for s in engine.get_standings():
        table.add_row(
            str(s.position), s.team_name, str(s.wins), str(s.losses),
            f"{s.win_pct:.3f}", str(s.runs_scored), str(s.runs_allowed), f"{s.run_differential:+d}",
        )
    console.print(table)

    leaders = engine.get_leaders()
    bat_table = Table(title="Batting Leaders")
    bat_table.add_column("Player", style="cyan")
    for column in ("AB", "HR", "RBI", "AVG"):
        bat_table.add_column(column, justify="right")
    for entry in leaders.batting:
        line = entry.line
        bat_table.add_row(line.name, str(line.at_bats), str(line.home_runs), str(line.rbi), f"{line.batting_average:.3f}")
    console.print(bat_table)

    pitch_table = Table(title="Pitching Leaders")
    pitch_table.add_column("Player", style="magenta")
    for column in ("IP", "K", "ERA"):
        pitch_table.add_column(column, justify="right")
    for entry in leaders.pitching:
        line = entry.line
        pitch_table.add_row(line.name, line.innings_display, str(line.strikeouts_allowed), f"{line.era:.2f}")
    console.print(pitch_table)

    session.close()


@cli.command()
@click.option("--games", default=500, help="Number of games to simulate")
@click.option("--seed", default=None, type=int, help="Random seed")
def benchmark(games: int, seed: Optional[int]):
    """Run many games between the first two teams to check scoring realism"""
    session = get_session()
    teams = _load_teams(session)

    if len(teams) < 2:
        console.print("[red]Not enough teams. Run 'generate-teams' first.[/red]")
        session.close()
        return

    rng = _rng(seed)
    engine = GameEngine(rng)
    runs = []
    extra_innings = 0
    home_wins = 0
    outcomes = Counter()

    console.print(f"[yellow]Running {games} simulations...[/yellow]")
    for _ in track(range(games), description="Simulating..."):
        home, away = rng.sample(teams[:2], 2)
        game = engine.start_game(home, away)
        for result in engine.sim_full_game(game):
            if result.outcome:
                outcomes[result.outcome.value] += 1
        runs.extend([game.score_home, game.score_away])
        if game.inning > 10:
            extra_innings += 1
        if game.winner_id == home.id:
            home_wins += 1

    console.print(Panel("[bold]Simulation Statistics[/bold]"))
    console.print(f"[cyan]Average Runs per Team:[/cyan] {sum(runs) / len(runs):.2f}")
    console.print(f"[cyan]Min Runs:[/cyan] {min(runs)}")
    console.print(f"[cyan]Max Runs:[/cyan] {max(runs)}")
    console.print(f"[cyan]Extra-inning Games:[/cyan] {extra_innings / games * 100:.1f}%")
    console.print(f"[cyan]Home Win %:[/cyan] {home_wins / games * 100:.1f}%")

    # Run distribution
    brackets = {"0-1": 0, "2-3": 0, "4-5": 0, "6-8": 0, "9+": 0}
    for score in runs:
        if score < 2:
            brackets["0-1"] += 1
        elif score < 4:
            brackets["2-3"] += 1
        elif score < 6:
            brackets["4-5"] += 1
        elif score < 9:
            brackets["6-8"] += 1
        else:
            brackets["9+"] += 1

    console.print("\n[bold]Run Distribution:[/bold]")
    for bracket, count in brackets.items():
        pct = count / len(runs) * 100
        bar = "█" * int(pct / 2)
        console.print(f"  {bracket:>8}: {bar} {pct:.1f}%")

    total = sum(outcomes.values())
    console.print("\n[bold]Outcome Mix:[/bold]")
    for outcome, count in outcomes.most_common():
        console.print(f"  {outcome:>10}: {count / total * 100:.1f}%")

    session.close()


if __name__ == "__main__":
    cli()
