"""Main CLI application for PokeBattle."""

import logging

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pokebattle import __version__
from pokebattle.core.battle import ActionKind, BattleAction, Phase
from pokebattle.core.moves import StatusEffect
from pokebattle.core.teams import available_teams, npc_opponents
from pokebattle.core.view import PlayerView
from pokebattle.data.store import SqlSessionStore
from pokebattle.errors import BattleServiceError
from pokebattle.service import BattleService
from pokebattle.utils.config import Config

# Create main app
app = typer.Typer(
    name="pokebattle",
    help="PokeBattle - turn-based Pokemon battles against NPC trainers",
    no_args_is_help=True,
)

console = Console()

PLAYER_ID = "player_1"


def _service(config: Config) -> BattleService:
    return BattleService(SqlSessionStore(config), config=config)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """PokeBattle - battle NPC gym leaders from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("version")
def show_version() -> None:
    """Show version information."""
    console.print(f"PokeBattle v{__version__}")


@app.command("teams")
def list_teams() -> None:
    """List the prefab teams you can battle with."""
    table = Table(title="Prefab Teams", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Pokemon", justify="right")
    table.add_column("Avg Lv", justify="right")
    table.add_column("Description", style="dim")

    for team in available_teams():
        table.add_row(
            team.id, team.name, str(team.pokemon_count), str(team.average_level), team.description,
        )
    console.print(table)


@app.command("opponents")
def list_opponents() -> None:
    """List the NPC opponents you can challenge."""
    difficulty_style = {"easy": "green", "medium": "yellow", "hard": "red"}
    table = Table(title="NPC Opponents", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Difficulty")
    table.add_column("Description", style="dim")

    for opp in npc_opponents():
        style = difficulty_style.get(opp.difficulty, "white")
        table.add_row(opp.id, opp.name, f"[{style}]{opp.difficulty}[/{style}]", opp.description)
    console.print(table)


# ---------------------------------------------------------------------------
# Interactive battle
# ---------------------------------------------------------------------------


def _hp_bar(current: int, maximum: int, width: int = 20) -> str:
    if maximum <= 0:
        return ""
    filled = round(width * current / maximum)
    pct = current / maximum
    color = "green" if pct > 0.5 else "yellow" if pct > 0.2 else "red"
    return f"[{color}]{'█' * filled}[/{color}]{'░' * (width - filled)} {current}/{maximum}"


def _render_view(view: PlayerView) -> None:
    opp = view.opponent
    lines = [f"[bold]{opp.trainer_name}[/bold]  ({opp.remaining_pokemon_count}/{opp.team_size} left)"]
    if opp.active_pokemon:
        mon = opp.active_pokemon
        status = "" if mon.status == StatusEffect.NONE else f" [magenta]{mon.status.value.upper()}[/magenta]"
        lines.append(f"  {mon.name} Lv{mon.level}{status}")
        lines.append(f"  {_hp_bar(mon.current_hp, mon.max_hp)}")

    own = view.own_team
    active = own.pokemon[own.active_index]
    status = "" if active.status == StatusEffect.NONE else f" [magenta]{active.status.value.upper()}[/magenta]"
    lines.append("")
    lines.append(f"[bold]You[/bold]: {active.name} Lv{active.level}{status}")
    lines.append(f"  {_hp_bar(active.current_hp, active.max_hp)}")

    console.print(Panel("\n".join(lines), title=f"Turn {view.turn_number}", box=box.ROUNDED))


def _action_label(action: BattleAction, view: PlayerView) -> str:
    own = view.own_team
    if action.kind == ActionKind.USE_MOVE:
        move = own.pokemon[own.active_index].moves[action.move_index]
        return f"{move.display_name} ({move.type}, PP {move.pp}/{move.max_pp})"
    if action.kind == ActionKind.SWITCH:
        mon = own.pokemon[action.switch_to]
        return f"Switch to {mon.name} ({mon.current_hp}/{mon.max_hp} HP)"
    return "Forfeit"


def _outcome_text(phase: Phase, view: PlayerView) -> str:
    if phase == Phase.DRAW:
        return "[yellow]The battle ended in a draw.[/yellow]"
    # The player is always side 0 in local play
    if phase.winner_side == 0:
        return "[bold green]You won the battle![/bold green]"
    return f"[bold red]{view.opponent.trainer_name} won the battle.[/bold red]"


@app.command("play")
def play(
    team: str = typer.Option("charizard_team", "--team", "-t", help="Prefab team ID"),
    opponent: str = typer.Option("gym_leader_easy", "--opponent", "-o", help="NPC opponent ID"),
    name: str = typer.Option("Trainer", "--name", "-n", help="Your trainer name"),
) -> None:
    """Battle an NPC opponent interactively."""
    _play(_service(Config.from_env()), name, team, opponent)


def _play(service: BattleService, name: str, team: str, opponent: str) -> None:
    try:
        created = service.create_npc_session(PLAYER_ID, name, team, opponent)
    except BattleServiceError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from None

    session_id = created.session_id
    console.print(f"[dim]Battle {session_id}[/dim]")

    while True:
        view = service.get_view(session_id, PLAYER_ID)
        _render_view(view)
        if view.phase.is_terminal:
            console.print(_outcome_text(view.phase, view))
            break

        actions = service.get_valid_actions(session_id, PLAYER_ID)
        if not actions:
            console.print("[red]No actions available.[/red]")
            raise typer.Exit(1)
        for i, action in enumerate(actions, start=1):
            console.print(f"  [cyan]{i}[/cyan]. {_action_label(action, view)}")

        choice = typer.prompt("Choose an action", type=int)
        if choice < 1 or choice > len(actions):
            console.print(f"[red]Pick a number between 1 and {len(actions)}.[/red]")
            continue

        try:
            result = service.submit_action(session_id, PLAYER_ID, actions[choice - 1])
        except BattleServiceError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            continue

        for line in result.events:
            console.print(f"  {line}")
