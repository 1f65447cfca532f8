"""
Tidepool CLI - Spaced repetition on a desert island.

Every review rolls a gathering round on the island: better recall means
better loot, companions and crafted tools boost what you find, and the
raft gets you home.

Usage:
    tidepool add "Front" "Back"    # Add a card
    tidepool study                 # Review due cards and gather loot
    tidepool preview               # Show the due queue with interval previews
    tidepool stats                 # Level, streak, raft progress, sessions
    tidepool inventory             # What you have gathered
    tidepool craft [RECIPE]        # List recipes or craft one
    tidepool pet [COMPANION]       # List companions or pick the active one
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import Settings, get_settings
from src.core.errors import InvalidStateError
from src.core.providers import SeededRandom, SystemClock
from src.island.catalog import RECIPES, available_recipes, get_resource
from src.island.companions import all_companions, next_companion
from src.island.crafting import can_craft, craft_item
from src.island.loot import unlocked_locations
from src.island.models import Location
from src.island.modifiers import describe_active_tools
from src.island.progression import xp_required_for_level
from src.srs.due_queue import card_counts, due_items
from src.srs.models import RecallQuality, create_item
from src.srs.scheduler import SM2Scheduler, format_interval

from .session import ReviewStep, SessionManager
from .state_store import StateStore

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="tidepool",
    help="🏝️ Tidepool - Spaced repetition with an island survival game",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

RATING_KEYS = {
    "1": RecallQuality.FAIL,
    "2": RecallQuality.HARD,
    "3": RecallQuality.GOOD,
    "4": RecallQuality.EASY,
}

RARITY_STYLES = {
    "common": "white",
    "rare": "cyan",
    "very_rare": "magenta",
    "legendary": "bold yellow",
}


def _open_store(settings: Settings) -> StateStore:
    return StateStore(Path(settings.database_path).expanduser())


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{message}</level>")


# =============================================================================
# Cards
# =============================================================================


@app.command()
def add(
    front: Annotated[str, typer.Argument(help="Prompt side of the card")],
    back: Annotated[str, typer.Argument(help="Answer side of the card")],
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Category label")
    ] = None,
    tag: Annotated[
        list[str] | None, typer.Option("--tag", "-t", help="Tag (repeatable)")
    ] = None,
) -> None:
    """
    Add a new card. It is due immediately.

    Examples:
        tidepool add "2 + 2" "4"
        tidepool add "Capital of France" "Paris" -c geography -t europe
    """
    store = _open_store(get_settings())
    item = create_item(front, back, SystemClock().now(), category=category, tags=tuple(tag or ()))
    store.add_item(item)
    store.close()

    console.print(f"[green]✓[/] Added card [dim]{item.id}[/]")


@app.command()
def preview(
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Queue size (defaults to session limit)")
    ] = None,
) -> None:
    """
    Show the due queue without starting a session.

    Each row shows the interval every button would schedule.
    """
    settings = get_settings()
    store = _open_store(settings)
    items = store.load_items()
    store.close()

    now = SystemClock().now()
    counts = card_counts(items, now)
    queue = due_items(items, now, limit=limit or settings.session_card_limit)
    scheduler = SM2Scheduler()

    console.print(
        f"[bold]{counts['due']}[/] due  ·  "
        f"[cyan]{counts['new']}[/] new  ·  "
        f"[yellow]{counts['learning']}[/] learning  ·  "
        f"[green]{counts['review']}[/] review"
    )

    if not queue:
        console.print("[green]Nothing due. All caught up![/]")
        return

    table = Table(title=f"Due Queue ({len(queue)} cards)")
    table.add_column("#", style="dim", width=3)
    table.add_column("Front", style="white")
    table.add_column("Status", style="yellow")
    for quality in RecallQuality:
        table.add_column(quality.value.title(), style="cyan")

    for i, item in enumerate(queue):
        front = item.front[:40] + "..." if len(item.front) > 40 else item.front
        labels = scheduler.preview_labels(item, now)
        table.add_row(
            str(i + 1),
            front,
            item.status.value,
            *(labels[quality] for quality in RecallQuality),
        )

    console.print(table)


# =============================================================================
# Study
# =============================================================================


def _render_step(step: ReviewStep) -> None:
    outcome = step.outcome
    lines = [f"[dim]{step.location.value.title()}[/]  ·  next review in {format_interval(step.next_interval)}"]

    if outcome.found:
        resource = get_resource(outcome.resource_id)
        style = RARITY_STYLES.get(outcome.rarity.value, "white")
        lines.append(f"Found [{style}]{resource.emoji} {resource.name} x{outcome.quantity}[/] ({outcome.rarity.value})")
        if step.added < outcome.quantity:
            lines.append(f"[dim]Stack full: kept {step.added}[/]")
    else:
        lines.append("[dim]Nothing found this time.[/]")

    lines.extend(f"[green]+ {entry}[/]" for entry in step.bonus_log)
    lines.append(f"[yellow]+{step.xp} XP[/]")

    if step.level_change and step.level_change.leveled_up:
        lines.append(f"[bold magenta]Level up! You are now level {step.level_change.new_level}[/]")
    for companion_id in step.unlocked_companions:
        lines.append(f"[bold magenta]New companion unlocked: {companion_id}[/]")

    console.print(Panel("\n".join(lines), title="Island", border_style="green"))


@app.command()
def study(
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Maximum cards this session")
    ] = None,
    location: Annotated[
        Location | None, typer.Option("--location", "-l", help="Gather at one location")
    ] = None,
) -> None:
    """
    Review due cards. Every answer gathers loot on the island.

    Rate each card 1=Again, 2=Hard, 3=Good, 4=Easy (q to stop early).
    """
    settings = get_settings()
    store = _open_store(settings)
    manager = SessionManager(
        store,
        rng=SeededRandom(settings.rng_seed),
        session_limit=limit or settings.session_card_limit,
        default_companion=settings.default_companion,
    )

    session = manager.start_session()
    learner = manager.learner

    if location is not None and location not in unlocked_locations(learner.level):
        console.print(f"[yellow]{location.value.title()} is still locked; gathering anywhere.[/]")
        location = None

    if manager.queue_size == 0:
        manager.end_session()
        store.close()
        console.print("[green]Nothing due. All caught up![/]")
        return

    console.print(Panel(
        f"[bold cyan]STUDY SESSION[/]\n"
        f"Cards: {manager.queue_size}\n"
        f"Level: {learner.level}  ·  Companion: {learner.active_companion or 'none'}",
        title="[bold]Tidepool[/]",
        border_style="cyan",
    ))

    try:
        while (card := manager.current_card()) is not None:
            position = manager.queue_size - manager.remaining + 1
            console.print(f"\n[bold cyan]Card {position}/{manager.queue_size}[/] [dim]{card.status.value}[/]")
            console.print(Panel(f"[cyan]{card.front}[/]", title="Question", border_style="blue"))

            Prompt.ask("[dim]Press Enter to reveal[/]", default="", show_default=False)
            console.print(Panel(f"[green]{card.back}[/]", title="Answer", border_style="green"))

            rating = Prompt.ask(
                "[dim]Rate (1=Again, 2=Hard, 3=Good, 4=Easy, q=quit)[/]",
                choices=[*RATING_KEYS, "q"],
                show_choices=False,
            )
            if rating == "q":
                break

            step = manager.review_card(RATING_KEYS[rating], location=location)
            _render_step(step)
    except (KeyboardInterrupt, EOFError):
        console.print()
    finally:
        session = manager.end_session()
        store.close()

    if session.cards_reviewed == 0:
        console.print("[dim]Session ended without reviews.[/]")
        return

    found = ", ".join(
        f"{get_resource(rid).emoji} {qty}" for rid, qty in sorted(session.items_found.items())
    ) or "nothing"
    console.print(Panel(
        f"[bold]Session Complete[/]\n\n"
        f"Reviewed: {session.cards_reviewed}\n"
        f"XP earned: {session.xp_earned}\n"
        f"Gathered: {found}",
        title="Summary",
        border_style="green",
    ))


# =============================================================================
# Island
# =============================================================================


@app.command()
def stats() -> None:
    """Show level, streak, raft progress and recent sessions."""
    store = _open_store(get_settings())
    learner = store.load_learner()
    totals = store.get_stats()
    history = store.get_session_history(limit=5)
    store.close()

    progress = learner.progress
    upcoming = next_companion(progress.level)
    next_pet = f"{upcoming.emoji} {upcoming.name} at level {upcoming.unlock_level}" if upcoming else "all unlocked"
    raft = "  ".join(
        f"{'[green]✓[/]' if done else '[dim]·[/]'} {RECIPES[part].name}"
        for part, done in learner.raft_progress.items()
    )

    console.print(Panel(
        f"Level [bold]{progress.level}[/]  "
        f"({progress.current_xp}/{xp_required_for_level(progress.level)} XP, "
        f"{progress.level_percent:.0f}%)\n"
        f"Total XP: {progress.total_xp}\n"
        f"Streak: {progress.current_streak} days (best {progress.longest_streak})\n"
        f"Cards: {totals['total_items']}  ·  Reviews: {progress.total_items_reviewed}  ·  "
        f"Sessions: {totals['sessions_completed']}\n"
        f"Locations: {', '.join(loc.value for loc in unlocked_locations(progress.level))}\n"
        f"Next companion: {next_pet}\n\n"
        f"Raft ({learner.raft_percent:.0f}%): {raft}",
        title="🏝️ Island Stats",
        border_style="cyan",
    ))

    if learner.has_escaped:
        console.print("[bold yellow]You built the raft and escaped the island![/]")

    if history:
        table = Table(title="Recent Sessions")
        table.add_column("Started", style="dim")
        table.add_column("Cards", justify="right")
        table.add_column("XP", justify="right", style="yellow")
        for record in history:
            table.add_row(
                record.started_at.strftime("%Y-%m-%d %H:%M"),
                str(record.cards_reviewed),
                str(record.xp_earned),
            )
        console.print(table)


@app.command()
def inventory() -> None:
    """Show gathered resources and crafted tools."""
    store = _open_store(get_settings())
    learner = store.load_learner()
    store.close()

    if not len(learner.inventory):
        console.print("[dim]Your inventory is empty. Study to gather resources![/]")
    else:
        table = Table(title="Inventory")
        table.add_column("Resource")
        table.add_column("Rarity")
        table.add_column("Qty", justify="right")
        for resource_id, quantity in learner.inventory:
            resource = get_resource(resource_id)
            style = RARITY_STYLES.get(resource.rarity.value, "white")
            table.add_row(
                f"{resource.emoji} {resource.name}",
                f"[{style}]{resource.rarity.value}[/]",
                f"{quantity}/{resource.max_stack}",
            )
        console.print(table)

    tools = [line for loc in Location for line in describe_active_tools(learner.crafted_items, loc)]
    if tools:
        console.print("[bold]Active tools:[/] " + ", ".join(dict.fromkeys(tools)))


@app.command()
def craft(
    recipe_id: Annotated[
        str | None, typer.Argument(help="Recipe to craft (omit to list recipes)")
    ] = None,
) -> None:
    """
    List recipes, or craft one from your inventory.

    Examples:
        tidepool craft              # What can I make?
        tidepool craft stone_axe    # Make a stone axe
    """
    settings = get_settings()
    store = _open_store(settings)
    learner = store.load_learner()

    if recipe_id is None:
        store.close()
        table = Table(title=f"Recipes (level {learner.level})")
        table.add_column("Id", style="dim")
        table.add_column("Item")
        table.add_column("Needs")
        table.add_column("Level", justify="right")
        table.add_column("Ready", justify="center")
        available = {r.id for r in available_recipes(learner.level)}
        for recipe in RECIPES.values():
            needs = ", ".join(f"{get_resource(rid).emoji} {qty}" for rid, qty in recipe.ingredients)
            done = "[green]✓[/]" if recipe.id in learner.crafted_items else ""
            ready = "[green]yes[/]" if recipe.id in available and can_craft(recipe, learner) else "[dim]no[/]"
            table.add_row(recipe.id, f"{recipe.emoji} {recipe.name} {done}", needs, str(recipe.required_level), ready)
        console.print(table)
        return

    result = craft_item(recipe_id, learner, SeededRandom(settings.rng_seed), SystemClock().now())
    if result.success:
        store.save_learner(learner)
    store.close()

    if not result.success:
        console.print(f"[red]Cannot craft {recipe_id}: {result.reason}[/]")
        raise typer.Exit(1)

    recipe = RECIPES[recipe_id]
    for message in result.messages:
        console.print(f"[green]{message}[/]")
    console.print(f"[green]✓[/] Crafted {recipe.emoji} {recipe.name}  [yellow]+{result.xp_event.amount} XP[/]")
    if result.level_change and result.level_change.leveled_up:
        console.print(f"[bold magenta]Level up! You are now level {result.level_change.new_level}[/]")
    for companion_id in result.unlocked_companions:
        console.print(f"[bold magenta]New companion unlocked: {companion_id}[/]")
    if learner.has_escaped:
        console.print("[bold yellow]The raft is ready. You escaped the island![/]")


@app.command()
def pet(
    companion_id: Annotated[
        str | None, typer.Argument(help="Companion to make active (omit to list)")
    ] = None,
    dismiss: Annotated[
        bool, typer.Option("--dismiss", help="Study without a companion")
    ] = False,
) -> None:
    """List companions or choose the active one."""
    store = _open_store(get_settings())
    learner = store.load_learner()

    if dismiss or companion_id is not None:
        if not learner.set_active_companion(None if dismiss else companion_id):
            store.close()
            console.print(f"[red]{companion_id} is not unlocked yet.[/]")
            raise typer.Exit(1)
        store.save_learner(learner)
        store.close()
        console.print(f"[green]✓[/] Active companion: {learner.active_companion or 'none'}")
        return

    store.close()
    table = Table(title="Companions")
    table.add_column("Id", style="dim")
    table.add_column("Companion")
    table.add_column("Level", justify="right")
    table.add_column("Ability")
    table.add_column("Status")
    for companion in all_companions():
        if companion.id == learner.active_companion:
            status = "[bold green]active[/]"
        elif companion.id in learner.unlocked_companions:
            status = "[green]unlocked[/]"
        else:
            status = "[dim]locked[/]"
        table.add_row(
            companion.id,
            f"{companion.emoji} {companion.name}",
            str(companion.unlock_level),
            companion.ability_description,
            status,
        )
    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
) -> None:
    """
    🏝️ Tidepool - Spaced repetition with an island survival game

    \b
    Quick Start:
      tidepool add "Front" "Back"   # Add a card
      tidepool study                # Review and gather
      tidepool craft                # See what you can build
    """
    if verbose:
        _configure_logging("DEBUG")


def main() -> None:
    """Entry point for the CLI."""
    try:
        _configure_logging(get_settings().log_level)
    except ValueError as e:
        logger.remove()
        logger.add(sys.stderr, level="WARNING", format="<level>{message}</level>")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    try:
        app()
    except InvalidStateError as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)


if __name__ == "__main__":
    main()
