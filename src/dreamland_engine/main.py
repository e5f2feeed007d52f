"""CLI startup entrypoint for Dreamland Engine."""

from __future__ import annotations

import typer
from rich import print

from dreamland_engine.cli import GameSession, build_session
from dreamland_engine.config import settings
from dreamland_engine.effects import LoggingEffectSink
from dreamland_engine.persistence import SaveRepositoryError
from dreamland_engine.telemetry.logging import configure_logging

app = typer.Typer(help="Dreamland Engine simulation and crafting toolbox")


def _session(seed: int | None = None) -> GameSession:
    configure_logging(settings.log_level)
    return build_session(settings, seed=seed)


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "log_level": settings.log_level,
            "balance_path": settings.balance_path,
            "catalog_path": settings.catalog_path,
            "save_directory": settings.save_directory,
            "tick_duration_ms": settings.tick_duration_ms,
            "random_seed": settings.random_seed,
        }
    )


@app.command()
def simulate(
    ticks: int = typer.Option(20, min=1, help="How many ticks to run"),
    width: int = typer.Option(8, min=1, help="World width in chunks"),
    height: int = typer.Option(8, min=1, help="World height in chunks"),
    seed: int = typer.Option(None, help="Random seed; defaults to DREAMLAND_RANDOM_SEED"),
    load: str = typer.Option(None, help="Continue from this save slot instead of generating a world"),
    save: str = typer.Option(None, help="Save slot to write when the run finishes"),
) -> None:
    """Run the ecological simulation and print narrative events."""
    session = _session(seed)
    try:
        if load:
            if not session.load(load):
                print({"error": f"Save slot {load!r} is empty"})
                raise typer.Exit(code=1)
        else:
            session.new_world(width, height)
        reports = session.advance(ticks)
        if save:
            session.save(save)
    except SaveRepositoryError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)

    for report in reports:
        for message in report.messages:
            print(f"[dim]tick {report.tick}[/dim] {message.text}")
    simulation = session.simulation
    print(
        {
            "tick": simulation.tick,
            "creatures": len(simulation.creatures),
            "plants": sum(len(chunk.plants) for chunk in simulation.world),
            "births": sum(len(r.creatures.births) for r in reports),
            "deaths": sum(len(r.creatures.deaths) for r in reports),
            "saved_to": save,
        }
    )


@app.command("recipe-cost")
def recipe_cost(recipe_id: str) -> None:
    session = _session()
    cost = session.recipe_cost(recipe_id)
    if not cost:
        print({"recipe_id": recipe_id, "error": "Unknown recipe"})
        raise typer.Exit(code=1)
    print({"recipe_id": recipe_id, "cost": [{"id": stack.id, "quantity": stack.quantity} for stack in cost]})


@app.command("craft-time")
def craft_time(recipe_id: str) -> None:
    session = _session()
    seconds = session.craft_time(recipe_id)
    if seconds is None:
        print({"recipe_id": recipe_id, "error": "Unknown recipe"})
        raise typer.Exit(code=1)
    print({"recipe_id": recipe_id, "craft_time_seconds": seconds})


@app.command()
def craft(
    recipe_id: str,
    stock: bool = typer.Option(True, help="Stock the inventory with the recipe's ingredients first"),
) -> None:
    """Craft a recipe against a fresh inventory."""
    session = _session()
    if stock:
        for stack in session.recipe_cost(recipe_id):
            session.give_item(stack.id, stack.quantity)
    result = session.craft(recipe_id)
    LoggingEffectSink().execute(result.effects)
    print(
        {
            "success": result.success,
            "message": result.message.en,
            "item": result.item.id if result.item else None,
            "craft_time_seconds": result.craft_time_seconds,
        }
    )
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def cook(
    recipe_id: str,
    ingredients: list[str] = typer.Argument(..., help="Ingredient item ids"),
    temperature: float = typer.Option(None, help="Oven temperature in °C"),
    spice: str = typer.Option(None, help="Spice item id"),
    stock: bool = typer.Option(True, help="Stock ingredients, spice and water first"),
) -> None:
    """Cook a recipe and print the resulting dishes."""
    session = _session()
    if stock:
        for item_id in [*ingredients, *([spice] if spice else []), "water"]:
            session.give_item(item_id)
    output = session.cook(recipe_id, ingredients, temperature=temperature, spice_item_id=spice)
    LoggingEffectSink().execute(output.effects)
    outcome = output.outcome
    print(
        {
            "success": output.success,
            "message": outcome.message.en if outcome else output.effects[-1].message.en,
            "quality": outcome.quality.value if outcome and outcome.quality else None,
            "items": [
                {"id": item.id, "quantity": item.quantity, "effects": {e.type.value: e.amount for e in item.effects}}
                for item in (outcome.items if outcome else [])
            ],
        }
    )
    if not output.success:
        raise typer.Exit(code=1)


@app.command()
def saves() -> None:
    """List save slots, newest first."""
    session = _session()
    print(
        [
            {
                "slot": summary.slot_id,
                "tick": summary.tick,
                "season": summary.season.value,
                "saved_at": summary.saved_at.isoformat(),
                "chunks": summary.chunk_count,
                "creatures": summary.creature_count,
            }
            for summary in session.list_saves()
        ]
    )


if __name__ == "__main__":
    app()
