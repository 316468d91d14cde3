"""CLI command for loading reference ballot data from a JSON seed file."""

import asyncio
import json
from pathlib import Path

import typer


def seed(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Seed JSON file"),
) -> None:
    """Load ZIP codes, districts, races, candidates, measures, and events.

    Loading is idempotent: re-running the same file updates rows in place.
    """
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        typer.echo(f"Error: {file} is not valid JSON: {e}", err=True)
        raise typer.Exit(code=1) from e
    if not isinstance(data, dict):
        typer.echo(f"Error: {file} must contain a JSON object", err=True)
        raise typer.Exit(code=1)

    asyncio.run(_seed_impl(data))


async def _seed_impl(data: dict) -> None:
    """Async implementation of the seed command."""
    from voter_guide.core.config import get_settings
    from voter_guide.core.database import standalone_session
    from voter_guide.services.seed_service import load_seed_data

    settings = get_settings()

    async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
        counts = await load_seed_data(session, data)
    for section, count in counts.items():
        typer.echo(f"{section:<20} {count}")
