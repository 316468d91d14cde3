"""CLI commands for managing election events."""

import asyncio
from datetime import date
from typing import Annotated

import typer

event_app = typer.Typer()


@event_app.command("create")
def create(
    state: Annotated[str, typer.Option("--state", help="Two-letter pilot state code")],
    title: Annotated[str, typer.Option("--title", help="Event title")],
    election_date: Annotated[str, typer.Option("--date", help="Election date (YYYY-MM-DD)")],
    event_type: Annotated[
        str,
        typer.Option("--type", help="Event type: primary, general, midterm, special, runoff"),
    ] = "general",
    county: Annotated[str | None, typer.Option("--county", help="County, for local elections")] = None,
    public: Annotated[bool, typer.Option("--public", help="Make the event publicly listed")] = False,
) -> None:
    """Create an upcoming election event."""
    try:
        parsed_date = date.fromisoformat(election_date)
    except ValueError as e:
        typer.echo(f"Error: invalid date '{election_date}', expected YYYY-MM-DD", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_create_impl(state, title, parsed_date, event_type, county, "public" if public else "private"))


async def _create_impl(
    state: str,
    title: str,
    election_date: date,
    event_type: str,
    county: str | None,
    visibility: str,
) -> None:
    """Async implementation of the create command."""
    from voter_guide.core.config import get_settings
    from voter_guide.core.database import standalone_session
    from voter_guide.services.election_event_service import create_event

    settings = get_settings()

    try:
        async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
            event = await create_event(
                session,
                state=state,
                title=title,
                event_type=event_type,
                election_date=election_date,
                county=county,
                visibility=visibility,
            )
            typer.echo(f"Created election event {event.id}")
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@event_app.command("list")
def list_cmd(
    archived: Annotated[bool, typer.Option("--archived", help="List archived events instead")] = False,
) -> None:
    """List election events."""
    asyncio.run(_list_impl(archived))


async def _list_impl(archived: bool) -> None:
    """Async implementation of the list command."""
    from voter_guide.core.config import get_settings
    from voter_guide.core.database import standalone_session
    from voter_guide.services.election_event_service import list_events

    settings = get_settings()

    async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
        events = await list_events(session, archived=archived)
        typer.echo(f"{'ID':<36} {'State':<6} {'Date':<12} {'Status':<10} {'Visibility':<10}")
        typer.echo("-" * 78)
        for event in events:
            typer.echo(
                f"{event.id:<36} {event.state:<6} {event.election_date.isoformat():<12} "
                f"{event.status:<10} {event.visibility:<10}"
            )
        typer.echo(f"\nTotal: {len(events)}")


@event_app.command("archive")
def archive(event_id: Annotated[str, typer.Argument(help="Election event id")]) -> None:
    """Archive an election event."""
    asyncio.run(_set_archived_impl(event_id, archived=True))


@event_app.command("restore")
def restore(event_id: Annotated[str, typer.Argument(help="Election event id")]) -> None:
    """Restore an archived election event."""
    asyncio.run(_set_archived_impl(event_id, archived=False))


async def _set_archived_impl(event_id: str, *, archived: bool) -> None:
    """Async implementation of the archive and restore commands."""
    from voter_guide.core.config import get_settings
    from voter_guide.core.database import standalone_session
    from voter_guide.services.election_event_service import ElectionEventNotFoundError, set_archived

    settings = get_settings()

    try:
        async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
            event = await set_archived(session, event_id, archived=archived)
            typer.echo(f"{'Archived' if archived else 'Restored'} election event {event.id}")
    except ElectionEventNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@event_app.command("transition")
def transition() -> None:
    """Mark long-past upcoming events as passed."""
    asyncio.run(_transition_impl())


async def _transition_impl() -> None:
    """Async implementation of the transition command."""
    from voter_guide.core.config import get_settings
    from voter_guide.core.database import standalone_session
    from voter_guide.services.election_event_service import transition_passed_events

    settings = get_settings()

    async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
        count = await transition_passed_events(session, grace_days=settings.event_passed_grace_days)
        typer.echo(f"Transitioned {count} election events to passed")
