"""User management CLI commands."""

import asyncio

import typer

user_app = typer.Typer()


@user_app.command("create")
def create_user(
    username: str = typer.Option(..., prompt=True, help="Username"),
    email: str | None = typer.Option(None, help="Email address"),
    first_name: str | None = typer.Option(None, "--first-name", help="First name"),
    last_name: str | None = typer.Option(None, "--last-name", help="Last name"),
    state: str | None = typer.Option(None, help="Two-letter state code"),
    if_not_exists: bool = typer.Option(
        False,
        "--if-not-exists",
        help="Exit successfully if user already exists (idempotent mode)",
    ),
) -> None:
    """Register a user so voter cards can be attached to a public profile."""
    asyncio.run(
        _create_user(
            username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            state=state,
            if_not_exists=if_not_exists,
        )
    )


async def _create_user(
    username: str,
    *,
    email: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    state: str | None = None,
    if_not_exists: bool = False,
) -> None:
    """Async implementation of user creation."""
    from voter_guide.core.config import get_settings
    from voter_guide.core.database import standalone_session
    from voter_guide.schemas.user import UserCreateRequest
    from voter_guide.services.user_service import create_user

    settings = get_settings()

    try:
        async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
            request = UserCreateRequest(
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
                state=state,
            )
            user = await create_user(session, request)
            typer.echo(f"User '{user.username}' created")
    except ValueError as e:
        # NOTE: This relies on user_service.create_user raising a ValueError
        # whose message contains "already exists" when the user already exists.
        if if_not_exists and "already exists" in str(e):
            typer.echo(f"User '{username}' already exists, skipping (--if-not-exists)")
            return
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
