"""Engine and session lifecycle for the API process and one-shot CLI commands.

The API holds one module-level engine between startup and shutdown.  CLI
commands open a short-lived engine through ``standalone_session``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

DEFAULT_POOL_SIZE = 10
DEFAULT_MAX_OVERFLOW = 5

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the engine created by ``init_engine``.

    Raises:
        RuntimeError: If no engine is active.
    """
    if _engine is None:
        msg = "Database engine not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the active engine.

    Raises:
        RuntimeError: If no engine is active.
    """
    if _session_factory is None:
        msg = "Session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)
    return _session_factory


def _engine_options(database_url: str, schema: str | None, options: dict[str, object]) -> dict[str, object]:
    backend = make_url(database_url).get_backend_name()

    if schema is not None:
        if backend == "postgresql":
            connect_args = options.pop("connect_args", {})
            if not isinstance(connect_args, dict):
                msg = "connect_args must be a dict"
                raise TypeError(msg)
            connect_args["server_settings"] = {"search_path": f"{schema},public"}
            options["connect_args"] = connect_args
        else:
            logger.warning(f"Ignoring database schema {schema!r} for {backend} database")

    if backend != "sqlite" and options.get("poolclass") is not StaticPool:
        options.setdefault("pool_size", DEFAULT_POOL_SIZE)
        options.setdefault("max_overflow", DEFAULT_MAX_OVERFLOW)
    return options


def init_engine(database_url: str, *, schema: str | None = None, **kwargs: object) -> AsyncEngine:
    """Create the process-wide engine and session factory.

    Args:
        database_url: Async connection string (``postgresql+asyncpg`` or
            ``sqlite+aiosqlite``).
        schema: PostgreSQL schema placed first on the ``search_path``.
            Ignored for other backends.
        **kwargs: Passed through to ``create_async_engine``.  Pool sizing
            defaults apply to pooled PostgreSQL engines only.

    Returns:
        The new engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_async_engine(database_url, **_engine_options(database_url, schema, dict(kwargs)))
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


async def dispose_engine() -> None:
    """Close the engine's connections and forget it."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


@asynccontextmanager
async def standalone_session(database_url: str, *, schema: str | None = None) -> AsyncIterator[AsyncSession]:
    """Yield a session on a fresh engine that is disposed on exit.

    Used by CLI commands, which run outside the API lifespan.
    """
    init_engine(database_url, schema=schema)
    try:
        async with get_session_factory()() as session:
            yield session
    finally:
        await dispose_engine()
