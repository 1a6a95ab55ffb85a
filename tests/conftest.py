"""Pytest configuration and shared fixtures."""

import os

import psycopg
import pytest
import pytest_asyncio

from seedwright import Seeder, SeedOrchestrator, StagingContext, clear_seeders

DATABASE_URL = os.getenv("SEEDWRIGHT_TEST_DATABASE_URL")


class RecordingContext(StagingContext):
    """Staging context that logs flush/clear next to unit events."""

    def __init__(self):
        super().__init__()
        self.events: list[str] = []

    async def flush(self) -> None:
        self.events.append("flush")
        await super().flush()

    def clear(self) -> None:
        self.events.append("clear")
        super().clear()


@pytest.fixture
def context() -> StagingContext:
    """Provide an in-memory persistence context."""
    return StagingContext()


@pytest.fixture
def recording_context() -> RecordingContext:
    """Provide an in-memory context that records lifecycle events."""
    return RecordingContext()


@pytest.fixture(autouse=True)
def _clean_registry():
    """Keep the global seeder registry empty between tests."""
    yield
    clear_seeders()


@pytest_asyncio.fixture
async def seeded(request, context: StagingContext):
    """
    Fixture for seed runs - works with @seed_with() decorator.

    Runs every unit recorded by the decorator, in order, inside one
    top-level run so they share one SharedContext. Returns the SeedRun.
    """
    units = getattr(request.function, "_seed_units", None)
    if not units:
        return None

    class TestSeeds(Seeder):
        async def run(self, ctx, shared):
            await self.call(ctx, shared, units)

    return await SeedOrchestrator().run(TestSeeds, context)


@pytest_asyncio.fixture
async def db_conn():
    """
    Provide a test database connection.

    Skips unless SEEDWRIGHT_TEST_DATABASE_URL points at a PostgreSQL
    database the tests may create schemas in.
    """
    if not DATABASE_URL:
        pytest.skip("SEEDWRIGHT_TEST_DATABASE_URL not set")

    conn = await psycopg.AsyncConnection.connect(DATABASE_URL)

    yield conn

    await conn.rollback()
    await conn.close()


@pytest_asyncio.fixture
async def test_schema(db_conn) -> str:
    """
    Create a test schema with author and book tables.

    Returns the schema name.
    """
    schema_name = "test_seedwright"

    async with db_conn.cursor() as cur:
        await cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        await cur.execute(f"CREATE SCHEMA {schema_name}")
        await cur.execute(f"""
            CREATE TABLE {schema_name}.author (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
        await cur.execute(f"""
            CREATE TABLE {schema_name}.book (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                title TEXT NOT NULL,
                author_id INTEGER REFERENCES {schema_name}.author(id)
            )
        """)
    await db_conn.commit()

    yield schema_name

    await db_conn.rollback()
    async with db_conn.cursor() as cur:
        await cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
    await db_conn.commit()
