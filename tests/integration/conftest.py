"""Integration test fixtures for database and HTTP client operations.

Storage-backed tests run against a throwaway SQLite file per test, so the
unique indexes (one idea per owner, one pending request per owner) are real.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import AsyncExitStack

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.sparkhub.api.dependencies import get_db_session, get_notification_sink
from src.sparkhub.core.db import get_session_factory
from src.sparkhub.core.locks import OwnerLocks, get_owner_locks
from src.sparkhub.core.notifications import NotificationSink
from src.sparkhub.main import create_app
from src.sparkhub.models import User
from src.sparkhub.repositories import (
    IdeaRepository,
    SupervisionRequestRepository,
    UserRepository,
)
from src.sparkhub.services.idea_service import IdeaService
from src.sparkhub.services.supervision_coordinator import SupervisionCoordinator
from src.sparkhub.services.user_lookup import DatabaseUserLookup
from tests.helpers import RecordingSink, create_supervisor, create_user


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Create a fresh SQLite database with all tables."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sparkhub.db'}", poolclass=NullPool
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for seeding and asserting. Tests must commit explicitly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def owner(db_session: AsyncSession) -> User:
    return await create_user(db_session, full_name="Olivia Owner")


@pytest.fixture
async def supervisor(db_session: AsyncSession) -> User:
    return await create_supervisor(db_session, full_name="Sam Supervisor")


@pytest.fixture
async def other_supervisor(db_session: AsyncSession) -> User:
    return await create_supervisor(db_session, full_name="Yara Supervisor")


@pytest.fixture
async def stranger(db_session: AsyncSession) -> User:
    return await create_user(db_session, full_name="Sid Stranger")


@pytest.fixture
async def make_coordinator(
    session_factory: async_sessionmaker[AsyncSession],
    owner_locks: OwnerLocks,
    recording_sink: RecordingSink,
) -> AsyncGenerator[Callable[..., SupervisionCoordinator]]:
    """Build coordinators that each own a session, like concurrent API requests."""
    async with AsyncExitStack() as stack:

        def _make(notifier: NotificationSink | None = None) -> SupervisionCoordinator:
            session = session_factory()
            stack.push_async_callback(session.close)
            return SupervisionCoordinator(
                IdeaRepository(session),
                SupervisionRequestRepository(session),
                session,
                DatabaseUserLookup(UserRepository(session)),
                notifier or recording_sink,
                owner_locks,
            )

        yield _make


@pytest.fixture
def coordinator(make_coordinator: Callable[..., SupervisionCoordinator]) -> SupervisionCoordinator:
    return make_coordinator()


@pytest.fixture
async def idea_service(
    session_factory: async_sessionmaker[AsyncSession],
    owner_locks: OwnerLocks,
) -> AsyncGenerator[IdeaService]:
    async with session_factory() as session:
        yield IdeaService(
            IdeaRepository(session),
            SupervisionRequestRepository(session),
            session,
            DatabaseUserLookup(UserRepository(session)),
            owner_locks,
        )


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    owner_locks: OwnerLocks,
    recording_sink: RecordingSink,
) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app, wired to the test database."""
    app = create_app()

    async def _get_test_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    app.dependency_overrides[get_notification_sink] = lambda: recording_sink
    app.dependency_overrides[get_owner_locks] = lambda: owner_locks

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
