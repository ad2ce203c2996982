from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import jetfund.models.project_db  # noqa: F401
import jetfund.models.user  # noqa: F401
import jetfund.models.work_session_db  # noqa: F401
from jetfund.database import Base
from jetfund.repositories.project_repository import ProjectRepository
from jetfund.repositories.session_repository import SessionRepository
from jetfund.repositories.user_repository import UserRepository
from jetfund.services.project_service import ProjectService
from jetfund.services.session_service import SessionService

COMPLETE_PROFILE = {
    "email": "ada@example.com",
    "first_name": "Ada",
    "last_name": "Lovelace",
    "birthday": "2008-12-10",
    "address_line1": "1 Analytical Way",
    "city": "London",
    "state": "Greater London",
    "postal_code": "N1 9GU",
    "country": "United Kingdom",
}


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    async with SessionLocal() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 14, 9, 0, tzinfo=UTC))


@pytest.fixture
def users(db_session):
    return UserRepository(db_session)


@pytest.fixture
def projects(db_session):
    return ProjectRepository(db_session)


@pytest.fixture
def sessions(db_session):
    return SessionRepository(db_session)


@pytest.fixture
def session_service(sessions, projects, clock):
    return SessionService(sessions=sessions, projects=projects, clock=clock)


@pytest.fixture
def project_service(projects, sessions, users):
    return ProjectService(projects=projects, sessions=sessions, users=users)


@pytest.fixture
async def user(users):
    return await users.get_or_create_by_slack_id("U0ADA", name="Ada", email="ada@example.com")


@pytest.fixture
async def complete_user(users, user):
    return await users.update_profile(user.id, COMPLETE_PROFILE)


@pytest.fixture
async def other_user(users):
    return await users.get_or_create_by_slack_id("U0BOB", name="Bob")
