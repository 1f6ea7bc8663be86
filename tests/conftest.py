"""
Pytest configuration and fixtures.
"""

import datetime
import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from pomofocus.domain.errors import PersistenceError
from pomofocus.domain.models import Dataset, Project, Subtask, TimerSettings
from pomofocus.infra.db import Base
from pomofocus.infra.ticker import Ticker
from pomofocus.services.app_state import AppState


class ManualTicker(Ticker):
    """Ticker advanced by the test instead of the Qt event loop"""

    def __init__(self):
        super().__init__()
        self.callback: Optional[Callable[[], None]] = None
        self.interval_ms: Optional[int] = None
        self.active = False
        self.start_calls = 0
        self.single_shots: List[tuple] = []

    def start(self, interval_ms, callback):
        self.interval_ms = interval_ms
        self.callback = callback
        self.active = True
        self.start_calls += 1

    def stop(self):
        self.active = False

    def is_active(self):
        return self.active

    def single_shot(self, delay_ms, callback):
        self.single_shots.append((delay_ms, callback))

    def advance(self, seconds: int) -> None:
        """Fire the repeating callback once per second while active"""
        for _ in range(seconds):
            if not self.active:
                break
            self.callback()

    def fire_single_shots(self) -> None:
        shots, self.single_shots = self.single_shots, []
        for _, callback in shots:
            callback()


class MemoryStore:
    """In-memory DatasetStore that can be told to fail"""

    def __init__(self, dataset: Optional[Dataset] = None):
        self.saved = dataset
        self.save_count = 0
        self.fail_save = False
        self.fail_load = False

    async def load(self):
        if self.fail_load:
            raise PersistenceError("database is locked")
        return self.saved

    async def save(self, dataset):
        if self.fail_save:
            raise PersistenceError("disk full")
        self.saved = dataset
        self.save_count += 1


class FixedClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += datetime.timedelta(seconds=seconds)


@pytest.fixture
def ticker():
    return ManualTicker()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    # 10:00 in Istanbul (UTC+3)
    return FixedClock(datetime.datetime(2026, 10, 18, 7, 0, tzinfo=datetime.timezone.utc))


@pytest.fixture
def sample_project():
    return Project(
        id="proj-1",
        name="Thesis",
        subtasks=[
            Subtask(id="sub-1", name="Outline", total_sessions=4, completed_sessions=2),
            Subtask(id="sub-2", name="Draft", total_sessions=2, completed_sessions=2),
        ],
    )


@pytest.fixture
def app_state(store, sample_project):
    """AppState with one project, short phases and an in-memory store"""
    dataset = Dataset(
        projects=[sample_project],
        settings=TimerSettings(work_duration=1, short_break_duration=1,
                               long_break_duration=2, sessions_before_long_break=4),
    )
    state = AppState(dataset=dataset, store=store)
    yield state
    state.close()


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create a new session for a test"""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session
