"""
Shared fixtures: in-memory fakes for the scheduler and a SQLite-backed app
"""
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from core.config import Settings
from core.database import Database
from core.exceptions import EmailDeliveryException, RepositoryException
from domain.entities import CompanyApplication, ScheduledReminder
from domain.value_objects import Email
from application.repositories.interfaces import IReminderStore
from application.services.notifications import IEmailTransport
from infrastructure.security.password_hasher import BcryptPasswordHasher
from presentation.api.v1.container import get_password_hasher

SQLITE_URL = "sqlite+aiosqlite:///:memory:"
NOW_FIXED = datetime(2025, 6, 1, 9, 0, 1, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTransport(IEmailTransport):
    """Records deliveries; fails the next ``fail_next`` sends"""

    def __init__(self, fail_next: int = 0):
        self.sent: List[Dict[str, str]] = []
        self.attempts = 0
        self.fail_next = fail_next

    async def send(self, to: str, subject: str, body: str) -> None:
        self.attempts += 1
        if self.fail_next > 0:
            self.fail_next -= 1
            raise EmailDeliveryException(to, "connection refused")
        self.sent.append({"to": to, "subject": subject, "body": body})


class InMemoryReminderStore(IReminderStore):
    """Dict-backed reminder store"""

    def __init__(self):
        self.reminders: Dict[UUID, ScheduledReminder] = {}
        self.applications: Dict[UUID, CompanyApplication] = {}
        self.query_error: Optional[Exception] = None
        self.failing_saves: set = set()
        self.queries: List[tuple] = []

    def add_application(self, application: CompanyApplication) -> CompanyApplication:
        self.applications[application.id] = application
        return application

    def add_reminder(self, reminder: ScheduledReminder) -> ScheduledReminder:
        self.reminders[reminder.id] = reminder
        return reminder

    async def find_due_reminders(self, now: datetime, limit: int) -> List[ScheduledReminder]:
        self.queries.append((now, limit))
        if self.query_error:
            raise self.query_error
        due = [r for r in self.reminders.values() if r.is_due(now)]
        due.sort(key=lambda r: (r.send_time, r.created_at or now))
        return due[:limit]

    async def find_application_by_id(self, application_id: UUID) -> Optional[CompanyApplication]:
        return self.applications.get(application_id)

    async def save_reminder(self, reminder: ScheduledReminder) -> bool:
        if reminder.id in self.failing_saves:
            raise RepositoryException("disk full")
        stored = self.reminders.get(reminder.id)
        if stored is None or not stored.is_pending() or stored.send_time != reminder.send_time:
            return False
        self.reminders[reminder.id] = reminder
        return True


def make_application(
    company: str = "Acme Corp",
    deadline: Optional[datetime] = None,
    owner_id: Optional[UUID] = None,
    role: str = "Backend Engineer",
) -> CompanyApplication:
    return CompanyApplication(
        id=uuid4(),
        owner_id=owner_id or uuid4(),
        company=company,
        role=role,
        location="Remote",
        ctc="12 LPA",
        deadline=deadline or datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc),
    )


def make_reminder(
    application: CompanyApplication,
    recipient: str = "candidate@example.com",
    lead_time: timedelta = timedelta(hours=1),
    created_at: Optional[datetime] = None,
    max_attempts: int = 10,
) -> ScheduledReminder:
    return ScheduledReminder.schedule(
        application.id,
        application.deadline,
        Email(recipient),
        lead_time,
        created_at or datetime(2025, 5, 1, tzinfo=timezone.utc),
        max_attempts=max_attempts,
    )


@pytest.fixture
def clock():
    return FakeClock(NOW_FIXED)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def store():
    return InMemoryReminderStore()


@pytest.fixture
def store_scope(store):
    @asynccontextmanager
    async def scope():
        yield store

    return scope


@pytest_asyncio.fixture
async def database():
    db = Database(SQLITE_URL)
    await db.init_models()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as session:
        yield session


def make_settings(**overrides) -> Settings:
    values = dict(
        DATABASE_URL=SQLITE_URL,
        ENVIRONMENT="test",
        EMAIL_BACKEND="console",
        REMINDER_WORKER_ENABLED=False,
        RATE_LIMIT_ENABLED=False,
        CRON_SECRET="cron-secret",
        JWT_SECRET_KEY="test-secret-key",
        LOG_JSON_FORMAT=False,
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def app_settings():
    return make_settings()


@pytest.fixture
def client(app_settings, transport, clock):
    from main import create_app

    app = create_app(app_settings, email_transport=transport, clock=clock)
    app.dependency_overrides[get_password_hasher] = lambda: BcryptPasswordHasher(rounds=4)
    with TestClient(app) as test_client:
        yield test_client


def signup(client: TestClient, handle: str = "jane_doe", password: str = "secret123") -> Dict[str, str]:
    """Create an account and return its bearer header"""
    response = client.post("/api/v1/auth/signup", json={"handle": handle, "password": password})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
