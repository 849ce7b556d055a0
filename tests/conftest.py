"""
Shared fixtures.

``mock_db`` is a stand-in session for service tests with a mocked
repository. ``db`` is a real session on a throw-away SQLite file with the
full schema and the seeded roles, for tests that exercise SQL.
"""

from collections.abc import Awaitable, Callable
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from bursary.core.auth import AdminPrincipal, StudentPrincipal
from bursary.core.database import Base
from bursary.core.rate_limit import reset_memory_store
from bursary.core.security import hash_password
from bursary.modules.admins.models import Admin
from bursary.modules.applications import models as _applications  # noqa: F401
from bursary.modules.bursaries import models as _bursaries  # noqa: F401
from bursary.modules.roles.models import SEED_ROLES, Role
from bursary.modules.roles.repository import RoleRepository
from bursary.modules.students.models import Student
from bursary.modules.users import models as _users  # noqa: F401
from tests.factories import DEFAULT_PASSWORD


@pytest.fixture(autouse=True)
def _clear_rate_limits():
    reset_memory_store()
    yield
    reset_memory_store()


# ============================================
# Mocked session
# ============================================


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def student_principal() -> StudentPrincipal:
    return StudentPrincipal(id=uuid4(), email="amina@bursary.org", name="Amina Wanjiru")


# ============================================
# SQLite store
# ============================================


@pytest.fixture(scope="session")
def password_hash() -> str:
    # bcrypt is slow on purpose; hash once per run
    return hash_password(DEFAULT_PASSWORD)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'bursary.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(Role.__table__.insert(), [dict(role) for role in SEED_ROLES])
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_admin(db, password_hash) -> Callable[..., Awaitable[AdminPrincipal]]:
    """Factory inserting an activated admin with the given role."""

    async def _make(role_name: str, email: str | None = None, **overrides) -> AdminPrincipal:
        role = await RoleRepository.get_by_name(db, role_name)
        admin = Admin(
            email=email or f"{role_name}.{uuid4().hex[:8]}@bursary.org",
            password_hash=password_hash,
            first_name=role_name.title(),
            last_name="Reviewer",
            role_id=role.id,
            role=role,
            blocked=overrides.pop("blocked", False),
            activated=overrides.pop("activated", True),
            first_time_login=False,
            **overrides,
        )
        db.add(admin)
        await db.commit()
        return AdminPrincipal(
            id=admin.id,
            email=admin.email,
            role_name=role.name,
            role_level=role.level,
            name=admin.full_name,
        )

    return _make


@pytest.fixture
def make_student(db, password_hash) -> Callable[..., Awaitable[StudentPrincipal]]:
    """Factory inserting an activated student."""

    async def _make(email: str | None = None, **overrides) -> StudentPrincipal:
        role = await RoleRepository.get_by_name(db, "student")
        student = Student(
            email=email or f"student.{uuid4().hex[:8]}@bursary.org",
            password_hash=password_hash,
            first_name="Amina",
            last_name="Wanjiru",
            role_id=role.id,
            blocked=overrides.pop("blocked", False),
            activated=overrides.pop("activated", True),
            first_time_login=True,
            **overrides,
        )
        db.add(student)
        await db.commit()
        return StudentPrincipal(id=student.id, email=student.email, name=student.full_name)

    return _make
