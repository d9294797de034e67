import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from churchapp.database import get_db
from churchapp.models.base import Base
from churchapp.config import settings
from churchapp.core.role_policy import PERMISSION_CATALOG
from churchapp.core.security import hash_password
# Import all model classes to ensure they're registered with SQLAlchemy
from churchapp.models.user import User
from churchapp.models.church import Church
from churchapp.models.branch import Branch
from churchapp.models.member import Member
from churchapp.models.permission import Permission
from churchapp.models.onboarding_progress import OnboardingProgress
from churchapp.models.finance import FinanceEntry
from churchapp.models.audit_log import AuditLog
from churchapp.models.role import Role
from churchapp.services.token_service import TokenService
# Import FastAPI app AFTER model imports
from churchapp.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "secret123"
# Hashed once; bcrypt is slow
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False, **claims) -> str:
    """
    Generate JWT token for testing with arbitrary claims.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token
        **claims: Extra claims (type, memberId, role, branchId, churchId, ...)

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {
        "sub": user_id,
        "email": f"{user_id}@example.com",
        "name": "Test User",
        "type": "user",
        "exp": exp,
        "iat": datetime.now(UTC),
        **claims,
    }

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def make_user(db, email: str, first_name: str = "Test", last_name: str | None = "User") -> User:
    user = User(
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_church(db, founder_email: str, name: str = "Igreja Central") -> Member:
    """Church + main branch + ADMINGERAL founder with every grant, as onboarding leaves them"""
    founder = make_user(db, founder_email, first_name="Founder")
    church = Church(name=name, created_by_user_id=founder.id)
    db.add(church)
    db.flush()
    branch = Branch(church_id=church.id, name="Sede", is_main_branch=True)
    db.add(branch)
    db.flush()
    member = Member(user_id=founder.id, branch_id=branch.id, church_id=church.id, role=Role.ADMINGERAL)
    db.add(member)
    db.flush()
    db.add_all([Permission(member_id=member.id, type=p.value) for p in PERMISSION_CATALOG])
    db.add(OnboardingProgress(user_id=founder.id, church_configured=True, completed=True))
    db.commit()
    db.refresh(member)
    return member


def make_branch(db, church_id: str, name: str) -> Branch:
    branch = Branch(church_id=church_id, name=name, is_main_branch=False)
    db.add(branch)
    db.commit()
    db.refresh(branch)
    return branch


def make_member(
    db, branch: Branch, email: str, role: Role = Role.MEMBER, permissions: tuple[str, ...] = ()
) -> Member:
    """Member with members_view plus the given explicit grants"""
    user = make_user(db, email)
    member = Member(user_id=user.id, branch_id=branch.id, church_id=branch.church_id, role=role)
    db.add(member)
    db.flush()
    types = {"members_view", *permissions}
    db.add_all([Permission(member_id=member.id, type=t) for t in sorted(types)])
    db.add(OnboardingProgress(user_id=user.id, completed=True))
    db.commit()
    db.refresh(member)
    return member


def token_for(db, member: Member) -> str:
    """Token derived from stored state, as login would issue it"""
    return TokenService(db).issue(member.user)


def headers_for(db, member: Member) -> dict:
    return bearer(token_for(db, member))


@pytest.fixture
def church_a(db_session) -> Member:
    """ADMINGERAL founder of church A"""
    return make_church(db_session, "founder-a@example.com", name="Igreja A")


@pytest.fixture
def church_b(db_session) -> Member:
    """ADMINGERAL founder of church B"""
    return make_church(db_session, "founder-b@example.com", name="Igreja B")


@pytest.fixture
def main_branch_a(church_a) -> Branch:
    return church_a.branch


@pytest.fixture
def admin_a_headers(db_session, church_a):
    return headers_for(db_session, church_a)


@pytest.fixture
def admin_b_headers(db_session, church_b):
    return headers_for(db_session, church_b)
