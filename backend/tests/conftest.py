"""
MailChimp Sync Backend — Test Configuration (conftest.py)
===========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (aiosqlite) with the schema
       created from the models, and an AsyncMock standing in for MailChimp.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine / db_session: Real async SQLAlchemy session on a temp file
    ├── make_list_payload: Factory for valid list bodies
    ├── remote: AsyncMock RemoteClient (post/patch/delete/ping)
    ├── member_service / list_service: Services wired to `remote`
    ├── bound_list / unbound_list: Stored lists with and without a MailChimp id
    ├── stored_member: A member already in `bound_list`
    └── test_client: HTTPX AsyncClient against the app, same session and fake
"""

import os
import tempfile

# Settings are read at import time; set them before any app import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="mailchimp_sync_test_"), "health.db"
)
os.environ["MAILCHIMP_API_KEY"] = "0123456789abcdef0123456789abcdef-us6"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from app.database import Base, dispose_engine, get_db_session  # noqa: E402
from app.models.mailchimp_list import MailChimpList  # noqa: E402
from app.models.mailchimp_member import MailChimpMember  # noqa: E402
from app.services.list_service import ListService, get_list_service  # noqa: E402
from app.services.mailchimp_client import get_remote_client  # noqa: E402
from app.services.member_service import MemberService, get_member_service  # noqa: E402
from app.services.remote_base import RemoteClient  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Sample Payloads
# ══════════════════════════════════════════════════════════════════════════

def list_payload(**overrides):
    """A list body that passes the list ruleset."""
    payload = {
        "name": "Newsletter",
        "permission_reminder": "You signed up on our website.",
        "email_type_option": True,
        "contact": {
            "company": "Acme",
            "address1": "1 Main Street",
            "city": "Springfield",
            "state": "IL",
            "zip": "62701",
            "country": "US",
        },
        "campaign_defaults": {
            "from_name": "Acme",
            "from_email": "news@acme.io",
            "subject": "News",
            "language": "en",
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_list_payload():
    return list_payload


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# MailChimp Fake
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def remote():
    """
    AsyncMock shaped like RemoteClient.

    Defaults: POST and PATCH answer {"id": "R1"}, DELETE answers None,
    ping answers True. Tests reconfigure return_value / side_effect.
    """
    client = AsyncMock(spec=RemoteClient)
    client.post.return_value = {"id": "R1"}
    client.patch.return_value = {"id": "R1"}
    client.delete.return_value = None
    client.ping.return_value = True
    return client


@pytest.fixture
def member_service(remote):
    return MemberService(remote=remote)


@pytest.fixture
def list_service(remote):
    return ListService(remote=remote)


# ══════════════════════════════════════════════════════════════════════════
# Stored Entities
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def bound_list(db_session) -> MailChimpList:
    """List L1 bound to MailChimp list M1."""
    mailing_list = MailChimpList(id="L1", mail_chimp_id="M1", **list_payload())
    db_session.add(mailing_list)
    await db_session.commit()
    return mailing_list


@pytest_asyncio.fixture
async def unbound_list(db_session) -> MailChimpList:
    """List L2 that was never created on MailChimp."""
    mailing_list = MailChimpList(id="L2", mail_chimp_id=None, **list_payload(name="Draft"))
    db_session.add(mailing_list)
    await db_session.commit()
    return mailing_list


@pytest_asyncio.fixture
async def stored_member(db_session, bound_list) -> MailChimpMember:
    """Member m1 (a@x.com, subscribed) of list L1, known remotely as R1."""
    member = MailChimpMember(
        id="m1",
        list_id=bound_list.id,
        mail_chimp_id="R1",
        email_address="a@x.com",
        status="subscribed",
        language="en",
    )
    db_session.add(member)
    await db_session.commit()
    return member


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_session, member_service, list_service, remote):
    """
    HTTPX AsyncClient routed straight into the app via ASGITransport.

    Requests share `db_session` with the test, so state written through the
    API is visible to direct assertions and vice versa.
    """
    from app.main import app

    async def override_session():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_member_service] = lambda: member_service
    app.dependency_overrides[get_list_service] = lambda: list_service
    app.dependency_overrides[get_remote_client] = lambda: remote

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    # /health uses the module engine; its pooled connections belong to this loop
    await dispose_engine()
