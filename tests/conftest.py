"""
Pytest global configuration for the payments API.

- Each test gets its own SQLite database (aiosqlite), swapped into
  app.database.session the same way the application reaches it.
- The process-wide provider registry is rebuilt for every test so lazy
  loading and memoization can be observed in isolation.
"""

from dotenv import load_dotenv
import os
import pytest

load_dotenv(".env.test")
os.environ.setdefault("DATABASE_URL", "sqlite:///./payments_test.db")

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.database.session as db_session_module
import app.database.models  # noqa: F401 - registers all models on Base.metadata
from app.database.models import App, Credential, Payment
from app.api.main import app
from app.payments.registry import reset_registry


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
async def test_db_engine(tmp_path):
    """
    Creates a test engine and replaces the global engine and session
    factory used by get_db() and the payment providers.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'payments.db'}")

    original_engine = db_session_module.async_engine
    original_factory = db_session_module.AsyncSessionLocal

    db_session_module.async_engine = engine
    db_session_module.AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    await db_session_module.init_db()

    yield engine

    db_session_module.async_engine = original_engine
    db_session_module.AsyncSessionLocal = original_factory
    await engine.dispose()


@pytest.fixture
async def db_session(test_db_engine):
    async with db_session_module.AsyncSessionLocal() as session:
        yield session


# ============================================================================
# FASTAPI CLIENT
# ============================================================================

@pytest.fixture
async def test_client(test_db_engine):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ============================================================================
# REGISTRY
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_registry():
    reset_registry()
    yield
    reset_registry()


# ============================================================================
# DATA FIXTURES
# ============================================================================

@pytest.fixture
def create_payment(db_session):
    """
    Factory that stores a payment, optionally with a credential and app.

    app_dir_name=None stores a credential whose app was uninstalled;
    with_credential=False stores a payment with no credential at all.
    """
    counter = {"n": 0}

    async def _create(
        app_dir_name="stripe",
        categories=("payment",),
        key=None,
        with_credential=True,
        external_id="pi_123",
        data=None,
    ):
        counter["n"] += 1
        credential = None

        if with_credential:
            slug = None
            if app_dir_name is not None:
                slug = f"{app_dir_name}-{counter['n']}"
                db_session.add(App(slug=slug, dir_name=app_dir_name, categories=list(categories)))
                await db_session.flush()
            credential = Credential(type=f"{app_dir_name or 'removed'}_payment", key=key, app_id=slug)
            db_session.add(credential)
            await db_session.flush()

        payment = Payment(
            uid=f"pay_{counter['n']}",
            app_id=credential.app_id if credential else None,
            credential_id=credential.id if credential else None,
            amount=5000,
            currency="usd",
            success=False,
            external_id=external_id,
            data=data if data is not None else {},
        )
        db_session.add(payment)
        await db_session.commit()
        return payment

    return _create
