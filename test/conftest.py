"""
Pytest configuration and fixtures for headless CMS tests
"""

import asyncio
import os
import sys
import tempfile
from collections.abc import AsyncGenerator

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

# Settings are read at import time; point them at throwaway locations first
_TEST_DIR = tempfile.mkdtemp(prefix="headless_cms_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'app.db')}"  # noqa: PTH118
os.environ["PLUGINS_CONFIG_FILE"] = os.path.join(_TEST_DIR, "plugins_config.json")  # noqa: PTH118
os.environ["JSON_LOGS"] = "false"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from headless_cms.database import Base  # noqa: E402
from headless_cms.graphql.context import HeadlessContext  # noqa: E402
from headless_cms.models import User  # noqa: E402
from headless_cms.plugins.loader import initialize_plugins  # noqa: E402
from headless_cms.schemas.content_model import ContentModel  # noqa: E402
from headless_cms.services.user_service import SqlUserLookup  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory database with all tables; one per test function."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests that need it."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
async def test_user(test_db) -> User:
    user = User(username="editor", email="editor@example.com")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def registries():
    """Field-type registry with every built-in plugin and no model-field plugins."""
    return initialize_plugins(config={"field_types": {}})


@pytest.fixture
def product_model() -> ContentModel:
    return ContentModel.model_validate(
        {
            "modelId": "product",
            "name": "Product",
            "description": "Products for sale",
            "fields": [
                {"fieldId": "title", "type": "text", "label": "Title"},
                {"fieldId": "price", "type": "number"},
                {"fieldId": "summary", "type": "long-text"},
                {"fieldId": "inStock", "type": "boolean"},
            ],
        }
    )


@pytest.fixture
def category_model() -> ContentModel:
    return ContentModel.model_validate(
        {
            "modelId": "product-category",
            "fields": [
                {"fieldId": "name", "type": "text"},
                {"fieldId": "publishedOn", "type": "datetime"},
                {"fieldId": "parent", "type": "ref", "settings": {"modelId": "product-category"}},
                {"fieldId": "image", "type": "file"},
            ],
        }
    )


@pytest.fixture
def make_context():
    """Build request contexts the way the headless route does."""

    def factory(db: AsyncSession, user: User | None = None, resolved_value_timeout: float | None = 1.0):
        db_lock = asyncio.Lock()
        return HeadlessContext(
            db=db,
            user_lookup=SqlUserLookup(db, lock=db_lock),
            user=user,
            db_lock=db_lock,
            resolved_value_timeout=resolved_value_timeout,
        )

    return factory
