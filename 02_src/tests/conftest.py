"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def database():
    """Create in-memory SQLite database with the test schema."""
    from scenecore.storage import SqliteDatabase

    from fakes import SCHEMA

    db = SqliteDatabase(":memory:")
    await db.init(SCHEMA)
    yield db
    await db.close()


@pytest.fixture
def fake_database():
    """Create a call-recording database port."""
    from fakes import FakeDatabase

    return FakeDatabase()


@pytest.fixture
def fake_protocol():
    """Create a call-recording service protocol."""
    from fakes import FakeServiceProtocol

    return FakeServiceProtocol(result="ok")


@pytest.fixture
def operation():
    """Create a root operation."""
    from scenecore.models import new_operation

    return new_operation("checkout")


@pytest.fixture
def scene(operation, fake_database, fake_protocol):
    """Create a Scene over the fake ports."""
    from scenecore.scene import Scene

    return Scene(
        operation,
        database=fake_database,
        service_protocol=fake_protocol,
        project="shop",
    )


@pytest.fixture
def sqlite_scene(operation, database, fake_protocol):
    """Create a Scene over the in-memory SQLite database."""
    from scenecore.scene import Scene

    return Scene(operation, database=database, service_protocol=fake_protocol)


@pytest.fixture
def restore_project():
    """Restore the process-wide default project after the test."""
    from scenecore.config import get_current_project, set_current_project

    saved = get_current_project()
    yield
    set_current_project(saved)
