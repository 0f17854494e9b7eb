# inmoapp/conftest.py
import os
import pytest

# In-memory SQLite unless a test database is provided
os.environ.setdefault("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture(scope="function", autouse=True)
def fresh_db():
    """
    Give every test an empty schema.

    In-memory SQLite is rebuilt from scratch; any other TEST_DATABASE_URL
    has its tables dropped and recreated.
    """
    from inmoapp.core.database import dispose_engine, init_engine, reset_database

    dispose_engine()
    init_engine()
    reset_database()
    yield
    dispose_engine()


@pytest.fixture
def make_user():
    """Factory: make_user(tier="FREE", role="AGENT") -> User."""
    from inmoapp.features.users.service import create_user
    from inmoapp.models.subscription import UserRole

    counter = {"n": 0}

    def _make(tier="FREE", role=UserRole.AGENT, user_id=None):
        counter["n"] += 1
        uid = user_id or f"user-{counter['n']}"
        return create_user(
            email=f"{uid}@example.com",
            name=f"Test User {counter['n']}",
            role=role,
            tier=tier,
            user_id=uid,
        )

    return _make


@pytest.fixture
def make_properties():
    """Factory: insert `count` listings for an agent directly, bypassing limits."""
    from uuid import uuid4
    from sqlalchemy import insert
    from inmoapp.core.database import get_db_session, properties

    def _make(agent_id, count, featured=False):
        ids = []
        with get_db_session() as session:
            for i in range(count):
                pid = str(uuid4())
                session.execute(
                    insert(properties).values(
                        id=pid,
                        agent_id=agent_id,
                        title=f"Casa {i}",
                        is_featured=featured,
                    )
                )
                ids.append(pid)
        return ids

    return _make
