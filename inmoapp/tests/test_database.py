"""Tests for engine setup, schema and property queries."""

from sqlalchemy import inspect

from inmoapp.core.database import (
    check_connection,
    create_all_tables,
    get_database_url,
    get_engine,
    metadata,
)
from inmoapp.features.properties.repository import count_properties, list_properties


def test_test_database_url_takes_precedence(monkeypatch):
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite://")
    assert get_database_url() == "sqlite://"


def test_connection_and_tables():
    assert check_connection()
    present = set(inspect(get_engine()).get_table_names())
    assert set(metadata.tables) <= present


def test_create_all_tables_idempotent():
    create_all_tables()
    create_all_tables()
    assert check_connection()


def test_property_queries_scoped_to_agent(make_user, make_properties):
    agent = make_user("AGENT")
    other = make_user("AGENT")
    featured_ids = make_properties(agent.id, 2, featured=True)
    make_properties(agent.id, 3)
    make_properties(other.id, 1, featured=True)

    assert count_properties(agent.id) == 5
    assert count_properties(agent.id, featured=True) == 2
    assert count_properties(agent.id, featured=False) == 3

    listed = list_properties(agent.id)
    assert len(listed) == 5
    assert {p.agent_id for p in listed} == {agent.id}
    assert set(featured_ids) <= {p.id for p in listed}
