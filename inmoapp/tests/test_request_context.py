import logging

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from inmoapp.core.logging import get_bound_user_id, get_request_id
from inmoapp.core.middleware.context import RequestContextMiddleware


def _make_app():
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/")
    async def root(request: Request):
        return {
            "state_rid": getattr(request.state, "request_id", None),
            "ctx_rid": get_request_id(),
            "ctx_user": get_bound_user_id(),
        }

    return app


def test_generates_request_id_when_missing():
    client = TestClient(_make_app())
    resp = client.get("/")
    assert resp.status_code == 200
    rid = resp.headers.get("x-request-id")
    assert rid
    assert resp.json()["state_rid"] == rid
    assert resp.json()["ctx_rid"] == rid


def test_echoes_provided_request_id():
    client = TestClient(_make_app())
    resp = client.get("/", headers={"X-Request-Id": "test-rid-123"})
    assert resp.headers.get("x-request-id") == "test-rid-123"
    assert resp.json()["state_rid"] == "test-rid-123"


def test_binds_acting_account():
    client = TestClient(_make_app())
    assert client.get("/", headers={"X-User-Id": " agent-7 "}).json()["ctx_user"] == "agent-7"
    assert client.get("/").json()["ctx_user"] is None


def test_completion_logged_with_context(caplog):
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="inmoapp"):
        client.get("/", headers={"X-Request-Id": "rid-42", "X-User-Id": "agent-7"})
    record = next(r for r in caplog.records if r.getMessage() == "request.complete")
    assert record.request_id == "rid-42"
    assert record.user_id == "agent-7"
    assert record.status == 200
