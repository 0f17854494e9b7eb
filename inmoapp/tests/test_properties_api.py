"""Tests for the property routes and their limit_exceeded contract."""

from fastapi.testclient import TestClient

from inmoapp.main import app

client = TestClient(app)


def _create(user_id, title="Casa"):
    return client.post("/api/properties", headers={"X-User-Id": user_id}, json={"title": title})


def test_create_property(make_user):
    user = make_user("FREE")
    resp = client.post(
        "/api/properties",
        headers={"X-User-Id": user.id},
        json={"title": "Departamento", "price": "85000", "city": "Guayaquil"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["agent_id"] == user.id
    assert body["city"] == "Guayaquil"
    assert body["is_featured"] is False


def test_create_over_limit_returns_limit_exceeded(make_user):
    user = make_user("FREE")
    assert _create(user.id).status_code == 201

    resp = _create(user.id, "Otra")
    assert resp.status_code == 403
    body = resp.json()
    rid = resp.headers.get("x-request-id")
    assert body["error"]["code"] == "limit_exceeded"
    assert body["error"]["limit"] == 1
    assert body["error"]["request_id"] == rid
    assert "Actualiza tu plan" in body["detail"]


def test_create_requires_auth():
    resp = client.post("/api/properties", json={"title": "Casa"})
    assert resp.status_code == 401


def test_create_unknown_account():
    resp = _create("ghost")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


def test_feature_flow(make_user):
    user = make_user("PLUS")
    first = _create(user.id, "Uno").json()["id"]
    second = _create(user.id, "Dos").json()["id"]
    headers = {"X-User-Id": user.id}

    resp = client.post(f"/api/properties/{first}/featured", headers=headers, json={"featured": True})
    assert resp.status_code == 200
    assert resp.json()["is_featured"] is True

    resp = client.post(f"/api/properties/{second}/featured", headers=headers, json={"featured": True})
    assert resp.status_code == 403
    assert resp.json()["error"]["limit"] == 1


def test_feature_someone_elses_listing(make_user):
    owner = make_user("PRO")
    other = make_user("PRO")
    pid = _create(owner.id).json()["id"]
    resp = client.post(
        f"/api/properties/{pid}/featured",
        headers={"X-User-Id": other.id},
        json={"featured": True},
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"


def test_images(make_user):
    user = make_user("FREE")
    pid = _create(user.id).json()["id"]
    headers = {"X-User-Id": user.id}

    resp = client.post(f"/api/properties/{pid}/images", headers=headers, json={"urls": ["a.jpg", "b.jpg"]})
    assert resp.status_code == 201
    assert [img["url"] for img in resp.json()] == ["a.jpg", "b.jpg"]

    resp = client.post(
        f"/api/properties/{pid}/images",
        headers=headers,
        json={"urls": [f"{i}.jpg" for i in range(5)]},
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["limit"] == 6


def test_videos(make_user):
    user = make_user("PLUS")
    pid = _create(user.id).json()["id"]
    headers = {"X-User-Id": user.id}
    video = {"url": "https://youtu.be/abc", "platform": "YOUTUBE", "title": "Recorrido"}

    resp = client.put(f"/api/properties/{pid}/videos", headers=headers, json={"videos": [video]})
    assert resp.status_code == 200
    assert resp.json()[0]["platform"] == "YOUTUBE"

    resp = client.put(f"/api/properties/{pid}/videos", headers=headers, json={"videos": [video, video]})
    assert resp.status_code == 403

    resp = client.put(f"/api/properties/{pid}/videos", headers=headers, json={"videos": []})
    assert resp.status_code == 200
    assert resp.json() == []


def test_videos_not_in_free_plan(make_user):
    user = make_user("FREE")
    pid = _create(user.id).json()["id"]
    resp = client.put(
        f"/api/properties/{pid}/videos",
        headers={"X-User-Id": user.id},
        json={"videos": [{"url": "https://tiktok.com/@a/1", "platform": "TIKTOK"}]},
    )
    assert resp.status_code == 403
    body = resp.json()
    assert body["error"]["limit"] == 0
    assert "no incluye videos" in body["detail"]


def test_client_account_cannot_create(make_user):
    from inmoapp.models.subscription import UserRole

    client_account = make_user("PRO", role=UserRole.CLIENT)
    resp = _create(client_account.id)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"


def test_delete_property(make_user):
    user = make_user("FREE")
    pid = _create(user.id).json()["id"]
    assert _create(user.id, "Otra").status_code == 403

    resp = client.delete(f"/api/properties/{pid}", headers={"X-User-Id": user.id})
    assert resp.status_code == 204
    assert _create(user.id, "Otra").status_code == 201

    resp = client.delete(f"/api/properties/{pid}", headers={"X-User-Id": user.id})
    assert resp.status_code == 404


def test_delete_someone_elses_listing(make_user):
    owner = make_user("FREE")
    other = make_user("FREE")
    pid = _create(owner.id).json()["id"]
    resp = client.delete(f"/api/properties/{pid}", headers={"X-User-Id": other.id})
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"


def test_delete_image(make_user):
    user = make_user("FREE")
    pid = _create(user.id).json()["id"]
    headers = {"X-User-Id": user.id}
    images = client.post(
        f"/api/properties/{pid}/images", headers=headers, json={"urls": ["a.jpg", "b.jpg"]}
    ).json()

    resp = client.delete(f"/api/properties/images/{images[0]['id']}", headers=headers)
    assert resp.status_code == 200
    assert [img["url"] for img in resp.json()] == ["b.jpg"]

    resp = client.delete(f"/api/properties/images/{images[0]['id']}", headers=headers)
    assert resp.status_code == 404
