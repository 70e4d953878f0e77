from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from components.kvstore.app import create_app
from components.kvstore.errors import NotFoundError


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_post_creates_entry(client, store):
    r = client.post("/storage/testKey", json={"foo": "bar"})
    assert r.status_code == 201
    assert r.content == b""
    assert store.read("testKey") == {"foo": "bar"}


def test_post_conflict_when_key_exists(client, store):
    store.upsert("testKey", "Existing Value")
    r = client.post("/storage/testKey", json={"foo": "bar"})
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "kvstore.already_exists"
    assert r.json()["detail"]["message"] == "Resource already exists"
    assert store.read("testKey") == "Existing Value"


def test_get_returns_value_keyed_by_name(client, store):
    store.upsert("testKey", "foo")
    r = client.get("/storage/testKey")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == {"testKey": "foo"}


def test_get_missing_key(client):
    r = client.get("/storage/nonExistentKey")
    assert r.status_code == 404
    assert r.json()["detail"] == {
        "code": "kvstore.not_found",
        "message": "No value found",
        "details": {"key": "nonExistentKey"},
    }


def test_put_updates_existing(client, store):
    store.upsert("testKey", {"bar": "foo"})
    r = client.put("/storage/testKey", json={"foo": "bar"})
    assert r.status_code == 200
    assert store.read("testKey") == {"foo": "bar"}


def test_put_creates_missing(client, store):
    r = client.put("/storage/newKey", json={"foo": "bar"})
    assert r.status_code == 200
    assert store.read("newKey") == {"foo": "bar"}


def test_delete_existing_and_missing(client, store):
    store.upsert("testKey", 1)
    r = client.delete("/storage/testKey")
    assert r.status_code == 204
    with pytest.raises(NotFoundError):
        store.read("testKey")

    r2 = client.delete("/storage/testKey")
    assert r2.status_code == 404
    assert r2.json()["detail"]["message"] == "Data not found"


@pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH"])
def test_empty_key_rejected(client, method):
    r = client.request(method, "/storage/", json={"a": 1})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "kvstore.invalid_key"
    assert r.json()["detail"]["message"] == "Required param key is empty"


def test_unsupported_method_leaves_store_untouched(client, store):
    store.upsert("k", "v")
    r = client.patch("/storage/k", json={"x": 1})
    assert r.status_code == 405
    assert r.json()["detail"]["code"] == "kvstore.unsupported_method"
    assert store.read("k") == "v"


@pytest.mark.parametrize("method", ["POST", "PUT"])
@pytest.mark.parametrize(
    "body",
    [b"{not json", b"", b'{"a": 1} trailing', b"NaN", b"1e400", b'{"a": Infinity}', b"[1, -Infinity]"],
)
def test_invalid_body_rejected_before_store(client, store, method, body):
    r = client.request(method, "/storage/k", content=body)
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "kvstore.invalid_value"
    assert r.json()["detail"]["message"] == "Invalid request body"
    with pytest.raises(NotFoundError):
        store.read("k")


@pytest.mark.parametrize(
    "value",
    [None, True, 0, -1.5, "text", [], [1, "two", None], {"nested": {"list": [{"x": 1}]}}],
)
def test_any_json_value_is_stored(client, value):
    assert client.put("/storage/v", json=value).status_code == 200
    assert client.get("/storage/v").json() == {"v": value}


def test_key_may_contain_slashes(client):
    assert client.post("/storage/a/b/c", json=1).status_code == 201
    assert client.get("/storage/a/b/c").json() == {"a/b/c": 1}
    assert client.get("/storage/a/b").status_code == 404


def test_scenario_over_http(client):
    assert client.get("/storage/x").status_code == 404
    assert client.post("/storage/x", json={"foo": "bar"}).status_code == 201
    assert client.get("/storage/x").json() == {"x": {"foo": "bar"}}
    assert client.post("/storage/x", json={"a": 1}).status_code == 409
    assert client.get("/storage/x").json() == {"x": {"foo": "bar"}}
    assert client.put("/storage/x", json={"a": 1}).status_code == 200
    assert client.get("/storage/x").json() == {"x": {"a": 1}}
    assert client.delete("/storage/x").status_code == 204
    assert client.get("/storage/x").status_code == 404
    assert client.delete("/storage/x").status_code == 404


def test_concurrent_posts_single_winner(client, store):
    def post(i):
        return client.post("/storage/race", json={"writer": i}).status_code

    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = list(pool.map(post, range(16)))

    assert codes.count(201) == 1
    assert codes.count(409) == 15
    winner = store.read("race")["writer"]
    assert 0 <= winner < 16


def test_apps_do_not_share_state():
    a = TestClient(create_app())
    b = TestClient(create_app())
    assert a.post("/storage/k", json=1).status_code == 201
    assert b.get("/storage/k").status_code == 404


@pytest.mark.parametrize("body", [b"NaN", b"1e400", b'{"a": {"b": [Infinity]}}'])
def test_non_finite_number_keeps_existing_value_readable(client, store, body):
    store.upsert("n", {"ok": 1})
    assert client.put("/storage/n", content=body).status_code == 400
    r = client.get("/storage/n")
    assert r.status_code == 200
    assert r.json() == {"n": {"ok": 1}}


def test_large_finite_numbers_round_trip(client):
    assert client.put("/storage/big", content=b"1e300").status_code == 200
    assert client.get("/storage/big").json() == {"big": 1e300}
