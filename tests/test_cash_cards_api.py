"""HTTP contract of /cashcards, exercised through the FastAPI test client."""
from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from cashcard.app import create_app
from cashcard.core.config import get_settings
from cashcard.services.identity_service import PrincipalRegistry

SARAH = ("sarah1", "abc123")
KUMAR = ("kumar2", "xyz789")
HANK = ("hank-owns-no-cards", "def456")

JOSE = ("josé", "senhaç")


def _basic(raw: bytes) -> dict:
    return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


@pytest.fixture()
def accented_client(seeded_repo):
    registry = PrincipalRegistry.from_plaintext([(JOSE[0], JOSE[1], ["CARD-OWNER"])])
    app = create_app(get_settings(), registry=registry, repository=seeded_repo)
    with TestClient(app) as test_client:
        yield test_client


def test_get_existing_card(client):
    response = client.get("/cashcards/99", auth=SARAH)
    assert response.status_code == 200
    assert response.json() == {"id": 99, "amount": 123.45, "owner": "sarah1"}


def test_unknown_id_is_404_with_empty_body(client):
    response = client.get("/cashcards/1000", auth=SARAH)
    assert response.status_code == 404
    assert response.content == b""


def test_card_of_another_owner_looks_like_missing(client):
    foreign = client.get("/cashcards/102", auth=SARAH)
    missing = client.get("/cashcards/1000", auth=SARAH)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.content == missing.content
    assert client.put("/cashcards/102", json={"amount": 1}, auth=SARAH).status_code == 404
    assert client.delete("/cashcards/102", auth=SARAH).status_code == 404
    assert client.get("/cashcards/102", auth=KUMAR).json()["amount"] == 200.0


def test_create_returns_location_of_new_card(client):
    response = client.post("/cashcards", json={"amount": 250.00}, auth=SARAH)
    assert response.status_code == 201
    assert response.content == b""
    location = response.headers["location"]

    created = client.get(location, auth=SARAH)
    assert created.status_code == 200
    body = created.json()
    assert body["id"] not in (99, 100, 101, 102)
    assert body["amount"] == 250.00
    assert body["owner"] == "sarah1"


def test_create_ignores_client_supplied_id_and_owner(client):
    response = client.post(
        "/cashcards",
        json={"id": 99, "amount": 5, "owner": "kumar2"},
        auth=SARAH,
    )
    assert response.status_code == 201
    body = client.get(response.headers["location"], auth=SARAH).json()
    assert body["id"] != 99
    assert body["owner"] == "sarah1"
    assert client.get("/cashcards/99", auth=SARAH).json()["amount"] == 123.45


def test_create_accepts_numeric_string(client):
    response = client.post("/cashcards", json={"amount": "42.10"}, auth=SARAH)
    assert response.status_code == 201
    assert client.get(response.headers["location"], auth=SARAH).json()["amount"] == 42.10


@pytest.mark.parametrize(
    "body",
    [{"amount": "lots"}, {"amount": None}, {}, {"amount": 1.234}, {"amount": True}, [1, 2]],
)
def test_create_with_malformed_amount_is_bad_request(client, body):
    response = client.post("/cashcards", json=body, auth=SARAH)
    assert response.status_code == 400
    assert len(client.get("/cashcards", auth=SARAH).json()) == 3


def test_create_with_invalid_json_is_bad_request(client):
    response = client.post(
        "/cashcards",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
        auth=SARAH,
    )
    assert response.status_code == 400


def test_created_ids_are_unique(client):
    locations = {
        client.post("/cashcards", json={"amount": n}, auth=SARAH).headers["location"] for n in range(5)
    }
    assert len(locations) == 5


def test_list_defaults_to_amount_ascending(client):
    response = client.get("/cashcards", auth=SARAH)
    assert response.status_code == 200
    cards = response.json()
    assert [c["amount"] for c in cards] == [1.00, 123.45, 150.00]
    assert sorted(c["id"] for c in cards) == [99, 100, 101]
    assert {c["owner"] for c in cards} == {"sarah1"}


def test_list_one_page(client):
    response = client.get("/cashcards?page=0&size=1", auth=SARAH)
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_list_pages_are_stable_and_complete(client):
    seen = []
    for page in range(3):
        seen += client.get(f"/cashcards?page={page}&size=1", auth=SARAH).json()
    assert [c["amount"] for c in seen] == [1.00, 123.45, 150.00]
    assert len({c["id"] for c in seen}) == 3


def test_list_sorted_descending(client):
    response = client.get("/cashcards?page=0&size=1&sort=amount,desc", auth=SARAH)
    assert response.status_code == 200
    cards = response.json()
    assert len(cards) == 1
    assert cards[0]["amount"] == 150.00


def test_list_edges(client):
    assert client.get("/cashcards?page=5&size=10", auth=SARAH).json() == []
    assert len(client.get("/cashcards?size=1000", auth=SARAH).json()) == 3
    assert client.get("/cashcards?page=-1", auth=SARAH).status_code == 400
    assert client.get("/cashcards?size=0", auth=SARAH).status_code == 400
    assert client.get("/cashcards?size=abc", auth=SARAH).status_code == 400
    assert client.get("/cashcards?sort=balance", auth=SARAH).status_code == 400


def test_list_is_scoped_to_the_caller(client):
    kumar_cards = client.get("/cashcards", auth=KUMAR).json()
    assert [c["id"] for c in kumar_cards] == [102]


def test_reads_are_idempotent(client):
    assert client.get("/cashcards/99", auth=SARAH).json() == client.get("/cashcards/99", auth=SARAH).json()
    assert client.get("/cashcards", auth=SARAH).json() == client.get("/cashcards", auth=SARAH).json()


def test_update_existing_card(client):
    response = client.put("/cashcards/99", json={"amount": 19.99}, auth=SARAH)
    assert response.status_code == 204
    assert response.content == b""
    assert client.get("/cashcards/99", auth=SARAH).json() == {"id": 99, "amount": 19.99, "owner": "sarah1"}


def test_update_cannot_move_card_to_another_owner(client):
    response = client.put("/cashcards/99", json={"id": 500, "amount": 1, "owner": "kumar2"}, auth=SARAH)
    assert response.status_code == 204
    assert client.get("/cashcards/99", auth=SARAH).json()["owner"] == "sarah1"
    assert client.get("/cashcards/99", auth=KUMAR).status_code == 404


def test_update_unknown_card_does_not_create_it(client):
    assert client.put("/cashcards/99999", json={"amount": 19.99}, auth=SARAH).status_code == 404
    assert client.get("/cashcards/99999", auth=SARAH).status_code == 404


def test_delete_card(client):
    response = client.delete("/cashcards/99", auth=SARAH)
    assert response.status_code == 204
    assert response.content == b""
    assert client.get("/cashcards/99", auth=SARAH).status_code == 404
    assert client.delete("/cashcards/99", auth=SARAH).status_code == 404


def test_malformed_id_is_bad_request(client):
    assert client.get("/cashcards/abc", auth=SARAH).status_code == 400


@pytest.mark.parametrize("card_id", [2**63, 2**64, 0, -1])
@pytest.mark.parametrize("method, body", [("GET", None), ("PUT", {"amount": 1}), ("DELETE", None)])
def test_id_outside_store_range_is_bad_request(client, card_id, method, body):
    response = client.request(method, f"/cashcards/{card_id}", json=body, auth=SARAH)
    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"


def test_largest_storable_id_is_just_missing(client):
    assert client.get(f"/cashcards/{2**63 - 1}", auth=SARAH).status_code == 404
    assert client.put(f"/cashcards/{2**63 - 1}", json={"amount": 1}, auth=SARAH).status_code == 404
    assert client.delete(f"/cashcards/{2**63 - 1}", auth=SARAH).status_code == 404


@pytest.mark.parametrize("auth", [("BAD-USER", "abc123"), ("sarah1", "BAD-PASSWORD")])
@pytest.mark.parametrize(
    "method, path",
    [("GET", "/cashcards/99"), ("GET", "/cashcards/1000"), ("GET", "/cashcards"), ("DELETE", "/cashcards/99")],
)
def test_bad_credentials_are_rejected(client, auth, method, path):
    response = client.request(method, path, auth=auth)
    assert response.status_code == 401
    assert response.headers["www-authenticate"].startswith("Basic")


def test_non_ascii_credentials_are_decoded_as_utf8(accented_client):
    headers = _basic(":".join(JOSE).encode("utf-8"))
    created = accented_client.post("/cashcards", json={"amount": 7}, headers=headers)
    assert created.status_code == 201
    cards = accented_client.get("/cashcards", headers=headers).json()
    assert [c["owner"] for c in cards] == [JOSE[0]]
    assert accented_client.get("/cashcards", auth=JOSE).status_code == 200


@pytest.mark.parametrize(
    "headers",
    [
        {"Authorization": "Basic !!!"},
        _basic(b"no-separator"),
        _basic(b"\xff\xfe:abc123"),
        {"Authorization": "Bearer abc123"},
    ],
)
def test_malformed_authorization_header_is_unauthenticated(client, headers):
    response = client.get("/cashcards", headers=headers)
    assert response.status_code == 401
    assert response.headers["www-authenticate"].startswith("Basic")
    assert response.json()["code"] == "unauthenticated"


def test_missing_credentials_beat_malformed_body(client):
    response = client.post("/cashcards", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 401


def test_principal_without_owner_role_is_forbidden(client):
    assert client.get("/cashcards/99", auth=HANK).status_code == 403
    assert client.get("/cashcards/1000", auth=HANK).status_code == 403
    assert client.post("/cashcards", json={"amount": 1}, auth=HANK).status_code == 403
    assert client.get("/cashcards", auth=HANK).status_code == 403
    assert client.put("/cashcards/99", json={"amount": 1}, auth=HANK).status_code == 403
    assert client.delete("/cashcards/99", auth=HANK).status_code == 403
    assert client.get("/cashcards/99", auth=SARAH).json() == {"id": 99, "amount": 123.45, "owner": "sarah1"}


def test_store_failure_is_a_server_error(client, seeded_repo, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    monkeypatch.setattr(seeded_repo, "get_by_id_and_owner", boom)
    response = client.get("/cashcards/99", auth=SARAH)
    assert response.status_code == 500
    assert "database is gone" not in response.text


def test_health_needs_no_credentials(client):
    assert client.get("/health").json() == {"status": "ok"}
