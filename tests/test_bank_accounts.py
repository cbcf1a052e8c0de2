import pytest

from app.infrastructure.repositories.bank_account_repository import SQLAlchemyBankAccountRepository
from conftest import auth

ACCOUNT = {
    "bankName": "PrivatBank",
    "swift": "PBANUA2X",
    "iban": "UA213223130000026007233566001",
    "holderName": "Maria Manager",
    "address": "Kyiv, Khreshchatyk 1",
    "identifier": "main",
}


def create_account(client, user, **overrides):
    return client.post("/api/bank-accounts", json={**ACCOUNT, **overrides}, headers=auth(user))


def test_manager_creates_account(client, manager):
    response = create_account(client, manager)
    assert response.status_code == 201
    body = response.json()
    assert body["managerId"] == manager.id
    assert body["identifier"] == "main"


def test_identifier_unique_per_manager(client, manager, other_manager):
    assert create_account(client, manager).status_code == 201

    duplicate = create_account(client, manager)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["message"] == "Identifier must be unique for this manager"

    assert create_account(client, other_manager).status_code == 201


@pytest.mark.parametrize("user_fixture", ["admin", "agent"])
def test_only_managers_create(client, request, user_fixture):
    user = request.getfixturevalue(user_fixture)
    response = create_account(client, user)
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Only managers can create bank accounts"


@pytest.mark.parametrize(
    "field,value",
    [
        ("swift", "pbanua2x"),
        ("swift", "PBAN12"),
        ("iban", "UA21"),
        ("holderName", "M4ria"),
        ("holderName", "M"),
        ("bankName", "PB"),
        ("address", "Kyiv; DROP TABLE"),
        ("identifier", ""),
    ],
)
def test_field_formats_are_validated(client, manager, field, value):
    response = create_account(client, manager, **{field: value})
    assert response.status_code == 422
    assert any(d["field"] == field for d in response.json()["error"]["details"])


def test_cyrillic_holder_name_is_accepted(client, manager):
    assert create_account(client, manager, holderName="Марія Іваненко").status_code == 201


def test_visibility(client, admin, manager, other_manager, agent, other_agent):
    create_account(client, manager, identifier="main")
    create_account(client, manager, identifier="reserve")
    create_account(client, other_manager, identifier="main")

    assert len(client.get("/api/bank-accounts", headers=auth(admin)).json()) == 3
    assert len(client.get("/api/bank-accounts", headers=auth(manager)).json()) == 2

    agent_view = client.get("/api/bank-accounts", headers=auth(agent)).json()
    assert {a["identifier"] for a in agent_view} == {"main", "reserve"}
    assert {a["managerId"] for a in agent_view} == {manager.id}

    reserve = client.get("/api/bank-accounts/reserve", headers=auth(agent))
    assert reserve.status_code == 200
    assert client.get("/api/bank-accounts/reserve", headers=auth(other_agent)).status_code == 404


def test_agent_without_manager(client, make_user):
    orphan = make_user("agent", "orphan@example.com")
    response = client.get("/api/bank-accounts", headers=auth(orphan))
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Agent not found or not assigned to a manager"


def test_update_and_delete_by_owner_only(client, manager, other_manager):
    account = create_account(client, manager).json()
    create_account(client, manager, identifier="reserve")

    foreign = client.put(f"/api/bank-accounts/{account['id']}", json={"bankName": "Other"}, headers=auth(other_manager))
    assert foreign.status_code == 403
    assert foreign.json()["error"]["message"] == "You are not authorized to update this bank account"

    clash = client.put(f"/api/bank-accounts/{account['id']}", json={"identifier": "reserve"}, headers=auth(manager))
    assert clash.status_code == 409

    updated = client.put(f"/api/bank-accounts/{account['id']}", json={"bankName": "Monobank"}, headers=auth(manager))
    assert updated.status_code == 200
    assert updated.json()["bankName"] == "Monobank"
    assert updated.json()["identifier"] == "main"

    assert client.delete(f"/api/bank-accounts/{account['id']}", headers=auth(other_manager)).status_code == 403
    assert client.delete(f"/api/bank-accounts/{account['id']}", headers=auth(manager)).status_code == 204
    assert client.get("/api/bank-accounts/main", headers=auth(manager)).status_code == 404


def test_concurrent_duplicate_is_a_conflict(client, manager, monkeypatch):
    assert create_account(client, manager).status_code == 201
    reserve = create_account(client, manager, identifier="reserve").json()

    # the other request inserted between our check and our flush
    monkeypatch.setattr(SQLAlchemyBankAccountRepository, "identifier_taken", lambda *args, **kwargs: False)

    duplicate = create_account(client, manager)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["message"] == "Identifier must be unique for this manager"

    renamed = client.put(f"/api/bank-accounts/{reserve['id']}", json={"identifier": "main"}, headers=auth(manager))
    assert renamed.status_code == 409
    assert len(client.get("/api/bank-accounts", headers=auth(manager)).json()) == 2
