from conftest import PASSWORD, auth


def test_admin_lists_users_with_filters(client, admin, manager, agent, other_agent):
    everyone = client.get("/api/users", headers=auth(admin)).json()
    assert everyone["total"] == 5

    agents = client.get("/api/users?role=agent", headers=auth(admin)).json()
    assert {u["email"] for u in agents["items"]} == {agent.email, other_agent.email}

    found = client.get("/api/users?search=maria", headers=auth(admin)).json()
    assert [u["email"] for u in found["items"]] == [manager.email]

    assert client.get("/api/users?role=superuser", headers=auth(admin)).status_code == 400
    assert client.get("/api/users", headers=auth(manager)).status_code == 403


def test_admin_cannot_be_blocked(client, admin, make_user):
    second_admin = make_user("admin", "admin2@example.com")
    response = client.patch(f"/api/users/{second_admin.id}/toggle-status", json={"isActive": False}, headers=auth(admin))
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Admin users cannot be blocked"


def test_blocked_user_loses_access(client, admin, agent):
    response = client.patch(f"/api/users/{agent.id}/toggle-status", json={"isActive": False}, headers=auth(admin))
    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert client.get("/api/auth/me", headers=auth(agent)).status_code == 401

    flipped = client.patch(f"/api/users/{agent.id}/toggle-status", headers=auth(admin))
    assert flipped.json()["isActive"] is True


def test_toggle_unknown_user(client, admin):
    assert client.patch("/api/users/nope/toggle-status", json={"isActive": False}, headers=auth(admin)).status_code == 404


def test_manager_sees_only_own_agents(client, admin, manager, agent, other_agent):
    mine = client.get("/api/agents", headers=auth(manager)).json()
    assert [a["id"] for a in mine["items"]] == [agent.id]

    everyone = client.get("/api/agents", headers=auth(admin)).json()
    assert everyone["total"] == 2

    assert client.get(f"/api/agents/{agent.id}", headers=auth(manager)).status_code == 200
    assert client.get(f"/api/agents/{other_agent.id}", headers=auth(manager)).status_code == 404
    assert client.get("/api/agents", headers=auth(agent)).status_code == 403


def test_manager_updates_and_blocks_agent(client, manager, agent, other_agent):
    response = client.put(
        f"/api/agents/{agent.id}",
        json={"firstName": "Andrew", "phone": "+380671234567", "email": "hijack@example.com"},
        headers=auth(manager),
    )
    assert response.status_code == 200
    assert response.json()["firstName"] == "Andrew"
    assert response.json()["email"] == agent.email

    blocked = client.patch(f"/api/agents/{agent.id}/toggle-status", json={"isActive": False}, headers=auth(manager))
    assert blocked.json()["isActive"] is False

    foreign = client.patch(f"/api/agents/{other_agent.id}/toggle-status", json={"isActive": False}, headers=auth(manager))
    assert foreign.status_code == 404


def test_profile_roundtrip(client, agent):
    profile = client.get("/api/profile", headers=auth(agent))
    assert profile.json()["email"] == agent.email

    updated = client.put("/api/profile", json={"lastName": "Smith", "phone": "+380931112233"}, headers=auth(agent))
    assert updated.status_code == 200
    assert updated.json()["lastName"] == "Smith"
    assert updated.json()["firstName"] == "Andy"

    bad_phone = client.put("/api/profile", json={"phone": "12-34"}, headers=auth(agent))
    assert bad_phone.status_code == 422


def test_change_password(client, agent):
    wrong = client.put(
        "/api/profile/change-password",
        json={"currentPassword": "not-it", "newPassword": "brand-new-pass"},
        headers=auth(agent),
    )
    assert wrong.status_code == 400
    assert wrong.json()["error"]["message"] == "Current password is incorrect"

    ok = client.put(
        "/api/profile/change-password",
        json={"currentPassword": PASSWORD, "newPassword": "brand-new-pass"},
        headers=auth(agent),
    )
    assert ok.status_code == 200

    login = client.post("/api/auth/login", json={"email": agent.email, "password": "brand-new-pass"})
    assert login.status_code == 200


def test_profile_names_cannot_be_nulled(client, agent):
    response = client.put("/api/profile", json={"firstName": None}, headers=auth(agent))
    assert response.status_code == 422
    assert [d["field"] for d in response.json()["error"]["details"]] == ["firstName"]

    cleared = client.put("/api/profile", json={"phone": None}, headers=auth(agent))
    assert cleared.status_code == 200
    assert cleared.json()["phone"] is None
    assert cleared.json()["firstName"] == "Andy"


def test_agent_names_cannot_be_nulled(client, manager, agent):
    response = client.put(f"/api/agents/{agent.id}", json={"lastName": None}, headers=auth(manager))
    assert response.status_code == 422
    assert [d["field"] for d in response.json()["error"]["details"]] == ["lastName"]
