from datetime import datetime, timedelta, timezone

import pytest

from app.application.services.notification_service import format_invitation_email
from app.domain.models.invitation import Invitation
from app.domain.models.user import User
from app.infrastructure.mailer import SMTPMailer
from conftest import auth


def invite(client, user, email="new.agent@example.com", role="agent"):
    return client.post("/api/invitations", json={"email": email, "role": role}, headers=auth(user))


def register(client, token, **overrides):
    body = {"password": "password123", "firstName": "New", "lastName": "Agent", "phone": "+380501112233"}
    body.update(overrides)
    return client.post(f"/api/auth/register/{token}", json=body)


def test_manager_invites_agent_and_redemption_links_manager(client, db, manager):
    response = invite(client, manager, email="Agent@Example.com")
    assert response.status_code == 201
    invitation = response.json()
    assert invitation["email"] == "agent@example.com"
    assert invitation["role"] == "agent"
    assert invitation["invitedBy"] == manager.id
    assert invitation["used"] is False

    registered = register(client, invitation["token"])
    assert registered.status_code == 201
    user = registered.json()["user"]
    assert user["role"] == "agent"
    assert user["managerId"] == manager.id
    assert registered.json()["token"]

    stored = db.query(Invitation).filter(Invitation.id == invitation["id"]).one()
    assert stored.used is True


def test_admin_invited_agent_has_no_manager(client, admin):
    token = invite(client, admin).json()["token"]
    user = register(client, token).json()["user"]
    assert user["managerId"] is None


def test_admin_invites_manager(client, admin):
    response = invite(client, admin, email="boss2@example.com", role="manager")
    assert response.status_code == 201
    user = register(client, response.json()["token"]).json()["user"]
    assert user["role"] == "manager"
    assert user["managerId"] is None


def test_only_admin_invites_managers(client, manager):
    response = invite(client, manager, role="manager")
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Only admin can invite managers"


def test_agents_cannot_invite(client, agent):
    assert invite(client, agent).status_code == 403


def test_invalid_role_is_rejected(client, admin):
    assert invite(client, admin, role="admin").status_code == 422


def test_existing_user_conflict(client, admin, agent):
    response = invite(client, admin, email=agent.email)
    assert response.status_code == 409
    assert response.json()["error"]["message"] == "User with this email already exists"


def test_active_invitation_conflict_until_cancelled(client, manager):
    first = invite(client, manager)
    assert first.status_code == 201

    second = invite(client, manager)
    assert second.status_code == 409
    assert second.json()["error"]["message"] == "Active invitation for this email already exists"

    cancelled = client.delete(f"/api/invitations/{first.json()['id']}", headers=auth(manager))
    assert cancelled.status_code == 204
    assert invite(client, manager).status_code == 201


def test_new_invitation_allowed_after_expiry(client, db, manager):
    first = invite(client, manager).json()
    db.query(Invitation).filter(Invitation.id == first["id"]).update(
        {"expires_at": datetime.now(timezone.utc) - timedelta(minutes=1)}
    )
    db.commit()
    assert invite(client, manager).status_code == 201


def test_expired_invitation_cannot_be_redeemed(client, db, manager):
    invitation = invite(client, manager).json()
    db.query(Invitation).filter(Invitation.id == invitation["id"]).update(
        {"expires_at": datetime.now(timezone.utc) - timedelta(seconds=1)}
    )
    db.commit()

    response = register(client, invitation["token"])
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invitation has expired"


def test_invitation_is_single_use(client, db, manager):
    token = invite(client, manager).json()["token"]
    assert register(client, token).status_code == 201

    again = register(client, token, firstName="Twice")
    assert again.status_code == 400
    assert again.json()["error"]["message"] == "Invalid or expired invitation token"
    assert db.query(User).filter(User.first_name == "Twice").count() == 0


def test_unknown_token(client):
    assert register(client, "no-such-token").status_code == 400


def test_register_validates_body(client, manager):
    token = invite(client, manager).json()["token"]
    response = register(client, token, password="short")
    assert response.status_code == 422


def test_cancel_rules(client, admin, manager, other_manager):
    invitation = invite(client, manager).json()

    forbidden = client.delete(f"/api/invitations/{invitation['id']}", headers=auth(other_manager))
    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["message"] == "You are not authorized to cancel this invitation"

    assert client.delete(f"/api/invitations/{invitation['id']}", headers=auth(admin)).status_code == 204
    assert client.delete(f"/api/invitations/{invitation['id']}", headers=auth(admin)).status_code == 404


def test_used_invitation_cannot_be_cancelled(client, manager):
    invitation = invite(client, manager).json()
    register(client, invitation["token"])
    response = client.delete(f"/api/invitations/{invitation['id']}", headers=auth(manager))
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Cannot cancel used invitation"


def test_list_is_scoped_to_inviter(client, admin, manager, other_manager):
    invite(client, manager, email="one@example.com")
    invite(client, other_manager, email="two@example.com")
    invite(client, admin, email="three@example.com")

    mine = client.get("/api/invitations", headers=auth(manager)).json()
    assert [i["email"] for i in mine["items"]] == ["one@example.com"]

    everything = client.get("/api/invitations", headers=auth(admin)).json()
    assert everything["total"] == 3

    filtered = client.get(f"/api/invitations?invitedBy={other_manager.id}", headers=auth(admin)).json()
    assert [i["email"] for i in filtered["items"]] == ["two@example.com"]


def test_email_failure_does_not_fail_invitation(client, db, manager, monkeypatch):
    def broken_send(self, to, subject, html, text=""):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(SMTPMailer, "send", broken_send)
    response = invite(client, manager)
    assert response.status_code == 201
    assert db.query(Invitation).count() == 1


def test_invitation_email_content(manager):
    invitation = Invitation(email="x@example.com", role="agent", token="tok-123")
    subject, html = format_invitation_email(invitation, manager)
    assert subject == "Invitation to join Travel Agency CRM as Agent"
    assert "/register/tok-123" in html
    assert "Maria Manager" in html
    assert "7 days" in html


@pytest.mark.parametrize("first_name,last_name,expected", [("", "", "mgr@example.com"), ("Ann", "", "Ann")])
def test_inviter_name_falls_back_to_email(first_name, last_name, expected):
    inviter = User(email="mgr@example.com", first_name=first_name, last_name=last_name)
    _, html = format_invitation_email(Invitation(email="x@example.com", role="agent", token="t"), inviter)
    assert f"invited by {expected} to join" in html
