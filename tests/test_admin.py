"""Tests for announcements and admin user management."""

from __future__ import annotations

import pytest

from models import db
from models.user import User


def test_announcements_are_admin_authored(client, make_user, auth_headers):
    admin_id = make_user("admin@x.com", user_type="admin", name="Kap")
    other_admin = auth_headers(make_user("admin2@x.com", user_type="admin"))
    admin = auth_headers(admin_id)
    farmer = auth_headers(make_user("farmer@x.com"))
    payload = {"title": "Market day", "content": "Saturday at the plaza"}

    denied = client.post("/announcements", json=payload, headers=farmer)
    assert denied.status_code == 403
    assert denied.get_json()["message"] == "Only admins can create announcements"

    routine = client.post("/announcements", json=payload, headers=admin)
    urgent = client.post(
        "/announcements",
        json={"title": "Typhoon", "content": "Market closed", "is_important": True},
        headers=admin,
    )
    assert routine.status_code == urgent.status_code == 200
    assert routine.get_json()["data"]["announcement"]["admin_name"] == "Kap"

    listed = client.get("/announcements").get_json()["data"]["announcements"]
    assert [item["title"] for item in listed] == ["Typhoon", "Market day"]
    important = client.get("/announcements?important=1").get_json()["data"]["announcements"]
    assert [item["title"] for item in important] == ["Typhoon"]

    routine_id = routine.get_json()["data"]["announcement"]["id"]
    assert client.put(f"/announcements/{routine_id}", json={"title": "x"}, headers=other_admin).status_code == 404
    assert client.delete(f"/announcements/{routine_id}", headers=admin).status_code == 200


def test_admin_verifies_farmer(client, make_user, auth_headers):
    admin_id = make_user("admin@x.com", user_type="admin", is_verified=True)
    farmer_id = make_user("farmer@x.com", barangay_id="BRGY-0042")
    admin = auth_headers(admin_id)

    response = client.post(
        f"/admin/users/{farmer_id}/verify",
        json={"notes": "ID matches records"},
        headers=admin,
    )

    assert response.status_code == 200
    user = response.get_json()["data"]["user"]
    assert user["is_verified"] is True
    assert user["verified_by"] == admin_id
    assert user["verification_notes"] == "ID matches records"
    assert user["verification_date"] is not None


def test_admin_cannot_verify_or_delete_self(client, make_user, auth_headers):
    admin_id = make_user("admin@x.com", user_type="admin")
    admin = auth_headers(admin_id)

    verify = client.post(f"/admin/users/{admin_id}/verify", headers=admin)
    assert verify.status_code == 400
    assert verify.get_json()["message"] == "Cannot verify your own account"

    delete = client.delete(f"/admin/users/{admin_id}", headers=admin)
    assert delete.status_code == 400
    assert delete.get_json()["message"] == "Cannot delete your own account"


def test_admin_update_uses_allowlist(client, make_user, auth_headers):
    admin = auth_headers(make_user("admin@x.com", user_type="admin"))
    farmer_id = make_user("farmer@x.com")

    response = client.put(
        f"/admin/users/{farmer_id}",
        json={"name": "Pedro Cruz", "user_type": "admin", "product_type": "rice"},
        headers=admin,
    )

    assert response.status_code == 200
    user = response.get_json()["data"]["user"]
    assert user["name"] == "Pedro Cruz"
    assert user["product_type"] == "rice"
    assert user["user_type"] == "farmer"


def test_admin_update_rejects_taken_email(client, make_user, auth_headers):
    admin = auth_headers(make_user("admin@x.com", user_type="admin"))
    make_user("taken@x.com")
    farmer_id = make_user("farmer@x.com")

    response = client.put(f"/admin/users/{farmer_id}", json={"email": "Taken@x.com"}, headers=admin)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Email already registered"


@pytest.mark.parametrize("email", ["a@", "@x.com", "no-at-sign", "a b@x.com"])
def test_admin_update_rejects_malformed_email(client, make_user, auth_headers, app, email):
    admin = auth_headers(make_user("admin@x.com", user_type="admin"))
    farmer_id = make_user("farmer@x.com")

    response = client.put(f"/admin/users/{farmer_id}", json={"email": email}, headers=admin)

    assert response.status_code == 400
    assert response.get_json()["message"] == "email must be a valid email address"
    with app.app_context():
        assert db.session.get(User, farmer_id).email == "farmer@x.com"


def test_admin_user_not_found(client, make_user, auth_headers):
    admin = auth_headers(make_user("admin@x.com", user_type="admin"))

    response = client.delete("/admin/users/999", headers=admin)

    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "User not found"}


def test_admin_lists_users_by_type(client, make_user, auth_headers):
    admin = auth_headers(make_user("admin@x.com", user_type="admin"))
    make_user("farmer@x.com")
    make_user("buyer@x.com", user_type="buyer")

    response = client.get("/admin/users?user_type=buyer", headers=admin)

    users = response.get_json()["data"]["users"]
    assert [user["email"] for user in users] == ["buyer@x.com"]
    assert client.get("/admin/users?user_type=owner", headers=admin).status_code == 400
