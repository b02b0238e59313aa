import pytest

from tiklive.extensions import db
from tiklive.models import Company, Influencer, User, UserProfile
from tiklive.services import auth_service, verification_service
from tiklive.services.exceptions import Conflict, ValidationFailed


def test_signup_creates_user_and_profile(client):
    resp = client.post("/auth/signup", json={
        "email": "  New@TikLive.io ",
        "password": "secret123",
        "user_type": "influencer",
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["user"]["email"] == "new@tiklive.io"
    assert body["profile"]["user_type"] == "influencer"

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["email"] == "new@tiklive.io"


def test_signup_duplicate_email(client, make_user):
    make_user("taken@tiklive.io", "company")
    resp = client.post("/auth/signup", json={
        "email": "taken@tiklive.io", "password": "secret123", "user_type": "company",
    })
    assert resp.status_code == 409


def test_signup_rejects_admin_type_and_short_password(client):
    resp = client.post("/auth/signup", json={"email": "x@tiklive.io", "password": "secret123", "user_type": "admin"})
    assert resp.status_code == 400
    resp = client.post("/auth/signup", json={"email": "x@tiklive.io", "password": "123", "user_type": "company"})
    assert resp.status_code == 400
    assert "details" in resp.get_json()


def test_signup_with_details_company(client):
    resp = client.post("/auth/signup/details", json={
        "email": "brand@tiklive.io",
        "password": "secret123",
        "user_type": "company",
        "details": {"company_name": "Acme Cosmetics", "industry": "Beauty"},
    })
    assert resp.status_code == 201
    assert resp.get_json()["company"]["company_name"] == "Acme Cosmetics"


def test_signup_with_details_is_all_or_nothing(backend):
    with pytest.raises(ValidationFailed):
        auth_service.sign_up_with_details(
            backend, "half@tiklive.io", "secret123", "influencer", details={"nickname": ""},
        )
    assert User.query.filter_by(email="half@tiklive.io").first() is None
    assert UserProfile.query.count() == 0
    assert Influencer.query.count() == 0


def test_signup_requires_ticket_when_verification_enabled(app, client):
    app.config["REQUIRE_EMAIL_VERIFICATION"] = True
    payload = {"email": "v@tiklive.io", "password": "secret123", "user_type": "company"}
    assert client.post("/auth/signup", json=payload).status_code == 400

    payload["verification_ticket"] = verification_service.issue_ticket("email", "v@tiklive.io")
    assert client.post("/auth/signup", json=payload).status_code == 201


def test_login_errors(client, make_user):
    make_user("alice@tiklive.io", "influencer")
    make_user("sus@tiklive.io", "influencer", status="suspended")

    bad = client.post("/auth/login", json={"email": "alice@tiklive.io", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.get_json()["error"] == "Invalid email or password."

    sus = client.post("/auth/login", json={"email": "sus@tiklive.io", "password": "secret123"})
    assert sus.status_code == 403


def test_login_records_last_login_and_logout_always_succeeds(client, login, make_user):
    user = make_user("alice@tiklive.io", "influencer")
    login(client, user.email)
    assert db.session.get(User, user.id).last_login_at is not None

    assert client.post("/auth/logout").status_code == 200
    assert client.get("/auth/me").status_code == 401
    assert client.post("/auth/logout").status_code == 200


def test_refresh_returns_admin_permissions(client, login, make_user):
    make_user("root@tiklive.io", "admin", permissions=["user_management"])
    login(client, "root@tiklive.io")

    body = client.post("/auth/refresh").get_json()
    assert body["profile"]["user_type"] == "admin"
    assert body["permissions"] == ["user_management"]


def test_provision_admin_creates_and_promotes(backend, make_user):
    user = auth_service.provision_admin(backend, "Ops@TikLive.io", "secret123")
    assert user.is_admin
    assert user.permission_names == sorted([
        "content_moderation", "data_analytics", "system_settings", "task_management", "user_management",
    ])

    # running again is harmless
    auth_service.provision_admin(backend, "ops@tiklive.io")
    assert len(db.session.get(User, user.id).permissions) == 5

    brand = make_user("brand@tiklive.io", "company")
    promoted = auth_service.provision_admin(backend, brand.email)
    assert promoted.user_type == "admin"


def test_sign_up_service_duplicate(backend, make_user):
    make_user("dup@tiklive.io", "company")
    with pytest.raises(Conflict):
        auth_service.sign_up(backend, "DUP@tiklive.io", "secret123", "company")
    assert Company.query.count() == 1


def test_csrf_endpoint(client):
    assert client.get("/auth/csrf").get_json()["csrf_token"]
