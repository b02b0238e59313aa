import io

from tiklive.extensions import db
from tiklive.models import Influencer, User, UserProfile


def test_influencer_profile_edit_keeps_vetting_flags(client, login, make_user):
    user = make_user("alice@tiklive.io", "influencer", is_approved=True, is_verified=True)
    login(client, user.email)

    resp = client.put("/influencer/profile", json={
        "nickname": "Alice Live",
        "hourly_rate": "250",
        "categories": ["beauty", "fashion", "beauty"],
        "tags": "vlog, haul",
        "is_approved": False,
        "status": "suspended",
    })
    assert resp.status_code == 200
    body = resp.get_json()["influencer"]
    assert body["nickname"] == "Alice Live"
    assert body["hourly_rate"] == 250.0
    assert body["categories"] == ["beauty", "fashion"]
    assert body["tags"] == ["haul", "vlog"]
    assert body["is_approved"] is True
    assert body["status"] == "active"


def test_influencer_profile_created_on_first_save(client, login):
    user = User(email="fresh@tiklive.io")
    user.set_password("secret123")
    db.session.add(user)
    db.session.commit()
    db.session.add(UserProfile(user_id=user.id, user_type="influencer"))
    db.session.commit()
    login(client, "fresh@tiklive.io")

    assert client.get("/influencer/profile").get_json()["influencer"] is None
    assert client.put("/influencer/profile", json={"bio": "hi"}).status_code == 400
    resp = client.put("/influencer/profile", json={"nickname": "Fresh"})
    assert resp.status_code == 200
    assert Influencer.query.filter_by(user_id=user.id).one().nickname == "Fresh"


def test_avatar_upload_uses_image_host(client, login, make_user, image_host):
    user = make_user("alice@tiklive.io", "influencer")
    login(client, user.email)

    resp = client.post(
        "/influencer/profile/avatar",
        data={"file": (io.BytesIO(b"\x89PNG fake"), "me.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert resp.get_json()["url"] == "https://img.example.com/1-me.png"
    assert db.session.get(User, user.id).influencer.avatar_url == "https://img.example.com/1-me.png"


def test_upload_rejects_bad_extension(client, login, make_user, image_host):
    user = make_user("alice@tiklive.io", "influencer")
    login(client, user.email)

    resp = client.post(
        "/influencer/profile/id-photo",
        data={"file": (io.BytesIO(b"MZ"), "tool.exe")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert image_host.uploads == []


def test_logo_stored_locally_without_image_host(client, login, make_user, backend):
    user = make_user("brand@tiklive.io", "company")
    login(client, user.email)

    resp = client.post(
        "/company/profile/logo",
        data={"file": (io.BytesIO(b"GIF89a"), "logo.gif")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    url = resp.get_json()["url"]
    assert url.startswith(f"/uploads/company-logos/{user.id}/")
    assert url.endswith("-logo.gif")

    served = client.get(url)
    assert served.status_code == 200
    assert served.data == b"GIF89a"


def test_company_profile_edit(client, login, make_user):
    user = make_user("brand@tiklive.io", "company")
    login(client, user.email)

    resp = client.put("/company/profile", json={"company_name": "Acme", "website": "https://acme.cn", "is_verified": True})
    body = resp.get_json()["company"]
    assert body["company_name"] == "Acme"
    assert body["website"] == "https://acme.cn"
    assert body["is_verified"] is False


def test_password_change(client, login, make_user):
    make_user("alice@tiklive.io", "influencer")
    login(client, "alice@tiklive.io")

    bad = client.post("/account/password", json={
        "current_password": "nope", "new_password": "newpass1", "confirm_password": "newpass1",
    })
    assert bad.status_code == 400
    short = client.post("/account/password", json={
        "current_password": "secret123", "new_password": "abc", "confirm_password": "abc",
    })
    assert short.status_code == 400
    mismatch = client.post("/account/password", json={
        "current_password": "secret123", "new_password": "newpass1", "confirm_password": "newpass2",
    })
    assert mismatch.status_code == 400
    ok = client.post("/account/password", json={
        "current_password": "secret123", "new_password": "newpass1", "confirm_password": "newpass1",
    })
    assert ok.status_code == 200

    client.post("/auth/logout")
    login(client, "alice@tiklive.io", "newpass1")
