import pytest

from tiklive import create_app
from tiklive.config import TestConfig
from tiklive.extensions import db
from tiklive.models import (
    AdminPermission,
    Company,
    Influencer,
    Task,
    TaskApplication,
    TaskCategory,
    User,
    UserProfile,
)
from tiklive.models.user import ADMIN_PERMISSIONS

PASSWORD = "secret123"


class FakeImageHost:
    def __init__(self):
        self.uploads = []

    def upload(self, file_storage):
        self.uploads.append(file_storage.filename)
        return f"https://img.example.com/{len(self.uploads)}-{file_storage.filename}"


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json = json_data
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("no json body")
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        LOG_DIR = str(tmp_path / "logs")
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def backend(app):
    return app.extensions["backend"]


@pytest.fixture
def image_host(backend):
    host = FakeImageHost()
    backend.storage.image_host = host
    return host


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_client(app):
    """A fresh client per actor so sessions don't mix."""
    def _make():
        return app.test_client()
    return _make


# -----------------
# Factories
# -----------------

@pytest.fixture
def make_user():
    def _make(email, user_type, status="active", **detail):
        user = User(email=email, status=status)
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.flush()
        db.session.add(UserProfile(user_id=user.id, user_type=user_type))
        if user_type == "influencer":
            db.session.add(Influencer(
                user_id=user.id,
                nickname=detail.pop("nickname", email.split("@")[0]),
                **detail,
            ))
        elif user_type == "company":
            db.session.add(Company(
                user_id=user.id,
                company_name=detail.pop("company_name", email.split("@")[0].title()),
                **detail,
            ))
        elif user_type == "admin":
            for name in detail.pop("permissions", ADMIN_PERMISSIONS):
                db.session.add(AdminPermission(admin_id=user.id, permission_name=name))
        db.session.commit()
        return user
    return _make


@pytest.fixture
def make_task():
    def _make(company, **fields):
        fields.setdefault("title", "Spring launch live stream")
        fields.setdefault("status", "open")
        task = Task(company_id=company.id, **fields)
        db.session.add(task)
        db.session.commit()
        return task
    return _make


@pytest.fixture
def make_application():
    def _make(task, influencer, status="pending", **fields):
        row = TaskApplication(task_id=task.id, influencer_id=influencer.id, status=status, **fields)
        db.session.add(row)
        db.session.commit()
        return row
    return _make


@pytest.fixture
def make_category():
    def _make(name="Beauty", **fields):
        cat = TaskCategory(name=name, **fields)
        db.session.add(cat)
        db.session.commit()
        return cat
    return _make


@pytest.fixture
def login():
    def _login(client, email, password=PASSWORD):
        resp = client.post("/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp
    return _login
