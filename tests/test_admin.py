from tiklive.extensions import db
from tiklive.models import AdminLog, Task, TaskApplication, TaskCategory, User


def _admin(make_user, client, login, permissions=None):
    kwargs = {} if permissions is None else {"permissions": permissions}
    make_user("root@tiklive.io", "admin", **kwargs)
    login(client, "root@tiklive.io")


def test_admin_routes_require_admin(client, login, make_user):
    make_user("brand@tiklive.io", "company")
    login(client, "brand@tiklive.io")
    assert client.get("/admin/dashboard").status_code == 403
    assert client.get("/admin/users").status_code == 403


def test_dashboard_and_stats_refresh(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    make_user("alice@tiklive.io", "influencer")
    make_task(brand.company)
    _admin(make_user, client, login)

    empty = client.get("/admin/dashboard").get_json()
    assert empty["stats"]["totalUsers"] == 0

    body = client.post("/admin/stats/refresh").get_json()
    assert body["stats"]["totalUsers"] == 3
    assert body["stats"]["totalInfluencers"] == 1
    assert body["stats"]["totalCompanies"] == 1
    assert body["stats"]["totalTasks"] == 1
    assert body["stats"]["dailyNewTasks"] == 1


def test_user_list_search_and_approve(client, login, make_user):
    alice = make_user("alice@tiklive.io", "influencer", nickname="AliceLive")
    make_user("brand@tiklive.io", "company", company_name="Acme")
    _admin(make_user, client, login)

    rows = client.get("/admin/users?user_type=influencer").get_json()
    assert [r["email"] for r in rows] == ["alice@tiklive.io"]
    assert rows[0]["approve_status"] is False

    assert [r["email"] for r in client.get("/admin/users?q=acme").get_json()] == ["brand@tiklive.io"]
    assert client.get("/admin/users?user_type=robot").status_code == 400

    resp = client.post(f"/admin/users/{alice.id}/approve")
    assert resp.status_code == 200
    assert resp.get_json()["approve_status"] is True
    inf = db.session.get(User, alice.id).influencer
    assert inf.is_approved and inf.is_verified

    log = AdminLog.query.one()
    assert log.action_type == "approve_user"
    assert log.target_id == alice.id
    assert client.get("/admin/dashboard").get_json()["recentActivities"][0]["type"] == "approve_user"


def test_suspend_blocks_login(client, make_client, login, make_user):
    alice = make_user("alice@tiklive.io", "influencer")
    _admin(make_user, client, login)

    assert client.post(f"/admin/users/{alice.id}/suspend", json={"reason": "spam"}).status_code == 200
    other = make_client()
    assert other.post("/auth/login", json={"email": alice.email, "password": "secret123"}).status_code == 403

    assert client.post(f"/admin/users/{alice.id}/unsuspend").get_json()["status"] == "active"
    assert [entry.action_type for entry in AdminLog.query.order_by(AdminLog.id)] == ["suspend_user", "unsuspend_user"]


def test_mutations_need_permission(client, login, make_user):
    alice = make_user("alice@tiklive.io", "influencer")
    _admin(make_user, client, login, permissions=["data_analytics"])

    assert client.get("/admin/users").status_code == 200
    assert client.post(f"/admin/users/{alice.id}/approve").status_code == 403
    assert client.post("/admin/categories", json={"name": "Food"}).status_code == 403
    assert AdminLog.query.count() == 0


def test_task_delete_cascades(client, login, make_user, make_task, make_application):
    brand = make_user("brand@tiklive.io", "company")
    alice = make_user("alice@tiklive.io", "influencer")
    task = make_task(brand.company)
    make_application(task, alice.influencer)
    _admin(make_user, client, login)

    assert len(client.get("/admin/tasks?status=open").get_json()) == 1
    assert client.get("/admin/tasks?status=bogus").status_code == 400
    assert len(client.get(f"/admin/tasks/{task.id}").get_json()["applications"]) == 1

    task_id = task.id
    assert client.delete(f"/admin/tasks/{task_id}").status_code == 200
    assert db.session.get(Task, task_id) is None
    assert TaskApplication.query.count() == 0
    assert AdminLog.query.one().action_type == "delete_task"


def test_category_management(client, login, make_user, make_task):
    _admin(make_user, client, login)

    created = client.post("/admin/categories", json={"name": "Food", "sort_order": 3})
    assert created.status_code == 201
    cat_id = created.get_json()["id"]

    updated = client.put(f"/admin/categories/{cat_id}", json={"is_active": False})
    assert updated.get_json()["is_active"] is False
    assert client.put(f"/admin/categories/{cat_id}", json={"name": " "}).status_code == 400

    brand = make_user("brand@tiklive.io", "company")
    make_task(brand.company, category_id=cat_id)
    assert client.delete(f"/admin/categories/{cat_id}").status_code == 409

    Task.query.delete()
    db.session.commit()
    assert client.delete(f"/admin/categories/{cat_id}").status_code == 200
    assert db.session.get(TaskCategory, cat_id) is None
