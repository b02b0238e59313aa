from tiklive.extensions import db
from tiklive.models import Task
from tiklive.services.task_service import split_requirements


def test_split_requirements():
    assert split_requirements("  Wear the product \n\n  Mention the code\n") == ["Wear the product", "Mention the code"]
    assert split_requirements(["a", " ", "b "]) == ["a", "b"]
    assert split_requirements(None) == []


def test_create_task(client, login, make_user, make_category):
    brand = make_user("brand@tiklive.io", "company")
    cat = make_category()
    login(client, brand.email)

    resp = client.post("/company/tasks", json={
        "title": "Summer serum launch",
        "category_id": cat.id,
        "requirements": "Show the bottle\n\nMention the discount",
        "budget_min": 500,
        "budget_max": 1500,
        "live_date": "2026-07-01T20:00",
        "is_urgent": True,
    })
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    assert body["status"] == "open"
    assert body["requirements"] == ["Show the bottle", "Mention the discount"]
    assert body["duration_hours"] == 2
    assert body["current_applicants"] == 0
    assert body["is_urgent"] is True
    assert body["category"] == {"name": "Beauty"}


def test_create_task_validation(client, login, make_user):
    brand = make_user("brand@tiklive.io", "company")
    login(client, brand.email)

    assert client.post("/company/tasks", json={"budget_min": 1}).status_code == 400
    resp = client.post("/company/tasks", json={"title": "X", "budget_min": 900, "budget_max": 100})
    assert resp.status_code == 400
    resp = client.post("/company/tasks", json={"title": "X", "is_advance_paid": True})
    assert resp.status_code == 400
    resp = client.post("/company/tasks", json={"title": "X", "is_advance_paid": True, "paid_amount": 200})
    assert resp.status_code == 201
    assert resp.get_json()["paid_amount"] == 200
    assert Task.query.count() == 1


def test_influencer_cannot_create_task(client, login, make_user):
    make_user("alice@tiklive.io", "influencer")
    login(client, "alice@tiklive.io")
    assert client.post("/company/tasks", json={"title": "Nope"}).status_code == 403


def test_company_task_list_counts(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    make_task(brand.company, title="A")
    make_task(brand.company, title="B", status="completed")
    other = make_user("other@tiklive.io", "company")
    make_task(other.company, title="Not mine")
    login(client, brand.email)

    body = client.get("/company/tasks").get_json()
    assert sorted(t["title"] for t in body["tasks"]) == ["A", "B"]
    assert body["counts"]["open"] == 1
    assert body["counts"]["completed"] == 1
    assert body["counts"]["total"] == 2


def test_task_status_transitions(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    open_task = make_task(brand.company)
    running = make_task(brand.company, status="in_progress")
    login(client, brand.email)

    assert client.post(f"/company/tasks/{running.id}/cancel").status_code == 409
    assert client.post(f"/company/tasks/{open_task.id}/cancel").get_json()["status"] == "cancelled"
    assert client.post(f"/company/tasks/{open_task.id}/complete").status_code == 409

    assert client.post(f"/company/tasks/{running.id}/settle", json={"settlement_amount": 800}).status_code == 409
    assert client.post(f"/company/tasks/{running.id}/complete").get_json()["status"] == "completed"
    resp = client.post(f"/company/tasks/{running.id}/settle", json={"settlement_amount": 800})
    assert resp.status_code == 200
    assert resp.get_json()["is_settled"] is True
    assert db.session.get(Task, running.id).settlement_amount == 800
    assert client.post(f"/company/tasks/{running.id}/settle", json={"settlement_amount": 800}).status_code == 409


def test_cannot_touch_other_company_task(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    task = make_task(brand.company)
    make_user("rival@tiklive.io", "company")
    login(client, "rival@tiklive.io")

    assert client.post(f"/company/tasks/{task.id}/cancel").status_code == 403
