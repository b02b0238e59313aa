from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from tiklive.extensions import db
from tiklive.models import Task, TaskApplication
from tiklive.services import application_service


def _scenario(make_user, make_task, make_application):
    brand = make_user("brand@tiklive.io", "company")
    alice = make_user("alice@tiklive.io", "influencer")
    bob = make_user("bob@tiklive.io", "influencer")
    t1 = make_task(brand.company)
    app1 = make_application(t1, alice.influencer)
    app2 = make_application(t1, bob.influencer)
    return brand, alice, bob, t1, app1, app2


def test_accept_selects_one_and_refuses_the_rest(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)

    resp = client.post(f"/company/applications/{app1.id}/accept")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["application"]["status"] == "accepted"
    assert body["task"]["status"] == "in_progress"

    task = db.session.get(Task, t1.id)
    assert db.session.get(TaskApplication, app1.id).status == "accepted"
    assert db.session.get(TaskApplication, app2.id).status == "refused"
    assert task.status == "in_progress"
    assert task.selected_influencer_id == alice.influencer.id
    assert task.current_applicants == 1
    accepted = TaskApplication.query.filter_by(task_id=t1.id, status="accepted").count()
    assert accepted == 1


def test_accepting_twice_is_a_noop(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)

    assert client.post(f"/company/applications/{app1.id}/accept").status_code == 200
    again = client.post(f"/company/applications/{app1.id}/accept")
    assert again.status_code == 200
    assert again.get_json()["application"]["status"] == "accepted"

    task = db.session.get(Task, t1.id)
    assert task.current_applicants == 1


def test_cannot_accept_second_applicant_after_selection(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)

    client.post(f"/company/applications/{app1.id}/accept")
    resp = client.post(f"/company/applications/{app2.id}/accept")
    assert resp.status_code == 409
    assert db.session.get(TaskApplication, app2.id).status == "refused"
    assert db.session.get(Task, t1.id).selected_influencer_id == alice.influencer.id


def test_other_company_cannot_accept(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    make_user("rival@tiklive.io", "company")
    login(client, "rival@tiklive.io")

    resp = client.post(f"/company/applications/{app1.id}/accept")
    assert resp.status_code == 403
    assert db.session.get(TaskApplication, app1.id).status == "pending"


def test_apply_and_duplicate(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    alice = make_user("alice@tiklive.io", "influencer")
    task = make_task(brand.company)
    login(client, alice.email)

    resp = client.post(f"/influencer/tasks/{task.id}/apply", json={"message": "Pick me", "proposed_rate": "300"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "pending"
    assert body["proposed_rate"] == 300.0

    dup = client.post(f"/influencer/tasks/{task.id}/apply", json={})
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "You have already applied to this task"
    assert TaskApplication.query.filter_by(task_id=task.id).count() == 1


def test_apply_requires_open_task(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    alice = make_user("alice@tiklive.io", "influencer")
    task = make_task(brand.company, status="cancelled")
    login(client, alice.email)

    resp = client.post(f"/influencer/tasks/{task.id}/apply", json={})
    assert resp.status_code == 409


def test_company_cannot_apply(client, login, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    task = make_task(brand.company)
    login(client, brand.email)

    assert client.post(f"/influencer/tasks/{task.id}/apply", json={}).status_code == 403


def test_apply_requires_sign_in(client, make_user, make_task):
    brand = make_user("brand@tiklive.io", "company")
    task = make_task(brand.company)
    assert client.post(f"/influencer/tasks/{task.id}/apply", json={}).status_code == 401


def test_reject_then_reject_again(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)

    resp = client.post(f"/company/applications/{app2.id}/reject")
    assert resp.status_code == 200
    assert resp.get_json()["application"]["status"] == "refused"
    assert client.post(f"/company/applications/{app2.id}/reject").status_code == 200
    assert db.session.get(Task, t1.id).status == "open"


def test_reject_accepted_is_conflict(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)
    client.post(f"/company/applications/{app1.id}/accept")

    assert client.post(f"/company/applications/{app1.id}/reject").status_code == 409


def test_withdraw_own_application(make_client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)

    alice_client = make_client()
    login(alice_client, alice.email)
    resp = alice_client.post(f"/influencer/applications/{app1.id}/withdraw")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "withdrawn"

    # bob cannot withdraw alice's application
    bob_client = make_client()
    login(bob_client, bob.email)
    assert bob_client.post(f"/influencer/applications/{app1.id}/withdraw").status_code == 403

    brand_client = make_client()
    login(brand_client, brand.email)
    assert brand_client.post(f"/company/applications/{app1.id}/accept").status_code == 409


def test_influencer_lists_own_applications(client, login, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, alice.email)

    rows = client.get("/influencer/applications").get_json()
    assert [r["id"] for r in rows] == [app1.id]
    assert rows[0]["task"]["title"] == t1.title


def test_task_lock_has_no_outer_join_on_postgresql(app, backend):
    sql = str(
        application_service.locked_task_query(backend, 1)
        .statement.compile(dialect=postgresql.dialect())
    )
    assert "LEFT OUTER JOIN" not in sql
    assert sql.rstrip().endswith("FOR UPDATE OF tasks")


def test_failed_accept_leaves_everything_pending(client, login, backend, monkeypatch, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)

    def broken_commit():
        backend.flush()
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(backend, "commit", broken_commit)
    resp = client.post(f"/company/applications/{app1.id}/accept")
    assert resp.status_code == 500
    monkeypatch.undo()

    task = db.session.get(Task, t1.id)
    assert db.session.get(TaskApplication, app1.id).status == "pending"
    assert db.session.get(TaskApplication, app2.id).status == "pending"
    assert task.status == "open"
    assert task.selected_influencer_id is None
    assert task.current_applicants == 0


def test_applicant_is_told_about_accept_and_reject(client, login, monkeypatch, make_user, make_task, make_application):
    brand, alice, bob, t1, app1, app2 = _scenario(make_user, make_task, make_application)
    login(client, brand.email)
    sent = []
    monkeypatch.setattr(application_service, "email_application_status", lambda a: sent.append((a.id, a.status)))

    client.post(f"/company/applications/{app2.id}/reject")
    client.post(f"/company/applications/{app1.id}/accept")
    assert sent == [(app2.id, "refused"), (app1.id, "accepted")]
