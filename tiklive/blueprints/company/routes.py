# tiklive/blueprints/company/routes.py
from flask import jsonify, request
from flask_login import current_user

from ...backend import get_backend
from ...security import roles_required
from ...services import application_service, profile_service, task_service
from ..utils import json_body, validate_form
from . import company_bp
from .forms import TaskForm


# -----------------
# Profile
# -----------------

@company_bp.get("/profile")
@roles_required("company")
def profile():
    comp = current_user.company
    return jsonify({"company": comp.to_dict() if comp else None})


@company_bp.put("/profile")
@roles_required("company")
def profile_save():
    comp = profile_service.save_company(get_backend(), current_user, json_body())
    return jsonify({"company": comp.to_dict()})


@company_bp.post("/profile/logo")
@roles_required("company")
def profile_logo():
    url = profile_service.upload_company_logo(get_backend(), current_user, request.files.get("file"))
    return jsonify({"url": url})


# -----------------
# Tasks
# -----------------

@company_bp.post("/tasks")
@roles_required("company")
def task_new():
    form = validate_form(TaskForm, json_body())
    data = {name: field.data for name, field in form._fields.items()}
    task = task_service.create_task(get_backend(), current_user.company, data)
    return jsonify(task.to_dict()), 201


@company_bp.get("/tasks")
@roles_required("company")
def tasks():
    rows, counts = task_service.company_tasks(get_backend(), current_user.company)
    return jsonify({"tasks": [t.to_dict() for t in rows], "counts": counts})


@company_bp.post("/tasks/<int:task_id>/cancel")
@roles_required("company")
def task_cancel(task_id):
    return jsonify(task_service.cancel_task(get_backend(), current_user.company, task_id).to_dict())


@company_bp.post("/tasks/<int:task_id>/complete")
@roles_required("company")
def task_complete(task_id):
    return jsonify(task_service.complete_task(get_backend(), current_user.company, task_id).to_dict())


@company_bp.post("/tasks/<int:task_id>/settle")
@roles_required("company")
def task_settle(task_id):
    amount = json_body().get("settlement_amount")
    return jsonify(task_service.settle_task(get_backend(), current_user.company, task_id, amount).to_dict())


# -----------------
# Applications
# -----------------

@company_bp.post("/applications/<int:application_id>/accept")
@roles_required("company")
def application_accept(application_id):
    app_row = application_service.accept(get_backend(), current_user.company, application_id)
    return jsonify({"application": app_row.to_dict(), "task": app_row.task.to_dict()})


@company_bp.post("/applications/<int:application_id>/reject")
@roles_required("company")
def application_reject(application_id):
    app_row = application_service.reject(get_backend(), current_user.company, application_id)
    return jsonify({"application": app_row.to_dict()})
