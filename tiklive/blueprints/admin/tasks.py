from flask import jsonify, request
from flask_babel import gettext as _
from flask_login import current_user

from ...backend import get_backend
from ...models.task import TASK_STATUSES
from ...security import roles_required, permission_required
from ...services import admin_service
from ...services.exceptions import ValidationFailed
from . import admin_bp


@admin_bp.get("/tasks")
@roles_required("admin")
def tasks_list():
    status = (request.args.get("status") or "").strip() or None
    if status and status not in TASK_STATUSES:
        raise ValidationFailed(_("Unknown status: %(status)s", status=status))
    rows = admin_service.list_tasks(get_backend(), status=status)
    return jsonify([t.to_dict() for t in rows])


@admin_bp.get("/tasks/<int:task_id>")
@roles_required("admin")
def task_detail(task_id):
    t = admin_service.get_task(get_backend(), task_id)
    data = t.to_dict()
    data["applications"] = [a.to_dict() for a in t.applications]
    return jsonify(data)


@admin_bp.delete("/tasks/<int:task_id>")
@permission_required("task_management")
def task_delete(task_id):
    admin_service.delete_task(get_backend(), current_user, task_id)
    return jsonify({"ok": True})
