from flask import jsonify, request
from flask_babel import gettext as _
from flask_login import current_user

from ...backend import get_backend
from ...models.user import USER_TYPES
from ...security import roles_required, permission_required
from ...services import admin_service
from ...services.exceptions import ValidationFailed
from ..utils import json_body
from . import admin_bp


@admin_bp.get("/users")
@roles_required("admin")
def users_list():
    q = (request.args.get("q") or "").strip()
    user_type = (request.args.get("user_type") or "").strip() or None
    if user_type and user_type not in USER_TYPES:
        raise ValidationFailed(_("Unknown user type: %(t)s", t=user_type))
    rows = admin_service.list_users(get_backend(), q=q, user_type=user_type)
    return jsonify([admin_service.user_row(u) for u in rows])


@admin_bp.get("/users/<int:user_id>")
@roles_required("admin")
def user_detail(user_id):
    u = admin_service.get_user(get_backend(), user_id)
    data = admin_service.user_row(u)
    data["profile"] = u.profile.to_dict() if u.profile else None
    data["influencer"] = u.influencer.to_dict() if u.influencer else None
    data["company"] = u.company.to_dict() if u.company else None
    data["permissions"] = u.permission_names
    return jsonify(data)


@admin_bp.post("/users/<int:user_id>/approve")
@permission_required("user_management")
def user_approve(user_id):
    u = admin_service.approve_user(get_backend(), current_user, user_id)
    return jsonify(admin_service.user_row(u))


@admin_bp.post("/users/<int:user_id>/suspend")
@permission_required("user_management")
def user_suspend(user_id):
    reason = (json_body().get("reason") or "").strip() or None
    u = admin_service.set_suspended(get_backend(), current_user, user_id, True, reason=reason)
    return jsonify(admin_service.user_row(u))


@admin_bp.post("/users/<int:user_id>/unsuspend")
@permission_required("user_management")
def user_unsuspend(user_id):
    u = admin_service.set_suspended(get_backend(), current_user, user_id, False)
    return jsonify(admin_service.user_row(u))
