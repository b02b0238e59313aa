from flask import jsonify
from flask_login import current_user

from ...backend import get_backend
from ...security import roles_required, permission_required
from ...services import admin_service
from ..utils import json_body
from . import admin_bp


@admin_bp.get("/categories")
@roles_required("admin")
def categories_list():
    return jsonify([c.to_dict() for c in admin_service.list_categories(get_backend())])


@admin_bp.post("/categories")
@permission_required("content_moderation")
def category_create():
    cat = admin_service.create_category(get_backend(), current_user, json_body())
    return jsonify(cat.to_dict()), 201


@admin_bp.put("/categories/<int:category_id>")
@permission_required("content_moderation")
def category_update(category_id):
    cat = admin_service.update_category(get_backend(), current_user, category_id, json_body())
    return jsonify(cat.to_dict())


@admin_bp.delete("/categories/<int:category_id>")
@permission_required("content_moderation")
def category_delete(category_id):
    admin_service.delete_category(get_backend(), current_user, category_id)
    return jsonify({"ok": True})
