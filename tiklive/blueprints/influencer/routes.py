# tiklive/blueprints/influencer/routes.py
from flask import jsonify, request
from flask_login import current_user

from ...backend import get_backend
from ...security import roles_required
from ...services import application_service, profile_service
from ..utils import json_body
from . import influencer_bp


# -----------------
# Profile
# -----------------

@influencer_bp.get("/profile")
@roles_required("influencer")
def profile():
    inf = current_user.influencer
    return jsonify({"influencer": inf.to_dict() if inf else None})


@influencer_bp.put("/profile")
@roles_required("influencer")
def profile_save():
    inf = profile_service.save_influencer(get_backend(), current_user, json_body())
    return jsonify({"influencer": inf.to_dict()})


@influencer_bp.post("/profile/avatar")
@roles_required("influencer")
def profile_avatar():
    url = profile_service.upload_influencer_image(get_backend(), current_user, request.files.get("file"), "avatar")
    return jsonify({"url": url})


@influencer_bp.post("/profile/id-photo")
@roles_required("influencer")
def profile_id_photo():
    url = profile_service.upload_influencer_image(get_backend(), current_user, request.files.get("file"), "id_photo")
    return jsonify({"url": url})


# -----------------
# Applications
# -----------------

@influencer_bp.post("/tasks/<int:task_id>/apply")
@roles_required("influencer")
def apply(task_id):
    data = json_body()
    app_row = application_service.apply(
        get_backend(),
        current_user,
        task_id,
        message=data.get("message"),
        proposed_rate=data.get("proposed_rate"),
    )
    return jsonify(app_row.to_dict()), 201


@influencer_bp.post("/applications/<int:application_id>/withdraw")
@roles_required("influencer")
def withdraw(application_id):
    app_row = application_service.withdraw(get_backend(), current_user, application_id)
    return jsonify(app_row.to_dict())


@influencer_bp.get("/applications")
@roles_required("influencer")
def applications():
    rows = application_service.list_for_influencer(get_backend(), current_user)
    out = []
    for a in rows:
        item = a.to_dict(with_influencer=False)
        item["task"] = a.task.to_dict() if a.task else None
        out.append(item)
    return jsonify(out)
