import math

from flask import jsonify, request
from flask_login import current_user

from ...backend import get_backend
from ...security import roles_required, permission_required
from ...services import video_service
from ..utils import json_body, positive_int_arg
from . import admin_bp


@admin_bp.get("/videos")
@roles_required("admin")
def videos_list():
    page = positive_int_arg("page", 1)
    limit = min(positive_int_arg("limit", 20), 100)
    rows, total = video_service.list_videos(
        get_backend(),
        page=page,
        limit=limit,
        category_id=request.args.get("category_id"),
        search=request.args.get("search"),
        is_featured=request.args.get("is_featured"),
        is_active=request.args.get("is_active"),
    )
    return jsonify({
        "videos": [v.to_dict() for v in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
    })


@admin_bp.get("/videos/<int:video_id>")
@roles_required("admin")
def video_detail(video_id):
    return jsonify(video_service.get_video(get_backend(), video_id).to_dict())


@admin_bp.post("/videos")
@permission_required("content_moderation")
def video_create():
    video = video_service.create_video(get_backend(), current_user, json_body())
    return jsonify(video.to_dict()), 201


@admin_bp.put("/videos/<int:video_id>")
@permission_required("content_moderation")
def video_update(video_id):
    video = video_service.update_video(get_backend(), current_user, video_id, json_body())
    return jsonify(video.to_dict())


@admin_bp.delete("/videos/<int:video_id>")
@permission_required("content_moderation")
def video_delete(video_id):
    video_service.delete_video(get_backend(), current_user, video_id)
    return jsonify({"ok": True})


# Video categories

@admin_bp.get("/video-categories")
@roles_required("admin")
def video_categories_list():
    return jsonify([c.to_dict() for c in video_service.list_video_categories(get_backend())])


@admin_bp.post("/video-categories")
@permission_required("content_moderation")
def video_category_create():
    cat = video_service.create_video_category(get_backend(), current_user, json_body())
    return jsonify(cat.to_dict()), 201


@admin_bp.put("/video-categories/<int:category_id>")
@permission_required("content_moderation")
def video_category_update(category_id):
    cat = video_service.update_video_category(get_backend(), current_user, category_id, json_body())
    return jsonify(cat.to_dict())


@admin_bp.delete("/video-categories/<int:category_id>")
@permission_required("content_moderation")
def video_category_delete(category_id):
    video_service.delete_video_category(get_backend(), current_user, category_id)
    return jsonify({"ok": True})
