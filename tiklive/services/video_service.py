# tiklive/services/video_service.py
"""Admin management of showcase videos and their categories."""
import logging

from flask_babel import gettext as _
from sqlalchemy import func, or_

from ..models import Video, VideoCategory
from ..models.influencer import normalize_tags
from .admin_service import record_admin_log
from .exceptions import Conflict, InvalidTransition, ResourceNotFound, ValidationFailed

log = logging.getLogger(__name__)

TEXT_FIELDS = (
    "description", "video_url", "poster_url", "duration",
    "influencer_name", "influencer_avatar",
)
COUNTER_FIELDS = ("views_count", "likes_count", "comments_count", "shares_count", "sort_order")
FLAG_FIELDS = ("is_featured", "is_active")


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on", "y")
    return bool(value)


def _as_int(field, value) -> int:
    try:
        number = int(value or 0)
    except (TypeError, ValueError):
        raise ValidationFailed(_("%(field)s must be an integer.", field=field))
    if number < 0 and field != "sort_order":
        raise ValidationFailed(_("%(field)s must be an integer.", field=field))
    return number


# --------------------------------------------------------------------------------------
# Videos
# --------------------------------------------------------------------------------------

def list_videos(backend, page=1, limit=20, category_id=None, search=None, is_featured=None, is_active=None):
    """Every video, active or not, newest first. Returns (rows, total)."""
    q = backend.query(Video)
    if category_id not in (None, "", "all"):
        try:
            q = q.filter(Video.category_id == int(category_id))
        except (TypeError, ValueError):
            raise ValidationFailed(_("category must be a category id or 'all'."))
    if search:
        like = f"%{search.strip()}%"
        q = q.filter(or_(
            Video.title.ilike(like),
            Video.description.ilike(like),
            Video.influencer_name.ilike(like),
        ))
    if is_featured in ("true", "false"):
        q = q.filter(Video.is_featured.is_(is_featured == "true"))
    if is_active in ("true", "false"):
        q = q.filter(Video.is_active.is_(is_active == "true"))

    total = q.order_by(None).count()
    rows = (
        q.order_by(Video.created_at.desc(), Video.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def get_video(backend, video_id) -> Video:
    video = backend.get(Video, video_id)
    if video is None:
        raise ResourceNotFound(_("Video not found."))
    return video


def _apply_video(backend, video, data):
    if "title" in data:
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationFailed(_("Title and video URL are required."))
        video.title = title
    for field in TEXT_FIELDS:
        if field in data:
            setattr(video, field, (data.get(field) or "").strip() or None)
    if "category_id" in data:
        cat_id = data.get("category_id")
        if cat_id in (None, ""):
            video.category_id = None
        else:
            cat = backend.get(VideoCategory, _as_int("category_id", cat_id))
            if cat is None:
                raise ValidationFailed(_("Unknown video category."))
            video.category_id = cat.id
    if "influencer_rating" in data:
        try:
            video.influencer_rating = float(data.get("influencer_rating") or 0)
        except (TypeError, ValueError):
            raise ValidationFailed(_("Rating must be a number."))
    for field in COUNTER_FIELDS:
        if field in data:
            setattr(video, field, _as_int(field, data.get(field)))
    if "tags" in data:
        video.tags = normalize_tags(data.get("tags"))
    for field in FLAG_FIELDS:
        if field in data:
            setattr(video, field, _as_bool(data.get(field)))


def create_video(backend, actor, data) -> Video:
    if not (data.get("title") or "").strip() or not (data.get("video_url") or "").strip():
        raise ValidationFailed(_("Title and video URL are required."))
    video = Video(is_active=True, is_featured=False, tags=[])
    _apply_video(backend, video, data)
    backend.add(video)
    backend.flush()
    record_admin_log(backend, actor.id, "create_video", "video", video.id, f"Created video {video.title}")
    backend.commit()
    log.info("Video %s created by admin %s", video.id, actor.id)
    return video


def update_video(backend, actor, video_id, data) -> Video:
    video = get_video(backend, video_id)
    if "video_url" in data and not (data.get("video_url") or "").strip():
        raise ValidationFailed(_("Title and video URL are required."))
    _apply_video(backend, video, data)
    record_admin_log(backend, actor.id, "update_video", "video", video.id, f"Updated video {video.title}")
    backend.commit()
    return video


def delete_video(backend, actor, video_id):
    video = get_video(backend, video_id)
    title = video.title
    backend.delete(video)
    record_admin_log(backend, actor.id, "delete_video", "video", video_id, f"Deleted video {title}")
    backend.commit()


# --------------------------------------------------------------------------------------
# Video categories
# --------------------------------------------------------------------------------------

def list_video_categories(backend) -> list[VideoCategory]:
    return (
        backend.query(VideoCategory)
        .order_by(VideoCategory.sort_order.asc(), VideoCategory.id.asc())
        .all()
    )


def _name_taken(backend, name, exclude_id=None) -> bool:
    q = backend.query(VideoCategory.id).filter(func.lower(VideoCategory.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(VideoCategory.id != exclude_id)
    return q.first() is not None


def _apply_video_category(backend, cat, data):
    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationFailed(_("Category name is required."))
        if _name_taken(backend, name, exclude_id=cat.id):
            raise Conflict(_("A video category with this name already exists."))
        cat.name = name
    if "description" in data:
        cat.description = (data.get("description") or "").strip() or None
    if "sort_order" in data:
        cat.sort_order = _as_int("sort_order", data.get("sort_order"))
    if "is_active" in data:
        cat.is_active = _as_bool(data.get("is_active"))


def create_video_category(backend, actor, data) -> VideoCategory:
    if not (data.get("name") or "").strip():
        raise ValidationFailed(_("Category name is required."))
    cat = VideoCategory(is_active=True, sort_order=0)
    _apply_video_category(backend, cat, data)
    backend.add(cat)
    backend.flush()
    record_admin_log(
        backend, actor.id, "create_video_category", "video_category", cat.id, f"Created video category {cat.name}"
    )
    backend.commit()
    return cat


def update_video_category(backend, actor, category_id, data) -> VideoCategory:
    cat = backend.get(VideoCategory, category_id)
    if cat is None:
        raise ResourceNotFound(_("Video category not found."))
    _apply_video_category(backend, cat, data)
    record_admin_log(
        backend, actor.id, "update_video_category", "video_category", cat.id, f"Updated video category {cat.name}"
    )
    backend.commit()
    return cat


def delete_video_category(backend, actor, category_id):
    cat = backend.get(VideoCategory, category_id)
    if cat is None:
        raise ResourceNotFound(_("Video category not found."))
    in_use = backend.query(func.count(Video.id)).filter(Video.category_id == cat.id).scalar() or 0
    if in_use:
        raise InvalidTransition(_("Category still has %(n)d video(s); move or delete them first.", n=in_use))
    name = cat.name
    backend.delete(cat)
    record_admin_log(
        backend, actor.id, "delete_video_category", "video_category", category_id, f"Deleted video category {name}"
    )
    backend.commit()
