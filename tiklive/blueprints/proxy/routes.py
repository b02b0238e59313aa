# tiklive/blueprints/proxy/routes.py
"""Public read endpoints.

Without a configured database every route answers with demo payloads so the
front end stays usable in development.
"""
import logging
import math
from datetime import datetime
from functools import wraps

from flask import request
from flask_babel import gettext as _
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from ...backend import get_backend
from ...models import Company, Influencer, Task, TaskApplication, TaskCategory, Video, VideoCategory
from ...services import mock_data
from ...services.exceptions import ResourceNotFound, ValidationFailed
from ..utils import no_cache, positive_int_arg
from . import proxy_bp

log = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
VIDEO_SORTS = {
    "latest": Video.created_at.desc(),
    "oldest": Video.created_at.asc(),
    "popular": Video.views_count.desc(),
    "rating": Video.influencer_rating.desc(),
    "sort_order": Video.sort_order.asc(),
}


def _db_errors(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except SQLAlchemyError as e:
            get_backend().rollback()
            log.exception("Query failed on %s", request.path)
            return no_cache({"error": _("Failed to load data."), "details": str(e.__cause__ or e)}, 500)
    return wrapped


# -----------------
# Videos
# -----------------

@proxy_bp.get("/videos")
@_db_errors
def videos():
    page = positive_int_arg("page", 1)
    limit = min(positive_int_arg("limit", 20), MAX_PAGE_SIZE)
    category = request.args.get("category", "all") or "all"
    search = (request.args.get("search") or "").strip()
    featured = request.args.get("featured", "all") or "all"
    sort = request.args.get("sort", "latest") or "latest"
    filters = {"category": category, "search": search, "featured": featured, "sort": sort}

    backend = get_backend()
    if not backend.configured:
        items = mock_data.videos()
        if category != "all":
            items = [v for v in items if str(v["category_id"]) == category]
        if search:
            needle = search.lower()
            items = [
                v for v in items
                if any(needle in (v[k] or "").lower() for k in ("title", "description", "influencer_name"))
            ]
        if featured in ("true", "false"):
            items = [v for v in items if v["is_featured"] is (featured == "true")]
        total = len(items)
        start = (page - 1) * limit
        return no_cache({
            "videos": items[start:start + limit],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
            "filters": filters,
        })

    q = backend.query(Video).filter(Video.is_active.is_(True))
    if category != "all":
        try:
            q = q.filter(Video.category_id == int(category))
        except ValueError:
            raise ValidationFailed(_("category must be a category id or 'all'."))
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            Video.title.ilike(like),
            Video.description.ilike(like),
            Video.influencer_name.ilike(like),
        ))
    if featured in ("true", "false"):
        q = q.filter(Video.is_featured.is_(featured == "true"))

    total = q.order_by(None).count()
    rows = (
        q.order_by(VIDEO_SORTS.get(sort, VIDEO_SORTS["latest"]), Video.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return no_cache({
        "videos": [v.to_dict() for v in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
        "filters": filters,
    })


@proxy_bp.get("/video-detail")
@_db_errors
def video_detail():
    raw_id = request.args.get("id")
    if not raw_id:
        raise ValidationFailed(_("Video id is required."))
    try:
        video_id = int(raw_id)
    except ValueError:
        raise ValidationFailed(_("Video id is required."))

    backend = get_backend()
    if not backend.configured:
        video = next((v for v in mock_data.videos() if v["id"] == video_id), None)
        if video is None:
            raise ResourceNotFound(_("Video not found."))
        return no_cache({
            "video": video,
            "relatedVideos": [],
            "categories": mock_data.video_categories(),
            "meta": {"title": video["title"], "description": video["description"],
                     "image": video["poster_url"], "type": "video"},
        })

    video = backend.get(Video, video_id)
    if video is None or not video.is_active:
        raise ResourceNotFound(_("Video not found."))

    related = []
    if video.category_id is not None:
        related = (
            backend.query(Video)
            .filter(
                Video.category_id == video.category_id,
                Video.id != video.id,
                Video.is_active.is_(True),
            )
            .order_by(Video.views_count.desc(), Video.id.desc())
            .limit(6)
            .all()
        )
    categories = (
        backend.query(VideoCategory)
        .filter(VideoCategory.is_active.is_(True))
        .order_by(VideoCategory.sort_order.asc(), VideoCategory.id.asc())
        .all()
    )
    return no_cache({
        "video": video.to_dict(),
        "relatedVideos": [v.related_summary() for v in related],
        "categories": [c.to_dict() for c in categories],
        "meta": {
            "title": video.title,
            "description": video.description,
            "image": video.poster_url,
            "type": "video",
        },
    })


@proxy_bp.get("/indexvideos")
@_db_errors
def index_videos():
    backend = get_backend()
    if not backend.configured:
        return no_cache([v for v in mock_data.videos() if v["is_featured"]][:4])

    rows = (
        backend.query(Video)
        .filter(Video.is_active.is_(True), Video.is_featured.is_(True))
        .order_by(Video.sort_order.asc(), Video.created_at.desc())
        .limit(4)
        .all()
    )
    return no_cache([v.to_dict() for v in rows])


# -----------------
# Tasks / categories
# -----------------

@proxy_bp.get("/tasks")
@_db_errors
def tasks():
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.tasks())

    rows = (
        backend.query(Task)
        .filter(Task.status == "open")
        .order_by(Task.created_at.desc(), Task.id.desc())
        .limit(50)
        .all()
    )
    return no_cache([t.to_dict() for t in rows])


@proxy_bp.get("/categories")
def categories():
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.categories())

    try:
        rows = backend.query(TaskCategory).order_by(TaskCategory.sort_order.asc(), TaskCategory.id.asc()).all()
    except SQLAlchemyError:
        backend.rollback()
        log.exception("Category query failed; serving fallback list")
        return no_cache(mock_data.fallback_categories())

    active = [c for c in rows if c.is_active]
    chosen = active or rows
    if not chosen:
        return no_cache(mock_data.default_categories())
    return no_cache([c.to_dict() for c in chosen])


@proxy_bp.get("/task/<int:task_id>")
@_db_errors
def task_detail(task_id):
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.task_detail(task_id))

    task = backend.get(Task, task_id)
    if task is None:
        raise ResourceNotFound(_("Task not found."))
    data = task.to_dict()
    if task.company is not None:
        data["company"] = {
            "company_name": task.company.company_name,
            "logo_url": task.company.logo_url,
            "industry": task.company.industry,
            "company_size": task.company.company_size,
        }
    data["selected_influencer"] = task.selected_influencer.summary() if task.selected_influencer else None
    data["applications"] = [a.to_dict() for a in task.applications]
    return no_cache(data)


@proxy_bp.get("/task/<int:task_id>/applications")
@_db_errors
def task_applications(task_id):
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.task_applications(task_id))

    rows = (
        backend.query(TaskApplication)
        .filter(TaskApplication.task_id == task_id)
        .order_by(TaskApplication.applied_at.desc(), TaskApplication.id.desc())
        .all()
    )
    return no_cache([a.to_dict() for a in rows])


# -----------------
# Influencers / companies
# -----------------

@proxy_bp.get("/influencers")
@_db_errors
def influencers():
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.influencers())

    rows = (
        backend.query(Influencer)
        .filter(Influencer.is_approved.is_(True), Influencer.is_verified.is_(True))
        .order_by(Influencer.rating.desc(), Influencer.id.asc())
        .limit(100)
        .all()
    )
    return no_cache([i.to_dict() for i in rows])


@proxy_bp.get("/influencer/<int:influencer_id>")
@_db_errors
def influencer_detail(influencer_id):
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.influencer_detail(influencer_id))

    inf = (
        backend.query(Influencer)
        .filter(
            Influencer.id == influencer_id,
            Influencer.is_approved.is_(True),
            Influencer.is_verified.is_(True),
        )
        .first()
    )
    if inf is None:
        raise ResourceNotFound(_("Influencer not found."))
    return no_cache(inf.to_dict())


@proxy_bp.get("/company/<int:company_id>")
@_db_errors
def company_detail(company_id):
    backend = get_backend()
    if not backend.configured:
        return no_cache(mock_data.company_detail(company_id))

    comp = backend.get(Company, company_id)
    if comp is None:
        raise ResourceNotFound(_("Company not found."))
    data = comp.to_dict()
    data["tasks"] = [t.to_dict(with_relations=False) for t in comp.tasks[:10]]
    return no_cache(data)


# -----------------
# Health
# -----------------

@proxy_bp.get("/health")
def health():
    backend = get_backend()
    if not backend.configured:
        state = "not_connected"
    else:
        try:
            backend.ping()
            state = "connected"
        except SQLAlchemyError:
            backend.rollback()
            log.exception("Health check query failed")
            state = "error"
    return no_cache({"status": "OK", "timestamp": datetime.utcnow().isoformat(), "database": state})
