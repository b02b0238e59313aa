# tiklive/services/admin_service.py
import logging
from datetime import date, datetime, time

from flask_babel import gettext as _
from sqlalchemy import func, or_

from ..models import (
    AdminLog,
    Company,
    Influencer,
    SystemStats,
    Task,
    TaskApplication,
    TaskCategory,
    User,
    UserProfile,
)
from .exceptions import InvalidTransition, ResourceNotFound, ValidationFailed

log = logging.getLogger(__name__)


# --------------------------------------------------------------------------------------
# Audit / stats
# --------------------------------------------------------------------------------------

def record_admin_log(backend, actor_id, action, target_type=None, target_id=None, description=None):
    """Queue an audit row; it is committed with the caller's transaction."""
    entry = AdminLog(
        admin_id=actor_id,
        action_type=action,
        target_type=target_type,
        target_id=target_id,
        description=description,
    )
    backend.add(entry)
    return entry


def update_system_stats(backend, day: date | None = None) -> SystemStats:
    day = day or datetime.utcnow().date()
    start = datetime.combine(day, time.min)

    def _count(query):
        return query.scalar() or 0

    by_type = dict(
        backend.query(UserProfile.user_type, func.count(UserProfile.id))
        .group_by(UserProfile.user_type)
        .all()
    )
    revenue = (
        backend.query(func.coalesce(func.sum(Task.settlement_amount), 0.0))
        .filter(Task.is_settled.is_(True), Task.updated_at >= start)
        .scalar()
    )

    row = backend.query(SystemStats).filter_by(stat_date=day).first()
    if row is None:
        row = SystemStats(stat_date=day)
        backend.add(row)

    row.total_users = _count(backend.query(func.count(User.id)))
    row.total_influencers = by_type.get("influencer", 0)
    row.total_companies = by_type.get("company", 0)
    row.total_tasks = _count(backend.query(func.count(Task.id)))
    row.total_applications = _count(backend.query(func.count(TaskApplication.id)))
    row.daily_new_users = _count(backend.query(func.count(User.id)).filter(User.created_at >= start))
    row.daily_new_tasks = _count(backend.query(func.count(Task.id)).filter(Task.created_at >= start))
    row.daily_revenue = float(revenue or 0.0)

    backend.commit()
    log.info("System stats refreshed for %s", day.isoformat())
    return row


def dashboard(backend) -> dict:
    stats = backend.query(SystemStats).order_by(SystemStats.stat_date.desc()).first()
    logs = backend.query(AdminLog).order_by(AdminLog.created_at.desc(), AdminLog.id.desc()).limit(10).all()
    return {
        "stats": stats.to_dict() if stats else SystemStats(stat_date=datetime.utcnow().date()).to_dict(),
        "recentActivities": [entry.to_dict() for entry in logs],
    }


# --------------------------------------------------------------------------------------
# Users
# --------------------------------------------------------------------------------------

def approve_status(user) -> bool:
    if user.user_type == "influencer":
        return bool(user.influencer and user.influencer.is_approved)
    if user.user_type == "company":
        return bool(user.company and user.company.is_verified)
    return user.user_type == "admin"


def user_row(user) -> dict:
    data = user.to_dict()
    data["approve_status"] = approve_status(user)
    data["phone"] = user.profile.phone if user.profile else None
    if user.influencer is not None:
        data["display_name"] = user.influencer.nickname
    elif user.company is not None:
        data["display_name"] = user.company.company_name
    else:
        data["display_name"] = None
    return data


def list_users(backend, q=None, user_type=None) -> list[User]:
    query = backend.query(User).outerjoin(UserProfile, UserProfile.user_id == User.id)
    if user_type:
        query = query.filter(UserProfile.user_type == user_type)
    if q:
        like = f"%{q.strip()}%"
        query = (
            query.outerjoin(Influencer, Influencer.user_id == User.id)
            .outerjoin(Company, Company.user_id == User.id)
            .filter(or_(
                User.email.ilike(like),
                Influencer.nickname.ilike(like),
                Company.company_name.ilike(like),
            ))
        )
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(backend, user_id) -> User:
    user = backend.get(User, user_id)
    if user is None:
        raise ResourceNotFound(_("User not found."))
    return user


def approve_user(backend, actor, user_id) -> User:
    user = get_user(backend, user_id)
    if user.user_type == "influencer" and user.influencer is not None:
        user.influencer.is_approved = True
        user.influencer.is_verified = True
    elif user.user_type == "company" and user.company is not None:
        user.company.is_verified = True
    else:
        raise InvalidTransition(_("This account has no profile to approve."))
    record_admin_log(backend, actor.id, "approve_user", "user", user.id, f"Approved {user.email}")
    backend.commit()
    return user


def set_suspended(backend, actor, user_id, suspended: bool, reason=None) -> User:
    user = get_user(backend, user_id)
    if user.id == actor.id:
        raise InvalidTransition(_("You cannot suspend your own account."))
    user.status = "suspended" if suspended else "active"
    if user.influencer is not None:
        user.influencer.status = "suspended" if suspended else "active"
    action = "suspend_user" if suspended else "unsuspend_user"
    desc = f"{'Suspended' if suspended else 'Unsuspended'} {user.email}"
    if reason:
        desc += f": {reason}"
    record_admin_log(backend, actor.id, action, "user", user.id, desc)
    backend.commit()
    return user


# --------------------------------------------------------------------------------------
# Tasks
# --------------------------------------------------------------------------------------

def list_tasks(backend, status=None) -> list[Task]:
    query = backend.query(Task)
    if status:
        query = query.filter(Task.status == status)
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_task(backend, task_id) -> Task:
    task = backend.get(Task, task_id)
    if task is None:
        raise ResourceNotFound(_("Task not found."))
    return task


def delete_task(backend, actor, task_id):
    task = get_task(backend, task_id)
    title = task.title
    backend.delete(task)
    record_admin_log(backend, actor.id, "delete_task", "task", task_id, f"Deleted task {title}")
    backend.commit()


# --------------------------------------------------------------------------------------
# Categories
# --------------------------------------------------------------------------------------

def list_categories(backend) -> list[TaskCategory]:
    return backend.query(TaskCategory).order_by(TaskCategory.sort_order.asc(), TaskCategory.id.asc()).all()


def _apply_category(cat, data):
    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationFailed(_("Category name is required."))
        cat.name = name
    for field in ("description", "icon"):
        if field in data:
            setattr(cat, field, (data.get(field) or "").strip() or None)
    if "sort_order" in data:
        try:
            cat.sort_order = int(data.get("sort_order") or 0)
        except (TypeError, ValueError):
            raise ValidationFailed(_("Sort order must be an integer."))
    if "is_active" in data:
        cat.is_active = bool(data.get("is_active"))


def create_category(backend, actor, data) -> TaskCategory:
    if not (data.get("name") or "").strip():
        raise ValidationFailed(_("Category name is required."))
    cat = TaskCategory()
    _apply_category(cat, data)
    backend.add(cat)
    backend.flush()
    record_admin_log(backend, actor.id, "create_category", "task_category", cat.id, f"Created category {cat.name}")
    backend.commit()
    return cat


def update_category(backend, actor, category_id, data) -> TaskCategory:
    cat = backend.get(TaskCategory, category_id)
    if cat is None:
        raise ResourceNotFound(_("Category not found."))
    _apply_category(cat, data)
    record_admin_log(backend, actor.id, "update_category", "task_category", cat.id, f"Updated category {cat.name}")
    backend.commit()
    return cat


def delete_category(backend, actor, category_id):
    cat = backend.get(TaskCategory, category_id)
    if cat is None:
        raise ResourceNotFound(_("Category not found."))
    in_use = backend.query(func.count(Task.id)).filter(Task.category_id == cat.id).scalar() or 0
    if in_use:
        raise InvalidTransition(_("Category is used by %(n)d task(s); deactivate it instead.", n=in_use))
    name = cat.name
    backend.delete(cat)
    record_admin_log(backend, actor.id, "delete_category", "task_category", category_id, f"Deleted category {name}")
    backend.commit()
