# tiklive/services/task_service.py
import logging
from collections import Counter
from datetime import datetime

from flask_babel import gettext as _

from ..models import Task, TaskCategory
from ..models.task import TASK_STATUSES
from .exceptions import InvalidTransition, PermissionDenied, ResourceNotFound, ValidationFailed

log = logging.getLogger(__name__)


def split_requirements(value) -> list[str]:
    """Requirements arrive as a newline-separated string or a list; keep non-blank lines."""
    if not value:
        return []
    if isinstance(value, str):
        value = value.splitlines()
    return [str(line).strip() for line in value if str(line).strip()]


def _require_company(company):
    if company is None:
        raise PermissionDenied(_("Complete your company profile before publishing tasks."))


def create_task(backend, company, data: dict) -> Task:
    """``data`` is the cleaned form payload."""
    _require_company(company)

    budget_min = data.get("budget_min") or 0.0
    budget_max = data.get("budget_max") or 0.0
    if budget_min > budget_max:
        raise ValidationFailed(_("Minimum budget cannot exceed maximum budget."))

    is_advance_paid = bool(data.get("is_advance_paid"))
    paid_amount = data.get("paid_amount")
    if is_advance_paid and not (paid_amount and paid_amount > 0):
        raise ValidationFailed(_("Advance payment requires a positive paid amount."))

    category_id = data.get("category_id")
    if category_id and backend.get(TaskCategory, category_id) is None:
        raise ValidationFailed(_("Unknown task category."))

    task = Task(
        company_id=company.id,
        category_id=category_id or None,
        title=data["title"].strip(),
        description=(data.get("description") or "").strip() or None,
        product_name=(data.get("product_name") or "").strip() or None,
        requirements=split_requirements(data.get("requirements")),
        budget_min=budget_min,
        budget_max=budget_max,
        live_date=data.get("live_date"),
        duration_hours=data.get("duration_hours") or 2,
        location=(data.get("location") or "").strip() or None,
        is_urgent=bool(data.get("is_urgent")),
        max_applicants=data.get("max_applicants") or 1,
        status="open",
        current_applicants=0,
        views_count=0,
        is_advance_paid=is_advance_paid,
        paid_amount=paid_amount if is_advance_paid else None,
    )
    backend.add(task)
    backend.commit()
    log.info("Task %s created by company %s", task.id, company.id)
    return task


def company_tasks(backend, company):
    _require_company(company)
    tasks = (
        backend.query(Task)
        .filter_by(company_id=company.id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )
    counts = Counter(t.status for t in tasks)
    summary = {status: counts.get(status, 0) for status in TASK_STATUSES}
    summary["total"] = len(tasks)
    return tasks, summary


def owned_task(backend, company, task_id) -> Task:
    task = backend.get(Task, task_id)
    if task is None:
        raise ResourceNotFound(_("Task not found."))
    if company is None or task.company_id != company.id:
        raise PermissionDenied(_("You do not own this task."))
    return task


def _move(backend, task, expected, new_status):
    if task.status != expected:
        raise InvalidTransition(
            _("Task is %(status)s; only %(expected)s tasks can be moved to %(new)s.",
              status=task.status, expected=expected, new=new_status)
        )
    task.status = new_status
    backend.commit()
    log.info("Task %s -> %s", task.id, new_status)
    return task


def cancel_task(backend, company, task_id) -> Task:
    return _move(backend, owned_task(backend, company, task_id), "open", "cancelled")


def complete_task(backend, company, task_id) -> Task:
    return _move(backend, owned_task(backend, company, task_id), "in_progress", "completed")


def settle_task(backend, company, task_id, amount) -> Task:
    task = owned_task(backend, company, task_id)
    if task.status != "completed":
        raise InvalidTransition(_("Only completed tasks can be settled."))
    if task.is_settled:
        raise InvalidTransition(_("This task has already been settled."))
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ValidationFailed(_("Settlement amount must be a number."))
    if amount < 0:
        raise ValidationFailed(_("Settlement amount must be a number."))

    task.settlement_amount = amount
    task.is_settled = True
    task.updated_at = datetime.utcnow()
    backend.commit()
    log.info("Task %s settled | amount=%s", task.id, amount)
    return task
