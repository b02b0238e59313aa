# tiklive/services/application_service.py
import logging
from datetime import datetime

from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import lazyload

from ..models import Task, TaskApplication, Influencer
from .email_service import email_application_status
from .exceptions import (
    AlreadyApplied,
    Conflict,
    InvalidTransition,
    PermissionDenied,
    ResourceNotFound,
    ValidationFailed,
)

log = logging.getLogger(__name__)


def _influencer_for(backend, user) -> Influencer:
    inf = backend.query(Influencer).filter_by(user_id=user.id).first()
    if inf is None:
        raise PermissionDenied(_("Complete your influencer profile before applying."))
    return inf


def _application_for_company(backend, application_id, company):
    app_row = backend.get(TaskApplication, application_id)
    if app_row is None:
        raise ResourceNotFound(_("Application not found."))
    if company is None or app_row.task.company_id != company.id:
        raise PermissionDenied(_("This application belongs to another company's task."))
    return app_row


def apply(backend, user, task_id, message=None, proposed_rate=None) -> TaskApplication:
    influencer = _influencer_for(backend, user)
    task = backend.get(Task, task_id)
    if task is None:
        raise ResourceNotFound(_("Task not found."))
    if task.status != "open":
        raise InvalidTransition(_("This task is no longer accepting applications."))

    if proposed_rate not in (None, ""):
        try:
            proposed_rate = float(proposed_rate)
        except (TypeError, ValueError):
            raise ValidationFailed(_("Proposed rate must be a number."))
        if proposed_rate < 0:
            raise ValidationFailed(_("Proposed rate must be a number."))
    else:
        proposed_rate = None

    app_row = TaskApplication(
        task_id=task.id,
        influencer_id=influencer.id,
        message=(message or "").strip() or None,
        proposed_rate=proposed_rate,
        status="pending",
    )
    backend.add(app_row)
    try:
        backend.commit()
    except IntegrityError:
        # the (task, influencer) pair is unique; the insert is the check
        backend.rollback()
        raise AlreadyApplied(_("You have already applied to this task"))
    log.info("Application %s created | task=%s influencer=%s", app_row.id, task.id, influencer.id)
    return app_row


def locked_task_query(backend, task_id):
    # no outer join in a locking read: PostgreSQL cannot lock its nullable side
    return (
        backend.query(Task)
        .options(lazyload(Task.category))
        .filter(Task.id == task_id)
        .with_for_update(of=Task)
        .populate_existing()
    )


def accept(backend, company, application_id) -> TaskApplication:
    """Accept one application and close the task to everyone else.

    Runs as one transaction under a row lock on the task. Accepting an
    application that is already accepted returns it unchanged.
    """
    app_row = _application_for_company(backend, application_id, company)
    try:
        task = locked_task_query(backend, app_row.task_id).one()
        backend.session.refresh(app_row)

        if app_row.status == "accepted":
            backend.rollback()
            return app_row
        if app_row.status != "pending":
            raise InvalidTransition(_("Only pending applications can be accepted."))
        if task.selected_influencer_id not in (None, app_row.influencer_id) or task.status != "open":
            raise Conflict(_("This task already has a selected influencer."))

        now = datetime.utcnow()
        app_row.status = "accepted"
        app_row.responded_at = now

        others = (
            backend.query(TaskApplication)
            .filter(
                TaskApplication.task_id == task.id,
                TaskApplication.id != app_row.id,
                TaskApplication.status == "pending",
            )
            .all()
        )
        for other in others:
            other.status = "refused"
            other.responded_at = now

        task.selected_influencer_id = app_row.influencer_id
        task.status = "in_progress"
        task.current_applicants = (task.current_applicants or 0) + 1

        backend.commit()
    except Exception:
        backend.rollback()
        raise

    log.info("Application %s accepted | task=%s refused_others=%d", app_row.id, task.id, len(others))
    email_application_status(app_row)
    return app_row


def reject(backend, company, application_id) -> TaskApplication:
    app_row = _application_for_company(backend, application_id, company)
    if app_row.status == "refused":
        return app_row
    if app_row.status != "pending":
        raise InvalidTransition(_("Only pending applications can be rejected."))

    app_row.status = "refused"
    app_row.responded_at = datetime.utcnow()
    backend.commit()
    log.info("Application %s refused | task=%s", app_row.id, app_row.task_id)
    email_application_status(app_row)
    return app_row


def withdraw(backend, user, application_id) -> TaskApplication:
    influencer = _influencer_for(backend, user)
    app_row = backend.get(TaskApplication, application_id)
    if app_row is None:
        raise ResourceNotFound(_("Application not found."))
    if app_row.influencer_id != influencer.id:
        raise PermissionDenied(_("You can only withdraw your own applications."))
    if app_row.status == "withdrawn":
        return app_row
    if app_row.status != "pending":
        raise InvalidTransition(_("Only pending applications can be withdrawn."))

    app_row.status = "withdrawn"
    app_row.responded_at = datetime.utcnow()
    backend.commit()
    log.info("Application %s withdrawn | task=%s", app_row.id, app_row.task_id)
    return app_row


def list_for_influencer(backend, user) -> list[TaskApplication]:
    influencer = _influencer_for(backend, user)
    return (
        backend.query(TaskApplication)
        .filter_by(influencer_id=influencer.id)
        .order_by(TaskApplication.applied_at.desc())
        .all()
    )


def list_for_task(backend, task_id) -> list[TaskApplication]:
    return (
        backend.query(TaskApplication)
        .filter_by(task_id=task_id)
        .order_by(TaskApplication.applied_at.desc())
        .all()
    )
