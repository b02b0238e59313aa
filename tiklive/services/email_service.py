# tiklive/services/email_service.py
import logging

from flask import current_app, render_template
from flask_mail import Message

from ..extensions import mail

log = logging.getLogger(__name__)


def send_email(*, to, subject, template, **ctx) -> bool:
    try:
        if not to:
            log.warning("send_email: missing recipient")
            return False
        recipients = [to] if isinstance(to, str) else list(to)
        html = render_template(f"email/{template}", **ctx)
        base = template.rsplit(".", 1)[0]
        txt = render_template(f"email/{base}.txt", **ctx)

        sender = current_app.config.get("MAIL_DEFAULT_SENDER") or current_app.config.get("MAIL_USERNAME")
        if not sender and not current_app.config.get("MAIL_SUPPRESS_SEND"):
            log.error("send_email: no sender configured")
            return False

        msg = Message(subject=subject, recipients=recipients, sender=sender)
        msg.body = txt
        msg.html = html

        if current_app.config.get("MAIL_SUPPRESS_SEND"):
            log.info("[MAIL_SUPPRESS_SEND=1] would send: %s | %s", recipients, subject)
            return True

        mail.send(msg)
        log.info("Email sent to %s | subject=%s", recipients, subject)
        return True
    except Exception as e:
        log.exception("send_email failed: %s", e)
        return False


def email_application_status(application) -> bool:
    """Tell the applicant their application was accepted or refused."""
    influencer = application.influencer
    user = influencer.user if influencer else None
    if not user or not user.email:
        return False
    return send_email(
        to=user.email,
        subject=f"[TikLive] Application {application.status}: {application.task.title}",
        template="application_status.html",
        application=application,
        task=application.task,
        influencer=influencer,
    )
