# tiklive/services/verification_service.py
"""Verification codes for email and SMS.

Codes are generated and checked on the server. Only a hash is stored; a
successful check returns a signed ticket that later requests present as proof.
"""
import hashlib
import hmac
import json
import logging
import re
import secrets
from datetime import datetime, timedelta

import requests
from flask import current_app
from flask_babel import gettext as _
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..models import VerificationCode
from .exceptions import GatewayError, ValidationFailed

log = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^1[3-9]\d{9}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

EMAIL_CODE_LENGTH = 6
SMS_CODE_LENGTH = 4

SMSBAO_ERRORS = {
    "30": "Wrong SMS account password.",
    "40": "SMS account does not exist.",
    "41": "SMS account balance is insufficient.",
    "43": "IP address is restricted.",
    "50": "Message contains sensitive words.",
    "51": "Invalid phone number.",
}


def generate_code(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _i in range(length))


def is_valid_phone(phone) -> bool:
    return bool(phone) and PHONE_RE.match(phone) is not None


def is_valid_email(email) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


# --------------------------------------------------------------------------------------
# Gateways
# --------------------------------------------------------------------------------------

def _send_aoksend(email: str, code: str):
    cfg = current_app.config
    if not cfg.get("AOKSEND_API_KEY"):
        raise GatewayError(_("Email gateway is not configured."))
    try:
        r = requests.post(
            cfg["AOKSEND_API_URL"],
            data={
                "app_key": cfg["AOKSEND_API_KEY"],
                "to": email,
                "template_id": cfg["AOKSEND_TEMPLATE_ID"],
                "data": json.dumps({"code": code}),
            },
            timeout=cfg.get("GATEWAY_TIMEOUT", 20),
        )
        log.info("AOKSend status=%s", r.status_code)
        r.raise_for_status()
        body = r.json()
    except (requests.RequestException, ValueError) as e:
        log.exception("AOKSend request failed: %s", e)
        raise GatewayError(_("Failed to send the verification email."), details=str(e))

    ok = body.get("code") == 0 or body.get("success") is True or body.get("status") == "success"
    if not ok:
        log.error("AOKSend rejected send | body=%s", body)
        raise GatewayError(_("Failed to send the verification email."), details=body.get("message"))


def _send_smsbao(phone: str, code: str):
    cfg = current_app.config
    if not cfg.get("SMSBAO_USERNAME") or not cfg.get("SMSBAO_PASSWORD"):
        raise GatewayError(_("SMS gateway is not configured."))
    content = f"【TikLive】Your verification code is {code}. It is valid for 10 minutes."
    try:
        r = requests.get(
            cfg["SMSBAO_API_URL"],
            params={
                "u": cfg["SMSBAO_USERNAME"],
                "p": hashlib.md5(cfg["SMSBAO_PASSWORD"].encode("utf-8")).hexdigest(),
                "m": phone,
                "c": content,
            },
            timeout=cfg.get("GATEWAY_TIMEOUT", 20),
        )
        log.info("smsbao status=%s", r.status_code)
        r.raise_for_status()
    except requests.RequestException as e:
        log.exception("smsbao request failed: %s", e)
        raise GatewayError(_("Failed to send the SMS code."), details=str(e))

    reply = (r.text or "").strip()
    if reply != "0":
        reason = SMSBAO_ERRORS.get(reply, f"Unknown gateway reply: {reply}")
        log.error("smsbao rejected send | reply=%s", reply)
        raise GatewayError(_("Failed to send the SMS code."), details=reason)


# --------------------------------------------------------------------------------------
# Codes
# --------------------------------------------------------------------------------------

def _issue(backend, channel, target, purpose, length) -> str:
    code = generate_code(length)
    ttl = current_app.config.get("VERIFICATION_CODE_TTL_SECONDS", 600)

    # a new code replaces any outstanding one for the same target
    for old in (
        backend.query(VerificationCode)
        .filter_by(channel=channel, target=target, purpose=purpose, consumed_at=None)
        .all()
    ):
        old.consumed_at = datetime.utcnow()

    backend.add(VerificationCode(
        channel=channel,
        target=target,
        purpose=purpose,
        code_hash=generate_password_hash(code),
        expires_at=datetime.utcnow() + timedelta(seconds=ttl),
    ))
    backend.flush()
    return code


def _dispatch(backend, channel, target, code, send):
    if current_app.config.get("VERIFICATION_SUPPRESS_SEND"):
        log.info("[VERIFICATION_SUPPRESS_SEND=1] %s code for %s: %s", channel, target, code)
        backend.commit()
        return
    try:
        send(target, code)
    except Exception:
        backend.rollback()
        raise
    backend.commit()


def send_email_code(backend, email, purpose="signup"):
    email = (email or "").strip().lower()
    if not is_valid_email(email):
        raise ValidationFailed(_("Enter a valid email address."))
    code = _issue(backend, "email", email, purpose, EMAIL_CODE_LENGTH)
    _dispatch(backend, "email", email, code, _send_aoksend)
    log.info("Email verification code issued for %s", email)


def send_sms_code(backend, phone, purpose="signup"):
    phone = (phone or "").strip()
    if not is_valid_phone(phone):
        raise ValidationFailed(_("Enter a valid mainland China mobile number."))
    code = _issue(backend, "sms", phone, purpose, SMS_CODE_LENGTH)
    _dispatch(backend, "sms", phone, code, _send_smsbao)
    log.info("SMS verification code issued for %s", phone)


def verify_code(backend, channel, target, submitted, purpose="signup") -> str:
    """Check a submitted code; return a signed ticket on success.

    The comparison is exact: surrounding whitespace makes a code wrong.
    """
    if channel not in ("email", "sms"):
        raise ValidationFailed(_("Unknown verification channel."))
    target = (target or "").strip()
    if channel == "email":
        target = target.lower()

    row = (
        backend.query(VerificationCode)
        .filter_by(channel=channel, target=target, purpose=purpose, consumed_at=None)
        .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
        .first()
    )
    if row is None:
        raise ValidationFailed(_("No verification code was requested for this address."))
    if row.is_expired:
        raise ValidationFailed(_("The verification code has expired. Request a new one."))

    max_attempts = current_app.config.get("VERIFICATION_MAX_ATTEMPTS", 5)
    if (row.attempts or 0) >= max_attempts:
        raise ValidationFailed(_("Too many attempts. Request a new code."))

    if not isinstance(submitted, str) or not check_password_hash(row.code_hash, submitted):
        row.attempts = (row.attempts or 0) + 1
        backend.commit()
        raise ValidationFailed(_("The verification code is incorrect."))

    row.consumed_at = datetime.utcnow()
    backend.commit()
    return issue_ticket(channel, target, purpose)


# --------------------------------------------------------------------------------------
# Tickets
# --------------------------------------------------------------------------------------

def _ticket_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt="verification-ticket")


def issue_ticket(channel, target, purpose="signup") -> str:
    return _ticket_serializer().dumps({"ch": channel, "t": target, "p": purpose})


def check_ticket(ticket, channel, target, purpose="signup") -> bool:
    if not ticket:
        return False
    max_age = current_app.config.get("VERIFICATION_TICKET_MAX_AGE", 1800)
    try:
        data = _ticket_serializer().loads(ticket, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return False
    if not isinstance(data, dict):
        return False
    return (
        data.get("ch") == channel
        and hmac.compare_digest(str(data.get("t", "")), str(target or ""))
        and data.get("p") == purpose
    )


def require_ticket(ticket, channel, target, purpose="signup"):
    if not check_ticket(ticket, channel, target, purpose):
        raise ValidationFailed(_("Verify the code sent to %(target)s first.", target=target))
