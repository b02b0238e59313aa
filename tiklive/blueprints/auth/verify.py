# tiklive/blueprints/auth/verify.py
from flask import jsonify
from flask_babel import gettext as _

from ...backend import get_backend
from ...services import verification_service
from ...services.exceptions import ValidationFailed
from ..utils import json_body
from . import auth_bp


@auth_bp.post("/verify/email/send")
def verify_email_send():
    data = json_body()
    verification_service.send_email_code(get_backend(), data.get("email"), purpose=data.get("purpose") or "signup")
    return jsonify({"ok": True, "message": _("Verification code sent.")})


@auth_bp.post("/verify/sms/send")
def verify_sms_send():
    data = json_body()
    verification_service.send_sms_code(get_backend(), data.get("phone"), purpose=data.get("purpose") or "signup")
    return jsonify({"ok": True, "message": _("Verification code sent.")})


@auth_bp.post("/verify/check")
def verify_check():
    data = json_body()
    channel = data.get("channel")
    target = data.get("email") if channel == "email" else data.get("phone")
    if target is None:
        target = data.get("target")
    if data.get("code") in (None, ""):
        raise ValidationFailed(_("Verification code is required."))
    ticket = verification_service.verify_code(
        get_backend(),
        channel,
        target,
        str(data.get("code")),
        purpose=data.get("purpose") or "signup",
    )
    return jsonify({"ok": True, "ticket": ticket})
