# tiklive/blueprints/account/routes.py
from flask import jsonify
from flask_babel import gettext as _
from flask_login import login_required, current_user

from ...backend import get_backend
from ...services import profile_service
from ...services.exceptions import ValidationFailed
from ...services.verification_service import is_valid_phone, require_ticket
from ..utils import json_body
from . import account_bp


@account_bp.get("/settings")
@login_required
def settings():
    profile = current_user.profile
    return jsonify({
        "email": current_user.email,
        "phone": profile.phone if profile else None,
        "user_type": current_user.user_type,
    })


@account_bp.put("/phone")
@login_required
def phone_update():
    data = json_body()
    phone = (data.get("phone") or "").strip()
    if not is_valid_phone(phone):
        raise ValidationFailed(_("Enter a valid mainland China mobile number."))
    require_ticket(data.get("verification_ticket"), "sms", phone, purpose="phone_change")
    profile = profile_service.update_phone(get_backend(), current_user, phone)
    return jsonify({"phone": profile.phone})


@account_bp.post("/password")
@login_required
def password_change():
    data = json_body()
    profile_service.change_password(
        get_backend(),
        current_user,
        data.get("current_password"),
        data.get("new_password"),
        data.get("confirm_password"),
    )
    return jsonify({"ok": True})
