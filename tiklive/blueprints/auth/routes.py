# tiklive/blueprints/auth/routes.py
from flask import current_app, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from ...backend import get_backend
from ...services import auth_service
from ...services.verification_service import require_ticket
from ..utils import json_body, validate_form
from . import auth_bp
from .forms import SignupForm, LoginForm


def _check_signup_ticket(form):
    if current_app.config.get("REQUIRE_EMAIL_VERIFICATION"):
        require_ticket(form.verification_ticket.data, "email", form.email.data.strip().lower())


# -----------------
# Register
# -----------------

@auth_bp.post("/signup")
def signup():
    form = validate_form(SignupForm, json_body())
    _check_signup_ticket(form)
    user = auth_service.sign_up(
        get_backend(),
        form.email.data,
        form.password.data,
        form.user_type.data,
        phone=form.phone.data,
    )
    login_user(user)
    return jsonify(auth_service.session_payload(get_backend(), user)), 201


@auth_bp.post("/signup/details")
def signup_details():
    data = json_body()
    form = validate_form(SignupForm, data)
    _check_signup_ticket(form)
    details = data.get("details") if isinstance(data.get("details"), dict) else data
    user = auth_service.sign_up_with_details(
        get_backend(),
        form.email.data,
        form.password.data,
        form.user_type.data,
        phone=form.phone.data,
        details=details,
    )
    login_user(user)
    return jsonify(auth_service.session_payload(get_backend(), user)), 201


# -----------------
# Login / Logout
# -----------------

@auth_bp.post("/login")
def login():
    form = validate_form(LoginForm, json_body())
    backend = get_backend()
    user = auth_service.sign_in(backend, form.email.data, form.password.data)
    login_user(user, remember=bool(form.remember.data))
    current_app.logger.info("Login: %s", user.email)
    return jsonify(auth_service.session_payload(backend, user))


@auth_bp.post("/logout")
def logout():
    # always succeeds, even without a session
    logout_user()
    return jsonify({"ok": True})


# -----------------
# Session
# -----------------

@auth_bp.get("/me")
@login_required
def me():
    return jsonify(auth_service.session_payload(get_backend(), current_user._get_current_object()))


@auth_bp.post("/refresh")
@login_required
def refresh():
    return jsonify(auth_service.refresh_permissions(get_backend(), current_user._get_current_object()))


@auth_bp.get("/csrf")
def csrf_token():
    return jsonify({"csrf_token": generate_csrf()})
