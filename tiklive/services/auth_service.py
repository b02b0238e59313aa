# tiklive/services/auth_service.py
import logging

from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError

from ..models import User, UserProfile, Influencer, Company, AdminPermission
from ..models.influencer import normalize_tags
from ..models.user import ADMIN_PERMISSIONS
from .exceptions import (
    AccountSuspended,
    AuthenticationFailed,
    Conflict,
    ValidationFailed,
)

log = logging.getLogger(__name__)

SELF_SERVICE_TYPES = ("influencer", "company")


def _normalize_email(email) -> str:
    return (email or "").strip().lower()


def _new_identity(backend, email, password, user_type, phone=None) -> User:
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationFailed(_("Email and password are required."))
    if user_type not in SELF_SERVICE_TYPES:
        raise ValidationFailed(_("Account type must be influencer or company."))
    if backend.query(User).filter_by(email=email).first():
        raise Conflict(_("This email is already registered."))

    user = User(email=email)
    user.set_password(password)
    backend.add(user)
    backend.flush()
    backend.add(UserProfile(user_id=user.id, user_type=user_type, phone=(phone or "").strip() or None))
    return user


def _commit_identity(backend, email):
    try:
        backend.commit()
    except IntegrityError:
        backend.rollback()
        raise Conflict(_("This email is already registered."))
    log.info("Account created: %s", email)


def sign_up(backend, email, password, user_type, phone=None) -> User:
    """Create the identity and its base profile."""
    try:
        user = _new_identity(backend, email, password, user_type, phone)
    except Exception:
        backend.rollback()
        raise
    _commit_identity(backend, user.email)
    return user


def sign_up_with_details(backend, email, password, user_type, phone=None, details=None) -> User:
    """Create the identity, base profile and influencer/company row together.

    Either all three rows exist afterwards or none does.
    """
    details = details or {}
    try:
        user = _new_identity(backend, email, password, user_type, phone)
        if user_type == "influencer":
            nickname = (details.get("nickname") or "").strip()
            if not nickname:
                raise ValidationFailed(_("Nickname is required."))
            backend.add(Influencer(
                user_id=user.id,
                nickname=nickname,
                real_name=(details.get("real_name") or "").strip() or None,
                tiktok_account=(details.get("tiktok_account") or "").strip() or None,
                location=(details.get("location") or "").strip() or None,
                bio=details.get("bio"),
                categories=normalize_tags(details.get("categories")),
                tags=normalize_tags(details.get("tags")),
            ))
        else:
            company_name = (details.get("company_name") or "").strip()
            if not company_name:
                raise ValidationFailed(_("Company name is required."))
            backend.add(Company(
                user_id=user.id,
                company_name=company_name,
                contact_person=(details.get("contact_person") or "").strip() or None,
                contact_phone=(details.get("contact_phone") or phone or "").strip() or None,
                contact_email=user.email,
                industry=(details.get("industry") or "").strip() or None,
                company_size=(details.get("company_size") or "").strip() or None,
                website=(details.get("website") or "").strip() or None,
                description=details.get("description"),
            ))
    except Exception:
        backend.rollback()
        raise
    _commit_identity(backend, user.email)
    return user


def sign_in(backend, email, password) -> User:
    user = backend.query(User).filter_by(email=_normalize_email(email)).first()
    if not user or not user.check_password(password or ""):
        raise AuthenticationFailed(_("Invalid email or password."))
    if user.is_suspended:
        raise AccountSuspended(_("Your account is suspended. Contact support."))
    user.mark_login()
    backend.commit()
    return user


def resolve_profile(backend, user):
    if user is None:
        return None
    return backend.query(UserProfile).filter_by(user_id=user.id).first()


def refresh_permissions(backend, user) -> dict:
    """Re-read the profile and admin grants for the signed-in user."""
    backend.session.expire(user)
    profile = resolve_profile(backend, user)
    perms = []
    if profile is not None and profile.user_type == "admin":
        perms = sorted(
            name for (name,) in backend.query(AdminPermission.permission_name).filter_by(admin_id=user.id)
        )
    return {
        "user": user.to_dict(),
        "profile": profile.to_dict() if profile else None,
        "permissions": perms,
    }


def session_payload(backend, user) -> dict:
    data = refresh_permissions(backend, user)
    if user.influencer is not None:
        data["influencer"] = user.influencer.to_dict()
    if user.company is not None:
        data["company"] = user.company.to_dict()
    return data


def provision_admin(backend, email, password=None) -> User:
    """Create or promote an admin identity and grant every admin permission."""
    email = _normalize_email(email)
    if not email:
        raise ValidationFailed(_("Email is required."))

    user = backend.query(User).filter_by(email=email).first()
    if user is None:
        if not password:
            raise ValidationFailed(_("Password is required for a new admin."))
        user = User(email=email, status="active", is_email_verified=True)
        backend.add(user)
    if password:
        user.set_password(password)
    backend.flush()

    profile = backend.query(UserProfile).filter_by(user_id=user.id).first()
    if profile is None:
        profile = UserProfile(user_id=user.id, user_type="admin")
        backend.add(profile)
    else:
        profile.user_type = "admin"

    have = {
        name for (name,) in backend.query(AdminPermission.permission_name).filter_by(admin_id=user.id)
    }
    for name in ADMIN_PERMISSIONS:
        if name not in have:
            backend.add(AdminPermission(admin_id=user.id, permission_name=name, granted_by=user.id))

    backend.commit()
    log.info("Admin provisioned: %s", email)
    return user
