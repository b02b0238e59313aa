# tiklive/services/profile_service.py
import logging

from flask_babel import gettext as _

from ..models import Influencer, Company, UserProfile
from ..models.influencer import normalize_tags
from .exceptions import ResourceNotFound, ValidationFailed

log = logging.getLogger(__name__)

# Fields a user may edit on their own row. Vetting flags stay admin-only.
INFLUENCER_FIELDS = (
    "nickname", "real_name", "tiktok_account", "tiktok_url", "bio", "location",
)
INFLUENCER_NUMERIC = {"hourly_rate": float, "experience_years": int}
COMPANY_FIELDS = (
    "company_name", "contact_person", "contact_phone", "contact_email", "business_license",
    "industry", "company_size", "website", "description",
)


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def save_influencer(backend, user, data: dict) -> Influencer:
    inf = user.influencer
    if inf is None:
        if not _clean(data.get("nickname")):
            raise ValidationFailed(_("Nickname is required."))
        inf = Influencer(user_id=user.id, nickname=_clean(data["nickname"]))
        backend.add(inf)

    for field in INFLUENCER_FIELDS:
        if field in data:
            setattr(inf, field, _clean(data[field]))
    if not inf.nickname:
        raise ValidationFailed(_("Nickname is required."))

    for field, cast in INFLUENCER_NUMERIC.items():
        if data.get(field) in (None, ""):
            continue
        try:
            val = cast(data[field])
        except (TypeError, ValueError):
            raise ValidationFailed(_("%(field)s must be a number.", field=field))
        if val < 0:
            raise ValidationFailed(_("%(field)s must be a number.", field=field))
        setattr(inf, field, val)

    if "categories" in data:
        inf.categories = normalize_tags(data["categories"])
    if "tags" in data:
        inf.tags = normalize_tags(data["tags"])

    backend.commit()
    log.info("Influencer profile saved | user=%s", user.id)
    return inf


def save_company(backend, user, data: dict) -> Company:
    comp = user.company
    if comp is None:
        if not _clean(data.get("company_name")):
            raise ValidationFailed(_("Company name is required."))
        comp = Company(user_id=user.id, company_name=_clean(data["company_name"]))
        backend.add(comp)

    for field in COMPANY_FIELDS:
        if field in data:
            setattr(comp, field, _clean(data[field]))
    if not comp.company_name:
        raise ValidationFailed(_("Company name is required."))

    backend.commit()
    log.info("Company profile saved | user=%s", user.id)
    return comp


def upload_influencer_image(backend, user, file_storage, kind: str) -> str:
    """kind is ``avatar`` or ``id_photo``."""
    inf = user.influencer
    if inf is None:
        raise ResourceNotFound(_("Save your influencer profile first."))

    bucket = "avatars" if kind == "avatar" else "id-photos"
    url = backend.storage.upload(file_storage, bucket, subdir=str(user.id))
    if kind == "avatar":
        inf.avatar_url = url
        profile = backend.query(UserProfile).filter_by(user_id=user.id).first()
        if profile is not None:
            profile.avatar_url = url
    else:
        inf.id_card_photo_url = url
    backend.commit()
    return url


def upload_company_logo(backend, user, file_storage) -> str:
    comp = user.company
    if comp is None:
        raise ResourceNotFound(_("Save your company profile first."))
    url = backend.storage.upload(file_storage, "company-logos", subdir=str(user.id))
    comp.logo_url = url
    backend.commit()
    return url


def update_phone(backend, user, phone) -> UserProfile:
    profile = backend.query(UserProfile).filter_by(user_id=user.id).first()
    if profile is None:
        raise ResourceNotFound(_("Profile not found."))
    profile.phone = phone
    backend.commit()
    return profile


def change_password(backend, user, current, new, confirm):
    if not user.check_password(current or ""):
        raise ValidationFailed(_("Current password is incorrect."))
    if not new or len(new) < 6:
        raise ValidationFailed(_("New password must be at least 6 characters."))
    if new != confirm:
        raise ValidationFailed(_("Passwords do not match."))
    user.set_password(new)
    backend.commit()
    log.info("Password changed | user=%s", user.id)
