# tiklive/blueprints/utils.py
from flask import jsonify, request
from flask_babel import gettext as _
from werkzeug.datastructures import MultiDict

from ..services.exceptions import ValidationFailed


def json_body() -> dict:
    """Request payload as a dict: JSON body, or form fields for multipart posts."""
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationFailed(_("Request body must be a JSON object."))
    return data


def formdata_from_json(data: dict) -> MultiDict:
    """Shape a JSON payload the way WTForms reads a submitted form."""
    items = []
    for key, value in (data or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "y" if value else ""
        elif isinstance(value, (list, tuple)):
            value = "\n".join(str(v) for v in value)
        items.append((key, str(value)))
    return MultiDict(items)


def form_errors(form) -> str:
    parts = []
    for field, errors in form.errors.items():
        label = getattr(getattr(form, field, None), "label", None)
        name = label.text if label is not None else field
        parts.append(f"{name}: {'; '.join(str(e) for e in errors)}")
    return " | ".join(parts)


def validate_form(form_cls, data: dict):
    form = form_cls(formdata=formdata_from_json(data), meta={"csrf": False})
    if not form.validate():
        raise ValidationFailed(_("Please correct the highlighted fields."), details=form_errors(form))
    return form


def no_cache(payload, status=200):
    resp = jsonify(payload)
    resp.status_code = status
    resp.headers["Cache-Control"] = "no-cache"
    return resp


def positive_int_arg(name, default):
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationFailed(_("%(name)s must be a positive integer.", name=name))
    if value < 1:
        raise ValidationFailed(_("%(name)s must be a positive integer.", name=name))
    return value
