# tiklive/blueprints/main/routes.py
from flask import current_app, jsonify, send_from_directory, session
from flask_babel import gettext as _

from ...services.exceptions import ValidationFailed
from . import main_bp


@main_bp.get("/uploads/<path:relpath>")
def uploads(relpath):
    # send_from_directory refuses paths that escape the folder
    return send_from_directory(current_app.extensions["backend"].storage.base_dir, relpath)


@main_bp.post("/lang/<code>")
def set_language(code):
    if code not in current_app.config.get("LANGUAGES", ["en"]):
        raise ValidationFailed(_("Unsupported language: %(code)s", code=code))
    session["lang"] = code
    return jsonify({"lang": code})
