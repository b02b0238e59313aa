import logging

from flask import jsonify, request
from flask_babel import gettext as _
from werkzeug.exceptions import HTTPException
from flask_wtf.csrf import CSRFError
from ...extensions import db
from . import errors_bp

log = logging.getLogger(__name__)


def _error(message, code, details=None):
    body = {"error": message}
    if details:
        body["details"] = details
    return jsonify(body), code


# CSRF – typically treated as 400 Bad Request
@errors_bp.app_errorhandler(CSRFError)
def err_csrf(e):
    return _error(e.description or _("CSRF token missing or invalid."), 400)


# 413 – Payload Too Large (useful for uploads)
@errors_bp.app_errorhandler(413)
def err_413(e):
    return _error(_("File is too large."), 413)


# Service errors and every other HTTPException
@errors_bp.app_errorhandler(HTTPException)
def err_http(e: HTTPException):
    # a failed request must not leave half-written rows in the session
    db.session.rollback()
    if e.code and e.code >= 500:
        log.error("HTTP %s on %s %s: %s", e.code, request.method, request.path, e.description)
    return _error(e.description or e.name, e.code or 500, getattr(e, "details", None))


# Last-resort: any other Exception
@errors_bp.app_errorhandler(Exception)
def err_unexpected(e):
    db.session.rollback()
    log.exception("Unhandled error on %s %s", request.method, request.path)
    # Generic 500; internals stay in the log
    return _error(_("Internal Server Error"), 500)
