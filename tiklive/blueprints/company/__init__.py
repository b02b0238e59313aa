from flask import Blueprint

company_bp = Blueprint("company", __name__)

from . import routes  # noqa: E402,F401
