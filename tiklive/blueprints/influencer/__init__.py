from flask import Blueprint

influencer_bp = Blueprint("influencer", __name__)

from . import routes  # noqa: E402,F401
