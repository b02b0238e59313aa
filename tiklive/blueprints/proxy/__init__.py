from flask import Blueprint

proxy_bp = Blueprint("proxy", __name__)


@proxy_bp.after_request
def _no_cache(resp):
    # error responses from the app-wide handlers pass through here too
    resp.headers["Cache-Control"] = "no-cache"
    return resp


from . import routes  # noqa: E402,F401
