from flask import Blueprint

admin_bp = Blueprint("admin", __name__)

# Import route modules to register their endpoints
from . import dashboard   # noqa: E402,F401
from . import users       # noqa: E402,F401
from . import tasks       # noqa: E402,F401
from . import categories  # noqa: E402,F401
from . import videos      # noqa: E402,F401
