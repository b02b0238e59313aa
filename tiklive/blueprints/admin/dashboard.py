from flask import jsonify
from flask_login import current_user

from ...backend import get_backend
from ...security import roles_required, permission_required
from ...services import admin_service
from . import admin_bp


@admin_bp.get("/dashboard")
@roles_required("admin")
def dashboard():
    data = admin_service.dashboard(get_backend())
    data["permissions"] = current_user.permission_names
    return jsonify(data)


@admin_bp.post("/stats/refresh")
@permission_required("data_analytics")
def stats_refresh():
    backend = get_backend()
    admin_service.update_system_stats(backend)
    return jsonify(admin_service.dashboard(backend))
