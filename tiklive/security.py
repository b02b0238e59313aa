# tiklive/security.py
from functools import wraps

from flask_babel import gettext as _
from flask_login import current_user

from .services.exceptions import AccountSuspended, AuthenticationFailed, PermissionDenied


def roles_required(*user_types):
    """Allow the view only for signed-in users whose profile type is listed."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthenticationFailed(_("Sign in to continue."))
            if current_user.is_suspended:
                raise AccountSuspended(_("Your account is suspended. Contact support."))
            if current_user.user_type not in user_types:
                raise PermissionDenied(_("You do not have access to this page."))
            return view(*args, **kwargs)
        return wrapped
    return decorator


def permission_required(name):
    """Admin-only, and the admin must hold the named permission."""
    def decorator(view):
        @wraps(view)
        @roles_required("admin")
        def wrapped(*args, **kwargs):
            if not current_user.has_permission(name):
                raise PermissionDenied(_("Missing admin permission: %(name)s", name=name))
            return view(*args, **kwargs)
        return wrapped
    return decorator
