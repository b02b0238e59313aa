# tiklive/services/exceptions.py
from werkzeug.exceptions import HTTPException


class MarketplaceError(HTTPException):
    """Base for errors raised by the service layer; rendered as JSON by the errors blueprint."""
    code = 400

    def __init__(self, description: str | None = None, details: str | None = None):
        super().__init__(description=description)
        self.details = details


class ValidationFailed(MarketplaceError):
    code = 400


class AuthenticationFailed(MarketplaceError):
    code = 401


class PermissionDenied(MarketplaceError):
    code = 403


class AccountSuspended(PermissionDenied):
    pass


class ResourceNotFound(MarketplaceError):
    code = 404


class Conflict(MarketplaceError):
    code = 409


class AlreadyApplied(Conflict):
    pass


class InvalidTransition(Conflict):
    pass


class GatewayError(MarketplaceError):
    code = 502
