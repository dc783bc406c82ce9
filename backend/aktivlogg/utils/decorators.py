"""Custom decorators for authorization."""
from functools import wraps

from flask import g

from aktivlogg.errors import AuthenticationRequiredError
from aktivlogg.services.auth_service import AuthService
from aktivlogg.utils.helpers import error_response, preferred_language

def _load_identity():
    """Resolve the caller and keep it on ``g``; None if not a usable member."""
    try:
        g.identity = AuthService.current_identity()
    except AuthenticationRequiredError:
        g.identity = None
    return g.identity

def member_required(f):
    """Decorator to require an approved member of the token's organization."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if _load_identity() is None:
            return error_response(AuthenticationRequiredError().message(preferred_language()), 401)

        return f(*args, **kwargs)
    return decorated_function

def officer_required(f):
    """Decorator to require range officer role or higher."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = _load_identity()
        if identity is None:
            return error_response(AuthenticationRequiredError().message(preferred_language()), 401)

        if not identity.is_range_officer:
            return error_response("Range officer access required", 403)

        return f(*args, **kwargs)
    return decorated_function

def admin_required(f):
    """Decorator to require admin role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = _load_identity()
        if identity is None:
            return error_response(AuthenticationRequiredError().message(preferred_language()), 401)

        if not identity.is_admin:
            return error_response("Admin access required", 403)

        return f(*args, **kwargs)
    return decorated_function
