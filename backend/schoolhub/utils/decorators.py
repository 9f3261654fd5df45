from functools import wraps
from flask_jwt_extended import get_jwt_identity
from schoolhub.errors import Unauthorized, Forbidden
from schoolhub.extensions import db
from schoolhub.models import User


def get_current_user():
    """Load the user behind the current JWT, rejecting blocked accounts."""
    user_id = get_jwt_identity()
    if not user_id:
        raise Unauthorized("Missing or invalid JWT token")

    user = db.session.get(User, int(user_id))
    if not user:
        raise Unauthorized("User not found")
    if not user.is_active:
        raise Unauthorized("Your account has been blocked")
    return user


def role_required(*allowed_roles):
    """
    Restrict access to users with specific roles.
    Usage: @role_required("schooladmin", "superadmin")
    """
    allowed_roles = set(role.lower() for role in allowed_roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = get_current_user()
            if user.role.value not in allowed_roles:
                raise Forbidden("Access forbidden: insufficient permissions")
            return fn(*args, **kwargs)
        return wrapper
    return decorator
