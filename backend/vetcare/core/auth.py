"""Flask-Login backed implementation of the current-user seam and role checks."""

from functools import wraps
from typing import Optional

from flask_login import current_user

from vetcare.core.exceptions import ForbiddenError
from vetcare.domain.interfaces import ICurrentUserProvider

STAFF_ROLES = ("vet", "admin")


class FlaskLoginUserProvider(ICurrentUserProvider):
    def current_user_id(self) -> Optional[str]:
        if not current_user or not current_user.is_authenticated:
            return None
        return current_user.get_id()


def current_user_id() -> Optional[str]:
    return FlaskLoginUserProvider().current_user_id()


def current_user_role() -> Optional[str]:
    if not current_user or not current_user.is_authenticated:
        return None
    return getattr(current_user, "role", None)


def role_required(*allowed_roles: str):
    """Decorator factory for role-based access control.

    Stack it below ``login_required``; a signed-in user whose role is not in
    ``allowed_roles`` gets a ``ForbiddenError`` (HTTP 403).
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            role = current_user_role()
            if role not in allowed_roles:
                raise ForbiddenError(allowed_roles, role)
            return f(*args, **kwargs)

        return decorated_function

    return decorator


staff_required = role_required(*STAFF_ROLES)
