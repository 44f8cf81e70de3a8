"""
Role checks for function views, and per-user row filtering.

    @role_required(Role.FACTURATION)
    def invoice_list(request): ...

Admins and superusers pass every role check. Exploitation staff only
see the slips and quotes they created (owned_by_user).
"""

from functools import wraps

from django.contrib.auth.views import redirect_to_login
from django.core.exceptions import PermissionDenied


def role_required(*roles):
    """Allow the view to the given roles; anonymous users go to the login page."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            user = request.user
            if not user.is_authenticated:
                return redirect_to_login(request.get_full_path())
            if user.is_admin_role or not roles or user.has_any_role(*roles):
                return view_func(request, *args, **kwargs)
            raise PermissionDenied

        return wrapper

    return decorator


def owned_by_user(queryset, user, field="created_by"):
    """Restrict a queryset to the user's own rows for exploitation staff."""
    if user.is_exploitation:
        return queryset.filter(**{field: user})
    return queryset
