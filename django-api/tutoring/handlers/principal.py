"""Resolve the authenticated Django user into a domain Principal."""

from rest_framework.request import Request

from tutoring.domain import Principal, Role, UserId


def principal_from_request(request: Request) -> Principal | None:
    """Return the caller's Principal, or None for anonymous or role-less users."""
    user = request.user
    if not user or not user.is_authenticated:
        return None
    try:
        role = Role(str(user.role))
    except (AttributeError, ValueError):
        return None
    return Principal(user_id=UserId(value=user.pk), role=role)
