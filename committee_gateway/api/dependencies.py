"""Dependency injection for FastAPI endpoints"""

from typing import Callable, Optional

from fastapi import Depends, Header, Request

from committee_gateway.domain.models import User
from committee_gateway.domain.exceptions import AuthenticationError, NotFoundError
from committee_gateway.domain.permissions import ensure_access
from committee_gateway.infrastructure.storage.base import StateStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_state_store(request: Request) -> StateStore:
    """Provide the store attached to the application"""
    return request.app.state.store


def get_current_user(
    x_user_id: Optional[str] = Header(None, description="Id of the logged-in user"),
    store: StateStore = Depends(get_state_store),
) -> User:
    """
    Resolve the acting user.

    Sessions live on the client; it sends back the id of the user record
    returned by login.
    """
    if not x_user_id:
        raise AuthenticationError("Missing X-User-Id header")
    try:
        return store.read().find_user(x_user_id)
    except NotFoundError as e:
        raise AuthenticationError(f"Unknown user {x_user_id}") from e


def require_view(view: str) -> Callable[..., User]:
    """Dependency factory: current user, checked against the role table for `view`"""

    def dependency(user: User = Depends(get_current_user)) -> User:
        ensure_access(user.role, view)
        return user

    return dependency
