"""User account management (support staff only)"""

from typing import List

from fastapi import APIRouter, Depends, status

from committee_gateway.api.v1.schemas import UserCreate, UserOut, UserUpdate
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.config import settings
from committee_gateway.domain.models import User
from committee_gateway.domain import auth
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import record_state_write

router = APIRouter()

support_access = require_view("support")


def _out(user: User) -> UserOut:
    return UserOut.model_validate(auth.sanitize_user(user))


@router.get("/users", response_model=List[UserOut], response_model_exclude_none=True)
def list_users(store: StateStore = Depends(get_state_store), user: User = Depends(support_access)):
    return [_out(u) for u in store.read().users]


@router.post("/users", response_model=UserOut, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(support_access),
):
    """Create an account; without a password it gets the default one"""
    with store.transaction() as state:
        created = auth.create_user(
            state.users, body.username, body.name, body.role, body.password, settings.default_user_password
        )
    record_state_write(store.backend_name, "module")
    return _out(created)


@router.put("/users/{user_id}", response_model=UserOut, response_model_exclude_none=True)
def update_user(
    user_id: str,
    body: UserUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(support_access),
):
    with store.transaction() as state:
        updated = auth.update_user(state.users, state.find_user(user_id), **body.model_dump(exclude_unset=True))
    record_state_write(store.backend_name, "module")
    return _out(updated)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(support_access)):
    """Remove an account; the last remaining one cannot be deleted"""
    with store.transaction() as state:
        auth.delete_user(state.users, state.find_user(user_id))
    record_state_write(store.backend_name, "module")
