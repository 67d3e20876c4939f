"""Whole-document endpoints: health, GET/POST /api/data and POST /api/login"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from committee_gateway.api.v1.schemas import HealthResponse, LoginRequest, LoginResponse, SaveResponse, UserOut
from committee_gateway.api.dependencies import get_request_id, get_state_store
from committee_gateway.config import settings
from committee_gateway.domain.models import CommitteeState
from committee_gateway.domain.auth import authenticate, merge_passwords, sanitize_user
from committee_gateway.domain.exceptions import AuthenticationError, StorageError
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import (
    record_login,
    record_state_write,
    record_storage_failure,
)
from committee_gateway.infrastructure.observability.logging import log_login, log_state_saved

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(store: StateStore = Depends(get_state_store)):
    return HealthResponse(status="ok", message="Server is running", database=store.backend_name)


@router.get("/data")
def get_data(request: Request, store: StateStore = Depends(get_state_store)):
    """
    Return the entire state document.

    Passwords are stripped from every user record.
    """
    try:
        state = store.read()
    except StorageError as e:
        record_storage_failure("read")
        logging.error(f"Read error: {e}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=500, content={"error": "Failed to read data"})

    data = state.to_wire()
    data["users"] = [sanitize_user(u) for u in state.users]
    return data


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, request: Request, store: StateStore = Depends(get_state_store)):
    """
    Check credentials against the stored users.

    Username match is case-insensitive; a successful login stamps lastLogin.
    """
    request_id = get_request_id(request)

    try:
        with store.transaction() as state:
            user = authenticate(state.users, body.username, body.password)

    except AuthenticationError:
        record_login(False)
        log_login(request_id, body.username, success=False)
        return JSONResponse(status_code=401, content={"success": False, "message": "Credenciales inválidas"})

    except StorageError as e:
        record_storage_failure("login")
        logging.error(f"Login error: {e}", extra={"request_id": request_id})
        return JSONResponse(status_code=500, content={"error": "Login failed"})

    record_login(True)
    log_login(request_id, user.username, success=True)
    return LoginResponse(success=True, user=UserOut.model_validate(sanitize_user(user)))


@router.post("/data", response_model=SaveResponse)
def save_data(incoming: CommitteeState, request: Request, store: StateStore = Depends(get_state_store)):
    """
    Replace the entire state document.

    Flow:
    1. Read the stored document
    2. Reattach stored passwords to users sent without one (default for new users)
    3. Overwrite the stored document, last writer wins
    """
    request_id = get_request_id(request)

    def with_passwords(current: CommitteeState) -> CommitteeState:
        merge_passwords(incoming.users, current.users, settings.default_user_password)
        return incoming

    try:
        store.replace(with_passwords)
    except StorageError as e:
        record_storage_failure("write")
        logging.error(f"Write error: {e}", extra={"request_id": request_id})
        return JSONResponse(status_code=500, content={"error": "Failed to save data"})

    record_state_write(store.backend_name, "full_sync")
    log_state_saved(
        request_id,
        store.backend_name,
        {
            "users": len(incoming.users),
            "members": len(incoming.members),
            "transactions": len(incoming.transactions),
            "assemblies": len(incoming.assemblies),
            "documents": len(incoming.documents),
        },
    )
    return SaveResponse(status="ok")
