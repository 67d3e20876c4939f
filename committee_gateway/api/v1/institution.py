"""Institutional settings of the committee"""

import logging

from fastapi import APIRouter, Depends

from committee_gateway.api.v1.schemas import ConfigUpdate, SaveResponse
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.domain.models import CommitteeConfig, User
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import record_state_write

router = APIRouter()

settings_access = require_view("settings")


@router.get("/config", response_model=CommitteeConfig, response_model_exclude_none=True)
def get_config(store: StateStore = Depends(get_state_store), user: User = Depends(settings_access)):
    return store.read().config


@router.put("/config", response_model=CommitteeConfig, response_model_exclude_none=True)
def update_config(
    body: ConfigUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(settings_access),
):
    """Update legal names, contact data and resolutions; omitted fields are kept"""
    with store.transaction() as state:
        for field, value in body.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(state.config, field, value)
        config = state.config
    record_state_write(store.backend_name, "module")
    return config


@router.post("/config/reset", response_model=CommitteeConfig, response_model_exclude_none=True)
def reset_config(store: StateStore = Depends(get_state_store), user: User = Depends(settings_access)):
    """Restore the default institutional settings; every other collection is untouched"""
    with store.transaction() as state:
        state.config = store.seed_state().config
        config = state.config
    logging.info("Institutional settings reset", extra={"user_id": user.id})
    record_state_write(store.backend_name, "reset")
    return config


@router.post("/system/reset", response_model=SaveResponse)
def reset_system(store: StateStore = Depends(get_state_store), user: User = Depends(settings_access)):
    """
    Wipe the committee's data.

    Members, transactions, assemblies and documents are deleted. Users,
    settings, board and board period go back to the seeded defaults.
    """
    store.reset(store.seed_state())
    logging.info("System reset", extra={"user_id": user.id, "backend": store.backend_name})
    record_state_write(store.backend_name, "reset")
    return SaveResponse(status="ok")
