"""Member registry endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from committee_gateway.api.v1.schemas import (
    DependentCreate,
    MemberCreate,
    MemberFileResponse,
    MemberUpdate,
)
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.domain.models import Member, MemberStatus, User
from committee_gateway.domain import members as registry
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import record_state_write

router = APIRouter()

member_access = require_view("members")


@router.get("/members", response_model=List[Member], response_model_exclude_none=True)
def list_members(
    search: str = Query("", description="Name or RUT fragment"),
    member_status: Optional[MemberStatus] = Query(None, alias="status"),
    store: StateStore = Depends(get_state_store),
    user: User = Depends(member_access),
):
    return registry.search_members(store.read().members, search, member_status)


@router.post("/members", response_model=Member, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def create_member(
    body: MemberCreate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(member_access),
):
    """Register a member with optional dependents"""
    fields = body.model_dump(exclude={"rut", "name", "family_members"})
    with store.transaction() as state:
        member = registry.create_member(state.members, body.rut, body.name, **fields)
        for dependent in body.family_members:
            registry.add_dependent(member, dependent.name, dependent.rut, dependent.relationship)
    record_state_write(store.backend_name, "module")
    return member


@router.get("/members/{member_id}", response_model=Member, response_model_exclude_none=True)
def get_member(member_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(member_access)):
    return store.read().find_member(member_id)


@router.put("/members/{member_id}", response_model=Member, response_model_exclude_none=True)
def update_member(
    member_id: str,
    body: MemberUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(member_access),
):
    with store.transaction() as state:
        member = registry.update_member(state.members, state.find_member(member_id), **body.model_dump(exclude_unset=True))
    record_state_write(store.backend_name, "module")
    return member


@router.delete("/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(member_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(member_access)):
    """Remove a member; their transactions and attendance entries are kept"""
    with store.transaction() as state:
        state.members.remove(state.find_member(member_id))
    record_state_write(store.backend_name, "module")


@router.post("/members/{member_id}/toggle-status", response_model=Member, response_model_exclude_none=True)
def toggle_member_status(
    member_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(member_access),
):
    with store.transaction() as state:
        member = registry.toggle_suspension(state.find_member(member_id))
    record_state_write(store.backend_name, "module")
    return member


@router.post(
    "/members/{member_id}/dependents",
    response_model=Member,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def add_dependent(
    member_id: str,
    body: DependentCreate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(member_access),
):
    with store.transaction() as state:
        member = state.find_member(member_id)
        registry.add_dependent(member, body.name, body.rut, body.relationship)
    record_state_write(store.backend_name, "module")
    return member


@router.delete("/members/{member_id}/dependents/{dependent_id}", response_model=Member, response_model_exclude_none=True)
def remove_dependent(
    member_id: str,
    dependent_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(member_access),
):
    with store.transaction() as state:
        member = state.find_member(member_id)
        registry.remove_dependent(member, dependent_id)
    record_state_write(store.backend_name, "module")
    return member


@router.get("/members/{member_id}/file", response_model=MemberFileResponse, response_model_exclude_none=True)
def get_member_file(member_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(member_access)):
    """Member record with payments, balance and attended assemblies"""
    state = store.read()
    member_file = registry.build_member_file(state.find_member(member_id), state.transactions, state.assemblies)
    return MemberFileResponse(
        member=member_file.member,
        payments=member_file.payments,
        balance=member_file.balance,
        assemblies_attended=member_file.assemblies_attended,
    )
