"""Assembly scheduling, status transitions, attendance and minutes"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from committee_gateway.api.v1.schemas import (
    AssemblyCreate,
    AssemblyStatusChange,
    AssemblyUpdate,
    AttendanceRequest,
    AttendanceResponse,
    MinutesUpdate,
    QuorumResponse,
    ReminderResponse,
)
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.config import settings
from committee_gateway.domain.models import Assembly, AssemblyStatus, User
from committee_gateway.domain.assemblies import (
    calculate_quorum,
    register_attendance,
    reminder_text,
    save_minutes,
    transition_status,
)
from committee_gateway.domain.exceptions import (
    AttendanceClosedError,
    DuplicateAttendanceError,
    MemberNotFoundError,
)
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import (
    assembly_transition_counter,
    attendance_counter,
    record_state_write,
)
from committee_gateway.utils.identifiers import new_id

router = APIRouter()

assembly_access = require_view("assemblies")
attendance_access = require_view("attendance")


def _quorum_response(assembly: Assembly, member_count: int) -> QuorumResponse:
    quorum = calculate_quorum(assembly, member_count, settings.quorum_threshold_percent)
    return QuorumResponse(
        assembly_id=assembly.id,
        present=quorum.present,
        total=quorum.total,
        percentage=quorum.percentage,
        threshold=settings.quorum_threshold_percent,
        reached=quorum.reached,
    )


@router.get("/assemblies", response_model=List[Assembly], response_model_exclude_none=True)
def list_assemblies(store: StateStore = Depends(get_state_store), user: User = Depends(assembly_access)):
    return sorted(store.read().assemblies, key=lambda a: a.date, reverse=True)


@router.post("/assemblies", response_model=Assembly, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def create_assembly(
    body: AssemblyCreate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(assembly_access),
):
    """Schedule an assembly; it starts with no attendees"""
    with store.transaction() as state:
        assembly = Assembly(id=new_id("AS-"), status=AssemblyStatus.SCHEDULED, attendees=[], **body.model_dump())
        state.assemblies.insert(0, assembly)
    record_state_write(store.backend_name, "module")
    return assembly


@router.get("/assemblies/{assembly_id}", response_model=Assembly, response_model_exclude_none=True)
def get_assembly(assembly_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(assembly_access)):
    return store.read().find_assembly(assembly_id)


@router.put("/assemblies/{assembly_id}", response_model=Assembly, response_model_exclude_none=True)
def update_assembly(
    assembly_id: str,
    body: AssemblyUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(assembly_access),
):
    """Edit descriptive fields; status only moves through /status"""
    with store.transaction() as state:
        assembly = state.find_assembly(assembly_id)
        for field, value in body.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(assembly, field, value)
    record_state_write(store.backend_name, "module")
    return assembly


@router.delete("/assemblies/{assembly_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assembly(assembly_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(assembly_access)):
    with store.transaction() as state:
        state.assemblies.remove(state.find_assembly(assembly_id))
    record_state_write(store.backend_name, "module")


@router.post("/assemblies/{assembly_id}/status", response_model=Assembly, response_model_exclude_none=True)
def change_status(
    assembly_id: str,
    body: AssemblyStatusChange,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(attendance_access),
):
    """Scheduled -> In Progress -> Finished"""
    with store.transaction() as state:
        assembly = transition_status(state.find_assembly(assembly_id), body.status)
    assembly_transition_counter.labels(status=assembly.status.value).inc()
    record_state_write(store.backend_name, "module")
    return assembly


@router.post("/assemblies/{assembly_id}/attendance", response_model=AttendanceResponse)
def mark_attendance(
    assembly_id: str,
    body: AttendanceRequest,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(attendance_access),
):
    """
    Register a member as present by RUT.

    Only while the assembly is in progress. Returns the updated quorum.
    """
    try:
        with store.transaction() as state:
            assembly = state.find_assembly(assembly_id)
            member = register_attendance(assembly, state.members, body.rut)
    except AttendanceClosedError:
        attendance_counter.labels(result="closed").inc()
        raise
    except MemberNotFoundError:
        attendance_counter.labels(result="unknown_member").inc()
        raise
    except DuplicateAttendanceError:
        attendance_counter.labels(result="duplicate").inc()
        raise

    attendance_counter.labels(result="registered").inc()
    record_state_write(store.backend_name, "module")
    return AttendanceResponse(
        member_id=member.id,
        member_name=member.name,
        member_rut=member.rut,
        quorum=_quorum_response(assembly, len(state.members)),
    )


@router.get("/assemblies/{assembly_id}/quorum", response_model=QuorumResponse)
def get_quorum(assembly_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(attendance_access)):
    """Attendance percentage over all registered members"""
    state = store.read()
    return _quorum_response(state.find_assembly(assembly_id), len(state.members))


@router.put("/assemblies/{assembly_id}/minutes", response_model=Assembly, response_model_exclude_none=True)
def update_minutes(
    assembly_id: str,
    body: MinutesUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(attendance_access),
):
    with store.transaction() as state:
        assembly = save_minutes(state.find_assembly(assembly_id), body.agenda, body.agreements, body.observations)
    record_state_write(store.backend_name, "module")
    return assembly


@router.get("/assemblies/{assembly_id}/reminder", response_model=ReminderResponse)
def get_reminder(
    assembly_id: str,
    member_id: str = Query(..., alias="memberId"),
    store: StateStore = Depends(get_state_store),
    user: User = Depends(assembly_access),
):
    """Summons text for one member, with the phone it should be sent to"""
    state = store.read()
    assembly = state.find_assembly(assembly_id)
    member = state.find_member(member_id)
    return ReminderResponse(
        assembly_id=assembly.id,
        member_id=member.id,
        phone=member.phone,
        text=reminder_text(member, assembly, state.config.trade_name),
    )
