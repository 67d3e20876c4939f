"""Assembly lifecycle, attendance and quorum rules"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from committee_gateway.domain.models import Assembly, AssemblyStatus, Member
from committee_gateway.domain.exceptions import (
    AttendanceClosedError,
    DuplicateAttendanceError,
    InvalidTransitionError,
    MemberNotFoundError,
)
from committee_gateway.utils.rut import normalize_rut

# Linear lifecycle: each status has exactly one successor
NEXT_STATUS: Dict[AssemblyStatus, AssemblyStatus] = {
    AssemblyStatus.SCHEDULED: AssemblyStatus.IN_PROGRESS,
    AssemblyStatus.IN_PROGRESS: AssemblyStatus.FINISHED,
}


@dataclass
class Quorum:
    """Attendance over the member registry"""

    present: int
    total: int
    percentage: int
    reached: bool


def transition_status(assembly: Assembly, new_status: AssemblyStatus, now: Optional[datetime] = None) -> Assembly:
    """
    Move an assembly to the next status.

    Scheduled -> In Progress -> Finished. No skipping and no going back.
    Starting an assembly stamps its start time.

    Raises:
        InvalidTransitionError: `new_status` is not the successor of the current status
    """
    if NEXT_STATUS.get(assembly.status) != new_status:
        raise InvalidTransitionError(
            f"Assembly {assembly.id} cannot move from {assembly.status.value} to {new_status.value}"
        )

    if new_status == AssemblyStatus.IN_PROGRESS:
        assembly.start_time = (now or datetime.now()).strftime("%H:%M:%S")
    assembly.status = new_status
    return assembly


def register_attendance(assembly: Assembly, members: List[Member], rut: str) -> Member:
    """
    Mark the member identified by `rut` as present.

    The typed RUT is matched ignoring dots, dash and case. Attendees are
    stored by the member's registered RUT.

    Raises:
        AttendanceClosedError: Assembly is not in progress
        MemberNotFoundError: No member has that RUT
        DuplicateAttendanceError: Member already registered
    """
    if assembly.status != AssemblyStatus.IN_PROGRESS:
        raise AttendanceClosedError(
            f"Attendance is only open while the assembly is in progress (current: {assembly.status.value})"
        )

    wanted = normalize_rut(rut)
    member = next((m for m in members if wanted and normalize_rut(m.rut) == wanted), None)
    if member is None:
        raise MemberNotFoundError("RUT no encontrado en la base de socios.")

    present = {normalize_rut(a) for a in assembly.attendees}
    if normalize_rut(member.rut) in present:
        raise DuplicateAttendanceError(f"{member.name} ya registró su asistencia.")

    assembly.attendees.append(member.rut)
    return member


def calculate_quorum(assembly: Assembly, member_count: int, threshold_percent: int = 50) -> Quorum:
    """Quorum is informational: nothing is blocked when it is not reached"""
    present = len(assembly.attendees)
    percentage = round(present / member_count * 100) if member_count else 0
    return Quorum(
        present=present,
        total=member_count,
        percentage=percentage,
        reached=percentage >= threshold_percent,
    )


def save_minutes(
    assembly: Assembly,
    agenda: List[str],
    agreements: List[str],
    observations: str = "",
) -> Assembly:
    """Record agenda, agreements and observations once the assembly has started"""
    if assembly.status == AssemblyStatus.SCHEDULED:
        raise InvalidTransitionError("Minutes can only be recorded once the assembly has started")

    assembly.agenda = list(agenda)
    assembly.agreements = list(agreements)
    assembly.observations = observations
    return assembly


def next_assembly(assemblies: List[Assembly]) -> Optional[Assembly]:
    """Earliest assembly still scheduled or in progress"""
    pending = [a for a in assemblies if a.status in (AssemblyStatus.SCHEDULED, AssemblyStatus.IN_PROGRESS)]
    return min(pending, key=lambda a: a.date) if pending else None


def attended_by(assemblies: List[Assembly], rut: str) -> List[Assembly]:
    """Finished assemblies whose attendance list contains `rut`"""
    wanted = normalize_rut(rut)
    return [
        a for a in assemblies
        if a.status == AssemblyStatus.FINISHED and wanted in {normalize_rut(r) for r in a.attendees}
    ]


def reminder_text(member: Member, assembly: Assembly, trade_name: str) -> str:
    """Summons message for one member, ready to paste into chat"""
    return (
        f"*CITACIÓN ASAMBLEA {assembly.type.value.upper()}*\n"
        f"*COMITÉ {trade_name.upper()}*\n\n"
        f"Estimado(a) *{member.name}*,\n\n"
        "Se le cita cordialmente a nuestra próxima asamblea:\n"
        f"*Fecha:* {assembly.date.isoformat()}\n"
        f"*Hora:* {assembly.summons_time} hrs.\n"
        f"*Lugar:* {assembly.location}\n"
        f"*Motivo:* {assembly.description}\n\n"
        "Su asistencia es fundamental para el quórum y la toma de decisiones del comité. ¡Le esperamos!\n\n"
        f"_Mensaje enviado vía Sistema de Gestión {trade_name}_"
    )
