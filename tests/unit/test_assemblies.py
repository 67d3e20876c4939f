"""Unit tests for assembly lifecycle, attendance and quorum"""

import pytest
from datetime import date, datetime
from committee_gateway.domain.models import Assembly, AssemblyStatus, AssemblyType, Member
from committee_gateway.domain.assemblies import (
    attended_by,
    calculate_quorum,
    next_assembly,
    register_attendance,
    reminder_text,
    save_minutes,
    transition_status,
)
from committee_gateway.domain.exceptions import (
    AttendanceClosedError,
    DuplicateAttendanceError,
    InvalidTransitionError,
    MemberNotFoundError,
)


def test_transition_scheduled_to_in_progress_stamps_start_time():
    """Test that starting an assembly records the start time"""
    assembly = Assembly(id="AS-1", date=date(2025, 5, 10))

    transition_status(assembly, AssemblyStatus.IN_PROGRESS, now=datetime(2025, 5, 10, 19, 5, 30))

    assert assembly.status == AssemblyStatus.IN_PROGRESS
    assert assembly.start_time == "19:05:30"


def test_transition_in_progress_to_finished(in_progress_assembly: Assembly):
    """Test the second and last step of the lifecycle"""
    transition_status(in_progress_assembly, AssemblyStatus.FINISHED)
    assert in_progress_assembly.status == AssemblyStatus.FINISHED


def test_transition_cannot_skip_or_go_back():
    """Test that only the direct successor status is accepted"""
    assembly = Assembly(id="AS-1", date=date(2025, 5, 10))

    with pytest.raises(InvalidTransitionError):
        transition_status(assembly, AssemblyStatus.FINISHED)

    assembly.status = AssemblyStatus.FINISHED
    with pytest.raises(InvalidTransitionError):
        transition_status(assembly, AssemblyStatus.IN_PROGRESS)
    assert assembly.status == AssemblyStatus.FINISHED


def test_register_attendance_matches_unformatted_rut(in_progress_assembly: Assembly, sample_members: list[Member]):
    """Test that a typed RUT without dots is matched and stored formatted"""
    member = register_attendance(in_progress_assembly, sample_members, "123456785")

    assert member.id == "M1"
    assert in_progress_assembly.attendees == ["12.345.678-5"]


def test_register_attendance_rejects_duplicates(in_progress_assembly: Assembly, sample_members: list[Member]):
    """Test that the same member cannot be registered twice"""
    register_attendance(in_progress_assembly, sample_members, "12.345.678-5")

    with pytest.raises(DuplicateAttendanceError):
        register_attendance(in_progress_assembly, sample_members, "12345678-5")
    assert len(in_progress_assembly.attendees) == 1


def test_register_attendance_unknown_rut(in_progress_assembly: Assembly, sample_members: list[Member]):
    """Test that a RUT outside the registry is refused"""
    with pytest.raises(MemberNotFoundError):
        register_attendance(in_progress_assembly, sample_members, "33.333.333-3")
    assert in_progress_assembly.attendees == []


@pytest.mark.parametrize("assembly_status", [AssemblyStatus.SCHEDULED, AssemblyStatus.FINISHED])
def test_register_attendance_only_while_in_progress(assembly_status: AssemblyStatus, sample_members: list[Member]):
    """Test that attendance is closed before start and after finish"""
    assembly = Assembly(id="AS-1", date=date(2025, 5, 10), status=assembly_status)

    with pytest.raises(AttendanceClosedError):
        register_attendance(assembly, sample_members, "12.345.678-5")


def test_quorum_percentage_and_threshold():
    """Test rounding and the reached flag at the 50% threshold"""
    assembly = Assembly(id="AS-1", date=date(2025, 5, 10), attendees=["a", "b"])

    quorum = calculate_quorum(assembly, member_count=3)
    assert quorum.present == 2
    assert quorum.total == 3
    assert quorum.percentage == 67
    assert quorum.reached is True

    quorum = calculate_quorum(assembly, member_count=5)
    assert quorum.percentage == 40
    assert quorum.reached is False


def test_quorum_with_empty_registry():
    """Test that zero members gives 0% instead of dividing by zero"""
    quorum = calculate_quorum(Assembly(id="AS-1", date=date(2025, 5, 10)), member_count=0)
    assert quorum.percentage == 0
    assert quorum.reached is False


def test_save_minutes_requires_started_assembly(in_progress_assembly: Assembly):
    """Test that minutes are refused while scheduled and stored once started"""
    scheduled = Assembly(id="AS-2", date=date(2025, 6, 1))
    with pytest.raises(InvalidTransitionError):
        save_minutes(scheduled, ["Tabla"], [], "")

    save_minutes(in_progress_assembly, ["Cuentas"], ["Aprobar balance"], "Sin observaciones")
    assert in_progress_assembly.agenda == ["Cuentas"]
    assert in_progress_assembly.agreements == ["Aprobar balance"]
    assert in_progress_assembly.observations == "Sin observaciones"


def test_next_assembly_skips_finished():
    """Test that the earliest pending assembly is chosen"""
    assemblies = [
        Assembly(id="old", date=date(2025, 1, 1), status=AssemblyStatus.FINISHED),
        Assembly(id="later", date=date(2025, 9, 1)),
        Assembly(id="sooner", date=date(2025, 7, 1)),
    ]
    assert next_assembly(assemblies).id == "sooner"
    assert next_assembly(assemblies[:1]) is None


def test_attended_by_counts_finished_assemblies_only():
    """Test the member file's attendance list"""
    assemblies = [
        Assembly(id="done", date=date(2025, 1, 1), status=AssemblyStatus.FINISHED, attendees=["12.345.678-5"]),
        Assembly(id="live", date=date(2025, 2, 1), status=AssemblyStatus.IN_PROGRESS, attendees=["12.345.678-5"]),
        Assembly(id="other", date=date(2025, 3, 1), status=AssemblyStatus.FINISHED, attendees=["11.111.111-1"]),
    ]
    assert [a.id for a in attended_by(assemblies, "123456785")] == ["done"]


def test_reminder_text(sample_members: list[Member]):
    """Test the summons message for one member"""
    assembly = Assembly(
        id="AS-9",
        date=date(2025, 9, 6),
        summons_time="19:30",
        location="Sede social",
        description="Postulación a subsidio",
        type=AssemblyType.EXTRAORDINARY,
    )
    text = reminder_text(sample_members[0], assembly, "Tierra Esperanza")

    assert text.startswith("*CITACIÓN ASAMBLEA EXTRAORDINARIA*")
    assert "*COMITÉ TIERRA ESPERANZA*" in text
    assert "Estimado(a) *Ana Torres*" in text
    assert "*Fecha:* 2025-09-06" in text
    assert "*Hora:* 19:30 hrs." in text
    assert "*Lugar:* Sede social" in text
    assert "*Motivo:* Postulación a subsidio" in text
