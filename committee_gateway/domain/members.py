"""Member registry rules"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from committee_gateway.domain.models import (
    Assembly,
    FamilyMember,
    Member,
    MemberStatus,
    Transaction,
)
from committee_gateway.domain.exceptions import DuplicateRecordError, ValidationFailedError
from committee_gateway.domain import treasury
from committee_gateway.domain.assemblies import attended_by
from committee_gateway.utils.identifiers import new_id
from committee_gateway.utils.rut import format_rut, is_valid_rut, normalize_rut

_RUT_LIKE = re.compile(r"[0-9.\-kK\s]+")


@dataclass
class MemberFile:
    """Everything the committee holds about one member"""

    member: Member
    payments: List[Transaction] = field(default_factory=list)
    balance: int = 0
    assemblies_attended: List[Assembly] = field(default_factory=list)


def search_members(
    members: List[Member],
    search: str = "",
    status: Optional[MemberStatus] = None,
) -> List[Member]:
    """Case-insensitive name match or normalized RUT match, optionally by status"""
    term = search.strip().lower()
    # Names like "Erika" would otherwise reduce to a RUT fragment ("k")
    rut_term = normalize_rut(search) if _RUT_LIKE.fullmatch(search.strip()) else ""

    def matches(member: Member) -> bool:
        if not term:
            return True
        return term in member.name.lower() or (bool(rut_term) and rut_term in normalize_rut(member.rut))

    return [m for m in members if matches(m) and (status is None or m.status == status)]


def _checked_rut(members: List[Member], rut: str, exclude_id: Optional[str] = None) -> str:
    formatted = format_rut(rut)
    if not is_valid_rut(formatted):
        raise ValidationFailedError(f"RUT {rut} is not valid")
    for member in members:
        if member.id != exclude_id and normalize_rut(member.rut) == normalize_rut(formatted):
            raise DuplicateRecordError(f"RUT {formatted} is already registered to {member.name}")
    return formatted


def create_member(members: List[Member], rut: str, name: str, **fields) -> Member:
    """Register a member; RUT is validated, formatted and must be unique"""
    if not rut or not name:
        raise ValidationFailedError("RUT and name are required")

    member = Member(id=new_id(), rut=_checked_rut(members, rut), name=name, **fields)
    members.append(member)
    return member


def update_member(members: List[Member], member: Member, **changes) -> Member:
    if changes.get("rut") is not None:
        changes["rut"] = _checked_rut(members, changes["rut"], exclude_id=member.id)
    for name, value in changes.items():
        if value is not None:
            setattr(member, name, value)
    return member


def toggle_suspension(member: Member) -> Member:
    """Suspended members become active again, anyone else is suspended"""
    member.status = MemberStatus.ACTIVE if member.status == MemberStatus.SUSPENDED else MemberStatus.SUSPENDED
    return member


def add_dependent(member: Member, name: str, rut: str = "", relationship: str = "") -> FamilyMember:
    if not name:
        raise ValidationFailedError("Dependent name is required")
    dependent = FamilyMember(id=new_id(), name=name, rut=format_rut(rut) if rut else "", relationship=relationship)
    member.family_members.append(dependent)
    return dependent


def remove_dependent(member: Member, dependent_id: str) -> None:
    member.family_members = [fm for fm in member.family_members if fm.id != dependent_id]


def build_member_file(member: Member, transactions: List[Transaction], assemblies: List[Assembly]) -> MemberFile:
    payments = treasury.member_transactions(transactions, member.id)
    return MemberFile(
        member=member,
        payments=payments,
        balance=treasury.summarize(payments).balance,
        assemblies_attended=attended_by(assemblies, member.rut),
    )
