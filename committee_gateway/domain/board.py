"""Board of directors: one primary and one substitute per role"""

from typing import List

from committee_gateway.domain.models import BoardPosition, BoardRole, Person
from committee_gateway.domain.exceptions import ValidationFailedError

SLOTS = ("primary", "substitute")


def default_board() -> List[BoardPosition]:
    return [BoardPosition(role=role) for role in BoardRole]


def find_position(board: List[BoardPosition], role: BoardRole) -> BoardPosition:
    """Position for `role`; created empty when the document lacks it"""
    for position in board:
        if position.role == role:
            return position
    position = BoardPosition(role=role)
    board.append(position)
    return position


def assign(board: List[BoardPosition], role: BoardRole, slot: str, person: Person) -> BoardPosition:
    if slot not in SLOTS:
        raise ValidationFailedError(f"Slot must be one of {', '.join(SLOTS)}")
    position = find_position(board, role)
    setattr(position, slot, person)
    return position


def officer_name(board: List[BoardPosition], role: BoardRole) -> str:
    """Primary holder's name, empty when the seat is vacant"""
    for position in board:
        if position.role == role:
            return position.primary.name
    return ""
