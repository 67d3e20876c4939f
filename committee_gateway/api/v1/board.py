"""Board of directors endpoints"""

from fastapi import APIRouter, Depends

from committee_gateway.api.v1.schemas import BoardPeriodUpdate, BoardResponse, PersonIn
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.domain.models import BoardRole, Person, User
from committee_gateway.domain import board as directory
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import record_state_write

router = APIRouter()

board_access = require_view("board")


@router.get("/board", response_model=BoardResponse)
def get_board(store: StateStore = Depends(get_state_store), user: User = Depends(board_access)):
    """Current board; an empty document shows every role with vacant seats"""
    state = store.read()
    return BoardResponse(board=state.board or directory.default_board(), board_period=state.board_period)


@router.put("/board/period", response_model=BoardResponse)
def set_board_period(
    body: BoardPeriodUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(board_access),
):
    with store.transaction() as state:
        state.board_period = body.board_period
    record_state_write(store.backend_name, "module")
    return BoardResponse(board=state.board, board_period=state.board_period)


@router.put("/board/{role}/{slot}", response_model=BoardResponse)
def assign_position(
    role: BoardRole,
    slot: str,
    body: PersonIn,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(board_access),
):
    """Set the primary or substitute holder of a board role"""
    with store.transaction() as state:
        directory.assign(state.board, role, slot, Person(**body.model_dump()))
    record_state_write(store.backend_name, "module")
    return BoardResponse(board=state.board, board_period=state.board_period)
