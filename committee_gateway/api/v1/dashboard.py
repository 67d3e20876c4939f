"""Dashboard summary"""

from datetime import date

from fastapi import APIRouter, Depends

from committee_gateway.api.v1.schemas import DashboardResponse, FinanceOverview, MonthFlowSchema
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.domain.models import BoardRole, MemberStatus, User
from committee_gateway.domain.permissions import can_view_finances
from committee_gateway.domain.assemblies import next_assembly
from committee_gateway.domain.board import officer_name
from committee_gateway.domain.treasury import monthly_cash_flow, summarize
from committee_gateway.infrastructure.storage.base import StateStore

router = APIRouter()

dashboard_access = require_view("dashboard")


@router.get("/dashboard", response_model=DashboardResponse, response_model_exclude_none=True)
def get_dashboard(store: StateStore = Depends(get_state_store), user: User = Depends(dashboard_access)):
    """
    Headline figures for the landing page.

    Balance and six-month cash flow are only included for roles allowed to
    see finances.
    """
    state = store.read()

    finances = None
    if can_view_finances(user.role):
        summary = summarize(state.transactions)
        finances = FinanceOverview(
            total_income=summary.total_income,
            total_expense=summary.total_expense,
            balance=summary.balance,
            cash_flow=[
                MonthFlowSchema(year=m.year, month=m.month, income=m.income, expense=m.expense)
                for m in monthly_cash_flow(state.transactions, date.today())
            ],
        )

    return DashboardResponse(
        member_count=len(state.members),
        active_member_count=sum(1 for m in state.members if m.status == MemberStatus.ACTIVE),
        assembly_count=len(state.assemblies),
        document_count=len(state.documents),
        board_period=state.board_period,
        president=officer_name(state.board, BoardRole.PRESIDENT),
        next_assembly=next_assembly(state.assemblies),
        finances=finances,
    )
