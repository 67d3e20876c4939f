"""Treasury endpoints: ledger entries, balances, receipts and CSV export"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from committee_gateway.api.v1.schemas import (
    BalanceResponse,
    LedgerSummaryResponse,
    ReceiptResponse,
    TransactionCreate,
)
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.domain.models import PaymentMethod, Transaction, User
from committee_gateway.domain.exceptions import ValidationFailedError
from committee_gateway.domain import treasury as ledger
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import record_state_write
from committee_gateway.utils.identifiers import new_id

router = APIRouter()

treasury_access = require_view("treasury")


@router.get("/transactions", response_model=List[Transaction], response_model_exclude_none=True)
def list_transactions(
    method: Optional[PaymentMethod] = Query(None, description="Filter by payment method"),
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    return ledger.filter_by_method(store.read().transactions, method)


@router.get("/transactions/summary", response_model=LedgerSummaryResponse)
def get_summary(
    method: Optional[PaymentMethod] = Query(None),
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    transactions = ledger.filter_by_method(store.read().transactions, method)
    summary = ledger.summarize(transactions)
    return LedgerSummaryResponse(
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        balance=summary.balance,
        count=len(transactions),
    )


@router.get("/transactions/export.csv")
def export_transactions(
    method: Optional[PaymentMethod] = Query(None),
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    """Download the (optionally filtered) ledger as CSV"""
    state = store.read()
    transactions = ledger.filter_by_method(state.transactions, method)
    if not transactions:
        raise ValidationFailedError("No transactions to export")

    filename = f"tesoreria_{date.today().isoformat()}.csv"
    return Response(
        content=ledger.transactions_to_csv(transactions, state.members),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/transactions",
    response_model=Transaction,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    body: TransactionCreate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    """Record an income or expense, optionally linked to a member"""
    with store.transaction() as state:
        if body.member_id:
            state.find_member(body.member_id)
        txn = Transaction(id=new_id("TE-"), **body.model_dump())
        state.transactions.insert(0, txn)
    record_state_write(store.backend_name, "module")
    return txn


@router.get("/transactions/{transaction_id}", response_model=Transaction, response_model_exclude_none=True)
def get_transaction(
    transaction_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    return store.read().find_transaction(transaction_id)


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    with store.transaction() as state:
        state.transactions.remove(state.find_transaction(transaction_id))
    record_state_write(store.backend_name, "module")


@router.get("/transactions/{transaction_id}/receipt", response_model=ReceiptResponse)
def get_receipt(
    transaction_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    """Plain-text receipt for a member payment"""
    state = store.read()
    txn = state.find_transaction(transaction_id)
    if not txn.member_id:
        raise ValidationFailedError("Receipts are only issued for member transactions")
    member = next((m for m in state.members if m.id == txn.member_id), None)
    return ReceiptResponse(
        transaction_id=txn.id,
        text=ledger.receipt_text(member, txn, state.config.trade_name),
    )


@router.get("/members/{member_id}/balance", response_model=BalanceResponse)
def get_member_balance(
    member_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(treasury_access),
):
    """Income minus expense for one member, recomputed from the ledger"""
    return BalanceResponse(member_id=member_id, balance=ledger.member_balance(store.read().transactions, member_id))
