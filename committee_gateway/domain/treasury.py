"""Treasury ledger: balances, cash flow, receipts and CSV export"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from committee_gateway.domain.models import Member, PaymentMethod, Transaction, TransactionType
from committee_gateway.utils.date_utils import last_n_months

CSV_COLUMNS = ["ID", "Fecha", "Socio", "RUT", "Tipo", "Método", "Referencia", "Descripción", "Monto"]


@dataclass
class LedgerSummary:
    total_income: int
    total_expense: int
    balance: int


@dataclass
class MonthFlow:
    year: int
    month: int
    income: int
    expense: int


def summarize(transactions: List[Transaction]) -> LedgerSummary:
    """Income minus expense over the given transactions"""
    income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    expense = sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)
    return LedgerSummary(total_income=income, total_expense=expense, balance=income - expense)


def member_balance(transactions: List[Transaction], member_id: str) -> int:
    """Running balance for one member; derived, never stored"""
    return summarize(member_transactions(transactions, member_id)).balance


def member_transactions(transactions: List[Transaction], member_id: str) -> List[Transaction]:
    return [t for t in transactions if t.member_id == member_id]


def filter_by_method(transactions: List[Transaction], method: Optional[PaymentMethod]) -> List[Transaction]:
    if method is None:
        return list(transactions)
    return [t for t in transactions if t.payment_method == method]


def monthly_cash_flow(transactions: List[Transaction], today: date, months: int = 6) -> List[MonthFlow]:
    """
    Income and expense per calendar month.

    Covers the last `months` months including the current one, oldest first.
    Transactions outside the window are ignored.
    """
    buckets: Dict[tuple, MonthFlow] = {
        (year, month): MonthFlow(year=year, month=month, income=0, expense=0)
        for year, month in last_n_months(today, months)
    }
    for txn in transactions:
        bucket = buckets.get((txn.date.year, txn.date.month))
        if bucket is None:
            continue
        if txn.type == TransactionType.INCOME:
            bucket.income += txn.amount
        else:
            bucket.expense += txn.amount
    return list(buckets.values())


def transactions_to_csv(transactions: List[Transaction], members: List[Member]) -> bytes:
    """Ledger export; transactions of unknown members show N/A"""
    by_id = {m.id: m for m in members}
    rows = []
    for txn in transactions:
        member = by_id.get(txn.member_id) if txn.member_id else None
        rows.append(
            {
                "ID": txn.id,
                "Fecha": txn.date.isoformat(),
                "Socio": member.name if member else "N/A",
                "RUT": member.rut if member else "N/A",
                "Tipo": txn.type.value,
                "Método": txn.payment_method.value,
                "Referencia": txn.reference_number or "",
                "Descripción": txn.description,
                "Monto": txn.amount,
            }
        )
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False).encode("utf-8")


def format_amount(amount: int) -> str:
    """Chilean peso formatting: 1234567 -> $1.234.567"""
    return "$" + f"{amount:,}".replace(",", ".")


def receipt_text(member: Optional[Member], transaction: Transaction, trade_name: str) -> str:
    """Plain-text payment receipt suitable for chat or e-mail; a deleted member shows N/A"""
    ref_text = f"\n*Ref:* {transaction.reference_number}" if transaction.reference_number else ""
    return (
        "*COMPROBANTE DE PAGO OFICIAL*\n"
        f"*{trade_name.upper()}*\n"
        "------------------------------------------\n"
        f"*Folio:* {transaction.id}\n"
        f"*Fecha:* {transaction.date.isoformat()}\n\n"
        f"*Socio:* {member.name if member else 'N/A'}\n"
        f"*RUT:* {member.rut if member else 'N/A'}\n\n"
        f"*MONTO:* {format_amount(transaction.amount)}\n"
        f"*Método:* {transaction.payment_method.value}{ref_text}\n"
        f"*Concepto:* {transaction.description}\n"
        "------------------------------------------\n"
        "_Documento digital generado por el sistema del comité._"
    )
