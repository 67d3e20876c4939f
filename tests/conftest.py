"""Pytest fixtures for testing"""

import pytest
from datetime import date
from pathlib import Path
from typing import Dict
from fastapi.testclient import TestClient
from committee_gateway.api.main import create_app
from committee_gateway.domain.models import (
    Assembly,
    AssemblyStatus,
    Member,
    MemberStatus,
    Transaction,
    TransactionType,
    PaymentMethod,
)
from committee_gateway.infrastructure.storage.json_store import JsonStateStore

ADMIN_PASSWORD = "admin-secret"
DEFAULT_PASSWORD = "te2024"

# Seeded account ids
SUPPORT_ID = "1"
ADMIN_ID = "2"
PRESIDENT_ID = "3"
TREASURER_ID = "4"
SECRETARY_ID = "5"


@pytest.fixture
def store(tmp_path: Path) -> JsonStateStore:
    """Seeded JSON store in a temporary directory"""
    json_store = JsonStateStore(tmp_path / "data.json", admin_password=ADMIN_PASSWORD, default_password=DEFAULT_PASSWORD)
    json_store.init()
    return json_store


@pytest.fixture
def client(store: JsonStateStore) -> TestClient:
    """Create FastAPI test client backed by the temporary store"""
    app = create_app(store=store)
    return TestClient(app)


def as_user(user_id: str) -> Dict[str, str]:
    """Headers identifying the acting user"""
    return {"X-User-Id": user_id}


@pytest.fixture
def support_headers() -> Dict[str, str]:
    return as_user(SUPPORT_ID)


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return as_user(ADMIN_ID)


@pytest.fixture
def president_headers() -> Dict[str, str]:
    return as_user(PRESIDENT_ID)


@pytest.fixture
def treasurer_headers() -> Dict[str, str]:
    return as_user(TREASURER_ID)


@pytest.fixture
def secretary_headers() -> Dict[str, str]:
    return as_user(SECRETARY_ID)


@pytest.fixture
def sample_members() -> list[Member]:
    """Three registered members, one of them suspended"""
    return [
        Member(id="M1", rut="12.345.678-5", name="Ana Torres", status=MemberStatus.ACTIVE),
        Member(id="M2", rut="11.111.111-1", name="Pedro Soto", status=MemberStatus.ACTIVE),
        Member(id="M3", rut="22.222.222-2", name="Lucía Rojas", status=MemberStatus.SUSPENDED),
    ]


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Member fees plus one committee expense"""
    return [
        Transaction(
            id="T1",
            date=date(2025, 3, 5),
            amount=10000,
            type=TransactionType.INCOME,
            payment_method=PaymentMethod.CASH,
            description="Cuota marzo",
            member_id="M1",
        ),
        Transaction(
            id="T2",
            date=date(2025, 4, 5),
            amount=15000,
            type=TransactionType.INCOME,
            payment_method=PaymentMethod.TRANSFER,
            reference_number="OP-991",
            description="Cuota abril",
            member_id="M1",
        ),
        Transaction(
            id="T3",
            date=date(2025, 4, 20),
            amount=4000,
            type=TransactionType.EXPENSE,
            payment_method=PaymentMethod.CASH,
            description="Arriendo sede",
        ),
    ]


@pytest.fixture
def in_progress_assembly() -> Assembly:
    return Assembly(id="AS-1", date=date(2025, 5, 10), status=AssemblyStatus.IN_PROGRESS)
