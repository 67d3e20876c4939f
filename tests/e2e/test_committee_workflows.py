"""
E2E tests for the committee's day-to-day workflows.

Each test walks a board member through a complete task, logging in first
and then acting with the returned user id, against both storage backends.

Workflows:
- treasurer: registers a member fee and issues the receipt
- secretary: runs an assembly from summons to minutes
- secretary: drafts, signs and sends official letters with folios
- client sync: a second client saves the whole document (last writer wins)
- admin: removes a member whose payments and attendance stay on record
- admin: wipes the committee data and starts over
"""

import pytest
from pathlib import Path
from fastapi.testclient import TestClient
from committee_gateway.api.main import create_app
from committee_gateway.infrastructure.database.repositories import SqlStateStore
from committee_gateway.infrastructure.database.session import create_session_factory
from committee_gateway.infrastructure.storage.json_store import JsonStateStore


@pytest.fixture(params=["json", "sql"])
def app_client(request, tmp_path: Path) -> TestClient:
    """Client over a freshly seeded store of each backend"""
    if request.param == "json":
        store = JsonStateStore(tmp_path / "data.json", admin_password="admin-secret", default_password="te2024")
    else:
        factory = create_session_factory(f"sqlite:///{tmp_path / 'committee.db'}")
        store = SqlStateStore(factory, admin_password="admin-secret", default_password="te2024")

    with TestClient(create_app(store=store)) as client:
        yield client


def login(client: TestClient, username: str, password: str = "te2024") -> dict:
    response = client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, f"{username} should be able to log in"
    return {"X-User-Id": response.json()["user"]["id"]}


@pytest.mark.integration
def test_treasurer_registers_fee_and_issues_receipt(app_client: TestClient):
    """
    Admin registers a member, treasurer records the fee
    Expected: member balance reflects the payment and a receipt is issued
    """
    admin = login(app_client, "admin", "admin-secret")
    member = app_client.post("/api/members", json={"rut": "11.111.111-1", "name": "Pedro Soto"}, headers=admin).json()

    treasurer = login(app_client, "teso")
    fee = app_client.post(
        "/api/transactions",
        json={"date": "2025-06-01", "amount": 20000, "type": "Ingreso", "description": "Cuota junio",
              "memberId": member["id"]},
        headers=treasurer,
    ).json()

    balance = app_client.get(f"/api/members/{member['id']}/balance", headers=treasurer).json()
    assert balance["balance"] == 20000

    receipt = app_client.get(f"/api/transactions/{fee['id']}/receipt", headers=treasurer).json()
    assert "*MONTO:* $20.000" in receipt["text"]
    assert "Pedro Soto" in receipt["text"]

    # Secretary cannot see the ledger
    secretary = login(app_client, "secre")
    assert app_client.get("/api/transactions", headers=secretary).status_code == 403


@pytest.mark.integration
def test_secretary_runs_assembly(app_client: TestClient):
    """
    Two members, one attends
    Expected: 50% quorum is reached and minutes are recorded
    """
    admin = login(app_client, "admin", "admin-secret")
    for rut, name in (("22.222.222-2", "Lucía Rojas"), ("33.333.333-3", "Rosa Díaz")):
        assert app_client.post("/api/members", json={"rut": rut, "name": name}, headers=admin).status_code == 201

    secretary = login(app_client, "secre")
    assembly = app_client.post(
        "/api/assemblies", json={"date": "2025-07-05", "type": "Extraordinaria"}, headers=secretary
    ).json()
    url = f"/api/assemblies/{assembly['id']}"

    app_client.post(f"{url}/status", json={"status": "En Curso"}, headers=secretary)
    attendance = app_client.post(f"{url}/attendance", json={"rut": "22222222-2"}, headers=secretary).json()
    assert attendance["quorum"]["percentage"] == 50
    assert attendance["quorum"]["reached"] is True

    app_client.put(f"{url}/minutes", json={"agenda": ["Postulación"], "agreements": ["Postular"]}, headers=secretary)
    app_client.post(f"{url}/status", json={"status": "Finalizada"}, headers=secretary)

    stored = app_client.get(url, headers=secretary).json()
    assert stored["status"] == "Finalizada"
    assert stored["attendees"] == ["22.222.222-2"]
    assert stored["agreements"] == ["Postular"]


@pytest.mark.integration
def test_secretary_issues_numbered_letters(app_client: TestClient):
    """
    Two letters and an office in the same year
    Expected: letters get folios 1 and 2, the office starts its own sequence
    """
    secretary = login(app_client, "secre")

    def issue(doc_type: str, title: str) -> dict:
        doc = app_client.post(
            "/api/documents", json={"type": doc_type, "title": title, "date": "2025-08-01"}, headers=secretary
        ).json()
        return app_client.post(f"/api/documents/{doc['id']}/sign", headers=secretary).json()

    first = issue("Carta", "Carta a SERVIU")
    second = issue("Carta", "Carta a municipalidad")
    office = issue("Oficio", "Oficio a gobernación")

    assert (first["folioNumber"], second["folioNumber"], office["folioNumber"]) == (1, 2, 1)

    sent = app_client.post(f"/api/documents/{second['id']}/send", json={"channel": "email"}, headers=secretary).json()
    assert "Carta N° 2 - 2025" in sent["message"]


@pytest.mark.integration
def test_full_document_sync_last_writer_wins(app_client: TestClient):
    """
    Two clients load the document, both save
    Expected: the second save overwrites the first, passwords survive
    """
    first_copy = app_client.get("/api/data").json()
    second_copy = app_client.get("/api/data").json()

    first_copy["boardPeriod"] = "2026 - 2028"
    second_copy["config"]["email"] = "directiva@tierraesperanza.cl"

    assert app_client.post("/api/data", json=first_copy).status_code == 200
    assert app_client.post("/api/data", json=second_copy).status_code == 200

    stored = app_client.get("/api/data").json()
    assert stored["boardPeriod"] == "2025 - 2027"
    assert stored["config"]["email"] == "directiva@tierraesperanza.cl"
    login(app_client, "admin", "admin-secret")
    login(app_client, "presi")


@pytest.mark.integration
@pytest.mark.parametrize("app_client", ["json"], indirect=True)
def test_deleted_member_leaves_history_readable(app_client: TestClient):
    """
    A member with a payment and an attendance is deleted
    Expected: ledger, receipt, dashboard and quorum still load, showing N/A for the member
    """
    admin = login(app_client, "admin", "admin-secret")
    leaving = app_client.post("/api/members", json={"rut": "22.222.222-2", "name": "Lucía Rojas"}, headers=admin).json()
    staying = app_client.post("/api/members", json={"rut": "33.333.333-3", "name": "Rosa Díaz"}, headers=admin).json()

    treasurer = login(app_client, "teso")
    fee = app_client.post(
        "/api/transactions",
        json={"date": "2025-06-01", "amount": 20000, "type": "Ingreso", "description": "Cuota junio",
              "memberId": leaving["id"]},
        headers=treasurer,
    ).json()

    secretary = login(app_client, "secre")
    assembly = app_client.post("/api/assemblies", json={"date": "2025-07-05"}, headers=secretary).json()
    url = f"/api/assemblies/{assembly['id']}"
    app_client.post(f"{url}/status", json={"status": "En Curso"}, headers=secretary)
    app_client.post(f"{url}/attendance", json={"rut": "22222222-2"}, headers=secretary)

    assert app_client.delete(f"/api/members/{leaving['id']}", headers=admin).status_code == 204

    export = app_client.get("/api/transactions/export.csv", headers=treasurer)
    assert export.status_code == 200
    assert ",N/A,N/A," in export.text

    receipt = app_client.get(f"/api/transactions/{fee['id']}/receipt", headers=treasurer)
    assert receipt.status_code == 200
    assert "*Socio:* N/A" in receipt.json()["text"]

    assert app_client.get("/api/dashboard", headers=treasurer).json()["memberCount"] == 1
    assert app_client.get(f"/api/members/{staying['id']}/file", headers=admin).status_code == 200

    quorum = app_client.get(f"{url}/quorum", headers=secretary)
    assert quorum.status_code == 200
    assert quorum.json()["present"] == 1


@pytest.mark.integration
def test_admin_resets_system(app_client: TestClient):
    """
    Members, payments and documents exist, then the admin resets the system
    Expected: every collection is empty and the seeded users can log in again
    """
    admin = login(app_client, "admin", "admin-secret")
    member = app_client.post("/api/members", json={"rut": "11.111.111-1", "name": "Pedro Soto"}, headers=admin).json()
    app_client.post(
        "/api/transactions",
        json={"date": "2025-06-01", "amount": 5000, "type": "Ingreso", "description": "Cuota", "memberId": member["id"]},
        headers=admin,
    )
    app_client.post("/api/documents", json={"type": "Carta", "title": "Carta", "date": "2025-08-01"}, headers=admin)
    app_client.post("/api/users", json={"username": "nuevo", "role": "Secretario", "name": "Nuevo"}, headers=admin)

    assert app_client.post("/api/system/reset", headers=admin).status_code == 200

    stored = app_client.get("/api/data").json()
    assert (stored["members"], stored["transactions"], stored["documents"]) == ([], [], [])
    assert len(stored["users"]) == 5
    assert stored["boardPeriod"] == "2025 - 2027"
    login(app_client, "teso")
