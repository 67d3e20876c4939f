"""Unit tests for the document lifecycle and folio numbering"""

import pytest
from datetime import date
from committee_gateway.domain.models import Document, DocumentStatus, DocumentType
from committee_gateway.domain.documents import (
    ACTION_CREATED,
    ACTION_SIGNED,
    archive_document,
    create_document,
    next_folio,
    search_documents,
    send_document,
    sign_document,
    update_document,
)
from committee_gateway.domain.exceptions import DocumentLockedError, InvalidTransitionError


def _draft(documents: list[Document], title: str = "Solicitud", doc_type: DocumentType = DocumentType.OFFICE,
           doc_date: date = date(2025, 3, 1)) -> Document:
    return create_document(documents, "Secretario", type=doc_type, title=title, date=doc_date, subject="Sede")


def test_create_document_starts_as_draft():
    """Test that a new document is a draft, has no folio and one history entry"""
    documents: list[Document] = []
    doc = _draft(documents)

    assert documents[0] is doc
    assert doc.id.startswith("DOC-")
    assert doc.status == DocumentStatus.DRAFT
    assert doc.folio_number is None
    assert len(doc.history) == 1
    assert doc.history[0].action == ACTION_CREATED
    assert doc.history[0].editor_name == "Secretario"


def test_update_draft_appends_history():
    """Test that editing a draft changes content and logs the edit"""
    documents: list[Document] = []
    doc = _draft(documents)

    update_document(doc, "Presidente", content="Texto nuevo", title=None)

    assert doc.content == "Texto nuevo"
    assert doc.title == "Solicitud"
    assert len(doc.history) == 2
    assert doc.history[-1].editor_name == "Presidente"


def test_signed_document_is_locked():
    """Test that content cannot change after signing"""
    documents: list[Document] = []
    doc = _draft(documents)
    sign_document(documents, doc, "Secretario")

    with pytest.raises(DocumentLockedError):
        update_document(doc, "Secretario", content="Cambio")


def test_sign_assigns_sequential_folio_per_type_and_year():
    """Test folio numbering restarts per type and per year"""
    documents: list[Document] = []
    first = _draft(documents, "Primero")
    second = _draft(documents, "Segundo")
    memo = _draft(documents, "Memo", doc_type=DocumentType.MEMO)
    next_year = _draft(documents, "Enero", doc_date=date(2026, 1, 15))

    for doc in (first, second, memo, next_year):
        sign_document(documents, doc, "Secretario")

    assert (first.folio_number, first.year) == (1, 2025)
    assert (second.folio_number, second.year) == (2, 2025)
    assert (memo.folio_number, memo.year) == (1, 2025)
    assert (next_year.folio_number, next_year.year) == (1, 2026)
    assert first.status == DocumentStatus.SIGNED
    assert first.history[-1].action == ACTION_SIGNED


def test_next_folio_continues_after_highest():
    """Test that gaps do not cause folio reuse"""
    documents = [
        Document(id="a", type=DocumentType.LETTER, title="a", date=date(2025, 1, 1), folio_number=7, year=2025),
        Document(id="b", type=DocumentType.LETTER, title="b", date=date(2025, 1, 1), folio_number=3, year=2025),
    ]
    assert next_folio(documents, DocumentType.LETTER, 2025) == 8
    assert next_folio(documents, DocumentType.LETTER, 2024) == 1


def test_sign_twice_is_rejected():
    """Test that a signed document cannot be signed again"""
    documents: list[Document] = []
    doc = _draft(documents)
    sign_document(documents, doc, "Secretario")

    with pytest.raises(InvalidTransitionError):
        sign_document(documents, doc, "Secretario")
    assert doc.folio_number == 1


def test_sign_keeps_existing_folio_when_free():
    """Test that an imported draft keeps its folio unless it is already taken"""
    documents: list[Document] = []
    kept = _draft(documents, "Carta antigua", DocumentType.LETTER)
    kept.folio_number = 5
    sign_document(documents, kept, "Secretario")
    assert kept.folio_number == 5

    clash = _draft(documents, "Carta duplicada", DocumentType.LETTER)
    clash.folio_number = 5
    sign_document(documents, clash, "Secretario")
    assert clash.folio_number == 6


def test_send_requires_signature():
    """Test that drafts cannot be sent"""
    documents: list[Document] = []
    doc = _draft(documents)

    with pytest.raises(InvalidTransitionError):
        send_document(doc, "Secretario", "whatsapp", "Tierra Esperanza")
    assert doc.status == DocumentStatus.DRAFT


def test_send_builds_share_message_and_resend_keeps_history():
    """Test the sent transition, message contents and idempotent re-send"""
    documents: list[Document] = []
    doc = _draft(documents)
    sign_document(documents, doc, "Secretario")

    message = send_document(doc, "Secretario", "email", "Tierra Esperanza")

    assert doc.status == DocumentStatus.SENT
    assert "Oficio N° 1 - 2025" in message
    assert "Asunto: Sede" in message
    assert "Emitido por: Tierra Esperanza" in message
    assert doc.history[-1].action == "Documento enviado vía email"

    entries = len(doc.history)
    send_document(doc, "Secretario", "whatsapp", "Tierra Esperanza")
    assert len(doc.history) == entries


def test_archive_only_after_sending():
    """Test that archiving requires a sent document"""
    documents: list[Document] = []
    doc = _draft(documents)
    sign_document(documents, doc, "Secretario")

    with pytest.raises(InvalidTransitionError):
        archive_document(doc, "Secretario")

    send_document(doc, "Secretario", "email", "Tierra Esperanza")
    archive_document(doc, "Secretario")
    assert doc.status == DocumentStatus.ARCHIVED


def test_search_documents_filters_and_sorts():
    """Test text search across fields, type filter and date ordering"""
    documents: list[Document] = []
    _draft(documents, "Carta municipalidad", doc_type=DocumentType.LETTER, doc_date=date(2025, 1, 5))
    _draft(documents, "Informe anual", doc_type=DocumentType.REPORT, doc_date=date(2025, 6, 1))
    _draft(documents, "Carta SERVIU", doc_type=DocumentType.LETTER, doc_date=date(2025, 4, 2))

    letters = search_documents(documents, "carta")
    assert [d.title for d in letters] == ["Carta SERVIU", "Carta municipalidad"]

    reports = search_documents(documents, doc_type=DocumentType.REPORT)
    assert [d.title for d in reports] == ["Informe anual"]

    assert len(search_documents(documents, "sede")) == 3
