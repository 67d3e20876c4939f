"""Secretariat endpoints: official documents and their lifecycle"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from committee_gateway.api.v1.schemas import DocumentCreate, DocumentUpdate, SendRequest, SendResponse
from committee_gateway.api.dependencies import get_state_store, require_view
from committee_gateway.domain.models import Document, DocumentLog, DocumentType, User
from committee_gateway.domain import documents as secretariat
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.observability.metrics import (
    document_transition_counter,
    record_state_write,
)

router = APIRouter()

secretariat_access = require_view("secretariat")


@router.get("/documents", response_model=List[Document], response_model_exclude_none=True)
def list_documents(
    search: str = Query("", description="Title, subject or addressee fragment"),
    doc_type: Optional[DocumentType] = Query(None, alias="type"),
    store: StateStore = Depends(get_state_store),
    user: User = Depends(secretariat_access),
):
    return secretariat.search_documents(store.read().documents, search, doc_type)


@router.post("/documents", response_model=Document, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def create_document(
    body: DocumentCreate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(secretariat_access),
):
    """Start a new draft"""
    with store.transaction() as state:
        document = secretariat.create_document(state.documents, user.name, **body.model_dump())
    document_transition_counter.labels(action="create").inc()
    record_state_write(store.backend_name, "module")
    return document


@router.get("/documents/{document_id}", response_model=Document, response_model_exclude_none=True)
def get_document(document_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(secretariat_access)):
    return store.read().find_document(document_id)


@router.put("/documents/{document_id}", response_model=Document, response_model_exclude_none=True)
def update_document(
    document_id: str,
    body: DocumentUpdate,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(secretariat_access),
):
    """Edit a draft; signed documents are locked"""
    with store.transaction() as state:
        document = secretariat.update_document(
            state.find_document(document_id), user.name, **body.model_dump(exclude_unset=True)
        )
    document_transition_counter.labels(action="edit").inc()
    record_state_write(store.backend_name, "module")
    return document


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(document_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(secretariat_access)):
    with store.transaction() as state:
        state.documents.remove(state.find_document(document_id))
    document_transition_counter.labels(action="delete").inc()
    record_state_write(store.backend_name, "module")


@router.post("/documents/{document_id}/sign", response_model=Document, response_model_exclude_none=True)
def sign_document(document_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(secretariat_access)):
    """
    Sign a draft.

    Issues the next folio for the document type within the year of the
    document date and locks the content.
    """
    with store.transaction() as state:
        document = secretariat.sign_document(state.documents, state.find_document(document_id), user.name)
    document_transition_counter.labels(action="sign").inc()
    record_state_write(store.backend_name, "module")
    return document


@router.post("/documents/{document_id}/send", response_model=SendResponse, response_model_exclude_none=True)
def send_document(
    document_id: str,
    body: SendRequest,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(secretariat_access),
):
    """Mark a signed document as sent and return the text to share"""
    with store.transaction() as state:
        document = state.find_document(document_id)
        message = secretariat.send_document(document, user.name, body.channel, state.config.trade_name)
    document_transition_counter.labels(action="send").inc()
    record_state_write(store.backend_name, "module")
    return SendResponse(document=document, message=message)


@router.post("/documents/{document_id}/archive", response_model=Document, response_model_exclude_none=True)
def archive_document(document_id: str, store: StateStore = Depends(get_state_store), user: User = Depends(secretariat_access)):
    with store.transaction() as state:
        document = secretariat.archive_document(state.find_document(document_id), user.name)
    document_transition_counter.labels(action="archive").inc()
    record_state_write(store.backend_name, "module")
    return document


@router.get("/documents/{document_id}/history", response_model=List[DocumentLog], response_model_exclude_none=True)
def get_document_history(
    document_id: str,
    store: StateStore = Depends(get_state_store),
    user: User = Depends(secretariat_access),
):
    return store.read().find_document(document_id).history
