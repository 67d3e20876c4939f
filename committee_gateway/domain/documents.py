"""Official correspondence: drafting, signing with folio numbers, sending"""

from typing import List, Optional

from committee_gateway.domain.models import Document, DocumentLog, DocumentStatus, DocumentType
from committee_gateway.domain.exceptions import DocumentLockedError, InvalidTransitionError
from committee_gateway.utils.date_utils import utc_now
from committee_gateway.utils.identifiers import new_id

ACTION_CREATED = "Creación inicial"
ACTION_EDITED = "Modificación de contenido"
ACTION_SIGNED = "Documento firmado digitalmente y bloqueado para edición"
ACTION_ARCHIVED = "Documento archivado"

SEND_CHANNELS = ("whatsapp", "email")

EDITABLE_FIELDS = ("type", "title", "date", "addressee", "subject", "content", "reference_number")


def next_folio(documents: List[Document], doc_type: DocumentType, year: int) -> int:
    """Highest folio issued for this type and year, plus one"""
    issued = [d.folio_number or 0 for d in documents if d.type == doc_type and d.year == year]
    return max(issued, default=0) + 1


def _log(document: Document, editor_name: str, action: str, status: DocumentStatus) -> Document:
    now = utc_now()
    document.history.append(
        DocumentLog(editor_name=editor_name, timestamp=now, action=action, status_at_time=status)
    )
    document.status = status
    document.last_update = now
    return document


def create_document(documents: List[Document], editor_name: str, **fields) -> Document:
    """New documents start as drafts without a folio"""
    document = Document(id=new_id("DOC-"), status=DocumentStatus.DRAFT, **fields)
    _log(document, editor_name, ACTION_CREATED, DocumentStatus.DRAFT)
    documents.insert(0, document)
    return document


def update_document(document: Document, editor_name: str, **changes) -> Document:
    """
    Edit draft content.

    Raises:
        DocumentLockedError: Document has already been signed
    """
    if document.status != DocumentStatus.DRAFT:
        raise DocumentLockedError(f"Document {document.id} is {document.status.value} and can no longer be edited")

    for field, value in changes.items():
        if field in EDITABLE_FIELDS and value is not None:
            setattr(document, field, value)
    return _log(document, editor_name, ACTION_EDITED, DocumentStatus.DRAFT)


def sign_document(documents: List[Document], document: Document, editor_name: str) -> Document:
    """
    Sign a draft and issue its folio.

    The folio is numbered per document type within the year of the document date.
    A draft that already carries a folio keeps it unless another document of
    the same type and year holds that number.

    Raises:
        InvalidTransitionError: Document is not a draft
    """
    if document.status != DocumentStatus.DRAFT:
        raise InvalidTransitionError(f"Only drafts can be signed (document is {document.status.value})")

    year = document.date.year
    others = [d for d in documents if d.id != document.id]
    taken = {d.folio_number for d in others if d.type == document.type and d.year == year}
    if document.folio_number is None or document.folio_number in taken:
        document.folio_number = next_folio(others, document.type, year)
    document.year = year
    return _log(document, editor_name, ACTION_SIGNED, DocumentStatus.SIGNED)


def send_document(document: Document, editor_name: str, channel: str, trade_name: str) -> str:
    """
    Mark a signed document as sent and return the share message.

    Re-sending an already sent document only rebuilds the message.

    Raises:
        InvalidTransitionError: Document is neither signed nor sent
    """
    if channel not in SEND_CHANNELS:
        raise InvalidTransitionError(f"Unknown channel {channel}")

    if document.status == DocumentStatus.SIGNED:
        _log(document, editor_name, f"Documento enviado vía {channel}", DocumentStatus.SENT)
    elif document.status != DocumentStatus.SENT:
        raise InvalidTransitionError(f"Only signed documents can be sent (document is {document.status.value})")

    return share_message(document, trade_name)


def archive_document(document: Document, editor_name: str) -> Document:
    if document.status != DocumentStatus.SENT:
        raise InvalidTransitionError(f"Only sent documents can be archived (document is {document.status.value})")
    return _log(document, editor_name, ACTION_ARCHIVED, DocumentStatus.ARCHIVED)


def share_message(document: Document, trade_name: str) -> str:
    return (
        f"Hola, adjunto envío oficial de {document.type.value} N° {document.folio_number} - {document.year}\n"
        f"Asunto: {document.subject}\n"
        f"Emitido por: {trade_name}\n\n"
        "Por favor, contacte a secretaría para la descarga del archivo PDF oficial."
    )


def search_documents(
    documents: List[Document],
    search: str = "",
    doc_type: Optional[DocumentType] = None,
) -> List[Document]:
    """Match title, subject or addressee; newest document date first"""
    term = search.lower()
    matches = [
        d for d in documents
        if (not term or term in d.title.lower() or term in d.subject.lower() or term in d.addressee.lower())
        and (doc_type is None or d.type == doc_type)
    ]
    return sorted(matches, key=lambda d: d.date, reverse=True)
