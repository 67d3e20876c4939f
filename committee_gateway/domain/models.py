"""Domain models - committee entities as stored in the shared state document"""

from datetime import date as Date, datetime
from enum import Enum
from typing import List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from committee_gateway.domain.exceptions import NotFoundError


class MemberStatus(str, Enum):
    ACTIVE = "Activo"
    INACTIVE = "Inactivo"
    PENDING = "Pendiente"
    SUSPENDED = "Suspendido"


class BoardRole(str, Enum):
    PRESIDENT = "Presidente"
    SECRETARY = "Secretario"
    TREASURER = "Tesorero"


class SystemRole(str, Enum):
    """Account roles: technical staff plus the three board roles"""

    SUPPORT = "SUPPORT"
    ADMINISTRATOR = "ADMINISTRATOR"
    PRESIDENT = "Presidente"
    SECRETARY = "Secretario"
    TREASURER = "Tesorero"

    @classmethod
    def _missing_(cls, value):
        # Older seed documents spell board roles in English
        legacy = {
            "PRESIDENT": cls.PRESIDENT,
            "SECRETARY": cls.SECRETARY,
            "TREASURER": cls.TREASURER,
        }
        if isinstance(value, str):
            return legacy.get(value.upper())
        return None


class TransactionType(str, Enum):
    INCOME = "Ingreso"
    EXPENSE = "Egreso"


class PaymentMethod(str, Enum):
    CASH = "Efectivo"
    TRANSFER = "Transferencia"


class AssemblyType(str, Enum):
    ORDINARY = "Ordinaria"
    EXTRAORDINARY = "Extraordinaria"


class AssemblyStatus(str, Enum):
    SCHEDULED = "Programada"
    IN_PROGRESS = "En Curso"
    FINISHED = "Finalizada"


class DocumentType(str, Enum):
    REPORT = "Informe"
    MEMO = "Memorándum"
    CERTIFICATE = "Certificado"
    LETTER = "Carta"
    OFFICE = "Oficio"


class DocumentStatus(str, Enum):
    DRAFT = "Borrador"
    SIGNED = "Firmado"
    SENT = "Enviado"
    ARCHIVED = "Archivado"


class StateModel(BaseModel):
    """Base for records kept in the state document (camelCase on the wire)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FamilyMember(StateModel):
    id: str
    name: str
    rut: str = ""
    relationship: str = ""


class Member(StateModel):
    id: str
    rut: str
    name: str
    join_date: Optional[Date] = None
    status: MemberStatus = MemberStatus.ACTIVE
    photo_url: Optional[str] = None
    email: str = ""
    address: str = ""
    comuna: str = ""
    region: str = ""
    phone: str = ""
    family_members: List[FamilyMember] = Field(default_factory=list)


class Transaction(StateModel):
    id: str
    date: Date
    amount: int = Field(..., gt=0)
    type: TransactionType
    payment_method: PaymentMethod = PaymentMethod.CASH
    reference_number: Optional[str] = None
    description: str
    member_id: Optional[str] = None


class Person(StateModel):
    name: str = ""
    rut: str = ""
    phone: str = ""


class BoardPosition(StateModel):
    role: BoardRole
    primary: Person = Field(default_factory=Person)
    substitute: Person = Field(default_factory=Person)


class Assembly(StateModel):
    id: str
    date: Date
    summons_time: str = ""
    location: str = ""
    description: str = ""
    attendees: List[str] = Field(default_factory=list)  # member RUTs
    type: AssemblyType = AssemblyType.ORDINARY
    status: AssemblyStatus = AssemblyStatus.SCHEDULED
    start_time: Optional[str] = None
    agenda: Optional[List[str]] = None
    agreements: Optional[List[str]] = None
    observations: Optional[str] = None


class DocumentLog(StateModel):
    editor_name: str
    timestamp: datetime
    action: str
    status_at_time: DocumentStatus


class Document(StateModel):
    id: str
    folio_number: Optional[int] = None
    year: Optional[int] = None
    type: DocumentType
    title: str
    date: Date
    addressee: str = ""
    subject: str = ""
    content: str = ""
    status: DocumentStatus = DocumentStatus.DRAFT
    reference_number: Optional[str] = None
    last_update: Optional[datetime] = None
    history: List[DocumentLog] = Field(default_factory=list)


class User(StateModel):
    id: str
    username: str
    password: Optional[str] = None
    role: SystemRole
    name: str
    last_login: Optional[datetime] = None


class CommitteeConfig(StateModel):
    legal_name: str = ""
    trade_name: str = ""
    rut: str = ""
    email: str = ""
    phone: str = ""
    municipal_res: str = ""
    legal_res: str = ""
    language: Optional[str] = None
    logo_url: Optional[str] = None


class CommitteeState(StateModel):
    """The whole application state, persisted as a single document"""

    users: List[User] = Field(default_factory=list)
    config: CommitteeConfig = Field(default_factory=CommitteeConfig)
    members: List[Member] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    board: List[BoardPosition] = Field(default_factory=list)
    board_period: str = ""
    assemblies: List[Assembly] = Field(default_factory=list)
    documents: List[Document] = Field(default_factory=list)

    def find_member(self, member_id: str) -> Member:
        return find_by_id(self.members, member_id, "Member")

    def find_transaction(self, transaction_id: str) -> Transaction:
        return find_by_id(self.transactions, transaction_id, "Transaction")

    def find_assembly(self, assembly_id: str) -> Assembly:
        return find_by_id(self.assemblies, assembly_id, "Assembly")

    def find_document(self, document_id: str) -> Document:
        return find_by_id(self.documents, document_id, "Document")

    def find_user(self, user_id: str) -> User:
        return find_by_id(self.users, user_id, "User")


T = TypeVar("T")


def find_by_id(items: Sequence[T], item_id: str, label: str) -> T:
    """Linear lookup by id; raises NotFoundError when absent"""
    for item in items:
        if item.id == item_id:
            return item
    raise NotFoundError(f"{label} {item_id} not found")
