"""Pydantic schemas for API request/response validation"""

from datetime import date as Date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from committee_gateway.domain.models import (
    Assembly,
    AssemblyStatus,
    AssemblyType,
    BoardPosition,
    DocumentType,
    MemberStatus,
    PaymentMethod,
    SystemRole,
    Transaction,
    TransactionType,
    Member,
    Document,
)


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Whole-document endpoints


class HealthResponse(ApiModel):
    status: str
    message: str
    database: str


class LoginRequest(ApiModel):
    """Request body for POST /api/login"""

    username: str
    password: str


class UserOut(ApiModel):
    """User record without password"""

    id: str
    username: str
    role: SystemRole
    name: str
    last_login: Optional[datetime] = None


class LoginResponse(ApiModel):
    success: bool
    user: UserOut


class SaveResponse(ApiModel):
    status: str = "ok"


# Members


class DependentCreate(ApiModel):
    name: str = Field(..., min_length=1)
    rut: str = ""
    relationship: str = ""


class MemberCreate(ApiModel):
    """Request body for POST /api/members"""

    rut: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    join_date: Optional[Date] = None
    status: MemberStatus = MemberStatus.ACTIVE
    photo_url: Optional[str] = None
    email: str = ""
    address: str = ""
    comuna: str = ""
    region: str = ""
    phone: str = ""
    family_members: List[DependentCreate] = Field(default_factory=list)


class MemberUpdate(ApiModel):
    """Request body for PUT /api/members/{id}; omitted fields are kept"""

    rut: Optional[str] = None
    name: Optional[str] = None
    join_date: Optional[Date] = None
    status: Optional[MemberStatus] = None
    photo_url: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    comuna: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None


class MemberFileResponse(ApiModel):
    member: Member
    payments: List[Transaction]
    balance: int
    assemblies_attended: List[Assembly]


class BalanceResponse(ApiModel):
    member_id: str
    balance: int


# Treasury


class TransactionCreate(ApiModel):
    """Request body for POST /api/transactions"""

    date: Date
    amount: int = Field(..., gt=0, description="Amount in pesos")
    type: TransactionType
    payment_method: PaymentMethod = PaymentMethod.CASH
    reference_number: Optional[str] = None
    description: str = Field(..., min_length=1)
    member_id: Optional[str] = None


class LedgerSummaryResponse(ApiModel):
    total_income: int
    total_expense: int
    balance: int
    count: int


class ReceiptResponse(ApiModel):
    transaction_id: str
    text: str


# Board


class BoardResponse(ApiModel):
    board: List[BoardPosition]
    board_period: str


class PersonIn(ApiModel):
    name: str = ""
    rut: str = ""
    phone: str = ""


class BoardPeriodUpdate(ApiModel):
    board_period: str = Field(..., min_length=1)


# Assemblies


class AssemblyCreate(ApiModel):
    """Request body for POST /api/assemblies; status always starts scheduled"""

    date: Date
    summons_time: str = ""
    location: str = ""
    description: str = ""
    type: AssemblyType = AssemblyType.ORDINARY


class AssemblyUpdate(ApiModel):
    date: Optional[Date] = None
    summons_time: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    type: Optional[AssemblyType] = None


class AssemblyStatusChange(ApiModel):
    status: AssemblyStatus


class AttendanceRequest(ApiModel):
    rut: str = Field(..., min_length=1)


class QuorumResponse(ApiModel):
    assembly_id: str
    present: int
    total: int
    percentage: int
    threshold: int
    reached: bool


class AttendanceResponse(ApiModel):
    member_id: str
    member_name: str
    member_rut: str
    quorum: QuorumResponse


class MinutesUpdate(ApiModel):
    agenda: List[str] = Field(default_factory=list)
    agreements: List[str] = Field(default_factory=list)
    observations: str = ""


class ReminderResponse(ApiModel):
    assembly_id: str
    member_id: str
    phone: str = ""
    text: str


# Documents


class DocumentCreate(ApiModel):
    """Request body for POST /api/documents"""

    type: DocumentType = DocumentType.OFFICE
    title: str = Field(..., min_length=1)
    date: Date
    addressee: str = ""
    subject: str = ""
    content: str = ""
    reference_number: Optional[str] = None


class DocumentUpdate(ApiModel):
    type: Optional[DocumentType] = None
    title: Optional[str] = None
    date: Optional[Date] = None
    addressee: Optional[str] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    reference_number: Optional[str] = None


class SendRequest(ApiModel):
    channel: Literal["whatsapp", "email"]


class SendResponse(ApiModel):
    document: Document
    message: str


# Users


class UserCreate(ApiModel):
    username: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: SystemRole
    password: Optional[str] = None


class UserUpdate(ApiModel):
    username: Optional[str] = None
    name: Optional[str] = None
    role: Optional[SystemRole] = None
    password: Optional[str] = None


# Settings


class ConfigUpdate(ApiModel):
    legal_name: Optional[str] = None
    trade_name: Optional[str] = None
    rut: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    municipal_res: Optional[str] = None
    legal_res: Optional[str] = None
    language: Optional[str] = None
    logo_url: Optional[str] = None


# Dashboard


class MonthFlowSchema(ApiModel):
    year: int
    month: int
    income: int
    expense: int


class FinanceOverview(ApiModel):
    total_income: int
    total_expense: int
    balance: int
    cash_flow: List[MonthFlowSchema]


class DashboardResponse(ApiModel):
    member_count: int
    active_member_count: int
    assembly_count: int
    document_count: int
    board_period: str
    president: str
    next_assembly: Optional[Assembly] = None
    finances: Optional[FinanceOverview] = None
