"""SQLAlchemy ORM models for the MySQL mirror of the state document"""

from sqlalchemy import Column, String, BigInteger, Integer, Date, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UserRow(Base):
    """System account"""

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    username = Column(String(120), nullable=False, index=True)
    password = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False)
    name = Column(String(255), nullable=False)
    last_login = Column("lastLogin", DateTime(timezone=True), nullable=True)


class ConfigRow(Base):
    """Institutional identity; a single row with id 1"""

    __tablename__ = "config"

    id = Column(Integer, primary_key=True, default=1)
    legal_name = Column("legalName", String(255), nullable=False, default="")
    trade_name = Column("tradeName", String(255), nullable=False, default="")
    rut = Column(String(32), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(64), nullable=False, default="")
    municipal_res = Column("municipalRes", String(255), nullable=False, default="")
    legal_res = Column("legalRes", String(255), nullable=False, default="")
    language = Column(String(8), nullable=True)
    logo_url = Column("logoUrl", Text, nullable=True)
    board_period = Column("boardPeriod", String(64), nullable=False, default="")


class MemberRow(Base):
    """Committee member with dependents embedded as JSON"""

    __tablename__ = "members"

    id = Column(String(64), primary_key=True)
    rut = Column(String(32), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    join_date = Column("joinDate", Date, nullable=True)
    status = Column(String(32), nullable=False)
    photo_url = Column("photoUrl", Text, nullable=True)
    email = Column(String(255), nullable=False, default="")
    address = Column(String(255), nullable=False, default="")
    comuna = Column(String(120), nullable=False, default="")
    region = Column(String(120), nullable=False, default="")
    phone = Column(String(64), nullable=False, default="")
    family_members = Column("familyMembers", JSON, nullable=False, default=list)


class TransactionRow(Base):
    """Ledger entry"""

    __tablename__ = "transactions"

    id = Column(String(64), primary_key=True)
    date = Column(Date, nullable=False)
    amount = Column(BigInteger, nullable=False)
    type = Column(String(32), nullable=False)
    payment_method = Column("paymentMethod", String(32), nullable=False)
    reference_number = Column("referenceNumber", String(120), nullable=True)
    description = Column(Text, nullable=False)
    member_id = Column("memberId", String(64), nullable=True, index=True)


class BoardRow(Base):
    """One board seat with its primary and substitute holders"""

    __tablename__ = "board"

    role = Column(String(32), primary_key=True)
    primary_name = Column(String(255), nullable=False, default="")
    primary_rut = Column(String(32), nullable=False, default="")
    primary_phone = Column(String(64), nullable=False, default="")
    substitute_name = Column(String(255), nullable=False, default="")
    substitute_rut = Column(String(32), nullable=False, default="")
    substitute_phone = Column(String(64), nullable=False, default="")


class AssemblyRow(Base):
    """Assembly with attendance and minutes embedded as JSON"""

    __tablename__ = "assemblies"

    id = Column(String(64), primary_key=True)
    date = Column(Date, nullable=False)
    summons_time = Column("summonsTime", String(16), nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    attendees = Column(JSON, nullable=False, default=list)
    type = Column(String(32), nullable=False)
    status = Column(String(32), nullable=False)
    start_time = Column("startTime", String(16), nullable=True)
    agenda = Column(JSON, nullable=True)
    agreements = Column(JSON, nullable=True)
    observations = Column(Text, nullable=True)


class DocumentRow(Base):
    """Official document with its edit history embedded as JSON"""

    __tablename__ = "documents"

    id = Column(String(64), primary_key=True)
    folio_number = Column("folioNumber", Integer, nullable=True)
    year = Column(Integer, nullable=True)
    type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False)
    addressee = Column(String(255), nullable=False, default="")
    subject = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    status = Column(String(32), nullable=False)
    reference_number = Column("referenceNumber", String(120), nullable=True)
    last_update = Column("lastUpdate", DateTime(timezone=True), nullable=True)
    history = Column(JSON, nullable=False, default=list)
