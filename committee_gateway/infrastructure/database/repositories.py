"""SQL mirror of the state document"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from committee_gateway.domain.models import (
    Assembly,
    BoardPosition,
    CommitteeConfig,
    CommitteeState,
    Document,
    Member,
    Person,
    Transaction,
    User,
)
from committee_gateway.domain.exceptions import StorageError
from committee_gateway.infrastructure.database.models import (
    AssemblyRow,
    Base,
    BoardRow,
    ConfigRow,
    DocumentRow,
    MemberRow,
    TransactionRow,
    UserRow,
)
from committee_gateway.infrastructure.storage.base import StateStore, initial_state


class SqlStateStore(StateStore):
    """
    One table per collection, assembled into a single document on read.

    Writes upsert every incoming row inside one transaction. Rows missing
    from the incoming document are never deleted.
    """

    backend_name = "MySQL"

    def __init__(self, session_factory: sessionmaker, admin_password: str, default_password: str):
        super().__init__()
        self.session_factory = session_factory
        self.admin_password = admin_password
        self.default_password = default_password

    def init(self) -> None:
        try:
            Base.metadata.create_all(bind=self.session_factory.kw["bind"])
            with self.session_factory() as db:
                seeded = db.query(UserRow).first() is not None
        except SQLAlchemyError as e:
            logging.error("SQL connection failed during initialization", extra={"error": str(e)})
            raise StorageError(f"SQL store unavailable: {e}") from e

        if not seeded:
            logging.info("Seeding empty SQL store")
            self.write(initial_state(self.admin_password, self.default_password))

    def read(self) -> CommitteeState:
        try:
            with self.session_factory() as db:
                return self._load(db)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read state from SQL store: {e}") from e

    def write(self, state: CommitteeState) -> None:
        db: Session = self.session_factory()
        try:
            self._save(db, state)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Cannot write state to SQL store: {e}") from e
        finally:
            db.close()

    def reset(self, state: CommitteeState) -> None:
        """Empty every table, then save `state`; the only path that deletes rows"""
        with self._lock:
            db: Session = self.session_factory()
            try:
                for row in (DocumentRow, AssemblyRow, BoardRow, TransactionRow, MemberRow, UserRow, ConfigRow):
                    db.query(row).delete()
                self._save(db, state)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageError(f"Cannot reset SQL store: {e}") from e
            finally:
                db.close()
        logging.info("SQL store reset", extra={"users": len(state.users)})

    def _load(self, db: Session) -> CommitteeState:
        config_row = db.get(ConfigRow, 1)
        config = CommitteeConfig()
        board_period = ""
        if config_row is not None:
            config = CommitteeConfig(
                legal_name=config_row.legal_name,
                trade_name=config_row.trade_name,
                rut=config_row.rut,
                email=config_row.email,
                phone=config_row.phone,
                municipal_res=config_row.municipal_res,
                legal_res=config_row.legal_res,
                language=config_row.language,
                logo_url=config_row.logo_url,
            )
            board_period = config_row.board_period

        return CommitteeState(
            users=[
                User(
                    id=u.id,
                    username=u.username,
                    password=u.password,
                    role=u.role,
                    name=u.name,
                    last_login=u.last_login,
                )
                for u in db.query(UserRow).all()
            ],
            config=config,
            members=[
                Member(
                    id=m.id,
                    rut=m.rut,
                    name=m.name,
                    join_date=m.join_date,
                    status=m.status,
                    photo_url=m.photo_url,
                    email=m.email,
                    address=m.address,
                    comuna=m.comuna,
                    region=m.region,
                    phone=m.phone,
                    family_members=m.family_members or [],
                )
                for m in db.query(MemberRow).all()
            ],
            transactions=[
                Transaction(
                    id=t.id,
                    date=t.date,
                    amount=t.amount,
                    type=t.type,
                    payment_method=t.payment_method,
                    reference_number=t.reference_number,
                    description=t.description,
                    member_id=t.member_id,
                )
                for t in db.query(TransactionRow).order_by(TransactionRow.date.desc()).all()
            ],
            board=[
                BoardPosition(
                    role=b.role,
                    primary=Person(name=b.primary_name, rut=b.primary_rut, phone=b.primary_phone),
                    substitute=Person(name=b.substitute_name, rut=b.substitute_rut, phone=b.substitute_phone),
                )
                for b in db.query(BoardRow).all()
            ],
            board_period=board_period,
            assemblies=[
                Assembly(
                    id=a.id,
                    date=a.date,
                    summons_time=a.summons_time,
                    location=a.location,
                    description=a.description,
                    attendees=a.attendees or [],
                    type=a.type,
                    status=a.status,
                    start_time=a.start_time,
                    agenda=a.agenda,
                    agreements=a.agreements,
                    observations=a.observations,
                )
                for a in db.query(AssemblyRow).order_by(AssemblyRow.date.desc()).all()
            ],
            documents=[
                Document(
                    id=d.id,
                    folio_number=d.folio_number,
                    year=d.year,
                    type=d.type,
                    title=d.title,
                    date=d.date,
                    addressee=d.addressee,
                    subject=d.subject,
                    content=d.content,
                    status=d.status,
                    reference_number=d.reference_number,
                    last_update=d.last_update,
                    history=d.history or [],
                )
                for d in db.query(DocumentRow).order_by(DocumentRow.date.desc()).all()
            ],
        )

    def _save(self, db: Session, state: CommitteeState) -> None:
        c = state.config
        db.merge(
            ConfigRow(
                id=1,
                legal_name=c.legal_name,
                trade_name=c.trade_name,
                rut=c.rut,
                email=c.email,
                phone=c.phone,
                municipal_res=c.municipal_res,
                legal_res=c.legal_res,
                language=c.language,
                logo_url=c.logo_url,
                board_period=state.board_period,
            )
        )

        for u in state.users:
            db.merge(
                UserRow(
                    id=u.id,
                    username=u.username,
                    password=u.password,
                    role=u.role.value,
                    name=u.name,
                    last_login=u.last_login,
                )
            )

        for m in state.members:
            db.merge(
                MemberRow(
                    id=m.id,
                    rut=m.rut,
                    name=m.name,
                    join_date=m.join_date,
                    status=m.status.value,
                    photo_url=m.photo_url,
                    email=m.email,
                    address=m.address,
                    comuna=m.comuna,
                    region=m.region,
                    phone=m.phone,
                    family_members=[fm.to_wire() for fm in m.family_members],
                )
            )

        for t in state.transactions:
            db.merge(
                TransactionRow(
                    id=t.id,
                    date=t.date,
                    amount=t.amount,
                    type=t.type.value,
                    payment_method=t.payment_method.value,
                    reference_number=t.reference_number,
                    description=t.description,
                    member_id=t.member_id,
                )
            )

        for b in state.board:
            db.merge(
                BoardRow(
                    role=b.role.value,
                    primary_name=b.primary.name,
                    primary_rut=b.primary.rut,
                    primary_phone=b.primary.phone,
                    substitute_name=b.substitute.name,
                    substitute_rut=b.substitute.rut,
                    substitute_phone=b.substitute.phone,
                )
            )

        for a in state.assemblies:
            db.merge(
                AssemblyRow(
                    id=a.id,
                    date=a.date,
                    summons_time=a.summons_time,
                    location=a.location,
                    description=a.description,
                    attendees=list(a.attendees),
                    type=a.type.value,
                    status=a.status.value,
                    start_time=a.start_time,
                    agenda=a.agenda,
                    agreements=a.agreements,
                    observations=a.observations,
                )
            )

        for d in state.documents:
            db.merge(
                DocumentRow(
                    id=d.id,
                    folio_number=d.folio_number,
                    year=d.year,
                    type=d.type.value,
                    title=d.title,
                    date=d.date,
                    addressee=d.addressee,
                    subject=d.subject,
                    content=d.content,
                    status=d.status.value,
                    reference_number=d.reference_number,
                    last_update=d.last_update,
                    history=[log.to_wire() for log in d.history],
                )
            )
