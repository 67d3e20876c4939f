"""Whole-document state store interface and seed document"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator

from committee_gateway.domain.models import (
    BoardPosition,
    BoardRole,
    CommitteeConfig,
    CommitteeState,
    Person,
    SystemRole,
    User,
)

DEFAULT_BOARD_PERIOD = "2025 - 2027"


def initial_state(admin_password: str, default_password: str) -> CommitteeState:
    """Seed document written when the backing store is empty"""
    return CommitteeState(
        users=[
            User(id="1", username="soporte", password="soporte.password", role=SystemRole.SUPPORT, name="Soporte Técnico"),
            User(id="2", username="admin", password=admin_password, role=SystemRole.ADMINISTRATOR, name="Administrador"),
            User(id="3", username="presi", password=default_password, role=SystemRole.PRESIDENT, name="Presidente"),
            User(id="4", username="teso", password=default_password, role=SystemRole.TREASURER, name="Tesorero"),
            User(id="5", username="secre", password=default_password, role=SystemRole.SECRETARY, name="Secretario"),
        ],
        config=CommitteeConfig(
            legal_name="Comité de Vivienda Tierra Esperanza",
            trade_name="Tierra Esperanza",
            rut="76.123.456-0",
            email="contacto@tierraesperanza.cl",
            phone="+56 9 1234 5678",
            municipal_res="Res. Exenta N° 456/2023",
            legal_res="Pers. Jurídica N° 7890-S",
            language="es",
            logo_url="",
        ),
        board=[
            BoardPosition(role=BoardRole.PRESIDENT, primary=Person(name="Juan Pérez", rut="12.345.678-5", phone="+56912345678")),
            BoardPosition(role=BoardRole.SECRETARY, primary=Person(name="María López", rut="15.678.901-2", phone="+56987654321")),
            BoardPosition(role=BoardRole.TREASURER, primary=Person(name="Carlos Ruiz", rut="18.901.234-5", phone="+56955566677")),
        ],
        board_period=DEFAULT_BOARD_PERIOD,
    )


class StateStore(ABC):
    """
    Reads and writes the entire committee state at once.

    There is no versioning: `write` replaces whatever is stored. The lock
    only serialises `transaction()` callers inside this process.
    """

    backend_name = "unknown"
    admin_password: str
    default_password: str

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def init(self) -> None:
        """Prepare the backing store, seeding it when empty"""

    @abstractmethod
    def read(self) -> CommitteeState:
        """Load the full state"""

    @abstractmethod
    def write(self, state: CommitteeState) -> None:
        """Persist the full state"""

    @contextmanager
    def transaction(self) -> Iterator[CommitteeState]:
        """Read-modify-write; the state is written back only if the block succeeds"""
        with self._lock:
            state = self.read()
            yield state
            self.write(state)

    def replace(self, build: Callable[[CommitteeState], CommitteeState]) -> CommitteeState:
        """Swap in the document returned by `build(current)`; last writer wins"""
        with self._lock:
            new_state = build(self.read())
            self.write(new_state)
            return new_state

    def seed_state(self) -> CommitteeState:
        return initial_state(self.admin_password, self.default_password)

    def reset(self, state: CommitteeState) -> None:
        """Overwrite everything stored with `state`"""
        with self._lock:
            self.write(state)
