"""Flat JSON file backend"""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from committee_gateway.domain.models import CommitteeState
from committee_gateway.domain.exceptions import StorageError
from committee_gateway.infrastructure.storage.base import StateStore, initial_state

LEGACY_ADMIN_PASSWORD = "admin.password"


class JsonStateStore(StateStore):
    """Keeps the whole state in one pretty-printed JSON file"""

    backend_name = "JSON"

    def __init__(self, path: Path, admin_password: str, default_password: str):
        super().__init__()
        self.path = Path(path)
        self.admin_password = admin_password
        self.default_password = default_password

    def init(self) -> None:
        if not self.path.exists():
            logging.info("Creating data file", extra={"path": str(self.path)})
            self.write(initial_state(self.admin_password, self.default_password))
            return

        # Replace the legacy default admin password left by older installs
        state = self.read()
        changed = False
        for user in state.users:
            if user.username == "admin" and user.password == LEGACY_ADMIN_PASSWORD:
                user.password = self.admin_password
                changed = True
        if changed:
            logging.info("Migrated legacy admin password", extra={"path": str(self.path)})
            self.write(state)

    def read(self) -> CommitteeState:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return CommitteeState.model_validate(raw)
        except (OSError, ValueError, ValidationError) as e:
            raise StorageError(f"Cannot read state from {self.path}: {e}") from e

    def write(self, state: CommitteeState) -> None:
        """
        Replace the file atomically.

        The document goes to a temporary file in the same directory which is
        then renamed over the data file, so readers never see a partial write.
        """
        payload = json.dumps(state.to_wire(), indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write state to {self.path}: {e}") from e
