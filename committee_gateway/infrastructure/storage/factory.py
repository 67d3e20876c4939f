"""Backend selection for the state store"""

from pathlib import Path

from committee_gateway.config import Settings
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.storage.json_store import JsonStateStore


def build_state_store(config: Settings) -> StateStore:
    """JSON file by default; `storage_backend=mysql` switches to the SQL mirror"""
    if config.storage_backend.lower() == "mysql":
        # Imported lazily so the JSON backend does not need a database driver
        from committee_gateway.infrastructure.database.repositories import SqlStateStore
        from committee_gateway.infrastructure.database.session import create_session_factory

        return SqlStateStore(
            create_session_factory(config.database_url),
            admin_password=config.default_admin_password,
            default_password=config.default_user_password,
        )

    return JsonStateStore(
        Path(config.data_file),
        admin_password=config.default_admin_password,
        default_password=config.default_user_password,
    )
