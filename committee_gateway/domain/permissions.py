"""Role-based access to committee modules"""

from typing import Dict, FrozenSet

from committee_gateway.domain.models import SystemRole
from committee_gateway.domain.exceptions import PermissionDeniedError

STAFF = frozenset({SystemRole.SUPPORT, SystemRole.ADMINISTRATOR})
ANY_ROLE = frozenset(SystemRole)

# View name -> roles allowed to use it
PERMISSIONS: Dict[str, FrozenSet[SystemRole]] = {
    "dashboard": ANY_ROLE,
    "members": ANY_ROLE,
    "treasury": STAFF | {SystemRole.TREASURER, SystemRole.PRESIDENT},
    "board": STAFF | {SystemRole.PRESIDENT, SystemRole.SECRETARY},
    "assemblies": STAFF | {SystemRole.PRESIDENT, SystemRole.SECRETARY},
    "attendance": STAFF | {SystemRole.PRESIDENT, SystemRole.SECRETARY},
    "secretariat": STAFF | {SystemRole.PRESIDENT, SystemRole.SECRETARY},
    "support": STAFF,
    "settings": STAFF,
}

# Roles that see balances and cash flow on the dashboard
FINANCE_VIEWERS = STAFF | {SystemRole.TREASURER, SystemRole.PRESIDENT}


def can_access(role: SystemRole, view: str) -> bool:
    return role in PERMISSIONS.get(view, frozenset())


def ensure_access(role: SystemRole, view: str) -> None:
    """Raise PermissionDeniedError unless `role` may open `view`"""
    if not can_access(role, view):
        raise PermissionDeniedError(f"Role {role.value} cannot access {view}")


def can_view_finances(role: SystemRole) -> bool:
    return role in FINANCE_VIEWERS
