"""Login and user account rules"""

from typing import List, Optional

from committee_gateway.domain.models import User, SystemRole
from committee_gateway.domain.exceptions import (
    AuthenticationError,
    DuplicateRecordError,
    LastUserError,
    ValidationFailedError,
)
from committee_gateway.utils.date_utils import utc_now
from committee_gateway.utils.identifiers import new_id


def authenticate(users: List[User], username: str, password: str) -> User:
    """
    Find the user matching the credentials.

    Username comparison is case-insensitive, password comparison is exact.

    Raises:
        AuthenticationError: No user matches
    """
    wanted = (username or "").strip().lower()
    for user in users:
        if user.username.lower() == wanted and user.password is not None and user.password == password:
            user.last_login = utc_now()
            return user
    raise AuthenticationError("Credenciales inválidas")


def sanitize_user(user: User) -> dict:
    """Wire representation without the password"""
    data = user.to_wire()
    data.pop("password", None)
    return data


def merge_passwords(incoming: List[User], current: List[User], default_password: str) -> List[User]:
    """
    Reattach stored passwords to users submitted without one.

    Clients never receive passwords, so a full-state save sends users back
    without them. Users unknown to the store fall back to `default_password`.
    """
    stored = {user.id: user.password for user in current}
    for user in incoming:
        if not user.password:
            user.password = stored.get(user.id) or default_password
    return incoming


def _ensure_unique_username(users: List[User], username: str, exclude_id: Optional[str] = None) -> None:
    for user in users:
        if user.id != exclude_id and user.username.lower() == username.lower():
            raise DuplicateRecordError(f"Username {username} already exists")


def create_user(
    users: List[User],
    username: str,
    name: str,
    role: SystemRole,
    password: Optional[str],
    default_password: str,
) -> User:
    """Append a new account; missing password falls back to the default"""
    if not username or not name:
        raise ValidationFailedError("Username, name and role are required")
    _ensure_unique_username(users, username)

    user = User(
        id=new_id(),
        username=username.strip(),
        name=name,
        role=role,
        password=password or default_password,
    )
    users.append(user)
    return user


def update_user(
    users: List[User],
    user: User,
    username: Optional[str] = None,
    name: Optional[str] = None,
    role: Optional[SystemRole] = None,
    password: Optional[str] = None,
) -> User:
    """Change account fields; the stored password stays unless a new one is given"""
    if username is not None:
        _ensure_unique_username(users, username, exclude_id=user.id)
        user.username = username.strip()
    if name is not None:
        user.name = name
    if role is not None:
        user.role = role
    if password:
        user.password = password
    return user


def delete_user(users: List[User], user: User) -> None:
    if len(users) <= 1:
        raise LastUserError("At least one user account must remain")
    users.remove(user)
