"""
Principal type and the identity provider interface.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from bioalgos.common import epoch_millis


@dataclass
class Principal:
    """The authenticated identity attributed to the current session."""

    id: str
    name: str = ''
    email: str = ''
    is_admin: bool = False
    last_activity: int | None = None

    @classmethod
    def from_record(cls, record: dict) -> Principal:
        return cls(
            id=str(record.get('id', '')),
            name=record.get('name') or '',
            email=record.get('email') or '',
            is_admin=bool(record.get('isAdmin')),
            last_activity=record.get('lastActivity'),
        )

    def to_record(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'isAdmin': self.is_admin,
            'lastActivity': self.last_activity,
        }


class IdentityProvider(ABC):
    """Source of the session principal.

    One concrete backend is chosen at startup; callers only see ``user`` and
    ``is_admin`` and never need to know which backend produced them.
    """

    BACKEND_NAME: str = ""

    def __init__(self):
        self._user: Principal | None = None

    @property
    def user(self) -> Principal | None:
        return self._user

    @property
    def is_admin(self) -> bool:
        return bool(self._user and self._user.is_admin)

    @abstractmethod
    def login(self, email: str, password: str) -> bool:
        ...

    @abstractmethod
    def logout(self) -> None:
        ...

    @abstractmethod
    def make_user_admin(self, user_id: str) -> bool:
        """Grant the admin flag to another user. Only admins may do this."""
        ...

    def update_user_activity(self) -> None:
        """Stamp the current principal's last activity time."""
        if self._user is not None:
            self._user.last_activity = epoch_millis()
