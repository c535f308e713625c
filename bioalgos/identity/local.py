from __future__ import annotations

import logging
import uuid

from werkzeug.security import check_password_hash, generate_password_hash

from bioalgos.client.storage import SESSION_USER_KEY, USERS_KEY, StoreFacade
from bioalgos.common import epoch_millis

from .base import IdentityProvider, Principal

logger = logging.getLogger(__name__)


class LocalCredentialProvider(IdentityProvider):
    """Credential table kept in the local store under ``users``.

    The session principal lives under ``user`` and survives restarts.
    Passwords are stored as werkzeug hashes.
    """

    BACKEND_NAME = "local"

    def __init__(self, storage: StoreFacade, admin_key: str = None):
        super().__init__()
        self.storage = storage
        self.admin_key = admin_key
        stored = storage.read(SESSION_USER_KEY)
        if isinstance(stored, dict) and stored.get('id'):
            self._user = Principal.from_record(stored)

    def _find(self, users, email=None, user_id=None):
        for idx, u in enumerate(users):
            if email is not None and u.get('email') == email:
                return idx
            if user_id is not None and str(u.get('id')) == str(user_id):
                return idx
        return -1

    def _check(self, record, password) -> bool:
        pw_hash = record.get('passwordHash')
        return bool(pw_hash) and check_password_hash(pw_hash, password)

    def _save_session(self) -> None:
        if self._user is None:
            self.storage.remove(SESSION_USER_KEY)
        else:
            self.storage.write(SESSION_USER_KEY, self._user.to_record())

    def signup(self, name: str, email: str, password: str) -> bool:
        """Create an account and sign in. Fails if the email is taken."""
        with self.storage.locked():
            users = self.storage.read_list(USERS_KEY)
            if self._find(users, email=email) != -1:
                logger.info(f'Signup rejected, email already registered: {email}')
                return False
            record = {
                'id': str(uuid.uuid4()),
                'name': name,
                'email': email,
                'passwordHash': generate_password_hash(password),
                'isAdmin': False,
                'lastActivity': epoch_millis(),
            }
            users.append(record)
            self.storage.write(USERS_KEY, users)

        self._user = Principal.from_record(record)
        self._save_session()
        logger.info(f'Signup successful: {email}')
        return True

    def login(self, email: str, password: str) -> bool:
        now = epoch_millis()
        with self.storage.locked():
            users = self.storage.read_list(USERS_KEY)
            idx = self._find(users, email=email)
            if idx == -1 or not self._check(users[idx], password):
                return False
            users[idx]['lastActivity'] = now
            self.storage.write(USERS_KEY, users)
            record = users[idx]

        self._user = Principal.from_record(record)
        self._save_session()
        logger.info(f'Login successful: {email} (admin={self._user.is_admin})')
        return True

    def logout(self) -> None:
        self._user = None
        self._save_session()

    def update_user_activity(self) -> None:
        if self._user is None:
            return
        super().update_user_activity()
        user_id = self._user.id
        stamp = self._user.last_activity

        def _stamp(users):
            for u in users or []:
                if str(u.get('id')) == user_id:
                    u['lastActivity'] = stamp
            return users or []

        self.storage.mutate(USERS_KEY, _stamp, default=[])
        self._save_session()

    def _grant_admin(self, idx, users) -> None:
        users[idx]['isAdmin'] = True
        self.storage.write(USERS_KEY, users)
        if self._user is not None and self._user.id == str(users[idx].get('id')):
            self._user.is_admin = True
            self._save_session()

    def make_user_admin(self, user_id: str) -> bool:
        if not self.is_admin:
            logger.warning('Only admin users can make other users admin')
            return False
        with self.storage.locked():
            users = self.storage.read_list(USERS_KEY)
            idx = self._find(users, user_id=user_id)
            if idx == -1:
                return False
            self._grant_admin(idx, users)
        logger.info(f'User {user_id} is now an admin')
        return True

    def upgrade_to_admin(self, email: str, password: str, admin_key: str) -> bool:
        """Self-service admin upgrade gated by the configured admin key."""
        if not self.admin_key or admin_key != self.admin_key:
            logger.warning(f'Invalid admin key supplied for {email}')
            return False
        with self.storage.locked():
            users = self.storage.read_list(USERS_KEY)
            idx = self._find(users, email=email)
            if idx == -1 or not self._check(users[idx], password):
                return False
            self._grant_admin(idx, users)
        logger.info(f'User upgraded to admin: {email}')
        return True
