from __future__ import annotations

from werkzeug.security import generate_password_hash, check_password_hash

from bioalgos.common import normalize_user
from bioalgos.extensions import db


class User(db.Model):
    """Platform account; email is unique server-side."""

    __tablename__ = 'user'

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(120), nullable=False, default='')
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=True)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    # Epoch milliseconds, advisory only
    last_activity = db.Column(db.BigInteger, nullable=True)

    def set_password(self, password: str) -> None:
        """Hash and store the user's password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a plaintext password against the stored hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return normalize_user({
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'isAdmin': self.is_admin,
            'lastActivity': self.last_activity,
        })

    def __repr__(self) -> str:
        return f'<User {self.email!r}>'
