"""User domain model for account authentication."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class User:
    """
    User entity representing a registered account.

    Attributes:
        id: Opaque unique identifier
        name: Display name (3-50 characters)
        email: Normalised email address (unique)
        password_hash: bcrypt digest of the password, never the plaintext
        created_at: Account creation timestamp (UTC)
        updated_at: Last update timestamp (UTC)
    """

    def __init__(
        self,
        id: str,
        name: str,
        email: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialise the account without its password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
