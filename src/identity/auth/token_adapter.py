"""Database-backed identity provider using opaque bearer tokens.

Tokens are random URL-safe strings handed to the client once; only their
SHA-256 digest is stored, in the ``access_tokens`` table.
"""

import hashlib
import secrets
from datetime import datetime, timedelta

from sqlalchemy import select

from identity.auth.port import Identity, IdentityProvider
from identity.models import AccessToken, User
from shared.database import Database, utc_now


def digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class DatabaseTokenProvider(IdentityProvider):
    def __init__(self, database: Database) -> None:
        self.database = database

    def issue_token(self, user_id: str, ttl: timedelta | None = None) -> str:
        """Create a new token for ``user_id`` and return its clear-text value."""
        token = secrets.token_urlsafe(32)
        with self.database.transaction() as session:
            session.add(
                AccessToken(
                    token_digest=digest(token),
                    user_id=user_id,
                    expires_at=utc_now() + ttl if ttl else None,
                )
            )
        return token

    def revoke_token(self, token: str) -> None:
        with self.database.transaction() as session:
            record = session.get(AccessToken, digest(token))
            if record is not None:
                record.revoked = True

    def resolve(self, token: str) -> Identity | None:
        with self.database.transaction(read_only=True) as session:
            row = session.execute(
                select(AccessToken, User)
                .join(User, User.id == AccessToken.user_id)
                .where(AccessToken.token_digest == digest(token))
            ).one_or_none()
        if row is None:
            return None

        record, user = row
        if record.revoked or _expired(record.expires_at):
            return None
        return Identity(id=user.id, role=user.role, is_active=user.is_active)


def _expired(expires_at: datetime | None) -> bool:
    if expires_at is None:
        return False
    # SQLite hands back naive datetimes; they are stored as UTC
    now = utc_now() if expires_at.tzinfo else utc_now().replace(tzinfo=None)
    return expires_at <= now
