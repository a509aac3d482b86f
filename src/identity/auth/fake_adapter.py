"""In-memory identity provider for development and testing.

Tokens are registered explicitly, so tests can act as any user or admin
without touching the database.
"""

from identity.auth.port import Identity, IdentityProvider
from identity.models import Role


class FakeIdentityProvider(IdentityProvider):
    def __init__(self) -> None:
        self.identities: dict[str, Identity] = {}

    def register(self, token: str, user_id: str, role: Role = Role.USER, is_active: bool = True) -> Identity:
        identity = Identity(id=user_id, role=role, is_active=is_active)
        self.identities[token] = identity
        return identity

    def resolve(self, token: str) -> Identity | None:
        return self.identities.get(token)
