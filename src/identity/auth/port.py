"""Identity provider port (abstract interface).

Resolves a bearer credential to the caller's identity. The rest of the
application only ever sees an ``Identity``; how tokens are issued and stored
is up to the adapter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from identity.models import Role


@dataclass(frozen=True)
class Identity:
    id: str
    role: Role
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        match self.role:
            case Role.ADMIN:
                return True
            case Role.USER:
                return False


class IdentityProvider(ABC):
    """Abstract identity provider interface."""

    @abstractmethod
    def resolve(self, token: str) -> Identity | None:
        """Return the identity behind ``token``, or None if it is unknown, expired or revoked."""
        ...
