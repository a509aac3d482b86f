"""FastAPI dependencies resolving the caller from the Authorization header."""

from typing import Annotated

from fastapi import Depends, Header

from identity.auth import Identity, get_identity_provider
from shared.errors import AuthenticationError, AuthorizationError


def current_identity(authorization: Annotated[str | None, Header()] = None) -> Identity:
    """Resolve ``Authorization: Bearer <token>`` to an active identity."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Not authorized, no token")

    identity = get_identity_provider().resolve(token.strip())
    if identity is None:
        raise AuthenticationError("Not authorized, token failed")
    if not identity.is_active:
        raise AuthenticationError("Account is deactivated")
    return identity


def require_admin(identity: Annotated[Identity, Depends(current_identity)]) -> Identity:
    if not identity.is_admin:
        raise AuthorizationError()
    return identity


CurrentIdentity = Annotated[Identity, Depends(current_identity)]
AdminIdentity = Annotated[Identity, Depends(require_admin)]
