"""Identity provider factory.

Provides get_identity_provider() / set_identity_provider() to swap implementations:
- DatabaseTokenProvider backed by the access_tokens table (default)
- FakeIdentityProvider for tests
"""

from identity.auth.port import Identity, IdentityProvider
from identity.auth.token_adapter import DatabaseTokenProvider
from shared.database import get_database

_current_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    """Return the current identity provider. Defaults to DatabaseTokenProvider."""
    global _current_provider
    if _current_provider is None:
        _current_provider = DatabaseTokenProvider(get_database())
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    """Reset to default provider."""
    global _current_provider
    _current_provider = None


__all__ = [
    "Identity",
    "IdentityProvider",
    "get_identity_provider",
    "reset_identity_provider",
    "set_identity_provider",
]
