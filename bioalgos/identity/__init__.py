"""
Identity backend registry.

The backend is picked once at startup from ``IDENTITY_BACKEND``; every other
part of the application talks to the returned ``IdentityProvider``.
"""

import logging

from .base import IdentityProvider, Principal
from .keycloak import BrokerIdentityProvider
from .local import LocalCredentialProvider

logger = logging.getLogger(__name__)

_backends = {
    LocalCredentialProvider.BACKEND_NAME: LocalCredentialProvider,
    BrokerIdentityProvider.BACKEND_NAME: BrokerIdentityProvider,
}

__all__ = [
    'BrokerIdentityProvider',
    'IdentityProvider',
    'LocalCredentialProvider',
    'Principal',
    'select_identity_provider',
]


def select_identity_provider(config, storage, notifier=None):
    """Instantiate the identity backend named by ``config.IDENTITY_BACKEND``.

    Raises:
        ValueError: If the backend name is unknown.
    """
    name = config.IDENTITY_BACKEND
    cls = _backends.get(name)
    if cls is None:
        raise ValueError(
            f"Unknown identity backend: {name}. Available: {list(_backends.keys())}"
        )
    logger.info(f"Using identity backend: {name}")
    if cls is LocalCredentialProvider:
        return cls(storage, admin_key=config.ADMIN_SIGNUP_KEY)
    return cls(config, storage, notifier=notifier)
