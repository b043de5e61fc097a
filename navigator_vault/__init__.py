"""Navigator Vault — session resolution and access policy for vault items.

Security Note:
    Several authorization rules are deliberately weak (the ``admin`` bypass
    in ``vaultItems``, the unchecked ownership in ``makeVaultItemPublic``,
    plain-text secrets). Do not deploy this as a real secret store.
"""
from .version import __version__
from .config import VaultSettings
from .exceptions import (
    VaultError,
    InvalidCredentials,
    NotAuthenticated,
    ItemNotFound,
    TokenInvalid,
    InvalidArguments,
    UnknownOperation,
)
from .models import Role, Identity, VaultItem, SessionContext, TokenClaims, AuthPayload
from .stores import CredentialStore, ItemStore, build_stores
from .tokens import TokenService
from .resolver import SessionResolver, Resolution, ResolutionOutcome
from .policy import AccessPolicy, Operation
from .handlers import create_app

__all__ = [
    "__version__",
    "VaultSettings",
    "VaultError",
    "InvalidCredentials",
    "NotAuthenticated",
    "ItemNotFound",
    "TokenInvalid",
    "InvalidArguments",
    "UnknownOperation",
    "Role",
    "Identity",
    "VaultItem",
    "SessionContext",
    "TokenClaims",
    "AuthPayload",
    "CredentialStore",
    "ItemStore",
    "build_stores",
    "TokenService",
    "SessionResolver",
    "Resolution",
    "ResolutionOutcome",
    "AccessPolicy",
    "Operation",
    "create_app",
]
