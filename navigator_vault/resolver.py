"""
Session Resolver — turns a presented credential into a SessionContext.

A missing credential yields an anonymous context. A credential that fails
verification for any reason (bad signature, expired, malformed, unknown
user) is logged and *also* yields an anonymous context: callers never see
an authentication error from here, and cannot tell expiry from tampering.
"""
import logging
from enum import Enum
from typing import NamedTuple, Optional

from .conf import BEARER_PREFIX
from .exceptions import TokenInvalid
from .models import SessionContext
from .stores import CredentialStore
from .tokens import TokenService

logger = logging.getLogger("navigator.vault")


class ResolutionOutcome(str, Enum):
    NO_CREDENTIAL = "no_credential"
    INVALID_TOKEN = "invalid_token"
    UNKNOWN_IDENTITY = "unknown_identity"
    AUTHENTICATED = "authenticated"


class Resolution(NamedTuple):
    outcome: ResolutionOutcome
    context: SessionContext


def strip_bearer(credential: str) -> str:
    """Remove an optional ``Bearer `` presentation prefix."""
    if credential.startswith(BEARER_PREFIX):
        return credential[len(BEARER_PREFIX):]
    return credential


class SessionResolver:
    """Derives the authorization context for a request."""

    def __init__(self, tokens: TokenService, credentials: CredentialStore):
        self._tokens = tokens
        self._credentials = credentials

    def inspect(self, credential: Optional[str]) -> Resolution:
        """Resolve ``credential`` and report which branch was taken."""
        if not credential:
            return Resolution(
                ResolutionOutcome.NO_CREDENTIAL, SessionContext.anonymous()
            )
        try:
            claims = self._tokens.verify(strip_bearer(credential))
        except TokenInvalid as err:
            logger.warning("JWT Error: %s", err.message)
            return Resolution(
                ResolutionOutcome.INVALID_TOKEN, SessionContext.anonymous()
            )
        identity = self._credentials.get(claims.user_id)
        if identity is None:
            logger.warning("Token references unknown user=%s", claims.user_id)
            return Resolution(
                ResolutionOutcome.UNKNOWN_IDENTITY, SessionContext.anonymous()
            )
        return Resolution(
            ResolutionOutcome.AUTHENTICATED, SessionContext.for_identity(identity)
        )

    def resolve(self, credential: Optional[str]) -> SessionContext:
        """Return the SessionContext for ``credential``. Never raises."""
        return self.inspect(credential).context
