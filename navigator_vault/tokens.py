"""
Token Service — issue and verify signed session tokens.

Tokens are HS256 JWTs keyed by the process-wide SECRET_KEY:
    {"userId": <int>, "role": <str>, "iat": <unix>, "exp": <iat + ttl>}

Only the signature and expiry are checked; there is no issuer or audience
binding. Any algorithm other than HS256 (including ``none``) is rejected.

Security Note:
    Never log tokens or the signing secret.
"""
import time
import logging
from collections.abc import Callable

import jwt
from pydantic import ValidationError

from .conf import TOKEN_ALGORITHM, TOKEN_TTL
from .exceptions import TokenInvalid
from .models import Identity, TokenClaims

logger = logging.getLogger("navigator.vault")


class TokenService:
    """Issues and verifies session tokens.

    Args:
        secret: Symmetric signing secret.
        ttl: Token lifetime in seconds.
        clock: Returns the current unix time; used for ``iat``/``exp``
            on issue and for the expiry check on verify.
    """

    def __init__(
        self,
        secret: str,
        ttl: int = TOKEN_TTL,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("Token signing secret cannot be empty")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, identity: Identity) -> str:
        """Sign a session token for ``identity``.

        Returns:
            Compact JWT string.
        """
        now = int(self._clock())
        payload = {
            "userId": identity.id,
            "role": identity.role.value,
            "iat": now,
            "exp": now + self._ttl,
        }
        token = jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)
        logger.debug("Token issued: user=%s exp=%s", identity.id, payload["exp"])
        return token

    def verify(self, token: str) -> TokenClaims:
        """Verify signature and expiry and return the claims.

        Raises:
            TokenInvalid: Bad signature, malformed token or claims,
                unexpected algorithm, or ``now >= exp``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                options={
                    "require": ["exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as err:
            raise TokenInvalid(str(err)) from err
        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as err:
            raise TokenInvalid("Malformed token claims") from err
        if self._clock() >= claims.exp:
            raise TokenInvalid("Signature has expired")
        return claims
