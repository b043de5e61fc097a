"""
Vault Configuration — validated settings loaded from the environment.

Reads:
    SECRET_KEY      = <token signing secret> (required)
    FLAG            = <content of the seeded private item> (required)
    ADMIN_PASSWORD  = <password of the ``stewie`` identity> (optional)
    PORT            = <listen port> (default 3000)
    NODE_ENV        = <development|production> (default development)
    VAULT_TOKEN_TTL = <session token lifetime in seconds> (default 3600)

Security Note:
    Never log SECRET_KEY, FLAG or ADMIN_PASSWORD. Only log variable names.
"""
import os
import secrets
import logging

from pydantic import BaseModel, Field, field_validator

from .conf import DEFAULT_PORT, TOKEN_TTL

logger = logging.getLogger("navigator.vault")

_REQUIRED_ENV = ("SECRET_KEY", "FLAG")


def generate_admin_password() -> str:
    """Generate a throwaway admin password for when none is configured.

    Returns:
        A ``temp_``-prefixed random string.
    """
    return "temp_" + secrets.token_urlsafe(12)


class VaultSettings(BaseModel):
    """Validated vault settings."""

    secret_key: str = Field(min_length=1)
    flag: str = Field(min_length=1)
    admin_password: str = Field(default_factory=generate_admin_password)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    environment: str = Field(default="development")
    token_ttl: int = Field(default=TOKEN_TTL, ge=1)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Normalize the environment name."""
        return v.strip().lower() or "development"

    @property
    def debug(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "VaultSettings":
        """Create VaultSettings by loading values from environment.

        Returns:
            Populated VaultSettings instance.

        Raises:
            RuntimeError: If SECRET_KEY or FLAG is not set.
        """
        missing = [name for name in _REQUIRED_ENV if not os.environ.get(name)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        values = {
            "secret_key": os.environ["SECRET_KEY"],
            "flag": os.environ["FLAG"],
            "port": os.environ.get("PORT", DEFAULT_PORT),
            "environment": os.environ.get("NODE_ENV", "development"),
            "token_ttl": os.environ.get("VAULT_TOKEN_TTL", TOKEN_TTL),
        }
        admin_password = os.environ.get("ADMIN_PASSWORD")
        if admin_password:
            values["admin_password"] = admin_password
        else:
            logger.warning(
                "ADMIN_PASSWORD not set, generated a temporary password"
            )
        return cls(**values)
