"""
Vault Models — identities, vault items and the per-request session context.

Field names are snake_case in Python; the camelCase aliases are the names
used on the wire (``ownerId``, ``isPublic``, ``userId``).
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Registered roles.

    ``ADMIIN`` is a misspelled role kept on purpose: it compares equal to
    ``"admiin"`` only, so it never grants the ``"admin"`` bypass.
    """

    USER = "user"
    ADMIN = "admin"
    ADMIIN = "admiin"


class Identity(BaseModel):
    """A registered principal. Immutable after process start."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    secret: str = Field(exclude=True, repr=False)
    role: Role


class VaultItem(BaseModel):
    """An owned, optionally public piece of content."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    owner_id: int = Field(alias="ownerId")
    content: str
    is_public: bool = Field(default=False, alias="isPublic")


class SessionContext(BaseModel):
    """Authorization state derived for a single request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    authenticated: bool = False
    user_id: Optional[int] = Field(default=None, alias="userId")
    role: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls()

    @classmethod
    def for_identity(cls, identity: Identity) -> "SessionContext":
        return cls(
            authenticated=True,
            user_id=identity.id,
            role=identity.role.value,
        )


class TokenClaims(BaseModel):
    """Verified session token payload."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId", strict=True)
    role: str
    iat: Optional[int] = None
    exp: int


class AuthPayload(BaseModel):
    """Result of a successful login."""

    token: str
    user: Identity
