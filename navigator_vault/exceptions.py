"""
Vault Errors — failures raised by the access policy and token service.

Every error carries a human-readable ``message``; the transport renders
only that message to callers, never tracebacks or internal detail.
"""


class VaultError(Exception):
    """Base class for all vault failures."""

    message: str = "Vault error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidCredentials(VaultError):
    """No identity matches the given username and password."""

    message = "Invalid credentials"


class NotAuthenticated(VaultError):
    """The operation requires a session and none was present."""

    message = "Not authenticated"


class ItemNotFound(VaultError):
    """The mutation target does not exist."""

    message = "Item not found"


class TokenInvalid(VaultError):
    """Bad signature, malformed token or expired session.

    Never reaches callers: the session resolver downgrades it to an
    anonymous context.
    """

    message = "Invalid token"


class InvalidArguments(VaultError):
    """Operation arguments are missing or have the wrong type."""

    message = "Invalid arguments"


class UnknownOperation(VaultError):
    message = "Unknown operation"
