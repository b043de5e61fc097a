"""Shared fixtures for the vault tests."""
import pytest

from navigator_vault.config import VaultSettings
from navigator_vault.models import SessionContext
from navigator_vault.policy import AccessPolicy
from navigator_vault.resolver import SessionResolver
from navigator_vault.stores import build_stores
from navigator_vault.tokens import TokenService

NOW = 1_700_000_000
SECRET = "test-secret-key-that-is-long-enough-for-hs256"
FLAG = "FLAG{test_flag}"
ADMIN_PASSWORD = "stewie-password"


class FakeClock:
    """Callable clock frozen at ``now`` until moved."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return VaultSettings(
        secret_key=SECRET,
        flag=FLAG,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def stores(settings):
    return build_stores(settings)


@pytest.fixture
def credentials(stores):
    return stores[0]


@pytest.fixture
def items(stores):
    return stores[1]


@pytest.fixture
def tokens(clock):
    return TokenService(SECRET, clock=clock)


@pytest.fixture
def resolver(tokens, credentials):
    return SessionResolver(tokens, credentials)


@pytest.fixture
def policy(credentials, items, tokens):
    return AccessPolicy(credentials, items, tokens)


@pytest.fixture
def context_for(credentials):
    """Build an authenticated context for a seeded identity id."""
    def _context(user_id: int) -> SessionContext:
        return SessionContext.for_identity(credentials.get(user_id))
    return _context


@pytest.fixture
def anonymous():
    return SessionContext.anonymous()
