"""
Vault Stores — process-lifetime, memory-resident identity and item storage.

Both stores are built once at startup (see ``build_stores``) and handed by
reference to the services that use them. Nothing here is persisted.

Concurrency Note:
    ``ItemStore.create`` assigns ``id = len(items) + 1`` without a lock.
    The core never awaits, so on a single event loop each creation runs to
    completion; if creation were ever interleaved, duplicate ids could be
    assigned. This is known and left as-is.
"""
import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Optional

from .config import VaultSettings
from .models import Identity, Role, VaultItem

logger = logging.getLogger("navigator.vault")


class CredentialStore:
    """Read-only registry of identities."""

    def __init__(self, identities: Iterable[Identity]):
        self._identities: tuple[Identity, ...] = tuple(identities)
        ids = [identity.id for identity in self._identities]
        if len(set(ids)) != len(ids):
            raise ValueError("Identity ids must be unique")
        names = [identity.username for identity in self._identities]
        if len(set(names)) != len(names):
            raise ValueError("Identity usernames must be unique")

    def __len__(self) -> int:
        return len(self._identities)

    def __iter__(self) -> Iterator[Identity]:
        return iter(self._identities)

    def __contains__(self, user_id: object) -> bool:
        return isinstance(user_id, int) and self.get(user_id) is not None

    def get(self, user_id: int) -> Optional[Identity]:
        """Return the identity with ``user_id``, or None."""
        for identity in self._identities:
            if identity.id == user_id:
                return identity
        return None

    def authenticate(self, username: str, secret: str) -> Optional[Identity]:
        """Return the identity matching both username and secret exactly.

        Plain string equality, no hashing.
        """
        for identity in self._identities:
            if identity.username == username and identity.secret == secret:
                return identity
        return None


class ItemStore:
    """Mutable collection of vault items.

    Items keep insertion order. Lookups by id return the first match.
    """

    def __init__(
        self,
        owners: CredentialStore,
        items: Iterable[VaultItem] = (),
    ):
        self._owners = owners
        self._items: list[VaultItem] = []
        for item in items:
            self._check_owner(item.owner_id)
            self._items.append(item)

    def _check_owner(self, owner_id: int) -> None:
        if owner_id not in self._owners:
            raise ValueError(f"Unknown item owner: {owner_id}")

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[VaultItem]:
        return iter(self._items)

    def all(self) -> list[VaultItem]:
        """Every item, unfiltered."""
        return list(self._items)

    def filter(self, predicate: Callable[[VaultItem], bool]) -> list[VaultItem]:
        return [item for item in self._items if predicate(item)]

    def find(self, item_id: int) -> Optional[VaultItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def next_id(self) -> int:
        return len(self._items) + 1

    def create(self, owner_id: int, content: str, is_public: bool) -> VaultItem:
        """Append a new item owned by ``owner_id``.

        Raises:
            ValueError: If ``owner_id`` is not a registered identity.
        """
        self._check_owner(owner_id)
        item = VaultItem(
            id=self.next_id(),
            owner_id=owner_id,
            content=content,
            is_public=is_public,
        )
        self._items.append(item)
        logger.debug("Vault item created: id=%s owner=%s", item.id, owner_id)
        return item

    def append(self, item: VaultItem) -> VaultItem:
        """Append an already-built item, keeping its id."""
        self._check_owner(item.owner_id)
        self._items.append(item)
        return item


def seed_identities(settings: VaultSettings) -> list[Identity]:
    return [
        Identity(id=1, username="stewie", secret=settings.admin_password, role=Role.ADMIN),
        Identity(id=2, username="admin", secret="admin", role=Role.ADMIIN),
        Identity(id=3, username="user1", secret="admin123", role=Role.USER),
    ]


def seed_items(settings: VaultSettings) -> list[VaultItem]:
    return [
        VaultItem(id=1, owner_id=1, content=settings.flag, is_public=False),
        VaultItem(id=2, owner_id=2, content="Nothing to see here", is_public=False),
        VaultItem(id=3, owner_id=1, content="Public note", is_public=True),
        VaultItem(id=4, owner_id=1, content="FAKE_FLAG{dummy_flag}", is_public=False),
    ]


def build_stores(settings: VaultSettings) -> tuple[CredentialStore, ItemStore]:
    """Build the seeded credential and item stores."""
    credentials = CredentialStore(seed_identities(settings))
    items = ItemStore(credentials, seed_items(settings))
    logger.info(
        "Vault stores ready: %d identities, %d item(s)",
        len(credentials), len(items),
    )
    return credentials, items
