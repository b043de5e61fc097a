"""
Access Policy — the vault's six operations.

Each operation has an argument model and a typed handler taking
``(args, context)``. ``AccessPolicy.execute`` is the single entry point for
the transport: it maps an operation name to its handler, validates the
named arguments and runs the handler.

The rules below are intentionally uneven and must stay that way:

* ``vaultItems`` returns the whole store to a context whose role is exactly
  ``"admin"``; ``searchVault`` has no such bypass.
* ``makeVaultItemPublic`` checks that the caller is authenticated but not
  that they own the item.
"""
import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from .exceptions import (
    InvalidArguments,
    InvalidCredentials,
    ItemNotFound,
    NotAuthenticated,
    UnknownOperation,
)
from .models import AuthPayload, Role, SessionContext, VaultItem
from .stores import CredentialStore, ItemStore
from .tokens import TokenService

logger = logging.getLogger("navigator.vault")


class Operation(str, Enum):
    """Operation names as exposed to the transport."""

    LOGIN = "login"
    VAULT_ITEMS = "vaultItems"
    PUBLIC_VAULT_ITEMS = "publicVaultItems"
    SEARCH_VAULT = "searchVault"
    CREATE_VAULT_ITEM = "createVaultItem"
    MAKE_VAULT_ITEM_PUBLIC = "makeVaultItemPublic"

    @property
    def is_mutation(self) -> bool:
        return self in (Operation.CREATE_VAULT_ITEM, Operation.MAKE_VAULT_ITEM_PUBLIC)


# ---------------------------------------------------------------------------
# Operation arguments
# ---------------------------------------------------------------------------

class OperationArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class NoArgs(OperationArgs):
    pass


class LoginArgs(OperationArgs):
    username: StrictStr
    password: StrictStr


class SearchVaultArgs(OperationArgs):
    search_term: StrictStr = Field(alias="searchTerm")


class CreateVaultItemArgs(OperationArgs):
    content: StrictStr
    is_public: StrictBool = Field(alias="isPublic")


class MakeVaultItemPublicArgs(OperationArgs):
    id: Union[StrictInt, StrictStr]

    @field_validator("id")
    @classmethod
    def coerce_id(cls, v: Union[int, str]) -> int:
        """Accept an integer or an integer-looking string."""
        if isinstance(v, str):
            try:
                return int(v.strip())
            except ValueError:
                raise ValueError(f"ID must be an integer, got {v!r}") from None
        return v


def _describe(err: ValidationError) -> str:
    first = err.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "arguments"
    return f'Invalid value for argument "{field}": {first["msg"]}'


def _require_session(context: SessionContext) -> int:
    if not context.authenticated or context.user_id is None:
        raise NotAuthenticated()
    return context.user_id


Handler = Callable[[Any, SessionContext], Any]


class AccessPolicy:
    """Authorization decisions over the credential and item stores."""

    def __init__(
        self,
        credentials: CredentialStore,
        items: ItemStore,
        tokens: TokenService,
    ):
        self.credentials = credentials
        self.items = items
        self.tokens = tokens
        self._handlers: dict[Operation, tuple[type[OperationArgs], Handler]] = {
            Operation.LOGIN: (LoginArgs, self.login),
            Operation.VAULT_ITEMS: (NoArgs, self.vault_items),
            Operation.PUBLIC_VAULT_ITEMS: (NoArgs, self.public_vault_items),
            Operation.SEARCH_VAULT: (SearchVaultArgs, self.search_vault),
            Operation.CREATE_VAULT_ITEM: (CreateVaultItemArgs, self.create_vault_item),
            Operation.MAKE_VAULT_ITEM_PUBLIC: (
                MakeVaultItemPublicArgs, self.make_vault_item_public
            ),
        }

    def execute(
        self,
        operation: Union[str, Operation],
        variables: Optional[Mapping[str, Any]],
        context: SessionContext,
    ) -> Any:
        """Run ``operation`` with named ``variables`` under ``context``.

        Raises:
            UnknownOperation: If the name is not an Operation.
            InvalidArguments: If a variable is missing or mistyped.
            VaultError: Whatever the operation itself raises.
        """
        try:
            op = Operation(operation)
        except ValueError:
            raise UnknownOperation(f"Unknown operation: {operation}") from None
        args_model, handler = self._handlers[op]
        try:
            args = args_model.model_validate(dict(variables or {}))
        except ValidationError as err:
            raise InvalidArguments(_describe(err)) from err
        logger.debug(
            "Executing %s %s for user=%s",
            "mutation" if op.is_mutation else "query", op.value, context.user_id,
        )
        return handler(args, context)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def login(self, args: LoginArgs, context: SessionContext) -> AuthPayload:
        identity = self.credentials.authenticate(args.username, args.password)
        if identity is None:
            logger.info("Failed login attempt")
            raise InvalidCredentials()
        logger.info("Login: user=%s", identity.id)
        return AuthPayload(token=self.tokens.issue(identity), user=identity)

    def vault_items(self, args: NoArgs, context: SessionContext) -> list[VaultItem]:
        """Items visible to the caller; everything for role ``admin``."""
        user_id = _require_session(context)
        if context.role == Role.ADMIN.value:
            return self.items.all()
        return self.items.filter(
            lambda item: item.owner_id == user_id or item.is_public
        )

    def public_vault_items(
        self, args: NoArgs, context: SessionContext
    ) -> list[VaultItem]:
        return self.items.filter(lambda item: item.is_public)

    def search_vault(
        self, args: SearchVaultArgs, context: SessionContext
    ) -> list[VaultItem]:
        """Substring search over public items and the caller's own items.

        Role plays no part here.
        """
        def visible(item: VaultItem) -> bool:
            if item.is_public:
                return True
            return context.authenticated and item.owner_id == context.user_id

        return self.items.filter(
            lambda item: args.search_term in item.content and visible(item)
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_vault_item(
        self, args: CreateVaultItemArgs, context: SessionContext
    ) -> VaultItem:
        user_id = _require_session(context)
        return self.items.create(
            owner_id=user_id,
            content=args.content,
            is_public=args.is_public,
        )

    def make_vault_item_public(
        self, args: MakeVaultItemPublicArgs, context: SessionContext
    ) -> VaultItem:
        """Publish any item. Ownership is not checked."""
        user_id = _require_session(context)
        item = self.items.find(args.id)
        if item is None:
            raise ItemNotFound()
        item.is_public = True
        logger.info("Vault item published: id=%s by user=%s", item.id, user_id)
        return item
