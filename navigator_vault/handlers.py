"""
Vault Transport — aiohttp application exposing the vault operations.

``POST /graphql`` takes ``{"operation": "<name>", "variables": {...}}``.
The ``Authorization`` header (``Bearer <token>`` or the raw token) is
resolved into a SessionContext by middleware before the operation runs.

Responses:
    success        200  {"data": {"<name>": <result>}}
    vault error    200  {"data": {"<name>": null}, "errors": [{"message": ...}]}
    bad request    400  {"errors": [{"message": ...}]}
    too large      413  {"errors": [{"message": "Request body too large"}]}
    unexpected     500  {"errors": [{"message": "Internal server error"}]}

Only error messages are rendered, never tracebacks.
"""
import time
import logging
from collections.abc import Callable
from typing import Any, Optional

import orjson
from aiohttp import web

from .conf import AUTH_HEADER, GRAPHQL_PATH, MAX_BODY_SIZE, SESSION_CONTEXT
from .config import VaultSettings
from .exceptions import VaultError
from .models import AuthPayload, Identity, VaultItem
from .policy import AccessPolicy
from .resolver import SessionResolver
from .stores import CredentialStore, build_stores
from .tokens import TokenService

logger = logging.getLogger("navigator.vault")

VAULT_POLICY = web.AppKey("vault_policy", AccessPolicy)
VAULT_RESOLVER = web.AppKey("vault_resolver", SessionResolver)


def _dumps(obj: Any) -> str:
    return orjson.dumps(obj).decode("utf-8")


def _json(payload: dict, status: int = 200) -> web.Response:
    return web.json_response(payload, status=status, dumps=_dumps)


def _errors(message: str, status: int) -> web.Response:
    return _json({"errors": [{"message": message}]}, status=status)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_user(identity: Optional[Identity]) -> Optional[dict]:
    if identity is None:
        return None
    return {
        "id": str(identity.id),
        "username": identity.username,
        "role": identity.role.value,
    }


def render_item(item: VaultItem, credentials: CredentialStore) -> dict:
    return {
        "id": str(item.id),
        "content": item.content,
        "isPublic": item.is_public,
        "owner": render_user(credentials.get(item.owner_id)),
    }


def render_result(result: Any, credentials: CredentialStore) -> Any:
    """Render an operation result into JSON-ready data.

    Identity secrets and item owner ids are never included.
    """
    if isinstance(result, AuthPayload):
        return {"token": result.token, "user": render_user(result.user)}
    if isinstance(result, VaultItem):
        return render_item(result, credentials)
    if isinstance(result, list):
        return [render_result(value, credentials) for value in result]
    return result


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPRequestEntityTooLarge:
        return _errors("Request body too large", status=413)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _errors("Internal server error", status=500)


@web.middleware
async def session_middleware(request: web.Request, handler) -> web.StreamResponse:
    resolver = request.app[VAULT_RESOLVER]
    request[SESSION_CONTEXT] = resolver.resolve(request.headers.get(AUTH_HEADER))
    return await handler(request)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def graphql(request: web.Request) -> web.Response:
    try:
        body = orjson.loads(await request.read())
    except orjson.JSONDecodeError:
        return _errors("Malformed request body", status=400)
    if not isinstance(body, dict) or not isinstance(body.get("operation"), str):
        return _errors("Missing operation name", status=400)
    variables = body.get("variables") or {}
    if not isinstance(variables, dict):
        return _errors("Variables must be an object", status=400)

    name = body["operation"]
    policy = request.app[VAULT_POLICY]
    try:
        result = policy.execute(name, variables, request[SESSION_CONTEXT])
    except VaultError as err:
        return _json({"data": {name: None}, "errors": [{"message": err.message}]})
    return _json({"data": {name: render_result(result, policy.credentials)}})


def create_app(
    settings: VaultSettings,
    clock: Callable[[], float] = time.time,
) -> web.Application:
    """Build the vault application with seeded stores.

    Args:
        settings: Validated settings.
        clock: Time source for the token service.

    Returns:
        aiohttp Application serving ``POST /graphql``.
    """
    credentials, items = build_stores(settings)
    tokens = TokenService(settings.secret_key, ttl=settings.token_ttl, clock=clock)
    app = web.Application(
        middlewares=[error_middleware, session_middleware],
        client_max_size=MAX_BODY_SIZE,
    )
    app[VAULT_RESOLVER] = SessionResolver(tokens, credentials)
    app[VAULT_POLICY] = AccessPolicy(credentials, items, tokens)
    app.router.add_post(GRAPHQL_PATH, graphql)
    return app
