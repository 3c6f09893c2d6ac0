"""
LifeStream Backend: Authorization Chain
=========================================

What:  Per-route request interceptors that establish and check the caller's
       identity before a handler runs.
How:   An AuthChain is an ordered list of interceptors exposed as a FastAPI
       dependency. Each interceptor receives the request, the identity built
       so far and the Database, and either returns the identity to continue
       or raises UnauthorizedError / ForbiddenError to short-circuit.

Chains used by the routes:
    require_token      verify_token
    require_admin      verify_token → RoleAuthorizer("admin")
    require_volunteer  verify_token → RoleAuthorizer("volunteer")

    Request ─▶ verify_token ─▶ [RoleAuthorizer] ─▶ route handler
                  │ 401             │ 403

The role authorizer does one `users` lookup per request; nothing is cached.
"""

import logging
from typing import Awaitable, Callable, Optional

from fastapi import Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from lifestream.database import Database, get_database
from lifestream.exceptions import ForbiddenError, UnauthorizedError
from lifestream.middleware.request_id import current_request_id
from lifestream.services.token_service import token_service
from lifestream.services.user_service import user_service

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class Identity(BaseModel):
    """
    Decoded token payload threaded through the chain.

    `email` is the only claim the API relies on; any other claims the
    issuer signed are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None


Interceptor = Callable[[Request, Optional[Identity], Database], Awaitable[Identity]]


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Return the token part of an `Authorization: Bearer <token>` header.

    Raises UnauthorizedError when the header or the token part is missing.
    """
    if not authorization:
        raise UnauthorizedError(context={"reason": "missing_header"})
    parts = authorization.split()
    if len(parts) < 2:
        raise UnauthorizedError(context={"reason": "missing_token"})
    scheme, token = parts[0], parts[1]
    if scheme.lower() != BEARER_SCHEME:
        raise UnauthorizedError(context={"reason": "unsupported_scheme"})
    return token


async def verify_token(
    request: Request, identity: Optional[Identity], db: Database
) -> Identity:
    """First interceptor of every chain: header → verified Identity."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    payload = token_service.verify(token)
    try:
        return Identity.model_validate(payload)
    except PydanticValidationError:
        raise UnauthorizedError(context={"reason": "malformed_claims"})


class RoleAuthorizer:
    """
    Interceptor admitting only callers whose stored user has `role`.

    Must run after verify_token.
    """

    def __init__(self, role: str):
        self.role = role

    async def __call__(
        self, request: Request, identity: Optional[Identity], db: Database
    ) -> Identity:
        if identity is None or not identity.email:
            raise ForbiddenError(context={"required_role": self.role})
        if not await user_service.has_role(db, identity.email, self.role):
            logger.warning(
                "[%s] %s denied: requires role '%s'",
                current_request_id(),
                identity.email,
                self.role,
            )
            raise ForbiddenError(context={"required_role": self.role})
        return identity

    def __repr__(self) -> str:
        return f"RoleAuthorizer({self.role!r})"


class AuthChain:
    """
    Ordered interceptors run as a single FastAPI dependency.

    The resulting Identity is returned to the handler and also stored on
    `request.state.identity`.

    Example:
        @router.get("/all-donations")
        async def all_donations(identity: Identity = Depends(require_admin)):
            ...
    """

    def __init__(self, *interceptors: Interceptor):
        if not interceptors:
            raise ValueError("AuthChain needs at least one interceptor")
        self.interceptors = interceptors

    async def __call__(
        self, request: Request, db: Database = Depends(get_database)
    ) -> Identity:
        identity: Optional[Identity] = None
        for interceptor in self.interceptors:
            identity = await interceptor(request, identity, db)
        request.state.identity = identity
        return identity


def ensure_self(identity: Identity, email: str) -> None:
    """Self-only routes: the path email must be the token subject's email."""
    if email != identity.email:
        raise ForbiddenError(context={"reason": "identity_mismatch"})


require_admin_role = RoleAuthorizer("admin")
require_volunteer_role = RoleAuthorizer("volunteer")

require_token = AuthChain(verify_token)
require_admin = AuthChain(verify_token, require_admin_role)
require_volunteer = AuthChain(verify_token, require_volunteer_role)
