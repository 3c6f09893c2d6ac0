"""
LifeStream Backend: Token Service
===================================

What:  Issues and verifies the signed, time-limited access tokens.
How:   PyJWT with an HMAC secret from settings. Issued tokens carry the
       caller's claim payload plus `iat` and `exp` (1 hour by default).
Who:   `POST /jwt` issues; the auth chain verifies.

Issuing is deliberately decoupled from authentication: whatever claims the
caller posts are signed. Trust rests on who can reach `POST /jwt`.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

import jwt

from lifestream.config import settings
from lifestream.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class TokenService:
    """
    Stateless signer/verifier.

    Secret, algorithm and lifetime default to the live settings values at
    call time, so a settings change (or a test override) takes effect
    without rebuilding the service.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expires_in: Optional[int] = None,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @property
    def secret(self) -> str:
        return self._secret if self._secret is not None else settings.access_token_secret

    @property
    def algorithm(self) -> str:
        return self._algorithm or settings.jwt_algorithm

    @property
    def expires_in(self) -> int:
        return self._expires_in or settings.access_token_expire_seconds

    def issue(self, claims: Mapping[str, Any]) -> str:
        """
        Sign `claims` and return the compact token string.

        Any `iat`/`exp` in the payload is replaced by the issuer's own.
        """
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + timedelta(seconds=self.expires_in)
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        logger.info("Issued access token for %s", payload.get("email", "<no email>"))
        return token

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify `token`.

        Raises:
            UnauthorizedError: bad signature, malformed token or expired
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired access token")
            raise UnauthorizedError(context={"reason": "expired"})
        except jwt.InvalidTokenError as e:
            logger.info("Rejected invalid access token: %s", type(e).__name__)
            raise UnauthorizedError(context={"reason": type(e).__name__})


token_service = TokenService()
