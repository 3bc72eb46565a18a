# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Turns the Bearer token of a request into an AuthUser.
#
# Supabase projects sign access tokens either with:
# - ES256 keys published at <SUPABASE_URL>/auth/v1/.well-known/jwks.json
# - the legacy HS256 secret (SUPABASE_JWT_SECRET)
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/songs")
#   async def list_songs(user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

import logging
import time
from typing import Any

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from app.auth.models import AuthUser, TokenPayload
from app.config import settings

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

AUDIENCE = "authenticated"
JWKS_CACHE_TTL = 3600  # 1 hour


class JwksCache:
    """
    Public signing keys of the Supabase project.

    Keys are refetched at most once per `ttl` seconds. When a refresh fails
    the previous keys stay in use.
    """

    def __init__(self, ttl: float = JWKS_CACHE_TTL):
        self.ttl = ttl
        self._keys: list[dict[str, Any]] = []
        self._fetched_at = 0.0

    @property
    def url(self) -> str:
        return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    def keys(self) -> list[dict[str, Any]]:
        if self._keys and time.time() - self._fetched_at < self.ttl:
            return self._keys
        try:
            response = httpx.get(self.url, timeout=10)
            response.raise_for_status()
            self._keys = response.json().get("keys", [])
            self._fetched_at = time.time()
            logger.debug(f"Fetched {len(self._keys)} signing key(s) from {self.url}")
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch JWKS: {e}")
        return self._keys

    def find(self, kid: str) -> dict[str, Any] | None:
        return next((key for key in self.keys() if key.get("kid") == kid), None)

    def clear(self) -> None:
        self._keys = []
        self._fetched_at = 0.0


jwks = JwksCache()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_signing_key(token: str) -> tuple[str | dict[str, Any], str]:
    """
    Pick the key and algorithm to verify `token` with.

    Tokens that name a known JWKS key id are checked against that key;
    everything else falls back to the HS256 project secret.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg != "HS256" and kid:
        key = jwks.find(kid)
        if key is not None:
            return key, alg
        logger.warning(f"No JWKS key for alg={alg}, kid={kid}, falling back to HS256")

    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no usable subject
    """
    key, algorithm = _get_signing_key(token)
    try:
        claims = jwt.decode(token, key, algorithms=[algorithm], audience=AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    try:
        user = AuthUser.from_token(TokenPayload.model_validate(claims))
    except ValidationError:
        logger.warning("JWT token missing required claims")
        raise _unauthorized("Invalid token: missing user ID")
    except ValueError:
        logger.warning(f"Invalid UUID in token: {claims.get('sub')}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Extract and validate the user from the Bearer token.

    Returns:
        AuthUser: The authenticated user (owner identity for all queries)

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    return decode_token(credentials.credentials)
