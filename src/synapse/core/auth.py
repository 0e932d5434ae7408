"""OIDC bearer token verification utilities.

Provides a FastAPI dependency ``get_current_user`` that validates an incoming
Authorization: Bearer <token> header against the configured issuer and
resolves it to a local ``User``.

If authentication is disabled via settings.auth_enabled, the dependency returns
None and routes skip their ownership checks.

Implementation notes:
* JWKS are fetched from https://<domain>/.well-known/jwks.json and cached.
* We use python-jose for JWT verification.
* Only tokens signed with RS256 are expected (default).
* The ``email`` claim is the primary link to a local user record; the ``sub``
  claim is mapped to a stable UUID used when the user has to be provisioned.
"""
from __future__ import annotations

import time
import uuid
import httpx
from functools import lru_cache
from typing import Any, Optional
from jose import jwt
from fastapi import Depends, HTTPException, status
from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.core.config import get_settings
from synapse.db.session import get_db
from synapse.models.user import User
from synapse.repositories.user import (
    get_by_id as repo_get_by_id,
    get_by_email as repo_get_by_email,
    create as repo_create,
)

class JWKSCache:
    def __init__(self, ttl_seconds: int) -> None:
        self._ttl = ttl_seconds
        self._expires_at = 0.0
        self._jwks: dict[str, Any] | None = None

    async def get(self, domain: str) -> dict[str, Any]:
        now = time.time()
        if self._jwks and now < self._expires_at:
            return self._jwks
        url = f"https://{domain.rstrip('/')}/.well-known/jwks.json"
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.get(url)
            if resp.status_code != 200:
                raise RuntimeError(f"Failed to fetch JWKS: {resp.status_code}")
            data = resp.json()
        self._jwks = data
        self._expires_at = now + self._ttl
        return data

@lru_cache
def _jwks_cache(ttl: int) -> JWKSCache:
    return JWKSCache(ttl)

async def _verify_token(token: str, settings) -> dict[str, Any]:
    if not settings.auth_domain or not settings.auth_api_audience:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Auth not configured")
    # Basic structural validation of JWT
    if token.count('.') != 2:
        raise HTTPException(status_code=401, detail="Malformed bearer token")
    issuer = settings.auth_issuer
    domain = issuer[len("https://"):].rstrip('/')
    cache = _jwks_cache(settings.auth_jwks_cache_ttl_seconds)
    jwks = await cache.get(domain)
    unverified_header = jwt.get_unverified_header(token)
    kid = unverified_header.get("kid")
    if not kid:
        raise HTTPException(status_code=401, detail="Missing kid header")
    key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
    if not key:
        raise HTTPException(status_code=401, detail="Unknown kid")
    claims = jwt.decode(
        token,
        key,
        algorithms=settings.auth_algorithms,
        audience=settings.auth_api_audience,
        issuer=issuer,
    )
    return claims

def subject_to_user_id(subject: str) -> uuid.UUID:
    """Map an external ``sub`` claim to a stable UUID (the claim itself if it is one)."""
    try:
        return uuid.UUID(subject)
    except ValueError:
        return uuid.uuid5(uuid.NAMESPACE_URL, f"oidc:{subject}")

async def get_current_user(
    authorization: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db),
    settings = Depends(get_settings),
    request: Request = None,  # FastAPI injects Request; default keeps signature simple
) -> Optional[User]:
    """Validate bearer token and return the associated local User.

    If auth disabled, returns None.
    """
    if not settings.auth_enabled:
        return None
    # If middleware already validated the token it will have placed claims on request.state
    if request is not None and hasattr(request.state, "verified_claims"):
        claims = request.state.verified_claims  # type: ignore
    else:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Unauthorized Access")
        token = authorization[len("Bearer "):].strip()
        try:
            claims = await _verify_token(token, settings)
        except HTTPException:
            raise
        except Exception as e:  # catch broader jose/httpx errors
            raise HTTPException(status_code=401, detail="Unauthorized Access") from e

    external_sub = claims.get("sub")
    email = claims.get("email")
    if not external_sub:
        raise HTTPException(status_code=401, detail="Missing sub claim")

    user = await repo_get_by_email(session, email) if email else None
    if not user:
        user_id = subject_to_user_id(external_sub)
        user = await repo_get_by_id(session, user_id)
    if not user:
        if not email:
            raise HTTPException(status_code=404, detail="User not provisioned and email missing")
        # Auto-provision
        user = await repo_create(
            session,
            email=email,
            id=user_id,
            name=claims.get("name") or "",
            user_image=claims.get("picture"),
        )
        await session.commit()
    return user

__all__ = ["get_current_user", "subject_to_user_id"]
