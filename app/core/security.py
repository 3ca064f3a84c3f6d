# app/core/security.py
# Verifies identity-provider session tokens and resolves the caller's profile
import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Query, status, WebSocket, WebSocketException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.identity import IdentityProviderClient, IdentityProviderError, get_identity_client
from app.models.profile import Profile, ProfileStatusEnum
from app.repositories.profile_repo import ProfileRepository
from app.schemas.identity_schema import IdentityUser

logger = logging.getLogger(__name__)

# Token comes from the Authorization header
bearer_scheme = HTTPBearer(auto_error=False)


def claims_to_identity(claims: Dict[str, Any]) -> IdentityUser | None:
    """
    Map session-token claims to IdentityUser.
    Providers differ on claim names, so a few spellings are accepted.
    """
    user_id = claims.get("sub")
    if not user_id:
        return None

    full_name = claims.get("name") or claims.get("full_name")
    if not full_name:
        full_name = " ".join(
            part for part in (claims.get("first_name"), claims.get("last_name")) if part
        ) or None

    role = None
    for key in ("public_metadata", "metadata"):
        metadata = claims.get(key)
        if isinstance(metadata, dict) and metadata.get("role"):
            role = metadata["role"]
            break
    if role is None:
        role = claims.get("role")

    return IdentityUser(
        id=user_id,
        email=claims.get("email") or claims.get("email_address"),
        full_name=full_name,
        image_url=claims.get("image_url") or claims.get("picture"),
        role=role,
    )


def verify_session_token(token: str) -> IdentityUser | None:
    """
    Verify the JWT and return its IdentityUser, or None
    """
    options = {"verify_aud": False}
    try:
        payload = jwt.decode(
            token,
            settings.IDP_JWT_KEY,
            algorithms=[settings.IDP_JWT_ALGORITHM],
            issuer=settings.IDP_ISSUER,
            options=options,
        )
    except JWTError as e:
        logger.info(f"Session token rejected: {e}")
        return None

    try:
        return claims_to_identity(payload)
    except ValueError as e:
        # e.g. a malformed email claim
        logger.info(f"Session token claims rejected: {e}")
        return None


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    identity_client: IdentityProviderClient = Depends(get_identity_client),
) -> IdentityUser:
    """
    FastAPI dependency: verified identity of the caller (REST API)
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    identity = verify_session_token(credentials.credentials)
    if identity is None:
        raise credentials_exception

    # Short-lived tokens often carry only `sub`; complete them from the provider
    if identity.email is None and identity_client.enabled:
        try:
            provider_user = await identity_client.get_user(identity.id)
            identity = identity.merged_with(provider_user)
        except IdentityProviderError as e:
            logger.warning(f"Identity lookup failed for {identity.id}, using token claims only: {e}")

    return identity


async def get_current_profile(
    identity: IdentityUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """
    FastAPI dependency: the caller's synced profile
    """
    profile = await ProfileRepository(db).get_by_clerk_id(identity.id)
    if profile is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Profile not found, call /profiles/sync first")

    if profile.status != ProfileStatusEnum.active:
        raise HTTPException(status.HTTP_403_FORBIDDEN, f"This account is {profile.status.value}")

    return profile


async def require_admin(
    identity: IdentityUser = Depends(get_current_identity),
    profile: Profile = Depends(get_current_profile),
) -> Profile:
    """
    FastAPI dependency: caller must carry the admin role metadata
    """
    if identity.role != settings.ADMIN_ROLE:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Admin access required")
    return profile


async def get_identity_from_websocket_token(
    websocket: WebSocket,
    token: str = Query(...), # ?token=...
) -> IdentityUser:
    """
    WebSocket variant of get_current_identity
    """
    identity = verify_session_token(token)
    if identity is None:
        # Closes the handshake with 1008 before accept
        raise WebSocketException(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Could not validate credentials"
        )
    return identity
