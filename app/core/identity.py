# app/core/identity.py
# Identity provider backend API client: fetches the account record
# (email, name, avatar, role metadata) when session tokens omit them
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.schemas.identity_schema import IdentityUser

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10.0


class IdentityProviderError(Exception):
    """The provider API could not be reached or refused the lookup"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def parse_provider_user(data: Dict[str, Any]) -> IdentityUser:
    """
    Map a provider user record to IdentityUser.

    The record lists every address under `email_addresses`. The primary
    one is named by `primary_email_address_id`; fall back to the first.
    """
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    email = None
    for address in addresses:
        if address.get("id") == primary_id:
            email = address.get("email_address")
            break
    if email is None and addresses:
        email = addresses[0].get("email_address")

    full_name = " ".join(
        part for part in (data.get("first_name"), data.get("last_name")) if part
    ) or None

    public_metadata = data.get("public_metadata") or {}

    return IdentityUser(
        id=data["id"],
        email=email,
        full_name=full_name,
        image_url=data.get("image_url") or data.get("profile_image_url"),
        role=public_metadata.get("role"),
    )


class IdentityProviderClient:
    def __init__(
        self,
        base_url: str,
        secret_key: Optional[str],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.secret_key = secret_key
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.secret_key)

    async def get_user(self, user_id: str) -> IdentityUser:
        """GET /users/{user_id}"""
        if not self.enabled:
            raise IdentityProviderError("Identity provider secret key is not configured")

        headers = {"Authorization": f"Bearer {self.secret_key}"}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=REQUEST_TIMEOUT_SECONDS,
                transport=self._transport,
            ) as client:
                response = await client.get(f"/users/{user_id}")
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Identity provider request failed: {e}") from e

        if response.status_code != 200:
            raise IdentityProviderError(
                f"Identity provider returned {response.status_code} for user {user_id}",
                status_code=response.status_code,
            )

        try:
            return parse_provider_user(response.json())
        except (ValueError, KeyError) as e:
            # ValueError covers bad JSON and pydantic ValidationError
            raise IdentityProviderError(f"Unusable identity record for user {user_id}: {e}") from e


_client: Optional[IdentityProviderClient] = None


def get_identity_client() -> IdentityProviderClient:
    """FastAPI Dependency: shared provider client built from settings"""
    global _client
    if _client is None:
        _client = IdentityProviderClient(settings.IDP_API_URL, settings.IDP_SECRET_KEY)
    return _client
