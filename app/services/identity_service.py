import logging
from typing import Optional

import httpx

from app.core.config import settings
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """The external identity provider could not be reached."""


class IdentityService:
    """Resolves the caller behind a bearer token.

    With AUTH_PROVIDER_URL and AUTH_PROVIDER_KEY set the token is checked
    against the provider's ``/auth/v1/user`` endpoint; otherwise it must be
    one of this service's own access tokens.
    """

    def __init__(
            self,
            provider_url: Optional[str] = None,
            provider_key: Optional[str] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        url = provider_url if provider_url is not None else settings.AUTH_PROVIDER_URL
        self.provider_url = url.rstrip("/") if url else None
        self.provider_key = provider_key if provider_key is not None else settings.AUTH_PROVIDER_KEY
        self._transport = transport

    @property
    def uses_provider(self) -> bool:
        return bool(self.provider_url and self.provider_key)

    async def resolve_subject(self, token: str) -> Optional[str]:
        """Subject (user id) of a valid token, None for an invalid one."""
        if not token:
            return None

        if not self.uses_provider:
            user_id = auth_service.decode_access_token(token)
            return str(user_id) if user_id is not None else None

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.provider_url}/auth/v1/user",
                    headers={
                        "Authorization": f"Bearer {token}",
                        "apikey": self.provider_key,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity provider request failed: {e}")
            raise IdentityProviderError(str(e)) from e

        if response.status_code != 200:
            return None
        try:
            subject = response.json().get("id")
        except ValueError:
            return None
        return str(subject) if subject else None


identity_service = IdentityService()
