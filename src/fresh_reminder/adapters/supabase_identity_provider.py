"""Supabase Auth implementation of the identity provider."""

import asyncio
import logging
from dataclasses import dataclass

import httpx
from supabase import AuthError, AuthRetryableError, Client

from fresh_reminder.domain.errors import IdentityProviderUnavailable, Unauthorized
from fresh_reminder.domain.identity import VerifiedIdentity
from fresh_reminder.services.access import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Validates access tokens against Supabase Auth."""

    client: Client

    async def verify_token(self, token: str) -> VerifiedIdentity:
        """Resolve the token to its user; the provider checks signature and expiry."""
        try:
            response = await asyncio.to_thread(self.client.auth.get_user, token)
        except AuthRetryableError as exc:
            logger.warning("Identity provider unavailable: %s", exc)
            raise IdentityProviderUnavailable from exc
        except AuthError as exc:
            raise Unauthorized from exc
        except httpx.TransportError as exc:
            logger.warning("Identity provider unreachable: %s", exc)
            raise IdentityProviderUnavailable from exc
        if response is None or response.user is None:
            raise Unauthorized
        user = response.user
        return VerifiedIdentity(subject=str(user.id), email=user.email or None)
