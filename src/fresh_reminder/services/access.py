"""Identity verification and ownership checks for protected routes."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from fresh_reminder.domain.errors import AccessError, Forbidden, Unauthorized
from fresh_reminder.domain.identity import VerifiedIdentity

logger = logging.getLogger(__name__)

AccessCheck = Callable[[VerifiedIdentity], AccessError | None]


class IdentityProvider(Protocol):
    """Interface for the external identity provider."""

    async def verify_token(self, token: str) -> VerifiedIdentity:
        """Validate a bearer token and return its claims.

        Raises Unauthorized for invalid or expired tokens.
        """


@dataclass(frozen=True)
class Granted:
    """Every check passed; carries the verified caller."""

    identity: VerifiedIdentity


@dataclass(frozen=True)
class Denied:
    """A check failed; carries the first failure."""

    error: AccessError


AccessResult = Granted | Denied


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise Unauthorized
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise Unauthorized
    return token


def owns(email: str | None) -> AccessCheck:
    """Build a check that the caller's email claim equals ``email``."""

    def check(identity: VerifiedIdentity) -> AccessError | None:
        if identity.email is None or email is None or identity.email != email:
            return Forbidden()
        return None

    return check


@dataclass
class AccessService:
    """Runs identity verification followed by capability checks."""

    identity_provider: IdentityProvider

    async def verify(self, authorization: str | None) -> VerifiedIdentity:
        """Verify the bearer credential; every call reaches the provider."""
        token = parse_bearer(authorization)
        return await self.identity_provider.verify_token(token)

    async def authorize(
        self, authorization: str | None, checks: Sequence[AccessCheck] = ()
    ) -> AccessResult:
        """Verify the caller, then apply ``checks`` in order.

        Stops at the first failure and returns it as ``Denied``.
        """
        try:
            identity = await self.verify(authorization)
        except AccessError as exc:
            logger.info("Rejected credential: %s", exc.message)
            return Denied(exc)
        for check in checks:
            error = check(identity)
            if error is not None:
                logger.info(
                    "Access check failed", extra={"subject": identity.subject}
                )
                return Denied(error)
        return Granted(identity)
