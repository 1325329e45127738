"""Domain models for verified callers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class VerifiedIdentity:
    """Claims returned by the identity provider for a valid token."""

    subject: str
    email: str | None
