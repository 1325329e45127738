"""Rolling expiry window used by the expiring-soon query."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo


@dataclass(frozen=True)
class ExpiryWindow:
    """Inclusive UTC range of expiry dates considered "soon"."""

    start: datetime
    end: datetime


def ensure_utc(moment: datetime) -> datetime:
    """Return the moment as an aware UTC datetime; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def expiry_window(now: datetime, days: int, zone: tzinfo = UTC) -> ExpiryWindow:
    """Build the window from ``now`` through ``now`` plus ``days`` calendar days.

    The days are added on the wall clock of ``zone``, so month rollover is
    handled and a DST change inside the window keeps the time of day. Both
    bounds are returned in UTC for comparison with stored dates.
    """
    local_now = ensure_utc(now).astimezone(zone)
    local_end = local_now + timedelta(days=days)
    return ExpiryWindow(start=local_now.astimezone(UTC), end=local_end.astimezone(UTC))
