"""Lazy expiration helpers.

Nothing is ever swept on a timer. Callers re-derive the usable value from
(stored value, stored expiry, now) on every read and before every write.
"""

from token_rights.exceptions import ValidityError

# Hard ceiling on how far ahead a privilege may expire
MAX_PRIVILEGE_PERIOD = 30 * 24 * 60 * 60


def is_live(expires_at: int, now: int) -> bool:
    """Whether an allowance is still usable (strictly before its expiry)."""
    return now < expires_at


def effective_amount(stored: int, expires_at: int, now: int) -> int:
    """Stored amount if the allowance is live, else 0."""
    return stored if is_live(expires_at, now) else 0


def privilege_active(expires_at: int, now: int) -> bool:
    """Whether a privilege slot is still held by its holder.

    Inclusive at the boundary: a slot expiring at ``now`` is still active.
    """
    return expires_at >= now


def expiry_from_period(now: int, period: int) -> int:
    """Absolute expiry for a relative period.

    Raises:
        ValidityError: If period is negative
    """
    if period < 0:
        raise ValidityError(f"Period must be non-negative, got {period}")
    return now + period


def privilege_expiry_ceiling(now: int) -> int:
    """Exclusive upper bound for a privilege expiry set at ``now``."""
    return now + MAX_PRIVILEGE_PERIOD
