"""Expiring allowance registry.

Per-(owner, spender) spending authorizations that stop working at their
expiry without a revoke. Expiry is applied lazily: the stored amount is left
in place and every read or pre-write check goes through the effective amount.
"""

import logging

from token_rights.clock import Clock
from token_rights.config import get_settings
from token_rights.exceptions import AllowanceExceededError, ArithmeticUnderflowError
from token_rights.expiry import expiry_from_period, is_live
from token_rights.models.allowance import Allowance
from token_rights.models.events import AllowanceExpirationUpdated, TokenApproval
from token_rights.registry.validation import require_address, require_non_negative
from token_rights.services.event_log import EventLog

logger = logging.getLogger(__name__)


class ExpiringAllowanceRegistry:
    """Tracks allowances with timestamp-based expiry.

    Provides:
    - approve / increase / decrease with an optional period
    - effective allowance and stored expiry queries
    - spend_allowance for transfer-from consumers
    """

    def __init__(
        self,
        clock: Clock,
        events: EventLog | None = None,
        default_expiration: int | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            clock: Source of the current time
            events: Where notifications go (a private log if omitted)
            default_expiration: Seconds used when no period is given
                (falls back to settings)
        """
        if default_expiration is None:
            default_expiration = get_settings().default_expiration
        require_non_negative(default_expiration, "default_expiration")

        # In-memory storage: (owner, spender) -> Allowance
        self._allowances: dict[tuple[str, str], Allowance] = {}
        self._clock = clock
        self._events = events if events is not None else EventLog()
        self._default_expiration = default_expiration

    @property
    def events(self) -> EventLog:
        return self._events

    def default_expiration(self) -> int:
        """Period applied when approve is called without one."""
        return self._default_expiration

    def approve(
        self,
        owner: str,
        spender: str,
        amount: int,
        period: int | None = None,
    ) -> bool:
        """Set an allowance, overwriting any previous one.

        Args:
            owner: Address whose funds are authorized
            spender: Address allowed to spend them
            amount: New allowance
            period: Seconds until expiry (default_expiration if None)

        Returns:
            True on success

        Raises:
            ValidityError: On bad addresses, negative amount or period
        """
        require_address(owner, "owner")
        require_address(spender, "spender")
        require_non_negative(amount, "amount")

        now = self._clock.now()
        if period is None:
            period = self._default_expiration
        expires_at = expiry_from_period(now, period)

        self._write(owner, spender, amount, expires_at, now)
        logger.info(
            f"Approved {spender} for {amount} from {owner}, expires at {expires_at}"
        )
        return True

    def increase_allowance(
        self,
        owner: str,
        spender: str,
        added_value: int,
        period: int | None = None,
    ) -> bool:
        """Add to the effective allowance.

        An expired allowance counts as zero before the addition. Without a
        period the current expiry is kept while the allowance is live and the
        default applies once it has expired.

        Returns:
            True on success
        """
        require_address(owner, "owner")
        require_address(spender, "spender")
        require_non_negative(added_value, "added_value")

        now = self._clock.now()
        current = self._get_row(owner, spender)
        expires_at = self._next_expiry(current, now, period)
        new_amount = self._effective(current, now) + added_value

        self._write(owner, spender, new_amount, expires_at, now)
        logger.info(
            f"Increased allowance of {spender} from {owner} by {added_value} "
            f"to {new_amount}, expires at {expires_at}"
        )
        return True

    def decrease_allowance(
        self,
        owner: str,
        spender: str,
        subtracted_value: int,
        period: int | None = None,
    ) -> bool:
        """Subtract from the effective allowance.

        Returns:
            True on success

        Raises:
            ArithmeticUnderflowError: If subtracted_value exceeds the
                effective (expiry-aware) amount
        """
        require_address(owner, "owner")
        require_address(spender, "spender")
        require_non_negative(subtracted_value, "subtracted_value")

        now = self._clock.now()
        current = self._get_row(owner, spender)
        expires_at = self._next_expiry(current, now, period)
        available = self._effective(current, now)
        if subtracted_value > available:
            logger.warning(
                f"Decrease of {subtracted_value} rejected for {spender} from {owner}: "
                f"effective allowance is {available}"
            )
            raise ArithmeticUnderflowError(available, subtracted_value)

        new_amount = available - subtracted_value
        self._write(owner, spender, new_amount, expires_at, now)
        logger.info(
            f"Decreased allowance of {spender} from {owner} by {subtracted_value} "
            f"to {new_amount}, expires at {expires_at}"
        )
        return True

    def allowance(self, owner: str, spender: str) -> int:
        """Effective allowance right now (0 once expired)."""
        return self.allowance_at(owner, spender, self._clock.now())

    def allowance_at(self, owner: str, spender: str, now: int) -> int:
        """Effective allowance at a given time."""
        return self._effective(self._get_row(owner, spender), now)

    def allowance_expiration(self, owner: str, spender: str) -> int:
        """Stored expiry for the pair, 0 if never set."""
        row = self._get_row(owner, spender)
        return row.expires_at if row else 0

    def get_allowance(self, owner: str, spender: str) -> Allowance | None:
        """Raw stored row (amount may be stale past expiry)."""
        row = self._get_row(owner, spender)
        return row.model_copy() if row else None

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        """Consume part of an allowance.

        Decrements the stored amount; the expiry is left alone.

        Raises:
            AllowanceExceededError: If amount exceeds the effective allowance
        """
        self.spend_at(owner, spender, amount, self._clock.now())

    def spend_at(self, owner: str, spender: str, amount: int, now: int) -> None:
        """Consume part of an allowance as of a given time."""
        require_non_negative(amount, "amount")

        row = self._get_row(owner, spender)
        available = self._effective(row, now)
        if amount > available:
            logger.warning(
                f"Spend of {amount} by {spender} from {owner} rejected: "
                f"effective allowance is {available}"
            )
            raise AllowanceExceededError(owner, spender, amount, available)

        if row is not None and amount:
            row.amount = available - amount
        logger.debug(f"{spender} spent {amount} of {owner}'s allowance")

    def _get_row(self, owner: str, spender: str) -> Allowance | None:
        return self._allowances.get((owner, spender))

    @staticmethod
    def _effective(row: Allowance | None, now: int) -> int:
        return row.effective(now) if row else 0

    def _next_expiry(self, row: Allowance | None, now: int, period: int | None) -> int:
        """Expiry to store after an increase or decrease."""
        if period is not None:
            return expiry_from_period(now, period)
        if row is not None and is_live(row.expires_at, now):
            return row.expires_at
        return expiry_from_period(now, self._default_expiration)

    def _write(
        self, owner: str, spender: str, amount: int, expires_at: int, now: int
    ) -> None:
        self._allowances[(owner, spender)] = Allowance(
            owner=owner,
            spender=spender,
            amount=amount,
            expires_at=expires_at,
        )
        self._events.emit(
            TokenApproval(owner=owner, spender=spender, value=amount, timestamp=now)
        )
        self._events.emit(
            AllowanceExpirationUpdated(
                owner=owner,
                spender=spender,
                value=amount,
                expire_at=expires_at,
                timestamp=now,
            )
        )
