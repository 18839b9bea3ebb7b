"""Fungible token ledger with expiring allowances."""

import logging

from token_rights.clock import Clock
from token_rights.exceptions import AllowanceExceededError, InsufficientBalanceError
from token_rights.models.events import ZERO_ADDRESS, TokenTransfer
from token_rights.registry.allowance_registry import ExpiringAllowanceRegistry
from token_rights.registry.validation import require_address, require_non_negative
from token_rights.services.event_log import EventLog

logger = logging.getLogger(__name__)


class ExpiringToken:
    """Balances plus an ExpiringAllowanceRegistry for delegated spending.

    The allowance operations are exposed directly so callers can treat the
    token as the single contract surface.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        clock: Clock,
        decimals: int = 18,
        events: EventLog | None = None,
        default_expiration: int | None = None,
    ) -> None:
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._clock = clock
        self._events = events if events is not None else EventLog()
        self._balances: dict[str, int] = {}
        self._total_supply = 0
        self.allowances = ExpiringAllowanceRegistry(
            clock=clock,
            events=self._events,
            default_expiration=default_expiration,
        )

    @property
    def events(self) -> EventLog:
        return self._events

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, to: str, amount: int) -> None:
        """Create new tokens for an account."""
        require_address(to, "recipient")
        require_non_negative(amount, "amount")

        self._balances[to] = self.balance_of(to) + amount
        self._total_supply += amount
        self._events.emit(
            TokenTransfer(
                sender=ZERO_ADDRESS,
                recipient=to,
                value=amount,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Minted {amount} {self.symbol} to {to}")

    def burn(self, account: str, amount: int) -> None:
        """Destroy tokens held by an account.

        Raises:
            InsufficientBalanceError: If the account holds less than amount
        """
        require_non_negative(amount, "amount")
        balance = self.balance_of(account)
        if amount > balance:
            raise InsufficientBalanceError(account, amount, balance)

        self._balances[account] = balance - amount
        self._total_supply -= amount
        self._events.emit(
            TokenTransfer(
                sender=account,
                recipient=ZERO_ADDRESS,
                value=amount,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Burned {amount} {self.symbol} from {account}")

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move tokens from the caller to another account.

        Raises:
            InsufficientBalanceError: If sender holds less than amount
        """
        require_address(sender, "sender")
        require_address(to, "recipient")
        require_non_negative(amount, "amount")
        self._check_balance(sender, amount)

        self._move(sender, to, amount, self._clock.now())
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move an owner's tokens using the spender's allowance.

        Both the allowance and the balance are checked before anything is
        written.

        Raises:
            AllowanceExceededError: If amount exceeds the effective allowance
            InsufficientBalanceError: If owner holds less than amount
        """
        require_address(owner, "owner")
        require_address(to, "recipient")
        require_non_negative(amount, "amount")

        now = self._clock.now()
        available = self.allowances.allowance_at(owner, spender, now)
        if amount > available:
            logger.warning(
                f"transfer_from by {spender} rejected: {amount} exceeds allowance {available}"
            )
            raise AllowanceExceededError(owner, spender, amount, available)
        self._check_balance(owner, amount)

        self.allowances.spend_at(owner, spender, amount, now)
        self._move(owner, to, amount, now)
        return True

    # Allowance surface

    def default_expiration(self) -> int:
        return self.allowances.default_expiration()

    def approve(
        self, owner: str, spender: str, value: int, period: int | None = None
    ) -> bool:
        return self.allowances.approve(owner, spender, value, period)

    def increase_allowance(
        self, owner: str, spender: str, added_value: int, period: int | None = None
    ) -> bool:
        return self.allowances.increase_allowance(owner, spender, added_value, period)

    def decrease_allowance(
        self, owner: str, spender: str, subtracted_value: int, period: int | None = None
    ) -> bool:
        return self.allowances.decrease_allowance(owner, spender, subtracted_value, period)

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.allowance(owner, spender)

    def allowance_expiration(self, owner: str, spender: str) -> int:
        return self.allowances.allowance_expiration(owner, spender)

    def _check_balance(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if amount > balance:
            logger.warning(
                f"Transfer of {amount} from {account} rejected: balance is {balance}"
            )
            raise InsufficientBalanceError(account, amount, balance)

    def _move(self, sender: str, to: str, amount: int, now: int) -> None:
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[to] = self.balance_of(to) + amount
        self._events.emit(
            TokenTransfer(
                sender=sender,
                recipient=to,
                value=amount,
                timestamp=now,
            )
        )
        logger.info(f"Transferred {amount} {self.symbol} from {sender} to {to}")
