"""Single-owner item registry.

The ownership layer privileges hang off: owner lookup, per-item approval and
operator approval for all of an owner's items.
"""

import logging
from typing import Callable

from token_rights.clock import Clock
from token_rights.exceptions import (
    AuthorizationError,
    ItemExistsError,
    ItemNotFoundError,
    ValidityError,
)
from token_rights.models.events import (
    ZERO_ADDRESS,
    ApprovalForAll,
    ItemApproval,
    ItemTransfer,
)
from token_rights.registry.validation import require_address
from token_rights.services.event_log import EventLog

logger = logging.getLogger(__name__)


class ItemRegistry:
    """Tracks item owners and approvals."""

    def __init__(self, clock: Clock, events: EventLog | None = None) -> None:
        self._clock = clock
        self._events = events if events is not None else EventLog()
        self._owners: dict[int, str] = {}
        self._balances: dict[str, int] = {}
        self._token_approvals: dict[int, str] = {}
        # (owner, operator) pairs with approval for all
        self._operator_approvals: set[tuple[str, str]] = set()
        self._burn_listeners: list[Callable[[int], None]] = []

    @property
    def events(self) -> EventLog:
        return self._events

    def add_burn_listener(self, listener: Callable[[int], None]) -> None:
        """Register a callback run with the token id whenever an item is burned."""
        self._burn_listeners.append(listener)

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def owner_of(self, token_id: int) -> str:
        """Current owner of an item.

        Raises:
            ItemNotFoundError: If the item was never minted or was burned
        """
        owner = self._owners.get(token_id)
        if owner is None:
            raise ItemNotFoundError(token_id)
        return owner

    def balance_of(self, owner: str) -> int:
        return self._balances.get(owner, 0)

    def mint(self, to: str, token_id: int) -> None:
        """Create an item owned by ``to``."""
        require_address(to, "recipient")
        if token_id < 0:
            raise ValidityError(f"token_id must be non-negative, got {token_id}")
        if token_id in self._owners:
            raise ItemExistsError(token_id)

        self._owners[token_id] = to
        self._balances[to] = self.balance_of(to) + 1
        self._events.emit(
            ItemTransfer(
                sender=ZERO_ADDRESS,
                recipient=to,
                token_id=token_id,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Minted item {token_id} to {to}")

    def burn(self, caller: str, token_id: int) -> None:
        """Destroy an item. Caller must be approved or the owner."""
        owner = self.owner_of(token_id)
        if not self.is_approved_or_owner(caller, token_id):
            raise AuthorizationError(caller, f"burn item {token_id}")

        del self._owners[token_id]
        self._token_approvals.pop(token_id, None)
        self._balances[owner] -= 1
        for listener in self._burn_listeners:
            listener(token_id)
        self._events.emit(
            ItemTransfer(
                sender=owner,
                recipient=ZERO_ADDRESS,
                token_id=token_id,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Burned item {token_id} owned by {owner}")

    def approve(self, caller: str, to: str | None, token_id: int) -> None:
        """Approve ``to`` for a single item, or clear the approval with None.

        Caller must be the owner or an operator approved for all.
        """
        owner = self.owner_of(token_id)
        if to == owner:
            raise ValidityError("Approval to the current owner")
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise AuthorizationError(caller, f"approve item {token_id}")

        if to:
            self._token_approvals[token_id] = to
        else:
            self._token_approvals.pop(token_id, None)
        self._events.emit(
            ItemApproval(
                owner=owner,
                approved=to,
                token_id=token_id,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Item {token_id} approval set to {to}")

    def get_approved(self, token_id: int) -> str | None:
        self.owner_of(token_id)
        return self._token_approvals.get(token_id)

    def set_approval_for_all(self, caller: str, operator: str, approved: bool) -> None:
        """Grant or revoke an operator for all of the caller's items."""
        require_address(operator, "operator")
        if operator == caller:
            raise ValidityError("Cannot approve self as operator")

        if approved:
            self._operator_approvals.add((caller, operator))
        else:
            self._operator_approvals.discard((caller, operator))
        self._events.emit(
            ApprovalForAll(
                owner=caller,
                operator=operator,
                approved=approved,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Operator {operator} for {caller}: approved={approved}")

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return (owner, operator) in self._operator_approvals

    def is_approved_or_owner(self, spender: str, token_id: int) -> bool:
        """Whether spender is the owner, the approved address or an operator."""
        owner = self.owner_of(token_id)
        return (
            spender == owner
            or self._token_approvals.get(token_id) == spender
            or self.is_approved_for_all(owner, spender)
        )

    def transfer_from(self, caller: str, from_address: str, to: str, token_id: int) -> None:
        """Move an item to a new owner, clearing its single-item approval."""
        require_address(to, "recipient")
        owner = self.owner_of(token_id)
        if owner != from_address:
            raise ValidityError(f"Item {token_id} is not owned by {from_address}")
        if not self.is_approved_or_owner(caller, token_id):
            raise AuthorizationError(caller, f"transfer item {token_id}")

        self._token_approvals.pop(token_id, None)
        self._owners[token_id] = to
        self._balances[from_address] -= 1
        self._balances[to] = self.balance_of(to) + 1
        self._events.emit(
            ItemTransfer(
                sender=from_address,
                recipient=to,
                token_id=token_id,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Item {token_id} transferred from {from_address} to {to}")
