"""Multi-privilege registry for items.

Every item has ``privilege_total`` privilege slots. Each slot has its own
holder and expiry, separate from and subordinate to plain ownership: once a
slot expires, the privilege falls back to whoever owns the item.

Two kinds of caller may write a slot:
- a manager (owner or approved for the item) may set holder and expiry
- the effective holder, or someone the holder delegated to, may hand the
  privilege on to another address but cannot change its expiry
"""

import logging

from token_rights.clock import Clock
from token_rights.config import get_settings
from token_rights.exceptions import (
    AuthorizationError,
    ExpiryTooFarError,
    InvalidPrivilegeIdError,
    ValidityError,
)
from token_rights.expiry import privilege_expiry_ceiling
from token_rights.models.events import (
    DelegatorSet,
    PrivilegeAssigned,
    PrivilegeCloned,
    PrivilegeTotalChanged,
    PrivilegeTransfered,
)
from token_rights.models.privilege import ClonedPrivilege, PrivilegeBook, PrivilegeSlot
from token_rights.registry.item_registry import ItemRegistry
from token_rights.registry.validation import require_address
from token_rights.services.event_log import EventLog

logger = logging.getLogger(__name__)


class PrivilegeRegistry:
    """Tracks privilege slots, delegations and clones per item.

    Provides:
    - set_privilege with separate manager and holder/delegate authorization
    - has_privilege with fallback to the item owner after expiry
    - set_delegator for standing delegation across all of a holder's slots
    - clone_privilege for shareable privilege ids
    - administrative privilege total and cloneable flags
    """

    def __init__(
        self,
        items: ItemRegistry,
        clock: Clock,
        events: EventLog | None = None,
        privilege_total: int | None = None,
        admin: str | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            items: Ownership registry the privileges belong to
            clock: Source of the current time
            events: Where notifications go (the item registry's log if omitted)
            privilege_total: Slots per item (falls back to settings)
            admin: Address allowed to change privilege total and cloneable
                flags (falls back to settings)
        """
        settings = get_settings()
        if privilege_total is None:
            privilege_total = settings.privilege_total
        if privilege_total < 0:
            raise ValidityError(f"privilege_total must be non-negative, got {privilege_total}")

        self._items = items
        self._clock = clock
        self._events = events if events is not None else items.events
        self._privilege_total = privilege_total
        self._admin = admin if admin is not None else settings.admin_address

        # token_id -> PrivilegeBook
        self._books: dict[int, PrivilegeBook] = {}
        # (holder, delegate) pairs
        self._delegations: set[tuple[str, str]] = set()
        self._cloneable: set[int] = set()
        # (token_id, privilege_id) -> recipient -> ClonedPrivilege
        self._clones: dict[tuple[int, int], dict[str, ClonedPrivilege]] = {}

        items.add_burn_listener(self._forget_item)

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def items(self) -> ItemRegistry:
        return self._items

    @property
    def admin(self) -> str:
        return self._admin

    def privilege_total(self) -> int:
        return self._privilege_total

    # Authorization predicates

    def can_manage(self, caller: str, token_id: int) -> bool:
        """Owner or approved for the item: may set holder and expiry."""
        return self._items.is_approved_or_owner(caller, token_id)

    def can_transfer_privilege(self, caller: str, token_id: int, privilege_id: int) -> bool:
        """Effective holder or one of its delegates: may set holder only."""
        if not self._items.exists(token_id):
            return False
        holder = self._effective_holder(token_id, privilege_id, self._clock.now())
        return caller == holder or self.is_delegate(holder, caller)

    # Privilege slots

    def set_privilege(
        self,
        caller: str,
        token_id: int,
        privilege_id: int,
        user: str,
        expires: int,
    ) -> PrivilegeSlot:
        """Assign a privilege slot.

        Args:
            caller: Address performing the write
            token_id: The item
            privilege_id: Slot index, below privilege_total
            user: New holder
            expires: New expiry; only stored when the caller can manage the item

        Returns:
            The slot as stored

        Raises:
            ItemNotFoundError: If the item does not exist
            AuthorizationError: If the caller neither manages the item nor
                holds (or is delegated) the privilege
            ExpiryTooFarError: If expires is not earlier than now + 30 days
            InvalidPrivilegeIdError: If privilege_id is out of range
        """
        now = self._clock.now()
        self._items.owner_of(token_id)

        previous_holder = self._effective_holder(token_id, privilege_id, now)
        manages = self.can_manage(caller, token_id)
        transfers = caller == previous_holder or self.is_delegate(previous_holder, caller)
        if not (manages or transfers):
            logger.warning(
                f"set_privilege denied: {caller} on item {token_id} privilege {privilege_id}"
            )
            raise AuthorizationError(
                caller, f"set privilege {privilege_id} of item {token_id}"
            )

        ceiling = privilege_expiry_ceiling(now)
        if expires >= ceiling:
            raise ExpiryTooFarError(expires, ceiling)
        self._check_privilege_id(privilege_id)
        require_address(user, "user")

        book = self._books.setdefault(token_id, PrivilegeBook(token_id=token_id))
        current = book.slots.get(privilege_id)

        if manages:
            stored_expires = expires
            book.last_expires_at = max(book.last_expires_at, expires)
        else:
            stored_expires = current.expires_at if current else 0

        slot = PrivilegeSlot(
            token_id=token_id,
            privilege_id=privilege_id,
            holder=user,
            expires_at=stored_expires,
        )
        book.slots[privilege_id] = slot
        self._prune_clones(slot, now)

        self._events.emit(
            PrivilegeAssigned(
                token_id=token_id,
                privilege_id=privilege_id,
                user=user,
                expires=stored_expires,
                timestamp=now,
            )
        )
        if not manages:
            self._events.emit(
                PrivilegeTransfered(
                    token_id=token_id,
                    privilege_id=privilege_id,
                    sender=previous_holder,
                    recipient=user,
                    timestamp=now,
                )
            )
        logger.info(
            f"Privilege {privilege_id} of item {token_id} assigned to {user} "
            f"until {stored_expires} by {caller}"
        )
        return slot.model_copy()

    def has_privilege(self, token_id: int, privilege_id: int, user: str) -> bool:
        """Whether user currently holds a privilege.

        An active slot belongs to its holder. An expired or never-set slot
        belongs to the item's current owner. Clones count only while the
        slot they were copied from is active and unchanged.
        """
        if not self._items.exists(token_id):
            return False
        return self._holds(token_id, privilege_id, user, self._clock.now())

    def privilege_expires(self, token_id: int, privilege_id: int) -> int:
        """Stored expiry of a slot, 0 if never set."""
        slot = self._slot(token_id, privilege_id)
        return slot.expires_at if slot else 0

    def privilege_holder(self, token_id: int, privilege_id: int) -> str | None:
        """Effective holder: the stored holder while active, else the owner.

        Returns None for items that do not exist.
        """
        if not self._items.exists(token_id):
            return None
        return self._effective_holder(token_id, privilege_id, self._clock.now())

    def get_slot(self, token_id: int, privilege_id: int) -> PrivilegeSlot | None:
        """Raw stored slot (holder may be stale past expiry)."""
        slot = self._slot(token_id, privilege_id)
        return slot.model_copy() if slot else None

    def last_expires_at(self, token_id: int) -> int:
        """Latest expiry ever set on any slot of the item."""
        book = self._books.get(token_id)
        return book.last_expires_at if book else 0

    def has_active_privileges(self, token_id: int) -> bool:
        """Whether any slot of the item may still be held by a non-owner."""
        return self.last_expires_at(token_id) >= self._clock.now()

    # Delegation

    def set_delegator(self, caller: str, delegate: str, enabled: bool) -> None:
        """Grant or revoke a delegate across all of the caller's privileges."""
        if enabled:
            self._delegations.add((caller, delegate))
        else:
            self._delegations.discard((caller, delegate))
        self._events.emit(
            DelegatorSet(
                holder=caller,
                delegate=delegate,
                enabled=enabled,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Delegate {delegate} for {caller}: enabled={enabled}")

    def is_delegate(self, holder: str, delegate: str) -> bool:
        return (holder, delegate) in self._delegations

    # Administration

    def set_privilege_total(self, caller: str, new_total: int) -> None:
        """Change the number of slots per item.

        Lowering the total invalidates stored slots, clones and cloneable
        flags at or above the new bound, so raising it again later starts
        those slots fresh.

        Raises:
            AuthorizationError: If caller is not the admin
            ValidityError: If new_total is negative
        """
        self._require_admin(caller, "change privilege total")
        if new_total < 0:
            raise ValidityError(f"privilege_total must be non-negative, got {new_total}")

        previous = self._privilege_total
        if new_total < previous:
            dropped = self._invalidate_from(new_total)
            if dropped:
                logger.info(f"Invalidated {dropped} slots at or above privilege id {new_total}")

        self._privilege_total = new_total
        self._events.emit(
            PrivilegeTotalChanged(
                previous_total=previous,
                new_total=new_total,
                timestamp=self._clock.now(),
            )
        )
        logger.info(f"Privilege total changed from {previous} to {new_total}")

    def set_cloneable(self, caller: str, privilege_id: int, cloneable: bool) -> None:
        """Mark a privilege id as shareable (or not).

        Raises:
            AuthorizationError: If caller is not the admin
            InvalidPrivilegeIdError: If privilege_id is out of range
        """
        self._require_admin(caller, "change cloneable privileges")
        self._check_privilege_id(privilege_id)

        if cloneable:
            self._cloneable.add(privilege_id)
        else:
            self._cloneable.discard(privilege_id)
        logger.info(f"Privilege {privilege_id} cloneable={cloneable}")

    def is_cloneable(self, privilege_id: int) -> bool:
        return privilege_id in self._cloneable

    # Cloning

    def clone_privilege(
        self, caller: str, token_id: int, privilege_id: int, referrer: str
    ) -> bool:
        """Give the caller a copy of the referrer's privilege.

        The copy expires with the source slot and the referrer keeps its
        privilege.

        Returns:
            True if the clone was recorded, False if the privilege id is out
            of range or not cloneable, the item or slot does not exist, the
            slot has expired, the referrer does not hold the privilege or
            the caller already does
        """
        now = self._clock.now()

        if not 0 <= privilege_id < self._privilege_total:
            logger.warning(f"Clone rejected: privilege id {privilege_id} out of range")
            return False
        if privilege_id not in self._cloneable:
            logger.warning(f"Clone rejected: privilege {privilege_id} is not cloneable")
            return False
        if not caller or caller == referrer or not self._items.exists(token_id):
            return False

        slot = self._slot(token_id, privilege_id)
        if slot is None or not slot.is_active(now):
            logger.warning(
                f"Clone rejected: privilege {privilege_id} of item {token_id} is not assigned"
            )
            return False
        if not self._holds(token_id, privilege_id, referrer, now):
            logger.warning(
                f"Clone rejected: {referrer} does not hold privilege {privilege_id} "
                f"of item {token_id}"
            )
            return False
        if self._holds(token_id, privilege_id, caller, now):
            logger.warning(
                f"Clone rejected: {caller} already holds privilege {privilege_id} "
                f"of item {token_id}"
            )
            return False

        clone = ClonedPrivilege(
            token_id=token_id,
            privilege_id=privilege_id,
            recipient=caller,
            referrer=referrer,
            expires_at=slot.expires_at,
            cloned_at=now,
        )
        self._clones.setdefault((token_id, privilege_id), {})[caller] = clone

        self._events.emit(
            PrivilegeCloned(
                token_id=token_id,
                privilege_id=privilege_id,
                sender=referrer,
                recipient=caller,
                timestamp=now,
            )
        )
        logger.info(
            f"Privilege {privilege_id} of item {token_id} cloned from {referrer} to {caller}"
        )
        return True

    def clones_of(self, token_id: int, privilege_id: int) -> list[ClonedPrivilege]:
        """All clones recorded for a slot, active or not."""
        clones = self._clones.get((token_id, privilege_id), {})
        return [c.model_copy() for c in clones.values()]

    def _slot(self, token_id: int, privilege_id: int) -> PrivilegeSlot | None:
        book = self._books.get(token_id)
        return book.slots.get(privilege_id) if book else None

    def _effective_holder(self, token_id: int, privilege_id: int, now: int) -> str:
        slot = self._slot(token_id, privilege_id)
        if slot is not None and slot.is_active(now):
            return slot.holder
        return self._items.owner_of(token_id)

    def _holds(self, token_id: int, privilege_id: int, user: str, now: int) -> bool:
        slot = self._slot(token_id, privilege_id)
        if slot is None or not slot.is_active(now):
            return user == self._items.owner_of(token_id)
        return user == slot.holder or self._clone_valid(slot, user, now)

    def _clone_valid(self, slot: PrivilegeSlot, user: str, now: int) -> bool:
        """Whether user's clone traces back to the slot's current holder.

        Every clone along the referrer chain must carry the slot's current
        expiry, so a manager rewriting the slot or the holder handing it on
        voids the clones taken from it.
        """
        clones = self._clones.get((slot.token_id, slot.privilege_id), {})
        seen: set[str] = set()
        while user not in seen:
            seen.add(user)
            clone = clones.get(user)
            if clone is None or clone.expires_at != slot.expires_at or not clone.is_active(now):
                return False
            if clone.referrer == slot.holder:
                return True
            user = clone.referrer
        return False

    def _prune_clones(self, slot: PrivilegeSlot, now: int) -> None:
        """Drop clones of a slot that no longer trace back to its holder."""
        key = (slot.token_id, slot.privilege_id)
        clones = self._clones.get(key)
        if not clones:
            return
        stale = [user for user in clones if not self._clone_valid(slot, user, now)]
        for user in stale:
            del clones[user]
        if not clones:
            del self._clones[key]
        if stale:
            logger.info(
                f"Dropped {len(stale)} clones of privilege {slot.privilege_id} "
                f"of item {slot.token_id}"
            )

    def _forget_item(self, token_id: int) -> None:
        """Drop all privilege state of a burned item."""
        self._books.pop(token_id, None)
        for key in [k for k in self._clones if k[0] == token_id]:
            del self._clones[key]
        logger.info(f"Cleared privileges of burned item {token_id}")

    def _check_privilege_id(self, privilege_id: int) -> None:
        if not 0 <= privilege_id < self._privilege_total:
            raise InvalidPrivilegeIdError(privilege_id, self._privilege_total)

    def _require_admin(self, caller: str, action: str) -> None:
        if caller != self._admin:
            logger.warning(f"Admin action denied for {caller}: {action}")
            raise AuthorizationError(caller, action)

    def _invalidate_from(self, bound: int) -> int:
        """Drop slots, clones and cloneable flags with privilege id >= bound."""
        dropped = 0
        for book in self._books.values():
            stale = [pid for pid in book.slots if pid >= bound]
            for pid in stale:
                del book.slots[pid]
            dropped += len(stale)

        for key in [k for k in self._clones if k[1] >= bound]:
            del self._clones[key]
        self._cloneable = {pid for pid in self._cloneable if pid < bound}
        return dropped
