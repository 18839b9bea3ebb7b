"""Notification models emitted by the registries.

Event names match the interface standards so consumers can filter on them.
"""

from typing import Literal

from pydantic import BaseModel

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class RegistryEvent(BaseModel):
    """Base notification."""

    event: str
    timestamp: int = 0
    sequence: int = 0  # Assigned by the EventLog


class TokenTransfer(RegistryEvent):
    """Fungible transfer (mint/burn use the zero address)."""

    event: Literal["Transfer"] = "Transfer"
    sender: str
    recipient: str
    value: int


class TokenApproval(RegistryEvent):
    """Fungible allowance set."""

    event: Literal["Approval"] = "Approval"
    owner: str
    spender: str
    value: int


class AllowanceExpirationUpdated(RegistryEvent):
    """Allowance amount and expiry after an approve/increase/decrease."""

    event: Literal["AllowanceExpirationUpdated"] = "AllowanceExpirationUpdated"
    owner: str
    spender: str
    value: int
    expire_at: int


class ItemTransfer(RegistryEvent):
    """Item ownership change (mint/burn use the zero address)."""

    event: Literal["Transfer"] = "Transfer"
    sender: str
    recipient: str
    token_id: int


class ItemApproval(RegistryEvent):
    """Single-item approval set or cleared."""

    event: Literal["Approval"] = "Approval"
    owner: str
    approved: str | None
    token_id: int


class ApprovalForAll(RegistryEvent):
    """Operator approval for all of an owner's items."""

    event: Literal["ApprovalForAll"] = "ApprovalForAll"
    owner: str
    operator: str
    approved: bool


class PrivilegeAssigned(RegistryEvent):
    """Privilege slot written; carries the final stored values."""

    event: Literal["PrivilegeAssigned"] = "PrivilegeAssigned"
    token_id: int
    privilege_id: int
    user: str
    expires: int


class PrivilegeTransfered(RegistryEvent):
    """Privilege handed on by its holder or a holder's delegate."""

    event: Literal["PrivilegeTransfered"] = "PrivilegeTransfered"
    token_id: int
    privilege_id: int
    sender: str
    recipient: str


class PrivilegeTotalChanged(RegistryEvent):
    """Number of privilege slots per item changed."""

    event: Literal["PrivilegeTotalChanged"] = "PrivilegeTotalChanged"
    previous_total: int
    new_total: int


class PrivilegeCloned(RegistryEvent):
    """Privilege shared from a referrer to a new recipient."""

    event: Literal["PrivilegeCloned"] = "PrivilegeCloned"
    token_id: int
    privilege_id: int
    sender: str
    recipient: str


class DelegatorSet(RegistryEvent):
    """Delegation granted or revoked by a holder."""

    event: Literal["DelegatorSet"] = "DelegatorSet"
    holder: str
    delegate: str
    enabled: bool
