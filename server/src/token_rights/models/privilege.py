"""Privilege models.

Each item carries up to ``privilege_total`` privilege slots, each with its
own holder and expiry, plus optional clones shared by holders.
"""

from pydantic import BaseModel, Field

from token_rights.expiry import privilege_active


class PrivilegeSlot(BaseModel):
    """One privilege slot of an item."""

    token_id: int
    privilege_id: int = Field(ge=0)
    holder: str
    expires_at: int = Field(default=0, ge=0)

    def is_active(self, now: int) -> bool:
        return privilege_active(self.expires_at, now)


class PrivilegeBook(BaseModel):
    """All privilege state of a single item."""

    token_id: int
    slots: dict[int, PrivilegeSlot] = Field(default_factory=dict)
    last_expires_at: int = 0  # Max expiry ever set on any slot


class ClonedPrivilege(BaseModel):
    """A privilege shared from a holder (the referrer) to a recipient."""

    token_id: int
    privilege_id: int
    recipient: str
    referrer: str
    expires_at: int
    cloned_at: int

    def is_active(self, now: int) -> bool:
        return privilege_active(self.expires_at, now)


class PrivilegeView(BaseModel):
    """Read-side view of a privilege slot at a point in time."""

    token_id: int
    privilege_id: int
    holder: str | None  # Effective holder (owner once expired)
    stored_holder: str | None
    expires_at: int
    active: bool
    cloneable: bool


class MintItemRequest(BaseModel):
    """Request to mint an item."""

    to: str
    token_id: int = Field(ge=0)


class ItemApproveRequest(BaseModel):
    """Request to approve an address for a single item."""

    to: str | None  # None clears the approval
    token_id: int


class ApprovalForAllRequest(BaseModel):
    """Request to approve an operator for all of the caller's items."""

    operator: str
    approved: bool


class ItemTransferRequest(BaseModel):
    """Request to transfer an item."""

    from_address: str
    to: str
    token_id: int


class SetPrivilegeRequest(BaseModel):
    """Request to assign a privilege slot."""

    user: str
    expires: int = Field(ge=0)


class SetDelegatorRequest(BaseModel):
    """Request to grant or revoke a delegate."""

    delegate: str
    enabled: bool


class ClonePrivilegeRequest(BaseModel):
    """Request to clone a privilege from a referrer."""

    referrer: str


class PrivilegeTotalUpdate(BaseModel):
    """Request to change the number of privilege slots per item."""

    privilege_total: int = Field(ge=0)


class CloneableUpdate(BaseModel):
    """Request to mark a privilege id as shareable or not."""

    cloneable: bool
