"""Expiring allowance models.

An allowance is keyed by (owner, spender). Its stored amount may outlive its
expiry; consumers must go through ``effective`` rather than read ``amount``.
"""

from pydantic import BaseModel, Field

from token_rights.expiry import effective_amount, is_live


class Allowance(BaseModel):
    """A stored spending authorization."""

    owner: str
    spender: str
    amount: int = Field(default=0, ge=0)
    expires_at: int = Field(default=0, ge=0)

    def effective(self, now: int) -> int:
        """Usable amount at ``now``."""
        return effective_amount(self.amount, self.expires_at, now)

    def is_expired(self, now: int) -> bool:
        return not is_live(self.expires_at, now)


class AllowanceView(BaseModel):
    """Read-side view of an allowance at a point in time."""

    owner: str
    spender: str
    amount: int  # Effective amount
    stored_amount: int
    expires_at: int
    expired: bool


class ApproveRequest(BaseModel):
    """Request to approve a spender."""

    spender: str
    value: int = Field(ge=0)
    period: int | None = Field(default=None, ge=0)  # None = default expiration


class AllowanceAdjustRequest(BaseModel):
    """Request to increase or decrease an allowance."""

    spender: str
    value: int = Field(ge=0)
    period: int | None = Field(default=None, ge=0)


class MintRequest(BaseModel):
    """Request to mint fungible tokens."""

    to: str
    amount: int = Field(ge=0)


class TransferRequest(BaseModel):
    """Request to transfer fungible tokens from the caller."""

    to: str
    amount: int = Field(ge=0)


class TransferFromRequest(BaseModel):
    """Request to transfer fungible tokens using an allowance."""

    owner: str
    to: str
    amount: int = Field(ge=0)
