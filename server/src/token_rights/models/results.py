"""Response models for the HTTP layer."""

from pydantic import BaseModel


class OperationResult(BaseModel):
    """Outcome of a write that reports success as a boolean."""

    success: bool


class TokenInfo(BaseModel):
    """Fungible token metadata."""

    name: str
    symbol: str
    decimals: int
    total_supply: int
    default_expiration: int


class BalanceView(BaseModel):
    account: str
    balance: int


class ItemInfo(BaseModel):
    """Ownership state of an item."""

    token_id: int
    owner: str
    approved: str | None = None
    last_expires_at: int = 0


class PrivilegeCheck(BaseModel):
    token_id: int
    privilege_id: int
    user: str
    has_privilege: bool


class RegistryInfo(BaseModel):
    """Privilege registry settings."""

    privilege_total: int
    admin: str
    cloneable: list[int]
