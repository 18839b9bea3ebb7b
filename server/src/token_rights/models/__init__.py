"""Pydantic models for Token Rights - the contracts."""

from token_rights.models.allowance import (
    AllowanceAdjustRequest,
    Allowance,
    AllowanceView,
    ApproveRequest,
    MintRequest,
    TransferFromRequest,
    TransferRequest,
)
from token_rights.models.events import (
    ZERO_ADDRESS,
    AllowanceExpirationUpdated,
    ApprovalForAll,
    DelegatorSet,
    ItemApproval,
    ItemTransfer,
    PrivilegeAssigned,
    PrivilegeCloned,
    PrivilegeTotalChanged,
    PrivilegeTransfered,
    RegistryEvent,
    TokenApproval,
    TokenTransfer,
)
from token_rights.models.results import (
    BalanceView,
    ItemInfo,
    OperationResult,
    PrivilegeCheck,
    RegistryInfo,
    TokenInfo,
)
from token_rights.models.privilege import (
    ApprovalForAllRequest,
    CloneableUpdate,
    ClonedPrivilege,
    ClonePrivilegeRequest,
    ItemApproveRequest,
    ItemTransferRequest,
    MintItemRequest,
    PrivilegeBook,
    PrivilegeSlot,
    PrivilegeTotalUpdate,
    PrivilegeView,
    SetDelegatorRequest,
    SetPrivilegeRequest,
)

__all__ = [
    "Allowance",
    "AllowanceAdjustRequest",
    "AllowanceExpirationUpdated",
    "AllowanceView",
    "BalanceView",
    "ApprovalForAll",
    "ApprovalForAllRequest",
    "ApproveRequest",
    "CloneableUpdate",
    "ClonedPrivilege",
    "ClonePrivilegeRequest",
    "DelegatorSet",
    "ItemApproval",
    "ItemInfo",
    "ItemApproveRequest",
    "ItemTransfer",
    "ItemTransferRequest",
    "MintItemRequest",
    "MintRequest",
    "OperationResult",
    "PrivilegeAssigned",
    "PrivilegeBook",
    "PrivilegeCheck",
    "PrivilegeCloned",
    "PrivilegeSlot",
    "PrivilegeTotalChanged",
    "PrivilegeTotalUpdate",
    "PrivilegeTransfered",
    "PrivilegeView",
    "RegistryEvent",
    "RegistryInfo",
    "SetDelegatorRequest",
    "SetPrivilegeRequest",
    "TokenApproval",
    "TokenInfo",
    "TokenTransfer",
    "TransferFromRequest",
    "TransferRequest",
    "ZERO_ADDRESS",
]
