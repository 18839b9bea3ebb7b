"""Token Rights - expiring allowances and multi-privilege items."""

__version__ = "0.1.0"

from token_rights.exceptions import (
    AllowanceExceededError,
    ArithmeticUnderflowError,
    AuthorizationError,
    ExpiryTooFarError,
    InsufficientBalanceError,
    InvalidPrivilegeIdError,
    ItemExistsError,
    ItemNotFoundError,
    RegistryError,
    ValidityError,
)

__all__ = [
    "__version__",
    "AllowanceExceededError",
    "ArithmeticUnderflowError",
    "AuthorizationError",
    "ExpiryTooFarError",
    "InsufficientBalanceError",
    "InvalidPrivilegeIdError",
    "ItemExistsError",
    "ItemNotFoundError",
    "RegistryError",
    "ValidityError",
]
