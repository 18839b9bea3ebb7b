"""Custom exceptions for Token Rights.

Every registry failure is operation-local: the raising operation has not
written anything by the time one of these propagates.
"""


class RegistryError(Exception):
    """Base class for all registry failures."""


class AuthorizationError(RegistryError):
    """Raised when the caller lacks owner, approved or delegate standing."""

    def __init__(self, caller: str, action: str) -> None:
        self.caller = caller
        self.action = action
        super().__init__(f"Caller {caller!r} is not authorized to {action}")


class ValidityError(RegistryError):
    """Raised when an input is outside the range an operation accepts."""


class InvalidPrivilegeIdError(ValidityError):
    """Raised when privilege_id is not below the current privilege total."""

    def __init__(self, privilege_id: int, privilege_total: int) -> None:
        self.privilege_id = privilege_id
        self.privilege_total = privilege_total
        super().__init__(
            f"Invalid privilege id: {privilege_id} (privilege total is {privilege_total})"
        )


class ExpiryTooFarError(ValidityError):
    """Raised when a privilege expiry is at or past the allowed ceiling."""

    def __init__(self, expires: int, ceiling: int) -> None:
        self.expires = expires
        self.ceiling = ceiling
        super().__init__(
            f"Expiry {expires} must be earlier than {ceiling}"
        )


class AllowanceExceededError(RegistryError):
    """Raised when a spend exceeds the effective (expiry-aware) allowance."""

    def __init__(self, owner: str, spender: str, requested: int, available: int) -> None:
        self.owner = owner
        self.spender = spender
        self.requested = requested
        self.available = available
        super().__init__(
            f"Allowance exceeded: {spender!r} requested {requested} from {owner!r}, "
            f"available={available}"
        )


class ArithmeticUnderflowError(RegistryError):
    """Raised when a decrease would take an effective amount below zero."""

    def __init__(self, current: int, subtracted: int) -> None:
        self.current = current
        self.subtracted = subtracted
        super().__init__(
            f"Arithmetic underflow: cannot subtract {subtracted} from {current}"
        )


class InsufficientBalanceError(RegistryError):
    """Raised when an account cannot cover a transfer or burn."""

    def __init__(self, account: str, requested: int, available: int) -> None:
        self.account = account
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient balance: {account!r} has {available}, needs {requested}"
        )


class ItemNotFoundError(RegistryError):
    """Raised when an item id has no owner."""

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Item {token_id} does not exist")


class ItemExistsError(RegistryError):
    """Raised when minting an item id that is already owned."""

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Item {token_id} already minted")
