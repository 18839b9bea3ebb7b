"""Input checks shared by the registries."""

from token_rights.exceptions import ValidityError
from token_rights.models.events import ZERO_ADDRESS


def require_address(address: str, role: str) -> None:
    """Reject empty and zero addresses.

    Raises:
        ValidityError: If the address cannot own or receive anything
    """
    if not address or address == ZERO_ADDRESS:
        raise ValidityError(f"Invalid {role} address: {address!r}")


def require_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise ValidityError(f"{name} must be non-negative, got {value}")
