"""Allowance and privilege registries."""

from token_rights.registry.allowance_registry import ExpiringAllowanceRegistry
from token_rights.registry.item_registry import ItemRegistry
from token_rights.registry.privilege_registry import PrivilegeRegistry
from token_rights.registry.token_ledger import ExpiringToken

__all__ = [
    "ExpiringAllowanceRegistry",
    "ExpiringToken",
    "ItemRegistry",
    "PrivilegeRegistry",
]
