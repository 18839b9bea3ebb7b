"""FastAPI routes exposing the token and privilege registries."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from token_rights import __version__
from token_rights.api.auth import Caller
from token_rights.clock import Clock, SystemClock
from token_rights.config import get_settings
from token_rights.exceptions import AuthorizationError
from token_rights.models.allowance import (
    AllowanceAdjustRequest,
    AllowanceView,
    ApproveRequest,
    MintRequest,
    TransferFromRequest,
    TransferRequest,
)
from token_rights.models.privilege import (
    ApprovalForAllRequest,
    CloneableUpdate,
    ClonePrivilegeRequest,
    ItemApproveRequest,
    ItemTransferRequest,
    MintItemRequest,
    PrivilegeTotalUpdate,
    PrivilegeView,
    SetDelegatorRequest,
    SetPrivilegeRequest,
)
from token_rights.models.results import (
    BalanceView,
    ItemInfo,
    OperationResult,
    PrivilegeCheck,
    RegistryInfo,
    TokenInfo,
)
from token_rights.registry.item_registry import ItemRegistry
from token_rights.registry.privilege_registry import PrivilegeRegistry
from token_rights.registry.token_ledger import ExpiringToken
from token_rights.services.event_log import EventLog

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependency injection
_clock: Clock | None = None
_event_log: EventLog | None = None
_token: ExpiringToken | None = None
_privileges: PrivilegeRegistry | None = None


def get_clock() -> Clock:
    """Get or create the clock instance."""
    global _clock
    if _clock is None:
        _clock = SystemClock()
    return _clock


def get_event_log() -> EventLog:
    """Get or create the shared event log."""
    global _event_log
    if _event_log is None:
        _event_log = EventLog()
    return _event_log


def get_token() -> ExpiringToken:
    """Get or create the fungible token."""
    global _token
    if _token is None:
        settings = get_settings()
        _token = ExpiringToken(
            name=settings.token_name,
            symbol=settings.token_symbol,
            decimals=settings.token_decimals,
            clock=get_clock(),
            events=get_event_log(),
            default_expiration=settings.default_expiration,
        )
    return _token


def get_privileges() -> PrivilegeRegistry:
    """Get or create the item and privilege registries."""
    global _privileges
    if _privileges is None:
        settings = get_settings()
        items = ItemRegistry(clock=get_clock(), events=get_event_log())
        _privileges = PrivilegeRegistry(
            items=items,
            clock=get_clock(),
            events=get_event_log(),
            privilege_total=settings.privilege_total,
            admin=settings.admin_address,
        )
    return _privileges


Token = Annotated[ExpiringToken, Depends(get_token)]
Privileges = Annotated[PrivilegeRegistry, Depends(get_privileges)]
Events = Annotated[EventLog, Depends(get_event_log)]


def _allowance_view(token: ExpiringToken, owner: str, spender: str) -> AllowanceView:
    row = token.allowances.get_allowance(owner, spender)
    now = get_clock().now()
    return AllowanceView(
        owner=owner,
        spender=spender,
        amount=row.effective(now) if row else 0,
        stored_amount=row.amount if row else 0,
        expires_at=row.expires_at if row else 0,
        expired=row is not None and row.is_expired(now),
    )


def _privilege_view(
    privileges: PrivilegeRegistry, token_id: int, privilege_id: int
) -> PrivilegeView:
    slot = privileges.get_slot(token_id, privilege_id)
    holder = privileges.privilege_holder(token_id, privilege_id)
    return PrivilegeView(
        token_id=token_id,
        privilege_id=privilege_id,
        holder=holder,
        stored_holder=slot.holder if slot else None,
        expires_at=slot.expires_at if slot else 0,
        active=slot is not None and slot.is_active(get_clock().now()),
        cloneable=privileges.is_cloneable(privilege_id),
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@router.get("/health")
async def health() -> dict:
    """Liveness check."""
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Fungible token and expiring allowances
# ---------------------------------------------------------------------------

@router.get("/token", response_model=TokenInfo)
async def token_info(token: Token) -> TokenInfo:
    return TokenInfo(
        name=token.name,
        symbol=token.symbol,
        decimals=token.decimals,
        total_supply=token.total_supply(),
        default_expiration=token.default_expiration(),
    )


@router.get("/token/balance/{account}", response_model=BalanceView)
async def balance_of(account: str, token: Token) -> BalanceView:
    return BalanceView(account=account, balance=token.balance_of(account))


@router.get("/token/allowance/{owner}/{spender}", response_model=AllowanceView)
async def get_allowance(owner: str, spender: str, token: Token) -> AllowanceView:
    """Effective allowance together with its stored amount and expiry."""
    return _allowance_view(token, owner, spender)


@router.post(
    "/token/mint",
    response_model=BalanceView,
    status_code=status.HTTP_201_CREATED,
)
async def mint_tokens(request: MintRequest, caller: Caller, token: Token) -> BalanceView:
    """Mint tokens. Admin only."""
    if caller != get_settings().admin_address:
        raise AuthorizationError(caller, "mint tokens")
    token.mint(request.to, request.amount)
    return BalanceView(account=request.to, balance=token.balance_of(request.to))


@router.post("/token/transfer", response_model=OperationResult)
async def transfer(request: TransferRequest, caller: Caller, token: Token) -> OperationResult:
    return OperationResult(success=token.transfer(caller, request.to, request.amount))


@router.post("/token/transfer-from", response_model=OperationResult)
async def transfer_from(
    request: TransferFromRequest, caller: Caller, token: Token
) -> OperationResult:
    return OperationResult(
        success=token.transfer_from(caller, request.owner, request.to, request.amount)
    )


@router.post("/token/approve", response_model=AllowanceView)
async def approve(request: ApproveRequest, caller: Caller, token: Token) -> AllowanceView:
    """Approve a spender; period defaults to the token's default expiration."""
    token.approve(caller, request.spender, request.value, request.period)
    return _allowance_view(token, caller, request.spender)


@router.post("/token/increase-allowance", response_model=AllowanceView)
async def increase_allowance(
    request: AllowanceAdjustRequest, caller: Caller, token: Token
) -> AllowanceView:
    token.increase_allowance(caller, request.spender, request.value, request.period)
    return _allowance_view(token, caller, request.spender)


@router.post("/token/decrease-allowance", response_model=AllowanceView)
async def decrease_allowance(
    request: AllowanceAdjustRequest, caller: Caller, token: Token
) -> AllowanceView:
    token.decrease_allowance(caller, request.spender, request.value, request.period)
    return _allowance_view(token, caller, request.spender)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

@router.post(
    "/items/mint",
    response_model=ItemInfo,
    status_code=status.HTTP_201_CREATED,
)
async def mint_item(
    request: MintItemRequest, caller: Caller, privileges: Privileges
) -> ItemInfo:
    """Mint an item. Admin only."""
    if caller != privileges.admin:
        raise AuthorizationError(caller, "mint items")
    privileges.items.mint(request.to, request.token_id)
    return ItemInfo(token_id=request.token_id, owner=request.to)


@router.get("/items/{token_id}", response_model=ItemInfo)
async def get_item(token_id: int, privileges: Privileges) -> ItemInfo:
    items = privileges.items
    return ItemInfo(
        token_id=token_id,
        owner=items.owner_of(token_id),
        approved=items.get_approved(token_id),
        last_expires_at=privileges.last_expires_at(token_id),
    )


@router.post("/items/approve", response_model=OperationResult)
async def approve_item(
    request: ItemApproveRequest, caller: Caller, privileges: Privileges
) -> OperationResult:
    privileges.items.approve(caller, request.to, request.token_id)
    return OperationResult(success=True)


@router.post("/items/approval-for-all", response_model=OperationResult)
async def set_approval_for_all(
    request: ApprovalForAllRequest, caller: Caller, privileges: Privileges
) -> OperationResult:
    privileges.items.set_approval_for_all(caller, request.operator, request.approved)
    return OperationResult(success=True)


@router.post("/items/transfer", response_model=OperationResult)
async def transfer_item(
    request: ItemTransferRequest, caller: Caller, privileges: Privileges
) -> OperationResult:
    privileges.items.transfer_from(
        caller, request.from_address, request.to, request.token_id
    )
    return OperationResult(success=True)


# ---------------------------------------------------------------------------
# Privileges
# ---------------------------------------------------------------------------

@router.get("/privileges", response_model=RegistryInfo)
async def registry_info(privileges: Privileges) -> RegistryInfo:
    total = privileges.privilege_total()
    return RegistryInfo(
        privilege_total=total,
        admin=privileges.admin,
        cloneable=[pid for pid in range(total) if privileges.is_cloneable(pid)],
    )


@router.put("/privileges/total", response_model=RegistryInfo)
async def set_privilege_total(
    request: PrivilegeTotalUpdate, caller: Caller, privileges: Privileges
) -> RegistryInfo:
    privileges.set_privilege_total(caller, request.privilege_total)
    return await registry_info(privileges)


@router.put("/privileges/{privilege_id}/cloneable", response_model=RegistryInfo)
async def set_cloneable(
    privilege_id: int,
    request: CloneableUpdate,
    caller: Caller,
    privileges: Privileges,
) -> RegistryInfo:
    privileges.set_cloneable(caller, privilege_id, request.cloneable)
    return await registry_info(privileges)


@router.post("/delegates", response_model=OperationResult)
async def set_delegator(
    request: SetDelegatorRequest, caller: Caller, privileges: Privileges
) -> OperationResult:
    privileges.set_delegator(caller, request.delegate, request.enabled)
    return OperationResult(success=True)


@router.get(
    "/items/{token_id}/privileges/{privilege_id}",
    response_model=PrivilegeView,
)
async def get_privilege(
    token_id: int, privilege_id: int, privileges: Privileges
) -> PrivilegeView:
    privileges.items.owner_of(token_id)
    return _privilege_view(privileges, token_id, privilege_id)


@router.put(
    "/items/{token_id}/privileges/{privilege_id}",
    response_model=PrivilegeView,
)
async def set_privilege(
    token_id: int,
    privilege_id: int,
    request: SetPrivilegeRequest,
    caller: Caller,
    privileges: Privileges,
) -> PrivilegeView:
    """Assign a privilege slot; expiry is only applied for item managers."""
    privileges.set_privilege(caller, token_id, privilege_id, request.user, request.expires)
    return _privilege_view(privileges, token_id, privilege_id)


@router.get(
    "/items/{token_id}/privileges/{privilege_id}/holders/{user}",
    response_model=PrivilegeCheck,
)
async def has_privilege(
    token_id: int, privilege_id: int, user: str, privileges: Privileges
) -> PrivilegeCheck:
    return PrivilegeCheck(
        token_id=token_id,
        privilege_id=privilege_id,
        user=user,
        has_privilege=privileges.has_privilege(token_id, privilege_id, user),
    )


@router.post(
    "/items/{token_id}/privileges/{privilege_id}/clone",
    response_model=OperationResult,
)
async def clone_privilege(
    token_id: int,
    privilege_id: int,
    request: ClonePrivilegeRequest,
    caller: Caller,
    privileges: Privileges,
) -> OperationResult:
    return OperationResult(
        success=privileges.clone_privilege(caller, token_id, privilege_id, request.referrer)
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@router.get("/events")
async def list_events(events: Events, event: str | None = None) -> list[dict]:
    """Emitted notifications in order, optionally filtered by name."""
    return [e.model_dump() for e in events.history(event)]
