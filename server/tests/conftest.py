"""Global test configuration for Token Rights."""

import os

import pytest

from token_rights.clock import ManualClock
from token_rights.registry.item_registry import ItemRegistry
from token_rights.registry.privilege_registry import PrivilegeRegistry
from token_rights.registry.token_ledger import ExpiringToken
from token_rights.services.event_log import EventLog

ADMIN = "0xadmin"
BOB = "0xbob"

DAY = 24 * 60 * 60


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars():
    """Pin settings the tests rely on.

    Only sets values that aren't already present, so real env vars take
    precedence.
    """
    defaults = {
        "ADMIN_ADDRESS": ADMIN,
        "PRIVILEGE_TOTAL": "3",
        "DEFAULT_EXPIRATION": str(30 * DAY),
    }
    originals = {}
    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
            originals[key] = None
        else:
            originals[key] = os.environ[key]

    # Clear the lru_cache on get_settings so it picks up the new env vars
    from token_rights.config import get_settings
    get_settings.cache_clear()

    yield

    # Restore original env state
    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock starting at t=1000."""
    return ManualClock(start=1000)


class CountingClock(ManualClock):
    """ManualClock that records how often it is read."""

    def __init__(self, start: int = 0) -> None:
        super().__init__(start)
        self.reads = 0

    def now(self) -> int:
        self.reads += 1
        return super().now()


@pytest.fixture
def counting_clock() -> CountingClock:
    return CountingClock(start=1000)


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def token(clock: ManualClock, events: EventLog) -> ExpiringToken:
    """Token with a 1 day default expiration."""
    return ExpiringToken(
        name="Test Token",
        symbol="TST",
        clock=clock,
        events=events,
        default_expiration=DAY,
    )


@pytest.fixture
def items(clock: ManualClock, events: EventLog) -> ItemRegistry:
    return ItemRegistry(clock=clock, events=events)


@pytest.fixture
def privileges(items: ItemRegistry, clock: ManualClock, events: EventLog) -> PrivilegeRegistry:
    """Registry with 3 privileges per item; item 1 is owned by BOB."""
    registry = PrivilegeRegistry(
        items=items,
        clock=clock,
        events=events,
        privilege_total=3,
        admin=ADMIN,
    )
    items.mint(BOB, 1)
    return registry
