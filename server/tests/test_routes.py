"""Tests for the HTTP routes."""

import pytest
from fastapi.testclient import TestClient

from token_rights.api import routes
from token_rights.api.errors import status_for
from token_rights.clock import ManualClock
from token_rights.exceptions import AuthorizationError, InvalidPrivilegeIdError, ValidityError
from token_rights.main import create_app
from token_rights.models.allowance import ApproveRequest
from token_rights.models.privilege import SetPrivilegeRequest

ADMIN = "0xadmin"
ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=1000)


@pytest.fixture(autouse=True)
def reset_singletons(clock):
    """Reset module-level singletons between tests."""
    routes._clock = clock
    routes._event_log = None
    routes._token = None
    routes._privileges = None
    yield
    routes._clock = None
    routes._event_log = None
    routes._token = None
    routes._privileges = None


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def _as(caller: str) -> dict:
    return {"X-Caller": caller}


# ---------------------------------------------------------------------------
# Direct handler calls
# ---------------------------------------------------------------------------

class TestHandlers:
    """Route handlers called directly with injected registries."""

    @pytest.mark.asyncio
    async def test_approve_returns_view(self, clock):
        token = routes.get_token()
        view = await routes.approve(
            ApproveRequest(spender=BOB, value=100, period=10), ALICE, token
        )

        assert view.amount == 100
        assert view.expires_at == 1010
        assert view.expired is False

    @pytest.mark.asyncio
    async def test_allowance_view_after_expiry(self, clock):
        token = routes.get_token()
        token.approve(ALICE, BOB, 100, period=10)
        clock.advance(10)

        view = await routes.get_allowance(ALICE, BOB, token)

        assert view.amount == 0
        assert view.stored_amount == 100
        assert view.expired is True

    @pytest.mark.asyncio
    async def test_set_privilege_returns_view(self, clock):
        privileges = routes.get_privileges()
        privileges.items.mint(BOB, 1)

        view = await routes.set_privilege(
            1, 0, SetPrivilegeRequest(user=ALICE, expires=1100), BOB, privileges
        )

        assert view.holder == ALICE
        assert view.stored_holder == ALICE
        assert view.active is True

    @pytest.mark.asyncio
    async def test_mint_requires_admin(self):
        with pytest.raises(AuthorizationError):
            await routes.mint_tokens(
                routes.MintRequest(to=ALICE, amount=1), BOB, routes.get_token()
            )

    def test_registries_share_event_log(self):
        assert routes.get_token().events is routes.get_privileges().events

    def test_validity_errors_map_to_422(self):
        assert status_for(ValidityError("bad")) == 422
        assert status_for(InvalidPrivilegeIdError(5, 3)) == 422


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

class TestTokenEndpoints:
    """Token and allowance endpoints over HTTP."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_missing_caller(self, client):
        response = client.post("/token/approve", json={"spender": BOB, "value": 1})
        assert response.status_code == 401

    def test_transfer_from_flow(self, client, clock):
        assert client.post(
            "/token/mint", json={"to": ALICE, "amount": 500}, headers=_as(ADMIN)
        ).status_code == 201
        client.post(
            "/token/approve",
            json={"spender": BOB, "value": 100, "period": 10},
            headers=_as(ALICE),
        )

        clock.advance(5)
        response = client.post(
            "/token/transfer-from",
            json={"owner": ALICE, "to": CAROL, "amount": 60},
            headers=_as(BOB),
        )
        assert response.json() == {"success": True}
        assert client.get(f"/token/allowance/{ALICE}/{BOB}").json()["amount"] == 40

        clock.advance(6)
        response = client.post(
            "/token/transfer-from",
            json={"owner": ALICE, "to": CAROL, "amount": 1},
            headers=_as(BOB),
        )
        assert response.status_code == 409
        assert response.json()["error"] == "AllowanceExceededError"

    def test_decrease_underflow(self, client):
        client.post(
            "/token/approve",
            json={"spender": BOB, "value": 5, "period": 10},
            headers=_as(ALICE),
        )
        response = client.post(
            "/token/decrease-allowance",
            json={"spender": BOB, "value": 6},
            headers=_as(ALICE),
        )
        assert response.status_code == 409
        assert response.json()["error"] == "ArithmeticUnderflowError"

    def test_token_info(self, client):
        body = client.get("/token").json()
        assert body["default_expiration"] == 30 * 24 * 60 * 60
        assert body["total_supply"] == 0


class TestPrivilegeEndpoints:
    """Item and privilege endpoints over HTTP."""

    @pytest.fixture
    def minted(self, client):
        response = client.post(
            "/items/mint", json={"to": BOB, "token_id": 1}, headers=_as(ADMIN)
        )
        assert response.status_code == 201
        return client

    def test_set_and_check_privilege(self, minted, clock):
        response = minted.put(
            "/items/1/privileges/0", json={"user": ALICE, "expires": 1100}, headers=_as(BOB)
        )
        assert response.status_code == 200
        assert response.json()["holder"] == ALICE

        check = minted.get(f"/items/1/privileges/0/holders/{ALICE}").json()
        assert check["has_privilege"] is True

        clock.set(1200)
        assert minted.get(f"/items/1/privileges/0/holders/{BOB}").json()["has_privilege"] is True

    def test_out_of_range_is_422(self, minted):
        response = minted.put(
            "/items/1/privileges/3", json={"user": ALICE, "expires": 1100}, headers=_as(BOB)
        )
        assert response.status_code == 422
        assert response.json()["error"] == "InvalidPrivilegeIdError"

    def test_stranger_is_403(self, minted):
        response = minted.put(
            "/items/1/privileges/0", json={"user": CAROL, "expires": 1100}, headers=_as(CAROL)
        )
        assert response.status_code == 403

    def test_unknown_item_is_404(self, minted):
        assert minted.get("/items/99").status_code == 404

    def test_delegate_and_clone(self, minted):
        minted.put("/privileges/1/cloneable", json={"cloneable": True}, headers=_as(ADMIN))
        minted.put(
            "/items/1/privileges/1", json={"user": ALICE, "expires": 1100}, headers=_as(BOB)
        )
        minted.post("/delegates", json={"delegate": CAROL, "enabled": True}, headers=_as(ALICE))

        response = minted.post(
            "/items/1/privileges/1/clone", json={"referrer": ALICE}, headers=_as(CAROL)
        )
        assert response.json() == {"success": True}

        events = minted.get("/events", params={"event": "PrivilegeCloned"}).json()
        assert len(events) == 1
        assert events[0]["recipient"] == CAROL

    def test_privilege_total(self, minted):
        response = minted.put("/privileges/total", json={"privilege_total": 5}, headers=_as(ADMIN))
        assert response.json()["privilege_total"] == 5

        response = minted.put("/privileges/total", json={"privilege_total": 1}, headers=_as(BOB))
        assert response.status_code == 403
