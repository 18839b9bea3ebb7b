"""Tests for the item ownership registry."""

import pytest

from token_rights.exceptions import (
    AuthorizationError,
    ItemExistsError,
    ItemNotFoundError,
    ValidityError,
)

ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"


class TestMint:
    """Tests for minting and owner lookup."""

    def test_mint(self, items):
        items.mint(ALICE, 7)

        assert items.owner_of(7) == ALICE
        assert items.exists(7)
        assert items.balance_of(ALICE) == 1

    def test_mint_twice(self, items):
        items.mint(ALICE, 7)
        with pytest.raises(ItemExistsError):
            items.mint(BOB, 7)
        assert items.owner_of(7) == ALICE

    def test_owner_of_unknown(self, items):
        with pytest.raises(ItemNotFoundError):
            items.owner_of(99)

    def test_negative_id_rejected(self, items):
        with pytest.raises(ValidityError):
            items.mint(ALICE, -1)


class TestApprovals:
    """Tests for single-item and operator approvals."""

    def test_owner_approves(self, items):
        items.mint(ALICE, 1)
        items.approve(ALICE, BOB, 1)

        assert items.get_approved(1) == BOB
        assert items.is_approved_or_owner(BOB, 1)
        assert not items.is_approved_or_owner(CAROL, 1)

    def test_clear_approval(self, items):
        items.mint(ALICE, 1)
        items.approve(ALICE, BOB, 1)
        items.approve(ALICE, None, 1)
        assert items.get_approved(1) is None

    def test_stranger_cannot_approve(self, items):
        items.mint(ALICE, 1)
        with pytest.raises(AuthorizationError):
            items.approve(BOB, CAROL, 1)

    def test_operator_can_approve(self, items):
        items.mint(ALICE, 1)
        items.set_approval_for_all(ALICE, BOB, True)
        items.approve(BOB, CAROL, 1)
        assert items.get_approved(1) == CAROL

    def test_operator_approval(self, items):
        items.mint(ALICE, 1)
        items.set_approval_for_all(ALICE, BOB, True)

        assert items.is_approved_for_all(ALICE, BOB)
        assert items.is_approved_or_owner(BOB, 1)

        items.set_approval_for_all(ALICE, BOB, False)
        assert not items.is_approved_or_owner(BOB, 1)

    def test_self_operator_rejected(self, items):
        with pytest.raises(ValidityError):
            items.set_approval_for_all(ALICE, ALICE, True)


class TestTransfer:
    """Tests for transfer_from and burn."""

    def test_owner_transfers(self, items):
        items.mint(ALICE, 1)
        items.approve(ALICE, CAROL, 1)
        items.transfer_from(ALICE, ALICE, BOB, 1)

        assert items.owner_of(1) == BOB
        assert items.get_approved(1) is None
        assert items.balance_of(ALICE) == 0
        assert items.balance_of(BOB) == 1

    def test_approved_transfers(self, items):
        items.mint(ALICE, 1)
        items.approve(ALICE, CAROL, 1)
        items.transfer_from(CAROL, ALICE, BOB, 1)
        assert items.owner_of(1) == BOB

    def test_stranger_cannot_transfer(self, items):
        items.mint(ALICE, 1)
        with pytest.raises(AuthorizationError):
            items.transfer_from(BOB, ALICE, BOB, 1)
        assert items.owner_of(1) == ALICE

    def test_wrong_from_address(self, items):
        items.mint(ALICE, 1)
        with pytest.raises(ValidityError):
            items.transfer_from(ALICE, BOB, CAROL, 1)

    def test_burn(self, items):
        items.mint(ALICE, 1)
        items.burn(ALICE, 1)

        assert not items.exists(1)
        assert items.balance_of(ALICE) == 0

    def test_burn_notifies_listeners(self, items):
        burned = []
        items.add_burn_listener(burned.append)
        items.mint(ALICE, 1)
        items.burn(ALICE, 1)

        assert burned == [1]
