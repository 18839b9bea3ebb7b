"""Tests for cloneable privileges."""

import pytest

from token_rights.exceptions import AuthorizationError, InvalidPrivilegeIdError
from token_rights.registry.item_registry import ItemRegistry
from token_rights.registry.privilege_registry import PrivilegeRegistry

ADMIN = "0xadmin"
ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"
DAVE = "0xdave"


@pytest.fixture
def shared(privileges, clock):
    """Privilege 1 of item 1 is cloneable and held by ALICE until t=1500."""
    privileges.set_cloneable(ADMIN, 1, True)
    privileges.set_privilege(BOB, 1, 1, ALICE, 1500)
    return privileges


class TestSetCloneable:
    """Tests for the cloneable flag."""

    def test_admin_marks_cloneable(self, privileges):
        privileges.set_cloneable(ADMIN, 2, True)
        assert privileges.is_cloneable(2)

        privileges.set_cloneable(ADMIN, 2, False)
        assert not privileges.is_cloneable(2)

    def test_non_admin_denied(self, privileges):
        with pytest.raises(AuthorizationError):
            privileges.set_cloneable(BOB, 0, True)

    def test_out_of_range(self, privileges):
        with pytest.raises(InvalidPrivilegeIdError):
            privileges.set_cloneable(ADMIN, 3, True)

    def test_lowering_total_clears_flag(self, privileges):
        privileges.set_cloneable(ADMIN, 2, True)
        privileges.set_privilege_total(ADMIN, 2)
        privileges.set_privilege_total(ADMIN, 3)
        assert not privileges.is_cloneable(2)


class TestClonePrivilege:
    """Tests for clone_privilege."""

    def test_clone_keeps_referrer(self, shared):
        assert shared.clone_privilege(CAROL, 1, 1, ALICE) is True

        assert shared.has_privilege(1, 1, CAROL)
        assert shared.has_privilege(1, 1, ALICE)
        assert shared.get_slot(1, 1).holder == ALICE

    def test_clone_expires_with_source(self, shared, clock):
        shared.clone_privilege(CAROL, 1, 1, ALICE)

        clone = shared.clones_of(1, 1)[0]
        assert clone.referrer == ALICE
        assert clone.recipient == CAROL
        assert clone.expires_at == 1500
        assert clone.cloned_at == 1000

        clock.set(1501)
        assert not shared.has_privilege(1, 1, CAROL)
        assert shared.has_privilege(1, 1, BOB)

    def test_emits_cloned(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)

        event = shared.events.last("PrivilegeCloned")
        assert event.token_id == 1
        assert event.privilege_id == 1
        assert event.sender == ALICE
        assert event.recipient == CAROL

    def test_clone_of_clone(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)
        assert shared.clone_privilege(DAVE, 1, 1, CAROL) is True
        assert shared.has_privilege(1, 1, DAVE)

    def test_not_cloneable(self, shared):
        shared.set_privilege(BOB, 1, 0, ALICE, 1500)
        assert shared.clone_privilege(CAROL, 1, 0, ALICE) is False
        assert not shared.has_privilege(1, 0, CAROL)

    def test_out_of_range(self, shared):
        assert shared.clone_privilege(CAROL, 1, 7, ALICE) is False

    def test_unassigned_slot(self, privileges):
        """The owner implicitly holds an unassigned slot, but it cannot be cloned."""
        privileges.set_cloneable(ADMIN, 2, True)
        assert privileges.clone_privilege(CAROL, 1, 2, BOB) is False

    def test_expired_slot(self, shared, clock):
        clock.set(1501)
        assert shared.clone_privilege(CAROL, 1, 1, ALICE) is False

    def test_referrer_without_privilege(self, shared):
        assert shared.clone_privilege(CAROL, 1, 1, DAVE) is False
        assert shared.clones_of(1, 1) == []

    def test_self_clone(self, shared):
        assert shared.clone_privilege(ALICE, 1, 1, ALICE) is False

    def test_unknown_item(self, shared):
        assert shared.clone_privilege(CAROL, 99, 1, ALICE) is False

    def test_failure_emits_nothing(self, shared):
        before = len(shared.events)
        shared.clone_privilege(CAROL, 1, 1, DAVE)
        assert len(shared.events) == before

    def test_lowering_total_drops_clones(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)
        shared.set_privilege_total(ADMIN, 1)

        assert shared.clones_of(1, 1) == []
        assert not shared.has_privilege(1, 1, CAROL)


class TestCloneRevocation:
    """Clones follow the slot they were copied from."""

    def test_owner_revokes_cloned_slot(self, shared, clock):
        shared.clone_privilege(CAROL, 1, 1, ALICE)

        shared.set_privilege(BOB, 1, 1, DAVE, 999)

        assert not shared.has_privilege(1, 1, ALICE)
        assert not shared.has_privilege(1, 1, CAROL)
        assert shared.has_privilege(1, 1, BOB)
        assert shared.clones_of(1, 1) == []

    def test_owner_extends_slot_voids_clones(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)

        shared.set_privilege(BOB, 1, 1, ALICE, 1600)

        assert shared.has_privilege(1, 1, ALICE)
        assert not shared.has_privilege(1, 1, CAROL)

    def test_holder_hands_on_voids_clones(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)
        shared.clone_privilege(DAVE, 1, 1, CAROL)

        shared.set_privilege(ALICE, 1, 1, "0xerin", 0)

        assert shared.has_privilege(1, 1, "0xerin")
        assert not shared.has_privilege(1, 1, CAROL)
        assert not shared.has_privilege(1, 1, DAVE)

    def test_chain_survives_unrelated_slot_write(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)
        shared.clone_privilege(DAVE, 1, 1, CAROL)

        shared.set_privilege(BOB, 1, 0, ALICE, 1500)

        assert shared.has_privilege(1, 1, DAVE)
        assert len(shared.clones_of(1, 1)) == 2

    def test_holder_cannot_clone_again(self, shared):
        shared.clone_privilege(CAROL, 1, 1, ALICE)
        assert shared.clone_privilege(ALICE, 1, 1, CAROL) is False
        assert shared.has_privilege(1, 1, CAROL)


class TestCloneClock:
    """clone_privilege judges the source slot at one instant."""

    def test_reads_clock_once(self, counting_clock, events):
        clock = counting_clock
        items = ItemRegistry(clock=clock, events=events)
        registry = PrivilegeRegistry(
            items=items, clock=clock, events=events, privilege_total=3, admin=ADMIN
        )
        items.mint(BOB, 1)
        registry.set_cloneable(ADMIN, 1, True)
        registry.set_privilege(BOB, 1, 1, ALICE, 1500)

        clock.reads = 0
        assert registry.clone_privilege(CAROL, 1, 1, ALICE) is True
        assert clock.reads == 1
