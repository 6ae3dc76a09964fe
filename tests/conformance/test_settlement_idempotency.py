"""
Settlement Idempotency Conformance Tests

INVARIANT: Each contract settles at most once.

    ∀ contract C, ∀ day d:
        sweep(d) settles C ⟹ every later sweep leaves C and all balances alone
        ACTIVE → PROCESSED is the only transition; PROCESSED is terminal

This guarantees repeated day advances never double-charge a renter.
"""

from hypothesis import given, settings
from hypothesis import strategies as st
from decimal import Decimal

from rental import RentalSystem, RentalConfig, ContractStatus


class TestSettlementIdempotency:

    @given(
        end=st.integers(min_value=0, max_value=10),
        repeats=st.integers(min_value=1, max_value=5),
    )
    @settings(max_examples=50)
    def test_repeated_sweeps_settle_once(self, end, repeats):
        system = RentalSystem(RentalConfig(seed=3))
        owner = system.register_member("Owner", "owner@example.com", "11111111", credits=0)
        renter = system.register_member("Renter", "renter@example.com", "22222222", credits=1000)
        hammer = system.register_item("Hammer", "A sturdy hammer", "TOOL", 10, owner.member_id)
        contract = system.create_contract(hammer.item_id, renter.member_id, 0, end)

        system.advance_day(end)
        after_first = (owner.credits, renter.credits)

        for _ in range(repeats):
            report = system.process_due_contracts()
            assert report.settled == ()
            system.advance_day(0)

        assert (owner.credits, renter.credits) == after_first
        assert owner.credits == Decimal(10 * (end + 1))
        assert len(system.engine.settlement_log) == 1
        assert system.contracts.get(contract.contract_id).status == ContractStatus.PROCESSED

    @given(steps=st.lists(st.integers(min_value=0, max_value=4), min_size=1, max_size=8))
    @settings(max_examples=50)
    def test_any_advance_schedule_settles_once(self, steps):
        """
        PROPERTY: However the clock reaches the end day, the contract
        is settled exactly once, at the first sweep on or after it.
        """
        system = RentalSystem(RentalConfig(seed=4))
        owner = system.register_member("Owner", "owner@example.com", "11111111", credits=0)
        renter = system.register_member("Renter", "renter@example.com", "22222222", credits=1000)
        hammer = system.register_item("Hammer", "A sturdy hammer", "TOOL", 10, owner.member_id)
        contract = system.create_contract(hammer.item_id, renter.member_id, 2, 5)

        settled_on = []
        for days in steps:
            report = system.advance_day(days)
            settled_on.extend(s.day for s in report.settled)

        if system.current_day >= 5:
            assert len(settled_on) == 1
            assert settled_on[0] >= 5
            assert owner.credits == Decimal("40")
        else:
            assert settled_on == []
            assert not system.contracts.get(contract.contract_id).processed
            assert owner.credits == Decimal("0")
