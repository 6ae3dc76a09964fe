"""
Tests for settlement.py - SettlementEngine

Tests:
- Due contracts move credits renter -> owner and become PROCESSED
- Contracts not yet due are left alone
- Re-running a sweep is a no-op
- Shortfalls are reported and the sweep carries on
- process() settles early, and is a no-op on PROCESSED contracts
"""

import pytest
from decimal import Decimal

from rental import ContractStatus, SettlementError, create_contract


@pytest.fixture
def world(parts):
    """Alice owns a 50/day bicycle and a 10/day hammer; Rita and Charlie rent."""
    members, items = parts['members'], parts['items']
    alice = members.create("Alice", "alice@example.com", "1234567890", credits=500)
    rita = members.create("Rita", "rita@example.com", "5551234567", credits=1000)
    charlie = members.create("Charlie", "charlie@example.com", "2345678901", credits=100)
    bicycle = items.create("Bicycle", "Mountain bike", "VEHICLE", 50, alice)
    hammer = items.create("Hammer", "A sturdy hammer", "TOOL", 10, alice)
    return {**parts, 'alice': alice, 'rita': rita, 'charlie': charlie,
            'bicycle': bicycle, 'hammer': hammer}


def _rent(world, item, renter, start, end):
    contract = create_contract(world[item], world[renter], start, end, world['contracts'])
    return world['contracts'].add(contract)


class TestSweep:

    def test_settles_due_contract(self, world):
        contract = _rent(world, 'bicycle', 'rita', 5, 7)
        report = world['engine'].process_due_contracts(7)

        assert world['rita'].credits == Decimal("850")
        assert world['alice'].credits == Decimal("650")
        assert world['contracts'].get(contract.contract_id).status == ContractStatus.PROCESSED
        assert world['bicycle'].available is True
        assert report.ok
        assert [s.contract_id for s in report.settled] == [contract.contract_id]
        assert report.total_settled == Decimal("150")

    def test_not_due_before_end_day(self, world):
        contract = _rent(world, 'bicycle', 'rita', 5, 7)
        report = world['engine'].process_due_contracts(6)

        assert report.settled == ()
        assert world['rita'].credits == Decimal("1000")
        assert world['bicycle'].available is False
        assert not world['contracts'].get(contract.contract_id).processed

    def test_settles_late(self, world):
        _rent(world, 'bicycle', 'rita', 5, 7)
        report = world['engine'].process_due_contracts(30)
        assert len(report.settled) == 1
        assert report.settled[0].day == 30

    def test_repeat_sweep_is_noop(self, world):
        _rent(world, 'bicycle', 'rita', 5, 7)
        world['engine'].process_due_contracts(7)
        second = world['engine'].process_due_contracts(7)

        assert second.settled == ()
        assert world['rita'].credits == Decimal("850")
        assert world['alice'].credits == Decimal("650")
        assert len(world['engine'].settlement_log) == 1

    def test_shortfall_reported_and_sweep_continues(self, world):
        short = _rent(world, 'hammer', 'charlie', 1, 3)          # 30 credits
        good = _rent(world, 'bicycle', 'rita', 1, 2)             # 100 credits
        world['charlie'].credits = Decimal("10")                  # spent elsewhere

        report = world['engine'].process_due_contracts(3)

        assert [f.contract_id for f in report.failures] == [short.contract_id]
        assert "Insufficient credits" in report.failures[0].reason
        assert [s.contract_id for s in report.settled] == [good.contract_id]
        assert world['charlie'].credits == Decimal("10")
        assert not world['contracts'].get(short.contract_id).processed
        assert world['hammer'].available is False

    def test_failed_contract_retried_on_later_sweep(self, world):
        short = _rent(world, 'hammer', 'charlie', 1, 3)
        world['charlie'].credits = Decimal("10")
        world['engine'].process_due_contracts(3)

        world['charlie'].credits = Decimal("40")
        report = world['engine'].process_due_contracts(4)

        assert [s.contract_id for s in report.settled] == [short.contract_id]
        assert world['charlie'].credits == Decimal("10")

    def test_missing_owner_is_failure(self, world):
        contract = _rent(world, 'bicycle', 'rita', 1, 2)
        world['members'].remove(world['alice'].member_id)

        report = world['engine'].process_due_contracts(2)

        assert report.failures[0].contract_id == contract.contract_id
        assert world['rita'].credits == Decimal("1000")

    def test_deleted_item_still_settles(self, world):
        contract = _rent(world, 'bicycle', 'rita', 1, 2)
        world['items'].remove(world['bicycle'].item_id, world['alice'])

        report = world['engine'].process_due_contracts(2)

        assert report.settled[0].contract_id == contract.contract_id
        assert world['alice'].credits == Decimal("600")

    def test_item_stays_booked_while_next_contract_active(self, world):
        _rent(world, 'bicycle', 'rita', 5, 7)
        later = _rent(world, 'bicycle', 'rita', 8, 10)

        world['engine'].process_due_contracts(7)
        assert world['bicycle'].available is False

        world['engine'].process_due_contracts(10)
        assert world['contracts'].get(later.contract_id).processed
        assert world['bicycle'].available is True

    def test_settlement_log_records_transfer(self, world):
        contract = _rent(world, 'hammer', 'charlie', 5, 7)
        world['engine'].process_due_contracts(7)

        (record,) = world['engine'].settlement_log
        assert record.contract_id == contract.contract_id
        assert record.renter_id == world['charlie'].member_id
        assert record.owner_id == world['alice'].member_id
        assert record.amount == Decimal("30")
        assert record.day == 7


class TestSingleContract:

    def test_check_and_process_not_due(self, world):
        contract = _rent(world, 'bicycle', 'rita', 5, 7)
        assert world['engine'].check_and_process(contract.contract_id, 4) is None

    def test_check_and_process_raises_on_shortfall(self, world):
        contract = _rent(world, 'hammer', 'charlie', 1, 3)
        world['charlie'].credits = Decimal("0")
        with pytest.raises(SettlementError):
            world['engine'].check_and_process(contract.contract_id, 3)

    def test_process_settles_before_end_day(self, world):
        contract = _rent(world, 'bicycle', 'rita', 5, 7)
        record = world['engine'].process(contract.contract_id, day=2)

        assert record.amount == Decimal("150")
        assert record.day == 2
        assert world['contracts'].get(contract.contract_id).processed

    def test_process_records_given_day(self, world):
        contract = _rent(world, 'bicycle', 'rita', 5, 7)
        world['engine'].process_due_contracts(3)
        assert world['engine'].process(contract.contract_id, 6).day == 6

    def test_process_on_processed_is_noop(self, world):
        contract = _rent(world, 'bicycle', 'rita', 5, 7)
        world['engine'].process(contract.contract_id, day=7)

        assert world['engine'].process(contract.contract_id, day=8) is None
        assert world['rita'].credits == Decimal("850")

    def test_process_shortfall_leaves_state(self, world):
        contract = _rent(world, 'hammer', 'charlie', 1, 3)
        world['charlie'].credits = Decimal("5")
        with pytest.raises(SettlementError):
            world['engine'].process(contract.contract_id, day=3)

        assert world['charlie'].credits == Decimal("5")
        assert world['alice'].credits == Decimal("500")
        assert not world['contracts'].get(contract.contract_id).processed
        assert world['engine'].settlement_log == []
