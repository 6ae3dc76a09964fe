"""
settlement.py - Settlement Engine

Scans outstanding contracts against the current day and settles every one
that is due.

Per contract:
    ACTIVE --[current_day >= end_day]--> PROCESSED (terminal)

Settling a contract:
1. Re-check the renter can still cover the total cost (no negative balances)
2. Debit renter, credit the item owner by the same amount
3. Mark the contract PROCESSED
4. Put the item back in circulation (available) unless another unprocessed
   contract still holds it

A sweep walks the repository in insertion order and is partial-failure
tolerant: one renter's shortfall is recorded and the sweep moves on. The
settlement log is the audit trail.
"""

from __future__ import annotations
from typing import List, Optional

from .core import (
    Contract, Settlement, SettlementFailure, SettlementReport,
    SettlementError,
)
from .contracts import ContractRepository
from .items import ItemRegistry
from .members import MemberRegistry


class SettlementEngine:
    """
    Settles due contracts by moving credits from renter to owner.

    Features:
    - Idempotent: PROCESSED contracts are skipped, so repeating a sweep for
      the same day changes nothing
    - Partial-failure tolerant sweeps (failures reported, not raised)
    - Full audit trail via settlement_log
    """

    def __init__(
        self,
        contracts: ContractRepository,
        members: MemberRegistry,
        items: ItemRegistry,
        verbose: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            contracts: Repository to sweep
            members: Live member records (credits are moved here)
            items: Live item records (availability is restored here)
            verbose: Print one line per settlement/failure
        """
        self.contracts = contracts
        self.members = members
        self.items = items
        self.verbose = verbose
        self.settlement_log: List[Settlement] = []

    def check_and_process(self, contract_id: str, current_day: int) -> Optional[Settlement]:
        """
        Settle the contract if it is ACTIVE and current_day >= end_day.

        Returns:
            The Settlement record, or None if the contract was not due

        Raises:
            SettlementError: If the contract is due but cannot be settled
        """
        contract = self.contracts.get(contract_id)
        if not contract.is_due(current_day):
            return None
        return self._settle(contract, current_day)

    def process(self, contract_id: str, day: int) -> Optional[Settlement]:
        """
        Settle a contract regardless of its end day.

        A PROCESSED contract is a no-op and returns None.

        Args:
            contract_id: Contract to settle
            day: Clock day recorded on the settlement

        Raises:
            SettlementError: If the renter is short of credits or a party is gone.
                The contract stays ACTIVE and no balance changes.
        """
        contract = self.contracts.get(contract_id)
        if contract.processed:
            return None
        return self._settle(contract, day)

    def process_due_contracts(self, current_day: int) -> SettlementReport:
        """
        Sweep every contract, settling all that are due.

        Safe to call repeatedly with the same or an unchanged day.

        Args:
            current_day: Day to test end days against

        Returns:
            SettlementReport listing applied settlements and failures
        """
        settled: List[Settlement] = []
        failures: List[SettlementFailure] = []

        for contract in self.contracts:
            try:
                record = self.check_and_process(contract.contract_id, current_day)
            except SettlementError as e:
                failures.append(SettlementFailure(contract.contract_id, current_day, str(e)))
                if self.verbose:
                    print(f"⚠️  SETTLEMENT FAILED: {contract.contract_id}: {e}")
                continue
            if record is not None:
                settled.append(record)

        return SettlementReport(day=current_day, settled=tuple(settled), failures=tuple(failures))

    def _settle(self, contract: Contract, day: int) -> Settlement:
        renter = self.members.find(contract.renter.member_id)
        owner = self.members.find(contract.item.owner_id)
        if renter is None:
            raise SettlementError(f"Renter {contract.renter.member_id} no longer exists")
        if owner is None:
            raise SettlementError(f"Owner {contract.item.owner_id} no longer exists")

        amount = contract.total_cost
        if renter.credits < amount:
            raise SettlementError(
                f"Insufficient credits: renter {renter.member_id} has {renter.credits}, needs {amount}"
            )

        # Validation passed - apply the transfer and the state change together
        renter.credits -= amount
        owner.credits += amount
        self.contracts.mark_processed(contract.contract_id, day)
        item = self.items.find(contract.item.item_id)
        if item is not None:
            # Still booked while another unprocessed contract holds the item
            item.available = not any(
                c.item.item_id == item.item_id for c in self.contracts.active()
            )

        record = Settlement(
            contract_id=contract.contract_id,
            renter_id=renter.member_id,
            owner_id=owner.member_id,
            amount=amount,
            day=day,
        )
        self.settlement_log.append(record)
        if self.verbose:
            print(f"✓ SETTLED: {contract.contract_id} {amount} credits "
                  f"{renter.member_id}→{owner.member_id} (day {day})")
        return record
