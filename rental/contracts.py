"""
contracts.py - Contract Factory and Contract Repository

This module provides contract creation and storage:
1. create_contract() - Validating factory, the single way to build a Contract
2. ContractRepository - Append-only, insertion-ordered store of every contract

Validation order (fail-fast, first violation wins):
    1. item and renter present                  -> MissingParty
    2. renter is not the item's owner           -> OwnerRentingOwnItem
    3. 0 <= start_day <= end_day                -> InvalidDateRange
    4. no overlap with an unprocessed contract  -> DateConflict
    5. renter credits cover the total cost      -> InsufficientCredits

A rejected request mutates nothing. An accepted one flips the live item to
unavailable; adding the contract to the repository is the caller's job, and
no credits move until settlement.
"""

from __future__ import annotations
from typing import Dict, Iterator, Optional, Tuple
import uuid

from .core import (
    Contract, ContractStatus,
    MissingParty, OwnerRentingOwnItem, InvalidDateRange, DateConflict,
    InsufficientCredits, ContractNotFound, DuplicateContract, SettlementError,
    calculate_total_cost,
)
from .items import Item
from .members import Member


class ContractRepository:
    """
    Authoritative ordered collection of all contracts ever created.

    There is no delete: contracts are appended once and changed exactly once,
    from ACTIVE to PROCESSED, by the settlement engine via mark_processed().
    Readers get immutable Contract values, so nothing handed out can be used
    to reach back into the store.

    Thread Safety:
        Not thread-safe. Contract creation and settlement sweeps must not
        interleave; keep one writer.
    """

    def __init__(self, verbose: bool = False):
        self._contracts: Dict[str, Contract] = {}
        self.verbose = verbose

    # ========================================================================
    # READ
    # ========================================================================

    def __len__(self) -> int:
        return len(self._contracts)

    def __contains__(self, contract_id: str) -> bool:
        return contract_id in self._contracts

    def __iter__(self) -> Iterator[Contract]:
        # Iterate over a copy so a sweep may update entries as it goes
        return iter(tuple(self._contracts.values()))

    def get(self, contract_id: str) -> Contract:
        """
        Raises:
            ContractNotFound: If no contract has this id
        """
        try:
            return self._contracts[contract_id]
        except KeyError:
            raise ContractNotFound(f"Contract {contract_id} not found") from None

    def get_all_copy(self) -> Tuple[Contract, ...]:
        """Snapshot of every contract in insertion order."""
        return tuple(self._contracts.values())

    def active(self) -> Tuple[Contract, ...]:
        return tuple(c for c in self._contracts.values() if not c.processed)

    def for_item(self, item_id: int) -> Tuple[Contract, ...]:
        return tuple(c for c in self._contracts.values() if c.item.item_id == item_id)

    def has_date_conflict(self, item_id: int, start_day: int, end_day: int) -> bool:
        """
        True if an unprocessed contract for this item overlaps [start_day, end_day].

        Processed contracts are ignored: their item is back in circulation.
        """
        for contract in self._contracts.values():
            if contract.processed or contract.item.item_id != item_id:
                continue
            if contract.overlaps(start_day, end_day):
                return True
        return False

    def is_item_involved_in_future_or_active_contract(self, item_id: int, current_day: int) -> bool:
        """True if an unprocessed contract for the item ends on or after current_day."""
        return any(
            not c.processed and c.item.item_id == item_id and c.end_day >= current_day
            for c in self._contracts.values()
        )

    def is_member_involved_in_active_contract(self, member_id: str) -> bool:
        """True if the member rents, or owns the item of, any unprocessed contract."""
        return any(
            not c.processed and member_id in (c.renter.member_id, c.item.owner_id)
            for c in self._contracts.values()
        )

    # ========================================================================
    # MUTATE
    # ========================================================================

    def add(self, contract: Contract) -> Contract:
        """
        Append a contract.

        Raises:
            DuplicateContract: If a contract with the same id is already stored
        """
        if contract.contract_id in self._contracts:
            raise DuplicateContract(f"Contract {contract.contract_id} already exists")
        self._contracts[contract.contract_id] = contract
        if self.verbose:
            print(f"✓ Contract added: {contract!r}")
        return contract

    def mark_processed(self, contract_id: str, day: int) -> Contract:
        """
        Replace an ACTIVE contract with its PROCESSED copy.

        Raises:
            ContractNotFound: If no contract has this id
            SettlementError: If the contract is already PROCESSED
        """
        settled = self.get(contract_id).settle(day)
        self._contracts[contract_id] = settled
        return settled


def _new_contract_id() -> str:
    return str(uuid.uuid4())


def create_contract(
    item: Optional[Item],
    renter: Optional[Member],
    start_day: int,
    end_day: int,
    contracts: ContractRepository,
    contract_id: Optional[str] = None,
) -> Contract:
    """
    Validate a rental request and build an ACTIVE contract.

    Args:
        item: Live item to rent
        renter: Live member renting it
        start_day: First rental day (inclusive)
        end_day: Last rental day (inclusive)
        contracts: Repository consulted for date conflicts
        contract_id: Explicit id (default: a fresh uuid4)

    Returns:
        A new ACTIVE Contract holding snapshots of item and renter. The live
        item is now unavailable. The contract is NOT yet in the repository.

    Raises:
        MissingParty, OwnerRentingOwnItem, InvalidDateRange, DateConflict,
        InsufficientCredits

    Example:
        contract = create_contract(bicycle, charlie, 5, 7, repo)
        repo.add(contract)
    """
    if item is None or renter is None:
        raise MissingParty("Item and renter must not be null")
    if item.owner_id == renter.member_id:
        raise OwnerRentingOwnItem(
            f"Member {renter.member_id} owns item {item.item_id} and cannot rent it"
        )
    if start_day < 0 or end_day < start_day:
        raise InvalidDateRange(f"Invalid start or end day: [{start_day}, {end_day}]")
    if contracts.has_date_conflict(item.item_id, start_day, end_day):
        raise DateConflict(
            f"Days [{start_day}, {end_day}] conflict with an existing contract for item {item.item_id}"
        )
    total_cost = calculate_total_cost(item.cost_per_day, start_day, end_day)
    if renter.credits < total_cost:
        raise InsufficientCredits(
            f"Renter {renter.member_id} has {renter.credits} credits, needs {total_cost}"
        )

    # All checks passed - only now touch live state
    item.available = False
    return Contract(
        contract_id=contract_id or _new_contract_id(),
        item=item.snapshot(),
        renter=renter.snapshot(),
        start_day=start_day,
        end_day=end_day,
        status=ContractStatus.ACTIVE,
    )
