"""
system.py - Rental System Facade

The RentalSystem wires the member and item registries, the contract
repository, the settlement engine and the clock together, and exposes the
id-based procedural boundary a console or other caller talks to.

Key responsibilities:
    - Own every store explicitly (no state on entity classes)
    - Resolve ids to live records before handing them to the core
    - Enforce deletion guards that span several stores
    - Report credit conservation across settlements
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union

from .core import (
    Contract, ItemCategory, ItemSnapshot, MemberSnapshot, RentalConfig,
    Settlement, SettlementReport,
    MissingParty, ItemInUse, MemberInUse,
    to_decimal,
)
from .clock import Clock
from .contracts import ContractRepository, create_contract
from .items import Item, ItemRegistry
from .members import Member, MemberRegistry
from .settlement import SettlementEngine


class RentalSystem:
    """
    In-memory rental bookkeeping: members, items, contracts and a day clock.

    Thread Safety:
        Not thread-safe. A settlement sweep touches contracts, members and
        items at once and must never interleave with contract creation.

    Example:
        system = RentalSystem()
        alice = system.register_member("Alice", "alice@example.com", "1234567890", credits=500)
        bob = system.register_member("Bob", "bob@example.com", "0987654321")
        bike = system.register_item("Bicycle", "Mountain bike", "VEHICLE", 50, alice.member_id)
        system.create_contract(bike.item_id, bob.member_id, 0, 1)
        system.advance_day(1)   # bob pays alice 100 credits
    """

    def __init__(self, config: Optional[RentalConfig] = None):
        self.config = config or RentalConfig()
        verbose = self.config.verbose
        self.members = MemberRegistry(self.config, verbose=verbose)
        self.items = ItemRegistry(verbose=verbose)
        self.contracts = ContractRepository(verbose=verbose)
        self.engine = SettlementEngine(self.contracts, self.members, self.items, verbose=verbose)
        self.clock = Clock(self.engine, verbose=verbose)
        self.clock.reset()

    @property
    def current_day(self) -> int:
        return self.clock.current_day

    # ========================================================================
    # MEMBERS
    # ========================================================================

    def register_member(self, name: str, email: str, phone: str, credits=None) -> Member:
        return self.members.create(name, email, phone, credits)

    def update_member(self, member_id: str, name: str, email: str, phone: str) -> Member:
        return self.members.update(member_id, name, email, phone)

    def remove_member(self, member_id: str) -> Member:
        """
        Remove a member who owns nothing and has no unprocessed contract.

        Raises:
            MemberNotFound: If no member has this id
            MemberInUse: If the member owns items or is party to an active contract
        """
        member = self.members.get(member_id)
        if member.owned_item_ids or self.items.owned_by(member.member_id):
            raise MemberInUse(f"Member {member.member_id} still owns items")
        if self.contracts.is_member_involved_in_active_contract(member.member_id):
            raise MemberInUse(f"Member {member.member_id} is party to an active contract")
        return self.members.remove(member.member_id)

    def list_members(self) -> Tuple[MemberSnapshot, ...]:
        return self.members.get_all_copy()

    # ========================================================================
    # ITEMS
    # ========================================================================

    def register_item(
        self,
        name: str,
        description: str,
        category: Union[ItemCategory, str],
        cost_per_day,
        owner_id: str,
    ) -> Item:
        """
        Raises:
            MissingParty: If owner_id does not name a member
            InvalidItemDetails, InvalidCategory, InvalidCost
        """
        owner = self.members.find(owner_id)
        if owner is None:
            raise MissingParty(f"Owner {owner_id} not found")
        return self.items.create(name, description, category, cost_per_day, owner)

    def update_item(
        self,
        item_id: int,
        name: str,
        description: str,
        category: Union[ItemCategory, str],
        cost_per_day,
    ) -> Item:
        return self.items.update(item_id, name, description, category, cost_per_day)

    def remove_item(self, item_id: int) -> Item:
        """
        Remove an item with no pending or running obligations.

        Raises:
            ItemNotFound: If no item has this id
            ItemInUse: If an unprocessed contract for it ends today or later
        """
        item = self.items.get(item_id)
        if self.contracts.is_item_involved_in_future_or_active_contract(item_id, self.current_day):
            raise ItemInUse(f"Item {item_id} has active or future contracts")
        return self.items.remove(item_id, self.members.find(item.owner_id))

    def list_items(self) -> Tuple[ItemSnapshot, ...]:
        return self.items.get_all_copy()

    # ========================================================================
    # CONTRACTS AND TIME
    # ========================================================================

    def create_contract(self, item_id: int, renter_id: str, start_day: int, end_day: int) -> Contract:
        """
        Create and store a contract from ids.

        Raises:
            MissingParty: If either id is unknown
            OwnerRentingOwnItem, InvalidDateRange, DateConflict, InsufficientCredits
        """
        item = self.items.find(item_id)
        renter = self.members.find(renter_id)
        contract = create_contract(item, renter, start_day, end_day, self.contracts)
        return self.contracts.add(contract)

    def list_contracts(self) -> Tuple[Contract, ...]:
        return self.contracts.get_all_copy()

    def advance_day(self, days: int = 1) -> SettlementReport:
        """Advance the clock; due contracts are settled before this returns."""
        return self.clock.advance_days(days)

    def settle_contract(self, contract_id: str) -> Optional[Settlement]:
        """
        Settle one contract now, ahead of its end day, stamped with the clock's day.

        Returns:
            The Settlement record, or None if the contract was already PROCESSED

        Raises:
            ContractNotFound: If no contract has this id
            SettlementError: If the renter is short of credits or a party is gone
        """
        return self.engine.process(contract_id, self.current_day)

    def process_due_contracts(self, current_day: Optional[int] = None) -> SettlementReport:
        """Run a settlement sweep (default: for the clock's current day)."""
        day = self.current_day if current_day is None else current_day
        return self.engine.process_due_contracts(day)

    # ========================================================================
    # CONSERVATION
    # ========================================================================

    def total_credits(self) -> Decimal:
        return self.members.total_credits()

    def verify_conservation(
        self,
        expected_total,
        tolerance: Decimal = Decimal("0"),
    ) -> Dict[str, Any]:
        """
        Check that settlements only moved credits between members.

        Args:
            expected_total: Total credits recorded before the operations under test
            tolerance: Allowed absolute difference

        Returns:
            Dict with keys 'valid', 'expected', 'actual', 'difference'

        Example:
            before = system.total_credits()
            system.advance_day(10)
            assert system.verify_conservation(before)['valid']
        """
        expected = to_decimal(expected_total)
        actual = self.total_credits()
        difference = abs(actual - expected)
        return {
            'valid': difference <= tolerance,
            'expected': expected,
            'actual': actual,
            'difference': difference,
        }
