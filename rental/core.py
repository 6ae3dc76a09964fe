"""
Core types and pure functions for the rental bookkeeping system.

This module provides the foundational data structures for the rental core:
1. Configuration: RentalConfig with the defaults every component reads
2. Enums: ContractStatus, ItemCategory
3. Exceptions: RentalError and the validation/state error taxonomy
4. Immutable data structures: MemberSnapshot, ItemSnapshot, Contract, Settlement
5. Pure functions: cost calculation and the inclusive overlap rule

Nothing in this module mutates registry or repository state.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type
import string


# ============================================================================
# CONSTANTS
# ============================================================================

# Starting balance for a newly registered member.
DEFAULT_MEMBER_CREDITS = Decimal("100")

# Member ids are short random codes drawn from this alphabet.
MEMBER_ID_LENGTH = 6
MEMBER_ID_ALPHABET = string.ascii_uppercase + string.digits


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass(frozen=True)
class RentalConfig:
    """Configuration for a RentalSystem. Modify these to experiment."""
    default_member_credits: Decimal = DEFAULT_MEMBER_CREDITS
    member_id_length: int = MEMBER_ID_LENGTH
    member_id_alphabet: str = MEMBER_ID_ALPHABET
    # Seed for the member id generator (None = nondeterministic)
    seed: Optional[int] = None
    verbose: bool = False

    def __post_init__(self):
        if self.member_id_length <= 0:
            raise ValueError(f"member_id_length must be positive, got {self.member_id_length}")
        if not self.member_id_alphabet:
            raise ValueError("member_id_alphabet cannot be empty")
        try:
            credits = to_decimal(self.default_member_credits)
        except InvalidOperation:
            raise ValueError(
                f"default_member_credits must be a number, got {self.default_member_credits!r}"
            ) from None
        if not credits.is_finite():
            raise ValueError(f"default_member_credits must be finite, got {credits}")
        object.__setattr__(self, 'default_member_credits', credits)
        if self.default_member_credits < 0:
            raise ValueError(
                f"default_member_credits cannot be negative, got {self.default_member_credits}"
            )


def to_decimal(value: Any) -> Decimal:
    """Convert int/float/str to Decimal via str() so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ============================================================================
# ENUMS
# ============================================================================

class ContractStatus(Enum):
    """
    Lifecycle state of a rental contract.

    ACTIVE: Created and awaiting settlement.
    PROCESSED: Settled. Terminal - a processed contract never changes again.
    """
    ACTIVE = "active"
    PROCESSED = "processed"


class ItemCategory(Enum):
    """Predefined item categories."""
    VEHICLE = "VEHICLE"
    TOOL = "TOOL"
    ELECTRONICS = "ELECTRONICS"
    FURNITURE = "FURNITURE"
    OTHER = "OTHER"

    @classmethod
    def from_string(cls, category: str) -> 'ItemCategory':
        """
        Parse a category name case-insensitively.

        Raises:
            InvalidCategory: If category is empty or not a known name
        """
        if category is None or not str(category).strip():
            raise InvalidCategory("Item category cannot be empty")
        try:
            return cls[str(category).strip().upper()]
        except KeyError:
            raise InvalidCategory(f"Invalid category: {category}") from None

    def __str__(self) -> str:
        return self.value


# ============================================================================
# EXCEPTIONS
# ============================================================================

class RentalError(Exception):
    """Base exception for all rental-related errors."""
    pass


class ValidationError(RentalError, ValueError):
    """Raised when input violates a business rule. Never retried automatically."""
    pass


class MissingParty(ValidationError):
    """Raised when the item or renter of a contract is missing."""
    pass


class OwnerRentingOwnItem(ValidationError):
    """Raised when a member tries to rent an item they own."""
    pass


class InvalidDateRange(ValidationError):
    """Raised when start_day < 0 or end_day < start_day."""
    pass


class DateConflict(ValidationError):
    """Raised when the requested range overlaps an unprocessed contract for the same item."""
    pass


class InsufficientCredits(ValidationError):
    """Raised when the renter cannot cover the total cost at creation time."""
    pass


class InvalidCategory(ValidationError):
    """Raised when an item category is empty or unknown."""
    pass


class InvalidCost(ValidationError):
    """Raised when an item's cost per day is not positive."""
    pass


class InvalidMemberDetails(ValidationError):
    """Raised when a member's name, email or phone is malformed."""
    pass


class InvalidItemDetails(ValidationError):
    """Raised when an item's name or description is empty."""
    pass


class DuplicateContact(ValidationError):
    """Raised when an email or phone number is already registered."""
    pass


class InvalidDayAdvance(ValidationError):
    """Raised when the clock is asked to advance by a negative number of days."""
    pass


class MemberNotFound(RentalError, KeyError):
    """Raised when no member has the given id."""
    pass


class ItemNotFound(RentalError, KeyError):
    """Raised when no item has the given id."""
    pass


class ContractNotFound(RentalError, KeyError):
    """Raised when no contract has the given id."""
    pass


class DuplicateContract(RentalError):
    """Raised when adding a contract whose id the repository already holds."""
    pass


class ItemInUse(RentalError):
    """Raised when removing an item that still has an active or future contract."""
    pass


class MemberInUse(RentalError):
    """Raised when removing a member who owns items or takes part in an active contract."""
    pass


class StateError(RentalError):
    """Raised when an operation finds the system in a state it cannot proceed from."""
    pass


class SettlementError(StateError):
    """Raised when a due contract cannot be settled (renter short of credits, party gone)."""
    pass


# User-facing text for each error kind. Most specific class wins.
ERROR_MESSAGES: Dict[Type[RentalError], str] = {
    MissingParty: "Invalid item or renter ID.",
    OwnerRentingOwnItem: "Owner cannot rent their own item.",
    InvalidDateRange: "Invalid start or end day.",
    DateConflict: "The rental period conflicts with an existing contract.",
    InsufficientCredits: "Renter does not have enough credits.",
    InvalidCategory: "Invalid category. Please try again.",
    InvalidCost: "Cost per day must be a positive number.",
    InvalidMemberDetails: "Invalid member details. Check name, email and phone.",
    InvalidItemDetails: "Item name and description cannot be empty.",
    DuplicateContact: "Email or phone number already exists.",
    InvalidDayAdvance: "Number of days to advance cannot be negative.",
    MemberNotFound: "Member not found.",
    ItemNotFound: "Item not found.",
    ContractNotFound: "Contract not found.",
    DuplicateContract: "Contract already exists.",
    ItemInUse: "Cannot delete an item that has active or future contracts.",
    MemberInUse: "Cannot delete member with active items or contracts.",
    SettlementError: "Insufficient credits. Contract cannot be processed.",
}


def user_message(exc: RentalError) -> str:
    """
    Map a RentalError to the sentence a caller should show the user.

    Walks the exception's MRO so subclasses without their own entry fall
    back to their nearest mapped ancestor.
    """
    for cls in type(exc).__mro__:
        if cls in ERROR_MESSAGES:
            return ERROR_MESSAGES[cls]
    return "Something went wrong. Please try again."


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def calculate_total_cost(cost_per_day: Decimal, start_day: int, end_day: int) -> Decimal:
    """
    Total rental cost. The range is inclusive of both the start and end day.

    Example:
        calculate_total_cost(Decimal("50"), 5, 7)  # 3 days -> Decimal("150")
    """
    rental_days = end_day - start_day + 1
    return rental_days * to_decimal(cost_per_day)


def ranges_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """
    Inclusive day-range overlap test.

    [a, b] and [c, d] overlap unless b < c or a > d, so ranges that share
    only an endpoint DO overlap.
    """
    return not (end_a < start_b or start_a > end_b)


# ============================================================================
# SNAPSHOTS
# ============================================================================

@dataclass(frozen=True, slots=True)
class MemberSnapshot:
    """Immutable value copy of a member at a point in time."""
    member_id: str
    name: str
    email: str
    phone: str
    credits: Decimal
    owned_item_ids: Tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemSnapshot:
    """Immutable value copy of an item at a point in time."""
    item_id: int
    name: str
    description: str
    category: ItemCategory
    cost_per_day: Decimal
    owner_id: str
    available: bool


# ============================================================================
# CONTRACT
# ============================================================================

@dataclass(frozen=True, slots=True)
class Contract:
    """
    A rental agreement between an item and a renting member.

    The item and renter are snapshots captured at creation. Later edits to
    the live Member/Item records do not reach back into the contract.

    Attributes:
        contract_id: Unique identifier, fixed at creation
        item: Snapshot of the rented item
        renter: Snapshot of the renting member
        start_day: First rental day (>= 0)
        end_day: Last rental day (>= start_day)
        status: ACTIVE until settled, then PROCESSED for good
        settled_day: Clock day on which settlement happened (None while ACTIVE)
    """
    contract_id: str
    item: ItemSnapshot
    renter: MemberSnapshot
    start_day: int
    end_day: int
    status: ContractStatus = ContractStatus.ACTIVE
    settled_day: Optional[int] = field(default=None)

    def __post_init__(self):
        if not self.contract_id or not self.contract_id.strip():
            raise ValueError("Contract contract_id cannot be empty")
        if self.start_day < 0 or self.end_day < self.start_day:
            raise InvalidDateRange(
                f"Invalid start or end day: [{self.start_day}, {self.end_day}]"
            )

    @property
    def processed(self) -> bool:
        """True once the contract has been settled."""
        return self.status is ContractStatus.PROCESSED

    @property
    def total_cost(self) -> Decimal:
        return calculate_total_cost(self.item.cost_per_day, self.start_day, self.end_day)

    @property
    def rental_days(self) -> int:
        return self.end_day - self.start_day + 1

    def overlaps(self, start_day: int, end_day: int) -> bool:
        return ranges_overlap(self.start_day, self.end_day, start_day, end_day)

    def is_due(self, current_day: int) -> bool:
        """True if the contract is ACTIVE and its end day has been reached."""
        return not self.processed and current_day >= self.end_day

    def settle(self, day: int) -> 'Contract':
        """
        Return the PROCESSED copy of this contract.

        Raises:
            SettlementError: If the contract is already PROCESSED
        """
        if self.processed:
            raise SettlementError(f"Contract {self.contract_id} is already processed")
        return replace(self, status=ContractStatus.PROCESSED, settled_day=day)

    def __repr__(self) -> str:
        return (
            f"Contract({self.contract_id[:8]}: item={self.item.item_id} "
            f"renter={self.renter.member_id} days=[{self.start_day},{self.end_day}] "
            f"cost={self.total_cost} {self.status.name})"
        )


# ============================================================================
# SETTLEMENT RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Settlement:
    """
    Immutable record of one applied settlement - the audit trail entry.

    Attributes:
        contract_id: Contract that was settled
        renter_id: Member debited
        owner_id: Member credited
        amount: Credits moved from renter to owner
        day: Clock day of the settlement sweep
    """
    contract_id: str
    renter_id: str
    owner_id: str
    amount: Decimal
    day: int


@dataclass(frozen=True, slots=True)
class SettlementFailure:
    """A due contract the sweep could not settle, and why."""
    contract_id: str
    day: int
    reason: str


@dataclass(frozen=True)
class SettlementReport:
    """
    Outcome of one settlement sweep.

    A sweep never aborts on a single bad contract: successes land in
    `settled`, per-contract SettlementErrors land in `failures`.
    """
    day: int
    settled: Tuple[Settlement, ...] = ()
    failures: Tuple[SettlementFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total_settled(self) -> Decimal:
        return sum((s.amount for s in self.settled), Decimal("0"))
