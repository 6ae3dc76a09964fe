"""
rental - Rental Bookkeeping System

Tracks members, rentable items and rental contracts between them, with a
simulated day clock whose advancement settles due contracts.

Usage:
    from rental import RentalSystem

    system = RentalSystem()
    alice = system.register_member("Alice", "alice@example.com", "1234567890", credits=500)
    charlie = system.register_member("Charlie", "charlie@example.com", "2345678901")
    hammer = system.register_item("Hammer", "A sturdy hammer", "TOOL", 10, alice.member_id)

    # Charlie rents the hammer for days 5-7 (3 days inclusive = 30 credits)
    contract = system.create_contract(hammer.item_id, charlie.member_id, 5, 7)

    # Advancing past the end day settles it: 30 credits move Charlie -> Alice
    report = system.advance_day(7)
"""

# Core types
from .core import (
    RentalConfig,
    ContractStatus,
    ItemCategory,
    MemberSnapshot,
    ItemSnapshot,
    Contract,
    Settlement,
    SettlementFailure,
    SettlementReport,
    calculate_total_cost,
    ranges_overlap,
    to_decimal,
    user_message,
    ERROR_MESSAGES,
    DEFAULT_MEMBER_CREDITS,
    # Errors
    RentalError,
    ValidationError,
    MissingParty,
    OwnerRentingOwnItem,
    InvalidDateRange,
    DateConflict,
    InsufficientCredits,
    InvalidCategory,
    InvalidCost,
    InvalidMemberDetails,
    InvalidItemDetails,
    DuplicateContact,
    InvalidDayAdvance,
    MemberNotFound,
    ItemNotFound,
    ContractNotFound,
    DuplicateContract,
    ItemInUse,
    MemberInUse,
    StateError,
    SettlementError,
)

# Collaborators
from .members import Member, MemberRegistry
from .items import Item, ItemRegistry

# Contract lifecycle
from .contracts import ContractRepository, create_contract
from .settlement import SettlementEngine
from .clock import Clock

# Facade
from .system import RentalSystem
from .seed import seed_sample_data

__all__ = [
    # Core
    'RentalConfig', 'ContractStatus', 'ItemCategory',
    'MemberSnapshot', 'ItemSnapshot', 'Contract',
    'Settlement', 'SettlementFailure', 'SettlementReport',
    'calculate_total_cost', 'ranges_overlap', 'to_decimal',
    'user_message', 'ERROR_MESSAGES', 'DEFAULT_MEMBER_CREDITS',
    # Errors
    'RentalError', 'ValidationError', 'MissingParty', 'OwnerRentingOwnItem',
    'InvalidDateRange', 'DateConflict', 'InsufficientCredits', 'InvalidCategory',
    'InvalidCost', 'InvalidMemberDetails', 'InvalidItemDetails', 'DuplicateContact',
    'InvalidDayAdvance', 'MemberNotFound', 'ItemNotFound', 'ContractNotFound',
    'DuplicateContract', 'ItemInUse', 'MemberInUse', 'StateError', 'SettlementError',
    # Collaborators
    'Member', 'MemberRegistry', 'Item', 'ItemRegistry',
    # Contract lifecycle
    'ContractRepository', 'create_contract', 'SettlementEngine', 'Clock',
    # Facade
    'RentalSystem', 'seed_sample_data',
]

__version__ = '1.0.0'
