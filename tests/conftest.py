"""
conftest.py - Shared pytest fixtures for rental tests

Provides common fixtures used across unit and functional tests:
- Empty and populated rental systems
- Members with known credit balances
- Items with known daily rates
- Standalone repository/registry setups for testing the core in isolation
"""

import pytest
from decimal import Decimal

from rental import (
    RentalSystem, RentalConfig, ItemCategory,
    MemberRegistry, ItemRegistry, ContractRepository, SettlementEngine, Clock,
    seed_sample_data,
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def make_system(seed: int = 42) -> RentalSystem:
    """Quiet, deterministic rental system."""
    return RentalSystem(RentalConfig(seed=seed, verbose=False))


def credits_snapshot(system: RentalSystem) -> dict:
    """Map member_id -> credits for before/after comparisons."""
    return {m.member_id: m.credits for m in system.list_members()}


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def system():
    """Fresh rental system with no members or items."""
    return make_system()


@pytest.fixture
def owner(system):
    """Item owner with 500 credits."""
    return system.register_member("Alice Owner", "alice@example.com", "1234567890", credits=Decimal("500"))


@pytest.fixture
def renter(system):
    """Renter with 1000 credits."""
    return system.register_member("Rita Renter", "rita@example.com", "5551234567", credits=Decimal("1000"))


@pytest.fixture
def poor_renter(system):
    """Renter with the default 100 credits."""
    return system.register_member("Paul Poor", "paul@example.com", "5559876543")


@pytest.fixture
def bicycle(system, owner):
    """Bicycle at 50 credits/day, owned by `owner`."""
    return system.register_item("Bicycle", "Mountain bike", ItemCategory.VEHICLE, Decimal("50"), owner.member_id)


@pytest.fixture
def hammer(system, owner):
    """Hammer at 10 credits/day, owned by `owner`."""
    return system.register_item("Hammer", "A sturdy hammer", ItemCategory.TOOL, Decimal("10"), owner.member_id)


@pytest.fixture
def seeded_system():
    """System loaded with the sample data set. Returns (system, records)."""
    system = make_system()
    records = seed_sample_data(system)
    return system, records


# =============================================================================
# COMPONENT FIXTURES
# =============================================================================

@pytest.fixture
def parts():
    """
    Core components wired by hand, without the facade.

    Returns a dict with members, items, contracts, engine and clock.
    """
    members = MemberRegistry(RentalConfig(seed=7))
    items = ItemRegistry()
    contracts = ContractRepository()
    engine = SettlementEngine(contracts, members, items)
    clock = Clock(engine)
    return {
        'members': members,
        'items': items,
        'contracts': contracts,
        'engine': engine,
        'clock': clock,
    }
