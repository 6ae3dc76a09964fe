"""
seed.py - Sample Data

Loads a small, known data set: three members, two items owned by Alice, and
one contract with Charlie renting the Hammer for days 5-7.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Dict

from .core import ItemCategory
from .system import RentalSystem


SAMPLE_MEMBERS = (
    # name, email, phone, credits
    ("Alice", "alice@example.com", "1234567890", Decimal("500")),
    ("Bob", "bob@example.com", "0987654321", Decimal("100")),
    ("Charlie", "charlie@example.com", "2345678901", Decimal("100")),
)


def seed_sample_data(system: RentalSystem) -> Dict[str, object]:
    """
    Populate an empty system with the sample data set.

    Returns:
        Dict with the created records under 'alice', 'bob', 'charlie',
        'bicycle', 'hammer' and 'contract'
    """
    alice, bob, charlie = (
        system.register_member(name, email, phone, credits)
        for name, email, phone, credits in SAMPLE_MEMBERS
    )
    bicycle = system.register_item("Bicycle", "Mountain bike", ItemCategory.VEHICLE, 50, alice.member_id)
    hammer = system.register_item("Hammer", "A sturdy hammer", ItemCategory.TOOL, 10, alice.member_id)
    contract = system.create_contract(hammer.item_id, charlie.member_id, 5, 7)
    return {
        'alice': alice,
        'bob': bob,
        'charlie': charlie,
        'bicycle': bicycle,
        'hammer': hammer,
        'contract': contract,
    }
