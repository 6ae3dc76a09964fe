"""
items.py - Rentable Item Records and Registry

Items belong to exactly one member and carry an availability flag. The rental
core flips that flag when a contract is created (unavailable) and when it is
settled (available again).
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, Tuple, Union

from .core import (
    ItemCategory, ItemSnapshot,
    InvalidCost, InvalidItemDetails, ItemNotFound, MissingParty,
    to_decimal,
)
from .members import Member


@dataclass
class Item:
    """A live item record. Contracts hold an ItemSnapshot, never this object."""
    item_id: int
    name: str
    description: str
    category: ItemCategory
    cost_per_day: Decimal
    owner_id: str
    available: bool = True

    def snapshot(self) -> ItemSnapshot:
        return ItemSnapshot(
            item_id=self.item_id,
            name=self.name,
            description=self.description,
            category=self.category,
            cost_per_day=self.cost_per_day,
            owner_id=self.owner_id,
            available=self.available,
        )


def _coerce_category(category: Union[ItemCategory, str, None]) -> ItemCategory:
    if isinstance(category, ItemCategory):
        return category
    return ItemCategory.from_string(category)


def validate_item_details(
    name: str,
    description: str,
    category: Union[ItemCategory, str, None],
    cost_per_day,
) -> Tuple[ItemCategory, Decimal]:
    """
    Validate item fields and return the normalized (category, cost_per_day).

    Raises:
        InvalidItemDetails: If name or description is empty
        InvalidCategory: If category is empty or unknown
        InvalidCost: If cost_per_day is missing or not positive
    """
    if name is None or not name.strip():
        raise InvalidItemDetails("Name cannot be empty")
    if description is None or not description.strip():
        raise InvalidItemDetails("Description cannot be empty")
    normalized_category = _coerce_category(category)
    if cost_per_day is None:
        raise InvalidCost("Cost per day is required")
    try:
        cost = to_decimal(cost_per_day)
    except InvalidOperation:
        raise InvalidCost(f"Cost per day must be a number, got {cost_per_day!r}") from None
    if not cost.is_finite() or cost <= 0:
        raise InvalidCost(f"Cost per day must be a positive number, got {cost_per_day}")
    return normalized_category, cost


class ItemRegistry:
    """
    Keyed store of items (item_id -> Item). Ids are sequential from 1.

    Thread Safety:
        Not thread-safe.
    """

    def __init__(self, verbose: bool = False):
        self._items: Dict[int, Item] = {}
        self._next_id = 1
        self.verbose = verbose

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items.values()))

    def find(self, item_id: int) -> Optional[Item]:
        return self._items.get(item_id)

    def get(self, item_id: int) -> Item:
        """
        Raises:
            ItemNotFound: If no item has this id
        """
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFound(f"Item {item_id} not found")
        return item

    def get_all_copy(self) -> Tuple[ItemSnapshot, ...]:
        """Immutable snapshots of every item, in creation order."""
        return tuple(item.snapshot() for item in self._items.values())

    def owned_by(self, member_id: str) -> Tuple[ItemSnapshot, ...]:
        return tuple(i.snapshot() for i in self._items.values() if i.owner_id == member_id)

    def create(
        self,
        name: str,
        description: str,
        category: Union[ItemCategory, str],
        cost_per_day,
        owner: Optional[Member],
    ) -> Item:
        """
        Validate and register a new item, linking it into the owner's list.

        Args:
            name: Non-empty item name
            description: Non-empty description
            category: ItemCategory or its case-insensitive name
            cost_per_day: Positive daily rate
            owner: Live Member who owns the item

        Returns:
            The registered live Item (available)

        Raises:
            InvalidItemDetails, InvalidCategory, InvalidCost
            MissingParty: If owner is None
        """
        normalized_category, cost = validate_item_details(name, description, category, cost_per_day)
        if owner is None:
            raise MissingParty("Owner must be a valid member")

        item = Item(
            item_id=self._next_id,
            name=name.strip(),
            description=description.strip(),
            category=normalized_category,
            cost_per_day=cost,
            owner_id=owner.member_id,
        )
        self._next_id += 1
        self._items[item.item_id] = item
        if item.item_id not in owner.owned_item_ids:
            owner.owned_item_ids.append(item.item_id)
        if self.verbose:
            print(f"📝 Registered item: {item.item_id} ({item.name}) [{item.category}] "
                  f"{item.cost_per_day}/day owner={owner.member_id}")
        return item

    def update(
        self,
        item_id: int,
        name: str,
        description: str,
        category: Union[ItemCategory, str],
        cost_per_day,
    ) -> Item:
        """
        Replace an item's details. Ownership and availability are untouched.

        Existing contracts keep the cost they were created with.
        """
        item = self.get(item_id)
        normalized_category, cost = validate_item_details(name, description, category, cost_per_day)
        item.name = name.strip()
        item.description = description.strip()
        item.category = normalized_category
        item.cost_per_day = cost
        return item

    def remove(self, item_id: int, owner: Optional[Member] = None) -> Item:
        """
        Remove an item and unlink it from its owner. Callers enforce the contract guard.

        Raises:
            ItemNotFound: If no item has this id
        """
        item = self.get(item_id)
        del self._items[item_id]
        if owner is not None and item_id in owner.owned_item_ids:
            owner.owned_item_ids.remove(item_id)
        if self.verbose:
            print(f"✓ Removed item: {item.item_id} ({item.name})")
        return item

    def set_available(self, item_id: int, available: bool) -> None:
        self.get(item_id).available = available
