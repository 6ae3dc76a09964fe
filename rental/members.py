"""
members.py - Member Records and Registry

The member ledger holds who can own and rent items and how many credits each
member has. The rental core only reads a member's credits at contract creation
and moves credits between renter and owner at settlement; everything else here
is plain data entry.

Key responsibilities:
    - Validate member details (name, email, phone) and contact uniqueness
    - Generate unique short member ids
    - Own the keyed member collection and hand out immutable snapshots
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional, Tuple
import random
import re

from .core import (
    MemberSnapshot, RentalConfig,
    InvalidMemberDetails, DuplicateContact, MemberNotFound,
    to_decimal,
)


EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
PHONE_PATTERN = re.compile(r"^\d{8,15}$")


@dataclass
class Member:
    """
    A live member record.

    Mutable: credits change on settlement and details change on update.
    Contracts never hold a Member, only a MemberSnapshot.
    """
    member_id: str
    name: str
    email: str
    phone: str
    credits: Decimal
    owned_item_ids: List[int] = field(default_factory=list)

    def snapshot(self) -> MemberSnapshot:
        return MemberSnapshot(
            member_id=self.member_id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            credits=self.credits,
            owned_item_ids=tuple(self.owned_item_ids),
        )


def validate_member_details(name: str, email: str, phone: str) -> None:
    """
    Check name, email and phone formats.

    Raises:
        InvalidMemberDetails: On an empty name, malformed email, or a phone
            number that is not 8 to 15 digits
    """
    if name is None or not name.strip():
        raise InvalidMemberDetails("Name cannot be empty")
    if email is None or not EMAIL_PATTERN.fullmatch(email):
        raise InvalidMemberDetails(f"Invalid email format: {email!r}")
    if phone is None or not PHONE_PATTERN.fullmatch(phone):
        raise InvalidMemberDetails(f"Phone number must be 8 to 15 digits, got {phone!r}")


def validate_credits(credits, allow_negative: bool = False) -> Decimal:
    """
    Convert a credit amount to a finite Decimal.

    Args:
        credits: Amount as Decimal, int or numeric string
        allow_negative: Accept amounts below zero (credit adjustments)

    Raises:
        InvalidMemberDetails: If credits is missing, not a number, NaN/Infinity,
            or negative when that is not allowed
    """
    if credits is None:
        raise InvalidMemberDetails("Credits are required")
    try:
        amount = to_decimal(credits)
    except InvalidOperation:
        raise InvalidMemberDetails(f"Credits must be a number, got {credits!r}") from None
    if not amount.is_finite():
        raise InvalidMemberDetails(f"Credits must be a finite number, got {credits}")
    if amount < 0 and not allow_negative:
        raise InvalidMemberDetails(f"Credits cannot be negative, got {credits}")
    return amount


class MemberRegistry:
    """
    Keyed store of members (member_id -> Member), in registration order.

    Thread Safety:
        Not thread-safe. One registry per interactive session.
    """

    def __init__(
        self,
        config: Optional[RentalConfig] = None,
        rng: Optional[random.Random] = None,
        verbose: Optional[bool] = None,
    ):
        self.config = config or RentalConfig()
        self._rng = rng or random.Random(self.config.seed)
        self._members: Dict[str, Member] = {}
        self.verbose = self.config.verbose if verbose is None else verbose

    # ========================================================================
    # READ
    # ========================================================================

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, member_id: str) -> bool:
        return self.find(member_id) is not None

    def __iter__(self) -> Iterator[Member]:
        return iter(list(self._members.values()))

    def find(self, member_id: str) -> Optional[Member]:
        """Return the live member or None. Surrounding whitespace is ignored."""
        if member_id is None:
            return None
        return self._members.get(member_id.strip())

    def get(self, member_id: str) -> Member:
        """
        Return the live member.

        Raises:
            MemberNotFound: If no member has this id
        """
        member = self.find(member_id)
        if member is None:
            raise MemberNotFound(f"Member {member_id} not found")
        return member

    def get_all_copy(self) -> Tuple[MemberSnapshot, ...]:
        """Immutable snapshots of every member, in registration order."""
        return tuple(m.snapshot() for m in self._members.values())

    def is_contact_unique(self, email: str, phone: str, exclude_id: Optional[str] = None) -> bool:
        """True if neither the email (case-insensitive) nor the phone is taken."""
        for member in self._members.values():
            if member.member_id == exclude_id:
                continue
            if member.email.lower() == email.lower() or member.phone == phone:
                return False
        return True

    def total_credits(self) -> Decimal:
        """Sum of all member credits. Settlement moves credits, never creates them."""
        return sum((m.credits for m in self._members.values()), Decimal("0"))

    # ========================================================================
    # MUTATE
    # ========================================================================

    def create(
        self,
        name: str,
        email: str,
        phone: str,
        credits: Optional[Decimal] = None,
    ) -> Member:
        """
        Validate and register a new member.

        Args:
            name: Non-empty display name
            email: Address matching EMAIL_PATTERN, unique (case-insensitive)
            phone: 8 to 15 digits, unique
            credits: Starting balance (default: config.default_member_credits)

        Returns:
            The registered live Member

        Raises:
            InvalidMemberDetails: If a field is malformed
            DuplicateContact: If the email or phone is already registered
        """
        validate_member_details(name, email, phone)
        if not self.is_contact_unique(email, phone):
            raise DuplicateContact(f"Email {email} or phone {phone} already exists")

        start_credits = self.config.default_member_credits if credits is None else validate_credits(credits)

        member = Member(
            member_id=self._generate_id(),
            name=name.strip(),
            email=email,
            phone=phone,
            credits=start_credits,
        )
        self._members[member.member_id] = member
        if self.verbose:
            print(f"📝 Registered member: {member.member_id} ({member.name}) credits={member.credits}")
        return member

    def update(self, member_id: str, name: str, email: str, phone: str) -> Member:
        """
        Replace a member's name, email and phone.

        Raises:
            MemberNotFound, InvalidMemberDetails, DuplicateContact
        """
        member = self.get(member_id)
        validate_member_details(name, email, phone)
        if not self.is_contact_unique(email, phone, exclude_id=member.member_id):
            raise DuplicateContact(f"Email {email} or phone {phone} already exists")
        member.name = name.strip()
        member.email = email
        member.phone = phone
        return member

    def remove(self, member_id: str) -> Member:
        """
        Remove a member record. Callers enforce the ownership/contract guard.

        Raises:
            MemberNotFound: If no member has this id
        """
        member = self.get(member_id)
        del self._members[member.member_id]
        if self.verbose:
            print(f"✓ Removed member: {member.member_id} ({member.name})")
        return member

    def set_credits(self, member_id: str, credits: Decimal) -> None:
        member = self.get(member_id)
        member.credits = validate_credits(credits)

    def adjust_credits(self, member_id: str, delta: Decimal) -> Decimal:
        """
        Add delta to a member's credits and return the new balance.

        Raises:
            InvalidMemberDetails: If delta is not a finite number, or the
                balance would drop below zero
        """
        member = self.get(member_id)
        new_balance = member.credits + validate_credits(delta, allow_negative=True)
        if new_balance < 0:
            raise InvalidMemberDetails(
                f"Credits cannot be negative: {member.member_id} has {member.credits}, delta {delta}"
            )
        member.credits = new_balance
        return member.credits

    def _generate_id(self) -> str:
        """Draw random ids until one is not in use."""
        alphabet = self.config.member_id_alphabet
        length = self.config.member_id_length
        while True:
            candidate = "".join(self._rng.choice(alphabet) for _ in range(length))
            if candidate not in self._members:
                return candidate
