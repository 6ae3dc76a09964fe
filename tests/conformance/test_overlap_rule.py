"""
Overlap Rule Conformance Tests

INVARIANT: No two unprocessed contracts for one item share a day.

    [a, b] and [c, d] overlap ⟺ ¬(b < c ∨ a > d)     (inclusive endpoints)

Processed contracts no longer block their days.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from rental import RentalSystem, RentalConfig, DateConflict, ranges_overlap


day_range = st.tuples(
    st.integers(min_value=0, max_value=20),
    st.integers(min_value=0, max_value=6),
).map(lambda t: (t[0], t[0] + t[1]))


class TestOverlapRule:

    @given(day_range, day_range)
    @settings(max_examples=200)
    def test_overlap_matches_shared_days(self, first, second):
        """PROPERTY: Ranges overlap exactly when they share at least one day."""
        shared = set(range(first[0], first[1] + 1)) & set(range(second[0], second[1] + 1))
        assert ranges_overlap(*first, *second) == bool(shared)
        assert ranges_overlap(*first, *second) == ranges_overlap(*second, *first)

    @given(st.lists(day_range, min_size=1, max_size=10))
    @settings(max_examples=100)
    def test_accepted_contracts_never_share_a_day(self, ranges):
        system = RentalSystem(RentalConfig(seed=8))
        owner = system.register_member("Owner", "owner@example.com", "11111111")
        renter = system.register_member("Renter", "renter@example.com", "22222222", credits=100000)
        item = system.register_item("Bicycle", "Mountain bike", "VEHICLE", 1, owner.member_id)

        for start, end in ranges:
            clash = any(c.overlaps(start, end) for c in system.list_contracts())
            try:
                system.create_contract(item.item_id, renter.member_id, start, end)
                assert not clash
            except DateConflict:
                assert clash

        booked = [set(range(c.start_day, c.end_day + 1)) for c in system.list_contracts()]
        for i, days in enumerate(booked):
            for other in booked[i + 1:]:
                assert not days & other

    @given(day_range)
    @settings(max_examples=50)
    def test_processed_contract_frees_its_days(self, days):
        start, end = days
        system = RentalSystem(RentalConfig(seed=9))
        owner = system.register_member("Owner", "owner@example.com", "11111111")
        renter = system.register_member("Renter", "renter@example.com", "22222222", credits=100000)
        item = system.register_item("Bicycle", "Mountain bike", "VEHICLE", 1, owner.member_id)

        first = system.create_contract(item.item_id, renter.member_id, start, end)
        system.engine.process(first.contract_id, day=0)

        again = system.create_contract(item.item_id, renter.member_id, start, end)
        assert again.contract_id != first.contract_id
