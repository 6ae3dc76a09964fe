#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Rental System Step by Step

A walkthrough of the rental bookkeeping system. Each step builds on the
previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation  - Members, items, the sample data set
  4-6:  Contracts   - Booking, rejections, date conflicts
  7-8:  Time        - Advancing the clock, automatic settlement
  9:    Cleanup     - Deletion guards and conservation of credits

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
from decimal import Decimal
import sys

from rental import (
    RentalSystem, RentalConfig, RentalError,
    seed_sample_data, user_message,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    seed: int = 2024
    verbose: bool = True

    # Bob's booking of the bicycle
    bicycle_start: int = 9
    bicycle_end: int = 10

    # Days to jump in the settlement steps
    first_advance: int = 6
    second_advance: int = 5


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def show_members(system: RentalSystem):
    for m in system.list_members():
        print(f"  {m.member_id}  {m.name:<8} credits={m.credits:>6}  owns={list(m.owned_item_ids)}")


def show_items(system: RentalSystem):
    for i in system.list_items():
        status = "available" if i.available else "rented"
        print(f"  #{i.item_id}  {i.name:<8} {str(i.category):<11} {i.cost_per_day}/day  {status}")


def show_contracts(system: RentalSystem):
    for c in system.list_contracts():
        print(f"  {c.contract_id[:8]}  {c.item.name:<8} -> {c.renter.name:<8} "
              f"days {c.start_day}-{c.end_day}  cost={c.total_cost}  {c.status.value}")


def attempt(label: str, fn, *args):
    """Run a call that may be rejected and show the user-facing message."""
    print(f">>> {label}")
    try:
        result = fn(*args)
    except RentalError as e:
        print(f"✗ REJECTED ({type(e).__name__}): {user_message(e)}")
        return None
    print("✓ ACCEPTED")
    return result


# ============================================================================
# PHASE 1: FOUNDATION (Steps 1-3)
# ============================================================================

def step_01_empty_system():
    step_header(1, "The Empty System",
        "A rental system starts with no members, no items and the clock at day 0.")

    print(">>> system = RentalSystem(RentalConfig(seed=..., verbose=True))")
    system = RentalSystem(RentalConfig(seed=CONFIG.seed, verbose=CONFIG.verbose))

    print(f"\nCurrent day: {system.current_day}")
    print(f"Members:     {len(system.list_members())}")
    print(f"Items:       {len(system.list_items())}")
    print(f"Contracts:   {len(system.list_contracts())}")
    return system


def step_02_seed(system: RentalSystem):
    step_header(2, "Sample Data",
        "Load three members, two items and one contract.")

    print(">>> records = seed_sample_data(system)\n")
    records = seed_sample_data(system)

    section_header("Members")
    show_members(system)
    section_header("Items")
    show_items(system)
    section_header("Contracts")
    show_contracts(system)

    print("""
    Charlie has booked Alice's hammer for days 5-7. Days are inclusive, so
    that is 3 days at 10 credits = 30 credits. Nothing has been paid yet.
    """)
    return records


def step_03_member_rules(system: RentalSystem):
    step_header(3, "Member Validation",
        "Emails and phone numbers are validated and must be unique.")

    attempt('system.register_member("Dave", "not-an-email", "5550001111")',
            system.register_member, "Dave", "not-an-email", "5550001111")
    attempt('system.register_member("Dave", "alice@example.com", "5550001111")',
            system.register_member, "Dave", "alice@example.com", "5550001111")
    attempt('system.register_member("Dave", "dave@example.com", "555")',
            system.register_member, "Dave", "dave@example.com", "555")


# ============================================================================
# PHASE 2: CONTRACTS (Steps 4-6)
# ============================================================================

def step_04_book(system: RentalSystem, records: dict):
    step_header(4, "Booking a Rental",
        "A valid booking creates an ACTIVE contract; credits move only at settlement.")

    bob, bicycle = records['bob'], records['bicycle']
    contract = attempt(
        f"system.create_contract(bicycle, bob, {CONFIG.bicycle_start}, {CONFIG.bicycle_end})",
        system.create_contract, bicycle.item_id, bob.member_id, CONFIG.bicycle_start, CONFIG.bicycle_end,
    )
    if contract is not None:
        print(f"\nTotal cost: {contract.total_cost}  Bob still has {bob.credits} credits")
    show_contracts(system)


def step_05_rejections(system: RentalSystem, records: dict):
    step_header(5, "Rejected Bookings",
        "Each kind of invalid request is rejected and nothing changes.")

    alice, bob, charlie = records['alice'], records['bob'], records['charlie']
    bicycle, hammer = records['bicycle'], records['hammer']
    before = len(system.list_contracts())

    attempt("Alice rents her own bicycle",
            system.create_contract, bicycle.item_id, alice.member_id, 1, 2)
    attempt("Charlie books days 4-2",
            system.create_contract, bicycle.item_id, charlie.member_id, 4, 2)
    attempt("Charlie books the bicycle for days 1-3 (150 credits)",
            system.create_contract, bicycle.item_id, charlie.member_id, 1, 3)
    attempt("Someone unknown books the hammer",
            system.create_contract, hammer.item_id, "NOBODY", 1, 1)

    print(f"\nContracts before: {before}  after: {len(system.list_contracts())}")


def step_06_conflicts(system: RentalSystem, records: dict):
    step_header(6, "Date Conflicts",
        "Ranges are inclusive: sharing even one day is a conflict.")

    bob, hammer = records['bob'], records['hammer']
    attempt("Bob books the hammer for days 7-8 (Charlie has 5-7)",
            system.create_contract, hammer.item_id, bob.member_id, 7, 8)
    attempt("Bob books the hammer for days 8-8",
            system.create_contract, hammer.item_id, bob.member_id, 8, 8)
    show_contracts(system)


# ============================================================================
# PHASE 3: TIME (Steps 7-8)
# ============================================================================

def step_07_advance(system: RentalSystem):
    step_header(7, "Advancing the Clock",
        "Advancing time sweeps for due contracts and settles them.")

    print(f">>> report = system.advance_day({CONFIG.first_advance})\n")
    report = system.advance_day(CONFIG.first_advance)
    print(f"\nDay {report.day}: settled {len(report.settled)}, total {report.total_settled}")
    show_members(system)
    show_contracts(system)

    attempt("system.advance_day(-1)", system.advance_day, -1)


def step_08_settle_rest(system: RentalSystem):
    step_header(8, "Settling the Rest",
        "Repeated sweeps are safe: processed contracts are never charged twice.")

    report = system.advance_day(CONFIG.second_advance)
    print(f"\nDay {report.day}: settled {len(report.settled)}, failures {len(report.failures)}")
    report = system.process_due_contracts()
    print(f"Sweep again on day {report.day}: settled {len(report.settled)}")
    show_members(system)
    show_items(system)


# ============================================================================
# PHASE 4: CLEANUP (Step 9)
# ============================================================================

def step_09_cleanup(system: RentalSystem, records: dict, total_before: Decimal):
    step_header(9, "Deletion Guards and Conservation",
        "Members and items with obligations cannot be deleted; credits are conserved.")

    attempt("system.remove_member(alice)", system.remove_member, records['alice'].member_id)
    attempt("system.remove_item(hammer)", system.remove_item, records['hammer'].item_id)
    attempt("system.remove_member(charlie)", system.remove_member, records['charlie'].member_id)

    section_header("Conservation")
    result = system.verify_conservation(total_before)
    print(f"Expected: {result['expected']}  Actual: {result['actual']}  Valid: {result['valid']}")


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       RENTAL SYSTEM - INTERACTIVE TUTORIAL")
    print("=" * 70)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    wait_for_enter()

    system = step_01_empty_system()
    wait_for_enter()

    records = step_02_seed(system)
    total_before = system.total_credits()
    wait_for_enter()

    step_03_member_rules(system)
    wait_for_enter()

    step_04_book(system, records)
    wait_for_enter()

    step_05_rejections(system, records)
    wait_for_enter()

    step_06_conflicts(system, records)
    wait_for_enter()

    step_07_advance(system)
    wait_for_enter()

    step_08_settle_rest(system)
    wait_for_enter()

    step_09_cleanup(system, records, total_before)

    print("\n" + "=" * 70)
    print("       TUTORIAL COMPLETE!")
    print("=" * 70)
    print("""
    Next steps:
      - See rental/contracts.py for the booking rules
      - See rental/settlement.py for how credits move
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()
