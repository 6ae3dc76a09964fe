"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the rental system.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. credit_conservation.py - Settlements only move credits between members
2. creation_atomicity.py - Rejected contract requests change nothing
3. settlement_idempotency.py - Each contract settles at most once
4. overlap_rule.py - Inclusive date ranges, processed contracts ignored

These tests use hypothesis for property-based testing.
"""
