"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the token ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Supply equals the sum of balances
2. atomicity.py - Batches apply in full or not at all
3. gates.py - Transfer gate and administrator bypass
4. class_existence.py - Operations only touch created classes
5. determinism.py - Identical operations reach identical state

These tests use hypothesis for property-based testing.
"""
