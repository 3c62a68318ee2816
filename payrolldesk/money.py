"""
money.py — whole-rupee rounding for payroll figures.

Payroll screens print whole rupees with halves rounded up (towards +∞),
so 10.5 → 11 and -2.5 → -2. Python's round() would give 10 and -2.
"""
import math


def round_rupees(value: float) -> int:
    return math.floor(value + 0.5)
