"""
Fixed-point number formatting for user-facing text.

``format_fixed`` rounds halves away from zero on the exact binary value of
the float, so 6.25 → "6.3" and 30.5 → "31", while 1.005 (stored as
1.00499…) → "1.00".  Python's ``format(x, ".1f")`` would instead round
6.25 to "6.2" (half to even).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_fixed(value: float, places: int = 0) -> str:
    """Format ``value`` with exactly ``places`` decimals, halves rounded up."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
