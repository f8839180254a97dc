"""
Core types for fiberorder.

Re-exports from kungfu/combinators + money aliases.
"""

from __future__ import annotations

# Re-export from kungfu
from kungfu import Result, Ok, Error, Option, Some, Nothing, LazyCoroResult

# Re-export from combinators
from combinators import LCR

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Cents = int
"""Money amount in euro cents. All prices and totals use it."""


def floor0(amount: Cents) -> Cents:
    """Clamp a money amount at zero."""
    return amount if amount > 0 else 0


def euros(amount: Cents) -> str:
    """Format cents for logs and documents: 5389 -> '53.89'."""
    return f"{amount // 100}.{amount % 100:02d}"


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    # Re-exports from combinators
    "LCR",
    # Money
    "Cents",
    "floor0",
    "euros",
)
