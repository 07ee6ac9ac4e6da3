"""
Stock ledger arithmetic.

Everything here works on a snapshot of an item's transaction log handed in by
the caller. Nothing is cached: a balance is always the opening stock plus the
sum of receipts minus the sum of issues over the rows it is given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Optional, Protocol

from . import errors
from .models import LaundryCleanerEnum, StockItemKindEnum


class Movement(Protocol):
    in_qty: int
    out_qty: int
    cleaner: Optional[LaundryCleanerEnum]


@dataclass(frozen=True)
class ItemBalance:
    item_code: str
    opening_balance: int
    total_in: int
    total_out: int
    pending_by_cleaner: Dict[str, int] = field(default_factory=dict)

    @property
    def net_balance(self) -> int:
        return self.opening_balance + self.total_in - self.total_out

    def as_dict(self) -> dict:
        return {
            "item_code": self.item_code,
            "opening_balance": self.opening_balance,
            "total_in": self.total_in,
            "total_out": self.total_out,
            "net_balance": self.net_balance,
            "pending_by_cleaner": dict(self.pending_by_cleaner),
        }


def compute_balance(
    *,
    item_code: str,
    kind: StockItemKindEnum,
    opening_balance: int,
    movements: Iterable[Movement],
) -> ItemBalance:
    total_in = 0
    total_out = 0
    pending: Dict[str, int] = {}
    if kind == StockItemKindEnum.LINEN:
        pending = {cleaner.value: 0 for cleaner in LaundryCleanerEnum}

    for movement in movements:
        in_qty = int(movement.in_qty or 0)
        out_qty = int(movement.out_qty or 0)
        total_in += in_qty
        total_out += out_qty
        if kind == StockItemKindEnum.LINEN:
            cleaner = movement.cleaner or LaundryCleanerEnum.INHOUSE
            # Dirty linen sent to a cleaner is pending until it comes back clean.
            pending[LaundryCleanerEnum(cleaner).value] += out_qty - in_qty

    return ItemBalance(
        item_code=item_code,
        opening_balance=int(opening_balance or 0),
        total_in=total_in,
        total_out=total_out,
        pending_by_cleaner=pending,
    )


def validate_movement(
    *,
    kind: StockItemKindEnum,
    movement_date: Optional[date],
    in_qty: Optional[int],
    out_qty: Optional[int],
    cleaner: Optional[LaundryCleanerEnum],
) -> Optional[LaundryCleanerEnum]:
    """
    Check one transaction's fields and return the cleaner to store.

    A transaction is either a receipt or an issue: exactly one quantity is
    positive. Both positive is rejected rather than silently zeroing one side.
    """
    if movement_date is None:
        raise errors.ValidationError("movement_date is required.")
    in_qty = in_qty or 0
    out_qty = out_qty or 0
    if in_qty < 0 or out_qty < 0:
        raise errors.ValidationError("Quantities cannot be negative.")
    if in_qty == 0 and out_qty == 0:
        raise errors.ValidationError("One of in_qty or out_qty must be greater than 0.")
    if in_qty > 0 and out_qty > 0:
        raise errors.ValidationError("A transaction records either a receipt or an issue, not both.")

    if kind == StockItemKindEnum.LINEN:
        return cleaner or LaundryCleanerEnum.INHOUSE
    if cleaner is not None:
        raise errors.ValidationError("cleaner only applies to linen items.")
    return None


def matches_search(term: Optional[str], *values: Optional[str]) -> bool:
    """Case-insensitive substring match against any of the given values."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in (value or "").lower() for value in values)


def within_dates(value: date, start: Optional[date], end: Optional[date]) -> bool:
    if start and value < start:
        return False
    if end and value > end:
        return False
    return True
