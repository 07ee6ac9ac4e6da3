from __future__ import annotations


class StockLedgerError(Exception):
    """Base class for stock ledger failures. State is unchanged when raised."""


class ValidationError(StockLedgerError):
    """Raised when input is missing or out of range."""


class DuplicateItemCode(StockLedgerError):
    """Raised when an item is created with a code that already exists."""

    def __init__(self, item_code: str) -> None:
        super().__init__(f"Item code '{item_code}' already exists.")
        self.item_code = item_code


class UnknownItem(StockLedgerError):
    def __init__(self, item_code: str) -> None:
        super().__init__(f"Item '{item_code}' not found.")
        self.item_code = item_code


class UnknownTransaction(StockLedgerError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction '{transaction_id}' not found.")
        self.transaction_id = transaction_id


class ItemInUse(StockLedgerError):
    """Raised when deleting an item that transactions still reference."""

    def __init__(self, item_code: str, transaction_count: int) -> None:
        super().__init__(
            f"Item '{item_code}' has {transaction_count} transaction(s); delete them first."
        )
        self.item_code = item_code
        self.transaction_count = transaction_count
