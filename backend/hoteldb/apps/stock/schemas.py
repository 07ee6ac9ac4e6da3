from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from . import models


class StockItemCreate(BaseModel):
    item_code: str = Field(..., max_length=64)
    item_name: str = Field(..., max_length=255)
    kind: models.StockItemKindEnum
    category: Optional[str] = Field(None, max_length=128)
    opening_balance: int = 0


class StockItemUpdate(BaseModel):
    item_name: Optional[str] = Field(None, max_length=255)
    category: Optional[str] = Field(None, max_length=128)
    # Accepted only so a changed value can be rejected explicitly.
    opening_balance: Optional[int] = None


class StockItemRead(BaseModel):
    item_code: str
    item_name: str
    kind: models.StockItemKindEnum
    category: Optional[str] = None
    opening_balance: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StockTransactionBase(BaseModel):
    movement_date: Optional[date] = None
    in_qty: int = 0
    out_qty: int = 0
    remark: Optional[str] = None
    cleaner: Optional[models.LaundryCleanerEnum] = None


class StockTransactionCreate(StockTransactionBase):
    item_code: str = Field(..., max_length=64)


class StockTransactionUpdate(StockTransactionBase):
    pass


class StockTransactionRead(BaseModel):
    id: str
    item_code: str
    movement_date: date
    in_qty: int
    out_qty: int
    remark: Optional[str] = None
    cleaner: Optional[models.LaundryCleanerEnum] = None
    recorded_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StockBalanceRead(BaseModel):
    item_code: str
    opening_balance: int
    total_in: int
    total_out: int
    net_balance: int
    pending_by_cleaner: Dict[str, int] = {}


class StockSummaryRow(StockBalanceRead):
    item_name: str
    kind: models.StockItemKindEnum
    category: Optional[str] = None


class StockTransactionResult(BaseModel):
    transaction: StockTransactionRead
    balance: StockBalanceRead
