from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from hoteldb.database import Base
from hoteldb.utils.identifiers import generate_uuid7


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


ITEM_CODE_MAX_LENGTH = 64


class StockItemKindEnum(str, enum.Enum):
    CONSUMABLE = "CONSUMABLE"
    LINEN = "LINEN"


class LaundryCleanerEnum(str, enum.Enum):
    INHOUSE = "INHOUSE"
    OUTSOURCED = "OUTSOURCED"


class StockItem(Base):
    """
    Master record for a consumable supply or a linen type.

    Receipts, issues and the net balance are never stored here; they are
    summed from `stock_transactions` whenever they are needed.
    """

    __tablename__ = "stock_items"
    __table_args__ = (
        CheckConstraint("opening_balance >= 0", name="ck_stock_items_opening_balance"),
        Index("ix_stock_items_kind_category", "kind", "category"),
    )

    item_code = Column(String(ITEM_CODE_MAX_LENGTH), primary_key=True)
    kind = Column(
        SAEnum(StockItemKindEnum, name="stock_item_kind_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    item_name = Column(String(255), nullable=False)
    category = Column(String(128), nullable=True)
    opening_balance = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


class StockTransaction(Base):
    __tablename__ = "stock_transactions"
    __table_args__ = (
        CheckConstraint("in_qty >= 0 AND out_qty >= 0", name="ck_stock_transactions_non_negative"),
        CheckConstraint(
            "(in_qty > 0 AND out_qty = 0) OR (in_qty = 0 AND out_qty > 0)",
            name="ck_stock_transactions_single_direction",
        ),
        Index("ix_stock_transactions_item_date", "item_code", "movement_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid7)
    item_code = Column(
        String(ITEM_CODE_MAX_LENGTH),
        ForeignKey("stock_items.item_code", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    movement_date = Column(Date, nullable=False, index=True)
    in_qty = Column(Integer, nullable=False, default=0)
    out_qty = Column(Integer, nullable=False, default=0)
    remark = Column(Text, nullable=True)
    cleaner = Column(
        SAEnum(LaundryCleanerEnum, name="laundry_cleaner_enum", native_enum=False),
        nullable=True,
    )
    recorded_by = Column(String(64), nullable=False, default="system")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    item = relationship("StockItem", lazy="joined")
