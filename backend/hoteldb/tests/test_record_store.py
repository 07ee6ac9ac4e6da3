from __future__ import annotations

from datetime import date

import pytest

from hoteldb.apps.stock import models as stock_models
from hoteldb.record_store import RecordTable


def _items(db):
    return RecordTable(db, stock_models.StockItem)


def _linen(code, name="Bath Towel"):
    return {
        "item_code": code,
        "kind": stock_models.StockItemKindEnum.LINEN,
        "item_name": name,
        "opening_balance": 10,
    }


def test_upsert_inserts_then_replaces(db_session):
    table = _items(db_session)
    table.upsert(_linen("TWL-01"))
    table.upsert({"item_code": "TWL-01", "item_name": "Hand Towel"})

    item = table.get("TWL-01")
    assert item.item_name == "Hand Towel"
    assert item.opening_balance == 10
    assert len(table.list()) == 1


def test_upsert_requires_key(db_session):
    with pytest.raises(ValueError):
        _items(db_session).upsert({"item_name": "No code"})


def test_list_filters_and_orders_by_key(db_session):
    table = _items(db_session)
    table.upsert(_linen("TWL-02"))
    table.upsert(_linen("TWL-01"))
    table.upsert(
        {
            "item_code": "SOAP-01",
            "kind": stock_models.StockItemKindEnum.CONSUMABLE,
            "item_name": "Soap",
            "category": "Bath",
        }
    )

    assert [i.item_code for i in table.list()] == ["SOAP-01", "TWL-01", "TWL-02"]
    linen = table.list(kind=stock_models.StockItemKindEnum.LINEN)
    assert [i.item_code for i in linen] == ["TWL-01", "TWL-02"]
    assert table.exists(category="Bath")
    assert not table.exists(category="Kitchen")


def test_delete_by_key(db_session):
    table = _items(db_session)
    table.upsert(_linen("TWL-01"))

    assert table.delete_by_key("TWL-01") is True
    assert table.get("TWL-01") is None
    assert table.delete_by_key("TWL-01") is False


def test_transactions_table_uses_generated_ids(db_session):
    _items(db_session).upsert(_linen("TWL-01"))
    transactions = RecordTable(db_session, stock_models.StockTransaction)
    assert transactions.key_attr == "id"

    with pytest.raises(ValueError):
        transactions.upsert({"item_code": "TWL-01", "movement_date": date(2024, 5, 1), "in_qty": 1})
