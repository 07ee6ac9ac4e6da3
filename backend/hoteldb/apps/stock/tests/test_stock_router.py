from __future__ import annotations

from datetime import date

import pytest
from fastapi import HTTPException

from hoteldb.apps.stock import models as stock_models
from hoteldb.apps.stock import router as stock_router
from hoteldb.apps.stock import schemas as stock_schemas
from hoteldb.apps.stock import services as stock_services


def _create_item(db, item_code="SOAP-01"):
    return stock_router.create_item(
        stock_schemas.StockItemCreate(
            item_code=item_code,
            item_name="Soap Bar 30g",
            kind=stock_models.StockItemKindEnum.CONSUMABLE,
            category="Complimentary",
            opening_balance=20,
        ),
        db=db,
        actor_user_id="manager",
    )


def test_router_has_expected_routes():
    def _has(path: str, method: str) -> bool:
        return any(
            getattr(route, "path", None) == path and method in (getattr(route, "methods", None) or [])
            for route in stock_router.router.routes
        )

    assert _has("/stock/items", "POST")
    assert _has("/stock/items", "GET")
    assert _has("/stock/items/{item_code}", "PATCH")
    assert _has("/stock/items/{item_code}", "DELETE")
    assert _has("/stock/items/{item_code}/balance", "GET")
    assert _has("/stock/summary", "GET")
    assert _has("/stock/transactions", "POST")
    assert _has("/stock/transactions/{transaction_id}", "PUT")
    assert _has("/stock/transactions/{transaction_id}", "DELETE")


def test_record_transaction_returns_new_balance(db_session):
    _create_item(db_session)

    result = stock_router.record_transaction(
        stock_schemas.StockTransactionCreate(item_code="SOAP-01", movement_date=date(2024, 5, 1), out_qty=5),
        db=db_session,
        actor_user_id="frontdesk",
    )
    assert result.transaction.recorded_by == "frontdesk"
    assert result.balance.net_balance == 15

    balance = stock_router.delete_transaction(result.transaction.id, db=db_session, actor_user_id="manager")
    assert balance.net_balance == 20


def test_duplicate_item_maps_to_conflict(db_session):
    _create_item(db_session)
    with pytest.raises(HTTPException) as exc:
        _create_item(db_session)
    assert exc.value.status_code == 409


def test_unknown_item_maps_to_not_found(db_session):
    with pytest.raises(HTTPException) as exc:
        stock_router.get_item_balance("XYZ", db=db_session)
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        stock_router.delete_transaction("missing", db=db_session, actor_user_id="manager")
    assert exc.value.status_code == 404


def test_invalid_transaction_maps_to_unprocessable(db_session):
    _create_item(db_session)
    with pytest.raises(HTTPException) as exc:
        stock_router.record_transaction(
            stock_schemas.StockTransactionCreate(item_code="SOAP-01", movement_date=date(2024, 5, 1)),
            db=db_session,
            actor_user_id="frontdesk",
        )
    assert exc.value.status_code == 422
    assert stock_services.list_transactions(db_session) == []


def test_delete_item_in_use_maps_to_conflict(db_session):
    _create_item(db_session)
    stock_router.record_transaction(
        stock_schemas.StockTransactionCreate(item_code="SOAP-01", movement_date=date(2024, 5, 1), in_qty=1),
        db=db_session,
        actor_user_id="frontdesk",
    )
    with pytest.raises(HTTPException) as exc:
        stock_router.delete_item("SOAP-01", db=db_session, actor_user_id="manager")
    assert exc.value.status_code == 409
    assert stock_services.get_item(db_session, "SOAP-01").item_name == "Soap Bar 30g"
