from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from hoteldb.database import get_db, get_read_db
from hoteldb.security import get_acting_user_id

from . import errors, models, schemas, services

router = APIRouter(
    prefix="/stock",
    tags=["stock", "inventory", "laundry"],
)

_STATUS_BY_ERROR = {
    errors.ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.DuplicateItemCode: status.HTTP_409_CONFLICT,
    errors.ItemInUse: status.HTTP_409_CONFLICT,
    errors.UnknownItem: status.HTTP_404_NOT_FOUND,
    errors.UnknownTransaction: status.HTTP_404_NOT_FOUND,
}


def _http_error(db: Session, exc: errors.StockLedgerError) -> HTTPException:
    db.rollback()
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=str(exc))


def _balance_read(db: Session, item_code: str) -> schemas.StockBalanceRead:
    return schemas.StockBalanceRead(**services.get_item_balance(db, item_code).as_dict())


@router.post(
    "/items",
    response_model=schemas.StockItemRead,
    status_code=status.HTTP_201_CREATED,
)
def create_item(
    payload: schemas.StockItemCreate,
    db: Session = Depends(get_db),
    actor_user_id: str = Depends(get_acting_user_id),
):
    try:
        item = services.create_item(db, payload=payload, actor_user_id=actor_user_id)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)
    db.commit()
    db.refresh(item)
    return item


@router.get("/items", response_model=List[schemas.StockItemRead])
def list_items(
    kind: Optional[models.StockItemKindEnum] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_read_db),
):
    return services.list_items(db, kind=kind, search=search)


@router.get("/items/{item_code}", response_model=schemas.StockItemRead)
def get_item(item_code: str, db: Session = Depends(get_db)):
    try:
        return services.get_item(db, item_code)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)


@router.patch("/items/{item_code}", response_model=schemas.StockItemRead)
def update_item(
    item_code: str,
    payload: schemas.StockItemUpdate,
    db: Session = Depends(get_db),
    actor_user_id: str = Depends(get_acting_user_id),
):
    try:
        item = services.update_item(db, item_code=item_code, payload=payload, actor_user_id=actor_user_id)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)
    db.commit()
    db.refresh(item)
    return item


@router.delete("/items/{item_code}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_code: str,
    db: Session = Depends(get_db),
    actor_user_id: str = Depends(get_acting_user_id),
):
    try:
        services.delete_item(db, item_code=item_code, actor_user_id=actor_user_id)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/items/{item_code}/balance", response_model=schemas.StockBalanceRead)
def get_item_balance(item_code: str, db: Session = Depends(get_db)):
    try:
        return _balance_read(db, item_code)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)


@router.get("/summary", response_model=List[schemas.StockSummaryRow])
def stock_summary(
    kind: Optional[models.StockItemKindEnum] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return services.stock_summary(db, kind=kind, category=category)


@router.post(
    "/transactions",
    response_model=schemas.StockTransactionResult,
    status_code=status.HTTP_201_CREATED,
)
def record_transaction(
    payload: schemas.StockTransactionCreate,
    db: Session = Depends(get_db),
    actor_user_id: str = Depends(get_acting_user_id),
):
    try:
        trn = services.record_transaction(db, payload=payload, recorded_by=actor_user_id)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)
    db.commit()
    db.refresh(trn)
    return schemas.StockTransactionResult(
        transaction=schemas.StockTransactionRead.model_validate(trn),
        balance=_balance_read(db, trn.item_code),
    )


@router.get("/transactions", response_model=List[schemas.StockTransactionRead])
def list_transactions(
    kind: Optional[models.StockItemKindEnum] = None,
    item_code: Optional[str] = None,
    search: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_read_db),
):
    return services.list_transactions(
        db,
        kind=kind,
        item_code=item_code,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )


@router.put("/transactions/{transaction_id}", response_model=schemas.StockTransactionResult)
def edit_transaction(
    transaction_id: str,
    payload: schemas.StockTransactionUpdate,
    db: Session = Depends(get_db),
    actor_user_id: str = Depends(get_acting_user_id),
):
    try:
        trn = services.edit_transaction(
            db,
            transaction_id=transaction_id,
            payload=payload,
            actor_user_id=actor_user_id,
        )
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)
    db.commit()
    db.refresh(trn)
    return schemas.StockTransactionResult(
        transaction=schemas.StockTransactionRead.model_validate(trn),
        balance=_balance_read(db, trn.item_code),
    )


@router.delete("/transactions/{transaction_id}", response_model=schemas.StockBalanceRead)
def delete_transaction(
    transaction_id: str,
    db: Session = Depends(get_db),
    actor_user_id: str = Depends(get_acting_user_id),
):
    try:
        item_code = services.get_transaction(db, transaction_id).item_code
        services.delete_transaction(db, transaction_id=transaction_id, actor_user_id=actor_user_id)
    except errors.StockLedgerError as exc:
        raise _http_error(db, exc)
    db.commit()
    return _balance_read(db, item_code)
