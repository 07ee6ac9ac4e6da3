from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from hoteldb.apps.audit import services as audit_services
from hoteldb.record_store import RecordTable
from hoteldb.security import resolve_actor
from hoteldb.utils.identifiers import generate_uuid7

from . import errors, ledger, models, schemas

logger = logging.getLogger(__name__)


def _items(db: Session) -> RecordTable[models.StockItem]:
    return RecordTable(db, models.StockItem)


def _transactions(db: Session) -> RecordTable[models.StockTransaction]:
    return RecordTable(db, models.StockTransaction)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _item_snapshot(item: models.StockItem) -> dict:
    return {
        "item_code": item.item_code,
        "kind": item.kind.value,
        "item_name": item.item_name,
        "category": item.category,
        "opening_balance": item.opening_balance,
    }


def _transaction_snapshot(trn: models.StockTransaction) -> dict:
    return {
        "item_code": trn.item_code,
        "movement_date": trn.movement_date.isoformat(),
        "in_qty": trn.in_qty,
        "out_qty": trn.out_qty,
        "remark": trn.remark,
        "cleaner": trn.cleaner.value if trn.cleaner else None,
        "recorded_by": trn.recorded_by,
    }


def _audit_event(
    db: Session,
    *,
    entity_type: str,
    entity_id: str,
    action: str,
    actor_user_id: Optional[str],
    before: Optional[dict] = None,
    after: Optional[dict] = None,
) -> None:
    audit_services.log_event(
        db,
        actor_user_id=actor_user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        before=before,
        after=after,
    )


# ---------------------------------------------------------------------------
# Item master
# ---------------------------------------------------------------------------


def get_item(db: Session, item_code: str) -> models.StockItem:
    item = _items(db).get(item_code)
    if item is None:
        raise errors.UnknownItem(item_code)
    return item


def list_items(
    db: Session,
    *,
    kind: Optional[models.StockItemKindEnum] = None,
    search: Optional[str] = None,
) -> List[models.StockItem]:
    filters = {"kind": kind} if kind else {}
    return [
        item
        for item in _items(db).list(**filters)
        if ledger.matches_search(search, item.item_code, item.item_name)
    ]


def create_item(
    db: Session,
    *,
    payload: schemas.StockItemCreate,
    actor_user_id: Optional[str] = None,
) -> models.StockItem:
    item_code = _clean(payload.item_code)
    item_name = _clean(payload.item_name)
    category = _clean(payload.category) or None
    if not item_code:
        raise errors.ValidationError("item_code is required.")
    if len(item_code) > models.ITEM_CODE_MAX_LENGTH:
        raise errors.ValidationError(f"item_code must be at most {models.ITEM_CODE_MAX_LENGTH} characters.")
    if not item_name:
        raise errors.ValidationError("item_name is required.")
    if payload.kind == models.StockItemKindEnum.CONSUMABLE and not category:
        raise errors.ValidationError("category is required for consumable items.")
    if payload.opening_balance is None or payload.opening_balance < 0:
        raise errors.ValidationError("opening_balance must be zero or greater.")

    table = _items(db)
    if table.get(item_code) is not None:
        raise errors.DuplicateItemCode(item_code)

    item = table.upsert(
        {
            "item_code": item_code,
            "kind": payload.kind,
            "item_name": item_name,
            # Linen is not grouped by category.
            "category": category if payload.kind == models.StockItemKindEnum.CONSUMABLE else None,
            "opening_balance": int(payload.opening_balance),
        }
    )
    _audit_event(
        db,
        entity_type="StockItem",
        entity_id=item.item_code,
        action="create",
        actor_user_id=resolve_actor(actor_user_id),
        after=_item_snapshot(item),
    )
    logger.info("Stock item created", extra={"item_code": item.item_code, "kind": item.kind.value})
    return item


def update_item(
    db: Session,
    *,
    item_code: str,
    payload: schemas.StockItemUpdate,
    actor_user_id: Optional[str] = None,
) -> models.StockItem:
    item = get_item(db, item_code)
    if payload.opening_balance is not None and payload.opening_balance != item.opening_balance:
        raise errors.ValidationError("opening_balance cannot be changed after the item is created.")

    values = {"item_code": item.item_code}
    if payload.item_name is not None:
        item_name = _clean(payload.item_name)
        if not item_name:
            raise errors.ValidationError("item_name is required.")
        values["item_name"] = item_name
    if payload.category is not None and item.kind == models.StockItemKindEnum.CONSUMABLE:
        category = _clean(payload.category)
        if not category:
            raise errors.ValidationError("category is required for consumable items.")
        values["category"] = category

    before = _item_snapshot(item)
    item = _items(db).upsert(values)
    _audit_event(
        db,
        entity_type="StockItem",
        entity_id=item.item_code,
        action="update",
        actor_user_id=resolve_actor(actor_user_id),
        before=before,
        after=_item_snapshot(item),
    )
    return item


def delete_item(db: Session, *, item_code: str, actor_user_id: Optional[str] = None) -> None:
    item = get_item(db, item_code)
    referencing = _transactions(db).list(item_code=item.item_code)
    if referencing:
        raise errors.ItemInUse(item.item_code, len(referencing))

    before = _item_snapshot(item)
    _items(db).delete_by_key(item.item_code)
    _audit_event(
        db,
        entity_type="StockItem",
        entity_id=item_code,
        action="delete",
        actor_user_id=resolve_actor(actor_user_id),
        before=before,
    )
    logger.info("Stock item deleted", extra={"item_code": item_code})


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------


def _compute_item_balance(db: Session, item: models.StockItem) -> ledger.ItemBalance:
    # Always the full, current log for the item; never a cached total.
    movements = _transactions(db).list(item_code=item.item_code)
    return ledger.compute_balance(
        item_code=item.item_code,
        kind=item.kind,
        opening_balance=item.opening_balance,
        movements=movements,
    )


def get_item_balance(db: Session, item_code: str) -> ledger.ItemBalance:
    return _compute_item_balance(db, get_item(db, item_code))


def _recompute_after_change(db: Session, item: models.StockItem, action: str) -> ledger.ItemBalance:
    balance = _compute_item_balance(db, item)
    logger.info(
        "Stock balance recomputed",
        extra={
            "item_code": item.item_code,
            "action": action,
            "total_in": balance.total_in,
            "total_out": balance.total_out,
            "net_balance": balance.net_balance,
        },
    )
    return balance


def stock_summary(
    db: Session,
    *,
    kind: Optional[models.StockItemKindEnum] = None,
    category: Optional[str] = None,
) -> List[dict]:
    filters = {}
    if kind:
        filters["kind"] = kind
    if category:
        filters["category"] = category
    rows = []
    for item in _items(db).list(**filters):
        row = _compute_item_balance(db, item).as_dict()
        row.update(item_name=item.item_name, kind=item.kind, category=item.category)
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def get_transaction(db: Session, transaction_id: str) -> models.StockTransaction:
    trn = _transactions(db).get(transaction_id)
    if trn is None:
        raise errors.UnknownTransaction(transaction_id)
    return trn


def list_transactions(
    db: Session,
    *,
    kind: Optional[models.StockItemKindEnum] = None,
    item_code: Optional[str] = None,
    search: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[models.StockTransaction]:
    filters = {"item_code": item_code} if item_code else {}
    rows = _transactions(db).list(
        order_by=[
            models.StockTransaction.movement_date,
            models.StockTransaction.created_at,
            models.StockTransaction.id,
        ],
        **filters,
    )
    out = []
    for trn in rows:
        if kind and trn.item.kind != kind:
            continue
        if not ledger.within_dates(trn.movement_date, start_date, end_date):
            continue
        if not ledger.matches_search(search, trn.item_code, trn.item.item_name, trn.remark):
            continue
        out.append(trn)
    return out


def record_transaction(
    db: Session,
    *,
    payload: schemas.StockTransactionCreate,
    recorded_by: Optional[str] = None,
) -> models.StockTransaction:
    item = get_item(db, _clean(payload.item_code))
    cleaner = ledger.validate_movement(
        kind=item.kind,
        movement_date=payload.movement_date,
        in_qty=payload.in_qty,
        out_qty=payload.out_qty,
        cleaner=payload.cleaner,
    )

    actor = resolve_actor(recorded_by)
    trn = _transactions(db).upsert(
        {
            "id": generate_uuid7(),
            "item_code": item.item_code,
            "movement_date": payload.movement_date,
            "in_qty": int(payload.in_qty or 0),
            "out_qty": int(payload.out_qty or 0),
            "remark": payload.remark,
            "cleaner": cleaner,
            "recorded_by": actor,
        }
    )
    _audit_event(
        db,
        entity_type="StockTransaction",
        entity_id=trn.id,
        action="record",
        actor_user_id=actor,
        after=_transaction_snapshot(trn),
    )
    _recompute_after_change(db, item, "record")
    return trn


def edit_transaction(
    db: Session,
    *,
    transaction_id: str,
    payload: schemas.StockTransactionUpdate,
    actor_user_id: Optional[str] = None,
) -> models.StockTransaction:
    trn = get_transaction(db, transaction_id)
    item = get_item(db, trn.item_code)
    cleaner = ledger.validate_movement(
        kind=item.kind,
        movement_date=payload.movement_date,
        in_qty=payload.in_qty,
        out_qty=payload.out_qty,
        cleaner=payload.cleaner,
    )

    before = _transaction_snapshot(trn)
    trn = _transactions(db).upsert(
        {
            "id": trn.id,
            "movement_date": payload.movement_date,
            "in_qty": int(payload.in_qty or 0),
            "out_qty": int(payload.out_qty or 0),
            "remark": payload.remark,
            "cleaner": cleaner,
        }
    )
    _audit_event(
        db,
        entity_type="StockTransaction",
        entity_id=trn.id,
        action="edit",
        actor_user_id=resolve_actor(actor_user_id),
        before=before,
        after=_transaction_snapshot(trn),
    )
    _recompute_after_change(db, item, "edit")
    return trn


def delete_transaction(
    db: Session,
    *,
    transaction_id: str,
    actor_user_id: Optional[str] = None,
) -> None:
    trn = get_transaction(db, transaction_id)
    item = get_item(db, trn.item_code)
    before = _transaction_snapshot(trn)

    _transactions(db).delete_by_key(trn.id)
    _audit_event(
        db,
        entity_type="StockTransaction",
        entity_id=transaction_id,
        action="delete",
        actor_user_id=resolve_actor(actor_user_id),
        before=before,
    )
    _recompute_after_change(db, item, "delete")
