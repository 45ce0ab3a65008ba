import logging
from typing import List

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.encryption import DecryptionError, decrypt_field, encrypt
from ...models.orders.order_items import OrderItem
from ...models.orders.orders import Order
from ...schemas.orders.order_items_schemas import (
    OrderItemCreate,
    OrderItemCreateResponse,
    OrderItemListResponse,
    OrderItemOut,
)
from ..inventory.inventory_catalog_crud import get_inventory_item, get_original_on_hand
from . import order_warnings_crud

logger = logging.getLogger(__name__)


def get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        return error_response(
            message="Order not found",
            status_code=AppStatusCode.RECORD_NOT_FOUND,
            http_status=404
        )
    return order


def order_item_to_out(item: OrderItem) -> OrderItemOut:
    try:
        name = decrypt_field(item.name)
        size = decrypt_field(item.size)
    except DecryptionError as e:
        logger.warning("Could not decrypt order item %s: %s", item.id, e)
        name = size = None

    # the most recent warning decides the flags shown on the order form
    latest = max(item.warnings, key=lambda w: w.id, default=None)
    return OrderItemOut(
        id=item.id,
        orderId=item.order_id,
        inventoryItemId=item.inventory_item_id,
        name=name,
        size=size,
        quantity=item.quantity,
        price=item.price,
        isExtension=item.is_extension,
        isCustom=item.is_custom,
        warning=latest.warning_message if latest else None,
        warningResolved=latest.is_resolved if latest else False,
        warningResolvedAt=latest.resolved_at if latest else None,
        warningResolvedBy=latest.resolved_by if latest else None,
        createdAt=item.created_at,
    )


# ----------------- Create Order Item -----------------
def create_order_item(db: Session, order_id: int, data: OrderItemCreate) -> OrderItemCreateResponse:
    """Persist an order item, then flag it and any order it oversells.

    Oversell is allowed: the item is always stored and warnings are recorded
    afterwards.
    """
    order = get_order(db, order_id)

    if data.inventoryItemId is not None and not get_inventory_item(db, data.inventoryItemId):
        return error_response(
            message="Inventory item not found",
            status_code=AppStatusCode.RECORD_NOT_FOUND,
            http_status=404
        )

    item = OrderItem(
        order_id=order.id,
        inventory_item_id=data.inventoryItemId,
        name=encrypt(data.name),
        size=encrypt(data.size),
        quantity=data.quantity,
        price=data.price,
        is_extension=data.isExtension,
        is_custom=data.isCustom,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Created order item %s on order %s", item.id, order.id)

    warning = None
    affected = []
    if item.inventory_item_id is not None:
        original_on_hand = data.originalOnHand
        if original_on_hand is None:
            original_on_hand = get_original_on_hand(db, item.inventory_item_id, data.size)

        warning = order_warnings_crud.calculate_item_warning(
            db,
            item.inventory_item_id,
            data.size,
            data.quantity,
            order.order_date,
            order.expected_return_date,
            original_on_hand,
            exclude_order_id=order.id,
        )
        if warning:
            order_warnings_crud.upsert_warning(
                db, item.id, item.inventory_item_id, warning.warningMessage
            )
            db.commit()

        affected = order_warnings_crud.add_warnings_to_affected_orders(
            db,
            item.inventory_item_id,
            data.size,
            order.order_date,
            order.expected_return_date,
            data.quantity,
            original_on_hand,
        )
        db.refresh(item)

    return OrderItemCreateResponse(
        item=order_item_to_out(item),
        warning=warning,
        affectedWarnings=len([w for w in affected if w.order_item_id != item.id]),
    )


# ----------------- List Order Items -----------------
def list_order_items(db: Session, order_id: int) -> OrderItemListResponse:
    get_order(db, order_id)
    items: List[OrderItem] = (
        db.query(OrderItem)
        .filter(OrderItem.order_id == order_id)
        .order_by(OrderItem.id.asc())
        .all()
    )
    return OrderItemListResponse(items=[order_item_to_out(i) for i in items])
