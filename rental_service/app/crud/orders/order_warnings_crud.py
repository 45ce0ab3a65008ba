"""Negative-stock warnings.

Oversell is never blocked at write time. Placing an order item records a
``negative_stock`` warning on every order item whose window is now oversold,
and staff resolve those by hand. Warnings are never cleared automatically.
"""
import logging
import math
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.batching import Deadline, ScanTimeout
from shared.utils.encryption import DecryptionError, decrypt_field
from ...enum.order_enum import WarningSeverity, WarningType
from ...models.orders.customers import Customer
from ...models.orders.order_items import OrderItem
from ...models.orders.order_warnings import OrderWarning
from ...models.orders.orders import Order
from ...schemas.orders.order_warnings_schemas import (
    AffectedOrderOut,
    OrderWithWarningsOut,
    OrdersWithWarningsResponse,
    OverlappingOrderOut,
    PaginationOut,
    ResolveWarningResponse,
    WarningInfo,
    WarningItemOut,
)
from ..inventory.availability_crud import validate_window
from .reservations_crud import (
    Reservation,
    get_matching_reservations,
    sum_quantity,
)

logger = logging.getLogger(__name__)


def _decrypt_or_none(value: Optional[str], what: str) -> Optional[str]:
    if value is None:
        return None
    try:
        return decrypt_field(value)
    except DecryptionError as e:
        logger.warning("Could not decrypt %s: %s", what, e)
        return None


def _timed_out(e: ScanTimeout):
    logger.warning("Reservation lookup timed out: %s", e)
    return error_response(
        message="timed out",
        status_code=AppStatusCode.OPERATION_TIMED_OUT,
        http_status=504
    )


def build_warning_message(original_on_hand: int, total_requested: int,
                          new_quantity: Optional[int] = None) -> str:
    short_by = total_requested - original_on_hand
    if new_quantity is None:
        return (f"Negative stock: {original_on_hand} on hand, "
                f"{total_requested} booked (short by {short_by})")
    return (f"Negative stock after new booking of {new_quantity}: "
            f"{original_on_hand} on hand, {total_requested} booked (short by {short_by})")


# ----------------- Detection -----------------


def calculate_item_warning(
    db: Session,
    item_id: Optional[int],
    size: str,
    quantity: int,
    order_date: date,
    expected_return_date: date,
    original_on_hand: int,
    exclude_order_id: Optional[int] = None,
    deadline: Optional[Deadline] = None
) -> Optional[WarningInfo]:
    """Would booking ``quantity`` more for this window oversell the item?

    Pure read. ``exclude_order_id`` leaves out the order being placed so its
    own lines are not counted twice. If the reservation scan times out, only
    the new quantity is compared with on-hand.
    """
    if item_id is None:
        return None

    deadline = deadline or Deadline(settings.AVAILABILITY_TIMEOUT_SECONDS)
    try:
        existing = sum_quantity(get_matching_reservations(
            db, item_id, size, order_date, expected_return_date,
            exclude_order_id=exclude_order_id, deadline=deadline
        ))
    except ScanTimeout as e:
        logger.warning("Warning check for item %s size %r timed out, "
                       "comparing new quantity only: %s", item_id, size, e)
        existing = 0

    total_requested = existing + quantity
    if total_requested <= original_on_hand:
        return None

    return WarningInfo(
        warningType=WarningType.negative_stock.value,
        warningMessage=build_warning_message(original_on_hand, total_requested),
        severity=WarningSeverity.high.value,
        originalOnHand=original_on_hand,
        totalRequested=total_requested,
        oversold=total_requested - original_on_hand,
        orderDate=order_date,
        expectedReturnDate=expected_return_date,
    )


def upsert_warning(
    db: Session,
    order_item_id: int,
    inventory_item_id: Optional[int],
    message: str,
    warning_type: str = WarningType.negative_stock.value,
    severity: str = WarningSeverity.high.value
) -> OrderWarning:
    """One warning per order item and type; an existing one is refreshed and re-opened."""
    warning = (
        db.query(OrderWarning)
        .filter(
            OrderWarning.order_item_id == order_item_id,
            OrderWarning.warning_type == warning_type
        )
        .first()
    )

    if warning is None:
        warning = OrderWarning(
            order_item_id=order_item_id,
            inventory_item_id=inventory_item_id,
            warning_type=warning_type,
            warning_message=message,
            severity=severity,
            is_resolved=False,
        )
        db.add(warning)
        logger.info("Created %s warning for order item %s", warning_type, order_item_id)
        return warning

    if warning.is_resolved:
        logger.info("Re-opening %s warning %s for order item %s",
                    warning_type, warning.id, order_item_id)
    warning.warning_message = message
    warning.severity = severity
    warning.is_resolved = False
    warning.resolved_at = None
    warning.resolved_by = None
    warning.updated_at = datetime.now(timezone.utc)
    return warning


def add_warnings_to_affected_orders(
    db: Session,
    item_id: int,
    size: str,
    order_date: date,
    expected_return_date: date,
    quantity: int,
    original_on_hand: int
) -> List[OrderWarning]:
    """Flag every order item left oversold by a booking that is already persisted.

    Each order item sharing the new window is re-checked against the total
    booked over its own window. No deadline applies here: a partial scan
    would silently miss warnings.
    """
    affected = get_matching_reservations(db, item_id, size, order_date, expected_return_date)
    if not affected:
        return []

    span_start = min(r.order_date for r in affected)
    span_end = max(r.expected_return_date for r in affected)
    candidates = get_matching_reservations(db, item_id, size, span_start, span_end)

    touched = []
    for reservation in affected:
        total_requested = sum_quantity([
            c for c in candidates
            if c.overlaps(reservation.order_date, reservation.expected_return_date)
        ])
        if total_requested <= original_on_hand:
            continue

        message = build_warning_message(original_on_hand, total_requested, quantity)
        touched.append(upsert_warning(db, reservation.order_item_id, item_id, message))

    if touched:
        db.commit()
        logger.info("Flagged %d order item(s) of item %s size %r as oversold",
                    len(touched), item_id, size)
    return touched


# ----------------- Affected / Overlapping -----------------


def _find_reservations(db: Session, item_id: int, size: str,
                       date_from: date, date_to: date) -> List[Reservation]:
    validate_window(date_from, date_to)
    try:
        return get_matching_reservations(
            db, item_id, size, date_from, date_to,
            deadline=Deadline(settings.AVAILABILITY_TIMEOUT_SECONDS)
        )
    except ScanTimeout as e:
        return _timed_out(e)


def get_affected_orders(
    db: Session,
    item_id: int,
    size: str,
    date_from: date,
    date_to: date
) -> List[AffectedOrderOut]:
    """Every order sharing the window for item+size, whether or not it is oversold."""
    return [
        AffectedOrderOut(
            orderId=r.order_id,
            orderItemId=r.order_item_id,
            customerName=_decrypt_or_none(r.encrypted_customer_name,
                                          f"customer of order {r.order_id}"),
            orderDate=r.order_date,
            expectedReturnDate=r.expected_return_date,
            quantity=r.quantity,
            itemName=_decrypt_or_none(r.encrypted_name, f"order item {r.order_item_id}"),
            size=r.size,
        )
        for r in _find_reservations(db, item_id, size, date_from, date_to)
    ]


def get_overlapping_orders(
    db: Session,
    item_id: int,
    size: str,
    date_from: date,
    date_to: date
) -> List[OverlappingOrderOut]:
    return [
        OverlappingOrderOut(
            orderId=r.order_id,
            customerName=_decrypt_or_none(r.encrypted_customer_name,
                                          f"customer of order {r.order_id}"),
            orderDate=r.order_date,
            expectedReturnDate=r.expected_return_date,
            quantity=r.quantity,
        )
        for r in _find_reservations(db, item_id, size, date_from, date_to)
    ]


# ----------------- Resolve / Unresolve -----------------


def get_warning(db: Session, warning_id: int) -> OrderWarning:
    warning = db.query(OrderWarning).filter(OrderWarning.id == warning_id).first()
    if not warning:
        return error_response(
            message="Warning not found",
            status_code=AppStatusCode.RECORD_NOT_FOUND,
            http_status=404
        )
    return warning


def _mark_resolved(warning: OrderWarning, user_id: int) -> bool:
    if warning.is_resolved:
        return False
    warning.is_resolved = True
    warning.resolved_by = user_id
    warning.resolved_at = datetime.now(timezone.utc)
    warning.updated_at = warning.resolved_at
    return True


def _mark_unresolved(warning: OrderWarning) -> bool:
    if not warning.is_resolved:
        return False
    warning.is_resolved = False
    warning.resolved_by = None
    warning.resolved_at = None
    warning.updated_at = datetime.now(timezone.utc)
    return True


def resolve_warning(db: Session, warning_id: int, user_id: int) -> OrderWarning:
    warning = get_warning(db, warning_id)
    if _mark_resolved(warning, user_id):
        db.commit()
        db.refresh(warning)
    return warning


def unresolve_warning(db: Session, warning_id: int) -> OrderWarning:
    warning = get_warning(db, warning_id)
    if _mark_unresolved(warning):
        db.commit()
        db.refresh(warning)
    return warning


def get_warnings_for_order_item(db: Session, order_item_id: int) -> List[OrderWarning]:
    return (
        db.query(OrderWarning)
        .filter(OrderWarning.order_item_id == order_item_id)
        .order_by(OrderWarning.created_at.desc(), OrderWarning.id.desc())
        .all()
    )


def resolve_order_item_warning(
    db: Session,
    order_item_id: int,
    resolved: bool,
    user_id: int
) -> ResolveWarningResponse:
    warnings = get_warnings_for_order_item(db, order_item_id)
    if not warnings:
        return error_response(
            message="No warning found for this order item",
            status_code=AppStatusCode.RECORD_NOT_FOUND,
            http_status=404
        )

    changed = False
    for warning in warnings:
        if resolved:
            changed = _mark_resolved(warning, user_id) or changed
        else:
            changed = _mark_unresolved(warning) or changed
    if changed:
        db.commit()
        logger.info("User %s set warnings of order item %s resolved=%s",
                    user_id, order_item_id, resolved)

    return ResolveWarningResponse(
        success=True,
        message="Warning resolved" if resolved else "Warning marked as unresolved",
    )


# ----------------- Orders with warnings -----------------


def get_orders_with_warnings(
    db: Session,
    page: int = 1,
    limit: int = 20,
    resolved: Optional[bool] = None
) -> OrdersWithWarningsResponse:
    filters = []
    if resolved is not None:
        filters.append(OrderWarning.is_resolved == resolved)

    total = (
        db.query(func.count(distinct(Order.id)))
        .select_from(Order)
        .join(OrderItem, OrderItem.order_id == Order.id)
        .join(OrderWarning, OrderWarning.order_item_id == OrderItem.id)
        .filter(*filters)
        .scalar()
    ) or 0

    order_ids = [
        row.id for row in (
            db.query(Order.id, Order.created_at)
            .join(OrderItem, OrderItem.order_id == Order.id)
            .join(OrderWarning, OrderWarning.order_item_id == OrderItem.id)
            .filter(*filters)
            .distinct()
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    ]

    orders = []
    for order_id in order_ids:
        order, customer_name = (
            db.query(Order, Customer.name)
            .outerjoin(Customer, Order.customer_id == Customer.id)
            .filter(Order.id == order_id)
            .one()
        )
        rows = (
            db.query(OrderItem, OrderWarning)
            .join(OrderWarning, OrderWarning.order_item_id == OrderItem.id)
            .filter(OrderItem.order_id == order_id, *filters)
            .order_by(OrderItem.id.asc(), OrderWarning.id.asc())
            .all()
        )
        orders.append(OrderWithWarningsOut(
            id=order.id,
            orderDate=order.order_date,
            expectedReturnDate=order.expected_return_date,
            status=order.status,
            totalAmount=float(order.total_amount or 0),
            customerId=order.customer_id,
            customerName=_decrypt_or_none(customer_name, f"customer of order {order.id}"),
            warningItems=[
                WarningItemOut(
                    id=item.id,
                    name=_decrypt_or_none(item.name, f"order item {item.id}"),
                    size=_decrypt_or_none(item.size, f"order item {item.id}"),
                    quantity=item.quantity,
                    warningId=warning.id,
                    warningType=warning.warning_type,
                    warningMessage=warning.warning_message,
                    warningSeverity=warning.severity,
                    warningIsResolved=warning.is_resolved,
                    warningResolvedAt=warning.resolved_at,
                    warningResolvedBy=warning.resolved_by,
                )
                for item, warning in rows
            ],
        ))

    total_pages = math.ceil(total / limit) if limit else 0
    return OrdersWithWarningsResponse(
        orders=orders,
        pagination=PaginationOut(
            page=page,
            limit=limit,
            total=total,
            totalPages=total_pages,
            hasNext=page < total_pages,
            hasPrev=page > 1,
        ),
    )
