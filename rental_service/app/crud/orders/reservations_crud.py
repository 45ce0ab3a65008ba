"""Reservation index: order items read together with their order's window.

An order item holds stock for ``[order_date, expected_return_date]``, both
ends inclusive. Overlap is filtered in SQL; size matching has to happen in
Python because sizes are stored encrypted under a random nonce.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.utils.batching import Deadline, chunked
from shared.utils.encryption import DecryptionError, decrypt_field
from shared.utils.text_normalizer import normalize_size
from ...models.orders.customers import Customer
from ...models.orders.order_items import OrderItem
from ...models.orders.orders import Order

logger = logging.getLogger(__name__)


@dataclass
class Reservation:
    order_item_id: int
    order_id: int
    quantity: int
    size: str
    order_date: date
    expected_return_date: date
    encrypted_name: Optional[str] = None
    encrypted_customer_name: Optional[str] = None

    @property
    def size_key(self) -> str:
        return normalize_size(self.size)

    def overlaps(self, start: date, end: date) -> bool:
        return windows_overlap(self.order_date, self.expected_return_date, start, end)


def windows_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


def overlap_filters(date_from: date, date_to: date):
    return [
        Order.order_date <= date_to,
        Order.expected_return_date >= date_from,
    ]


def get_overlapping_rows(
    db: Session,
    item_id: int,
    date_from: date,
    date_to: date,
    exclude_order_id: Optional[int] = None
):
    """Order items of ``item_id`` whose order window overlaps, sizes still encrypted."""
    filters = [OrderItem.inventory_item_id == item_id, *overlap_filters(date_from, date_to)]
    if exclude_order_id is not None:
        filters.append(Order.id != exclude_order_id)

    return (
        db.query(
            OrderItem.id.label("order_item_id"),
            OrderItem.order_id,
            OrderItem.quantity,
            OrderItem.size,
            OrderItem.name,
            Order.order_date,
            Order.expected_return_date,
            Customer.name.label("customer_name"),
        )
        .join(Order, OrderItem.order_id == Order.id)
        .outerjoin(Customer, Order.customer_id == Customer.id)
        .filter(*filters)
        .order_by(Order.order_date.asc(), OrderItem.id.asc())
        .all()
    )


def decrypt_reservations(
    rows,
    size: Optional[str] = None,
    deadline: Optional[Deadline] = None,
    batch_size: Optional[int] = None
) -> List[Reservation]:
    """Decrypt candidate rows batch by batch, keeping those whose size matches.

    With ``size=None`` every decryptable row is kept. The deadline is checked
    before each batch and raises ScanTimeout. Rows that fail to decrypt are
    logged and dropped.
    """
    wanted = normalize_size(size) if size is not None else None
    batch_size = batch_size or settings.AVAILABILITY_BATCH_SIZE

    results = []
    for batch in chunked(rows, batch_size):
        if deadline is not None:
            deadline.check("reservation scan")

        for row in batch:
            try:
                plain_size = decrypt_field(row.size)
            except DecryptionError as e:
                logger.warning("Excluding order item %s from reservations: %s",
                               row.order_item_id, e)
                continue

            if wanted is not None and normalize_size(plain_size) != wanted:
                continue

            results.append(Reservation(
                order_item_id=row.order_item_id,
                order_id=row.order_id,
                quantity=row.quantity,
                size=plain_size,
                order_date=row.order_date,
                expected_return_date=row.expected_return_date,
                encrypted_name=row.name,
                encrypted_customer_name=row.customer_name,
            ))
    return results


def get_matching_reservations(
    db: Session,
    item_id: int,
    size: str,
    date_from: date,
    date_to: date,
    exclude_order_id: Optional[int] = None,
    deadline: Optional[Deadline] = None
) -> List[Reservation]:
    rows = get_overlapping_rows(db, item_id, date_from, date_to, exclude_order_id)
    return decrypt_reservations(rows, size=size, deadline=deadline)


def sum_quantity(reservations: List[Reservation]) -> int:
    return sum(r.quantity for r in reservations)
