"""Inventory search over an encrypted catalog.

Names, categories and tags cannot be matched in SQL, so the catalog is walked
newest first in small batches and matched in Python. Text matching runs
before any size is decrypted. The walk is bounded by an item cap and a wall
clock budget checked before each batch.
"""
import logging
import math
import time
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.utils.batching import Deadline, ScanTimeout
from shared.utils.encryption import DecryptionError
from shared.utils.text_normalizer import compact_code, contains_all_words, query_words
from ...schemas.inventory.inventory_search_schemas import (
    InventorySearchItemOut,
    InventorySearchRequest,
    InventorySearchResponse,
    SizeAvailabilityOut,
)
from .availability_crud import compute_available, get_reserved_by_size, validate_window
from .inventory_catalog_crud import (
    ItemSummary,
    decrypt_item,
    get_decrypted_sizes,
    get_item_batch,
    has_items_after,
)

logger = logging.getLogger(__name__)


def item_matches(item: ItemSummary, query: Optional[str], category: Optional[str] = None) -> bool:
    if category and item.category.strip().lower() != category.strip().lower():
        return False

    query = (query or "").strip()
    if not query:
        return True

    words = query_words(query)
    if contains_all_words(item.name, words) or contains_all_words(item.category, words):
        return True
    if any(contains_all_words(tag, words) for tag in item.tags):
        return True

    lowered = query.lower()
    if lowered in item.name.lower() or lowered in item.category.lower():
        return True

    code = compact_code(query)
    return bool(code) and (
        code in compact_code(item.formatted_id) or lowered in item.formatted_id.lower()
    )


def _timed_out_response(page: int) -> InventorySearchResponse:
    return InventorySearchResponse(
        items=[],
        total=0,
        page=page,
        totalPages=0,
        hasMore=False,
        error="timed out",
    )


def _annotate(db: Session, item: ItemSummary, params: InventorySearchRequest,
              deadline: Deadline) -> InventorySearchItemOut:
    sizes = get_decrypted_sizes(db, item.id)
    reserved_by_size = {}
    if params.has_window:
        reserved_by_size = get_reserved_by_size(
            db, item.id, params.dateFrom, params.dateTo, deadline
        )

    size_rows = []
    for size in sizes:
        reserved = reserved_by_size.get(size.key, 0)
        size_rows.append(SizeAvailabilityOut(
            id=size.id,
            title=size.title,
            quantity=size.quantity,
            price=size.price,
            onHand=size.on_hand,
            reserved=reserved,
            available=compute_available(size.on_hand, reserved),
        ))

    return InventorySearchItemOut(
        id=item.id,
        formattedId=item.formatted_id,
        name=item.name,
        category=item.category,
        imageUrl=item.image_url,
        tags=item.tags,
        sizes=size_rows,
        createdAt=item.created_at,
    )


# ----------------- Search Inventory -----------------
def search_inventory(
    db: Session,
    params: InventorySearchRequest,
    clock: Callable[[], float] = time.monotonic
) -> InventorySearchResponse:
    if params.dateFrom is not None or params.dateTo is not None:
        validate_window(params.dateFrom, params.dateTo)

    deadline = Deadline(settings.SEARCH_TIMEOUT_SECONDS, clock=clock)
    batch_size = settings.SEARCH_BATCH_SIZE
    max_scan = settings.SEARCH_MAX_SCAN_ITEMS
    wanted = params.skip + params.limit

    matches: List[ItemSummary] = []
    scanned = 0
    exhausted = False
    capped = False

    try:
        # one extra match tells whether another page exists
        while len(matches) <= wanted:
            deadline.check("inventory search")
            if scanned >= max_scan:
                capped = has_items_after(db, scanned)
                exhausted = not capped
                break

            request_size = min(batch_size, max_scan - scanned)
            batch = get_item_batch(db, scanned, request_size)
            scanned += len(batch)

            for item in batch:
                try:
                    summary = decrypt_item(item)
                except DecryptionError as e:
                    logger.warning("Skipping inventory item %s in search: %s", item.id, e)
                    continue
                if item_matches(summary, params.q, params.category):
                    matches.append(summary)

            if len(batch) < request_size:
                exhausted = True
                break

        page_items = [
            _annotate(db, item, params, deadline)
            for item in matches[params.skip:wanted]
        ]
    except ScanTimeout as e:
        logger.warning("Inventory search for %r timed out after %d items: %s",
                       params.q, scanned, e)
        return _timed_out_response(params.page)

    total = len(matches)
    logger.info("Inventory search for %r scanned %d items, %d matches%s",
                params.q, scanned, total, "" if exhausted else " (partial)")

    return InventorySearchResponse(
        items=page_items,
        total=total,
        page=params.page,
        totalPages=math.ceil(total / params.limit),
        hasMore=wanted < total or not exhausted,
        searchNote=(
            f"Results are limited to the {max_scan} most recent items. "
            f"Refine your search to narrow them down."
        ) if capped else None,
    )
