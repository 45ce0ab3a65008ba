"""Inventory catalog reads.

Item names, categories, tags and every size column are encrypted at rest, so
everything here hands back decrypted values. Rows that fail to decrypt are
logged and left out rather than failing the caller.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from shared.utils.encryption import DecryptionError, decrypt_field, decrypt_int
from shared.utils.text_normalizer import (
    format_item_code,
    normalize_size,
    normalize_vietnamese,
    sizes_match,
)
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.inventory_sizes import InventorySize

logger = logging.getLogger(__name__)


@dataclass
class DecryptedSize:
    id: int
    item_id: int
    title: str
    quantity: int
    on_hand: int
    price: int

    @property
    def key(self) -> str:
        return normalize_size(self.title)


@dataclass
class ItemSummary:
    id: int
    name: str
    category: str
    formatted_id: str
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)


# ----------------------------------------------------------------------
# Decrypt helpers
# ----------------------------------------------------------------------


def decrypt_size(size: InventorySize) -> DecryptedSize:
    return DecryptedSize(
        id=size.id,
        item_id=size.item_id,
        title=decrypt_field(size.title),
        quantity=decrypt_int(size.quantity),
        on_hand=decrypt_int(size.on_hand),
        price=decrypt_int(size.price),
    )


def decrypt_item(item: InventoryItem) -> ItemSummary:
    """Decrypt name and category; raises DecryptionError. Bad tags are dropped."""
    name = decrypt_field(item.name)
    category = decrypt_field(item.category)

    tags = []
    for tag in item.tags:
        try:
            tags.append(decrypt_field(tag.name))
        except DecryptionError as e:
            logger.warning("Skipping tag %s on item %s: %s", tag.id, item.id, e)

    return ItemSummary(
        id=item.id,
        name=name,
        category=category,
        formatted_id=format_item_code(category, item.category_counter),
        image_url=item.image_url,
        created_at=item.created_at,
        tags=tags,
    )


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------


def get_inventory_item(db: Session, item_id: int) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()


def get_item_batch(db: Session, offset: int, limit: int) -> List[InventoryItem]:
    """One page of the catalog, newest first."""
    return (
        db.query(InventoryItem)
        .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def has_items_after(db: Session, offset: int) -> bool:
    return (
        db.query(InventoryItem.id)
        .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
        .offset(offset)
        .limit(1)
        .first()
    ) is not None


def get_decrypted_sizes(db: Session, item_id: int) -> List[DecryptedSize]:
    sizes = (
        db.query(InventorySize)
        .filter(InventorySize.item_id == item_id)
        .order_by(InventorySize.id.asc())
        .all()
    )

    results = []
    for size in sizes:
        try:
            results.append(decrypt_size(size))
        except DecryptionError as e:
            logger.warning("Skipping size %s of item %s: %s", size.id, item_id, e)
    return results


def find_matching_size(sizes: List[DecryptedSize], size: str) -> Optional[DecryptedSize]:
    return next((s for s in sizes if sizes_match(s.title, size)), None)


def get_original_on_hand(db: Session, item_id: int, size: str) -> int:
    """Physical on-hand for item+size, ignoring reservations. 0 when the size is unknown."""
    matching = find_matching_size(get_decrypted_sizes(db, item_id), size)
    return matching.on_hand if matching else 0


def get_category_lookup(db: Session) -> List[Lookup]:
    categories: Dict[str, str] = {}
    rows = (
        db.query(InventoryItem.id, InventoryItem.category)
        .order_by(InventoryItem.id.asc())
        .all()
    )
    for item_id, category in rows:
        try:
            name = decrypt_field(category)
        except DecryptionError as e:
            logger.warning("Skipping category of item %s: %s", item_id, e)
            continue
        categories.setdefault(name.lower(), name)

    return [
        Lookup(id=name, name=name)
        for name in sorted(categories.values(), key=normalize_vietnamese)
    ]
