import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from shared.utils.batching import Deadline, ScanTimeout
from shared.utils.text_normalizer import normalize_size
from ..orders.reservations_crud import decrypt_reservations, get_overlapping_rows
from .inventory_catalog_crud import DecryptedSize, find_matching_size, get_decrypted_sizes

logger = logging.getLogger(__name__)


@dataclass
class Availability:
    on_hand: int
    reserved: Optional[int]
    available: Optional[int]
    timed_out: bool = False

    @classmethod
    def timed_out_result(cls, on_hand: int) -> "Availability":
        return cls(on_hand=on_hand, reserved=None, available=None, timed_out=True)


def compute_available(on_hand: int, reserved: int) -> int:
    # oversell shows up as warnings, never as negative availability
    return max(0, on_hand - reserved)


def validate_window(date_from: date, date_to: date):
    if date_from is None or date_to is None:
        return error_response(
            message="dateFrom and dateTo must be supplied together",
            status_code=AppStatusCode.REQUIRED_VALIDATION_ERROR,
            http_status=400
        )
    if date_from > date_to:
        return error_response(
            message="dateFrom must be on or before dateTo",
            status_code=AppStatusCode.INVALID_DATE_RANGE,
            http_status=400
        )


def get_reserved_by_size(
    db: Session,
    item_id: int,
    date_from: date,
    date_to: date,
    deadline: Optional[Deadline] = None
) -> Dict[str, int]:
    """Reserved quantity per normalized size for the window. Raises ScanTimeout."""
    rows = get_overlapping_rows(db, item_id, date_from, date_to)
    reserved: Dict[str, int] = defaultdict(int)
    for reservation in decrypt_reservations(rows, deadline=deadline):
        reserved[reservation.size_key] += reservation.quantity
    return reserved


def get_availability(
    db: Session,
    item_id: int,
    size: str,
    date_from: date,
    date_to: date,
    deadline: Optional[Deadline] = None,
    sizes: Optional[List[DecryptedSize]] = None
) -> Availability:
    validate_window(date_from, date_to)
    deadline = deadline or Deadline(settings.AVAILABILITY_TIMEOUT_SECONDS)

    if sizes is None:
        sizes = get_decrypted_sizes(db, item_id)
    matching = find_matching_size(sizes, size)
    on_hand = matching.on_hand if matching else 0

    try:
        reserved_by_size = get_reserved_by_size(db, item_id, date_from, date_to, deadline)
    except ScanTimeout as e:
        logger.warning("Availability for item %s size %r timed out: %s", item_id, size, e)
        return Availability.timed_out_result(on_hand)

    reserved = reserved_by_size.get(normalize_size(size), 0)
    return Availability(
        on_hand=on_hand,
        reserved=reserved,
        available=compute_available(on_hand, reserved),
    )
