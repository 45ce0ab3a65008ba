import itertools
from datetime import date

import pytest
from fastapi import HTTPException

from shared.core.config import settings
from shared.utils.batching import Deadline
from rental_service.app.crud.inventory import availability_crud
from rental_service.app.crud.inventory.inventory_catalog_crud import get_original_on_hand
from rental_service.app.crud.orders.reservations_crud import windows_overlap


def fake_clock():
    return itertools.count().__next__


class TestOverlap:
    """Windows are inclusive on both ends"""

    @pytest.mark.parametrize("a, b, expected", [
        ((1, 5), (3, 7), True),
        ((1, 5), (5, 9), True),    # shared last day
        ((3, 7), (1, 3), True),    # shared first day
        ((1, 5), (6, 9), False),
        ((10, 15), (1, 7), False),
        ((1, 31), (10, 12), True),  # containment
    ])
    def test_windows_overlap(self, a, b, expected):
        d = lambda day: date(2024, 1, day)
        assert windows_overlap(d(a[0]), d(a[1]), d(b[0]), d(b[1])) is expected
        assert windows_overlap(d(b[0]), d(b[1]), d(a[0]), d(a[1])) is expected


class TestAvailabilityFloor:
    @pytest.mark.parametrize("on_hand, reserved, expected", [
        (5, 0, 5), (5, 3, 2), (5, 5, 0), (5, 7, 0), (0, 4, 0),
    ])
    def test_available_is_never_negative(self, on_hand, reserved, expected):
        assert availability_crud.compute_available(on_hand, reserved) == expected


class TestGetAvailability:
    def test_overlapping_orders_are_reserved(self, test_db, dress, make_order, add_line, jan):
        add_line(make_order(jan(1), jan(5)), dress, "M", 3)
        add_line(make_order(jan(3), jan(7)), dress, "M", 4)

        result = availability_crud.get_availability(test_db, dress.id, "M", jan(3), jan(7))

        assert result.on_hand == 5
        assert result.reserved == 7
        assert result.available == 0
        assert not result.timed_out

    def test_non_overlapping_order_is_not_reserved(self, test_db, dress, make_order, add_line, jan):
        add_line(make_order(jan(1), jan(5)), dress, "M", 3)
        add_line(make_order(jan(10), jan(15)), dress, "M", 4)

        result = availability_crud.get_availability(test_db, dress.id, "M", jan(1), jan(7))

        assert result.reserved == 3
        assert result.available == 2

    def test_size_labels_are_matched_after_normalization(self, test_db, make_item, make_order, add_line, jan):
        item = make_item("Quần Tây Đen", "Quần", sizes={"Size S": 10})
        order = make_order(jan(1), jan(5))
        add_line(order, item, "size-s", 2)
        add_line(order, item, "SIZE_S", 3)
        add_line(order, item, "Size M", 4)

        result = availability_crud.get_availability(test_db, item.id, "sizes", jan(1), jan(5))

        assert result.on_hand == 10
        assert result.reserved == 5
        assert result.available == 5

    def test_missing_size_has_zero_on_hand(self, test_db, dress, jan):
        result = availability_crud.get_availability(test_db, dress.id, "XXL", jan(1), jan(5))

        assert result.on_hand == 0
        assert result.reserved == 0
        assert result.available == 0

    def test_other_items_and_custom_lines_are_ignored(self, test_db, dress, make_item, make_order, add_line, jan):
        other = make_item("Áo Dài Xanh", "Áo Dài", sizes={"M": 5})
        order = make_order(jan(1), jan(5))
        add_line(order, other, "M", 4)
        add_line(order, None, "M", 4)

        result = availability_crud.get_availability(test_db, dress.id, "M", jan(1), jan(5))

        assert result.reserved == 0

    def test_undecryptable_order_item_is_excluded(self, test_db, dress, make_order, add_line, jan, bad_ciphertext):
        order = make_order(jan(1), jan(5))
        add_line(order, dress, "M", 2)
        add_line(order, dress, None, 3, raw_size=bad_ciphertext)

        result = availability_crud.get_availability(test_db, dress.id, "M", jan(1), jan(5))

        assert result.reserved == 2
        assert result.available == 3

    def test_timeout_is_distinct_from_zero(self, test_db, dress, make_order, add_line, jan, monkeypatch):
        monkeypatch.setattr(settings, "AVAILABILITY_BATCH_SIZE", 1)
        order = make_order(jan(1), jan(5))
        add_line(order, dress, "M", 1)
        add_line(order, dress, "M", 1)

        result = availability_crud.get_availability(
            test_db, dress.id, "M", jan(1), jan(5), deadline=Deadline(1, clock=fake_clock())
        )

        assert result.timed_out
        assert result.reserved is None
        assert result.available is None
        assert result.on_hand == 5

    def test_expired_deadline_stops_before_first_batch(self, test_db, dress, make_order, add_line, jan):
        add_line(make_order(jan(1), jan(5)), dress, "M", 1)

        result = availability_crud.get_availability(
            test_db, dress.id, "M", jan(1), jan(5), deadline=Deadline(0)
        )

        assert result.timed_out
        assert result.reserved is None

    def test_reversed_window_is_rejected(self, test_db, dress, jan):
        with pytest.raises(HTTPException) as exc:
            availability_crud.get_availability(test_db, dress.id, "M", jan(7), jan(3))
        assert exc.value.status_code == 400


class TestOriginalOnHand:
    def test_ignores_reservations(self, test_db, dress, make_order, add_line, jan):
        add_line(make_order(jan(1), jan(5)), dress, "M", 4)

        assert get_original_on_hand(test_db, dress.id, "m") == 5
        assert get_original_on_hand(test_db, dress.id, "XS") == 0
