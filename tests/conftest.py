import os

# settings are read at import time
os.environ.setdefault("ENCRYPTION_KEY", "00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.auth import validate_current_token
from shared.core.database import Base, get_rental_db
from shared.core.schemas import UserToken
from shared.utils.encryption import encrypt
from rental_service.app.main import app
from rental_service.app.models import (
    Customer,
    InventoryItem,
    InventorySize,
    Order,
    OrderItem,
    Tag,
)

STAFF_USER_ID = 7
BAD_CIPHERTEXT = "aa" * 12 + ":" + "bb" * 24


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_db(test_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_rental_db] = override_get_db
    db = SessionLocal()
    yield db
    db.close()
    app.dependency_overrides.pop(get_rental_db, None)


@pytest.fixture
def client(test_db):
    app.dependency_overrides[validate_current_token] = lambda: UserToken(
        user_id=STAFF_USER_ID, name="Staff"
    )
    yield TestClient(app)
    app.dependency_overrides.pop(validate_current_token, None)


@pytest.fixture
def make_item(test_db):
    """Create an inventory item with encrypted name, category, tags and sizes."""
    counters = {}
    created = datetime(2024, 1, 1, 8, 0, 0)

    def _make(name, category="Áo Dài", sizes=None, tags=(), created_at=None):
        nonlocal created
        counters[category] = counters.get(category, 0) + 1
        created = created + timedelta(minutes=1)
        item = InventoryItem(
            name=encrypt(name),
            category=encrypt(category),
            category_counter=counters[category],
            created_at=created_at or created,
            updated_at=created_at or created,
        )
        for tag_name in tags:
            item.tags.append(Tag(name=encrypt(tag_name)))
        test_db.add(item)
        test_db.flush()

        for title, on_hand in (sizes or {}).items():
            test_db.add(InventorySize(
                item_id=item.id,
                title=encrypt(title),
                quantity=encrypt(str(on_hand)),
                on_hand=encrypt(str(on_hand)),
                price=encrypt("100000"),
            ))
        test_db.commit()
        test_db.refresh(item)
        return item

    return _make


@pytest.fixture
def make_order(test_db):
    def _make(order_date, expected_return_date, customer_name="Nguyễn Văn A"):
        customer = Customer(name=encrypt(customer_name), phone="0900000000")
        test_db.add(customer)
        test_db.flush()
        order = Order(
            customer_id=customer.id,
            order_date=order_date,
            expected_return_date=expected_return_date,
            status="Processing",
            total_amount=0,
        )
        test_db.add(order)
        test_db.commit()
        test_db.refresh(order)
        return order

    return _make


@pytest.fixture
def add_line(test_db):
    """Persist an order item directly, bypassing warning detection."""
    def _add(order, item, size, quantity, raw_size=None):
        line = OrderItem(
            order_id=order.id,
            inventory_item_id=item.id if item is not None else None,
            name=encrypt("line item"),
            size=raw_size if raw_size is not None else encrypt(size),
            quantity=quantity,
            price=0,
        )
        test_db.add(line)
        test_db.commit()
        test_db.refresh(line)
        return line

    return _add


@pytest.fixture
def dress(make_item):
    """Item X of the oversell scenarios: size M with 5 on hand."""
    return make_item("Áo Dài Lụa Đỏ", "Áo Dài", sizes={"M": 5, "L": 2}, tags=["Lễ Tết"])


@pytest.fixture
def bad_ciphertext():
    """Well-formed ciphertext that fails authentication under the test key."""
    return BAD_CIPHERTEXT


@pytest.fixture
def jan():
    return lambda day: date(2024, 1, day)
