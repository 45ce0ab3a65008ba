from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import UserToken
from ...crud.orders import order_items_crud as crud
from ...schemas.orders.order_items_schemas import (
    OrderItemCreate,
    OrderItemCreateResponse,
    OrderItemListResponse,
)

router = APIRouter(prefix="/api/orders", tags=["Order Items"])


# ----------------- List Order Items -----------------
@router.get("/{order_id}/items", response_model=OrderItemListResponse)
def list_order_items_endpoint(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.list_order_items(db, order_id)


# ----------------- Create Order Item -----------------
@router.post("/{order_id}/items", response_model=OrderItemCreateResponse)
def create_order_item_endpoint(
    order_id: int,
    item: OrderItemCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_order_item(db, order_id, item)
