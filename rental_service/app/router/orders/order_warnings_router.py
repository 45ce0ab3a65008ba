from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import UserToken
from ...crud.orders import order_warnings_crud as crud
from ...schemas.inventory.availability_schemas import ItemWindowRequest
from ...schemas.orders.order_warnings_schemas import (
    AffectedOrdersResponse,
    OrderWarningOut,
    OrdersWithWarningsResponse,
    OverlappingOrdersResponse,
    ResolveWarningRequest,
    ResolveWarningResponse,
)

router = APIRouter(prefix="/api/orders", tags=["Order Warnings"])


# ----------------- Affected Orders -----------------
@router.get("/affected-orders", response_model=AffectedOrdersResponse)
def get_affected_orders_endpoint(
    params: ItemWindowRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return AffectedOrdersResponse(
        affectedOrders=crud.get_affected_orders(
            db, params.inventoryItemId, params.size, params.dateFrom, params.dateTo
        )
    )


# ----------------- Overlapping Orders -----------------
@router.get("/overlapping", response_model=OverlappingOrdersResponse)
def get_overlapping_orders_endpoint(
    params: ItemWindowRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return OverlappingOrdersResponse(
        orders=crud.get_overlapping_orders(
            db, params.inventoryItemId, params.size, params.dateFrom, params.dateTo
        )
    )


# ----------------- Resolve / Unresolve -----------------
@router.post("/resolve-warning", response_model=ResolveWarningResponse)
def resolve_warning_endpoint(
    request: ResolveWarningRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.resolve_order_item_warning(
        db, request.orderItemId, request.resolved, current_user.user_id
    )


# ----------------- Orders With Warnings -----------------
@router.get("/with-warnings", response_model=OrdersWithWarningsResponse)
def get_orders_with_warnings_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    resolved: Optional[bool] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_orders_with_warnings(db, page, limit, resolved)


# ----------------- Warnings of an order item -----------------
@router.get("/items/{order_item_id}/warnings", response_model=List[OrderWarningOut])
def get_order_item_warnings_endpoint(
    order_item_id: int,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_warnings_for_order_item(db, order_item_id)
