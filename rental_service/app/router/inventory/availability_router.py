from typing import List
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import availability_crud, inventory_catalog_crud
from ...schemas.inventory.availability_schemas import (
    AvailabilityOut,
    ItemSizeRequest,
    ItemWindowRequest,
    OriginalOnHandOut,
)

router = APIRouter(prefix="/api/inventory", tags=["Inventory Availability"])


# ----------------- Availability for a window -----------------
@router.get("/availability", response_model=AvailabilityOut)
def get_availability_endpoint(
    params: ItemWindowRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    availability_crud.validate_window(params.dateFrom, params.dateTo)
    if not inventory_catalog_crud.get_inventory_item(db, params.inventoryItemId):
        return error_response(
            message="Inventory item not found",
            status_code=AppStatusCode.RECORD_NOT_FOUND,
            http_status=404
        )

    result = availability_crud.get_availability(
        db, params.inventoryItemId, params.size, params.dateFrom, params.dateTo
    )
    out = AvailabilityOut(
        inventoryItemId=params.inventoryItemId,
        size=params.size,
        dateFrom=params.dateFrom,
        dateTo=params.dateTo,
        onHand=result.on_hand,
        reserved=result.reserved,
        available=result.available,
        timedOut=result.timed_out,
    )
    if result.timed_out:
        return JSONResponse(status_code=504, content=out.model_dump(mode="json"))
    return out


# ----------------- Original on-hand -----------------
@router.get("/original-onhand", response_model=OriginalOnHandOut)
def get_original_on_hand_endpoint(
    params: ItemSizeRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return OriginalOnHandOut(
        originalOnHand=inventory_catalog_crud.get_original_on_hand(
            db, params.inventoryItemId, params.size
        )
    )


# ----------------- Category lookup -----------------
@router.get("/category-lookup", response_model=List[Lookup])
def category_lookup_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return inventory_catalog_crud.get_category_lookup(db)
