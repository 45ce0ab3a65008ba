from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_rental_db as get_db
from shared.core.schemas import UserToken
from ...crud.inventory import inventory_search_crud as crud
from ...schemas.inventory.inventory_search_schemas import (
    InventorySearchRequest,
    InventorySearchResponse,
)

router = APIRouter(prefix="/api/inventory", tags=["Inventory Search"])


# ---------------- Search Inventory ----------------
@router.get("/search", response_model=InventorySearchResponse)
def search_inventory_endpoint(
    params: InventorySearchRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    result = crud.search_inventory(db, params)
    if result.error:
        return JSONResponse(status_code=504, content=result.model_dump(mode="json"))
    return result
