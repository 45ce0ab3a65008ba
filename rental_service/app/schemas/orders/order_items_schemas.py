from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .order_warnings_schemas import WarningInfo


# ----------------- Create -----------------
class OrderItemCreate(BaseModel):
    inventoryItemId: Optional[int] = None
    name: str = Field(min_length=1)
    size: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    price: int = 0
    isExtension: bool = False
    isCustom: bool = False
    # on-hand seen by the order form; looked up when omitted
    originalOnHand: Optional[int] = Field(default=None, ge=0)


# ----------------- Out -----------------
class OrderItemOut(BaseModel):
    id: int
    orderId: int
    inventoryItemId: Optional[int] = None
    name: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    price: int
    isExtension: bool
    isCustom: bool
    warning: Optional[str] = None
    warningResolved: bool = False
    warningResolvedAt: Optional[datetime] = None
    warningResolvedBy: Optional[int] = None
    createdAt: Optional[datetime] = None


class OrderItemCreateResponse(BaseModel):
    item: OrderItemOut
    warning: Optional[WarningInfo] = None
    affectedWarnings: int = 0


class OrderItemListResponse(BaseModel):
    items: List[OrderItemOut]
