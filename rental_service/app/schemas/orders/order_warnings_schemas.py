from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel


# ----------------- Detection -----------------
class WarningInfo(BaseModel):
    warningType: str
    warningMessage: str
    severity: str
    originalOnHand: int
    totalRequested: int
    oversold: int
    orderDate: date
    expectedReturnDate: date


class OrderWarningOut(BaseModel):
    id: int
    order_item_id: int
    inventory_item_id: Optional[int] = None
    warning_type: str
    warning_message: str
    severity: str
    is_resolved: bool
    resolved_by: Optional[int] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ----------------- Affected / Overlapping -----------------
class AffectedOrderOut(BaseModel):
    orderId: int
    orderItemId: int
    customerName: Optional[str] = None
    orderDate: date
    expectedReturnDate: date
    quantity: int
    itemName: Optional[str] = None
    size: str


class AffectedOrdersResponse(BaseModel):
    affectedOrders: List[AffectedOrderOut]


class OverlappingOrderOut(BaseModel):
    orderId: int
    customerName: Optional[str] = None
    orderDate: date
    expectedReturnDate: date
    quantity: int


class OverlappingOrdersResponse(BaseModel):
    orders: List[OverlappingOrderOut]


# ----------------- Resolve -----------------
class ResolveWarningRequest(BaseModel):
    orderItemId: int
    resolved: bool


class ResolveWarningResponse(BaseModel):
    success: bool
    message: str


# ----------------- Orders with warnings -----------------
class WarningItemOut(BaseModel):
    id: int
    name: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    warningId: int
    warningType: str
    warningMessage: str
    warningSeverity: str
    warningIsResolved: bool
    warningResolvedAt: Optional[datetime] = None
    warningResolvedBy: Optional[int] = None


class OrderWithWarningsOut(BaseModel):
    id: int
    orderDate: date
    expectedReturnDate: date
    status: str
    totalAmount: float
    customerId: int
    customerName: Optional[str] = None
    warningItems: List[WarningItemOut] = []


class PaginationOut(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class OrdersWithWarningsResponse(BaseModel):
    orders: List[OrderWithWarningsOut]
    pagination: PaginationOut
