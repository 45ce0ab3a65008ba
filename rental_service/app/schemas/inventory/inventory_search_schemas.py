from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams


# ----------------- Request -----------------
class InventorySearchRequest(CommonQueryParams):
    q: Optional[str] = None
    category: Optional[str] = None
    dateFrom: Optional[date] = None
    dateTo: Optional[date] = None

    @property
    def has_window(self) -> bool:
        return self.dateFrom is not None and self.dateTo is not None


# ----------------- Out -----------------
class SizeAvailabilityOut(BaseModel):
    id: int
    title: str
    quantity: Optional[int] = None
    price: Optional[int] = None
    onHand: int
    reserved: int
    available: int


class InventorySearchItemOut(BaseModel):
    id: int
    formattedId: str
    name: str
    category: str
    imageUrl: Optional[str] = None
    tags: List[str] = []
    sizes: List[SizeAvailabilityOut] = []
    createdAt: Optional[datetime] = None


# ----------------- List Response -----------------
class InventorySearchResponse(BaseModel):
    items: List[InventorySearchItemOut]
    total: int
    page: int
    totalPages: int
    hasMore: bool
    searchNote: Optional[str] = None
    error: Optional[str] = None
