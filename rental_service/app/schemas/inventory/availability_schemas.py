from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


# ----------------- Request -----------------
class ItemSizeRequest(EmptyStringModel):
    inventoryItemId: int = Field(gt=0)
    size: str = Field(min_length=1)


class ItemWindowRequest(ItemSizeRequest):
    dateFrom: date
    dateTo: date


# ----------------- Out -----------------
class AvailabilityOut(BaseModel):
    inventoryItemId: int
    size: str
    dateFrom: date
    dateTo: date
    onHand: int
    reserved: Optional[int] = None
    available: Optional[int] = None
    timedOut: bool = False


class OriginalOnHandOut(BaseModel):
    originalOnHand: int
