from pydantic import BaseModel, Field
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: int
    session_id: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None
    exp: Optional[int] = None


class CommonQueryParams(EmptyStringModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class Lookup(BaseModel):
    id: Union[str, int, UUID]
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(EmptyStringModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
