from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; ORM rows validate by attribute."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    count: Optional[int] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
