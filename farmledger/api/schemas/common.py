from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Standard response wrapper"""
    data: Optional[T] = None
    message: str = ""
    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every non-2xx response"""
    data: None = None
    message: str
    success: bool = False
    error: str
