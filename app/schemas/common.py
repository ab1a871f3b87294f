"""
Common Pydantic schemas
"""

from typing import Any, Optional
from pydantic import BaseModel

class Pagination(BaseModel):
    """Pagination block attached to list responses"""
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None
    pagination: Optional[Pagination] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    error: str
    error_code: Optional[str] = None
    details: Optional[Any] = None
