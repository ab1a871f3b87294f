"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse, Pagination, StandardResponse

def _drop_empty(content: dict, keep: tuple = ()) -> dict:
    """Remove unset top-level envelope keys"""
    return {key: value for key, value in content.items() if value is not None or key in keep}

def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = 200,
    pagination: Optional[Pagination] = None,
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data,
        pagination=pagination,
    )
    return JSONResponse(
        content=_drop_empty(jsonable_encoder(response), keep=("data",)),
        status_code=status_code
    )

def error_response(
    error: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        error=error,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=_drop_empty(jsonable_encoder(response)),
        status_code=status_code
    )
