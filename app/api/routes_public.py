"""
Public API routes - no authentication required
"""

from fastapi import APIRouter

router = APIRouter()

@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok"}
