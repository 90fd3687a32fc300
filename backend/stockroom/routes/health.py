from fastapi import APIRouter
from stockroom.config import VERSION

router = APIRouter(prefix="/api", tags=["health"])

@router.get("/health")
def health_check():
    """Health check"""
    return {"status": "ok", "version": VERSION}
