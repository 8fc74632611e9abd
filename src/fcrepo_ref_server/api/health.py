from datetime import datetime, timezone
from fastapi import APIRouter
from fcrepo_ref_server.config import settings

router = APIRouter(tags=["system"])


@router.get("/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": settings.STORAGE_BACKEND,
    }
