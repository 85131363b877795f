# stockroom/routes/stats.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from stockroom.schemas.stats import Statistics
from stockroom.schemas.user import Warehouseman
from stockroom.services.statistics import fetch_statistics
from stockroom.utils.api_client import ApiError, InventoryApiClient
from stockroom.utils.deps import get_api, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stats"])


# === Dashboard statistics, recomputed on every call ===

@router.get("/stats", response_model=Statistics)
async def get_statistics(
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        return await fetch_statistics(api)
    except ApiError as e:
        logger.error(f"Error fetching statistics: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch statistics")
