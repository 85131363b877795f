# stockroom/routes/stock.py
import logging
from typing import Union

from fastapi import APIRouter, Depends, HTTPException, status

from stockroom.routes.products import backend_error
from stockroom.schemas.product import ProductView
from stockroom.schemas.stock import StockAction, StockAdjustment
from stockroom.schemas.user import Warehouseman
from stockroom.services.stock import (
    ProductDetail,
    StockNotFoundError,
    get_product_details,
    validate_stock_adjustment,
)
from stockroom.utils.api_client import ApiError, InventoryApiClient
from stockroom.utils.deps import get_api, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stock"])


# Add to / remove from the stock of one warehouse
@router.post("/products/{product_id}/stock/{action}", response_model=ProductView)
async def adjust_stock(
    product_id: Union[int, str],
    action: StockAction,
    adjustment: StockAdjustment,
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    # Incomplete form: rejected before any backend call
    error = validate_stock_adjustment(adjustment)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    try:
        product = await get_product_details(api, product_id)
    except ApiError as e:
        raise backend_error(e, "Failed to fetch product details")

    detail = ProductDetail(api, product, editor=current_user, adjustment=adjustment)
    try:
        applied = await detail.apply(action)
    except StockNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ApiError as e:
        logger.error(f"Error updating stock of product {product_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to update stock")

    if not applied:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail.message)
    return detail.view()
