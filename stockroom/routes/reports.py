# stockroom/routes/reports.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from stockroom.schemas.user import Warehouseman
from stockroom.utils.api_client import ApiError, InventoryApiClient
from stockroom.utils.deps import get_api, get_current_user
from stockroom.utils.pdf import EmptyReportError, generate_products_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


# -----------------------------
# Catalog export (PDF)
# -----------------------------
@router.get("/products.pdf")
async def report_products(
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        products = await api.list_products()
    except ApiError as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch products")

    try:
        pdf = generate_products_report(products)
    except EmptyReportError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="products.pdf"'},
    )
