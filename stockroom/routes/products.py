# stockroom/routes/products.py
import logging
from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from stockroom.schemas.product import ProductFilters, ProductView
from stockroom.schemas.products import ProductFormState
from stockroom.schemas.user import Warehouseman
from stockroom.services.filters import apply_filters, search_products
from stockroom.services.product_form import ProductFormService
from stockroom.services.scanner import check_barcode_exists
from stockroom.services.stock import get_product_details, product_view
from stockroom.utils.api_client import ApiError, InventoryApiClient
from stockroom.utils.deps import get_api, get_current_user, get_product_form
from stockroom.utils.pdf import generate_product_sheet

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Products"])


def backend_error(e: ApiError, message: str) -> HTTPException:
    """Map a failed backend call to the response the client shows."""
    if e.status_code == 404:
        return HTTPException(status_code=404, detail="Product not found")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=message)


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=List[ProductView])
async def list_products(
    q: Optional[str] = Query(None, description="Free-text search (any field)"),
    name: str = Query(""),
    type: str = Query(""),
    price: str = Query(""),
    supplier: str = Query(""),
    sort_by: Optional[Literal["name", "price", "quantity"]] = Query(None),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        products = await api.list_products()
    except ApiError as e:
        logger.error(f"Error fetching products: {e}")
        raise backend_error(e, "Failed to fetch products")

    if q:
        products = search_products(products, q)

    # Filter modal applied (any filter or an explicit sort); otherwise backend order
    if name or type or price or supplier or sort_by:
        filters = ProductFilters(
            name=name, type=type, price=price, supplier=supplier,
            sort_by=sort_by or "name", sort_order=sort_order,
        )
        products = apply_filters(products, filters)

    return [product_view(p) for p in products]


# =========================
# CREATE FORM
# =========================
@router.get("/products/types", response_model=List[str])
def get_product_types(
    form_service: ProductFormService = Depends(get_product_form),
    current_user: Warehouseman = Depends(get_current_user),
):
    return form_service.product_types


@router.post("/products", response_model=ProductView, status_code=status.HTTP_201_CREATED)
async def create_product(
    form: ProductFormState,
    form_service: ProductFormService = Depends(get_product_form),
    current_user: Warehouseman = Depends(get_current_user),
):
    errors = form_service.validate_form(form)
    if errors:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})

    try:
        product = await form_service.create_product(form)
    except ApiError as e:
        logger.error(f"Error creating product: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to create product")

    return product_view(product, "Produit créé avec succès")


# =========================
# BARCODE LOOKUP
# =========================
@router.get("/products/barcode/{barcode}", response_model=ProductView)
async def get_product_by_barcode(
    barcode: str,
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        product = await check_barcode_exists(api, barcode)
    except ApiError as e:
        raise backend_error(e, "Failed to check barcode in database")

    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product_view(product)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=ProductView)
async def get_product(
    product_id: Union[int, str],
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        product = await get_product_details(api, product_id)
    except ApiError as e:
        raise backend_error(e, "Failed to fetch product details")
    return product_view(product)


@router.get("/products/{product_id}/pdf")
async def get_product_pdf(
    product_id: Union[int, str],
    api: InventoryApiClient = Depends(get_api),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        product = await get_product_details(api, product_id)
    except ApiError as e:
        raise backend_error(e, "Failed to fetch product details")

    pdf = generate_product_sheet(product)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="product-{product.id}.pdf"'},
    )
