# stockroom/routes/warehouse.py
from typing import List

from fastapi import APIRouter, Depends

from stockroom.schemas.user import Warehouseman
from stockroom.schemas.warehouse import Warehouse
from stockroom.services.product_form import ProductFormService
from stockroom.utils.deps import get_current_user, get_product_form

router = APIRouter(tags=["Warehouses"])


# Warehouses the create form can put stock into
@router.get("/warehouses", response_model=List[Warehouse])
def list_warehouses(
    form_service: ProductFormService = Depends(get_product_form),
    current_user: Warehouseman = Depends(get_current_user),
):
    return list(form_service.warehouses.values())
