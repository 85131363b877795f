# stockroom/schemas/products.py
from typing import Dict, List, Optional, Union

from pydantic import Field

from stockroom.schemas.base import APIBase
from stockroom.schemas.warehouse import Localisation


# One stock row of the create form (text inputs, warehouse picker)
class ProductStockInput(APIBase):
    warehouse_id: Optional[int] = Field(default=None, alias="warehouseId")
    quantity: str = ""


# Create-product form as typed by the user
class ProductFormState(APIBase):
    name: str = ""
    type: str = ""
    barcode: str = ""
    price: str = ""
    solde: Optional[str] = None
    supplier: str = ""
    image: str = ""
    stocks: List[ProductStockInput] = Field(default_factory=list)


# Field name (or "stock-<index>") -> message
ProductFormErrors = Dict[str, str]


class FormattedStock(APIBase):
    id: int
    name: str
    quantity: int
    localisation: Localisation


# Payload posted to the backend when creating a product
class FormattedProduct(APIBase):
    name: str
    type: str
    barcode: str
    price: float
    solde: Optional[float] = None
    supplier: str
    image: str
    stocks: List[FormattedStock]
    edited_by: List[Dict[str, Union[int, str]]] = Field(default_factory=list, alias="editedBy")
