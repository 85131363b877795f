# stockroom/schemas/product.py
from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import Field

from stockroom.schemas.base import APIBase
from stockroom.schemas.warehouse import Localisation


# Quantity of a product held in one warehouse (id == warehouse id)
class Stock(APIBase):
    id: int
    name: str = ""
    quantity: int = 0
    localisation: Optional[Localisation] = None


# Who touched the product and when
class EditRecord(APIBase):
    warehouseman_id: Union[int, str] = Field(alias="warehousemanId")
    at: datetime


class Product(APIBase):
    id: Union[int, str]
    name: str
    type: str = ""
    barcode: str = ""
    price: float
    solde: Optional[float] = None
    supplier: str = ""
    image: str = ""
    stocks: List[Stock] = Field(default_factory=list)
    edited_by: List[EditRecord] = Field(default_factory=list, alias="editedBy")

    @property
    def display_price(self) -> float:
        """Discounted price when a lower solde is set, otherwise the base price."""
        if self.solde is not None and self.solde < self.price:
            return self.solde
        return self.price


# Aggregate stock status shown on lists and detail screens
class StockStatus(APIBase):
    total_stock: int = Field(alias="totalStock")
    status: str
    color: str


# Filter modal state; sort is ascending then reversed for "desc"
class ProductFilters(APIBase):
    name: str = ""
    type: str = ""
    price: str = ""
    supplier: str = ""
    sort_by: Literal["name", "price", "quantity"] = Field(default="name", alias="sortBy")
    sort_order: Literal["asc", "desc"] = Field(default="asc", alias="sortOrder")


# Product plus the values the list and detail screens render
class ProductView(APIBase):
    product: Product
    display_price: float = Field(alias="displayPrice")
    stock_status: StockStatus = Field(alias="stockStatus")
    message: Optional[str] = None
