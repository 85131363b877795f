# stockroom/schemas/stats.py
from datetime import datetime
from typing import List, Union

from pydantic import Field

from stockroom.schemas.base import APIBase


# Entry of the recency rankings (most added / most removed)
class RankedProduct(APIBase):
    product_id: Union[int, str] = Field(alias="productId")
    product_name: str = Field(alias="productName")
    quantity: int
    last_edit_date: datetime = Field(alias="lastEditDate")


class CityStock(APIBase):
    city: str
    total_products: int = Field(alias="totalProducts")
    total_quantity: int = Field(alias="totalQuantity")


class Statistics(APIBase):
    total_products: int = Field(alias="totalProducts")
    total_cities: int = Field(alias="totalCities")
    out_of_stock: int = Field(alias="outOfStock")
    total_stock_value: float = Field(alias="totalStockValue")
    most_added_products: List[RankedProduct] = Field(alias="mostAddedProducts")
    most_removed_products: List[RankedProduct] = Field(alias="mostRemovedProducts")
    stocks_by_city: List[CityStock] = Field(alias="stocksByCity")
