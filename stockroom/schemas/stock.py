# stockroom/schemas/stock.py
from typing import Literal

from pydantic import Field, field_validator

from stockroom.schemas.base import APIBase

# Direction of a stock adjustment
StockAction = Literal["add", "remove"]


# Raw form input of the adjustment panel; both values are typed text
class StockAdjustment(APIBase):
    quantity: str = ""
    warehouse_id: str = Field(default="", alias="warehouseId")

    # Numeric JSON values are read as the text the user would have typed
    @field_validator("quantity", "warehouse_id", mode="before")
    @classmethod
    def numbers_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value
