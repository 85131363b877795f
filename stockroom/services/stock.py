# stockroom/services/stock.py
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from stockroom.config import settings
from stockroom.schemas.product import Product, ProductView, StockStatus
from stockroom.schemas.stock import StockAction, StockAdjustment
from stockroom.schemas.user import Warehouseman
from stockroom.services.filters import total_quantity
from stockroom.utils.api_client import InventoryApiClient, ProductId

logger = logging.getLogger(__name__)

IN_STOCK = "En stock"
LOW_STOCK = "Stock faible"
OUT_OF_STOCK = "Rupture de stock"

IN_STOCK_COLOR = "bg-green-100 text-green-800"
LOW_STOCK_COLOR = "bg-yellow-100 text-yellow-800"
OUT_OF_STOCK_COLOR = "bg-red-100 text-red-800"

MISSING_FIELDS_ERROR = "Please select warehouse and enter quantity"
INVALID_QUANTITY_ERROR = "Please enter valid quantity"
INVALID_WAREHOUSE_ERROR = "Please select a valid warehouse"

_INTEGER = re.compile(r"[+-]?\d+")


class StockNotFoundError(Exception):
    """The product holds no stock entry for the requested warehouse."""

    def __init__(self, product_id: ProductId, warehouse_id: int):
        super().__init__(f"Product {product_id} has no stock in warehouse {warehouse_id}")
        self.product_id = product_id
        self.warehouse_id = warehouse_id


def parse_int(text: str) -> Optional[int]:
    text = (text or "").strip()
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def calculate_total_stock(product: Product) -> int:
    return total_quantity(product)


def calculate_stock_status(product: Product, threshold: Optional[int] = None) -> StockStatus:
    """Status label for the summed stock: above threshold, 1..threshold, or none."""
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    total = calculate_total_stock(product)

    if total > threshold:
        status, color = IN_STOCK, IN_STOCK_COLOR
    elif total > 0:
        status, color = LOW_STOCK, LOW_STOCK_COLOR
    else:
        status, color = OUT_OF_STOCK, OUT_OF_STOCK_COLOR
    return StockStatus(total_stock=total, status=status, color=color)


def product_view(product: Product, message: Optional[str] = None) -> ProductView:
    return ProductView(
        product=product,
        display_price=product.display_price,
        stock_status=calculate_stock_status(product),
        message=message,
    )


def validate_stock_adjustment(adjustment: StockAdjustment) -> Optional[str]:
    """Return an error message for an incomplete or non-numeric adjustment, else None."""
    if not adjustment.quantity.strip() or not adjustment.warehouse_id.strip():
        return MISSING_FIELDS_ERROR
    if parse_int(adjustment.quantity) is None:
        return INVALID_QUANTITY_ERROR
    if parse_int(adjustment.warehouse_id) is None:
        return INVALID_WAREHOUSE_ERROR
    return None


async def get_product_details(api: InventoryApiClient, product_id: ProductId) -> Product:
    return await api.get_product(product_id)


async def update_product_stock(
    api: InventoryApiClient,
    product: Product,
    adjustment: StockAdjustment,
    action: StockAction,
    editor: Optional[Warehouseman] = None,
) -> Product:
    """
    Apply the delta to the selected warehouse and PATCH the whole stocks array.

    Removal is not floored: removing more than is held leaves a negative
    quantity. The product returned by the server is the new source of truth.
    When an editor is given, an edit record is appended in the same call.
    """
    delta = parse_int(adjustment.quantity)
    warehouse_id = parse_int(adjustment.warehouse_id)
    if delta is None or warehouse_id is None:
        raise ValueError(validate_stock_adjustment(adjustment) or INVALID_QUANTITY_ERROR)

    if not any(stock.id == warehouse_id for stock in product.stocks):
        raise StockNotFoundError(product.id, warehouse_id)

    stocks = []
    for stock in product.stocks:
        if stock.id == warehouse_id:
            quantity = stock.quantity + delta if action == "add" else stock.quantity - delta
            stock = stock.model_copy(update={"quantity": quantity})
        stocks.append(stock.model_dump(mode="json", by_alias=True, exclude_none=True))

    changes = {"stocks": stocks}
    if editor is not None:
        edited_by = [r.model_dump(mode="json", by_alias=True) for r in product.edited_by]
        edited_by.append({
            "warehousemanId": editor.id,
            "at": datetime.now(timezone.utc).isoformat(),
        })
        changes["editedBy"] = edited_by

    logger.info(f"Stock {action} of {delta} on product {product.id}, warehouse {warehouse_id}")
    return await api.update_product(product.id, changes)


class ProductDetail:
    """State of the product detail screen: the product and the pending adjustment."""

    def __init__(
        self,
        api: InventoryApiClient,
        product: Product,
        editor: Optional[Warehouseman] = None,
        adjustment: Optional[StockAdjustment] = None,
    ):
        self.api = api
        self.product = product
        self.editor = editor
        self.adjustment = adjustment or StockAdjustment()
        self.message: Optional[str] = None

    @property
    def stock_status(self) -> StockStatus:
        return calculate_stock_status(self.product)

    async def apply(self, action: StockAction) -> bool:
        """
        Validate and submit the pending adjustment.

        Returns False with ``message`` set when validation fails. API errors
        propagate and leave the product and the adjustment untouched.
        """
        error = validate_stock_adjustment(self.adjustment)
        if error:
            self.message = error
            return False

        self.product = await update_product_stock(
            self.api, self.product, self.adjustment, action, editor=self.editor
        )
        self.adjustment = StockAdjustment()
        self.message = f"Stock {'added' if action == 'add' else 'removed'}"
        return True

    def view(self) -> ProductView:
        return product_view(self.product, self.message)
