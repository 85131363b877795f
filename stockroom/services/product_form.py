# stockroom/services/product_form.py
import logging
import math
from typing import Dict, List, Optional, Sequence

from stockroom.config import settings
from stockroom.schemas.product import Product
from stockroom.schemas.products import (
    FormattedProduct,
    FormattedStock,
    ProductFormErrors,
    ProductFormState,
)
from stockroom.schemas.warehouse import Warehouse
from stockroom.services.stock import parse_int
from stockroom.utils.api_client import InventoryApiClient

logger = logging.getLogger(__name__)


def _parse_float(text: Optional[str]) -> Optional[float]:
    # "nan" and "inf" parse but are not prices
    try:
        value = float((text or "").strip().replace(",", "."))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _price_error(text: str) -> Optional[str]:
    value = _parse_float(text)
    if value is None:
        return "Le prix doit être un nombre"
    if value < 0:
        return "Le prix doit être positif"
    return None


class ProductFormService:
    """Create-product form: validation, payload formatting and submission."""

    def __init__(
        self,
        api: InventoryApiClient,
        warehouses: Optional[Sequence[Warehouse]] = None,
        product_types: Optional[List[str]] = None,
    ):
        self.api = api
        self.warehouses: Dict[int, Warehouse] = {
            w.id: w for w in (settings.WAREHOUSES if warehouses is None else warehouses)
        }
        self.product_types = settings.PRODUCT_TYPES if product_types is None else product_types

    def validate_form(self, form: ProductFormState) -> ProductFormErrors:
        errors: ProductFormErrors = {}

        if not form.name:
            errors["name"] = "Le nom est requis"
        if not form.barcode:
            errors["barcode"] = "Le code-barres est requis"
        if not form.price:
            errors["price"] = "Le prix est requis"
        elif _price_error(form.price):
            errors["price"] = _price_error(form.price)
        if form.solde and _price_error(form.solde):
            errors["solde"] = _price_error(form.solde)
        if not form.supplier:
            errors["supplier"] = "Le fournisseur est requis"

        for index, stock in enumerate(form.stocks):
            if stock.quantity and not stock.warehouse_id:
                errors[f"stock-{index}"] = "Sélectionnez un entrepôt"
            elif stock.warehouse_id and stock.warehouse_id not in self.warehouses:
                errors[f"stock-{index}"] = "Entrepôt inconnu"
            elif stock.quantity and parse_int(stock.quantity) is None:
                errors[f"stock-{index}"] = "La quantité doit être un entier"

        return errors

    def format_product_data(self, form: ProductFormState) -> FormattedProduct:
        """Numbers parsed and stock rows resolved against the warehouse table."""
        stocks = []
        for stock in form.stocks:
            if not (stock.warehouse_id and stock.quantity):
                continue
            warehouse = self.warehouses[stock.warehouse_id]
            stocks.append(FormattedStock(
                id=warehouse.id,
                name=warehouse.name,
                quantity=parse_int(stock.quantity),
                localisation=warehouse.localisation,
            ))

        return FormattedProduct(
            name=form.name,
            type=form.type,
            barcode=form.barcode,
            price=_parse_float(form.price),
            solde=_parse_float(form.solde) if form.solde else None,
            supplier=form.supplier,
            image=form.image,
            stocks=stocks,
            edited_by=[],
        )

    async def create_product(self, form: ProductFormState) -> Product:
        payload = self.format_product_data(form)
        product = await self.api.create_product(
            payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
        logger.info(f"Created product {product.id} ({product.barcode})")
        return product
