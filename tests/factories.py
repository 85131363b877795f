"""
Test factories: product payload builders and an in-memory inventory backend.
"""

from typing import Any, Dict, List, Optional

from stockroom.schemas.product import Product
from stockroom.schemas.user import Warehouseman
from stockroom.utils.api_client import ApiError

CASABLANCA = {"city": "Casablanca", "latitude": 33.57, "longitude": -7.59}
RABAT = {"city": "Rabat", "latitude": 34.02, "longitude": -6.83}


def make_product(**overrides: Any) -> Product:
    data = {
        "id": 1,
        "name": "Laptop",
        "type": "Informatique",
        "barcode": "6111000000011",
        "price": 100,
        "supplier": "Dell",
        "image": "https://example.com/laptop.png",
        "stocks": [],
        "editedBy": [],
    }
    data.update(overrides)
    return Product.model_validate(data)


def stock(id: int, quantity: int, localisation: Optional[dict] = None, name: str = "") -> dict:
    entry = {"id": id, "name": name or f"Warehouse {id}", "quantity": quantity}
    if localisation is not None:
        entry["localisation"] = localisation
    return entry


class FakeInventoryApi:
    """In-memory stand-in for the REST backend, recording every call."""

    def __init__(self, products: Optional[List[Product]] = None, warehousemen: Optional[List[dict]] = None):
        self.products: Dict[Any, Product] = {p.id: p for p in (products or [])}
        self.warehousemen = [Warehouseman.model_validate(w) for w in (warehousemen or [])]
        self.calls: List[tuple] = []
        self.fail_with: Optional[ApiError] = None
        # Return every warehouseman regardless of the secretKey filter
        self.ignore_filter = False

    def _check(self, *call):
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_products(self) -> List[Product]:
        self._check("list_products")
        return list(self.products.values())

    def _key(self, product_id):
        # Path parameters arrive as text
        for key in self.products:
            if str(key) == str(product_id):
                return key
        raise ApiError(f"GET /products/{product_id} failed with status 404", 404)

    async def get_product(self, product_id) -> Product:
        self._check("get_product", product_id)
        return self.products[self._key(product_id)]

    async def find_products_by_barcode(self, barcode: str) -> List[Product]:
        self._check("find_products_by_barcode", barcode)
        return [p for p in self.products.values() if p.barcode == barcode]

    async def create_product(self, payload: dict) -> Product:
        self._check("create_product", payload)
        product = Product.model_validate({**payload, "id": len(self.products) + 100})
        self.products[product.id] = product
        return product

    async def update_product(self, product_id, changes: dict) -> Product:
        self._check("update_product", product_id, changes)
        key = self._key(product_id)
        current = self.products[key].model_dump(mode="json", by_alias=True)
        product = Product.model_validate({**current, **changes})
        self.products[key] = product
        return product

    async def find_warehousemen(self, secret_key: str) -> List[Warehouseman]:
        self._check("find_warehousemen", secret_key)
        if self.ignore_filter:
            return list(self.warehousemen)
        return [w for w in self.warehousemen if w.secret_key == secret_key]
