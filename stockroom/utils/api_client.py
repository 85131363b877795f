# stockroom/utils/api_client.py
import logging
from typing import Any, List, Optional, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from stockroom.config import settings
from stockroom.schemas.product import Product
from stockroom.schemas.user import Warehouseman

logger = logging.getLogger(__name__)

ProductId = Union[int, str]

_products_adapter = TypeAdapter(List[Product])
_warehousemen_adapter = TypeAdapter(List[Warehouseman])

# Messages logged for the statuses the backend is known to return
STATUS_MESSAGES = {
    401: "Unauthorized access",
    404: "API endpoint not found",
    500: "Server error",
}


class ApiError(Exception):
    """Failed call to the inventory backend (transport error, non-2xx or bad payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InventoryApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.API_URL
        self.timeout = settings.API_TIMEOUT if timeout is None else timeout
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        # Injected in tests (httpx.MockTransport)
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                logger.error(STATUS_MESSAGES.get(status_code, f"API request failed with status {status_code}"))
                raise ApiError(f"{method} {path} failed with status {status_code}", status_code) from e
            except httpx.RequestError as e:
                logger.error(f"API request error on {method} {path}: {e}")
                raise ApiError(f"{method} {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON returned by {method} {path}")
            raise ApiError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _parse(adapter_or_model, data: Any, what: str):
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(data)
            return adapter_or_model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed {what} payload: {e.error_count()} error(s)")
            raise ApiError(f"Malformed {what} payload") from e

    # ---- products ----
    async def list_products(self) -> List[Product]:
        data = await self._request("GET", "/products")
        return self._parse(_products_adapter, data, "products")

    async def get_product(self, product_id: ProductId) -> Product:
        data = await self._request("GET", f"/products/{product_id}")
        return self._parse(Product, data, "product")

    async def find_products_by_barcode(self, barcode: str) -> List[Product]:
        data = await self._request("GET", "/products", params={"barcode": barcode})
        return self._parse(_products_adapter, data, "products")

    async def create_product(self, payload: dict) -> Product:
        data = await self._request("POST", "/products", json=payload)
        return self._parse(Product, data, "product")

    async def update_product(self, product_id: ProductId, changes: dict) -> Product:
        data = await self._request("PATCH", f"/products/{product_id}", json=changes)
        return self._parse(Product, data, "product")

    # ---- warehousemen ----
    async def find_warehousemen(self, secret_key: str) -> List[Warehouseman]:
        data = await self._request("GET", "/warehousemans", params={"secretKey": secret_key})
        return self._parse(_warehousemen_adapter, data, "warehousemans")
