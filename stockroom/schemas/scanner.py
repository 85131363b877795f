# stockroom/schemas/scanner.py
from typing import Literal, Optional

from pydantic import Field

from stockroom.schemas.base import APIBase
from stockroom.schemas.product import Product

ScanState = Literal["idle", "scanning", "checking", "found", "not_found"]
ScanAction = Literal["ignored", "navigate", "prompt_create", "error"]


class ScanRequest(APIBase):
    barcode: str = Field(min_length=1)


# What the scanner screen should do after a scan event
class ScanOutcome(APIBase):
    action: ScanAction
    state: ScanState
    barcode: Optional[str] = None
    product: Optional[Product] = None
    message: Optional[str] = None


# Prefill handed to the create-product form
class ProductPrefill(APIBase):
    scanned_barcode: str = Field(alias="scannedBarcode")
