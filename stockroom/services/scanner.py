# stockroom/services/scanner.py
import asyncio
import logging
from typing import Dict, Optional, Union

from stockroom.config import settings
from stockroom.schemas.product import Product
from stockroom.schemas.scanner import ProductPrefill, ScanOutcome
from stockroom.utils.api_client import ApiError, InventoryApiClient

logger = logging.getLogger(__name__)

LOOKUP_FAILED_MESSAGE = "Failed to check barcode in database"
NOT_FOUND_MESSAGE = "Would you like to add this product?"


async def check_barcode_exists(api: InventoryApiClient, barcode: str) -> Optional[Product]:
    """First product carrying exactly this barcode, or None."""
    matches = await api.find_products_by_barcode(barcode)
    return matches[0] if matches else None


class ScannerSession:
    """
    Scan flow of one scanner screen.

    idle -> scanning -> checking -> found | not_found. While a barcode is
    scanned or being checked, further scan events are dropped so a frame
    read several times triggers a single lookup.
    """

    def __init__(self, api: InventoryApiClient, reset_delay: Optional[float] = None):
        self.api = api
        self.reset_delay = settings.SCANNER_RESET_DELAY if reset_delay is None else reset_delay
        self.state = "idle"
        self.scanned = False
        self.checking = False
        self.barcode: Optional[str] = None
        self._reset_handle: Optional[asyncio.TimerHandle] = None

    def _outcome(self, action: str, **kwargs) -> ScanOutcome:
        return ScanOutcome(action=action, state=self.state, barcode=self.barcode, **kwargs)

    async def handle_scan(self, barcode: str) -> ScanOutcome:
        if self.scanned or self.checking:
            return ScanOutcome(action="ignored", state=self.state, barcode=barcode)

        self.scanned = True
        self.barcode = barcode
        self.state = "scanning"

        self.checking = True
        self.state = "checking"
        try:
            product = await check_barcode_exists(self.api, barcode)
        except ApiError as e:
            logger.error(f"Error checking barcode {barcode}: {e}")
            self.reset()
            return ScanOutcome(action="error", state=self.state, barcode=barcode, message=LOOKUP_FAILED_MESSAGE)
        finally:
            self.checking = False

        if product is not None:
            self.state = "found"
            self._schedule_reset()
            return self._outcome("navigate", product=product)

        self.state = "not_found"
        return self._outcome("prompt_create", message=NOT_FOUND_MESSAGE)

    def rescan(self) -> None:
        self.reset()

    def create_product(self) -> ProductPrefill:
        if self.state != "not_found" or self.barcode is None:
            raise ValueError("No unknown barcode to create a product from")
        return ProductPrefill(scanned_barcode=self.barcode)

    def focus(self) -> None:
        # Screen regained focus: start from a clean scanner
        self.reset()

    def reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
        self.state = "idle"
        self.scanned = False
        self.checking = False
        self.barcode = None

    def _schedule_reset(self) -> None:
        loop = asyncio.get_running_loop()
        self._reset_handle = loop.call_later(self.reset_delay, self._delayed_reset)

    def _delayed_reset(self) -> None:
        self._reset_handle = None
        if self.state == "found":
            self.reset()


class ScannerRegistry:
    """
    Scanner sessions keyed by warehouseman.

    Only the device's current user is active; the entry of a previous user
    is discarded on logout or when someone else signs in.
    """

    def __init__(self, api: InventoryApiClient, reset_delay: Optional[float] = None):
        self.api = api
        self.reset_delay = reset_delay
        self._sessions: Dict[Union[int, str], ScannerSession] = {}

    def get(self, user_id: Union[int, str]) -> ScannerSession:
        if user_id not in self._sessions:
            self._sessions[user_id] = ScannerSession(self.api, self.reset_delay)
        return self._sessions[user_id]

    def discard(self, user_id: Union[int, str]) -> None:
        session = self._sessions.pop(user_id, None)
        if session is not None:
            session.reset()
