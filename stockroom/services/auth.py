# stockroom/services/auth.py
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from stockroom.config import settings
from stockroom.schemas.user import AuthResult, LoginRequest, Warehouseman
from stockroom.utils.api_client import ApiError, InventoryApiClient
from stockroom.utils.storage import DeviceStorage

logger = logging.getLogger(__name__)


class AuthService:
    """Secret-key login against the backend's warehouseman records."""

    def __init__(self, api: InventoryApiClient, storage: DeviceStorage, storage_key: Optional[str] = None):
        self.api = api
        self.storage = storage
        self.storage_key = storage_key or settings.SESSION_STORAGE_KEY

    async def login(self, secret_key: str) -> AuthResult:
        # Empty key: the ValidationError goes back to the form
        payload = LoginRequest(secret_key=secret_key)

        try:
            users = await self.api.find_warehousemen(payload.secret_key)
        except ApiError as e:
            logger.error(f"Login request failed: {e}")
            return AuthResult(success=False, message="Authentication failed")

        if not users:
            return AuthResult(success=False, message="User not found")

        user = users[0]
        # The backend filter is not trusted on its own
        if user.secret_key != payload.secret_key:
            return AuthResult(success=False, message="Invalid credentials")

        try:
            self.storage.set_item(self.storage_key, user.model_dump_json(by_alias=True))
        except SQLAlchemyError as e:
            logger.error(f"Could not persist session: {e}")
            return AuthResult(success=False, message="Authentication failed")

        logger.info(f"Warehouseman {user.id} signed in")
        return AuthResult(success=True, user=user)

    def is_authenticated(self) -> bool:
        try:
            return bool(self.storage.get_item(self.storage_key))
        except SQLAlchemyError as e:
            logger.error(f"Authentication check failed: {e}")
            return False

    def get_stored_user(self) -> Optional[Warehouseman]:
        try:
            raw = self.storage.get_item(self.storage_key)
        except SQLAlchemyError as e:
            logger.error(f"Could not read stored session: {e}")
            return None
        if not raw:
            return None
        try:
            return Warehouseman.model_validate_json(raw)
        except ValidationError:
            logger.warning("Stored session is unreadable, ignoring it")
            return None

    def logout(self) -> None:
        self.storage.remove_item(self.storage_key)


class AuthSession:
    """
    The signed-in warehouseman, held explicitly for the whole app.

    One instance serves one device: the service stands in for a single
    handset, so there is exactly one signed-in user at a time and every
    request is made as that user. A new login replaces the previous one.
    ``startup`` restores the persisted session, ``teardown`` clears it both
    in memory and in device storage.
    """

    def __init__(self, auth: AuthService):
        self.auth = auth
        self.user: Optional[Warehouseman] = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def startup(self) -> None:
        self.user = self.auth.get_stored_user()
        self.loading = False
        if self.user is not None:
            logger.info(f"Restored session of warehouseman {self.user.id}")

    async def login(self, secret_key: str) -> AuthResult:
        result = await self.auth.login(secret_key)
        if result.success:
            self.user = result.user
        return result

    def teardown(self) -> None:
        self.auth.logout()
        self.user = None

    def logout(self) -> None:
        self.teardown()
