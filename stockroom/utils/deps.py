# stockroom/utils/deps.py
from fastapi import Depends, HTTPException, Request, status

from stockroom.schemas.user import Warehouseman
from stockroom.services.auth import AuthSession
from stockroom.services.product_form import ProductFormService
from stockroom.services.scanner import ScannerRegistry
from stockroom.utils.api_client import InventoryApiClient

# Shared objects are built once in the app lifespan and kept on app.state


def get_api(request: Request) -> InventoryApiClient:
    return request.app.state.api


def get_auth_session(request: Request) -> AuthSession:
    return request.app.state.auth_session


def get_scanner_registry(request: Request) -> ScannerRegistry:
    return request.app.state.scanners


def get_product_form(request: Request) -> ProductFormService:
    return request.app.state.product_form


# Protected routes: the device's signed-in warehouseman or 401.
# There is one session per running app (see AuthSession).
def get_current_user(session: AuthSession = Depends(get_auth_session)) -> Warehouseman:
    if session.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session.user
