# stockroom/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, ValidationError

from stockroom.schemas.base import APIBase
from stockroom.schemas.user import Warehouseman, WarehousemanOut
from stockroom.services.auth import AuthSession
from stockroom.services.scanner import ScannerRegistry
from stockroom.utils.deps import get_auth_session, get_current_user, get_scanner_registry

router = APIRouter(tags=["Auth"])


# Raw login form; emptiness is checked by the auth service
class LoginForm(APIBase):
    secret_key: str = Field(default="", alias="secretKey")


# Sign in with a warehouseman secret key
@router.post("/login", response_model=WarehousemanOut)
async def login(
    payload: LoginForm,
    session: AuthSession = Depends(get_auth_session),
    scanners: ScannerRegistry = Depends(get_scanner_registry),
):
    previous = session.user
    try:
        result = await session.login(payload.secret_key)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"secretKey": "secretKey is required"},
        )

    if not result.success:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.message)

    # The device changed hands: drop the previous user's scanner state
    if previous is not None and previous.id != result.user.id:
        scanners.discard(previous.id)
    return result.user


# Clear the persisted session
@router.post("/logout")
def logout(
    current_user: Warehouseman = Depends(get_current_user),
    session: AuthSession = Depends(get_auth_session),
    scanners: ScannerRegistry = Depends(get_scanner_registry),
):
    scanners.discard(current_user.id)
    session.logout()
    return {"detail": "Logged out"}


# Profile of the signed-in warehouseman
@router.get("/me", response_model=WarehousemanOut)
def me(current_user: Warehouseman = Depends(get_current_user)):
    return current_user
