# stockroom/routes/scanner.py
from fastapi import APIRouter, Depends, HTTPException, status

from stockroom.schemas.scanner import ProductPrefill, ScanOutcome, ScanRequest
from stockroom.schemas.user import Warehouseman
from stockroom.services.scanner import ScannerRegistry
from stockroom.utils.deps import get_current_user, get_scanner_registry

router = APIRouter(prefix="/scanner", tags=["Scanner"])


# Barcode read by the camera
@router.post("/scan", response_model=ScanOutcome)
async def scan(
    payload: ScanRequest,
    scanners: ScannerRegistry = Depends(get_scanner_registry),
    current_user: Warehouseman = Depends(get_current_user),
):
    return await scanners.get(current_user.id).handle_scan(payload.barcode)


# "Scan again" after an unknown barcode
@router.post("/rescan")
def rescan(
    scanners: ScannerRegistry = Depends(get_scanner_registry),
    current_user: Warehouseman = Depends(get_current_user),
):
    session = scanners.get(current_user.id)
    session.rescan()
    return {"state": session.state}


# "Add product" after an unknown barcode: prefill for the create form
@router.post("/create", response_model=ProductPrefill)
def create_from_scan(
    scanners: ScannerRegistry = Depends(get_scanner_registry),
    current_user: Warehouseman = Depends(get_current_user),
):
    try:
        return scanners.get(current_user.id).create_product()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


# Scanner screen regained focus
@router.post("/focus")
def focus(
    scanners: ScannerRegistry = Depends(get_scanner_registry),
    current_user: Warehouseman = Depends(get_current_user),
):
    session = scanners.get(current_user.id)
    session.focus()
    return {"state": session.state}
