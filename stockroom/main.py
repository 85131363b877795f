# stockroom/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockroom.config import settings
from stockroom.database import init_db
from stockroom.services.auth import AuthService, AuthSession
from stockroom.services.product_form import ProductFormService
from stockroom.services.scanner import ScannerRegistry
from stockroom.utils.api_client import InventoryApiClient
from stockroom.utils.storage import DeviceStorage

load_dotenv()

# Routers
from stockroom.routes.auth import router as auth_router
from stockroom.routes.products import router as products_router
from stockroom.routes.stock import router as stock_router
from stockroom.routes.scanner import router as scanner_router
from stockroom.routes.stats import router as stats_router
from stockroom.routes.reports import router as reports_router
from stockroom.routes.warehouse import router as warehouse_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    init_db()

    api = InventoryApiClient()
    auth_session = AuthSession(AuthService(api, DeviceStorage()))
    # Restore the persisted session before serving
    auth_session.startup()

    app.state.api = api
    app.state.auth_session = auth_session
    app.state.scanners = ScannerRegistry(api)
    app.state.product_form = ProductFormService(api, settings.WAREHOUSES, settings.PRODUCT_TYPES)

    logger.info(f"Inventory backend at {settings.API_URL}")
    yield


app = FastAPI(title="Stockroom API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(stock_router)
app.include_router(scanner_router)
app.include_router(stats_router)
app.include_router(reports_router)
app.include_router(warehouse_router)


@app.get("/")
def read_root():
    return {"message": "Stockroom API is running"}
