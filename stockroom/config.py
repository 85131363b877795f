# stockroom/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, List
from pathlib import Path

from stockroom.schemas.warehouse import Warehouse

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

# Warehouses known to the create-product form (override with WAREHOUSES='[...]')
DEFAULT_WAREHOUSES = [
    {
        "id": 1999,
        "name": "Gueliz B2",
        "localisation": {"city": "Marrakesh", "latitude": 31.628674, "longitude": -7.992047},
    },
    {
        "id": 2991,
        "name": "Lazari H2",
        "localisation": {"city": "Oujda", "latitude": 34.689404, "longitude": -1.912823},
    },
]

DEFAULT_PRODUCT_TYPES = ["Informatique", "Accessoires", "Électronique", "Autre"]


class Settings(BaseSettings):
    # Remote REST backend
    API_URL: str = "http://localhost:3000"
    API_TIMEOUT: float = 10.0

    # Device-local storage (persisted session)
    DATABASE_URL: str = "sqlite:///./stockroom_device.db"
    SESSION_STORAGE_KEY: str = "user"

    # Scanner: delay before the "scanned" flag is cleared after navigation
    SCANNER_RESET_DELAY: float = 0.5

    LOW_STOCK_THRESHOLD: int = 10
    CURRENCY: str = "DH"

    WAREHOUSES: List[Warehouse] = [Warehouse.model_validate(w) for w in DEFAULT_WAREHOUSES]
    PRODUCT_TYPES: List[str] = DEFAULT_PRODUCT_TYPES

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)


settings = Settings()
