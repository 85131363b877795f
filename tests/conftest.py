import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stockroom.database import init_db
from stockroom.schemas.user import Warehouseman
from stockroom.utils.storage import DeviceStorage


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def storage(engine) -> DeviceStorage:
    return DeviceStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture()
def warehouseman() -> Warehouseman:
    return Warehouseman.model_validate(
        {"id": 7, "name": "Youssef", "secretKey": "k-123", "city": "Oujda", "dob": "1990-04-12"}
    )
