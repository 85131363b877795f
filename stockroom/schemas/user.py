# stockroom/schemas/user.py
from typing import Optional, Union

from pydantic import Field

from stockroom.schemas.base import APIBase


# Warehouse staff account as stored by the backend
class Warehouseman(APIBase):
    id: Union[int, str]
    name: str = ""
    secret_key: str = Field(alias="secretKey")
    city: Optional[str] = None
    dob: Optional[str] = None


# Login form; the secret key is required
class LoginRequest(APIBase):
    secret_key: str = Field(alias="secretKey", min_length=1)


# Outcome of a login attempt; failures are values, not exceptions
class AuthResult(APIBase):
    success: bool
    message: Optional[str] = None
    user: Optional[Warehouseman] = None


# Profile view; never exposes the secret key
class WarehousemanOut(APIBase):
    id: Union[int, str]
    name: str = ""
    city: Optional[str] = None
    dob: Optional[str] = None
