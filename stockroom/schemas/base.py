# stockroom/schemas/base.py
from pydantic import BaseModel, ConfigDict


# Backend payloads are camelCase; accept either the alias or the field name
class APIBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
