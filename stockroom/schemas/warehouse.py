# stockroom/schemas/warehouse.py
from pydantic import BaseModel


# Physical location of a warehouse or of a stock entry
class Localisation(BaseModel):
    city: str
    latitude: float = 0.0
    longitude: float = 0.0


# Reference warehouse used to resolve stock entries on the create form
class Warehouse(BaseModel):
    id: int
    name: str
    localisation: Localisation
