from pydantic import BaseModel, Field
from typing import Optional

# fits the Numeric(10, 2) price column
MAX_PRICE = 99999999.99


class CreateCatalogEntryRequest(BaseModel):
    vendor_id: int
    name: str
    price: float = Field(ge=0, le=MAX_PRICE, allow_inf_nan=False)
    description: Optional[str] = ""


class UpdateCatalogEntryRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, le=MAX_PRICE, allow_inf_nan=False)
    vendor_id: Optional[int] = None
    region: Optional[str] = None
