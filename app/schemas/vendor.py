from pydantic import BaseModel
from typing import Optional


class CreateVendorRequest(BaseModel):
    name: str
    address: str
    region: str


class UpdateVendorRequest(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    region: Optional[str] = None
