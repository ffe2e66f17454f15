from pydantic import BaseModel
from typing import List, Optional


class LineItemIn(BaseModel):
    catalog_entry_id: int
    # range is checked by the order service so every bad line is reported together
    quantity: int


class CreateOrderRequest(BaseModel):
    line_items: List[LineItemIn]
    payment_method: Optional[str] = None


class PaymentMethodRequest(BaseModel):
    payment_method: str
