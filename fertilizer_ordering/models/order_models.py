# fertilizer_ordering/models/order_models.py
from pydantic import BaseModel, Field
from typing import Literal, Optional

OrderStatus = Literal["pending", "approved", "declined"]

ORDER_STATUSES = ("pending", "approved", "declined")


class SubmitOrderRequest(BaseModel):
    fertilizerId: str = Field(..., min_length=1)


class ReviewOrderRequest(BaseModel):
    remarks: Optional[str] = ""


class OrderListQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    status: Optional[OrderStatus] = None
