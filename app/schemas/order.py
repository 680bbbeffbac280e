"""Order schemas"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from app.models.order import OrderType


class OrderItemCreate(BaseModel):
    """Requested order line; the price always comes from the menu"""
    menu_item_id: int
    quantity: int = Field(ge=1, strict=True)


class OrderCreate(BaseModel):
    """Create order request"""
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=3)
    order_type: OrderType = OrderType.TAKEAWAY
    table_no: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemCreate] = Field(min_length=1)


class OrderCreated(BaseModel):
    """Create order response"""
    order_id: int
    order_no: str
    total_amount: float


class OrderStatusUpdate(BaseModel):
    """Admin status update request"""
    status: str


class CollectedVerify(BaseModel):
    """Customer confirmation that the order was picked up"""
    order_no: str = Field(min_length=3)
    customer_phone: str = Field(min_length=3)


class OrderTrackResponse(BaseModel):
    """Public tracking view"""
    order_no: str
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderItemResponse(BaseModel):
    """Order item in response"""
    id: int
    menu_item_id: int
    quantity: int
    unit_price: float
    line_total: float
    name_en: Optional[str] = None
    name_cn: Optional[str] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order snapshot including its items"""
    id: int
    order_no: str
    customer_name: str
    customer_phone: str
    order_type: str
    table_no: Optional[str]
    notes: Optional[str]
    status: str
    total_amount: float
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
