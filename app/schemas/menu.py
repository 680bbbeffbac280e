"""Menu schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class MenuItemCreate(BaseModel):
    """Create menu item request"""
    name_en: str = Field(min_length=1)
    name_cn: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: str = "Main Dishes"
    image_url: Optional[str] = None
    is_available: bool = True


class MenuItemUpdate(BaseModel):
    """Update menu item request"""
    name_en: Optional[str] = None
    name_cn: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None


class MenuItemPublic(BaseModel):
    """Menu item as shown to customers"""
    id: int
    name_en: str
    name_cn: str
    price: float
    category: str
    image_url: Optional[str]

    class Config:
        from_attributes = True


class MenuItemResponse(MenuItemPublic):
    """Menu item as shown to staff"""
    is_available: bool
    created_at: datetime
    updated_at: datetime
