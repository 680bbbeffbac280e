"""Menu catalog model"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Numeric

from app.database import Base


class MenuItem(Base):
    """Menu items"""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_cn = Column(String(100), nullable=False)
    name_en = Column(String(150), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=False, default="Main Dishes")
    is_available = Column(Boolean, nullable=False, default=True)  # False hides it from the public menu
    image_url = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
