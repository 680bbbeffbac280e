"""Order models"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Text, Integer, Numeric
from sqlalchemy.orm import relationship

from app.database import Base


class OrderType(str, enum.Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"


class OrderStatus(str, enum.Enum):
    """Fulfilment states: pending -> ready -> collected"""
    PENDING = "pending"
    READY = "ready"
    COLLECTED = "collected"


class Order(Base):
    """Customer food orders"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_no = Column(String(20), unique=True, nullable=False, index=True)  # YYYYMMDD-NNN

    # Customer information
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=False)

    # Order details
    order_type = Column(String(20), nullable=False, default=OrderType.TAKEAWAY.value)
    table_no = Column(String(20))
    notes = Column(Text)

    # Status
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)

    # Pricing, written once by the creation transaction
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    """Priced line of an order; unit_price is a snapshot of the menu price"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    line_total = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")

    @property
    def name_en(self):
        return self.menu_item.name_en if self.menu_item else None

    @property
    def name_cn(self):
        return self.menu_item.name_cn if self.menu_item else None


class DailyOrderSequence(Base):
    """Last order number issued per calendar day"""
    __tablename__ = "daily_order_seq"

    seq_date = Column(Date, primary_key=True)
    last_seq = Column(Integer, nullable=False, default=0)
