"""Menu catalog lookups used while pricing orders"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.menu import MenuItem


async def get_price_if_available(db: AsyncSession, menu_item_id: int) -> Optional[Decimal]:
    """Current price of a menu item, or None when it is unknown or not available"""
    result = await db.execute(
        select(MenuItem.price).where(
            MenuItem.id == menu_item_id,
            MenuItem.is_available == True,
        )
    )
    price = result.scalar_one_or_none()
    return Decimal(str(price)) if price is not None else None
