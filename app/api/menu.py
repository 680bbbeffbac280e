"""Menu catalog API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.menu import MenuItem
from app.models.user import User, UserRole
from app.schemas.menu import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemPublic,
    MenuItemResponse,
)
from app.api.auth import require_role

router = APIRouter()


@router.get("", response_model=List[MenuItemPublic])
async def list_menu(
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Public menu: available items only"""
    query = select(MenuItem).where(MenuItem.is_available == True)

    if category:
        query = query.where(MenuItem.category == category)

    query = query.order_by(MenuItem.category, MenuItem.name_en)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/admin", response_model=List[MenuItemResponse])
async def list_menu_admin(
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """All menu items, including unavailable ones"""
    result = await db.execute(select(MenuItem).order_by(MenuItem.category, MenuItem.name_en))
    return result.scalars().all()


@router.post("/admin", response_model=MenuItemResponse, status_code=201)
async def create_menu_item(
    item_data: MenuItemCreate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Create a new menu item"""
    item = MenuItem(**item_data.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@router.put("/admin/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: int,
    item_data: MenuItemUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Update a menu item; prices already captured on orders are not affected"""
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    for field, value in item_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(item, field, value)

    await db.commit()
    await db.refresh(item)
    return item


@router.delete("/admin/{item_id}")
async def remove_menu_item(
    item_id: int,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: hide the item from the public menu"""
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    item.is_available = False
    await db.commit()
    return {"ok": True}
