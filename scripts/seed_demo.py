#!/usr/bin/env python3
"""
Seed script to create the demo staff accounts and menu
"""

import asyncio
from decimal import Decimal

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from app.database import SessionLocal, engine, Base
    from app.models.menu import MenuItem
    from app.models.user import User, UserRole

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo admin already exists
        from sqlalchemy import select
        result = await db.execute(
            select(User).where(User.username == "xiangyee_admin")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating staff users...")

        db.add(User(
            username="xiangyee_admin",
            hashed_password=pwd_context.hash("admin123"),
            role=UserRole.ADMIN,
            is_active=True,
        ))
        db.add(User(
            username="counter",
            hashed_password=pwd_context.hash("counter123"),
            role=UserRole.STAFF,
            is_active=True,
        ))

        print("Creating menu items...")

        menu_items = [
            # Main Dishes
            {"name_en": "Hainanese Chicken Rice", "name_cn": "海南鸡饭", "price": "5.00", "category": "Main Dishes"},
            {"name_en": "Char Siew Rice", "name_cn": "叉烧饭", "price": "5.50", "category": "Main Dishes"},
            {"name_en": "Roast Duck Rice", "name_cn": "烧鸭饭", "price": "6.50", "category": "Main Dishes"},
            {"name_en": "Wanton Noodles", "name_cn": "云吞面", "price": "5.00", "category": "Noodles"},
            {"name_en": "Beef Hor Fun", "name_cn": "干炒牛河", "price": "7.50", "category": "Noodles"},
            {"name_en": "Fried Rice", "name_cn": "炒饭", "price": "6.00", "category": "Main Dishes"},

            # Sides
            {"name_en": "Stir-fried Kailan", "name_cn": "炒芥兰", "price": "8.00", "category": "Sides"},
            {"name_en": "Fried Wanton", "name_cn": "炸云吞", "price": "4.50", "category": "Sides"},

            # Drinks
            {"name_en": "Iced Lemon Tea", "name_cn": "冰柠檬茶", "price": "3.50", "category": "Drinks"},
            {"name_en": "Barley Water", "name_cn": "薏米水", "price": "2.50", "category": "Drinks"},
            {"name_en": "Kopi", "name_cn": "咖啡", "price": "1.80", "category": "Drinks"},
        ]

        for item_data in menu_items:
            db.add(MenuItem(
                name_en=item_data["name_en"],
                name_cn=item_data["name_cn"],
                price=Decimal(item_data["price"]),
                category=item_data["category"],
                is_available=True,
            ))

        await db.commit()

        print(f"""
Demo data created successfully!

Users:
  Admin:
    Username: xiangyee_admin
    Password: admin123

  Counter staff:
    Username: counter
    Password: counter123

Menu: {len(menu_items)} items created
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
