"""Locked counters: daily order numbers and per-slot booking counts"""

from datetime import date, datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.errors import StoreError
from app.models.order import DailyOrderSequence

UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def local_now() -> datetime:
    """Current wall-clock time at the restaurant"""
    return datetime.now(ZoneInfo(settings.restaurant_timezone))


def format_order_no(now: datetime, seq: int) -> str:
    """YYYYMMDD-NNN; NNN is zero padded to three digits and grows past 999"""
    return f"{now.strftime('%Y%m%d')}-{seq:03d}"


async def bump_counter(
    db: AsyncSession,
    model,
    key: Dict[str, Any],
    column: str,
    limit: Optional[int] = None,
) -> Optional[int]:
    """Increment ``model.column`` for the row identified by ``key`` and return the new value.

    The row is created with value 1 when missing. When ``limit`` is given
    the increment only happens while the current value is below it, and
    None is returned for a full counter. The row stays write-locked until
    the caller's transaction ends, so concurrent callers are serialised.
    """
    if limit is not None and limit < 1:
        return None

    counter = getattr(model, column)
    insert = UPSERT_INSERTS.get(db.get_bind().dialect.name)

    if insert is not None:
        stmt = (
            insert(model)
            .values(**key, **{column: 1})
            .on_conflict_do_update(
                index_elements=list(key),
                set_={column: counter + 1},
                where=(counter < limit) if limit is not None else None,
            )
            .returning(counter)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    # Dialects without ON CONFLICT: lock the row, then update or create it
    result = await db.execute(select(model).filter_by(**key).with_for_update())
    row = result.scalar_one_or_none()
    if row is None:
        row = model(**key, **{column: 1})
        db.add(row)
        await db.flush()
        return 1

    current = getattr(row, column)
    if limit is not None and current >= limit:
        return None
    setattr(row, column, current + 1)
    await db.flush()
    return current + 1


async def next_sequence(db: AsyncSession, seq_date: date) -> int:
    """Next order number for ``seq_date``: 1, 2, 3 ... without gaps.

    Must run inside the transaction that inserts the numbered order; if
    that transaction rolls back, the number is released with it.
    """
    seq = await bump_counter(db, DailyOrderSequence, {"seq_date": seq_date}, "last_seq")
    if not seq:
        raise StoreError("Failed to generate daily sequence")
    return seq
