"""
Page-number pagination helpers for list endpoints.
"""
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def page_offset(page: int, page_size: int) -> int:
    """Row offset of a 1-based page."""
    return (page - 1) * page_size


def page_count(total: int, page_size: int) -> int:
    return (total + page_size - 1) // page_size if page_size > 0 else 0


async def count_rows(db: AsyncSession, stmt: Select) -> int:
    """Exact row count of ``stmt`` before ordering and paging."""
    count_stmt = select(func.count()).select_from(stmt.subquery())
    total_result = await db.execute(count_stmt)
    return total_result.scalar() or 0
