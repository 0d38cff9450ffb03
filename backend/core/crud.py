"""Small helpers shared by the page routers."""

import logging
from typing import Any, Optional, Type

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def get_or_404(
    db: AsyncSession,
    model: Type[Any],
    obj_id: Any,
    label: str,
    *,
    options: tuple = (),
    pk: str = "id",
) -> Any:
    stmt = select(model).where(getattr(model, pk) == obj_id)
    if options:
        stmt = stmt.options(*options).execution_options(populate_existing=True)
    res = await db.execute(stmt)
    obj = res.scalar_one_or_none()
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


def apply_update(obj: Any, payload: BaseModel, *, column_map: Optional[dict] = None) -> dict:
    """Copy only the fields the caller sent (PATCH semantics)."""
    data = payload.model_dump(exclude_unset=True)
    for key, value in data.items():
        setattr(obj, (column_map or {}).get(key, key), value)
    return data


async def commit_or_fail(db: AsyncSession, page: str, failure: str, *, conflict: Optional[str] = None) -> None:
    """
    Commit the request's unit of work.

    Store errors roll back and surface as a 400 with the page's failure message
    (409 with `conflict` for integrity violations when given).
    """
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.exception("[%s] %s", page, failure)
        if conflict:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=conflict)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=failure)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("[%s] %s", page, failure)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=failure)


async def delete_or_fail(db: AsyncSession, obj: Any, page: str, label: str) -> dict:
    await db.delete(obj)
    await commit_or_fail(db, page, f"Failed to delete {label.lower()}")
    logger.info("[%s] deleted %s", page, label.lower())
    return {"message": f"{label} deleted successfully"}
