"""Like Toggle - race-safe like/unlike shared by feeds, timelines and notices.

Invariants:
    - Delete first: the deleted row count says whether a like existed
    - Insert under the (account, target) unique constraint; a concurrent
      duplicate surfaces as DUPLICATE_REQUEST
    - The counter moves through a SQL `like_count = like_count +/- 1`, never
      read-modify-write
    - Does not commit; the calling service owns the transaction
"""

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.errors import ErrorKind, PlubError


async def toggle_like(
    db: AsyncSession,
    like_model,
    target_model,
    target_fk: str,
    account_id: int,
    target_id: int,
) -> tuple[bool, int]:
    """Flip the like of account_id on target_id. Returns (liked, new like_count)."""
    fk_column = getattr(like_model, target_fk)
    removed = await db.execute(
        delete(like_model)
        .where(like_model.account_id == account_id)
        .where(fk_column == target_id)
        .execution_options(synchronize_session="evaluate")
    )
    if removed.rowcount:
        delta = -1
    else:
        db.add(like_model(account_id=account_id, **{target_fk: target_id}))
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise PlubError(ErrorKind.DUPLICATE_REQUEST)
        delta = 1

    await db.execute(
        update(target_model)
        .where(target_model.id == target_id)
        .values(like_count=target_model.like_count + delta)
    )
    like_count = await db.scalar(
        select(target_model.like_count).where(target_model.id == target_id),
    )
    return delta > 0, like_count


async def liked_ids(
    db: AsyncSession, like_model, target_fk: str, account_id: int, target_ids: list[int],
) -> set[int]:
    """Subset of target_ids the account has liked."""
    if not target_ids:
        return set()
    fk_column = getattr(like_model, target_fk)
    result = await db.execute(
        select(fk_column)
        .where(like_model.account_id == account_id)
        .where(fk_column.in_(target_ids))
    )
    return set(result.scalars().all())
