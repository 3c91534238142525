"""
Reward / discipline management API routes.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ward_admin.core.database.engine import get_db
from ward_admin.core.pagination import count_rows, page_count, page_offset
from ward_admin.core.storage import BucketUploader, UploadResponse, get_rewards_storage, read_upload
from ward_admin.features.permissions.dependencies import (
    ensure_can_modify,
    require_any_module_action,
    require_module_action,
)
from ward_admin.features.rewards.models import Reward
from ward_admin.features.rewards.schemas import (
    RewardBulkCreate,
    RewardCreate,
    RewardListResponse,
    RewardResponse,
    RewardUpdate,
)
from ward_admin.features.users.models import User
from ward_admin.utils import get_logger


MODULE_KEY = "rewards"

log = get_logger(__name__)
router = APIRouter()


async def _get_or_404(db: AsyncSession, reward_id: int) -> Reward:
    reward = await db.scalar(select(Reward).where(Reward.id == reward_id))
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")
    return reward


@router.get("", response_model=RewardListResponse)
async def list_rewards(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    """List rewards, most recently entered first, one page at a time."""
    stmt = select(Reward)

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Reward.dv.ilike(pattern),
                Reward.htkt.ilike(pattern),
                Reward.ldkt.ilike(pattern),
                Reward.qdkt.ilike(pattern),
            )
        )

    total = await count_rows(db, stmt)

    stmt = (
        stmt.order_by(Reward.created_at.desc(), Reward.id.desc())
        .offset(page_offset(page, page_size))
        .limit(page_size)
    )
    result = await db.execute(stmt)

    return RewardListResponse(
        items=[RewardResponse.model_validate(r) for r in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.get("/levels", response_model=list[str])
async def list_reward_levels(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    """Distinct non-empty granting levels, for form autocomplete."""
    result = await db.execute(select(Reward.capkt).distinct().order_by(Reward.capkt))
    return [capkt for capkt in result.scalars().all() if capkt]


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_attachment(
    file: UploadFile = File(...),
    storage: BucketUploader = Depends(get_rewards_storage),
    current_user: User = Depends(require_any_module_action(MODULE_KEY, ["add", "edit"]))
):
    """Upload a scanned decision and return its public URL for ``image``."""
    content = await read_upload(file)
    url = await storage.upload(file.filename or "attachment", content)
    return UploadResponse(url=url)


@router.post("/bulk", response_model=list[RewardResponse], status_code=201)
async def bulk_create_rewards(
    bulk: RewardBulkCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "add"))
):
    """Insert many rewards in one transaction, all owned by the caller."""
    rewards = [Reward(**item.model_dump(), created_by=current_user.id) for item in bulk.items]
    db.add_all(rewards)
    await db.commit()
    for reward in rewards:
        await db.refresh(reward)

    log.info("User %s bulk created %d rewards", current_user.id, len(rewards))
    return rewards


@router.get("/{reward_id}", response_model=RewardResponse)
async def get_reward(
    reward_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    return await _get_or_404(db, reward_id)


@router.post("", response_model=RewardResponse, status_code=201)
async def create_reward(
    reward_data: RewardCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "add"))
):
    """Create a reward owned by the caller."""
    reward = Reward(**reward_data.model_dump(), created_by=current_user.id)
    db.add(reward)
    await db.commit()
    await db.refresh(reward)
    return reward


@router.put("/{reward_id}", response_model=RewardResponse)
async def update_reward(
    reward_id: int,
    reward_update: RewardUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "edit"))
):
    """Update a reward; non-admins may only touch their own."""
    reward = await _get_or_404(db, reward_id)
    ensure_can_modify(reward, current_user)

    for key, value in reward_update.model_dump(exclude_unset=True).items():
        setattr(reward, key, value)

    await db.commit()
    await db.refresh(reward)
    return reward


@router.delete("/{reward_id}", status_code=204)
async def delete_reward(
    reward_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "delete"))
):
    """Delete a reward; non-admins may only delete their own."""
    reward = await _get_or_404(db, reward_id)
    ensure_can_modify(reward, current_user)

    await db.delete(reward)
    await db.commit()
    log.info("User %s deleted reward %s", current_user.id, reward_id)
