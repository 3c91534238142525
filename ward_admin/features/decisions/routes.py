"""
Decision management API routes.

Decisions share the ``rewards`` module's permission row and have no owner,
so only module flags guard them.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ward_admin.core.database.engine import get_db
from ward_admin.core.pagination import count_rows, page_count, page_offset
from ward_admin.core.storage import BucketUploader, UploadResponse, get_rewards_storage, read_upload
from ward_admin.features.decisions.models import Decision
from ward_admin.features.decisions.schemas import (
    DecisionCreate,
    DecisionListResponse,
    DecisionResponse,
    DecisionUpdate,
)
from ward_admin.features.permissions.dependencies import require_any_module_action, require_module_action
from ward_admin.features.users.models import User


MODULE_KEY = "rewards"

router = APIRouter()


async def _get_or_404(db: AsyncSession, decision_id: int) -> Decision:
    decision = await db.scalar(select(Decision).where(Decision.id == decision_id))
    if not decision:
        raise HTTPException(status_code=404, detail="Decision not found")
    return decision


@router.get("", response_model=DecisionListResponse)
async def list_decisions(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    """List decisions, latest signing date first."""
    stmt = select(Decision)

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Decision.so_quyet_dinh.ilike(pattern),
                Decision.noi_dung.ilike(pattern),
                Decision.ghi_chu.ilike(pattern),
            )
        )

    total = await count_rows(db, stmt)

    stmt = (
        stmt.order_by(Decision.ngay_ky.desc(), Decision.id.desc())
        .offset(page_offset(page, page_size))
        .limit(page_size)
    )
    result = await db.execute(stmt)

    return DecisionListResponse(
        items=[DecisionResponse.model_validate(d) for d in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
        pages=page_count(total, page_size),
    )


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_decision_file(
    file: UploadFile = File(...),
    storage: BucketUploader = Depends(get_rewards_storage),
    current_user: User = Depends(require_any_module_action(MODULE_KEY, ["add", "edit"]))
):
    """Upload the signed decision and return its public URL for ``file_quyet_dinh``."""
    content = await read_upload(file)
    url = await storage.upload(file.filename or "decision", content)
    return UploadResponse(url=url)


@router.get("/{decision_id}", response_model=DecisionResponse)
async def get_decision(
    decision_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    return await _get_or_404(db, decision_id)


@router.post("", response_model=DecisionResponse, status_code=201)
async def create_decision(
    decision_data: DecisionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "add"))
):
    decision = Decision(**decision_data.model_dump())
    db.add(decision)
    await db.commit()
    await db.refresh(decision)
    return decision


@router.put("/{decision_id}", response_model=DecisionResponse)
async def update_decision(
    decision_id: int,
    decision_update: DecisionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "edit"))
):
    decision = await _get_or_404(db, decision_id)

    for key, value in decision_update.model_dump(exclude_unset=True).items():
        setattr(decision, key, value)

    await db.commit()
    await db.refresh(decision)
    return decision


@router.delete("/{decision_id}", status_code=204)
async def delete_decision(
    decision_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "delete"))
):
    decision = await _get_or_404(db, decision_id)
    await db.delete(decision)
    await db.commit()
