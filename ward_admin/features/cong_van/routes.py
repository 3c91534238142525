"""
Official document (công văn) management API routes.
"""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ward_admin.core.database.engine import get_db
from ward_admin.core.storage import BucketUploader, UploadResponse, get_cong_van_storage, read_upload
from ward_admin.features.cong_van.models import CongVan
from ward_admin.features.cong_van.schemas import (
    CongVanCreate,
    CongVanResponse,
    CongVanSuggestions,
    CongVanUpdate,
)
from ward_admin.features.permissions.dependencies import (
    ensure_can_modify,
    require_any_module_action,
    require_module_action,
)
from ward_admin.features.users.models import User
from ward_admin.utils import get_logger


MODULE_KEY = "cong-van"

log = get_logger(__name__)
router = APIRouter()


async def _get_or_404(db: AsyncSession, cong_van_id: int) -> CongVan:
    cong_van = await db.scalar(select(CongVan).where(CongVan.id == cong_van_id))
    if not cong_van:
        raise HTTPException(status_code=404, detail="Document not found")
    return cong_van


@router.get("", response_model=list[CongVanResponse])
async def list_cong_van(
    search: str | None = None,
    loai_cong_van: str | None = None,
    skip: int = 0,
    limit: int = 500,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    """
    List official documents, newest issue date first.

    - search: case-insensitive match on number, title, contents or issuing body
    - loai_cong_van: "CV Đi" or "CV Đến"; "All" or empty for both
    """
    query = select(CongVan)

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                CongVan.so_hieu.ilike(pattern),
                CongVan.ten_cong_van.ilike(pattern),
                CongVan.noi_dung.ilike(pattern),
                CongVan.co_quan_ban_hanh.ilike(pattern),
            )
        )
    if loai_cong_van and loai_cong_van != "All":
        query = query.where(CongVan.loai_cong_van == loai_cong_van)

    query = query.order_by(CongVan.ngay_ban_hanh.desc(), CongVan.id.desc()).offset(skip).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/suggestions", response_model=CongVanSuggestions)
async def get_suggestions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    """Distinct issuing bodies and group tags, for form autocomplete."""
    result = await db.execute(select(CongVan.co_quan_ban_hanh, CongVan.phan_nhom))

    co_quan: dict[str, None] = {}
    groups: dict[str, None] = {}
    for issuer, phan_nhom in result.all():
        if issuer:
            co_quan.setdefault(issuer, None)
        for tag in (phan_nhom or "").split(","):
            if tag.strip():
                groups.setdefault(tag.strip(), None)

    return CongVanSuggestions(co_quan_ban_hanh=list(co_quan), phan_nhom=list(groups))


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_attachment(
    file: UploadFile = File(...),
    storage: BucketUploader = Depends(get_cong_van_storage),
    current_user: User = Depends(require_any_module_action(MODULE_KEY, ["add", "edit"]))
):
    """Upload an attachment and return its public URL for ``file_dinh_kem``."""
    content = await read_upload(file)
    url = await storage.upload(file.filename or "attachment", content)
    return UploadResponse(url=url)


@router.get("/{cong_van_id}", response_model=CongVanResponse)
async def get_cong_van(
    cong_van_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "view"))
):
    """Retrieve an official document by id."""
    return await _get_or_404(db, cong_van_id)


@router.post("", response_model=CongVanResponse, status_code=201)
async def create_cong_van(
    cong_van_data: CongVanCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "add"))
):
    """Create an official document owned by the caller."""
    cong_van = CongVan(**cong_van_data.model_dump(), created_by=current_user.id)
    db.add(cong_van)
    await db.commit()
    await db.refresh(cong_van)
    log.info("User %s created document %s (%s)", current_user.id, cong_van.id, cong_van.so_hieu)
    return cong_van


@router.put("/{cong_van_id}", response_model=CongVanResponse)
async def update_cong_van(
    cong_van_id: int,
    cong_van_update: CongVanUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "edit"))
):
    """Update an official document; non-admins may only touch their own."""
    cong_van = await _get_or_404(db, cong_van_id)
    ensure_can_modify(cong_van, current_user)

    update_data = cong_van_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(cong_van, key, value)

    await db.commit()
    await db.refresh(cong_van)
    return cong_van


@router.delete("/{cong_van_id}", status_code=204)
async def delete_cong_van(
    cong_van_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_module_action(MODULE_KEY, "delete"))
):
    """Delete an official document; non-admins may only delete their own."""
    cong_van = await _get_or_404(db, cong_van_id)
    ensure_can_modify(cong_van, current_user)

    await db.delete(cong_van)
    await db.commit()
    log.info("User %s deleted document %s", current_user.id, cong_van_id)
