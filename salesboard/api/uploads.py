"""Avatar upload endpoint."""

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from salesboard.api.deps import to_http_exception
from salesboard.auth.dependencies import require_admin
from salesboard.db import get_db
from salesboard.exceptions import SalesboardError
from salesboard.models import Admin, AuditAction
from salesboard.schemas.participant import UploadResponse
from salesboard.services.avatars import save_avatar
from salesboard.utils.audit import get_client_ip, log_action

router = APIRouter(tags=["Uploads"])


@router.post("/upload", response_model=UploadResponse)
async def upload_avatar(
    request: Request,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_admin: Admin = Depends(require_admin),
):
    """
    Store an avatar image and return its URL.

    The URL is then saved with PATCH /participants/{id}/profile.
    """
    data = await file.read()

    try:
        url = await run_in_threadpool(save_avatar, data, file.content_type)
    except SalesboardError as e:
        raise to_http_exception(e) from e

    await log_action(
        db=db,
        admin_id=current_admin.id,
        action=AuditAction.UPLOAD_AVATAR,
        target_type="avatar",
        action_metadata={"url": url, "filename": file.filename},
        ip_address=get_client_ip(request),
    )

    return UploadResponse(url=url)
