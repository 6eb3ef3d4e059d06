"""
Notice routes - public reads, admin-only writes
"""
import logging
from fastapi import APIRouter, HTTPException, status, Depends
from typing import List
from noticeboard.models.notice import NoticeCreate, NoticeUpdate, NoticeResponse, notice_document
from noticeboard.database.db_operations import db_ops
from noticeboard.config.database import Collections
from noticeboard.utils.helpers import serialize_doc, serialize_docs
from noticeboard.utils.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/notices", tags=["Notices"])

@router.get("", response_model=List[NoticeResponse])
async def get_notices():
    """Get all notices, newest first"""
    notices = await db_ops.get_all(Collections.NOTICES, sort=[("date", -1)])
    return serialize_docs(notices)

@router.get("/{notice_id}", response_model=NoticeResponse)
async def get_notice(notice_id: str):
    """Get notice by ID (used by direct registration links)"""
    notice = await db_ops.get_by_id(Collections.NOTICES, notice_id)
    if not notice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notice not found"
        )
    return serialize_doc(notice)

@router.post("", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
async def create_notice(
    notice: NoticeCreate,
    current_admin: dict = Depends(get_current_admin)
):
    """Create a new notice with its registration form"""
    notice_dict = notice_document(notice)
    created_notice = await db_ops.create(Collections.NOTICES, notice_dict)
    logger.info("Notice %s created by %s", created_notice["_id"], current_admin.get("username"))
    return serialize_doc(created_notice)

@router.patch("/{notice_id}", response_model=NoticeResponse)
async def update_notice(
    notice_id: str,
    notice_update: NoticeUpdate,
    current_admin: dict = Depends(get_current_admin)
):
    """Partially update a notice, e.g. toggle acceptingResponses"""
    update_data = notice_document(notice_update, exclude_unset=True)

    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    updated_notice = await db_ops.update(Collections.NOTICES, notice_id, update_data)
    if not updated_notice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notice not found"
        )

    return serialize_doc(updated_notice)

@router.delete("/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notice(
    notice_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """Delete notice; its registrations are kept"""
    deleted = await db_ops.delete(Collections.NOTICES, notice_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notice not found"
        )
    logger.info("Notice %s deleted by %s", notice_id, current_admin.get("username"))
