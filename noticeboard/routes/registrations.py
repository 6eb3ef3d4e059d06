"""
Registration routes - public multipart submission, admin listing and export
"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from typing import List, Optional
from noticeboard.models.notice import FormFieldDescriptor, parse_form_fields
from noticeboard.models.registration import RegistrationResponse
from noticeboard.database.db_operations import db_ops
from noticeboard.config.database import Collections
from noticeboard.services.ingestion import ingest_submission
from noticeboard.services.excel_export import build_export_table, write_workbook, XLSX_MEDIA_TYPE
from noticeboard.utils.helpers import serialize_doc, serialize_docs
from noticeboard.utils.auth import get_current_admin

router = APIRouter(prefix="/admin/registrations", tags=["Registrations"])

def _notice_filter(notice_id: Optional[str]) -> dict:
    return {"noticeId": notice_id} if notice_id else {}

@router.post("", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def create_registration(request: Request):
    """Submit a registration (multipart/form-data, any number of parts)"""
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Registrations must be sent as multipart/form-data"
        )
    form = await request.form()
    try:
        created = await ingest_submission(form)
    finally:
        await form.close()
    return serialize_doc(created)

@router.get("", response_model=List[RegistrationResponse])
async def get_registrations(
    noticeId: Optional[str] = None,
    current_admin: dict = Depends(get_current_admin)
):
    """List registrations, newest first, optionally for one notice"""
    regs = await db_ops.get_all(
        Collections.REGISTRATIONS,
        _notice_filter(noticeId),
        sort=[("created_at", -1)]
    )
    return serialize_docs(regs)

@router.get("/excel")
async def download_registrations_excel(
    noticeId: Optional[str] = None,
    current_admin: dict = Depends(get_current_admin)
):
    """Download registrations as an .xlsx spreadsheet"""
    regs = await db_ops.get_all(
        Collections.REGISTRATIONS,
        _notice_filter(noticeId),
        sort=[("created_at", 1)]
    )

    fields: List[FormFieldDescriptor] = []
    if noticeId:
        notice = await db_ops.get_by_id(Collections.NOTICES, noticeId)
        if notice:
            fields = parse_form_fields(notice.get("formFields"))

    columns, rows = build_export_table(regs, fields)
    stream = write_workbook(columns, rows)
    filename = f"registrations_{datetime.utcnow().strftime('%Y%m%d')}.xlsx"
    return StreamingResponse(
        stream,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
