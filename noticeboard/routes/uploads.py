"""
Admin file utilities - generic upload and Word import
"""
import io
import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from noticeboard.services.uploads import save_upload
from noticeboard.services.word_parser import WordParseError, docx_to_html
from noticeboard.utils.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Uploads"])

@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    current_admin: dict = Depends(get_current_admin)
):
    """Upload an image or document and return its relative URL"""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    stored = save_upload(file)
    return {"path": stored.path, "filename": stored.filename}

@router.post("/parse-word")
async def parse_word(
    file: UploadFile = File(...),
    current_admin: dict = Depends(get_current_admin)
):
    """Convert an uploaded .docx into HTML for the rich-text editor"""
    if not (file.filename or "").lower().endswith(".docx"):
        raise HTTPException(status_code=400, detail="Only .docx files can be imported")
    data = await file.read()
    try:
        content = docx_to_html(io.BytesIO(data))
    except WordParseError as e:
        logger.warning("Word import failed for %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail="Could not read the Word document")
    return {"content": content}
