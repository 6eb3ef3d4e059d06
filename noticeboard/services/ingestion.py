"""
Turns a public multipart registration into a stored Registration document.

Reserved parts (name, email, event, noticeId) become top-level columns. Every
other text part is stored in ``details`` under its part name as a typed
answer, and every file part is written to disk and stored as a FileAnswer.
Answers may also arrive packed as one JSON object in a ``details`` part;
separate parts win over packed keys of the same name. When the originating notice is known its field rules are checked again here,
since the browser-side checks can be bypassed.
"""
import json
import logging
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, UploadFile, status
from starlette.datastructures import FormData

from noticeboard.config.database import Collections
from noticeboard.config.settings import settings
from noticeboard.database.db_operations import db_ops
from noticeboard.forms.assembler import RESERVED_PARTS
from noticeboard.forms.renderer import REQUIRED_MESSAGE
from noticeboard.forms.validation import FileInfo, validate_file
from noticeboard.models.answers import FileAnswer, answer_for_field
from noticeboard.models.notice import FieldType, FormFieldDescriptor, parse_form_fields
from noticeboard.services.uploads import StoredFile, remove_upload, save_upload, upload_size

logger = logging.getLogger(__name__)


class SubmissionRejected(HTTPException):
    """400 carrying a per-field error map"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Submission failed validation", "errors": errors},
        )
        self.errors = errors


def _text(form: FormData, key: str) -> str:
    value = form.get(key)
    return value.strip() if isinstance(value, str) else ""


def _details_part(form: FormData) -> Dict[str, str]:
    """Answers sent together as one JSON object in a ``details`` part"""
    raw = form.get("details")
    if not isinstance(raw, str) or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise SubmissionRejected({"details": "Details must be a JSON object"}) from e
    if not isinstance(parsed, dict):
        raise SubmissionRejected({"details": "Details must be a JSON object"})

    answers: Dict[str, str] = {}
    for key, value in parsed.items():
        if isinstance(value, (dict, list)):
            raise SubmissionRejected({str(key): "Nested values are not supported"})
        answers[str(key)] = "" if value is None else str(value)
    return answers


async def _load_notice(notice_id: str) -> Tuple[Optional[Dict], List[FormFieldDescriptor]]:
    if not notice_id:
        return None, []
    notice = await db_ops.get_by_id(Collections.NOTICES, notice_id)
    if not notice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notice not found"
        )
    fields = parse_form_fields(notice.get("formFields"))
    return notice, fields


def _check_fields(
    fields: List[FormFieldDescriptor],
    form: FormData,
    texts: Dict[str, str],
    uploads: Dict[str, UploadFile],
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for field in fields:
        if field.type == FieldType.FILE:
            upload = uploads.get(field.id)
            if upload is None:
                if texts.get(field.id, "").strip():
                    errors[field.id] = f"Field '{field.label}' expects a file upload"
                elif field.required:
                    errors[field.id] = REQUIRED_MESSAGE
                continue
            info = FileInfo(
                name=upload.filename or "",
                size=upload_size(upload),
                content_type=upload.content_type or "",
            )
            error = validate_file(info, field.fileValidation)
            if error:
                errors[field.id] = error
            continue

        value = _text(form, field.id) if field.id in RESERVED_PARTS else texts.get(field.id, "").strip()
        if field.id in uploads:
            errors[field.id] = f"Field '{field.label}' does not take a file"
        elif not value:
            if field.required:
                errors[field.id] = REQUIRED_MESSAGE
        elif field.is_choice and value not in field.options:
            errors[field.id] = f"'{value}' is not an option of '{field.label}'"
    return errors


async def ingest_submission(form: FormData) -> Dict:
    """Validate, store files and insert one Registration for a submission"""
    packed = _details_part(form)
    # older clients kept the notice id inside details
    notice_id = _text(form, "noticeId") or packed.get("noticeId", "").strip()
    notice, fields = await _load_notice(notice_id)
    by_id = {f.id: f for f in fields}

    if notice is not None and settings.ENFORCE_ACCEPTING_RESPONSES \
            and not notice.get("acceptingResponses", True):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This notice is no longer accepting responses"
        )

    texts: Dict[str, str] = {k: v for k, v in packed.items() if k not in RESERVED_PARTS}
    uploads: Dict[str, UploadFile] = {}
    for key, value in form.multi_items():
        if key in RESERVED_PARTS:
            continue
        if isinstance(value, str):
            texts[key] = value
        elif value.filename:
            uploads[key] = value

    errors = _check_fields(fields, form, texts, uploads)
    if errors:
        logger.info("Rejected submission for notice %s: %s", notice_id or "-", errors)
        raise SubmissionRejected(errors)

    details: Dict[str, Dict] = {}
    for key, value in texts.items():
        field = by_id.get(key)
        if field is not None and field.type == FieldType.FILE:
            # an empty file input; nothing was picked
            continue
        details[key] = answer_for_field(field, value).model_dump()

    registration = {
        "name": _text(form, "name") or settings.DEFAULT_GUEST_NAME,
        "email": _text(form, "email") or settings.DEFAULT_GUEST_EMAIL,
        "event": _text(form, "event") or (notice or {}).get("title", ""),
        "noticeId": notice_id or None,
        "details": details,
    }

    stored_files: List[StoredFile] = []
    try:
        for key, upload in uploads.items():
            stored = save_upload(upload)
            stored_files.append(stored)
            details[key] = FileAnswer(
                path=stored.path,
                filename=stored.filename,
                contentType=stored.content_type,
                size=stored.size,
            ).model_dump()
        created = await db_ops.create(Collections.REGISTRATIONS, registration)
    except Exception:
        logger.exception("❌ Failed to store registration for notice %s", notice_id or "-")
        for stored in stored_files:
            remove_upload(stored)
        raise
    logger.info(
        "📝 Registration %s stored for notice %s (%d answers, %d files)",
        created["_id"], notice_id or "-", len(texts), len(uploads)
    )
    return created
