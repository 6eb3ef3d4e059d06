"""
Builds the multipart payload for a public registration
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from noticeboard.config.settings import settings
from noticeboard.forms.renderer import FormSession, REQUIRED_MESSAGE

RESERVED_PARTS = ("name", "email", "event", "noticeId", "details")


class SubmissionBlocked(Exception):
    """The form still has errors; nothing may be sent"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("Please fix the errors before submitting.")


@dataclass
class SubmissionPayload:
    data: Dict[str, str] = field(default_factory=dict)
    files: List[Tuple[str, Tuple[str, bytes, str]]] = field(default_factory=list)


def _answer_by_label(session: FormSession, label: str) -> Optional[str]:
    for f in session.fields:
        if f.label.strip().lower() == label:
            value = session.answers.get(f.id, "").strip()
            if value:
                return value
    return None


def assemble_submission(notice, session: FormSession) -> SubmissionPayload:
    """Package a filled-in session for ``POST /api/admin/registrations``.

    ``notice`` needs ``id`` and ``title`` attributes (a ``NoticeResponse``).
    Raises ``SubmissionBlocked`` while any field holds an error or a required
    field is still empty.
    """
    for missing in session.missing_required():
        session.errors.setdefault(missing.id, REQUIRED_MESSAGE)
    if session.has_errors:
        raise SubmissionBlocked(session.errors)

    payload = SubmissionPayload()
    payload.data["name"] = _answer_by_label(session, "name") or settings.DEFAULT_GUEST_NAME
    payload.data["email"] = _answer_by_label(session, "email") or settings.DEFAULT_GUEST_EMAIL
    payload.data["event"] = notice.title
    payload.data["noticeId"] = notice.id

    for field_id, value in session.answers.items():
        if field_id in RESERVED_PARTS:
            continue
        payload.data[field_id] = value

    for field_id, pending in session.files.items():
        payload.files.append((field_id, (pending.name, pending.content, pending.content_type)))

    return payload
