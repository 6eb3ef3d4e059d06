"""
Async HTTP client for the noticeboard API
"""
import logging
from typing import Any, List, Optional

import httpx

from noticeboard.client.session import AdminSession, SessionStore
from noticeboard.forms.assembler import assemble_submission
from noticeboard.forms.renderer import FormSession
from noticeboard.models.notice import NoticeCreate, NoticeResponse, NoticeUpdate
from noticeboard.models.registration import RegistrationResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class NoticeboardClient:
    """Talks to the REST API; admin calls use the token held by the store"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        store: Optional[SessionStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.store = store or SessionStore()
        self.store.load()
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        await self._http.aclose()

    @property
    def session(self) -> AdminSession:
        return self.store.session

    async def _request(self, method: str, url: str, admin: bool = False, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if admin:
            headers.update(self.session.auth_headers())
        response = await self._http.request(method, url, headers=headers, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            detail = body.get("detail", body) if isinstance(body, dict) else body
            logger.debug("%s %s failed: %s %s", method, url, response.status_code, detail)
            raise ApiError(response.status_code, detail)
        return response

    # ── Auth ────────────────────────────────────────────────────────────────

    async def login(self, username: str, password: str) -> AdminSession:
        response = await self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}
        )
        data = response.json()
        return self.store.update(token=data["token"], username=data["username"])

    async def logout(self) -> AdminSession:
        return self.store.clear()

    # ── Notices ─────────────────────────────────────────────────────────────

    async def list_notices(self) -> List[NoticeResponse]:
        response = await self._request("GET", "/api/admin/notices")
        return [NoticeResponse.model_validate(n) for n in response.json()]

    async def get_notice(self, notice_id: str) -> NoticeResponse:
        response = await self._request("GET", f"/api/admin/notices/{notice_id}")
        return NoticeResponse.model_validate(response.json())

    async def create_notice(self, notice: NoticeCreate) -> NoticeResponse:
        response = await self._request(
            "POST", "/api/admin/notices", admin=True, json=notice.model_dump(mode="json")
        )
        return NoticeResponse.model_validate(response.json())

    async def update_notice(self, notice_id: str, changes: NoticeUpdate) -> NoticeResponse:
        response = await self._request(
            "PATCH", f"/api/admin/notices/{notice_id}", admin=True,
            json=changes.model_dump(mode="json", exclude_unset=True),
        )
        return NoticeResponse.model_validate(response.json())

    async def set_accepting_responses(self, notice_id: str, accepting: bool) -> NoticeResponse:
        return await self.update_notice(notice_id, NoticeUpdate(acceptingResponses=accepting))

    async def delete_notice(self, notice_id: str) -> None:
        await self._request("DELETE", f"/api/admin/notices/{notice_id}", admin=True)

    # ── Registrations ───────────────────────────────────────────────────────

    async def submit_registration(self, notice: NoticeResponse, form: FormSession) -> RegistrationResponse:
        """Send a filled-in form; raises SubmissionBlocked before any request if it has errors"""
        payload = assemble_submission(notice, form)
        response = await self._request(
            "POST", "/api/admin/registrations",
            data=payload.data, files=payload.files or None,
        )
        return RegistrationResponse.model_validate(response.json())

    async def list_registrations(self, notice_id: Optional[str] = None) -> List[RegistrationResponse]:
        params = {"noticeId": notice_id} if notice_id else None
        response = await self._request("GET", "/api/admin/registrations", admin=True, params=params)
        return [RegistrationResponse.model_validate(r) for r in response.json()]

    async def download_registrations(self, notice_id: Optional[str] = None) -> bytes:
        params = {"noticeId": notice_id} if notice_id else None
        response = await self._request(
            "GET", "/api/admin/registrations/excel", admin=True, params=params
        )
        return response.content
