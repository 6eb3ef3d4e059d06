"""
Persistent admin session for the client library.

Loaded once at startup, written back on every change and removed on logout.
"""
import json
import logging
import os
from typing import Optional

from pydantic import BaseModel, ValidationError

from noticeboard.config.settings import settings

logger = logging.getLogger(__name__)


class AdminSession(BaseModel):
    token: Optional[str] = None
    username: Optional[str] = None
    dark_mode: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


class SessionStore:
    """JSON file holding one AdminSession"""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.SESSION_FILE
        self.session = AdminSession()

    def load(self) -> AdminSession:
        if not os.path.exists(self.path):
            self.session = AdminSession()
            return self.session
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                self.session = AdminSession.model_validate(json.load(fh))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            self.session = AdminSession()
        return self.session

    def save(self, session: Optional[AdminSession] = None) -> AdminSession:
        if session is not None:
            self.session = session
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(self.session.model_dump(), fh)
        return self.session

    def update(self, **changes) -> AdminSession:
        return self.save(self.session.model_copy(update=changes))

    def clear(self) -> AdminSession:
        """Drop the credentials but keep display preferences"""
        return self.save(AdminSession(dark_mode=self.session.dark_mode))
