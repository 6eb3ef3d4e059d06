"""
Models for storing public registrations against a notice
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Optional
from datetime import datetime

from noticeboard.models.answers import Answer, coerce_answer

class RegistrationBase(BaseModel):
    name: str
    email: str
    event: str = ""
    noticeId: Optional[str] = None
    details: Dict[str, Answer] = Field(default_factory=dict)

    @field_validator("details", mode="before")
    @classmethod
    def legacy_details(cls, v):
        """Older documents stored bare strings instead of tagged answers"""
        if not v:
            return {}
        return {key: coerce_answer(value) for key, value in v.items()}

class RegistrationResponse(RegistrationBase):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    created_at: Optional[datetime] = None
