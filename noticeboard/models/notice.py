"""
Notice model and form-field schemas for the dynamic registration forms
"""
import hashlib
import uuid
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    URL = "url"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    FILE = "file"

# Single-line inputs whose answer is stored as the raw string
TEXT_FIELD_TYPES = (FieldType.TEXT, FieldType.EMAIL, FieldType.NUMBER, FieldType.URL)
CHOICE_FIELD_TYPES = (FieldType.DROPDOWN, FieldType.RADIO)

def new_field_id() -> str:
    return uuid.uuid4().hex[:12]

def stable_field_id(index: int, label: str) -> str:
    """Id for a stored field saved without one; identical on every read"""
    return hashlib.sha1(f"{index}:{label}".encode("utf-8")).hexdigest()[:12]

def with_field_ids(fields):
    """Fill in missing field ids from each field's position and label"""
    if not isinstance(fields, list):
        return fields
    filled = []
    for index, field in enumerate(fields):
        if isinstance(field, dict) and not field.get("id"):
            field = {**field, "id": stable_field_id(index, field.get("label") or "")}
        filled.append(field)
    return filled

class FileValidation(BaseModel):
    allowedTypes: List[str] = Field(default_factory=list)  # e.g. ['application/pdf', 'image/*']
    maxSizeInMB: Optional[float] = Field(default=10, gt=0)

class FormFieldDescriptor(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    label: str = Field(..., min_length=1)
    type: FieldType = FieldType.TEXT
    required: bool = False
    options: List[str] = Field(default_factory=list)  # For dropdown / radio
    fileValidation: Optional[FileValidation] = None

    @model_validator(mode="before")
    @classmethod
    def assign_id(cls, data):
        """Give a stand-alone field an identifier; existing ids are never touched"""
        if isinstance(data, dict) and not data.get("id"):
            data = {**data, "id": new_field_id()}
        return data

    @field_validator("options", mode="before")
    @classmethod
    def none_options(cls, v):
        return v or []

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_FIELD_TYPES

def _unique_field_ids(fields: Optional[List[FormFieldDescriptor]]):
    if not fields:
        return fields
    seen = set()
    for field in fields:
        if field.id in seen:
            raise ValueError(f"Duplicate form field id: {field.id}")
        seen.add(field.id)
    return fields

def parse_form_fields(raw) -> List["FormFieldDescriptor"]:
    """Descriptors for a stored notice's ``formFields``"""
    return [FormFieldDescriptor(**f) for f in with_field_ids(list(raw or []))]

class NoticeDesign(BaseModel):
    fontFamily: str = "Roboto"
    headerColor: str = "#673ab7"
    titleFontSize: str = "24pt"
    titleBold: bool = False
    titleItalic: bool = False
    bodyFontSize: str = "11pt"
    bodyBold: bool = False
    bodyItalic: bool = False

class NoticeBase(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    shortDescription: Optional[str] = None
    formTitle: Optional[str] = None
    formDescription: Optional[str] = None
    date: datetime = Field(default_factory=datetime.utcnow)
    acceptingResponses: bool = True
    noticeBgImage: Optional[str] = None
    formBgImage: Optional[str] = None
    design: NoticeDesign = Field(default_factory=NoticeDesign)
    formFields: List[FormFieldDescriptor] = Field(default_factory=list)

    @field_validator("formFields", mode="before")
    @classmethod
    def fill_ids(cls, v):
        return with_field_ids(v)

    @field_validator("formFields")
    @classmethod
    def unique_ids(cls, v):
        return _unique_field_ids(v)

class NoticeCreate(NoticeBase):
    pass

# Columns a partial update may set but never clear
NOT_NULLABLE = ("title", "content", "date", "acceptingResponses", "design", "formFields")

class NoticeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    shortDescription: Optional[str] = None
    formTitle: Optional[str] = None
    formDescription: Optional[str] = None
    date: Optional[datetime] = None
    acceptingResponses: Optional[bool] = None
    noticeBgImage: Optional[str] = None
    formBgImage: Optional[str] = None
    design: Optional[NoticeDesign] = None
    formFields: Optional[List[FormFieldDescriptor]] = None

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            nulled = [key for key in NOT_NULLABLE if key in data and data[key] is None]
            if nulled:
                raise ValueError(f"Cannot be null: {', '.join(nulled)}")
        return data

    @field_validator("formFields", mode="before")
    @classmethod
    def fill_ids(cls, v):
        return with_field_ids(v)

    @field_validator("formFields")
    @classmethod
    def unique_ids(cls, v):
        return _unique_field_ids(v)

class NoticeResponse(NoticeBase):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

def notice_document(notice: BaseModel, **dump_kwargs) -> dict:
    """Mongo-ready dict: enums as plain strings, ``date`` kept as a datetime"""
    document = notice.model_dump(mode="json", **dump_kwargs)
    if "date" in document:
        document["date"] = notice.date
    # nested models are stored whole even on partial updates
    if document.get("formFields") is not None:
        document["formFields"] = [f.model_dump(mode="json") for f in notice.formFields]
    if document.get("design") is not None:
        document["design"] = notice.design.model_dump(mode="json")
    return document
