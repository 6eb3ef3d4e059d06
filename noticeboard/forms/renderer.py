"""
Dynamic form rendering for notice registration forms.

Exports:
- DEFAULT_FIELDS: the Name / Email form used when a notice declares no fields
- render_controls(fields, answers, errors) -> list[Control]
- FormSession: answers, pending files and validation errors of one form fill-in

Answers and files are keyed by ``FormFieldDescriptor.id``; labels are only
used for display.
"""
from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field as dc_field
from typing import Dict, List, Optional

from noticeboard.forms.validation import validate_file
from noticeboard.models.answers import Answer, FileAnswer, answer_for_field
from noticeboard.models.notice import FieldType, FormFieldDescriptor, TEXT_FIELD_TYPES

DEFAULT_FIELDS: List[FormFieldDescriptor] = [
    FormFieldDescriptor(id="name", label="Name", type=FieldType.TEXT, required=True),
    FormFieldDescriptor(id="email", label="Email", type=FieldType.EMAIL, required=True),
]

REQUIRED_MESSAGE = "This field is required"


@dataclass
class Control:
    """One input control as the registration page draws it"""
    field_id: str
    label: str
    widget: str  # input | select | radio | file
    required: bool = False
    input_type: Optional[str] = None
    options: List[str] = dc_field(default_factory=list)
    value: str = ""
    accept: Optional[str] = None
    error: Optional[str] = None


@dataclass
class PendingFile:
    """A file picked for upload but not yet sent"""
    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "PendingFile":
        with open(path, "rb") as fh:
            content = fh.read()
        guessed, _ = mimetypes.guess_type(path)
        return cls(
            name=os.path.basename(path),
            content=content,
            content_type=content_type or guessed or "application/octet-stream",
        )


def effective_fields(fields: Optional[List[FormFieldDescriptor]]) -> List[FormFieldDescriptor]:
    return list(fields) if fields else list(DEFAULT_FIELDS)


def _control_for(field: FormFieldDescriptor, value: str, error: Optional[str]) -> Control:
    control = Control(
        field_id=field.id,
        label=field.label,
        widget="input",
        required=field.required,
        value=value,
        error=error,
    )
    if field.type in TEXT_FIELD_TYPES:
        control.input_type = field.type.value
    elif field.type == FieldType.DROPDOWN:
        control.widget = "select"
        control.options = list(field.options)
    elif field.type == FieldType.RADIO:
        control.widget = "radio"
        control.options = list(field.options)
    elif field.type == FieldType.FILE:
        control.widget = "file"
        control.value = ""
        rules = field.fileValidation
        if rules and rules.allowedTypes:
            control.accept = ",".join(rules.allowedTypes)
    else:
        raise TypeError(f"Unsupported field type: {field.type}")
    return control


def render_controls(
    fields: Optional[List[FormFieldDescriptor]],
    answers: Optional[Dict[str, str]] = None,
    errors: Optional[Dict[str, str]] = None,
) -> List[Control]:
    """One control per field, in declaration order"""
    answers = answers or {}
    errors = errors or {}
    return [
        _control_for(f, answers.get(f.id, ""), errors.get(f.id))
        for f in effective_fields(fields)
    ]


class FormSession:
    """Live state of a registration form while it is being filled in."""

    def __init__(self, fields: Optional[List[FormFieldDescriptor]] = None):
        self.fields = effective_fields(fields)
        self._by_id = {f.id: f for f in self.fields}
        self.answers: Dict[str, str] = {}
        self.files: Dict[str, PendingFile] = {}
        self.errors: Dict[str, str] = {}

    def field(self, field_id: str) -> FormFieldDescriptor:
        try:
            return self._by_id[field_id]
        except KeyError:
            raise KeyError(f"Unknown form field: {field_id}") from None

    def set_value(self, field_id: str, value: str) -> None:
        field = self.field(field_id)
        if field.type == FieldType.FILE:
            raise ValueError(f"Field '{field.label}' takes a file, use select_file()")
        value = "" if value is None else str(value)
        if field.is_choice and value and value not in field.options:
            raise ValueError(f"'{value}' is not an option of '{field.label}'")
        self.answers[field_id] = value
        if self.errors.get(field_id) == REQUIRED_MESSAGE and value:
            del self.errors[field_id]

    def select_file(self, field_id: str, file: PendingFile) -> Optional[str]:
        """Validate and stage a file; returns the validation error, if any"""
        field = self.field(field_id)
        if field.type != FieldType.FILE:
            raise ValueError(f"Field '{field.label}' does not take a file")
        error = validate_file(file, field.fileValidation)
        if error:
            self.errors[field_id] = error
            self.files.pop(field_id, None)
        else:
            self.errors.pop(field_id, None)
            self.files[field_id] = file
        return error

    def clear_file(self, field_id: str) -> None:
        self.field(field_id)
        self.files.pop(field_id, None)
        self.errors.pop(field_id, None)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def missing_required(self) -> List[FormFieldDescriptor]:
        missing = []
        for f in self.fields:
            if not f.required:
                continue
            if f.type == FieldType.FILE:
                if f.id not in self.files:
                    missing.append(f)
            elif not self.answers.get(f.id, "").strip():
                missing.append(f)
        return missing

    def typed_answers(self) -> Dict[str, Answer]:
        typed: Dict[str, Answer] = {}
        for field_id, value in self.answers.items():
            typed[field_id] = answer_for_field(self._by_id[field_id], value)
        for field_id, file in self.files.items():
            typed[field_id] = FileAnswer(
                path=file.name, filename=file.name,
                contentType=file.content_type, size=file.size,
            )
        return typed

    def controls(self) -> List[Control]:
        return render_controls(self.fields, self.answers, self.errors)
