"""
Typed answers stored in a registration's details map.

Every answer is one of three variants, discriminated by ``kind``:

* ``TextAnswer``   - free text from text / email / number / url inputs
* ``ChoiceAnswer`` - the selected option of a dropdown or radio group
* ``FileAnswer``   - the stored path of an uploaded file

Numbers are kept as strings; nothing is coerced on the way in.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from noticeboard.models.notice import FieldType, FormFieldDescriptor, TEXT_FIELD_TYPES, CHOICE_FIELD_TYPES


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    value: str = ""


class ChoiceAnswer(BaseModel):
    kind: Literal["choice"] = "choice"
    value: str = ""


class FileAnswer(BaseModel):
    kind: Literal["file"] = "file"
    path: str
    filename: Optional[str] = None
    contentType: Optional[str] = None
    size: Optional[int] = None


Answer = Annotated[Union[TextAnswer, ChoiceAnswer, FileAnswer], Field(discriminator="kind")]

answer_adapter = TypeAdapter(Answer)


def coerce_answer(raw: Any) -> Any:
    """Read back a stored answer; bare strings predate the tagged form"""
    if raw is None:
        return TextAnswer().model_dump()
    if isinstance(raw, (str, int, float)):
        return TextAnswer(value=str(raw)).model_dump()
    return raw


def answer_for_field(field: Optional[FormFieldDescriptor], raw: str) -> Union[TextAnswer, ChoiceAnswer]:
    """Wrap a submitted text value in the variant that matches the field type"""
    if field is None or field.type in TEXT_FIELD_TYPES:
        return TextAnswer(value=raw)
    if field.type in CHOICE_FIELD_TYPES:
        return ChoiceAnswer(value=raw)
    if field.type == FieldType.FILE:
        raise ValueError(f"Field '{field.label}' expects a file upload")
    raise TypeError(f"Unsupported field type: {field.type}")


def display_value(answer: Any) -> str:
    """Render an answer as the text shown in listings and spreadsheets"""
    if isinstance(answer, dict):
        answer = answer_adapter.validate_python(coerce_answer(answer))
    elif isinstance(answer, str):
        return answer
    if isinstance(answer, (TextAnswer, ChoiceAnswer)):
        return answer.value
    if isinstance(answer, FileAnswer):
        return answer.path
    raise TypeError(f"Not an answer: {answer!r}")
