"""
File validation for file-type form fields.

The same rules run twice: in the form session as soon as a file is picked,
and on the server when the multipart submission arrives.
"""
from dataclasses import dataclass
from typing import Optional

from noticeboard.models.notice import FileValidation

MEGABYTE = 1024 * 1024
WORD_EXTENSIONS = (".doc", ".docx")

@dataclass
class FileInfo:
    """The parts of a file that validation looks at"""
    name: str
    size: int
    content_type: str = ""

def _type_allowed(file_type: str, file_name: str, allowed_types) -> bool:
    for allowed in allowed_types:
        if allowed == file_type:
            return True
        if allowed.endswith("/*") and file_type.startswith(allowed[:-1]):
            return True
    # Browsers report legacy Office documents inconsistently
    if any("word" in allowed for allowed in allowed_types):
        if "word" in file_type or file_name.lower().endswith(WORD_EXTENSIONS):
            return True
    return False

def _subtype(mime_type: str) -> str:
    parts = mime_type.split("/")
    return parts[1] if len(parts) > 1 and parts[1] else mime_type

def validate_file(file, rules: Optional[FileValidation]) -> Optional[str]:
    """Return an error message for a file that breaks the rules, else None.

    ``file`` is anything with ``name``, ``size`` and ``content_type``.
    """
    if not file or not rules:
        return None

    max_size = rules.maxSizeInMB
    if max_size and file.size > max_size * MEGABYTE:
        return f"File size must be less than {max_size:g} MB"

    if rules.allowedTypes:
        file_type = file.content_type or ""
        file_name = file.name or ""
        if not _type_allowed(file_type, file_name, rules.allowedTypes):
            return "Allowed types: " + ", ".join(_subtype(t) for t in rules.allowedTypes)

    return None
