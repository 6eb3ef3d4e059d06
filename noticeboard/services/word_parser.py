"""
Word (.docx) to HTML conversion used to seed notice content
"""
import html
import logging
import zipfile
from typing import IO, List, Optional

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from docx.text.paragraph import Paragraph

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class WordParseError(ValueError):
    pass


def _runs_html(paragraph: Paragraph) -> str:
    parts = []
    for run in paragraph.runs:
        text = html.escape(run.text)
        if not text:
            continue
        if run.underline:
            text = f"<u>{text}</u>"
        if run.italic:
            text = f"<em>{text}</em>"
        if run.bold:
            text = f"<strong>{text}</strong>"
        parts.append(text)
    return "".join(parts)


def _heading_level(paragraph: Paragraph) -> Optional[int]:
    name = paragraph.style.name if paragraph.style is not None else ""
    if name == "Title":
        return 1
    if name.startswith("Heading"):
        try:
            return min(max(int(name.split()[-1]), 1), 6)
        except ValueError:
            return None
    return None


def _list_kind(paragraph: Paragraph) -> Optional[str]:
    name = paragraph.style.name if paragraph.style is not None else ""
    p_pr = paragraph._p.pPr
    numbered = p_pr is not None and p_pr.numPr is not None
    if name.startswith("List Number"):
        return "ol"
    if name.startswith("List Bullet") or name.startswith("List Paragraph") or numbered:
        return "ul"
    return None


def _table_html(table: Table) -> str:
    rows = []
    for row in table.rows:
        cells = "".join(
            "<td>%s</td>" % "<br>".join(html.escape(p.text) for p in cell.paragraphs)
            for cell in row.cells
        )
        rows.append(f"<tr>{cells}</tr>")
    return "<table>%s</table>" % "".join(rows)


def docx_to_html(stream: IO[bytes]) -> str:
    """Convert a .docx document into simple HTML.

    Headings, paragraphs (bold / italic / underline runs), bullet and numbered
    lists and tables are kept; images and page layout are dropped.
    """
    try:
        document = Document(stream)
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as e:
        raise WordParseError(f"Not a valid Word document: {e}") from e

    out: List[str] = []
    open_list: Optional[str] = None

    for block in document.iter_inner_content():
        kind = _list_kind(block) if isinstance(block, Paragraph) else None
        if open_list and kind != open_list:
            out.append(f"</{open_list}>")
            open_list = None

        if isinstance(block, Table):
            out.append(_table_html(block))
            continue

        body = _runs_html(block)
        if kind:
            if open_list is None:
                out.append(f"<{kind}>")
                open_list = kind
            out.append(f"<li>{body}</li>")
            continue

        level = _heading_level(block)
        if level:
            out.append(f"<h{level}>{body}</h{level}>")
        elif body:
            out.append(f"<p>{body}</p>")

    if open_list:
        out.append(f"</{open_list}>")

    logger.debug("Converted Word document into %d HTML blocks", len(out))
    return "".join(out)
