"""
Tests for admin uploads and Word import
"""
import io
import os

import pytest
from docx import Document
from httpx import AsyncClient

from noticeboard.services.word_parser import WordParseError, docx_to_html


def make_docx() -> bytes:
    document = Document()
    document.add_heading('Admission Notice', level=1)
    paragraph = document.add_paragraph('Applications are ')
    paragraph.add_run('open').bold = True
    paragraph.add_run(' until ')
    paragraph.add_run('Friday').italic = True
    document.add_paragraph('Bring your ID', style='List Bullet')
    document.add_paragraph('Bring a photo', style='List Bullet')
    document.add_paragraph('Fill the form', style='List Number')
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).text = 'Fee'
    table.cell(0, 1).text = '<100>'
    stream = io.BytesIO()
    document.save(stream)
    return stream.getvalue()


class TestDocxToHtml:

    def test_structure_is_kept(self):
        html = docx_to_html(io.BytesIO(make_docx()))

        assert '<h1>Admission Notice</h1>' in html
        assert '<p>Applications are <strong>open</strong> until <em>Friday</em></p>' in html
        assert '<ul><li>Bring your ID</li><li>Bring a photo</li></ul>' in html
        assert '<ol><li>Fill the form</li></ol>' in html
        assert '<table><tr><td>Fee</td><td>&lt;100&gt;</td></tr></table>' in html

    def test_not_a_document(self):
        with pytest.raises(WordParseError):
            docx_to_html(io.BytesIO(b'plain text, not a zip'))


@pytest.mark.asyncio
async def test_parse_word_endpoint(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        '/api/admin/parse-word',
        files={'file': ('notice.docx', make_docx(), 'application/octet-stream')},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()['content'].startswith('<h1>Admission Notice</h1>')


@pytest.mark.asyncio
async def test_parse_word_rejects_other_files(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        '/api/admin/parse-word',
        files={'file': ('notice.pdf', b'%PDF', 'application/pdf')},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_parse_word_rejects_broken_docx(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        '/api/admin/parse-word',
        files={'file': ('notice.docx', b'garbage', 'application/octet-stream')},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_returns_relative_path(client: AsyncClient, admin_headers: dict, upload_dir: str):
    response = await client.post(
        '/api/admin/upload',
        files={'file': ('banner.png', b'\x89PNG', 'image/png')},
        headers=admin_headers,
    )

    assert response.status_code == 201
    path = response.json()['path']
    assert path.startswith('/uploads/') and path.endswith('.png')
    assert os.path.exists(os.path.join(upload_dir, os.path.basename(path)))

    served = await client.get(path)
    assert served.status_code == 200
    assert served.content == b'\x89PNG'


@pytest.mark.asyncio
async def test_upload_requires_admin(client: AsyncClient):
    response = await client.post(
        '/api/admin/upload', files={'file': ('banner.png', b'\x89PNG', 'image/png')}
    )
    assert response.status_code == 401
