"""
API tests for public registration submission and admin listing
"""
import io
import json
import os
from datetime import datetime

import pytest
from httpx import AsyncClient
from starlette.datastructures import FormData, Headers, UploadFile

from noticeboard.config.database import Collections
from noticeboard.database.db_operations import db_ops
from noticeboard.services.ingestion import ingest_submission


def _base(notice: dict) -> dict:
    return {'event': notice['title'], 'noticeId': notice['_id']}


@pytest.mark.asyncio
async def test_details_stored_and_guest_defaults(client: AsyncClient):
    response = await client.post(
        '/api/admin/registrations',
        data={'event': 'Open Day', 'Team Name': 'Alpha'},
    )

    assert response.status_code == 201
    data = response.json()
    assert data['details']['Team Name'] == {'kind': 'text', 'value': 'Alpha'}
    assert data['name'] == 'Guest'
    assert data['email'] == 'guest@example.com'

    stored = await db_ops.get_all(Collections.REGISTRATIONS)
    assert len(stored) == 1
    assert stored[0]['details']['Team Name']['value'] == 'Alpha'


@pytest.mark.asyncio
async def test_multipart_submission_with_file(client: AsyncClient, notice: dict, upload_dir: str):
    response = await client.post(
        '/api/admin/registrations',
        data={**_base(notice), 'name': 'Ada', 'email': 'ada@example.com',
              'team': 'Alpha', 'age': '21', 'track': 'AI', 'size': '3'},
        files={'cv': ('resume.pdf', b'%PDF-1.4 test', 'application/pdf')},
    )

    assert response.status_code == 201
    data = response.json()
    assert data['name'] == 'Ada'
    assert data['noticeId'] == notice['_id']
    details = data['details']
    assert details['team'] == {'kind': 'text', 'value': 'Alpha'}
    assert details['age'] == {'kind': 'text', 'value': '21'}
    assert details['track'] == {'kind': 'choice', 'value': 'AI'}
    assert details['cv']['kind'] == 'file'
    assert details['cv']['filename'] == 'resume.pdf'
    assert details['cv']['path'].startswith('/uploads/')
    assert details['cv']['path'].endswith('.pdf')

    stored_path = os.path.join(upload_dir, os.path.basename(details['cv']['path']))
    with open(stored_path, 'rb') as fh:
        assert fh.read() == b'%PDF-1.4 test'


@pytest.mark.asyncio
async def test_event_defaults_to_notice_title(client: AsyncClient, notice: dict):
    response = await client.post(
        '/api/admin/registrations',
        data={'noticeId': notice['_id'], 'team': 'Alpha'},
    )
    assert response.status_code == 201
    assert response.json()['event'] == 'Annual Hackathon'


@pytest.mark.asyncio
async def test_duplicate_submissions_create_duplicate_rows(client: AsyncClient, notice: dict):
    for _ in range(2):
        response = await client.post(
            '/api/admin/registrations', data={**_base(notice), 'team': 'Alpha'}
        )
        assert response.status_code == 201

    assert await db_ops.count(Collections.REGISTRATIONS) == 2


@pytest.mark.asyncio
async def test_oversized_file_rejected_and_not_written(client: AsyncClient, notice: dict, upload_dir: str):
    before = set(os.listdir(upload_dir))

    response = await client.post(
        '/api/admin/registrations',
        data={**_base(notice), 'team': 'Alpha'},
        files={'cv': ('resume.pdf', b'x' * (1024 * 1024 + 1), 'application/pdf')},
    )

    assert response.status_code == 400
    assert response.json()['detail']['errors'] == {'cv': 'File size must be less than 1 MB'}
    assert set(os.listdir(upload_dir)) == before
    assert await db_ops.count(Collections.REGISTRATIONS) == 0


@pytest.mark.asyncio
async def test_wrong_file_type_rejected(client: AsyncClient, notice: dict):
    response = await client.post(
        '/api/admin/registrations',
        data={**_base(notice), 'team': 'Alpha'},
        files={'cv': ('photo.png', b'png', 'image/png')},
    )
    assert response.status_code == 400
    assert response.json()['detail']['errors'] == {'cv': 'Allowed types: pdf'}


@pytest.mark.asyncio
async def test_required_and_option_checks(client: AsyncClient, notice: dict):
    response = await client.post(
        '/api/admin/registrations',
        data={**_base(notice), 'track': 'Hardware'},
    )

    assert response.status_code == 400
    errors = response.json()['detail']['errors']
    assert errors['team'] == 'This field is required'
    assert 'track' in errors


@pytest.mark.asyncio
async def test_closed_notice_refuses_submissions(client: AsyncClient, admin_headers: dict, notice: dict):
    await client.patch(
        f"/api/admin/notices/{notice['_id']}",
        json={'acceptingResponses': False},
        headers=admin_headers,
    )

    response = await client.post(
        '/api/admin/registrations', data={**_base(notice), 'team': 'Alpha'}
    )

    assert response.status_code == 403
    assert await db_ops.count(Collections.REGISTRATIONS) == 0


@pytest.mark.asyncio
async def test_unknown_notice(client: AsyncClient):
    response = await client.post(
        '/api/admin/registrations',
        data={'noticeId': '65f000000000000000000000', 'team': 'Alpha'},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_json_body_not_accepted(client: AsyncClient):
    response = await client.post('/api/admin/registrations', json={'name': 'Ada'})
    assert response.status_code == 415


@pytest.mark.asyncio
async def test_listing_requires_admin(client: AsyncClient):
    response = await client.get('/api/admin/registrations')
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_listing_filtered_by_notice(client: AsyncClient, admin_headers: dict, notice: dict):
    await client.post('/api/admin/registrations', data={**_base(notice), 'team': 'Alpha'})
    await client.post('/api/admin/registrations', data={**_base(notice), 'team': 'Beta'})
    await client.post('/api/admin/registrations', data={'event': 'Other', 'Team Name': 'Gamma'})

    all_regs = await client.get('/api/admin/registrations', headers=admin_headers)
    filtered = await client.get(
        '/api/admin/registrations', params={'noticeId': notice['_id']}, headers=admin_headers
    )

    assert len(all_regs.json()) == 3
    teams = sorted(r['details']['team']['value'] for r in filtered.json())
    assert teams == ['Alpha', 'Beta']


@pytest.mark.asyncio
async def test_legacy_string_details_are_read_as_text(client: AsyncClient, admin_headers: dict):
    await db_ops.create(Collections.REGISTRATIONS, {
        'name': 'Old', 'email': 'old@example.com', 'event': 'Past',
        'details': {'noticeId': 'abc', 'Team Name': 'Legacy'},
    })

    response = await client.get('/api/admin/registrations', headers=admin_headers)

    assert response.json()[0]['details']['Team Name'] == {'kind': 'text', 'value': 'Legacy'}


@pytest.mark.asyncio
async def test_submit_to_notice_saved_without_field_ids(client: AsyncClient):
    legacy = await db_ops.create(Collections.NOTICES, {
        'title': 'Old notice',
        'content': '<p>Saved before fields had ids</p>',
        'date': datetime.utcnow(),
        'formFields': [{'label': 'Team Name', 'type': 'text', 'required': True}],
    })
    notice_id = str(legacy['_id'])
    shown = (await client.get(f'/api/admin/notices/{notice_id}')).json()
    field_id = shown['formFields'][0]['id']

    response = await client.post(
        '/api/admin/registrations',
        data={'noticeId': notice_id, field_id: 'Alpha'},
    )

    assert response.status_code == 201
    assert response.json()['details'][field_id] == {'kind': 'text', 'value': 'Alpha'}


@pytest.mark.asyncio
async def test_details_sent_as_json_part(client: AsyncClient, notice: dict):
    packed = json.dumps({'noticeId': notice['_id'], 'team': 'Alpha', 'track': 'AI', 'age': 21})

    response = await client.post(
        '/api/admin/registrations',
        data={'name': 'Ada', 'details': packed},
    )

    assert response.status_code == 201
    data = response.json()
    assert data['noticeId'] == notice['_id']
    assert 'details' not in data['details']
    assert 'noticeId' not in data['details']
    assert data['details']['team'] == {'kind': 'text', 'value': 'Alpha'}
    assert data['details']['track'] == {'kind': 'choice', 'value': 'AI'}
    assert data['details']['age'] == {'kind': 'text', 'value': '21'}


@pytest.mark.asyncio
async def test_separate_parts_override_json_details(client: AsyncClient, notice: dict):
    response = await client.post(
        '/api/admin/registrations',
        data={**_base(notice), 'details': json.dumps({'team': 'Packed'}), 'team': 'Loose'},
    )

    assert response.status_code == 201
    assert response.json()['details']['team']['value'] == 'Loose'


@pytest.mark.asyncio
@pytest.mark.parametrize('packed', ['not json', '["a", "b"]', '{"team": {"nested": true}}'])
async def test_malformed_json_details_rejected(client: AsyncClient, packed: str):
    response = await client.post(
        '/api/admin/registrations', data={'event': 'Open Day', 'details': packed}
    )

    assert response.status_code == 400
    assert await db_ops.count(Collections.REGISTRATIONS) == 0


@pytest.mark.asyncio
async def test_stored_files_removed_when_insert_fails(notice: dict, upload_dir: str, monkeypatch):
    async def failing_create(collection, document):
        raise RuntimeError('database unavailable')

    monkeypatch.setattr(db_ops, 'create', failing_create)
    os.makedirs(upload_dir, exist_ok=True)
    before = set(os.listdir(upload_dir))
    form = FormData([
        ('noticeId', notice['_id']),
        ('team', 'Alpha'),
        ('cv', UploadFile(
            file=io.BytesIO(b'%PDF-1.4 test'),
            filename='resume.pdf',
            headers=Headers({'content-type': 'application/pdf'}),
        )),
    ])

    with pytest.raises(RuntimeError):
        await ingest_submission(form)

    assert set(os.listdir(upload_dir)) == before
