"""
API tests for admin registration and login
"""
from datetime import timedelta

import pytest
from faker import Faker
from httpx import AsyncClient

from noticeboard.utils.auth import create_access_token, decode_access_token

fake = Faker()


@pytest.fixture
def credentials() -> dict:
    return {'username': fake.user_name() + 'x', 'password': 'securePassword123!'}


@pytest.mark.asyncio
async def test_register_with_master_key(client: AsyncClient, credentials: dict):
    response = await client.post(
        '/api/auth/register', json={**credentials, 'masterKey': 'test-master-key'}
    )

    assert response.status_code == 201
    data = response.json()
    assert data['username'] == credentials['username']
    assert '_id' in data
    assert 'password' not in data


@pytest.mark.asyncio
async def test_register_wrong_master_key(client: AsyncClient, credentials: dict):
    response = await client.post(
        '/api/auth/register', json={**credentials, 'masterKey': 'guess'}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient, credentials: dict):
    body = {**credentials, 'masterKey': 'test-master-key'}
    await client.post('/api/auth/register', json=body)

    response = await client.post('/api/auth/register', json=body)

    assert response.status_code == 400
    assert 'already exists' in response.json()['detail']


@pytest.mark.asyncio
async def test_login_returns_token(client: AsyncClient, admin_user: dict):
    response = await client.post('/api/auth/login', json={
        'username': admin_user['username'],
        'password': admin_user['plain_password'],
    })

    assert response.status_code == 200
    data = response.json()
    assert data['username'] == admin_user['username']
    assert decode_access_token(data['token'])['sub'] == str(admin_user['_id'])


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, admin_user: dict):
    response = await client.post('/api/auth/login', json={
        'username': admin_user['username'],
        'password': 'wrongpassword',
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_unknown_admin(client: AsyncClient):
    response = await client.post('/api/auth/login', json={'username': 'nobody', 'password': 'x'})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_me(client: AsyncClient, admin_user: dict, admin_headers: dict):
    response = await client.get('/api/auth/me', headers=admin_headers)

    assert response.status_code == 200
    assert response.json()['username'] == admin_user['username']


@pytest.mark.asyncio
async def test_expired_token_rejected(client: AsyncClient, admin_user: dict):
    token = create_access_token(
        {'sub': str(admin_user['_id']), 'username': admin_user['username']},
        expires_delta=timedelta(minutes=-5),
    )

    response = await client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 400
