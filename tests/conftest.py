"""
Noticeboard - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

# Set testing environment before the app reads its settings
TEST_ROOT = tempfile.mkdtemp(prefix="noticeboard-tests-")
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['MASTER_KEY'] = 'test-master-key'
os.environ['UPLOAD_DIR'] = os.path.join(TEST_ROOT, 'uploads')
os.environ['SESSION_FILE'] = os.path.join(TEST_ROOT, 'session.json')
os.environ['TIMEZONE'] = 'UTC'

from noticeboard.main import app
from noticeboard.config.database import db_config, Collections
from noticeboard.config.settings import settings
from noticeboard.database.db_operations import db_ops
from noticeboard.utils.auth import hash_password, create_access_token

fake = Faker()


@pytest.fixture(autouse=True)
def mongo_db():
    """Fresh in-memory database for each test"""
    mongo_client = AsyncMongoMockClient()
    db_config.database = mongo_client['noticeboard_test']
    yield db_config.database
    db_config.database = None


@pytest.fixture
def upload_dir() -> str:
    return settings.UPLOAD_DIR


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client against the ASGI app"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
async def admin_user() -> dict:
    """Create an admin test user"""
    password = 'adminpassword123'
    admin = await db_ops.create(Collections.ADMINS, {
        'username': fake.user_name(),
        'password': hash_password(password),
    })
    admin['plain_password'] = password
    return admin


@pytest.fixture
def admin_headers(admin_user: dict) -> dict:
    """Generate authentication headers for the admin user"""
    token = create_access_token({
        'sub': str(admin_user['_id']),
        'username': admin_user['username'],
    })
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def notice_payload() -> dict:
    """A notice with one field of every kind the forms support"""
    return {
        'title': 'Annual Hackathon',
        'content': '<p>Register your team.</p>',
        'shortDescription': 'Two days of building',
        'formTitle': 'Team registration',
        'formFields': [
            {'id': 'team', 'label': 'Team Name', 'type': 'text', 'required': True},
            {'id': 'age', 'label': 'Age', 'type': 'number'},
            {'id': 'track', 'label': 'Track', 'type': 'dropdown', 'options': ['Web', 'AI']},
            {'id': 'size', 'label': 'Team Size', 'type': 'radio', 'options': ['2', '3', '4']},
            {
                'id': 'cv',
                'label': 'Resume',
                'type': 'file',
                'fileValidation': {'allowedTypes': ['application/pdf'], 'maxSizeInMB': 1},
            },
        ],
    }


@pytest.fixture
async def notice(client: AsyncClient, admin_headers: dict, notice_payload: dict) -> dict:
    """A stored notice, as returned by the API"""
    response = await client.post('/api/admin/notices', json=notice_payload, headers=admin_headers)
    assert response.status_code == 201
    return response.json()
