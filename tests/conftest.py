import os

# Must be set before app.py builds its module-level app
os.environ['FLASK_ENV'] = 'testing'

import pytest
from app import create_app
from extensions import db
from utils.auth import sign_up

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'correct-horse-battery'


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """An app context for tests that call the store directly"""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_user(app):
    with app.app_context():
        user = sign_up(ADMIN_EMAIL, ADMIN_PASSWORD)
        return {'id': user.id, 'email': user.email}


@pytest.fixture
def auth_client(client, admin_user):
    response = client.post('/admin', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert response.status_code == 302
    return client
