"""
Pytest configuration and fixtures for the voter desk
"""

from datetime import date
from io import BytesIO

import pytest
from PIL import Image

from voter_desk import create_app
from voter_desk.database import db as _db
from voter_desk.shared.models import VoterRecord


GATEWAY_URL = 'http://roll.test/exec'


class BaseTestConfig:
    """Test configuration backed by an in-memory SQLite roll store"""
    def __init__(self):
        self.secret_key = 'test-secret-key'
        self.testing = True

        self.sqlalchemy_database_uri = 'sqlite:///:memory:'
        self.sqlalchemy_track_modifications = False

        self.gateway_url = GATEWAY_URL
        self.gateway_timeout = 5

        self.age_reference_date = date(2026, 1, 1)
        self.code_search_prefix = 'SUR'

        self.image_max_width = 600
        self.image_jpeg_quality = 70
        self.image_char_limit = 50000

        self.ocr_enabled = True
        self.ocr_languages = 'eng'


@pytest.fixture
def test_config():
    return BaseTestConfig()


@pytest.fixture
def app(test_config):
    """Fresh app per test so desk sessions never leak between tests"""
    return create_app(test_config)


@pytest.fixture
def db(app):
    """Roll store tables for the duration of one test"""
    with app.app_context():
        _db.create_all()
        try:
            yield _db
        finally:
            _db.session.remove()
            _db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create CLI test runner"""
    return app.test_cli_runner()


@pytest.fixture
def sample_records():
    """A small roll: two households in booth 1, others elsewhere"""
    return [
        VoterRecord(svn='SUR001', booth_no='1', ward_no='2', house_no='10', voter_serial='1',
                    voter_name='Ram Kumar', relative_name='Shyam Lal', gender='पु', age='35',
                    aadhaar='234567890123', dob='1990-06-15'),
        VoterRecord(svn='SUR002', booth_no='1', ward_no='2', house_no='10', voter_serial='2',
                    voter_name='Sita Devi', relative_name='Ram Kumar', gender='म', age='32'),
        VoterRecord(svn='SUR003', booth_no='2', ward_no='1', house_no='3A', voter_serial='7',
                    voter_name='Mohan Singh', relative_name='Gopal Singh', gender='पु', age='50',
                    aadhaar='345678901234'),
        VoterRecord(svn='SUR010', booth_no='10', ward_no='1', house_no='2', voter_serial='12',
                    voter_name='Geeta Sharma', relative_name='Mahesh Sharma', gender='म', age='41'),
    ]


@pytest.fixture
def sample_wire(sample_records):
    """The sample roll as the store's getData reply"""
    return {'success': True, 'data': [r.to_wire() for r in sample_records]}


def make_image_bytes(size=(1200, 800), mode='RGB', fmt='PNG', color='white', exif=None) -> bytes:
    """Encode a plain image in memory"""
    image = Image.new(mode, size, color)
    buffer = BytesIO()
    if exif is not None:
        image.save(buffer, format=fmt, exif=exif)
    else:
        image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image():
    return make_image_bytes


@pytest.fixture
def image_bytes():
    return make_image_bytes()
