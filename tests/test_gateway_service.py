"""
Tests for the persistence gateway against a mocked roll store endpoint
"""

import json

import pytest
import requests
import requests_mock

from voter_desk.services.exceptions import (
    ConnectionError,
    ExternalServiceError,
    GatewayError,
    NotFoundError,
    TimeoutError,
)
from voter_desk.services.gateway_service import PersistenceGateway
from voter_desk.shared import messages
from voter_desk.shared.models import RemovalReason, VoterRecord


URL = 'http://roll.test/exec'


@pytest.fixture
def gateway():
    return PersistenceGateway(base_url=URL, timeout=5)


@pytest.fixture
def record():
    return VoterRecord(svn='SUR001', booth_no='1', voter_name='राम कुमार', aadhaar='234567890123')


class TestFetchAll:

    def test_fetch_all_returns_records(self, gateway, sample_wire):
        with requests_mock.Mocker() as m:
            m.get(URL, json=sample_wire)
            records = gateway.fetch_all()

            assert 'action=getData' in m.last_request.url
            assert [r.svn for r in records] == ['SUR001', 'SUR002', 'SUR003', 'SUR010']
            assert records[0].voter_name == 'Ram Kumar'

    def test_fetch_all_reported_failure(self, gateway):
        with requests_mock.Mocker() as m:
            m.get(URL, json={'success': False, 'error': 'Sheet not found'})
            with pytest.raises(GatewayError, match='Sheet not found'):
                gateway.fetch_all()

    def test_fetch_all_without_record_list(self, gateway):
        with requests_mock.Mocker() as m:
            m.get(URL, json={'success': True})
            with pytest.raises(GatewayError):
                gateway.fetch_all()

    def test_fetch_all_connection_failure(self, gateway):
        with requests_mock.Mocker() as m:
            m.get(URL, exc=requests.exceptions.ConnectionError)
            with pytest.raises(ConnectionError, match=messages.FETCH_FAILED):
                gateway.fetch_all()

    def test_fetch_all_timeout(self, gateway):
        with requests_mock.Mocker() as m:
            m.get(URL, exc=requests.exceptions.ReadTimeout)
            with pytest.raises(TimeoutError):
                gateway.fetch_all()

    def test_fetch_all_http_error(self, gateway):
        with requests_mock.Mocker() as m:
            m.get(URL, status_code=500, text='boom')
            with pytest.raises(ExternalServiceError):
                gateway.fetch_all()

    def test_url_from_app_config(self, app, sample_wire):
        with app.app_context(), requests_mock.Mocker() as m:
            m.get(URL, json=sample_wire)
            assert len(PersistenceGateway().fetch_all()) == 4
            assert PersistenceGateway().timeout == 5


class TestWrites:

    def test_upsert_posts_full_record_as_text_plain(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, json={'success': True})
            gateway.upsert(record)

            sent = m.last_request
            assert sent.headers['Content-Type'] == 'text/plain;charset=utf-8'
            body = json.loads(sent.body.decode('utf-8'))
            assert body['action'] == 'saveMember'
            assert body['data']['svn'] == 'SUR001'
            assert body['data']['voterName'] == 'राम कुमार'
            assert body['data']['aadhaarImage'] == ''

    def test_upsert_follows_redirect(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, status_code=302, headers={'Location': 'http://roll.test/echo'})
            m.get('http://roll.test/echo', json={'success': True})
            gateway.upsert(record)
            assert m.call_count == 2

    def test_non_json_success_reply_counts_as_success(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, text='<html>Moved</html>')
            gateway.upsert(record)

    def test_non_json_error_reply(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, status_code=502, text='<html>Bad gateway</html>')
            with pytest.raises(ExternalServiceError, match=messages.SAVE_FAILED):
                gateway.upsert(record)

    def test_upsert_reported_failure_uses_fallback(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, json={'success': False})
            with pytest.raises(GatewayError, match=messages.SAVE_ERROR):
                gateway.upsert(record)

    def test_upsert_transport_failure(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, exc=requests.exceptions.ConnectionError)
            with pytest.raises(ConnectionError, match=messages.SAVE_FAILED):
                gateway.upsert(record)

    def test_soft_delete_sends_reason(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, json={'success': True})
            gateway.soft_delete(record, RemovalReason.MIGRATION)

            body = json.loads(m.last_request.body.decode('utf-8'))
            assert body['action'] == 'deleteMember'
            assert body['data']['svn'] == 'SUR001'
            assert body['data']['reason'] == 'पलायन'

    def test_soft_delete_unknown_code(self, gateway, record):
        with requests_mock.Mocker() as m:
            m.post(URL, json={'success': False, 'error': 'Member not found'})
            with pytest.raises(NotFoundError):
                gateway.soft_delete(record, RemovalReason.DEATH)

    def test_missing_url(self):
        with pytest.raises(ConnectionError):
            PersistenceGateway().fetch_all()
