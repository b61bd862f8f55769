"""
Persistence gateway for the remote roll store (a scripting web-app endpoint)

The endpoint exposes three operations: fetch every active record, upsert one
record by its code, and move one record to the removed log with a reason.
Request bodies are JSON sent as text/plain so the endpoint sees a simple
request; the endpoint answers with `{success, data?, error?}`.
"""
import json

import requests

from voter_desk.services.base_service import BaseService
from voter_desk.services.exceptions import (
    ConnectionError,
    ExternalServiceError,
    GatewayError,
    NotFoundError,
    TimeoutError,
)
from voter_desk.shared import messages
from voter_desk.shared.models import RemovalReason, VoterRecord


DEFAULT_TIMEOUT = 30


class PersistenceGateway(BaseService):
    """HTTP client for the roll store endpoint"""

    def __init__(self, base_url: str = None, timeout: float = None):
        super().__init__()
        self._base_url = base_url
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        url = self._base_url or self.config_value('GATEWAY_URL')
        if not url:
            raise ConnectionError("Roll store URL is not configured")
        return url

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return self.config_value('GATEWAY_TIMEOUT', DEFAULT_TIMEOUT)

    def fetch_all(self) -> list[VoterRecord]:
        """Fetch the full snapshot of active records"""
        payload = self._get({'action': 'getData'}, messages.FETCH_FAILED)
        self._raise_for_failure(payload, messages.FETCH_ERROR)

        data = payload.get('data')
        if not isinstance(data, list):
            self.logger.error(f"Roll store returned no record list: {payload!r}")
            raise GatewayError(payload.get('error') or messages.FETCH_ERROR)

        records = [VoterRecord.from_wire(item) for item in data if isinstance(item, dict)]
        self.logger.info(f"Fetched {len(records)} records from roll store")
        return records

    def upsert(self, record: VoterRecord) -> None:
        """Create the record, or overwrite the existing record with the same code"""
        payload = self._post(
            {'action': 'saveMember', 'data': record.to_wire()},
            messages.SAVE_FAILED,
        )
        self._raise_for_failure(payload, messages.SAVE_ERROR)
        self.logger.info(f"Saved record {record.svn}")

    def soft_delete(self, record: VoterRecord, reason: RemovalReason) -> None:
        """Move the record to the removed log with the given reason"""
        reason = RemovalReason(reason)
        data = record.to_wire()
        data['reason'] = reason.value
        payload = self._post({'action': 'deleteMember', 'data': data}, messages.DELETE_FAILED)
        self._raise_for_failure(payload, messages.DELETE_ERROR)
        self.logger.info(f"Removed record {record.svn} ({reason.value})")

    def _get(self, params: dict, failure_message: str) -> dict:
        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            self.logger.error(f"Roll store timed out on GET: {e}")
            raise TimeoutError(failure_message) from e
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Roll store GET failed: {e}")
            raise ConnectionError(failure_message) from e

        if not response.ok:
            self.logger.error(f"Roll store GET returned HTTP {response.status_code}")
            raise ExternalServiceError(failure_message)
        return self._parse(response, failure_message)

    def _post(self, body: dict, failure_message: str) -> dict:
        try:
            response = requests.post(
                self.base_url,
                data=json.dumps(body, ensure_ascii=False).encode('utf-8'),
                headers={'Content-Type': 'text/plain;charset=utf-8'},
                allow_redirects=True,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            self.logger.error(f"Roll store timed out on {body['action']}: {e}")
            raise TimeoutError(failure_message) from e
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Roll store {body['action']} failed: {e}")
            raise ConnectionError(failure_message) from e

        return self._parse(response, failure_message)

    def _parse(self, response: requests.Response, failure_message: str) -> dict:
        """Decode the endpoint's JSON reply

        Redirected replies sometimes arrive as HTML. With a successful status
        the write is taken to have gone through.
        """
        try:
            payload = response.json()
        except ValueError:
            if response.ok:
                self.logger.warning("Roll store reply was not JSON, treating as success")
                return {'success': True}
            self.logger.error(f"Unparseable roll store reply (HTTP {response.status_code}): {response.text[:200]}")
            raise ExternalServiceError(failure_message)

        if not isinstance(payload, dict):
            self.logger.error(f"Unexpected roll store reply: {payload!r}")
            raise ExternalServiceError(failure_message)
        return payload

    def _raise_for_failure(self, payload: dict, fallback: str) -> None:
        if payload.get('success'):
            return
        error = payload.get('error') or payload.get('message') or fallback
        self.logger.warning(f"Roll store reported failure: {error}")
        if error == messages.MEMBER_NOT_FOUND:
            raise NotFoundError(error)
        raise GatewayError(error)
