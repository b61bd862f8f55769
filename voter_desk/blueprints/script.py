"""
Local roll store endpoint speaking the scripting web-app wire contract

`GET /exec?action=getData` lists the active roll; `POST /exec` with a JSON
body (sent as text/plain) carries `saveMember` or `deleteMember`.
"""
import json

from flask import Blueprint, request

from voter_desk.database import db
from voter_desk.repositories.roll_repository import RollRepository
from voter_desk.services.exceptions import ServiceError, handle_service_exceptions
from voter_desk.shared.api_response_formatter import APIResponseFormatter
from voter_desk.shared.logging_config import get_project_logger
from voter_desk.shared.models import RemovalReason, VoterRecord


logger = get_project_logger(__name__)

script = Blueprint('script', __name__)


@handle_service_exceptions(logger)
def _list_records() -> list[dict]:
    return [record.to_wire(include_row_id=True) for record in RollRepository().list_records()]


@handle_service_exceptions(logger)
def _save_member(data: dict) -> None:
    record = VoterRecord.from_wire(data)
    if not record.svn.strip():
        raise KeyError('svn')
    try:
        RollRepository().upsert(record)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


@handle_service_exceptions(logger)
def _delete_member(data: dict) -> None:
    svn = str(data.get('svn') or '').strip()
    if not svn:
        raise KeyError('svn')
    reason = RemovalReason.parse(data.get('reason') or '')
    try:
        RollRepository().move_to_removed(svn, reason)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


@script.route('/exec', methods=['GET'])
def get_action():
    """Read-only actions"""
    action = request.args.get('action')
    if action != 'getData':
        return 'Invalid Action', 200, {'Content-Type': 'text/plain; charset=utf-8'}

    try:
        records = _list_records()
    except ServiceError as e:
        return APIResponseFormatter.error(str(e))
    return APIResponseFormatter.success(records)


@script.route('/exec', methods=['POST'])
def post_action():
    """Writing actions; failures are reported in the body"""
    try:
        body = json.loads(request.get_data(as_text=True) or '')
    except ValueError as e:
        logger.warning(f"Malformed roll store request: {e}")
        return APIResponseFormatter.error(f"Malformed request: {e}")

    if not isinstance(body, dict):
        return APIResponseFormatter.error('Malformed request')

    action = body.get('action')
    data = body.get('data') or {}
    if not isinstance(data, dict):
        return APIResponseFormatter.error('Malformed request data')

    try:
        if action == 'saveMember':
            _save_member(data)
        elif action == 'deleteMember':
            _delete_member(data)
        else:
            return APIResponseFormatter.error('Invalid Action')
    except ServiceError as e:
        return APIResponseFormatter.error(str(e))

    return APIResponseFormatter.success()
