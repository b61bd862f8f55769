"""
Operator desk: search the roll, edit a record, attach a photo, remove a record
"""
from io import BytesIO

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, send_file, session, url_for

from voter_desk.services.desk_service import DeskSession
from voter_desk.services.exceptions import ServiceError, ValidationError
from voter_desk.services.image_service import decode_data_url, download_filename
from voter_desk.services.roll_service import SearchMode
from voter_desk.services.service_utils import handle_service_errors
from voter_desk.shared import messages
from voter_desk.shared.date_utils import normalize_dob
from voter_desk.shared.logging_config import get_project_logger
from voter_desk.shared.models import DEFAULT_REMOVAL_REASON, GENDER_OPTIONS, RemovalReason


logger = get_project_logger(__name__)

desk = Blueprint('desk', __name__)


def current_desk() -> DeskSession:
    """The operator's desk session, created and loaded on first use"""
    registry = current_app.extensions['voter_desk']
    desk_id = session.get('desk_id')
    existing = registry.get(desk_id)
    if existing is not None:
        return existing

    if not desk_id:
        desk_id = registry.new_id()
        session['desk_id'] = desk_id
    created = registry.get_or_create(desk_id, DeskSession)
    try:
        count = created.load()
        logger.info(f"Desk session {desk_id[:8]} loaded {count} records")
    except ServiceError as e:
        logger.error(f"Initial roll load failed: {e}")
        flash(str(e), 'error')
        # the next request starts over with a fresh load
        registry.discard(desk_id)
    return created


def _back():
    return redirect(url_for('desk.index'))


def _uploaded_bytes(field: str) -> bytes:
    upload = request.files.get(field)
    if upload is None or not upload.filename:
        raise ValidationError(messages.IMAGE_UNREADABLE)
    return upload.read()


@desk.route('/')
def index():
    """Search controls, results, and the editor"""
    operator = current_desk()
    draft = operator.draft
    stored = operator.records.find(draft.svn) if draft else None
    return render_template(
        'desk/index.html',
        desk=operator,
        modes=SearchMode,
        results=operator.results,
        draft=draft,
        is_update=bool(stored and stored.aadhaar),
        dob_is_iso=bool(draft and normalize_dob(draft.dob) == draft.dob),
        gender_options=GENDER_OPTIONS,
        removal_reasons=list(RemovalReason),
        default_reason=DEFAULT_REMOVAL_REASON,
        reference_date=operator.reference_date,
    )


@desk.route('/reload', methods=['POST'])
@handle_service_errors()
def reload():
    """Retry the initial load after it failed"""
    operator = current_desk()
    if not operator.loaded:
        operator.load()
    return _back()


@desk.route('/mode/<mode>', methods=['POST'])
def switch_mode(mode):
    try:
        SearchMode(mode)
    except ValueError:
        abort(404)
    current_desk().switch_mode(mode)
    return _back()


@desk.route('/search', methods=['POST'])
def search():
    operator = current_desk()
    if operator.search.mode == SearchMode.SELECTION:
        operator.apply_filters(
            request.form.get('booth', ''),
            request.form.get('ward', ''),
            request.form.get('house', ''),
        )
    else:
        operator.set_query(request.form.get('q', ''))
    return _back()


@desk.route('/records/<svn>/select', methods=['POST'])
@handle_service_errors()
def select_record(svn):
    current_desk().select_record(svn)
    return _back()


@desk.route('/editor/close', methods=['POST'])
def close_editor():
    current_desk().clear_editor()
    return _back()


@desk.route('/editor/save', methods=['POST'])
@handle_service_errors()
def save_record():
    operator = current_desk()
    operator.update_draft(request.form)
    refreshed = operator.save()
    flash(messages.SAVE_SUCCESS, 'success')
    if not refreshed:
        flash(messages.FETCH_FAILED, 'warning')
    return _back()


@desk.route('/editor/apply', methods=['POST'])
@handle_service_errors()
def apply_edits():
    """Keep form edits in the draft without saving"""
    current_desk().update_draft(request.form)
    return _back()


@desk.route('/editor/photo', methods=['POST'])
@handle_service_errors()
def upload_photo():
    operator = current_desk()
    operator.update_draft(request.form)
    operator.attach_image(_uploaded_bytes('photo'))
    return _back()


@desk.route('/editor/extract', methods=['POST'])
@handle_service_errors()
def extract_from_photo():
    """Attach the captured photo and try to pre-fill identity number and dob"""
    operator = current_desk()
    operator.update_draft(request.form)
    image_bytes = _uploaded_bytes('photo')
    operator.attach_image(image_bytes)
    operator.extract_fields(image_bytes)
    flash(messages.EXTRACTION_SUCCESS, 'success')
    return _back()


@desk.route('/editor/photo', methods=['GET'])
def download_photo():
    draft = current_desk().draft
    if draft is None or not draft.aadhaar_image:
        abort(404)
    try:
        mimetype, data = decode_data_url(draft.aadhaar_image)
    except ValidationError:
        abort(404)
    return send_file(
        BytesIO(data),
        mimetype=mimetype,
        as_attachment=True,
        download_name=download_filename(draft.voter_name),
    )


@desk.route('/editor/delete', methods=['POST'])
@handle_service_errors()
def delete_record():
    operator = current_desk()
    refreshed = operator.delete(request.form.get('reason', DEFAULT_REMOVAL_REASON.value))
    flash(messages.DELETE_SUCCESS, 'success')
    if not refreshed:
        flash(messages.FETCH_FAILED, 'warning')
    return _back()


@desk.route('/warning/ack', methods=['POST'])
def acknowledge_warning():
    current_desk().acknowledge_warning()
    return _back()
