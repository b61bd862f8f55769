"""
Desk session: one operator's roll snapshot, search state, editor draft and
pending dialogs

The session is the single owner of mutable desk state. Store-mutating round
trips are strictly sequential: a busy flag refuses a new fetch, save or delete
while one is outstanding.
"""
import threading
import uuid
from collections import OrderedDict
from collections.abc import Callable
from contextlib import contextmanager
from datetime import date

from voter_desk.services.base_service import BaseService
from voter_desk.services.exceptions import (
    ConflictError,
    DuplicateIdentityError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from voter_desk.services.extraction_service import FieldExtractionService
from voter_desk.services.gateway_service import PersistenceGateway
from voter_desk.services.image_service import ImageIntakeService
from voter_desk.services.roll_service import RecordStore, SearchMode, SearchState
from voter_desk.shared import messages
from voter_desk.shared.date_utils import DEFAULT_REFERENCE_DATE, calculate_age, normalize_dob
from voter_desk.shared.models import GENDER_OPTIONS, RECORD_FIELDS, RemovalReason, VoterRecord


# The record code is the key and the computed age is derived from dob
EDITABLE_FIELDS = tuple(f for f in RECORD_FIELDS if f not in ('svn', 'calculated_age'))
IDENTITY_NUMBER_LENGTH = 12
DEFAULT_CODE_PREFIX = 'SUR'


def clean_identity_number(value: str) -> str:
    """Digits only, at most twelve"""
    return ''.join(ch for ch in (value or '') if ch.isdigit())[:IDENTITY_NUMBER_LENGTH]


class DeskSession(BaseService):
    """Application state for one operator at the desk"""

    def __init__(self, gateway: PersistenceGateway = None,
                 image_service: ImageIntakeService = None,
                 extraction_service: FieldExtractionService = None,
                 reference_date: date = None, code_prefix: str = None):
        super().__init__()
        self.gateway = gateway or PersistenceGateway()
        self.images = image_service or ImageIntakeService()
        self.extractor = extraction_service or FieldExtractionService()
        self.reference_date = reference_date or self.config_value('AGE_REFERENCE_DATE', DEFAULT_REFERENCE_DATE)
        if code_prefix is None:
            code_prefix = self.config_value('CODE_SEARCH_PREFIX', DEFAULT_CODE_PREFIX)
        self.code_prefix = code_prefix

        self.records = RecordStore()
        self.search = SearchState()
        self.draft: VoterRecord | None = None
        self.pending_warning: VoterRecord | None = None
        self.busy = False
        self.loaded = False
        self._lock = threading.Lock()

    @contextmanager
    def _round_trip(self):
        if not self._lock.acquire(blocking=False):
            raise ConflictError(messages.BUSY)
        try:
            if self.busy:
                raise ConflictError(messages.BUSY)
            self.busy = True
            try:
                yield
            finally:
                self.busy = False
        finally:
            self._lock.release()

    def load(self) -> int:
        """Populate the snapshot from the roll store"""
        with self._round_trip():
            self.records.replace(self.gateway.fetch_all())
        self.loaded = True
        return len(self.records)

    # Search state

    def switch_mode(self, mode: str) -> None:
        """Change search mode; clears query, filters and the editor"""
        mode = SearchMode(mode)
        query = self.code_prefix if mode == SearchMode.SVN else ""
        self.search.reset(mode, query)
        self.clear_editor()

    def set_query(self, query: str) -> None:
        self.search.query = query or ""

    def apply_filters(self, booth: str, ward: str, house: str) -> None:
        self.search.apply_filters(booth, ward, house)

    @property
    def booth_options(self) -> list[str]:
        return self.records.booth_options()

    @property
    def ward_options(self) -> list[str]:
        return self.records.ward_options(self.search.booth)

    @property
    def house_options(self) -> list[str]:
        return self.records.house_options(self.search.booth, self.search.ward)

    @property
    def results(self) -> list[VoterRecord]:
        return self.records.search(self.search)

    # Editor draft

    def select_record(self, svn: str) -> VoterRecord:
        """Load a copy of the record into the editor"""
        record = self.records.find(svn)
        if record is None:
            raise NotFoundError(messages.RECORD_NOT_FOUND)
        draft = record.copy()
        # date inputs only carry ISO values
        draft.dob = normalize_dob(draft.dob) or draft.dob
        draft.calculated_age = calculate_age(draft.dob, self.reference_date)
        self.draft = draft
        return draft

    def _require_draft(self) -> VoterRecord:
        if self.draft is None:
            raise ValidationError(messages.NO_DRAFT)
        return self.draft

    def edit_field(self, field: str, value: str) -> None:
        """Change one draft field; a dob edit also recomputes the computed age"""
        draft = self._require_draft()
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Field {field!r} cannot be edited")

        value = value or ""
        if field == 'aadhaar':
            value = clean_identity_number(value)
        elif field == 'gender' and value and value not in dict(GENDER_OPTIONS):
            raise ValidationError(f"Unknown gender code {value!r}")
        elif field == 'dob':
            value = normalize_dob(value) or value.strip()

        setattr(draft, field, value)
        if field == 'dob':
            draft.calculated_age = calculate_age(value, self.reference_date)

    def update_draft(self, values: dict) -> None:
        """Apply the changed fields of a submitted editor form"""
        draft = self._require_draft()
        for field in EDITABLE_FIELDS:
            if field in values and values[field] != getattr(draft, field):
                self.edit_field(field, values[field])

    def clear_editor(self) -> None:
        self.draft = None

    def attach_image(self, image_bytes: bytes) -> str:
        draft = self._require_draft()
        draft.aadhaar_image = self.images.encode(image_bytes)
        return draft.aadhaar_image

    def extract_fields(self, image_bytes: bytes) -> dict:
        """Pre-fill identity number and dob from a photo

        On failure the draft is left as it was and ExtractionError propagates.
        """
        self._require_draft()
        fields = self.extractor.extract_fields(image_bytes)
        for field, value in fields.items():
            self.edit_field(field, value)
        return fields

    # Saving and removal

    def acknowledge_warning(self) -> None:
        self.pending_warning = None

    def save(self) -> bool:
        """
        Submit the whole draft as a full-row overwrite.

        Raises before any network call when a warning is pending, the photo is
        over the size ceiling, or another record holds the identity number.
        Returns whether the snapshot was refreshed afterwards.
        """
        draft = self._require_draft()
        if self.pending_warning is not None:
            raise ConflictError(messages.WARNING_PENDING)

        self.images.check_size(draft.aadhaar_image)

        duplicate = self.records.find_duplicate_identity(draft)
        if duplicate is not None:
            self.pending_warning = duplicate
            self.logger.info(f"Save of {draft.svn} held: identity number used by {duplicate.svn}")
            raise DuplicateIdentityError(duplicate)

        with self._round_trip():
            self.gateway.upsert(draft.copy())
        self.clear_editor()
        return self._refresh_after_write()

    def delete(self, reason: str) -> bool:
        """Move the draft's record to the removed log; returns whether the snapshot was refreshed"""
        draft = self._require_draft()
        try:
            reason = RemovalReason.parse(reason)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        with self._round_trip():
            self.gateway.soft_delete(draft, reason)
        self.clear_editor()
        return self._refresh_after_write()

    def _refresh_after_write(self) -> bool:
        try:
            self.load()
        except ServiceError as e:
            self.logger.warning(f"Snapshot refresh after write failed: {e}")
            return False
        return True


class DeskRegistry:
    """Desk sessions keyed by an id kept in the operator's cookie"""

    def __init__(self, max_sessions: int = 100):
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, DeskSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def get(self, session_id: str | None) -> DeskSession | None:
        desk = self._sessions.get(session_id) if session_id else None
        if desk is not None:
            self._sessions.move_to_end(session_id)
        return desk

    def get_or_create(self, session_id: str, factory: Callable[[], DeskSession]) -> DeskSession:
        desk = self.get(session_id)
        if desk is None:
            desk = factory()
            self._sessions[session_id] = desk
            while len(self._sessions) > self.max_sessions:
                self._sessions.popitem(last=False)
        return desk

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
