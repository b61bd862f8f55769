"""
SQLAlchemy models for the local roll store: the active roll and the removed log
"""

from datetime import UTC, datetime

from voter_desk.shared.models import WIRE_KEYS, VoterRecord

from . import db


class RecordColumnsMixin:
    """Columns shared by active and removed rows; every value is text"""
    booth_no = db.Column(db.String(32), nullable=False, default='')
    ward_no = db.Column(db.String(32), nullable=False, default='')
    voter_serial = db.Column(db.String(32), nullable=False, default='')
    house_no = db.Column(db.String(64), nullable=False, default='')
    svn = db.Column(db.String(64), nullable=False, index=True)
    voter_name = db.Column(db.String(255), nullable=False, default='')
    relative_name = db.Column(db.String(255), nullable=False, default='')
    gender = db.Column(db.String(16), nullable=False, default='')
    age = db.Column(db.String(16), nullable=False, default='')
    aadhaar = db.Column(db.String(32), nullable=False, default='')
    dob = db.Column(db.String(32), nullable=False, default='')
    calculated_age = db.Column(db.String(16), nullable=False, default='')
    aadhaar_image = db.Column(db.Text, nullable=False, default='')

    def to_record(self) -> VoterRecord:
        values = {attr: getattr(self, attr) or '' for attr in WIRE_KEYS}
        return VoterRecord(row_id=self.id, **values)

    def apply_record(self, record: VoterRecord) -> None:
        """Overwrite every column from the record"""
        for attr in WIRE_KEYS:
            setattr(self, attr, getattr(record, attr) or '')


class RollRow(RecordColumnsMixin, db.Model):
    """A person on the active roll"""
    __tablename__ = 'roll_rows'

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    def __repr__(self):
        return f'<RollRow {self.svn}: {self.voter_name}>'


class RemovedRow(RecordColumnsMixin, db.Model):
    """A person moved off the active roll, with the reason"""
    __tablename__ = 'removed_rows'

    id = db.Column(db.Integer, primary_key=True)
    reason = db.Column(db.String(32), nullable=False)
    original_row_id = db.Column(db.Integer)
    removed_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))

    def __repr__(self):
        return f'<RemovedRow {self.svn} ({self.reason})>'
