"""
Repository for the local roll store tables
"""

from voter_desk.database import db
from voter_desk.database.models import RemovedRow, RollRow
from voter_desk.repositories.base_repository import ModelRepository
from voter_desk.services.exceptions import NotFoundError
from voter_desk.shared import messages
from voter_desk.shared.models import RemovalReason, VoterRecord


class RollRepository(ModelRepository[RollRow]):
    """Upsert-by-code and move-to-removed over the active roll"""

    def __init__(self, db_session=None):
        super().__init__(RollRow, db_session)

    def list_records(self) -> list[VoterRecord]:
        return [row.to_record() for row in self.get_all()]

    def find_row(self, svn: str) -> RollRow | None:
        """First active row carrying the code, in row order"""
        def _find():
            return self.db_session.execute(
                db.select(RollRow).where(RollRow.svn == str(svn)).order_by(RollRow.id).limit(1)
            ).scalar_one_or_none()

        return self.safe_query(_find, f"find row {svn}")

    def upsert(self, record: VoterRecord) -> tuple[RollRow, bool]:
        """Overwrite the row with the record's code, or append one; returns (row, created)"""
        row = self.find_row(record.svn)
        created = row is None

        def _upsert():
            target = RollRow() if created else row
            target.apply_record(record)
            if created:
                self.db_session.add(target)
            return target

        result = self.safe_operation(_upsert, f"upsert {record.svn}")
        self.logger.info(f"{'Appended' if created else 'Updated'} roll row {record.svn}")
        return result, created

    def move_to_removed(self, svn: str, reason: RemovalReason) -> RemovedRow:
        """Copy the row into the removed log with the reason, then drop it from the roll"""
        row = self.find_row(svn)
        if row is None:
            raise NotFoundError(messages.MEMBER_NOT_FOUND)

        def _move():
            removed = RemovedRow(reason=RemovalReason(reason).value, original_row_id=row.id)
            removed.apply_record(row.to_record())
            self.db_session.add(removed)
            self.db_session.delete(row)
            return removed

        removed = self.safe_operation(_move, f"remove {svn}")
        self.logger.info(f"Moved roll row {svn} to removed log ({removed.reason})")
        return removed

    def removed_records(self) -> list[RemovedRow]:
        def _removed():
            return self.db_session.execute(
                db.select(RemovedRow).order_by(RemovedRow.id)
            ).scalars().all()

        return self.safe_query(_removed, "list removed rows")
