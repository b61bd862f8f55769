"""
Tests for the local roll store repository
"""

import pytest

from voter_desk.database.models import RemovedRow, RollRow
from voter_desk.repositories.roll_repository import RollRepository
from voter_desk.services.exceptions import NotFoundError
from voter_desk.shared.models import RemovalReason, VoterRecord


@pytest.fixture
def repository(db):
    return RollRepository()


class TestRollRepository:

    def test_upsert_appends_new_code(self, repository):
        row, created = repository.upsert(VoterRecord(svn='SUR001', voter_name='Ram'))

        assert created
        assert row.id is not None
        assert repository.count() == 1

    def test_upsert_overwrites_existing_code(self, repository, db):
        repository.upsert(VoterRecord(svn='SUR001', voter_name='Ram', aadhaar='234567890123'))
        db.session.commit()

        row, created = repository.upsert(VoterRecord(svn='SUR001', voter_name='Ram Kumar'))

        assert not created
        assert repository.count() == 1
        assert row.voter_name == 'Ram Kumar'
        # Full-row overwrite: fields absent from the submission are cleared
        assert row.aadhaar == ''

    def test_upsert_is_idempotent(self, repository):
        record = VoterRecord(svn='SUR001', booth_no='1', voter_name='Ram')
        repository.upsert(record)
        repository.upsert(record)

        assert [r.as_dict() | {'row_id': None} for r in repository.list_records()] == [record.as_dict()]

    def test_find_row_picks_first_in_row_order(self, repository, db):
        db.session.add(RollRow(svn='SUR001', voter_name='First'))
        db.session.add(RollRow(svn='SUR001', voter_name='Second'))
        db.session.flush()

        assert repository.find_row('SUR001').voter_name == 'First'
        assert repository.find_row('SUR404') is None

    def test_list_records_carries_row_ids(self, repository):
        repository.upsert(VoterRecord(svn='SUR001'))
        repository.upsert(VoterRecord(svn='SUR002'))

        records = repository.list_records()
        assert [r.svn for r in records] == ['SUR001', 'SUR002']
        assert all(r.row_id for r in records)

    def test_move_to_removed(self, repository, db):
        repository.upsert(VoterRecord(svn='SUR001', voter_name='Ram', aadhaar='234567890123'))
        repository.upsert(VoterRecord(svn='SUR002', voter_name='Sita'))

        removed = repository.move_to_removed('SUR001', RemovalReason.DEATH)
        db.session.commit()

        assert removed.reason == 'मृत्यु'
        assert removed.aadhaar == '234567890123'
        assert [r.svn for r in repository.list_records()] == ['SUR002']
        assert [r.svn for r in repository.removed_records()] == ['SUR001']
        assert db.session.query(RemovedRow).count() == 1

    def test_move_unknown_code(self, repository):
        with pytest.raises(NotFoundError, match='Member not found'):
            repository.move_to_removed('SUR404', RemovalReason.MARRIAGE)
