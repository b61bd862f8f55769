"""
Tests for Flask CLI commands
"""

from unittest.mock import patch

import requests_mock

from voter_desk.repositories.roll_repository import RollRepository
from voter_desk.services.exceptions import ExtractionError


URL = 'http://roll.test/exec'

ROLL_CSV = """बूथ संख्या,वार्ड संख्या,मतदाता क्रमांक,मकान नं०,SVN,निर्वाचक का नाम,पिता/पति/माता का नाम,लिंग,आयु
1,2,1,10,SUR001,Ram Kumar,Shyam Lal,पु,35
1,2,2,10,SUR002,Sita Devi,Ram Kumar,म,32
1,2,3,10,,Blank Code,Nobody,पु,40
1,2,1,10,SUR001,Ram Kumar,Shyam Lal,पु,36
"""


class TestRollCommands:

    def test_init_db(self, runner, db):
        result = runner.invoke(args=['init-db'])

        assert result.exit_code == 0
        assert '✅ Roll store tables created' in result.output

    def test_import_roll(self, runner, db, tmp_path):
        csv_file = tmp_path / 'roll.csv'
        csv_file.write_text(ROLL_CSV, encoding='utf-8-sig')

        result = runner.invoke(args=['import-roll', str(csv_file), '-v'])

        assert result.exit_code == 0, result.output
        assert 'Imported roll: 2 added, 1 updated, 1 skipped' in result.output
        records = RollRepository().list_records()
        assert [r.svn for r in records] == ['SUR001', 'SUR002']
        assert records[0].age == '36'

    def test_import_missing_file(self, runner, db):
        result = runner.invoke(args=['import-roll', 'missing.csv'])
        assert result.exit_code != 0


class TestStoreCommands:

    def test_search_by_name(self, runner, sample_wire):
        with requests_mock.Mocker() as m:
            m.get(URL, json=sample_wire)
            result = runner.invoke(args=['search', '--name', 'ram'])

        assert result.exit_code == 0
        assert 'SUR001' in result.output
        assert 'SUR002' in result.output
        assert 'परिणाम (2)' in result.output

    def test_search_by_location(self, runner, sample_wire):
        with requests_mock.Mocker() as m:
            m.get(URL, json=sample_wire)
            result = runner.invoke(args=['search', '--booth', '2', '--ward', '1', '--house', '3A'])

        assert 'SUR003' in result.output
        assert 'परिणाम (1)' in result.output

    def test_search_store_unreachable(self, runner):
        with requests_mock.Mocker() as m:
            m.get(URL, status_code=503)
            result = runner.invoke(args=['search', '--svn', 'SUR'])

        assert result.exit_code == 1
        assert '❌' in result.output

    def test_remove(self, runner, sample_wire):
        with requests_mock.Mocker() as m:
            m.get(URL, json=sample_wire)
            m.post(URL, json={'success': True})
            result = runner.invoke(args=['remove', 'SUR003', '--reason', 'death'])

            assert result.exit_code == 0, result.output
            assert '✅ Removed SUR003' in result.output
            assert m.last_request.json()['data']['reason'] == 'मृत्यु'

    def test_remove_unknown_code(self, runner, sample_wire):
        with requests_mock.Mocker() as m:
            m.get(URL, json=sample_wire)
            result = runner.invoke(args=['remove', 'SUR999', '--reason', 'शादी'])

        assert result.exit_code == 1
        assert 'not found' in result.output

    def test_remove_rejects_unknown_reason(self, runner):
        result = runner.invoke(args=['remove', 'SUR001', '--reason', 'bored'])
        assert result.exit_code == 2


class TestExtractPhoto:

    @patch('voter_desk.commands.FieldExtractionService')
    def test_extract_photo(self, mock_service_class, runner, tmp_path, image_bytes):
        photo = tmp_path / 'card.png'
        photo.write_bytes(image_bytes)
        mock_service_class.return_value.extract_fields.return_value = {'aadhaar': '234567890123'}

        result = runner.invoke(args=['extract-photo', str(photo)])

        assert result.exit_code == 0
        assert 'आधार संख्या: 234567890123' in result.output
        assert 'जन्म तिथि: --' in result.output

    @patch('voter_desk.commands.FieldExtractionService')
    def test_extract_photo_failure(self, mock_service_class, runner, tmp_path, image_bytes):
        photo = tmp_path / 'card.png'
        photo.write_bytes(image_bytes)
        mock_service_class.return_value.extract_fields.side_effect = ExtractionError('nothing found')

        result = runner.invoke(args=['extract-photo', str(photo)])

        assert result.exit_code == 1
        assert '❌ Extraction failed: nothing found' in result.output
