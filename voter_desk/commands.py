"""
Flask CLI commands for the voter desk
"""

import csv
from pathlib import Path

import click

from voter_desk.database import db, init_db
from voter_desk.repositories.roll_repository import RollRepository
from voter_desk.services.exceptions import ServiceError
from voter_desk.services.extraction_service import FieldExtractionService
from voter_desk.services.gateway_service import PersistenceGateway
from voter_desk.services.roll_service import RecordStore, SearchMode, SearchState
from voter_desk.shared.models import RemovalReason, VoterRecord


def _echo_record(record: VoterRecord) -> None:
    click.echo(
        f"{record.svn}\t#{record.voter_serial}\t{record.voter_name}\t{record.relative_name}"
        f"\tबूथ {record.booth_no} / वार्ड {record.ward_no} / मकान {record.house_no}"
    )


def register_commands(app):
    """Register all CLI commands with the Flask app"""

    @app.cli.command('init-db')
    def init_db_command():
        """Create the local roll store tables."""
        init_db()
        click.echo("✅ Roll store tables created")

    @app.cli.command('import-roll')
    @click.argument('csv_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
    @click.option('--verbose', '-v', is_flag=True, help='Print every imported code')
    def import_roll(csv_file, verbose):
        """Load a roll CSV (sheet labels or wire keys as headers) into the local store."""
        repository = RollRepository()
        created = updated = skipped = 0

        with open(csv_file, encoding='utf-8-sig', newline='') as f:
            for row in csv.DictReader(f):
                record = VoterRecord.from_sheet_row(row)
                if not record.svn.strip():
                    skipped += 1
                    continue
                _, was_created = repository.upsert(record)
                if was_created:
                    created += 1
                else:
                    updated += 1
                if verbose:
                    click.echo(f"  {record.svn}")

        db.session.commit()
        click.echo(f"✅ Imported roll: {created} added, {updated} updated, {skipped} skipped")

    @app.cli.command('search')
    @click.option('--name', help='Name or relative name substring')
    @click.option('--svn', help='Record code substring')
    @click.option('--booth', default='', help='Booth number')
    @click.option('--ward', default='', help='Ward number')
    @click.option('--house', default='', help='House number')
    def search(name, svn, booth, ward, house):
        """Search the roll through the remote store."""
        if name:
            state = SearchState(mode=SearchMode.NAME, query=name)
        elif svn:
            state = SearchState(mode=SearchMode.SVN, query=svn)
        else:
            state = SearchState(mode=SearchMode.SELECTION, booth=booth, ward=ward, house=house)

        try:
            store = RecordStore(PersistenceGateway().fetch_all())
        except ServiceError as e:
            click.echo(f"❌ {e}")
            exit(1)

        results = store.search(state)
        for record in results:
            _echo_record(record)
        click.echo(f"परिणाम ({len(results)})")

    @app.cli.command('remove')
    @click.argument('svn')
    @click.option('--reason', required=True,
                  type=click.Choice([r.value for r in RemovalReason] + [r.name for r in RemovalReason],
                                    case_sensitive=False),
                  help='Removal reason')
    def remove(svn, reason):
        """Move a record to the removed log through the remote store."""
        gateway = PersistenceGateway()
        try:
            record = RecordStore(gateway.fetch_all()).find(svn)
            if record is None:
                click.echo(f"❌ Record {svn} not found")
                exit(1)
            gateway.soft_delete(record, RemovalReason.parse(reason))
        except ServiceError as e:
            click.echo(f"❌ {e}")
            exit(1)
        click.echo(f"✅ Removed {svn}")

    @app.cli.command('extract-photo')
    @click.argument('image_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
    def extract_photo(image_file):
        """Read identity number and date of birth from a document photo."""
        try:
            fields = FieldExtractionService().extract_fields(image_file.read_bytes())
        except ServiceError as e:
            click.echo(f"❌ Extraction failed: {e}")
            exit(1)
        click.echo(f"आधार संख्या: {fields.get('aadhaar', '--')}")
        click.echo(f"जन्म तिथि: {fields.get('dob', '--')}")
