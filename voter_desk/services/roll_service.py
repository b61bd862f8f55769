"""
In-memory roll snapshot and the search/filter engine over it

Everything here is a pure function of the record list and the search state;
nothing touches the network.
"""
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from voter_desk.shared.models import VoterRecord


class SearchMode(str, Enum):
    SELECTION = 'selection'
    NAME = 'name'
    SVN = 'svn'


@dataclass
class SearchState:
    """Transient search state for one desk session"""
    mode: SearchMode = SearchMode.SELECTION
    query: str = ""
    booth: str = ""
    ward: str = ""
    house: str = ""

    def reset(self, mode: SearchMode | None = None, query: str = "") -> None:
        if mode is not None:
            self.mode = SearchMode(mode)
        self.query = query
        self.booth = self.ward = self.house = ""

    def select_booth(self, booth: str) -> None:
        self.booth = booth or ""
        self.ward = ""
        self.house = ""

    def select_ward(self, ward: str) -> None:
        self.ward = ward or ""
        self.house = ""

    def select_house(self, house: str) -> None:
        self.house = house or ""

    def apply_filters(self, booth: str, ward: str, house: str) -> None:
        """Apply a submitted filter form; a changed level clears the ones below"""
        booth, ward, house = booth or "", ward or "", house or ""
        if booth != self.booth:
            self.select_booth(booth)
        elif ward != self.ward:
            self.select_ward(ward)
        else:
            self.select_house(house)


_CHUNKS = re.compile(r'(\d+)')
_NUMBER = re.compile(r'-?\d+(?:\.\d+)?')


def natural_key(value: str) -> tuple:
    """Sort key comparing digit runs by value: 2 < 10, 2A < 2B < 10"""
    parts = _CHUNKS.split(value.strip().lower())
    return tuple((0, int(part), '') if part.isdigit() else (1, 0, part) for part in parts if part)


def numeric_key(value: str) -> tuple:
    """Numbers ascending by value, anything non-numeric after them in natural order"""
    if _NUMBER.fullmatch(value.strip()):
        return (0, float(value), ())
    return (1, 0.0, natural_key(value))


def _distinct(values: Iterable[str]) -> set[str]:
    return {value for value in values if value and value.strip()}


def booth_options(records: list[VoterRecord]) -> list[str]:
    return sorted(_distinct(r.booth_no for r in records), key=numeric_key)


def ward_options(records: list[VoterRecord], booth: str) -> list[str]:
    if not booth:
        return []
    return sorted(_distinct(r.ward_no for r in records if r.booth_no == booth), key=numeric_key)


def house_options(records: list[VoterRecord], booth: str, ward: str) -> list[str]:
    if not booth or not ward:
        return []
    houses = _distinct(r.house_no for r in records if r.booth_no == booth and r.ward_no == ward)
    return sorted(houses, key=natural_key)


def filter_by_location(records: list[VoterRecord], booth: str, ward: str, house: str) -> list[VoterRecord]:
    if not booth or not ward or not house:
        return []
    return [r for r in records if r.booth_no == booth and r.ward_no == ward and r.house_no == house]


def search_by_name(records: list[VoterRecord], query: str) -> list[VoterRecord]:
    q = (query or "").strip().casefold()
    if not q:
        return []
    return [r for r in records if q in r.voter_name.casefold() or q in r.relative_name.casefold()]


def search_by_code(records: list[VoterRecord], query: str) -> list[VoterRecord]:
    q = (query or "").strip().upper()
    if not q:
        return []
    return [r for r in records if q in r.svn.upper()]


def filter_records(records: list[VoterRecord], state: SearchState) -> list[VoterRecord]:
    """Active result set for the current mode; no cap on size"""
    if state.mode == SearchMode.SELECTION:
        return filter_by_location(records, state.booth, state.ward, state.house)
    if state.mode == SearchMode.NAME:
        return search_by_name(records, state.query)
    if state.mode == SearchMode.SVN:
        return search_by_code(records, state.query)
    return []


class RecordStore:
    """Client-side copy of the roll, replaced wholesale on every fetch

    Lookups scan the list; rolls are hundreds to low thousands of rows.
    """

    def __init__(self, records: list[VoterRecord] | None = None):
        self._records = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def replace(self, records: list[VoterRecord]) -> None:
        self._records = list(records)

    def find(self, svn: str) -> VoterRecord | None:
        return next((r for r in self._records if r.svn == svn), None)

    def find_duplicate_identity(self, record: VoterRecord) -> VoterRecord | None:
        """Another record (different code) holding the same non-empty identity number"""
        if not record.aadhaar:
            return None
        return next(
            (r for r in self._records if r.aadhaar == record.aadhaar and r.svn != record.svn),
            None,
        )

    def booth_options(self) -> list[str]:
        return booth_options(self._records)

    def ward_options(self, booth: str) -> list[str]:
        return ward_options(self._records, booth)

    def house_options(self, booth: str, ward: str) -> list[str]:
        return house_options(self._records, booth, ward)

    def search(self, state: SearchState) -> list[VoterRecord]:
        return filter_records(self._records, state)
