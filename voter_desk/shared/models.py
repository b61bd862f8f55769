"""
Shared data models for voter roll records
"""

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum


class RemovalReason(str, Enum):
    """Why a person was removed from the active roll"""
    MARRIAGE = 'शादी'
    DEATH = 'मृत्यु'
    DUPLICATE = 'डुप्लीकेट'
    MIGRATION = 'पलायन'

    @classmethod
    def parse(cls, value: str) -> 'RemovalReason':
        """Accept either the literal reason or the enum member name"""
        value = (value or '').strip()
        for reason in cls:
            if value == reason.value or value.upper() == reason.name:
                return reason
        raise ValueError(f"Unknown removal reason: {value!r}")


DEFAULT_REMOVAL_REASON = RemovalReason.MARRIAGE

GENDER_OPTIONS = [
    ('म', 'महिला'),
    ('पु', 'पुरुष'),
    ('अन्य', 'अन्य'),
]

# Attribute name -> key used on the wire by the scripting endpoint
WIRE_KEYS = {
    'booth_no': 'boothNo',
    'ward_no': 'wardNo',
    'voter_serial': 'voterSerial',
    'house_no': 'houseNo',
    'svn': 'svn',
    'voter_name': 'voterName',
    'relative_name': 'relativeName',
    'gender': 'gender',
    'age': 'age',
    'aadhaar': 'aadhaar',
    'dob': 'dob',
    'calculated_age': 'calculatedAge',
    'aadhaar_image': 'aadhaarImage',
}

# Column labels of the roll sheet, keyed by wire key
SHEET_HEADERS = {
    'boothNo': 'बूथ संख्या',
    'wardNo': 'वार्ड संख्या',
    'voterSerial': 'मतदाता क्रमांक',
    'houseNo': 'मकान नं०',
    'svn': 'SVN',
    'voterName': 'निर्वाचक का नाम',
    'relativeName': 'पिता/पति/माता का नाम',
    'gender': 'लिंग',
    'age': 'आयु',
    'aadhaar': 'आधार संख्या',
    'dob': 'जन्म तिथि',
    'calculatedAge': 'उम्र',
    'aadhaarImage': 'आधार कार्ड फोटो',
}


def _as_text(value) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class VoterRecord:
    """One row of the voter roll; every field is text, absent fields are empty"""
    svn: str
    booth_no: str = ""
    ward_no: str = ""
    house_no: str = ""
    voter_serial: str = ""
    voter_name: str = ""
    relative_name: str = ""
    gender: str = ""
    age: str = ""
    aadhaar: str = ""
    dob: str = ""
    calculated_age: str = ""
    aadhaar_image: str = ""
    row_id: int | None = None

    @classmethod
    def from_wire(cls, data: dict) -> 'VoterRecord':
        """Build a record from a wire dictionary, tolerating missing keys"""
        values = {attr: _as_text(data.get(key)) for attr, key in WIRE_KEYS.items()}
        row_id = data.get('rowId')
        try:
            values['row_id'] = int(row_id) if row_id not in (None, '') else None
        except (TypeError, ValueError):
            values['row_id'] = None
        return cls(**values)

    @classmethod
    def from_sheet_row(cls, row: dict) -> 'VoterRecord':
        """Build a record from a row keyed by sheet labels or wire keys"""
        labels = {label: key for key, label in SHEET_HEADERS.items()}
        wire = {}
        for column, value in row.items():
            if column is None:
                continue
            column = column.strip()
            wire[labels.get(column, column)] = value
        return cls.from_wire(wire)

    def to_wire(self, include_row_id: bool = False) -> dict:
        """Wire dictionary carrying the full record"""
        data = {key: _as_text(getattr(self, attr)) for attr, key in WIRE_KEYS.items()}
        if include_row_id and self.row_id is not None:
            data['rowId'] = self.row_id
        return data

    def copy(self) -> 'VoterRecord':
        return replace(self)

    def as_dict(self) -> dict:
        return asdict(self)


RECORD_FIELDS = tuple(f.name for f in fields(VoterRecord) if f.name != 'row_id')
