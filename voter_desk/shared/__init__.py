"""
Shared voter roll models and utilities
"""

from .date_utils import calculate_age, normalize_dob, parse_date
from .models import GENDER_OPTIONS, RemovalReason, VoterRecord


__all__ = [
    'VoterRecord', 'RemovalReason', 'GENDER_OPTIONS',
    'calculate_age', 'normalize_dob', 'parse_date'
]
