"""
Repository layer for data access
"""

from .roll_repository import RollRepository


__all__ = [
    'RollRepository'
]
