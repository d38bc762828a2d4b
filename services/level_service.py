"""
Level Service - Classification of free-text training levels.

Training levels are not a closed enum: whatever the spreadsheet holds is kept
verbatim and classified on read. "In Process" is a status only and does not
count as trained.
"""

from typing import Optional

TRAINED_LEVELS = frozenset({'trained', 'trainer 1', 'trainer 2'})

# Lower rank sorts first in the part view
LEVEL_PRIORITY = {
    'trainer 1': 1,
    'trainer 2': 2,
    'trained': 3,
    'in process': 4,
}
DEFAULT_PRIORITY = 5

# Choices offered when editing a training entry
TRAINING_LEVELS = ['Trainer 1', 'Trainer 2', 'Trained', 'In Process']


def _normalize(level: Optional[str]) -> str:
    return (level or '').strip().lower()


def is_trained(level: Optional[str]) -> bool:
    """
    Check whether a level counts as trained.

    Comparison is case- and whitespace-insensitive; None and empty strings
    are simply not trained.
    """
    value = _normalize(level)
    if not value:
        return False
    return value in TRAINED_LEVELS


def priority(level: Optional[str]) -> int:
    """
    Sort rank of a level, from 1 (Trainer 1) to 5 (anything unrecognised).
    """
    return LEVEL_PRIORITY.get(_normalize(level), DEFAULT_PRIORITY)
