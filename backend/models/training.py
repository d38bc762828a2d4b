"""
In-memory domain model for the training matrix.

This module defines the Part catalog, the Operator set and the layout struct
describing where those live in the source grid. Nothing here is persisted;
a TrainingModel lives for as long as the process (or CLI invocation) that
built it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from backend.models.errors import ConfigurationError


def canonical_name(name: Optional[str]) -> str:
    """Lookup key for an operator name: trimmed and case-folded."""
    return (name or '').strip().casefold()


@dataclass(frozen=True)
class LayoutConfig:
    """
    Fixed offsets of the training spreadsheet (all zero-based).

    The defaults match the plant's export: header row 13 in Excel, part data
    from row 14, operator columns Q through AM.
    """
    header_row_index: int = 12
    first_data_row_index: int = 13
    operator_col_start: int = 16
    operator_col_end: int = 38

    family_col: int = 1
    part_number_col: int = 2
    common_name_col: int = 3
    description_col: int = 4
    status_col: int = 7

    def validate(self) -> None:
        """Raise ConfigurationError if the offsets cannot describe a grid."""
        offsets = {
            'header_row_index': self.header_row_index,
            'first_data_row_index': self.first_data_row_index,
            'operator_col_start': self.operator_col_start,
            'operator_col_end': self.operator_col_end,
            'family_col': self.family_col,
            'part_number_col': self.part_number_col,
            'common_name_col': self.common_name_col,
            'description_col': self.description_col,
            'status_col': self.status_col,
        }
        negative = [name for name, value in offsets.items() if value < 0]
        if negative:
            raise ConfigurationError(f"Layout offsets must not be negative: {', '.join(negative)}")

        if self.operator_col_end < self.operator_col_start:
            raise ConfigurationError(
                f"Operator columns end ({self.operator_col_end}) before they start "
                f"({self.operator_col_start})"
            )

        if self.first_data_row_index <= self.header_row_index:
            raise ConfigurationError(
                f"First data row ({self.first_data_row_index}) must come after the "
                f"header row ({self.header_row_index})"
            )

    @property
    def operator_columns(self) -> range:
        return range(self.operator_col_start, self.operator_col_end + 1)


@dataclass
class Part:
    """A catalog item identified by its part number."""
    part_number: str
    family: str = ''
    common_name: str = ''
    description: str = ''
    status: str = ''

    def to_dict(self) -> dict:
        return {
            'part_number': self.part_number,
            'family': self.family,
            'common_name': self.common_name,
            'description': self.description,
            'status': self.status,
        }


@dataclass
class Operator:
    """A named worker with per-part training levels (part number -> level)."""
    name: str
    trainings: Dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return canonical_name(self.name)

    def get_level(self, part_number: str) -> Optional[str]:
        return self.trainings.get(part_number)

    def set_level(self, part_number: str, level: str) -> None:
        self.trainings[part_number] = level


@dataclass
class TrainingModel:
    """
    The Part catalog plus the Operator set.

    Parts keep input order. Operators are keyed by their canonical name so
    that two names differing only in case or surrounding whitespace can never
    coexist; the stored Operator keeps the original display casing.
    """
    parts: Dict[str, Part] = field(default_factory=dict)
    operators: Dict[str, Operator] = field(default_factory=dict)
    source_name: Optional[str] = None
    loaded_at: datetime = field(default_factory=datetime.utcnow)

    def get_part(self, part_number: Optional[str]) -> Optional[Part]:
        return self.parts.get((part_number or '').strip())

    def find_operator(self, name: Optional[str]) -> Optional[Operator]:
        return self.operators.get(canonical_name(name))

    def register_part(self, part: Part) -> bool:
        """Add a part unless its number is already known. Returns True if added."""
        if part.part_number in self.parts:
            return False
        self.parts[part.part_number] = part
        return True

    def append_operator(self, operator: Operator) -> None:
        self.operators[operator.key] = operator

    @property
    def part_list(self) -> List[Part]:
        return list(self.parts.values())

    @property
    def operator_list(self) -> List[Operator]:
        return list(self.operators.values())

    @property
    def training_count(self) -> int:
        return sum(len(op.trainings) for op in self.operators.values())

    @property
    def unknown_part_training_count(self) -> int:
        """Training entries whose part number is not in the catalog."""
        return sum(
            1
            for op in self.operators.values()
            for part_number in op.trainings
            if part_number not in self.parts
        )
