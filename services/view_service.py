"""
View Service - Row-sets for the operator and part lookup views.

Views are plain dataclasses recomputed from the live model on every call, so
they always reflect the latest edit. "Not found" and "nothing yet" are
normal view states carried in ``message``, never exceptions.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from backend.models.training import Operator, TrainingModel
from services.level_service import is_trained, priority
from services.model_store import ModelStore

DEFAULT_PAGE_SIZE = 15

NO_OPERATOR_TRAINING = "No training data for this operator yet."
NO_PART_TRAINING = "No operators trained on this part yet."


@dataclass
class PageInfo:
    """Pagination metadata; ``start``/``end`` are 1-based item positions (0 when empty)."""
    total: int
    page: int
    page_size: int
    total_pages: int
    start: int
    end: int
    has_previous: bool
    has_next: bool


def paginate(items: Sequence[Any], page: int, page_size: int) -> Tuple[List[Any], PageInfo]:
    """
    Slice one page out of ``items``.

    The requested page is clamped into [1, total_pages], so page 0 gives the
    first page and anything past the end gives the last one.
    """
    if page_size < 1:
        raise ValueError(f"Page size must be positive, got {page_size}")

    total = len(items)
    total_pages = math.ceil(total / page_size)
    page = min(max(page, 1), max(total_pages, 1))

    offset = (page - 1) * page_size
    page_items = list(items[offset:offset + page_size])

    info = PageInfo(
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        start=offset + 1 if total else 0,
        end=offset + len(page_items),
        has_previous=page > 1,
        has_next=page < total_pages,
    )
    return page_items, info


@dataclass
class OperatorViewRow:
    part_number: str
    common_name: str
    family: str
    description: str
    status: str
    level: str
    trained: bool
    known_part: bool


@dataclass
class OperatorView:
    found: bool
    operator_name: str
    title: str
    trained_count: int = 0
    rows: List[OperatorViewRow] = field(default_factory=list)
    pagination: Optional[PageInfo] = None
    message: Optional[str] = None


@dataclass
class PartViewRow:
    operator_name: str
    level: str
    trained: bool
    priority: int


@dataclass
class PartView:
    found: bool
    part_number: str
    header: str
    common_name: str = ''
    family: str = ''
    status: str = ''
    description: str = ''
    rows: List[PartViewRow] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class OperatorListItem:
    name: str
    trained_count: int
    training_count: int


@dataclass
class ModelSummary:
    loaded: bool
    source_name: Optional[str]
    loaded_at: datetime
    parts: int
    operators: int
    trainings: int
    unknown_part_trainings: int
    last_import: Dict[str, Any] = field(default_factory=dict)


def trained_count(operator: Operator) -> int:
    """Number of the operator's entries whose level counts as trained."""
    return sum(1 for level in operator.trainings.values() if is_trained(level))


class ViewService:
    """Builds the operator and part views from the store's current model."""

    def __init__(self, store: ModelStore, page_size: int = DEFAULT_PAGE_SIZE):
        self.store = store
        self.page_size = page_size

    @property
    def model(self) -> TrainingModel:
        return self.store.model

    def operator_view(self, operator_name: str, page: int = 1) -> OperatorView:
        """
        Paginated training rows for one operator.

        Entries keep the order they were recorded in. Trainings on part
        numbers missing from the catalog are listed with blank part fields.
        """
        name = (operator_name or '').strip()
        operator = self.model.find_operator(name)
        if operator is None:
            return OperatorView(
                found=False,
                operator_name=name,
                title=f'Operator "{name}" not found.',
                message=f'Operator "{name}" not found.'
            )

        rows = []
        for part_number, level in operator.trainings.items():
            part = self.model.get_part(part_number)
            rows.append(OperatorViewRow(
                part_number=part_number,
                common_name=part.common_name if part else '',
                family=part.family if part else '',
                description=part.description if part else '',
                status=part.status if part else '',
                level=level,
                trained=is_trained(level),
                known_part=part is not None,
            ))

        count = sum(1 for row in rows if row.trained)
        page_rows, page_info = paginate(rows, page, self.page_size)

        return OperatorView(
            found=True,
            operator_name=operator.name,
            title=f"Showing training for: {operator.name} - {count} trained part(s)",
            trained_count=count,
            rows=page_rows,
            pagination=page_info,
            message=None if rows else NO_OPERATOR_TRAINING,
        )

    def part_view(self, part_number: str) -> PartView:
        """
        Operators with an entry for one part, best qualified first.

        Sorted by level priority (Trainer 1, Trainer 2, Trained, In Process,
        anything else), then by operator name.
        """
        pn = (part_number or '').strip()
        part = self.model.get_part(pn)
        if part is None:
            return PartView(
                found=False,
                part_number=pn,
                header=f'Part "{pn}" not found.',
                message=f'Part "{pn}" not found.'
            )

        rows = []
        for operator in self.model.operators.values():
            level = operator.get_level(pn)
            if not level:
                continue
            rows.append(PartViewRow(
                operator_name=operator.name,
                level=level,
                trained=is_trained(level),
                priority=priority(level),
            ))

        rows.sort(key=lambda row: (row.priority, row.operator_name.casefold(), row.operator_name))

        return PartView(
            found=True,
            part_number=part.part_number,
            header=f"{part.part_number} - {part.common_name or '(no name)'}",
            common_name=part.common_name,
            family=part.family or '-',
            status=part.status or '-',
            description=part.description,
            rows=rows,
            message=None if rows else NO_PART_TRAINING,
        )

    def operator_list(self) -> List[OperatorListItem]:
        """All operators sorted by name, with their entry counts."""
        operators = sorted(
            self.model.operators.values(),
            key=lambda op: (op.name.casefold(), op.name)
        )
        return [
            OperatorListItem(
                name=op.name,
                trained_count=trained_count(op),
                training_count=len(op.trainings),
            )
            for op in operators
        ]

    def model_summary(self) -> ModelSummary:
        model = self.model
        return ModelSummary(
            loaded=self.store.is_loaded,
            source_name=model.source_name,
            loaded_at=model.loaded_at,
            parts=len(model.parts),
            operators=len(model.operators),
            trainings=model.training_count,
            unknown_part_trainings=model.unknown_part_training_count,
            last_import=self.store.last_import,
        )
