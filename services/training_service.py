"""
Training Service - Queries and edits against the live training model.

Mutations never raise for expected failures. They return an OperationResult
whose message is shown to the user as-is, and either apply their whole
effect or none of it.
"""

import logging
from dataclasses import dataclass, asdict
from typing import List, Optional

from backend.models.errors import (
    TrainingMatrixError, ValidationError, DuplicateError,
    UnknownPartError, UnknownOperatorError
)
from backend.models.training import Operator, Part, TrainingModel
from services.model_store import ModelStore
from services.training_import_service import ImportResult

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Outcome of a mutating call."""
    success: bool
    message: str
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str) -> 'OperationResult':
        return cls(success=True, message=message)

    @classmethod
    def failure(cls, exc: TrainingMatrixError) -> 'OperationResult':
        return cls(success=False, message=exc.message, error=type(exc).__name__)

    def to_dict(self) -> dict:
        return asdict(self)


class TrainingService:
    """
    Framework-agnostic query/mutation service.

    Works on whatever model the store currently holds, so a reload is seen by
    the next call without rebuilding the service.
    """

    def __init__(self, store: ModelStore):
        self.store = store

    @property
    def model(self) -> TrainingModel:
        return self.store.model

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_operator(self, name: Optional[str]) -> Optional[Operator]:
        """Case- and whitespace-insensitive lookup. None if there is no such operator."""
        return self.model.find_operator(name)

    def part_exists(self, part_number: Optional[str]) -> bool:
        return self.model.get_part(part_number) is not None

    def get_part(self, part_number: Optional[str]) -> Optional[Part]:
        return self.model.get_part(part_number)

    def operator_names(self) -> List[str]:
        """Operator display names sorted for selection controls."""
        return sorted(
            (op.name for op in self.model.operators.values()),
            key=lambda name: (name.casefold(), name)
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def load_model(self, result: ImportResult):
        """Make a freshly imported model the live one."""
        self.store.replace(result.model, result.stats)

    def _create_operator(self, name: Optional[str]) -> Operator:
        trimmed = (name or '').strip()
        if not trimmed:
            raise ValidationError("Operator name cannot be empty.")

        if self.model.find_operator(trimmed):
            raise DuplicateError("Operator already exists.")

        operator = Operator(name=trimmed)
        self.model.append_operator(operator)
        logger.info(f"Operator added: {trimmed}")
        return operator

    def add_operator(self, name: Optional[str]) -> OperationResult:
        """
        Add an operator with no trainings.

        Fails if the trimmed name is empty or an operator with the same
        case-insensitive name exists.
        """
        with self.store.lock:
            try:
                operator = self._create_operator(name)
            except TrainingMatrixError as e:
                logger.info(f"Add operator rejected: {e.message}")
                return OperationResult.failure(e)

        return OperationResult.ok(f'Operator "{operator.name}" added.')

    def set_training(
        self,
        operator_name: Optional[str],
        part_number: Optional[str],
        level: Optional[str],
        create_operator_if_missing: bool = True,
        allow_unknown_part: bool = False
    ) -> OperationResult:
        """
        Set (or overwrite) an operator's training level for a part.

        Args:
            operator_name: Operator display name, matched case-insensitively
            part_number: Part number, matched exactly after trimming
            level: Free-text training level
            create_operator_if_missing: Create the operator instead of failing
            allow_unknown_part: Accept part numbers missing from the catalog

        Returns:
            OperationResult describing the change or why nothing changed
        """
        op_name = (operator_name or '').strip()
        pn = (part_number or '').strip()
        lvl = (level or '').strip()

        with self.store.lock:
            try:
                if not op_name or not pn or not lvl:
                    raise ValidationError("Operator, part, and level are required.")

                if not allow_unknown_part and not self.part_exists(pn):
                    raise UnknownPartError(f'Part "{pn}" does not exist.')

                operator = self.find_operator(op_name)
                if operator is None:
                    if not create_operator_if_missing:
                        raise UnknownOperatorError(f'Operator "{op_name}" does not exist.')
                    operator = self._create_operator(op_name)
            except TrainingMatrixError as e:
                logger.info(f"Set training rejected: {e.message}")
                return OperationResult.failure(e)

            operator.set_level(pn, lvl)

        logger.info(f"Training set: {operator.name} / {pn} = {lvl}")
        return OperationResult.ok(f"Training updated: {op_name} - {pn} ({lvl})")
