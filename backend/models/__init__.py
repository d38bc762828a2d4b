"""Models package for the training matrix."""
from backend.models.errors import (
    TrainingMatrixError, ConfigurationError, FileReadError, ValidationError,
    DuplicateError, UnknownPartError, UnknownOperatorError
)
from backend.models.training import (
    LayoutConfig, Part, Operator, TrainingModel, canonical_name
)

__all__ = [
    'TrainingMatrixError', 'ConfigurationError', 'FileReadError', 'ValidationError',
    'DuplicateError', 'UnknownPartError', 'UnknownOperatorError',
    'LayoutConfig', 'Part', 'Operator', 'TrainingModel', 'canonical_name'
]
