"""
Error taxonomy for the training matrix.

Every error carries a user-facing ``message``. Load failures are raised to the
caller; mutation failures are converted into failed ``OperationResult`` objects
by the service layer.
"""


class TrainingMatrixError(Exception):
    """Base class for all training matrix errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TrainingMatrixError):
    """Source grid does not match the configured layout (e.g. header row missing)."""


class ValidationError(TrainingMatrixError):
    """A required field on a mutating call is empty."""


class DuplicateError(TrainingMatrixError):
    """An operator with the same case-insensitive name already exists."""


class UnknownPartError(TrainingMatrixError):
    """Part number is not registered in the catalog."""


class UnknownOperatorError(TrainingMatrixError):
    """Operator does not exist and may not be created."""


class FileReadError(TrainingMatrixError):
    """Uploaded or local file cannot be read as a spreadsheet (corrupt or not a workbook)."""
