"""
Model Store - Ownership of the live training model.

One ModelStore is owned by whoever serves requests (the API process, a CLI
invocation). It hands out the current TrainingModel and swaps in rebuilt
ones whole. Writers hold ``lock`` so that only one of them touches the model
at a time.
"""

import logging
import threading
from typing import Any, Dict, Optional

from backend.models.training import TrainingModel

logger = logging.getLogger(__name__)


class ModelStore:
    """
    Holder for the live TrainingModel.

    Starts with an empty model so that queries before the first import
    return "not found" rather than failing.
    """

    def __init__(self, model: Optional[TrainingModel] = None):
        self._model = model or TrainingModel()
        self._last_import: Dict[str, Any] = {}
        self.lock = threading.RLock()

    @property
    def model(self) -> TrainingModel:
        return self._model

    @property
    def last_import(self) -> Dict[str, Any]:
        """Statistics of the import that produced the current model."""
        return dict(self._last_import)

    @property
    def is_loaded(self) -> bool:
        return self._model.source_name is not None

    def replace(self, model: TrainingModel, stats: Optional[Dict[str, Any]] = None):
        """
        Swap in a fully built model.

        Args:
            model: Freshly built model (never a partially filled one)
            stats: Import statistics to keep alongside it
        """
        with self.lock:
            previous = self._model
            self._model = model
            self._last_import = dict(stats or {})

        logger.info(
            f"Model replaced: {len(model.parts)} parts, {len(model.operators)} operators "
            f"from {model.source_name or '<memory>'} "
            f"(previous: {len(previous.parts)} parts, {len(previous.operators)} operators)"
        )
