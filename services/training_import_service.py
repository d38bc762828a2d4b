"""
Training Import Service - Framework-agnostic spreadsheet import logic.

This module turns a spreadsheet export (CSV or Excel workbook) into a fresh
TrainingModel. Parsing happens in two steps: the file is read into a
row-major grid of strings, then the grid is read at the fixed offsets
described by a LayoutConfig.

The builder never touches a live model. It fills freshly allocated
structures and hands them back once the whole grid has been consumed, so a
failed import cannot leave a half-built catalog behind.
"""

import csv
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from backend.models.errors import ConfigurationError, FileReadError
from backend.models.training import (
    LayoutConfig, Operator, Part, TrainingModel, canonical_name
)

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {'.csv'}
WORKBOOK_EXTENSIONS = {'.xlsx', '.xlsm'}

# Emit a progress update every N data rows
PROGRESS_EVERY_ROWS = 500

Grid = List[List[str]]


@dataclass
class ImportResult:
    """Outcome of a successful import: the new model and its statistics."""
    model: TrainingModel
    stats: Dict[str, Any] = field(default_factory=dict)


def cell_to_str(value: Any) -> str:
    """Render a raw cell value as the string the builder reads."""
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _cell(row: Sequence[Any], index: int) -> str:
    """Trimmed cell text; cells past the end of a short row are empty."""
    if index >= len(row):
        return ''
    return cell_to_str(row[index]).strip()


class TrainingImportService:
    """
    Framework-agnostic training spreadsheet import service.

    Reads CSV and Excel files into grids and builds TrainingModel instances
    from them, reporting progress through an optional callback.
    """

    def __init__(
        self,
        layout: Optional[LayoutConfig] = None,
        progress_callback: Optional[Callable[[str, float, str], None]] = None,
        sheet_name: Optional[str] = None
    ):
        """
        Initialize the import service.

        Args:
            layout: Grid offsets to read (default: LayoutConfig())
            progress_callback: Optional callback for progress updates
                              Signature: callback(stage: str, percent: float, message: str)
            sheet_name: Worksheet to read from workbooks (default: active sheet)
        """
        self.layout = layout or LayoutConfig()
        self.progress_callback = progress_callback or (lambda *args: None)
        self.sheet_name = sheet_name
        self.stats: Dict[str, Any] = {}
        self._reset_stats()

    def _reset_stats(self):
        self.stats = {
            'rows_read': 0,
            'data_rows': 0,
            'skipped_rows': 0,
            'parts': 0,
            'duplicate_part_rows': 0,
            'operator_columns': 0,
            'operators': 0,
            'trainings': 0,
            'duplicate_operator_headers': [],
        }

    def _emit_progress(self, stage: str, percent: float, message: str):
        """Emit progress update via callback."""
        self.progress_callback(stage, percent, message)
        logger.info(f"Progress: {stage} ({percent:.1f}%) - {message}")

    # ------------------------------------------------------------------
    # Grid readers
    # ------------------------------------------------------------------

    @staticmethod
    def parse_csv_text(text: str) -> Grid:
        """
        Parse CSV text into a grid.

        Blank lines are dropped before row offsets are counted, the same way
        the upload form always treated them. A line of bare separators is a
        row of empty cells and is kept.
        """
        if text.startswith('\ufeff'):
            text = text[1:]
        reader = csv.reader(io.StringIO(text, newline=''))
        try:
            return [row for row in reader if row]
        except csv.Error as e:
            raise FileReadError(f"Malformed CSV at line {reader.line_num}: {e}") from e

    def parse_workbook(self, source: Union[str, Path, io.BytesIO]) -> Grid:
        """
        Parse the configured (or active) worksheet of an Excel workbook.

        Cached values are read rather than formulas.
        """
        logger.info(f"Parsing workbook: {source if not isinstance(source, io.BytesIO) else '<upload>'}")

        try:
            wb = openpyxl.load_workbook(source, data_only=True, read_only=True)
        except (zipfile.BadZipFile, InvalidFileException, KeyError) as e:
            # KeyError: a zip archive without the workbook parts
            raise FileReadError(f"Not a readable Excel workbook: {e}") from e

        try:
            if self.sheet_name:
                if self.sheet_name not in wb.sheetnames:
                    raise ConfigurationError(
                        f"Sheet '{self.sheet_name}' not found. "
                        f"Available sheets: {', '.join(wb.sheetnames)}"
                    )
                ws = wb[self.sheet_name]
            else:
                ws = wb.active

            return [
                [cell_to_str(value) for value in row]
                for row in ws.iter_rows(values_only=True)
            ]
        finally:
            wb.close()

    def read_grid(self, file_path: str) -> Grid:
        """Read a CSV or workbook file from disk into a grid."""
        ext = Path(file_path).suffix.lower()

        if ext in CSV_EXTENSIONS:
            with open(file_path, 'r', encoding='utf-8-sig', newline='') as f:
                return self.parse_csv_text(f.read())

        if ext in WORKBOOK_EXTENSIONS:
            return self.parse_workbook(file_path)

        raise ConfigurationError(f"Unsupported file type '{ext}' for {Path(file_path).name}")

    def read_upload(self, content: bytes, filename: str) -> Grid:
        """Read uploaded file content into a grid, dispatching on the filename."""
        ext = Path(filename).suffix.lower()

        if ext in CSV_EXTENSIONS:
            return self.parse_csv_text(content.decode('utf-8-sig', errors='replace'))

        if ext in WORKBOOK_EXTENSIONS:
            return self.parse_workbook(io.BytesIO(content))

        raise ConfigurationError(f"Unsupported file type '{ext}' for {filename}")

    # ------------------------------------------------------------------
    # Model builder
    # ------------------------------------------------------------------

    def _operator_columns(self, header_row: Sequence[Any]) -> List[Tuple[int, str]]:
        """
        Map operator header cells to their column indices.

        Empty header cells are dropped but do not shift the columns of the
        operators to their right. Names repeating case-insensitively are
        kept: their columns feed the same operator.
        """
        columns: List[Tuple[int, str]] = []
        seen: Dict[str, str] = {}

        for col in self.layout.operator_columns:
            name = _cell(header_row, col)
            if not name:
                continue

            key = canonical_name(name)
            if key in seen:
                # Later columns overwrite earlier ones for the same part
                logger.warning(
                    f"Duplicate operator header '{name}' in column {col} "
                    f"merges into '{seen[key]}'"
                )
                self.stats['duplicate_operator_headers'].append(name)
            else:
                seen[key] = name

            columns.append((col, name))

        return columns

    def build_model(self, rows: Sequence[Optional[Sequence[Any]]],
                    source_name: Optional[str] = None) -> ImportResult:
        """
        Build a new TrainingModel from a row-major grid.

        Args:
            rows: Grid of cell values; rows may be short or None
            source_name: Name of the file the grid came from (informational)

        Returns:
            ImportResult with the new model and import statistics

        Raises:
            ConfigurationError: If the layout is invalid, the header row is
                missing or it names no operators
        """
        self._reset_stats()
        layout = self.layout
        layout.validate()

        self.stats['rows_read'] = len(rows)
        self._emit_progress('header', 10, f"Reading header row {layout.header_row_index}")

        header_row = rows[layout.header_row_index] if layout.header_row_index < len(rows) else None
        if not header_row:
            raise ConfigurationError(f"Header row not found at index {layout.header_row_index}")

        operator_columns = self._operator_columns(header_row)
        if not operator_columns:
            raise ConfigurationError(
                f"No operator names found in header row {layout.header_row_index} "
                f"(columns {layout.operator_col_start}-{layout.operator_col_end})"
            )
        self.stats['operator_columns'] = len(operator_columns)

        model = TrainingModel(source_name=source_name)
        total_data_rows = max(len(rows) - layout.first_data_row_index, 0)
        self._emit_progress('rows', 20, f"Processing {total_data_rows} data rows")

        for offset, r in enumerate(range(layout.first_data_row_index, len(rows))):
            row = rows[r]
            if not row:
                self.stats['skipped_rows'] += 1
                continue

            part_number = _cell(row, layout.part_number_col)
            if not part_number:
                self.stats['skipped_rows'] += 1
                continue

            self.stats['data_rows'] += 1

            part = Part(
                part_number=part_number,
                family=_cell(row, layout.family_col),
                common_name=_cell(row, layout.common_name_col),
                description=_cell(row, layout.description_col),
                status=_cell(row, layout.status_col),
            )
            if not model.register_part(part):
                self.stats['duplicate_part_rows'] += 1
                logger.debug(f"Row {r}: part {part_number} already registered, keeping first row's fields")

            for col, name in operator_columns:
                level = _cell(row, col)
                if not level:
                    continue

                operator = model.find_operator(name)
                if operator is None:
                    operator = Operator(name=name)
                    model.append_operator(operator)
                operator.set_level(part_number, level)

            if offset and offset % PROGRESS_EVERY_ROWS == 0:
                percent = 20 + 70 * (offset / total_data_rows)
                self._emit_progress('rows', percent, f"Processed {offset}/{total_data_rows} rows")

        self.stats['parts'] = len(model.parts)
        self.stats['operators'] = len(model.operators)
        self.stats['trainings'] = model.training_count

        self._emit_progress(
            'complete', 100,
            f"Loaded {self.stats['parts']} parts and {self.stats['operators']} operators"
        )

        return ImportResult(model=model, stats=dict(self.stats))

    def import_file(self, file_path: str) -> ImportResult:
        """Read a file from disk and build a model from it."""
        self._emit_progress('reading', 0, f"Reading {Path(file_path).name}")
        rows = self.read_grid(file_path)
        return self.build_model(rows, source_name=Path(file_path).name)

    def import_bytes(self, content: bytes, filename: str) -> ImportResult:
        """Read uploaded content and build a model from it."""
        self._emit_progress('reading', 0, f"Reading {filename}")
        rows = self.read_upload(content, filename)
        return self.build_model(rows, source_name=filename)
