"""
Pytest configuration and fixtures for training matrix tests.
"""

import csv
import io

import pytest
from dotenv import load_dotenv

from backend.models.training import LayoutConfig
from services.model_store import ModelStore
from services.training_import_service import TrainingImportService
from services.training_service import TrainingService
from services.view_service import ViewService

# Load environment
load_dotenv()

LAYOUT = LayoutConfig()

SAMPLE_OPERATORS = ['Alice', 'Bob', 'Carol Ann', 'Dave']


def build_header(operator_names, layout=LAYOUT):
    """Header row with the descriptive column titles and operator names."""
    row = [''] * (layout.operator_col_end + 1)
    row[0] = 'Line'
    row[layout.family_col] = 'Family'
    row[layout.part_number_col] = 'Part Number'
    row[layout.common_name_col] = 'Common Name'
    row[layout.description_col] = 'Description'
    row[layout.status_col] = 'Status'
    for idx, name in enumerate(operator_names):
        row[layout.operator_col_start + idx] = name
    return row


def build_row(part_number, family='', common_name='', description='', status='',
              levels=None, layout=LAYOUT):
    """
    Data row; ``levels`` lines up with the operator columns.

    Rows end after the last level given, like a CSV export trims them.
    """
    levels = levels or []
    row = [''] * max(layout.status_col + 1, layout.operator_col_start + len(levels))
    row[layout.family_col] = family
    row[layout.part_number_col] = part_number
    row[layout.common_name_col] = common_name
    row[layout.description_col] = description
    row[layout.status_col] = status
    for idx, level in enumerate(levels):
        row[layout.operator_col_start + idx] = level
    return row


def build_grid(operator_names, data_rows, layout=LAYOUT):
    """Title rows up to the header row, the header row, then the data rows."""
    preamble = [['Operator Training Matrix']] + [['-'] for _ in range(layout.header_row_index - 1)]
    return preamble + [build_header(operator_names, layout)] + list(data_rows)


def grid_to_csv(rows):
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerows(rows)
    return buffer.getvalue()


@pytest.fixture
def make_grid():
    """Factory for grids laid out with the default offsets."""
    return build_grid


@pytest.fixture
def make_row():
    """Factory for data rows."""
    return build_row


@pytest.fixture
def sample_grid():
    """
    Four operators, four parts.

    PN-100 appears twice: the second row has different descriptive fields
    and adds a training for Carol Ann.
    """
    return build_grid(SAMPLE_OPERATORS, [
        build_row('PN-100', 'FAM1', 'Widget', 'Small widget', 'Active',
                  ['Trained', 'Trainer 1', '', '']),
        build_row('PN-200', 'FAM2', 'Gadget', 'Large gadget', 'Obsolete',
                  ['In Process', '', '', 'Trainer 2']),
        build_row('PN-300', 'FAM1', '', 'No one yet', ''),
        build_row('', 'FAM9', 'Orphan', 'Row without part number', 'Active',
                  ['Trained']),
        build_row('PN-100', 'FAM-X', 'Widget v2', 'Changed', 'Retired',
                  ['', '', 'Trainer 2', '']),
    ])


@pytest.fixture
def sample_csv(sample_grid):
    return grid_to_csv(sample_grid)


@pytest.fixture
def importer():
    return TrainingImportService(layout=LAYOUT)


@pytest.fixture
def store(importer, sample_grid):
    """Store holding the sample model."""
    store = ModelStore()
    result = importer.build_model(sample_grid, source_name='sample.csv')
    store.replace(result.model, result.stats)
    return store


@pytest.fixture
def service(store):
    return TrainingService(store)


@pytest.fixture
def views(store):
    return ViewService(store, page_size=15)
