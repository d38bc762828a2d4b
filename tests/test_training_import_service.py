"""
Tests for reading training spreadsheets and building the model.

Fixed-offset parsing breaks silently when rows or columns drift, so most of
the cases here pin down exactly which cell ends up where.
"""

import io
import zipfile

import openpyxl
import pytest

from backend.models.errors import ConfigurationError, FileReadError
from backend.models.training import LayoutConfig
from services.training_import_service import TrainingImportService, cell_to_str


class TestBuildModel:
    """Test build_model() on in-memory grids."""

    def test_single_row(self, importer, make_grid):
        """One data row with one training cell gives one part and one operator."""
        row = ["", "FAM1", "PN-100", "Widget", "desc", "", "", "Active"] + [""] * 8 + ["Trained"]
        result = importer.build_model(make_grid(['Alice'], [row]))
        model = result.model

        assert list(model.parts) == ['PN-100']
        part = model.parts['PN-100']
        assert part.family == 'FAM1'
        assert part.common_name == 'Widget'
        assert part.description == 'desc'
        assert part.status == 'Active'

        assert [op.name for op in model.operator_list] == ['Alice']
        assert model.find_operator('Alice').trainings == {'PN-100': 'Trained'}

    def test_sample_counts(self, importer, sample_grid):
        result = importer.build_model(sample_grid)

        assert result.stats['parts'] == 3
        assert result.stats['data_rows'] == 4
        assert result.stats['skipped_rows'] == 1
        assert result.stats['duplicate_part_rows'] == 1
        assert result.stats['operator_columns'] == 4
        assert result.stats['operators'] == 4
        assert result.stats['trainings'] == 5
        assert result.stats['duplicate_operator_headers'] == []

    def test_parts_keep_input_order(self, importer, sample_grid):
        result = importer.build_model(sample_grid)
        assert [p.part_number for p in result.model.part_list] == ['PN-100', 'PN-200', 'PN-300']

    def test_duplicate_part_first_row_wins(self, importer, sample_grid):
        """Descriptive fields come from the first row; later training cells still apply."""
        model = importer.build_model(sample_grid).model

        part = model.parts['PN-100']
        assert part.family == 'FAM1'
        assert part.common_name == 'Widget'
        assert part.status == 'Active'

        assert model.find_operator('Carol Ann').trainings == {'PN-100': 'Trainer 2'}
        assert model.find_operator('Alice').trainings['PN-100'] == 'Trained'

    def test_repeated_part_last_training_wins(self, importer, make_grid, make_row):
        grid = make_grid(['Alice'], [
            make_row('PN-1', levels=['In Process']),
            make_row('PN-1', levels=['Trained']),
        ])
        model = importer.build_model(grid).model
        assert model.find_operator('alice').trainings == {'PN-1': 'Trained'}

    def test_row_without_part_number_is_skipped(self, importer, sample_grid):
        model = importer.build_model(sample_grid).model
        assert 'Orphan' not in [p.common_name for p in model.part_list]
        assert model.find_operator('Alice').trainings == {'PN-100': 'Trained', 'PN-200': 'In Process'}

    def test_values_are_trimmed(self, importer, make_grid, make_row):
        grid = make_grid(['  Alice  '], [
            make_row('  PN-1 ', ' FAM ', ' Name ', ' Desc ', ' Active ', ['  Trainer 1  ']),
        ])
        model = importer.build_model(grid).model

        part = model.parts['PN-1']
        assert (part.family, part.common_name, part.description, part.status) == \
            ('FAM', 'Name', 'Desc', 'Active')
        assert model.find_operator('Alice').name == 'Alice'
        assert model.find_operator('Alice').trainings == {'PN-1': 'Trainer 1'}

    def test_short_and_missing_rows(self, importer, make_grid):
        """Rows shorter than the layout read as empty cells; None rows are skipped."""
        grid = make_grid(['Alice'], [
            None,
            [],
            ['', 'FAM1', 'PN-1'],
            ['', '', 'PN-2', 'Name'],
        ])
        result = importer.build_model(grid)

        assert list(result.model.parts) == ['PN-1', 'PN-2']
        assert result.model.parts['PN-1'].status == ''
        assert result.model.operators == {}
        assert result.stats['skipped_rows'] == 2

    def test_operator_without_entries_is_not_created(self, importer, make_grid, make_row):
        grid = make_grid(['Alice', 'Bob'], [make_row('PN-1', levels=['Trained', ''])])
        model = importer.build_model(grid).model
        assert [op.name for op in model.operator_list] == ['Alice']

    def test_blank_header_does_not_shift_columns(self, importer, make_grid, make_row):
        """An empty operator header leaves the operators to its right on their own columns."""
        grid = make_grid(['Alice', '', 'Bob'], [
            make_row('PN-1', levels=['', 'stray', 'Trained']),
        ])
        model = importer.build_model(grid).model

        assert model.find_operator('Alice') is None
        assert model.find_operator('Bob').trainings == {'PN-1': 'Trained'}

    def test_duplicate_operator_headers_merge(self, importer, make_grid, make_row):
        """Same name twice (any case) feeds one operator; the later column wins."""
        grid = make_grid(['Alice', 'Bob', 'ALICE'], [
            make_row('PN-1', levels=['In Process', '', 'Trained']),
            make_row('PN-2', levels=['Trainer 1', '', '']),
        ])
        result = importer.build_model(grid)
        model = result.model

        assert len(model.operators) == 1
        alice = model.find_operator('alice')
        assert alice.name == 'Alice'
        assert alice.trainings == {'PN-1': 'Trained', 'PN-2': 'Trainer 1'}
        assert result.stats['duplicate_operator_headers'] == ['ALICE']

    def test_columns_outside_operator_range_ignored(self, importer, make_grid):
        grid = make_grid(['Alice'], [])
        grid[LayoutConfig().header_row_index].append('Notes')  # column 39
        grid.append(['', '', 'PN-1'] + [''] * 13 + ['Trained'] + [''] * 22 + ['Some note'])

        model = importer.build_model(grid).model
        assert [op.name for op in model.operator_list] == ['Alice']

    def test_unknown_level_text_kept_verbatim(self, importer, make_grid, make_row):
        grid = make_grid(['Alice'], [make_row('PN-1', levels=['Shadowing (2 wks)'])])
        model = importer.build_model(grid).model
        assert model.find_operator('Alice').trainings == {'PN-1': 'Shadowing (2 wks)'}

    def test_source_name_recorded(self, importer, sample_grid):
        model = importer.build_model(sample_grid, source_name='matrix.csv').model
        assert model.source_name == 'matrix.csv'

    def test_custom_layout(self):
        layout = LayoutConfig(header_row_index=0, first_data_row_index=2,
                              operator_col_start=8, operator_col_end=9)
        grid = [
            ['', 'Family', 'PN', '', '', '', '', '', 'Eve', 'Finn'],
            ['', 'subtitle row', 'IGNORED'],
            ['', 'F', 'PN-9', 'Bolt', '', '', '', 'Active', 'Trainer 2', 'Trained'],
        ]
        model = TrainingImportService(layout=layout).build_model(grid).model

        assert list(model.parts) == ['PN-9']
        assert model.find_operator('Eve').trainings == {'PN-9': 'Trainer 2'}
        assert model.find_operator('Finn').trainings == {'PN-9': 'Trained'}

    def test_progress_callback(self, sample_grid):
        events = []
        service = TrainingImportService(progress_callback=lambda *args: events.append(args))
        service.build_model(sample_grid)

        stages = [stage for stage, _, _ in events]
        assert stages[0] == 'header'
        assert stages[-1] == 'complete'
        assert events[-1][1] == 100


class TestBuildModelErrors:
    """Test the configuration errors raised while building."""

    def test_missing_header_row(self, importer):
        rows = [['title']] * 5
        with pytest.raises(ConfigurationError, match='Header row not found at index 12'):
            importer.build_model(rows)

    def test_empty_grid(self, importer):
        with pytest.raises(ConfigurationError):
            importer.build_model([])

    def test_header_without_operator_names(self, importer, make_grid, make_row):
        grid = make_grid([], [make_row('PN-1')])
        with pytest.raises(ConfigurationError, match='No operator names'):
            importer.build_model(grid)

    @pytest.mark.parametrize('layout', [
        LayoutConfig(header_row_index=-1),
        LayoutConfig(operator_col_start=20, operator_col_end=19),
        LayoutConfig(header_row_index=13, first_data_row_index=13),
        LayoutConfig(part_number_col=-2),
    ])
    def test_invalid_layout(self, layout, sample_grid):
        with pytest.raises(ConfigurationError):
            TrainingImportService(layout=layout).build_model(sample_grid)

    def test_failed_load_keeps_previous_model(self, store, importer):
        """A failing build never reaches the store."""
        previous = store.model

        with pytest.raises(ConfigurationError):
            result = importer.build_model([['too short']])
            store.replace(result.model, result.stats)

        assert store.model is previous
        assert len(store.model.parts) == 3

    def test_stats_reset_between_builds(self, importer, sample_grid, make_grid, make_row):
        importer.build_model(sample_grid)
        result = importer.build_model(make_grid(['Alice'], [make_row('PN-1', levels=['Trained'])]))
        assert result.stats['parts'] == 1
        assert result.stats['duplicate_part_rows'] == 0


class TestCsvReading:
    """Test CSV parsing into grids."""

    def test_blank_lines_skipped(self):
        rows = TrainingImportService.parse_csv_text('a,b\n\n\nc,d\n')
        assert rows == [['a', 'b'], ['c', 'd']]

    def test_separator_only_lines_kept(self):
        rows = TrainingImportService.parse_csv_text('a,b\n,,\nc,d\n')
        assert rows == [['a', 'b'], ['', '', ''], ['c', 'd']]

    def test_bom_and_quotes(self):
        rows = TrainingImportService.parse_csv_text('\ufeff"Name, First",x\r\n"say ""hi""",y\r\n')
        assert rows == [['Name, First', 'x'], ['say "hi"', 'y']]

    def test_import_bytes_csv(self, importer, sample_csv):
        result = importer.import_bytes(sample_csv.encode('utf-8'), 'matrix.csv')
        assert result.model.source_name == 'matrix.csv'
        assert len(result.model.parts) == 3
        assert result.model.find_operator('bob').trainings == {'PN-100': 'Trainer 1'}

    def test_import_file_csv(self, importer, sample_csv, tmp_path):
        path = tmp_path / 'matrix.csv'
        path.write_text(sample_csv, encoding='utf-8')

        result = importer.import_file(str(path))
        assert result.stats['trainings'] == 5
        assert result.model.source_name == 'matrix.csv'

    def test_blank_lines_before_header_do_not_count(self, importer, sample_csv):
        """Blank lines are dropped before offsets apply, so the header is still found."""
        content = '\n\n' + sample_csv
        result = importer.import_bytes(content.encode('utf-8'), 'matrix.csv')
        assert len(result.model.parts) == 3

    @pytest.mark.parametrize('filename', ['matrix.txt', 'matrix', 'matrix.xls'])
    def test_unsupported_extension(self, importer, filename):
        with pytest.raises(ConfigurationError, match='Unsupported file type'):
            importer.read_upload(b'a,b', filename)


class TestWorkbookReading:
    """Test Excel workbook parsing into grids."""

    @staticmethod
    def _write_workbook(path, rows, title='Matrix', extra_sheet=None):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = title
        for row in rows:
            ws.append(row)
        if extra_sheet:
            wb.create_sheet(extra_sheet)
        wb.save(path)

    def test_import_workbook(self, importer, sample_grid, tmp_path):
        path = tmp_path / 'matrix.xlsx'
        self._write_workbook(path, sample_grid)

        result = importer.import_file(str(path))
        assert list(result.model.parts) == ['PN-100', 'PN-200', 'PN-300']
        assert result.model.find_operator('Dave').trainings == {'PN-200': 'Trainer 2'}

    def test_numeric_cells_rendered_as_text(self, importer, make_grid, tmp_path):
        row = ['', 'FAM1', 12345, 'Widget', '', '', '', 'Active'] + [None] * 8 + ['Trained']
        path = tmp_path / 'matrix.xlsx'
        self._write_workbook(path, make_grid(['Alice'], [row]))

        model = importer.import_file(str(path)).model
        assert list(model.parts) == ['12345']
        assert model.find_operator('Alice').trainings == {'12345': 'Trained'}

    def test_import_workbook_bytes(self, importer, sample_grid, tmp_path):
        path = tmp_path / 'matrix.xlsx'
        self._write_workbook(path, sample_grid)

        result = importer.import_bytes(path.read_bytes(), 'matrix.xlsx')
        assert len(result.model.operators) == 4

    def test_named_sheet(self, sample_grid, tmp_path):
        path = tmp_path / 'matrix.xlsx'
        wb = openpyxl.Workbook()
        wb.active.title = 'Cover'
        ws = wb.create_sheet('Training')
        for row in sample_grid:
            ws.append(row)
        wb.save(path)

        result = TrainingImportService(sheet_name='Training').import_file(str(path))
        assert len(result.model.parts) == 3

    def test_missing_sheet(self, sample_grid, tmp_path):
        path = tmp_path / 'matrix.xlsx'
        self._write_workbook(path, sample_grid)

        with pytest.raises(ConfigurationError, match="Sheet 'Nope' not found"):
            TrainingImportService(sheet_name='Nope').import_file(str(path))

    def test_zip_without_workbook_parts(self, importer):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w') as archive:
            archive.writestr('readme.txt', 'hello')

        with pytest.raises(FileReadError, match='Not a readable Excel workbook'):
            importer.read_upload(buffer.getvalue(), 'matrix.xlsx')

    def test_not_a_zip(self, importer, tmp_path):
        path = tmp_path / 'matrix.xlsx'
        path.write_bytes(b'plain text, not a workbook')

        with pytest.raises(FileReadError):
            importer.import_file(str(path))


class TestCellToStr:
    """Test cell_to_str()."""

    @pytest.mark.parametrize('value, expected', [
        (None, ''),
        ('abc', 'abc'),
        (12, '12'),
        (12.0, '12'),
        (12.5, '12.5'),
    ])
    def test_values(self, value, expected):
        assert cell_to_str(value) == expected
