"""
Unit tests for the student data workbook
"""

import unittest
from io import BytesIO

import openpyxl

from models.records import AggregatedRecord
from services.aggregation_service import Aggregator
from services.column_registry import ColumnRegistry
from services.excel_export_service import ExcelExportService, SHEET_TITLE
from utils.errors import EmptyColumnSetError, NoValidRecordsError
from report_fixtures import FakeRepository, identity, row

class TestExcelExportService(unittest.TestCase):

    def setUp(self):
        aggregator = Aggregator(FakeRepository())
        self.records = [
            aggregator.build_record(identity('S1', 'Jane'), [row(1, 'X', 'A', 4), row(1, 'Y', 'B+', 3)]),
            AggregatedRecord.not_found('ghost'),
            aggregator.build_record(identity('S2', 'John'), [row(2, 'Z', 'O', 2)]),
        ]
        self.registry = ColumnRegistry(max_semesters=2)

    def load(self, export):
        return openpyxl.load_workbook(BytesIO(export.content))[SHEET_TITLE]

    def test_header_and_rows(self):
        columns = self.registry.resolve_columns(['reg_no', 'cgpa', 'semester1_sgpa', 'semester2_credits_obtained'])
        export = ExcelExportService.build_workbook(self.records, columns)
        ws = self.load(export)
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
        self.assertEqual(rows[0], ['Registration No.', 'Overall CGPA', 'Semester 1 SGPA', 'Semester 2 Credits Obtained'])
        self.assertEqual(rows[1], ['S1', '7.57', '7.57', 'N/A'])
        self.assertEqual(rows[2], ['S2', '10.00', 'N/A', '2 / 2'])
        self.assertEqual(len(rows), 3)

    def test_error_records_are_counted_as_omissions(self):
        export = ExcelExportService.build_workbook(self.records, self.registry.resolve_columns([]))
        self.assertEqual(export.row_count, 2)
        self.assertEqual([o.identifier for o in export.omissions], ['ghost'])

    def test_default_catalog_width(self):
        ws = self.load(ExcelExportService.build_workbook(self.records, self.registry.resolve_columns([])))
        self.assertEqual(ws.max_column, 6 + 3 * 2)

    def test_empty_column_set(self):
        with self.assertRaises(EmptyColumnSetError):
            ExcelExportService.build_workbook(self.records, self.registry.resolve_columns(['bogus']))

    def test_no_valid_records(self):
        with self.assertRaises(NoValidRecordsError) as ctx:
            ExcelExportService.build_workbook([AggregatedRecord.not_found('a')], self.registry.resolve_columns([]))
        self.assertEqual(ctx.exception.detail, ['a'])

if __name__ == '__main__':
    unittest.main()
