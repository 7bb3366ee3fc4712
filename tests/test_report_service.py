"""
Tests for report orchestration: validation, output selection and streaming
"""

import unittest
import zipfile
from datetime import datetime
from io import BytesIO

import openpyxl

from app import create_app
from config import TestConfig
from database import db
from services.aggregation_service import Aggregator
from services.column_registry import ColumnRegistry
from services.document_renderer import DocumentRenderer, PageBoundaryPolicy
from services.grade_repository import GradeRepository
from services.report_service import OutputFormat, ReportRequest, ReportService
from utils.errors import (
    AuthorizationError, EmptyColumnSetError, NoValidRecordsError, RenderError, ValidationError,
)
from report_fixtures import FakeEngine, seed_students

FIXED_NOW = datetime(2024, 5, 1, 9, 15, 30)

def payload(**overrides):
    data = {
        'name': 'Semester Results 2024',
        'type': 'academic',
        'format': 'pdf',
        'student_ids': ['REG001', 'REG002'],
    }
    data.update(overrides)
    return data

class TestReportRequest(unittest.TestCase):

    def test_parses_wire_payload(self):
        request = ReportRequest.from_payload(payload(
            format='excel', student_ids=['REG001', 7], excel_options={'columns': ['name', 'cgpa']},
        ))
        self.assertIs(request.output_format, OutputFormat.WORKBOOK)
        self.assertEqual(request.student_ids, ('REG001', '7'))
        self.assertEqual(request.columns, ('name', 'cgpa'))
        self.assertIs(request.packaging, PageBoundaryPolicy.COMBINED)

    def test_individual_packaging(self):
        request = ReportRequest.from_payload(payload(pdf_options={'type': 'individual'}))
        self.assertIs(request.packaging, PageBoundaryPolicy.PER_STUDENT)

    def test_rejects_bad_payloads(self):
        for bad in [
            None,
            payload(student_ids=[]),
            payload(name=''),
            payload(format='docx'),
            payload(type=None),
            payload(pdf_options={'type': 'zip'}),
            payload(excel_options={'columns': 'name'}),
            payload(student_ids=['REG001', 'a\rb']),
        ]:
            with self.assertRaises(ValidationError):
                ReportRequest.from_payload(bad)

class TestReportService(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        seed_students()
        FakeEngine.instances = []
        self.fail_on_calls = set()
        self.service = self.make_service()

    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def make_service(self, **kwargs):
        renderer = DocumentRenderer(engine_factory=lambda: FakeEngine(self.fail_on_calls))
        return ReportService(
            aggregator=Aggregator(GradeRepository(db.engine)),
            column_registry=ColumnRegistry(4),
            renderer=renderer,
            clock=lambda: FIXED_NOW,
            **kwargs
        )

    def generate(self, **overrides):
        return self.service.generate(ReportRequest.from_payload(payload(**overrides)))

    def test_combined_pdf(self):
        output = self.generate(student_ids=['REG001', 'missing', 'REG002'])
        self.assertEqual(output.content_type, 'application/pdf')
        self.assertEqual(output.filename, 'semester_results_2024_combined_20240501_091530.pdf')
        self.assertEqual(output.stream.read_all(), b'%PDF-fake-1')
        self.assertEqual(output.omitted_identifiers, ['missing'])
        engine = FakeEngine.instances[0]
        self.assertTrue(engine.closed)
        self.assertEqual(len(engine.stories), 1)

    def test_combined_render_failure_releases_engine(self):
        self.fail_on_calls.add(1)
        with self.assertRaises(RenderError):
            self.generate()
        self.assertTrue(FakeEngine.instances[0].closed)

    def test_individual_bundle(self):
        output = self.generate(pdf_options={'type': 'individual'}, student_ids=['REG002', 'REG001'])
        self.assertEqual(output.content_type, 'application/zip')
        self.assertEqual(output.filename, 'semester_results_2024_individual_20240501_091530.zip')
        archive = zipfile.ZipFile(BytesIO(output.stream.read_all()))
        self.assertEqual(archive.namelist(), ['report_REG002.pdf', 'report_REG001.pdf'])
        self.assertEqual(archive.read('report_REG002.pdf'), b'%PDF-fake-1')
        self.assertTrue(FakeEngine.instances[0].closed)
        self.assertEqual(output.omissions, [])

    def test_bundle_skips_failed_student(self):
        self.fail_on_calls.add(1)
        output = self.generate(pdf_options={'type': 'individual'})
        self.assertEqual(output.omitted_identifiers, ['REG001'])
        archive = zipfile.ZipFile(BytesIO(output.stream.read_all()))
        self.assertEqual(archive.namelist(), ['report_REG002.pdf'])

    def test_bundle_failure_during_streaming_is_recorded(self):
        self.fail_on_calls.add(2)
        output = self.generate(pdf_options={'type': 'individual'})
        self.assertEqual(output.omissions, [])
        archive = zipfile.ZipFile(BytesIO(output.stream.read_all()))
        self.assertEqual(archive.namelist(), ['report_REG001.pdf', 'omitted.txt'])
        self.assertTrue(archive.read('omitted.txt').startswith(b'REG002\t'))
        self.assertEqual(output.omitted_identifiers, ['REG002'])

    def test_bundle_where_nothing_renders(self):
        self.fail_on_calls.update({1, 2})
        with self.assertRaises(RenderError):
            self.generate(pdf_options={'type': 'individual'})
        self.assertTrue(FakeEngine.instances[0].closed)

    def test_closing_bundle_stream_stops_rendering(self):
        output = self.generate(pdf_options={'type': 'individual'})
        stream = iter(output.stream)
        next(stream)
        output.stream.close()
        engine = FakeEngine.instances[0]
        self.assertTrue(engine.closed)
        self.assertEqual(len(engine.stories), 1)

    def test_workbook(self):
        output = self.generate(format='excel', excel_options={'columns': ['reg_no', 'semester1_sgpa', 'cgpa']})
        self.assertEqual(output.content_type,
                         'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
        self.assertEqual(output.filename, 'semester_results_2024_20240501_091530.xlsx')
        ws = openpyxl.load_workbook(BytesIO(output.stream.read_all())).active
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
        self.assertEqual(rows, [
            ['Registration No.', 'Semester 1 SGPA', 'Overall CGPA'],
            ['REG001', '7.57', '7.70'],
            ['REG002', '4.29', '4.29'],
        ])
        self.assertEqual(FakeEngine.instances, [])

    def test_workbook_reports_omitted_students(self):
        output = self.generate(format='excel', student_ids=['ghost', 'REG001'])
        self.assertEqual(output.omitted_identifiers, ['ghost'])
        ws = openpyxl.load_workbook(BytesIO(output.stream.read_all())).active
        self.assertEqual(ws.max_row, 2)

    def test_workbook_with_unknown_columns_only(self):
        with self.assertRaises(EmptyColumnSetError):
            self.generate(format='excel', excel_options={'columns': ['bogus']})

    def test_no_valid_records(self):
        with self.assertRaises(NoValidRecordsError):
            self.generate(student_ids=['nobody', 'ghost'])
        self.assertEqual(FakeEngine.instances, [])

    def test_authorizer_runs_before_aggregation(self):
        def deny(identifiers):
            raise AuthorizationError("Not authorized for these students", detail=list(identifiers))

        service = self.make_service(authorizer=deny)
        with self.assertRaises(AuthorizationError):
            service.generate(ReportRequest.from_payload(payload()))

    def test_real_pdf_rendering(self):
        service = ReportService.from_config(self.app.config, db.engine)
        output = service.generate(ReportRequest.from_payload(payload()))
        self.assertTrue(output.stream.read_all().startswith(b'%PDF'))

if __name__ == '__main__':
    unittest.main()
