"""
Report service for the Academic Report Engine
Validates a report request, aggregates the students once, renders the chosen
output format and hands back a byte stream with its content type and filename
"""

import itertools
from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Tuple

from reportlab.lib.units import mm

from models.records import Omission
from services.aggregation_service import Aggregator, GradeScale
from services.archive_packager import ArchivePackager, NamedDocument
from services.column_registry import ColumnRegistry
from services.document_renderer import DocumentRenderer, PageBoundaryPolicy
from services.excel_export_service import ExcelExportService
from services.grade_repository import GradeRepository
from utils.errors import (
    EmptyColumnSetError, NoValidRecordsError, RenderError, ReportError, ValidationError,
)
from utils.logger import get_logger
from utils.validators import (
    normalize_report_name, validate_column_keys, validate_pdf_packaging,
    validate_report_format, validate_report_name, validate_report_type, validate_student_ids,
)

log = get_logger('reports')

PDF_CONTENT_TYPE = 'application/pdf'
ZIP_CONTENT_TYPE = 'application/zip'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

STREAM_CHUNK_SIZE = 64 * 1024


class OutputFormat(Enum):
    DOCUMENT = 'pdf'
    WORKBOOK = 'excel'


@dataclass(frozen=True)
class ReportRequest:
    name: str
    report_type: str
    output_format: OutputFormat
    student_ids: Tuple[str, ...]
    packaging: PageBoundaryPolicy = PageBoundaryPolicy.COMBINED
    columns: Tuple[str, ...] = ()
    parameters: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload):
        """Parse the wire payload; raises ValidationError listing every invalid field"""
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        pdf_options = payload.get('pdf_options') or {}
        excel_options = payload.get('excel_options') or {}
        if not isinstance(pdf_options, dict) or not isinstance(excel_options, dict):
            raise ValidationError("pdf_options and excel_options must be objects")

        checks = [
            validate_report_name(payload.get('name')),
            validate_report_type(payload.get('type')),
            validate_report_format(payload.get('format')),
            validate_student_ids(payload.get('student_ids')),
            validate_pdf_packaging(pdf_options.get('type') or 'combined'),
            validate_column_keys(excel_options.get('columns')),
        ]
        failures = [message for ok, message in checks if not ok]
        if failures:
            raise ValidationError(
                'Missing or invalid fields: name, type, format, and at least one student_id are required.',
                detail=failures,
            )

        return cls(
            name=payload['name'].strip(),
            report_type=payload['type'].strip(),
            output_format=OutputFormat(payload['format']),
            student_ids=tuple(str(s).strip() for s in payload['student_ids']),
            packaging=PageBoundaryPolicy(pdf_options.get('type') or 'combined'),
            columns=tuple(excel_options.get('columns') or ()),
            parameters=payload.get('parameters') or {},
        )


class ReportStream:
    """Iterable of byte chunks; close() stops pending work and releases resources"""

    def __init__(self, chunks, on_close=None):
        self._chunks = iter(chunks)
        self._on_close = on_close
        self.closed = False

    def __iter__(self):
        try:
            for chunk in self._chunks:
                yield chunk
        except ReportError as e:
            log.error("Report stream aborted after output began: %s (%s)", e.message, e.detail)
            raise
        finally:
            self.close()

    def close(self):
        if self.closed:
            return
        self.closed = True
        close = getattr(self._chunks, 'close', None)
        if close is not None:
            close()
        if self._on_close is not None:
            self._on_close()

    def read_all(self):
        return b''.join(self)


@dataclass
class ReportOutput:
    content_type: str
    filename: str
    stream: ReportStream
    omissions: List[Omission]

    @property
    def omitted_identifiers(self):
        return [o.identifier for o in self.omissions]


def _chunked(data, size=STREAM_CHUNK_SIZE):
    for start in range(0, len(data), size):
        yield data[start:start + size]


class ReportService:
    """Stateless orchestrator: Validated -> Aggregated -> Rendered -> Streamed"""

    def __init__(self, aggregator, column_registry, renderer, compression_level=9,
                 authorizer=None, clock=datetime.now):
        self.aggregator = aggregator
        self.column_registry = column_registry
        self.renderer = renderer
        self.compression_level = compression_level
        self.authorizer = authorizer
        self.clock = clock

    @classmethod
    def from_config(cls, config, engine, authorizer=None):
        """Wire the service from a Flask config mapping and a SQLAlchemy engine"""
        grade_scale = GradeScale(config.get('REPORT_GRADE_POINTS'))
        return cls(
            aggregator=Aggregator(GradeRepository(engine), grade_scale),
            column_registry=ColumnRegistry(config.get('REPORT_MAX_SEMESTERS', 10)),
            renderer=DocumentRenderer(
                institution_name=config.get('REPORT_INSTITUTION_NAME', 'Your Institution Name'),
                margin=config.get('REPORT_PAGE_MARGIN_MM', 19) * mm,
            ),
            compression_level=config.get('REPORT_ZIP_COMPRESSION_LEVEL', 9),
            authorizer=authorizer,
        )

    def generate(self, request):
        """Produce the report for a validated ReportRequest.

        Every error detectable before output begins (bad columns, unknown
        students, a bundle where no document renders) is raised here, before
        the caller starts consuming the stream.
        """
        columns = self._validate(request)
        log.info("Generating %s report '%s' for %d student(s)",
                 request.output_format.value, request.name, len(request.student_ids))

        records = self.aggregator.aggregate(request.student_ids)
        valid = [r for r in records if r.ok]
        omissions = [Omission(r.registration_number, r.error) for r in records if not r.ok]
        if not valid:
            raise NoValidRecordsError("No valid student data found for the given IDs.",
                                      detail=[o.identifier for o in omissions])

        generated_at = self.clock()
        base = normalize_report_name(request.name)
        stamp = generated_at.strftime('%Y%m%d_%H%M%S')

        if request.output_format is OutputFormat.WORKBOOK:
            export = ExcelExportService.build_workbook(records, columns)
            log.info("Workbook for '%s' holds %d row(s)", request.name, export.row_count)
            return ReportOutput(XLSX_CONTENT_TYPE, f"{base}_{stamp}.xlsx",
                                ReportStream(_chunked(export.content)), list(export.omissions))

        if request.packaging is PageBoundaryPolicy.COMBINED:
            pdf_bytes = self._render_combined(valid, generated_at)
            return ReportOutput(PDF_CONTENT_TYPE, f"{base}_combined_{stamp}.pdf",
                                ReportStream(_chunked(pdf_bytes)), omissions)

        stream = self._render_bundle(valid, omissions, generated_at)
        return ReportOutput(ZIP_CONTENT_TYPE, f"{base}_individual_{stamp}.zip", stream, omissions)

    def _validate(self, request):
        if not request.student_ids:
            raise ValidationError("No student IDs provided for the report.")
        if self.authorizer is not None:
            self.authorizer(request.student_ids)
        if request.output_format is not OutputFormat.WORKBOOK:
            return []
        columns = self.column_registry.resolve_columns(request.columns)
        if not columns:
            raise EmptyColumnSetError(
                "No columns selected or invalid column keys provided for the Excel report.",
                detail=self.column_registry.unknown_keys(request.columns),
            )
        return columns

    def _render_combined(self, records, generated_at):
        with self.renderer.open_engine() as engine:
            sections = [self.renderer.render_student_section(r, generated_at.date()) for r in records]
            return self.renderer.render_document(sections, PageBoundaryPolicy.COMBINED, engine)

    def _render_bundle(self, records, omissions, generated_at):
        """Render up to the first successful document, then stream the rest lazily."""
        resources = ExitStack()
        try:
            engine = resources.enter_context(self.renderer.open_engine())
            documents = self.renderer.render_student_documents(records, engine, generated_at.date())
            first = None
            for document in documents:
                if document.ok:
                    first = document
                    break
                omissions.append(Omission(document.registration_number, document.error))
            if first is None:
                raise RenderError("No student document could be rendered",
                                  detail=[o.identifier for o in omissions])
        except BaseException:
            resources.close()
            raise

        packager = ArchivePackager(self.compression_level, generated_at, omissions=omissions)
        named = (NamedDocument(d.registration_number, d.content, d.error)
                 for d in itertools.chain([first], documents))
        return ReportStream(packager.package_documents(named), on_close=resources.close)
