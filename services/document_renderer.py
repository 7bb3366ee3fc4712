"""
Document renderer for the Academic Report Engine
Builds ReportLab flowables per student and renders them to A4 PDF pages
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from enum import Enum
from io import BytesIO
from typing import Optional, Tuple
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    KeepTogether, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle,
)

from services.column_registry import format_credits, format_metric
from utils.errors import RenderError
from utils.logger import get_logger

log = get_logger('document')


class PageBoundaryPolicy(Enum):
    COMBINED = 'combined'
    PER_STUDENT = 'individual'


@dataclass(frozen=True)
class StudentSection:
    """Rendered-but-not-laid-out content of one student's report"""
    registration_number: str
    flowables: Tuple


@dataclass(frozen=True)
class RenderedDocument:
    registration_number: str
    content: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.content is not None


class RenderEngine:
    """Capability interface: render a story of flowables to fixed-page bytes"""

    def render(self, story):
        raise NotImplementedError

    def close(self):
        pass


class ReportLabEngine(RenderEngine):
    """Render engine backed by ReportLab's SimpleDocTemplate"""

    def __init__(self, pagesize=A4, margin=19 * mm):
        self.pagesize = pagesize
        self.margin = margin
        self.closed = False

    def render(self, story):
        if self.closed:
            raise RenderError("Render engine already released")
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=self.pagesize,
            leftMargin=self.margin, rightMargin=self.margin,
            topMargin=self.margin, bottomMargin=self.margin,
        )
        try:
            doc.build(list(story))
            return buffer.getvalue()
        except Exception as e:
            raise RenderError("Failed to render PDF document", detail=str(e)) from e
        finally:
            buffer.close()

    def close(self):
        self.closed = True


class DocumentRenderer:
    """Builds per-student sections and lays them out under a page-boundary policy"""

    SUBJECT_HEADERS = ['Subject Code', 'Subject Name', 'Grade', 'Credits', 'Status']
    SUBJECT_COL_FRACS = [0.18, 0.44, 0.12, 0.12, 0.14]

    def __init__(self, engine_factory=None, institution_name='Your Institution Name',
                 pagesize=A4, margin=19 * mm):
        self.institution_name = institution_name
        self.pagesize = pagesize
        self.margin = margin
        self.engine_factory = engine_factory or (lambda: ReportLabEngine(pagesize, margin))

    @property
    def page_width(self):
        return self.pagesize[0] - 2 * self.margin

    @contextmanager
    def open_engine(self):
        """Acquire one engine instance and release it on every exit path"""
        engine = self.engine_factory()
        try:
            yield engine
        finally:
            engine.close()

    # ------------------------- Paragraph / table helpers -------------------------
    @staticmethod
    def _get_paragraph_style():
        """Compact cell Paragraph style to enable word-wrap in table cells."""
        styles = getSampleStyleSheet()
        return ParagraphStyle('Cell', parent=styles['Normal'], fontSize=9, leading=11,
                              spaceAfter=0, spaceBefore=0)

    @staticmethod
    def _get_header_paragraph_style():
        styles = getSampleStyleSheet()
        return ParagraphStyle('HeaderCell', parent=styles['Normal'], fontSize=9, leading=11,
                              textColor=colors.white, spaceAfter=0, spaceBefore=0)

    @staticmethod
    def _to_paragraph(value, style=None):
        """Escape any value into a Paragraph so text wraps within the cell width."""
        text = '' if value is None else xml_escape(str(value)).replace('\n', '<br/>')
        return Paragraph(text, style or DocumentRenderer._get_paragraph_style())

    @staticmethod
    def _calc_colwidths_from_fracs(total_width, fracs):
        s = float(sum(fracs)) or 1.0
        return [total_width * f / s for f in fracs]

    def _build_table(self, rows, col_fracs, center_cols=None):
        """Header-on-black table with wrapped body cells.
        - rows: 2D list with header at index 0
        - col_fracs: fractions of the page width per column
        - center_cols: set of indices to center-align in body
        """
        header_style = self._get_header_paragraph_style()
        wrapped = [[self._to_paragraph(c, header_style) for c in rows[0]]]
        wrapped.extend([self._to_paragraph(c) for c in row] for row in rows[1:])
        tbl = Table(wrapped, repeatRows=1,
                    colWidths=self._calc_colwidths_from_fracs(self.page_width, col_fracs))
        style = [
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (-1, 0), colors.black),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 1), (-1, -1), 3),
            ('RIGHTPADDING', (0, 1), (-1, -1), 3),
            ('TOPPADDING', (0, 1), (-1, -1), 2),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 2),
        ]
        if center_cols:
            style.append(('ALIGN', (min(center_cols), 1), (max(center_cols), -1), 'CENTER'))
        tbl.setStyle(TableStyle(style))
        return tbl

    def _key_value_table(self, pairs, col_widths):
        data = [[self._to_paragraph(k), self._to_paragraph(v)] for k, v in pairs]
        tbl = Table(data, colWidths=col_widths, hAlign='LEFT')
        tbl.setStyle(TableStyle([
            ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
            ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 0), (0, -1), colors.whitesmoke),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        return tbl

    # ------------------------- Student section -------------------------
    def render_student_section(self, record, generated_on=None):
        """Flowables for one student: identity, semester tables, cumulative summary."""
        if record is None or not record.ok:
            raise RenderError("Cannot render a student without a resolved record",
                              detail=getattr(record, 'registration_number', None))

        styles = getSampleStyleSheet()
        title_center = ParagraphStyle('TitleCenter', parent=styles['Title'], alignment=1, fontSize=18, leading=22)
        subtitle_center = ParagraphStyle('SubtitleCenter', parent=styles['Normal'], alignment=1, fontSize=12, leading=14)
        footer_style = ParagraphStyle('Footer', parent=styles['Normal'], alignment=1, fontSize=8,
                                      textColor=colors.grey)
        cgpa_style = ParagraphStyle('Cgpa', parent=styles['Normal'], fontName='Helvetica-Bold', fontSize=11)

        s = record.student
        elements = [
            Paragraph('Academic Report', title_center),
            Paragraph(xml_escape(self.institution_name), subtitle_center),
            Spacer(1, 10),
            Paragraph('Student Information', styles['Heading2']),
            self._key_value_table([
                ('Name', s.name),
                ('Registration No', s.registration_number),
                ('Branch', s.branch),
                ('Current Semester', s.current_semester if s.current_semester is not None else 'N/A'),
                ('Address', s.address),
            ], [45 * mm, self.page_width - 45 * mm]),
            Spacer(1, 10),
        ]

        if not record.semesters:
            elements.append(Paragraph('No grade records available.', styles['Normal']))
        for semester in record.semesters:
            rows = [self.SUBJECT_HEADERS]
            for subject in semester.subjects:
                rows.append([subject.course_code, subject.course_name, subject.grade,
                             format_credits(subject.credits), subject.status])
            elements.append(Paragraph(f'Semester {semester.semester}', styles['Heading3']))
            elements.append(self._build_table(rows, self.SUBJECT_COL_FRACS, center_cols={2, 3, 4}))
            elements.append(Spacer(1, 4))
            elements.append(self._key_value_table([
                ('SGPA:', format_metric(semester.sgpa)),
                ('Credits Obtained:', f'{format_credits(semester.credits_obtained)} / '
                                      f'{format_credits(semester.total_credits)}'),
            ], [35 * mm, 35 * mm]))
            elements.append(Spacer(1, 10))

        generated_on = generated_on or date.today()
        elements.extend([
            Paragraph('Overall Summary', styles['Heading3']),
            Paragraph(f'Overall CGPA: {format_metric(record.cgpa)}', cgpa_style),
            Spacer(1, 24),
            Paragraph(f'Generated on: {generated_on.strftime("%d/%m/%Y")}', footer_style),
            Paragraph(f'\u00a9 {xml_escape(self.institution_name)}. This is a system-generated report.',
                      footer_style),
        ])
        return StudentSection(registration_number=s.registration_number, flowables=tuple(elements))

    # ------------------------- Page layout -------------------------
    @staticmethod
    def build_stories(sections, policy):
        """Lay sections out into stories, one per output document.

        COMBINED: a single story; each section is kept together and separated
        from the next by a page break, with none after the last section.
        PER_STUDENT: one story per section, each closed by a page break.
        """
        sections = list(sections)
        if policy is PageBoundaryPolicy.COMBINED:
            story = []
            for index, section in enumerate(sections):
                story.append(KeepTogether(list(section.flowables)))
                if index < len(sections) - 1:
                    story.append(PageBreak())
            return [story]
        return [list(section.flowables) + [PageBreak()] for section in sections]

    def render_document(self, sections, policy, engine):
        """Render sections with the given engine.

        COMBINED returns the bytes of one PDF; any failure is fatal.
        PER_STUDENT returns a lazy iterator of RenderedDocument; a failing
        student is logged and yielded with an error instead of content.
        """
        if policy is PageBoundaryPolicy.COMBINED:
            sections = list(sections)
            if not sections:
                raise RenderError("No student sections to render")
            return engine.render(self.build_stories(sections, policy)[0])
        return (self._render_one(section.registration_number, lambda s=section: s, engine)
                for section in sections)

    def render_student_documents(self, records, engine, generated_on=None):
        """Lazily render one standalone PDF per record (per-student packaging)."""
        for record in records:
            yield self._render_one(
                record.registration_number,
                lambda r=record: self.render_student_section(r, generated_on),
                engine,
            )

    def _render_one(self, registration_number, make_section, engine):
        try:
            section = make_section()
            story = self.build_stories([section], PageBoundaryPolicy.PER_STUDENT)[0]
            content = engine.render(story)
        except RenderError as e:
            log.warning("Failed to generate PDF for student %s: %s",
                        registration_number, e.detail or e.message)
            return RenderedDocument(registration_number, error=e.message)
        return RenderedDocument(registration_number, content=content)
