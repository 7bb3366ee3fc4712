"""
Validation utilities for the Academic Report Engine
"""

import re
from datetime import datetime

REPORT_FORMATS = ('pdf', 'excel')
PDF_PACKAGING_TYPES = ('combined', 'individual')

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')

def validate_report_name(name):
    """Validate report name"""
    if not isinstance(name, str) or len(name.strip()) == 0:
        return False, "Report name is required"

    if len(name) > 255:
        return False, "Report name must be 255 characters or less"

    return True, "Valid report name"

def validate_report_type(report_type):
    """Validate free-form report type label"""
    if not isinstance(report_type, str) or len(report_type.strip()) == 0:
        return False, "Report type is required"

    if len(report_type) > 50:
        return False, "Report type must be 50 characters or less"

    return True, "Valid report type"

def validate_report_format(report_format):
    """Validate output format"""
    if not report_format:
        return False, "Report format is required"

    if report_format not in REPORT_FORMATS:
        return False, f"Unsupported report format: {report_format}"

    return True, "Valid report format"

def validate_student_ids(student_ids):
    """Validate the list of student identifiers"""
    if not isinstance(student_ids, (list, tuple)) or len(student_ids) == 0:
        return False, "At least one student_id is required"

    for student_id in student_ids:
        if not isinstance(student_id, (str, int)) or isinstance(student_id, bool) or str(student_id).strip() == '':
            return False, f"Invalid student_id: {student_id!r}"
        if _CONTROL_CHARS.search(str(student_id)):
            return False, f"student_id must not contain control characters: {student_id!r}"

    return True, "Valid student ids"

def validate_pdf_packaging(packaging):
    """Validate PDF packaging type"""
    if packaging not in PDF_PACKAGING_TYPES:
        return False, f"pdf_options.type must be one of: {', '.join(PDF_PACKAGING_TYPES)}"
    return True, "Valid PDF packaging"

def validate_column_keys(columns):
    """Validate requested workbook column keys"""
    if columns is None:
        return True, "Default columns"

    if not isinstance(columns, (list, tuple)) or not all(isinstance(c, str) for c in columns):
        return False, "excel_options.columns must be a list of column keys"

    return True, "Valid column keys"

def validate_schedule(schedule):
    """Validate schedule descriptor label (e.g. 'weekly')"""
    if not isinstance(schedule, str) or len(schedule.strip()) == 0:
        return False, "Schedule is required"

    if len(schedule) > 50:
        return False, "Schedule must be 50 characters or less"

    return True, "Valid schedule"

def validate_date(date_str):
    """Validate date string format (YYYY-MM-DD)"""
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True, "Valid date"
    except (ValueError, TypeError):
        return False, "Invalid date format. Use YYYY-MM-DD"

def normalize_report_name(name, default='student_reports'):
    """Filesystem-safe, lower-cased form of a report name"""
    base = re.sub(r'[^a-z0-9]', '_', name or '', flags=re.IGNORECASE).lower()
    return base or default
