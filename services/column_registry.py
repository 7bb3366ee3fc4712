"""
Column projection registry for workbook exports
Maps column keys to display labels and extraction functions
"""

from functools import lru_cache

from models.records import NOT_AVAILABLE, ColumnDefinition

DEFAULT_MAX_SEMESTERS = 10


def format_metric(value):
    """Grade-point averages are always shown with exactly 2 decimals"""
    return f"{float(value):.2f}"


def format_credits(value):
    """Credits: whole numbers without decimals, fractional with 2 decimal places"""
    if value is None:
        return NOT_AVAILABLE
    num = float(value)
    if num == int(num):
        return str(int(num))
    return f"{num:.2f}"


def _identity(attribute):
    def extract(record):
        value = getattr(record.student, attribute)
        if value is None or value == '':
            return NOT_AVAILABLE
        return str(value)
    return extract


def _semester_sgpa(number):
    def extract(record):
        summary = record.semester(number)
        return format_metric(summary.sgpa) if summary else NOT_AVAILABLE
    return extract


def _semester_credits_obtained(number):
    def extract(record):
        summary = record.semester(number)
        if summary is None:
            return NOT_AVAILABLE
        return f"{format_credits(summary.credits_obtained)} / {format_credits(summary.total_credits)}"
    return extract


def _semester_total_credits(number):
    def extract(record):
        summary = record.semester(number)
        return format_credits(summary.total_credits) if summary else NOT_AVAILABLE
    return extract


IDENTITY_COLUMNS = (
    ColumnDefinition('reg_no', 'Registration No.', _identity('registration_number')),
    ColumnDefinition('name', 'Name', _identity('name')),
    ColumnDefinition('branch', 'Branch', _identity('branch')),
    ColumnDefinition('current_semester', 'Current Semester', _identity('current_semester')),
    ColumnDefinition('address', 'Address', _identity('address')),
    ColumnDefinition('cgpa', 'Overall CGPA', lambda record: format_metric(record.cgpa)),
)


def semester_columns(number):
    return (
        ColumnDefinition(f'semester{number}_sgpa', f'Semester {number} SGPA', _semester_sgpa(number)),
        ColumnDefinition(f'semester{number}_credits_obtained', f'Semester {number} Credits Obtained',
                         _semester_credits_obtained(number)),
        ColumnDefinition(f'semester{number}_total_credits', f'Semester {number} Total Credits',
                         _semester_total_credits(number)),
    )


@lru_cache(maxsize=None)
def build_catalog(max_semesters=DEFAULT_MAX_SEMESTERS):
    """Full ordered catalog for a semester cap, built once per cap"""
    columns = list(IDENTITY_COLUMNS)
    for number in range(1, max_semesters + 1):
        columns.extend(semester_columns(number))
    return tuple(columns)


class ColumnRegistry:
    """Fixed catalog of workbook columns keyed by string"""

    def __init__(self, max_semesters=DEFAULT_MAX_SEMESTERS):
        if max_semesters < 0:
            raise ValueError("max_semesters must not be negative")
        self.max_semesters = max_semesters
        self.catalog = build_catalog(max_semesters)
        self._by_key = {column.key: column for column in self.catalog}

    def resolve_columns(self, requested_keys=None):
        """Columns for the requested keys in caller order; unknown keys are dropped.

        No keys selects the full default catalog. An empty result means every
        requested key was unrecognized.
        """
        if not requested_keys:
            return list(self.catalog)
        return [self._by_key[key] for key in requested_keys if key in self._by_key]

    def unknown_keys(self, requested_keys):
        return [key for key in (requested_keys or []) if key not in self._by_key]
