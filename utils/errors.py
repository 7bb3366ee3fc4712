"""
Error taxonomy for report generation

Every error carries a kind, a human-readable message and an optional
detail, and serializes to the structured payload returned to callers.
"""


class ReportError(Exception):
    """Base class for all report generation failures"""

    kind = 'report_error'
    status_code = 500

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self):
        payload = {'error': self.kind, 'message': self.message}
        if self.detail is not None:
            payload['detail'] = self.detail
        return payload


class ValidationError(ReportError):
    """Malformed request: missing fields, no identifiers, bad options"""
    kind = 'validation_error'
    status_code = 400


class EmptyColumnSetError(ValidationError):
    """No requested workbook column key is recognized"""
    kind = 'empty_column_set'


class NotFoundError(ReportError):
    kind = 'not_found'
    status_code = 404


class NoValidRecordsError(NotFoundError):
    """Every requested student is unknown"""
    kind = 'no_valid_records'


class AuthorizationError(ReportError):
    kind = 'authorization_error'
    status_code = 403


class RenderError(ReportError):
    kind = 'render_error'
    status_code = 500


class PackagingError(ReportError):
    kind = 'packaging_error'
    status_code = 500


class RepositoryError(ReportError):
    kind = 'repository_error'
    status_code = 503
