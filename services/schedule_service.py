"""
Schedule service for the Academic Report Engine
Accepts and stores schedule descriptors; nothing here runs them
"""

from datetime import datetime

from database import db, handle_db_error
from models.schedule import ScheduledReport
from utils.db_helpers import safe_add_and_commit, safe_delete_and_commit
from utils.validators import (
    validate_date, validate_report_format, validate_report_name, validate_report_type,
    validate_schedule,
)


class ScheduleService:
    """Service for storing scheduled report descriptors"""

    @staticmethod
    def schedule_report(data):
        """Validate and store a schedule descriptor.

        Returns (success, message, descriptor_dict_or_None).
        """
        if not isinstance(data, dict):
            return False, "Request body must be a JSON object", None

        for ok, message in (
            validate_report_name(data.get('name')),
            validate_report_type(data.get('type')),
            validate_report_format(data.get('format')),
            validate_schedule(data.get('schedule')),
            validate_date(data.get('next_run')),
        ):
            if not ok:
                return False, message, None

        recipients = data.get('recipients') or []
        if not isinstance(recipients, list):
            return False, "Recipients must be a list", None
        parameters = data.get('parameters') or {}
        if not isinstance(parameters, dict):
            return False, "Parameters must be an object", None

        report = ScheduledReport(
            name=data['name'].strip(),
            type=data['type'].strip(),
            format=data['format'],
            schedule=data['schedule'].strip(),
            next_run=datetime.strptime(data['next_run'], '%Y-%m-%d').date(),
            recipients=recipients,
            parameters=parameters,
        )
        success, message = safe_add_and_commit(report)
        if not success:
            return False, message, None
        return True, "Report scheduled successfully", report.to_dict()

    @staticmethod
    @handle_db_error
    def list_scheduled():
        """All stored descriptors, soonest next_run first"""
        reports = ScheduledReport.query.order_by(ScheduledReport.next_run.asc(), ScheduledReport.id.asc()).all()
        return [report.to_dict() for report in reports]

    @staticmethod
    def delete_scheduled(schedule_id):
        """Returns (success, message); success is None when the descriptor does not exist"""
        report = db.session.get(ScheduledReport, schedule_id)
        if report is None:
            return None, "Scheduled report not found"
        success, message = safe_delete_and_commit(report)
        if success:
            return True, "Scheduled report deleted successfully"
        return False, message
