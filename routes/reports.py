"""
Report routes for the Academic Report Engine
Thin HTTP adapter over ReportService and ScheduleService
"""

from urllib.parse import quote

from flask import Blueprint, Response, current_app, jsonify, request

from database import db
from services.report_service import ReportRequest, ReportService
from services.schedule_service import ScheduleService
from utils.errors import ReportError
from utils.logger import get_logger

log = get_logger('routes')

reports_bp = Blueprint('reports', __name__)

def get_report_service():
    """ReportService wired from the current app; tests may override via app.extensions"""
    service = current_app.extensions.get('report_service')
    if service is None:
        service = ReportService.from_config(
            current_app.config, db.engine,
            authorizer=current_app.extensions.get('report_authorizer'),
        )
    return service

@reports_bp.errorhandler(ReportError)
def handle_report_error(error):
    """Structured error payload for failures raised before streaming"""
    log.warning("Report request failed: %s - %s", error.kind, error.message)
    return jsonify(error.to_dict()), error.status_code

@reports_bp.route('/generate', methods=['POST'])
def generate_report():
    """Generate a report and stream it back as an attachment"""
    report_request = ReportRequest.from_payload(request.get_json(silent=True))
    output = get_report_service().generate(report_request)

    response = Response(output.stream, mimetype=output.content_type, direct_passthrough=True)
    response.headers['Content-Disposition'] = f'attachment; filename="{output.filename}"'
    if output.omissions:
        response.headers['X-Report-Omitted'] = ','.join(
            quote(identifier, safe='') for identifier in output.omitted_identifiers)
    return response

@reports_bp.route('/schedule', methods=['POST'])
def schedule_report():
    """Store a schedule descriptor"""
    success, message, report = ScheduleService.schedule_report(request.get_json(silent=True))
    if not success:
        return jsonify({'error': 'validation_error', 'message': message}), 400
    return jsonify({'message': message, 'report': report}), 201

@reports_bp.route('/scheduled', methods=['GET'])
def scheduled_reports():
    """List stored schedule descriptors"""
    return jsonify(ScheduleService.list_scheduled())

@reports_bp.route('/scheduled/<int:schedule_id>', methods=['DELETE'])
def delete_scheduled_report(schedule_id):
    """Delete a stored schedule descriptor"""
    success, message = ScheduleService.delete_scheduled(schedule_id)
    if success is None:
        return jsonify({'error': 'not_found', 'message': message}), 404
    if not success:
        return jsonify({'error': 'repository_error', 'message': message}), 503
    return jsonify({'message': message})
