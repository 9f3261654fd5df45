from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from schoolhub.services import attendance as attendance_service
from schoolhub.utils.audit import log_event
from schoolhub.utils.decorators import role_required, get_current_user

attendance_bp = Blueprint('attendance', __name__)


@attendance_bp.route('', methods=['POST'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def mark_attendance():
    result = attendance_service.mark_attendance(request.get_json() or {}, get_current_user())
    return jsonify(result), 201


@attendance_bp.route('', methods=['GET'])
@jwt_required()
def get_attendance():
    filters = {
        "classroom_id": request.args.get('classroom_id'),
        "start_date": request.args.get('start_date'),
        "end_date": request.args.get('end_date'),
        "student_id": request.args.get('student_id'),
    }
    return jsonify(attendance_service.get_attendance(filters, get_current_user())), 200


@attendance_bp.route('/test-sms', methods=['POST'])
@jwt_required()
@role_required('superadmin', 'schooladmin')
def test_sms():
    data = request.get_json() or {}
    return jsonify(attendance_service.send_test_sms(data.get('phone_number'))), 200


@attendance_bp.route('/classroom/<int:classroom_id>', methods=['GET'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def get_classroom_attendance(classroom_id):
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 10, type=int)
    result = attendance_service.get_classroom_attendance_records(classroom_id, get_current_user(), page, limit)
    return jsonify(result), 200


@attendance_bp.route('/<int:attendance_id>', methods=['GET'])
@jwt_required()
def get_attendance_by_id(attendance_id):
    get_current_user()
    return jsonify(attendance_service.get_attendance_by_id(attendance_id)), 200


@attendance_bp.route('/<int:attendance_id>', methods=['PUT'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def update_attendance(attendance_id):
    data = request.get_json() or {}
    return jsonify(attendance_service.update_attendance(attendance_id, data, get_current_user())), 200


@attendance_bp.route('/<int:attendance_id>', methods=['DELETE'])
@jwt_required()
def delete_attendance(attendance_id):
    user = get_current_user()
    result = attendance_service.delete_attendance(attendance_id, user)
    log_event("ATTENDANCE_DELETED", user_id=user.id, ip=request.remote_addr,
              description=f"Attendance record {attendance_id}")
    return jsonify(result), 200
