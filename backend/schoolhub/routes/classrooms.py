from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from schoolhub.services import classrooms as classroom_service
from schoolhub.utils.audit import log_event
from schoolhub.utils.decorators import role_required, get_current_user

classrooms_bp = Blueprint('classrooms', __name__)


@classrooms_bp.route('', methods=['POST'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def create_classroom():
    result = classroom_service.create_classroom(request.get_json() or {}, get_current_user())
    return jsonify(result), 201


@classrooms_bp.route('', methods=['GET'])
@jwt_required()
def list_classrooms():
    return jsonify(classroom_service.list_classrooms(get_current_user())), 200


@classrooms_bp.route('/<int:classroom_id>', methods=['GET'])
@jwt_required()
def get_classroom(classroom_id):
    return jsonify(classroom_service.get_classroom(classroom_id, get_current_user())), 200


@classrooms_bp.route('/<int:classroom_id>', methods=['PATCH'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def update_classroom(classroom_id):
    data = request.get_json() or {}
    return jsonify(classroom_service.update_classroom(classroom_id, data, get_current_user())), 200


@classrooms_bp.route('/<int:classroom_id>', methods=['DELETE'])
@jwt_required()
@role_required('superadmin', 'schooladmin')
def delete_classroom(classroom_id):
    user = get_current_user()
    result = classroom_service.delete_classroom(classroom_id, user)
    log_event("CLASSROOM_DELETED", user_id=user.id, ip=request.remote_addr, description=f"Classroom {classroom_id}")
    return jsonify(result), 200


@classrooms_bp.route('/<int:classroom_id>/students', methods=['POST'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def add_students(classroom_id):
    data = request.get_json() or {}
    return jsonify(classroom_service.add_students(classroom_id, data, get_current_user())), 200


@classrooms_bp.route('/<int:classroom_id>/students/<int:student_id>', methods=['DELETE'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def remove_student(classroom_id, student_id):
    return jsonify(classroom_service.remove_student(classroom_id, student_id, get_current_user())), 200
