from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from schoolhub.services import reading as reading_service
from schoolhub.utils.decorators import role_required, get_current_user

reading_bp = Blueprint('reading', __name__)


def _page_args():
    return request.args.get('page', 1, type=int), request.args.get('limit', 10, type=int)


@reading_bp.route('', methods=['POST'])
@jwt_required()
@role_required('teacher')
def create_paragraph():
    return jsonify(reading_service.create_paragraph(request.get_json() or {}, get_current_user())), 201


@reading_bp.route('', methods=['GET'])
@jwt_required()
def list_paragraphs():
    page, limit = _page_args()
    result = reading_service.list_paragraphs(
        get_current_user(),
        difficulty_level=request.args.get('difficulty_level'),
        search=request.args.get('search', type=str),
        page=page,
        limit=limit,
    )
    return jsonify(result), 200


@reading_bp.route('/assignments', methods=['POST'])
@jwt_required()
@role_required('teacher')
def create_assignment():
    return jsonify(reading_service.create_assignment(request.get_json() or {}, get_current_user())), 201


@reading_bp.route('/assignments/my-assignments', methods=['GET'])
@jwt_required()
@role_required('student')
def my_assignments():
    page, limit = _page_args()
    return jsonify(reading_service.get_student_assignments(get_current_user(), page, limit)), 200


@reading_bp.route('/assignments/teacher-assignments', methods=['GET'])
@jwt_required()
@role_required('teacher')
def teacher_assignments():
    page, limit = _page_args()
    return jsonify(reading_service.get_teacher_assignments(get_current_user(), page, limit)), 200


@reading_bp.route('/assignments/<int:assignment_id>', methods=['GET'])
@jwt_required()
@role_required('teacher', 'student')
def get_assignment(assignment_id):
    return jsonify(reading_service.get_assignment(assignment_id, get_current_user())), 200


@reading_bp.route('/assignments/<int:assignment_id>/complete', methods=['POST'])
@jwt_required()
@role_required('student')
def complete_assignment(assignment_id):
    data = request.get_json() or {}
    return jsonify(reading_service.complete_assignment(assignment_id, data, get_current_user())), 200


@reading_bp.route('/completions/<int:completion_id>/feedback', methods=['POST'])
@jwt_required()
@role_required('teacher')
def add_feedback(completion_id):
    data = request.get_json() or {}
    return jsonify(reading_service.add_teacher_feedback(completion_id, data, get_current_user())), 200


@reading_bp.route('/<int:paragraph_id>', methods=['GET'])
@jwt_required()
def get_paragraph(paragraph_id):
    return jsonify(reading_service.get_paragraph(paragraph_id, get_current_user())), 200


@reading_bp.route('/<int:paragraph_id>', methods=['PATCH'])
@jwt_required()
@role_required('teacher')
def update_paragraph(paragraph_id):
    data = request.get_json() or {}
    return jsonify(reading_service.update_paragraph(paragraph_id, data, get_current_user())), 200


@reading_bp.route('/<int:paragraph_id>', methods=['DELETE'])
@jwt_required()
@role_required('teacher')
def delete_paragraph(paragraph_id):
    return jsonify(reading_service.delete_paragraph(paragraph_id, get_current_user())), 200
