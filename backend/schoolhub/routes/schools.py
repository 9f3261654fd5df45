from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from schoolhub.services import schools as school_service
from schoolhub.utils.audit import log_event
from schoolhub.utils.decorators import role_required, get_current_user

schools_bp = Blueprint('schools', __name__)


@schools_bp.route('', methods=['POST'])
@jwt_required()
@role_required('superadmin')
def create_school():
    result = school_service.create_school(request.get_json() or {}, get_current_user())
    return jsonify(result), 201


@schools_bp.route('', methods=['GET'])
@jwt_required()
@role_required('superadmin', 'schooladmin')
def list_schools():
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 10, type=int)
    search_term = request.args.get('search', type=str)
    return jsonify(school_service.list_schools(get_current_user(), search_term, page, limit)), 200


@schools_bp.route('/<int:school_id>', methods=['GET'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def get_school(school_id):
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 10, type=int)
    return jsonify(school_service.get_school(school_id, get_current_user(), page, limit)), 200


@schools_bp.route('/<int:school_id>', methods=['PATCH'])
@jwt_required()
@role_required('superadmin', 'schooladmin')
def update_school(school_id):
    return jsonify(school_service.update_school(school_id, request.get_json() or {}, get_current_user())), 200


@schools_bp.route('/<int:school_id>', methods=['DELETE'])
@jwt_required()
@role_required('superadmin')
def delete_school(school_id):
    user = get_current_user()
    result = school_service.delete_school(school_id, user)
    log_event("SCHOOL_DELETED", user_id=user.id, ip=request.remote_addr, description=f"School {school_id}")
    return jsonify(result), 200
