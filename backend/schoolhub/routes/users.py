from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from schoolhub.services import users as user_service
from schoolhub.utils.audit import log_event
from schoolhub.utils.decorators import role_required, get_current_user

users_bp = Blueprint('users', __name__)


@users_bp.route('', methods=['GET'])
@jwt_required()
@role_required('superadmin')
def list_users():
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 10, type=int)
    role = request.args.get('role', type=str)
    return jsonify(user_service.list_users(get_current_user(), role, page, limit)), 200


@users_bp.route('/school/<int:school_id>', methods=['GET'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def list_school_users(school_id):
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 10, type=int)
    search_term = request.args.get('search', type=str)
    return jsonify(user_service.list_school_users(school_id, get_current_user(), search_term, page, limit)), 200


@users_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    return jsonify(user_service.update_profile(get_current_user(), request.get_json() or {})), 200


@users_bp.route('/<int:user_id>', methods=['GET'])
@jwt_required()
def get_user(user_id):
    return jsonify(user_service.get_user(user_id, get_current_user())), 200


@users_bp.route('/<int:user_id>', methods=['PATCH'])
@jwt_required()
@role_required('superadmin', 'schooladmin', 'teacher')
def update_user(user_id):
    return jsonify(user_service.update_user(user_id, request.get_json() or {}, get_current_user())), 200


@users_bp.route('/block/<int:user_id>', methods=['PATCH'])
@jwt_required()
@role_required('superadmin', 'schooladmin')
def block_user(user_id):
    admin = get_current_user()
    result = user_service.set_active(user_id, admin, False)
    log_event("USER_BLOCKED", user_id=admin.id, ip=request.remote_addr, description=f"Blocked user {user_id}")
    return jsonify(result), 200


@users_bp.route('/unblock/<int:user_id>', methods=['PATCH'])
@jwt_required()
@role_required('superadmin', 'schooladmin')
def unblock_user(user_id):
    admin = get_current_user()
    result = user_service.set_active(user_id, admin, True)
    log_event("USER_UNBLOCKED", user_id=admin.id, ip=request.remote_addr, description=f"Unblocked user {user_id}")
    return jsonify(result), 200


@users_bp.route('/<int:user_id>', methods=['DELETE'])
@jwt_required()
@role_required('superadmin')
def delete_user(user_id):
    admin = get_current_user()
    result = user_service.delete_user(user_id, admin)
    log_event("USER_DELETED", user_id=admin.id, ip=request.remote_addr, description=f"Deleted user {user_id}")
    return jsonify(result), 200
