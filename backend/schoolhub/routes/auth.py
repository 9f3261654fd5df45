from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt

from schoolhub.errors import Unauthorized
from schoolhub.extensions import limiter
from schoolhub.services import auth as auth_service
from schoolhub.utils.audit import log_event
from schoolhub.utils.decorators import role_required, get_current_user

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/onboard', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
@jwt_required()
@role_required("superadmin", "schooladmin", "teacher")
def onboard():
    creator = get_current_user()
    result = auth_service.onboard_user(request.get_json() or {}, creator)
    log_event("USER_ONBOARDED", user_id=creator.id, ip=request.remote_addr,
              description=f"Onboarded {result['registration_id']}")
    return jsonify(result), 201


@auth_bp.route('/onboard-superadmin', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def onboard_superadmin():
    result = auth_service.onboard_superadmin(request.get_json() or {})
    log_event("SUPERADMIN_ONBOARDED", ip=request.remote_addr, description=f"Created {result['registration_id']}")
    return jsonify(result), 201


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def login():
    data = request.get_json() or {}
    registration_id = (data.get('registration_id') or '').strip()
    ip = request.remote_addr

    try:
        user, result = auth_service.login(registration_id, data.get('password', ''))
    except Unauthorized as e:
        log_event("LOGIN_FAILED", ip=ip, description=f"Failed login attempt for {registration_id}: {e.message}",
                  level="WARNING")
        raise

    log_event("LOGIN_SUCCESS", user_id=user.id, ip=ip, description=f"{registration_id} logged in")
    return jsonify(result), 200


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    user = get_current_user()
    result = auth_service.logout(get_jwt(), user.id)
    log_event("LOGOUT", user_id=user.id, ip=request.remote_addr)
    return jsonify(result), 200


@auth_bp.route('/reset-password', methods=['POST'])
@jwt_required()
def reset_password():
    user = get_current_user()
    result = auth_service.reset_password(user, request.get_json() or {})
    log_event("PASSWORD_RESET", user_id=user.id, ip=request.remote_addr)
    return jsonify(result), 200


@auth_bp.route('/admin-reset-password', methods=['POST'])
@jwt_required()
@role_required("superadmin", "schooladmin")
def admin_reset_password():
    admin = get_current_user()
    target, result = auth_service.admin_reset_password(admin, request.get_json() or {})
    log_event("ADMIN_PASSWORD_RESET", user_id=admin.id, ip=request.remote_addr,
              description=f"Reset password of user {target.id}")
    return jsonify(result), 200


@auth_bp.route('/verify', methods=['GET'])
@jwt_required()
def verify():
    user = get_current_user()
    return jsonify({"valid": True, "user": user.to_dict()}), 200
