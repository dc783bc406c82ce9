"""Training log and approval API."""
import logging
from datetime import datetime

from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required

from aktivlogg import db
from aktivlogg.errors import DuplicateDayRegistrationError, RegistrationError
from aktivlogg.models.organization import OrganizationMember
from aktivlogg.models.training_location import TrainingLocation
from aktivlogg.models.training_session import TrainingSession
from aktivlogg.services.session_registrar import SessionRegistrar
from aktivlogg.utils.decorators import admin_required, member_required, officer_required
from aktivlogg.utils.helpers import (
    error_response, parse_datetime, preferred_language, success_response
)
from aktivlogg.utils.validators import Validator

logger = logging.getLogger(__name__)

training_bp = Blueprint('training', __name__)

def get_registrar() -> SessionRegistrar:
    return SessionRegistrar(default_discipline=current_app.config.get('DEFAULT_DISCIPLINE', 'NSF'))

def _organization_session(session_id: int):
    """Session by id, only if it belongs to the caller's organization."""
    session = db.session.get(TrainingSession, session_id)
    if session is None or session.organization_id != g.identity.organization_id:
        return None
    return session

# =================== MEMBER ===================

@training_bp.route('/sessions/mine', methods=['GET'])
@jwt_required()
@member_required
def my_sessions():
    """Training log for the calling member."""
    try:
        sessions = SessionRegistrar.member_sessions(g.identity.member_id)
        return success_response(data=[s.to_dict() for s in sessions])

    except Exception as e:
        return error_response(f"Error fetching training log: {str(e)}", 500)

@training_bp.route('/sessions/<int:session_id>', methods=['PATCH'])
@jwt_required()
@member_required
def update_session(session_id):
    """Update notes, end time or duration. Owners and admins only."""
    session = _organization_session(session_id)
    if session is None:
        return error_response("Training session not found", 404)

    if session.member_id != g.identity.member_id and not g.identity.is_admin:
        return error_response("You can only edit your own training sessions", 403)

    data = request.get_json(silent=True) or {}
    details = {}

    try:
        if 'notes' in data:
            details['notes'] = data['notes']
        if 'end_time' in data:
            details['end_time'] = parse_datetime(data['end_time'])
        if 'duration_minutes' in data:
            details['duration_minutes'] = data['duration_minutes']
    except (TypeError, ValueError):
        return error_response("end_time must be an ISO 8601 timestamp", 400)

    check = Validator.validate_duration(details.get('duration_minutes'))
    if not check['is_valid']:
        return error_response(check['errors'][0], 400)

    if details.get('end_time') is not None and details['end_time'] < session.start_time:
        return error_response("end_time cannot be before start_time", 400)

    try:
        session = get_registrar().update_session_details(session, **details)
        return success_response(data=session.to_dict(), message="Training session updated")

    except RegistrationError as e:
        return error_response(e.message(preferred_language()), 500)

# =================== APPROVAL ===================

@training_bp.route('/sessions', methods=['GET'])
@jwt_required()
@officer_required
def list_sessions():
    """All sessions in the organization; ``?pending=true`` for the approval queue."""
    try:
        pending = request.args.get('pending', 'false').lower() in ('1', 'true', 'yes')
        sessions = SessionRegistrar.organization_sessions(
            g.identity.organization_id,
            pending_only=pending
        )
        return success_response(data=[s.to_dict() for s in sessions])

    except Exception as e:
        return error_response(f"Error fetching training sessions: {str(e)}", 500)

@training_bp.route('/sessions/<int:session_id>/verify', methods=['POST'])
@jwt_required()
@officer_required
def verify_session(session_id):
    """Approve a pending session."""
    session = _organization_session(session_id)
    if session is None:
        return error_response("Training session not found", 404)

    if session.verified:
        return error_response("Training session is already verified", 400)

    try:
        session = get_registrar().verify_session(session, verified_by=g.identity.user_id)
        return success_response(data=session.to_dict(), message="Training session verified")

    except RegistrationError as e:
        return error_response(e.message(preferred_language()), 500)

@training_bp.route('/sessions/<int:session_id>', methods=['DELETE'])
@jwt_required()
@officer_required
def reject_session(session_id):
    """Reject (delete) a pending session."""
    session = _organization_session(session_id)
    if session is None:
        return error_response("Training session not found", 404)

    if session.verified:
        return error_response("Verified training sessions cannot be rejected", 400)

    try:
        get_registrar().reject_session(session)
        logger.info('Training session %s rejected by %s', session_id, g.identity.user_id)
        return success_response(message="Training session rejected")

    except RegistrationError as e:
        return error_response(e.message(preferred_language()), 500)

# =================== ADMIN ===================

@training_bp.route('/sessions/manual', methods=['POST'])
@jwt_required()
@admin_required
def add_manual_session():
    """Record a session on behalf of a member."""
    data = request.get_json(silent=True) or {}

    check = Validator.validate_required_fields(data, ['member_id', 'location_id'])
    if not check['is_valid']:
        return error_response(check['errors'][0], 400)

    check = Validator.validate_duration(data.get('duration_minutes'))
    if not check['is_valid']:
        return error_response(check['errors'][0], 400)

    try:
        start_time = parse_datetime(data.get('start_time')) or datetime.now()
    except (TypeError, ValueError):
        return error_response("start_time must be an ISO 8601 timestamp", 400)

    organization_id = g.identity.organization_id
    member = db.session.get(OrganizationMember, data['member_id'])
    if member is None or member.organization_id != organization_id:
        return error_response("Member not found", 404)

    location = db.session.get(TrainingLocation, data['location_id'])
    if location is None or location.organization_id != organization_id:
        return error_response("Training location not found", 404)

    language = preferred_language()
    try:
        session = get_registrar().add_manual_session(
            organization_id,
            member.id,
            location.id,
            start_time=start_time,
            verified_by=g.identity.user_id,
            duration_minutes=data.get('duration_minutes'),
            notes=data.get('notes')
        )
    except DuplicateDayRegistrationError as e:
        return error_response(e.message(language), 409)
    except RegistrationError as e:
        return error_response(e.message(language), 500)

    return success_response(
        data=session.to_dict(),
        message="Training session added"
    ), 201
