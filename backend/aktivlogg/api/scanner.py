"""Scanner API - register training from a QR code decoded on the device."""
import logging

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from aktivlogg import db, limiter
from aktivlogg.errors import (
    AuthenticationRequiredError, DuplicateDayRegistrationError, ErrorKind,
    RegistrationError, ScanError
)
from aktivlogg.services.auth_service import AuthService
from aktivlogg.services.scan_workflow import NAVIGATE_BACK, WorkflowSettings, register_scan
from aktivlogg.services.session_registrar import SessionRegistrar
from aktivlogg.utils.helpers import error_response, preferred_language, success_response

logger = logging.getLogger(__name__)

scanner_bp = Blueprint('scanner', __name__)

STATUS_BY_KIND = {
    ErrorKind.EMPTY_CODE: 400,
    ErrorKind.AUTHENTICATION_REQUIRED: 401,
    ErrorKind.LOCATION_NOT_FOUND: 404,
    ErrorKind.DUPLICATE_DAY: 409,
    ErrorKind.REGISTRATION_FAILED: 500,
}

def get_registrar() -> SessionRegistrar:
    return SessionRegistrar(default_discipline=current_app.config.get('DEFAULT_DISCIPLINE', 'NSF'))

def _error_outcome(error: ScanError, settings: WorkflowSettings) -> dict:
    outcome = {
        'outcome': 'duplicate_day' if error.kind == ErrorKind.DUPLICATE_DAY else 'error',
        'error_kind': error.kind.value,
    }

    if isinstance(error, DuplicateDayRegistrationError):
        outcome['existing_start_time'] = (
            error.existing_start.isoformat() if error.existing_start else None
        )
        outcome['modal_auto_close_ms'] = settings.duplicate_modal_ms
        outcome['navigate_on_close'] = NAVIGATE_BACK
    elif not isinstance(error, AuthenticationRequiredError):
        outcome['banner_auto_dismiss_ms'] = settings.error_banner_ms

    return outcome

@scanner_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Scanner service is running')

@scanner_bp.route('/scan', methods=['POST'])
@jwt_required()
@limiter.limit("30 per minute")
def scan():
    """
    Register a training session from a scanned payload.

    Body: ``{"payload": "<raw QR text>"}`` or ``{"code": "<location code>"}``.
    """
    language = preferred_language()
    settings = WorkflowSettings.from_config(current_app.config)

    data = request.get_json(silent=True) or {}
    raw_text = data.get('payload')
    if raw_text is None:
        raw_text = data.get('code', '')
    if not isinstance(raw_text, str):
        return error_response("payload must be a string", 400)

    try:
        identity = AuthService.current_identity()
        session = register_scan(get_registrar(), identity, raw_text)

    except ScanError as e:
        logger.info('Scan rejected (%s): %r', e.kind.value, raw_text)
        return error_response(
            e.message(language),
            STATUS_BY_KIND[e.kind],
            data=_error_outcome(e, settings)
        )

    except Exception as e:
        db.session.rollback()
        logger.exception('Unexpected error registering scan')
        error = RegistrationError(str(e))
        return error_response(error.message(language), 500, data=_error_outcome(error, settings))

    return success_response(
        data={
            'outcome': 'success',
            'session': session.to_dict(),
            'redirect_to': settings.training_log_path,
            'redirect_after_ms': settings.success_redirect_ms,
        },
        message='Training session registered'
    ), 201
