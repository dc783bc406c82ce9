"""Helper functions for the application."""
from datetime import datetime
from typing import Any, Optional

from flask import current_app, jsonify, request

def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return jsonify({
        'error': True,
        'message': str(error),
        'status_code': status_code
    }), status_code

def success_response(data: Any = None, message: str = "Success"):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data

    return jsonify(response)

def error_response(message: str, status_code: int = 400, **extra):
    """Return consistent error response."""
    response = {
        'error': True,
        'message': message,
        'status_code': status_code
    }
    response.update(extra)
    return jsonify(response), status_code

def preferred_language() -> str:
    """Pick the response language from Accept-Language."""
    supported = current_app.config.get('SUPPORTED_LANGUAGES', ['nb', 'en'])
    default = current_app.config.get('DEFAULT_LANGUAGE', 'nb')

    # Norwegian browsers commonly send "no" or "nn"
    aliases = {'no': 'nb', 'nn': 'nb'}
    candidates = [aliases.get(lang.split('-')[0], lang.split('-')[0])
                  for lang in request.accept_languages.values()]

    return request.accept_languages.best_match(supported) or next(
        (lang for lang in candidates if lang in supported), default
    )

def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp; None passes through.

    Timestamps with an offset are converted to naive local time, the form
    every stored timestamp uses.
    """
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise TypeError("timestamp must be a string")

    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
