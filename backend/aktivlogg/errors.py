"""Error kinds raised by the scan workflow and their user-facing messages."""
from datetime import datetime
from enum import Enum
from typing import Optional

class ErrorKind(Enum):
    """Closed set of failures the registration workflow can report."""
    EMPTY_CODE = 'empty_code'
    LOCATION_NOT_FOUND = 'location_not_found'
    DUPLICATE_DAY = 'duplicate_day'
    REGISTRATION_FAILED = 'registration_failed'
    AUTHENTICATION_REQUIRED = 'authentication_required'

MESSAGES = {
    ErrorKind.EMPTY_CODE: {
        'nb': 'Tom QR-kode skannet',
        'en': 'Empty QR code scanned',
    },
    ErrorKind.LOCATION_NOT_FOUND: {
        'nb': 'Kunne ikke finne skytebanen for kode: "{code}". Sjekk at QR-koden er gyldig.',
        'en': 'Could not find a range for code: "{code}". Check that the QR code is valid.',
    },
    ErrorKind.DUPLICATE_DAY: {
        'nb': 'Du har allerede registrert trening i dag kl. {time}. Én trening per dag er nok!',
        'en': 'You already registered training today at {time}. One session per day is enough!',
    },
    ErrorKind.REGISTRATION_FAILED: {
        'nb': 'Kunne ikke starte treningsøkt: {reason}',
        'en': 'Could not start training session: {reason}',
    },
    ErrorKind.AUTHENTICATION_REQUIRED: {
        'nb': 'Du må være logget inn for å registrere trening.',
        'en': 'You must be logged in to register training.',
    },
}

DEFAULT_LANGUAGE = 'nb'

def render_message(kind: ErrorKind, language: str = DEFAULT_LANGUAGE, **params) -> str:
    """Render the message for an error kind in the given language."""
    table = MESSAGES[kind]
    template = table.get(language) or table[DEFAULT_LANGUAGE]
    return template.format(**params)

class ScanError(Exception):
    """Base class for registration workflow failures."""

    kind: ErrorKind = None

    def __init__(self, **params):
        self.params = params
        super().__init__(self.message())

    def message(self, language: str = DEFAULT_LANGUAGE) -> str:
        return render_message(self.kind, language, **self.params)

class EmptyCodeError(ScanError):
    """The scanned payload normalized to an empty code."""
    kind = ErrorKind.EMPTY_CODE

class LocationNotFoundError(ScanError):
    """No active location in the organization has the scanned code."""
    kind = ErrorKind.LOCATION_NOT_FOUND

    def __init__(self, code: str):
        self.code = code
        super().__init__(code=code)

class DuplicateDayRegistrationError(ScanError):
    """The member already has a training session today."""
    kind = ErrorKind.DUPLICATE_DAY

    def __init__(self, existing_start: Optional[datetime] = None):
        self.existing_start = existing_start
        super().__init__(time=existing_start.strftime('%H:%M') if existing_start else '--:--')

class RegistrationError(ScanError):
    """Storage failure while registering a session."""
    kind = ErrorKind.REGISTRATION_FAILED

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason=reason)

class AuthenticationRequiredError(ScanError):
    """No authenticated organization member is available."""
    kind = ErrorKind.AUTHENTICATION_REQUIRED
