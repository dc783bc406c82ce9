"""Extract the bare location code from scanned QR text."""
import logging
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from aktivlogg.errors import EmptyCodeError

logger = logging.getLogger(__name__)

CODE_PARAMS = ('c', 'code')
DEEP_LINK_MARKER = 'scanner?'

def _code_from_query(query: str) -> Optional[str]:
    """Return the first code parameter in a query string, or None if absent."""
    params = parse_qs(query, keep_blank_values=True)
    for name in CODE_PARAMS:
        if name in params:
            return params[name][0]
    return None

def _is_absolute_url(text: str) -> bool:
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    return parts.scheme in ('http', 'https') and bool(parts.netloc)

def normalize_code(raw_text: str) -> str:
    """
    Convert decoded QR text into a location code.

    Accepts a bare code, a scanner deep link (``/scanner?c=...``) or an
    absolute URL carrying a ``c``/``code`` query parameter.
    Raises EmptyCodeError when nothing is left.
    """
    code = (raw_text or '').strip()

    if DEEP_LINK_MARKER in code:
        extracted = _code_from_query(code.split('?', 1)[1].split('#', 1)[0])
        if extracted is not None:
            logger.debug('Extracted code %r from deep link', extracted)
            code = extracted
    elif _is_absolute_url(code):
        extracted = _code_from_query(urlsplit(code).query)
        if extracted is not None:
            logger.debug('Extracted code %r from URL', extracted)
            code = extracted

    if not code:
        raise EmptyCodeError()

    return code
