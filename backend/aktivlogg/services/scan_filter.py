"""Client-side throttle for repeated decodes of the same QR code."""
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MS = 3000

@dataclass
class ScanAttempt:
    """One admitted decode event."""
    raw_text: str
    started_at_ms: float
    code: Optional[str] = None

class DuplicateScanFilter:
    """
    Gate decode events before they reach the registrar.

    A camera yields many frames per second, so the same code is decoded
    repeatedly. An event is dropped while a request is in flight, or when
    its raw text matches the last admitted text within the cool-down.
    This is a UX throttle; the per-day guarantee lives in the registrar.
    """

    def __init__(self, cooldown_ms: int = DEFAULT_COOLDOWN_MS):
        self.cooldown_ms = cooldown_ms
        self.busy = False
        self.last_attempt: Optional[ScanAttempt] = None

    def admit(self, raw_text: str, now_ms: float) -> Optional[ScanAttempt]:
        """Return a ScanAttempt if the event should be processed, else None."""
        if self.busy:
            logger.debug('Scan dropped, request in flight')
            return None

        last = self.last_attempt
        if last is not None and last.raw_text == raw_text \
                and now_ms - last.started_at_ms < self.cooldown_ms:
            logger.debug('Duplicate scan prevented: %r (code %r)', raw_text, last.code)
            return None

        self.last_attempt = ScanAttempt(raw_text=raw_text, started_at_ms=now_ms)
        self.busy = True
        return self.last_attempt

    def begin(self) -> bool:
        """Mark a request in flight that did not come from the decoder."""
        if self.busy:
            return False
        self.busy = True
        return True

    def complete(self, clear_memory: bool = False) -> None:
        """Clear the busy flag; forget the last text only on error paths."""
        self.busy = False
        if clear_memory:
            self.last_attempt = None

    def forget(self) -> None:
        self.last_attempt = None

    def reset(self) -> None:
        self.busy = False
        self.last_attempt = None
