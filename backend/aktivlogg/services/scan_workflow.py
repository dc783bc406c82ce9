"""State machine driving QR-code training registration."""
import logging
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from aktivlogg.errors import (
    AuthenticationRequiredError, DuplicateDayRegistrationError, ErrorKind, ScanError
)
from aktivlogg.services.auth_service import IdentityContext
from aktivlogg.services.code_normalizer import normalize_code
from aktivlogg.services.decoder import DecodeChannel, Decoder
from aktivlogg.services.scan_filter import DuplicateScanFilter
from aktivlogg.services.session_registrar import SessionRegistrar

logger = logging.getLogger(__name__)

NAVIGATE_BACK = 'back'

def register_code(registrar: SessionRegistrar, identity: Optional[IdentityContext], code: str):
    """Register a session for the identity at the location with this code."""
    if identity is None:
        raise AuthenticationRequiredError()

    location = registrar.resolve_location(identity.organization_id, code)
    return registrar.register_session(identity.organization_id, identity.member_id, location.id)

def register_scan(registrar: SessionRegistrar, identity: Optional[IdentityContext], raw_text: str):
    """Normalize a scanned payload and register a session at its location."""
    return register_code(registrar, identity, normalize_code(raw_text))

class ScanState(Enum):
    """Workflow states."""
    IDLE = 'idle'
    SCANNING = 'scanning'
    PROCESSING = 'processing'
    SUCCESS = 'success'
    DUPLICATE_DAY = 'duplicate_day'
    ERROR = 'error'

@dataclass
class WorkflowSettings:
    """Display timings and targets for the workflow."""
    cooldown_ms: int = 3000
    error_banner_ms: int = 3000
    duplicate_modal_ms: int = 10000
    success_redirect_ms: int = 5000
    training_log_path: str = '/log'
    language: str = 'nb'

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'WorkflowSettings':
        return cls(
            cooldown_ms=config.get('SCAN_COOLDOWN_MS', 3000),
            error_banner_ms=config.get('ERROR_BANNER_MS', 3000),
            duplicate_modal_ms=config.get('DUPLICATE_MODAL_MS', 10000),
            success_redirect_ms=config.get('SUCCESS_REDIRECT_MS', 5000),
            training_log_path=config.get('TRAINING_LOG_PATH', '/log'),
            language=config.get('DEFAULT_LANGUAGE', 'nb')
        )

@dataclass
class WorkflowView:
    """What the screen shows."""
    state: ScanState = ScanState.IDLE
    banner: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    modal_open: bool = False
    modal_message: Optional[str] = None
    session: Optional[Dict[str, Any]] = None

class ThreadingScheduler:
    """Runs callbacks after a delay on timer threads."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_seconds, callback)
        timer.daemon = True
        timer.start()
        return timer

def _monotonic_ms() -> float:
    return time.monotonic() * 1000

class ScanWorkflowController:
    """
    Glue between the decoder, the duplicate filter and the registrar.

    IDLE -> SCANNING -> PROCESSING -> SUCCESS | DUPLICATE_DAY | ERROR

    The decoder is created on entering SCANNING and released on every exit
    from it. Decoded text arrives through a bounded channel and is consumed
    one message at a time by ``pump``. Every failure is handled here and
    turned into view state; nothing propagates to the caller.
    """

    def __init__(
        self,
        registrar: SessionRegistrar,
        decoder_factory: Callable[[], Decoder],
        identity: Optional[IdentityContext] = None,
        settings: WorkflowSettings = None,
        scheduler=None,
        clock: Callable[[], float] = _monotonic_ms,
        navigate: Callable[[str], None] = None,
        listener: Callable[[WorkflowView], None] = None
    ):
        self.registrar = registrar
        self.decoder_factory = decoder_factory
        self.identity = identity
        self.settings = settings or WorkflowSettings()
        self.scheduler = scheduler or ThreadingScheduler()
        self.clock = clock
        self.navigate = navigate or (lambda target: None)
        self.listener = listener

        self.filter = DuplicateScanFilter(self.settings.cooldown_ms)
        self.channel = DecodeChannel()
        self.view = WorkflowView()
        self.transitions: List[ScanState] = [ScanState.IDLE]

        self._lock = threading.RLock()
        self._decoder: Optional[Decoder] = None
        self._timers = []

    @property
    def state(self) -> ScanState:
        return self.view.state

    # =================== USER ACTIONS ===================

    def start(self) -> bool:
        """Begin scanning; fails closed without an authenticated member."""
        with self._lock:
            if self.state not in (ScanState.IDLE, ScanState.ERROR):
                return False

            self._cancel_timers()
            self.view.banner = None
            self.view.error_kind = None

            if self.identity is None:
                logger.warning('Scanner start refused, no authenticated member')
                self._show_banner(AuthenticationRequiredError())
                self._set_state(ScanState.IDLE)
                return False

            self.filter.reset()
            self.channel.drain()
            return self._enter_scanning()

    def cancel(self) -> bool:
        """Stop scanning at the user's request."""
        with self._lock:
            if self.state != ScanState.SCANNING:
                return False

            self._release_decoder()
            self.filter.reset()
            self.channel.drain()
            self.view.banner = None
            self._set_state(ScanState.IDLE)
            return True

    def submit_code(self, code: str) -> bool:
        """Process a manually entered or deep-linked code."""
        with self._lock:
            if self.state in (ScanState.PROCESSING, ScanState.SUCCESS, ScanState.DUPLICATE_DAY):
                return False
            if not self.filter.begin():
                return False

            self._cancel_timers()
            self._release_decoder()
            self._process(code)
            return True

    def dismiss_modal(self) -> bool:
        """Close the already-registered modal (button, outside click, Escape or timeout)."""
        with self._lock:
            if self.state != ScanState.DUPLICATE_DAY or not self.view.modal_open:
                return False

            self._cancel_timers()
            self.view.modal_open = False
            self.view.modal_message = None
            self._set_state(ScanState.IDLE)
            self.navigate(NAVIGATE_BACK)
            return True

    def close(self) -> None:
        """Tear down when the screen goes away."""
        with self._lock:
            self._cancel_timers()
            self._release_decoder()
            self.channel.drain()
            self.filter.reset()

    # =================== DECODER INPUT ===================

    def pump(self, timeout: Optional[float] = None) -> bool:
        """Consume one decoded message from the channel."""
        raw_text = self.channel.take(timeout=timeout)
        if raw_text is None:
            return False
        return self.handle_decode(raw_text)

    def handle_decode(self, raw_text: str) -> bool:
        """Process one decode event if the state and the filter allow it."""
        with self._lock:
            if self.state != ScanState.SCANNING:
                return False

            attempt = self.filter.admit(raw_text, self.clock())
            if attempt is None:
                return False

            logger.debug('Scan admitted: %r', raw_text)
            self._release_decoder()
            self._process(raw_text)
            return True

    # =================== PROCESSING ===================

    def _process(self, raw_text: str) -> None:
        self.view.banner = None
        self.view.session = None
        self.view.error_kind = None
        self._set_state(ScanState.PROCESSING)

        try:
            code = normalize_code(raw_text)
            attempt = self.filter.last_attempt
            if attempt is not None and attempt.raw_text == raw_text:
                attempt.code = code
            session = register_code(self.registrar, self.identity, code)
        except DuplicateDayRegistrationError as e:
            self._on_duplicate(e)
        except AuthenticationRequiredError as e:
            self.filter.complete(clear_memory=True)
            self._show_banner(e)
            self._set_state(ScanState.IDLE)
        except ScanError as e:
            self._on_error(e)
        except Exception as e:
            logger.exception('Unexpected error while registering scan')
            self._on_error(e)
        else:
            self._on_success(session)

    def _on_success(self, session) -> None:
        self.filter.complete(clear_memory=False)
        self.view.session = session.to_dict()
        self._set_state(ScanState.SUCCESS)
        self._schedule(self.settings.success_redirect_ms, self._redirect_to_log)

    def _on_duplicate(self, error: DuplicateDayRegistrationError) -> None:
        self.filter.complete(clear_memory=False)
        self.view.modal_open = True
        self.view.modal_message = error.message(self.settings.language)
        self._set_state(ScanState.DUPLICATE_DAY)
        self._schedule(self.settings.duplicate_modal_ms, self.dismiss_modal)

    def _on_error(self, error: Exception) -> None:
        self.filter.complete(clear_memory=False)
        self._show_banner(error)
        self._set_state(ScanState.ERROR)
        self._schedule(self.settings.error_banner_ms, self._resume_after_error)

    def _redirect_to_log(self) -> None:
        with self._lock:
            if self.state != ScanState.SUCCESS:
                return
            self._timers = []
            self.navigate(self.settings.training_log_path)

    def _resume_after_error(self) -> None:
        with self._lock:
            if self.state != ScanState.ERROR:
                return
            self._timers = []
            self.view.banner = None
            self.view.error_kind = None
            self.filter.forget()
            self._enter_scanning()

    # =================== HELPERS ===================

    def _enter_scanning(self) -> bool:
        decoder = self.decoder_factory()
        try:
            decoder.start(self.channel.offer)
        except Exception as e:
            logger.error('Could not start QR decoder: %s', e)
            decoder.stop()
            self.view.banner = str(e)
            self._set_state(ScanState.IDLE)
            return False

        self._decoder = decoder
        self._set_state(ScanState.SCANNING)
        return True

    def _release_decoder(self) -> None:
        if self._decoder is not None:
            self._decoder.stop()
            self._decoder = None
        self.channel.drain()

    def _show_banner(self, error: Exception) -> None:
        if isinstance(error, ScanError):
            self.view.banner = error.message(self.settings.language)
            self.view.error_kind = error.kind
        else:
            self.view.banner = str(error)
            self.view.error_kind = ErrorKind.REGISTRATION_FAILED

    def _schedule(self, delay_ms: int, callback: Callable[[], Any]) -> None:
        self._timers.append(self.scheduler.call_later(delay_ms / 1000.0, callback))

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _set_state(self, state: ScanState) -> None:
        if state != self.view.state:
            logger.debug('Scan workflow %s -> %s', self.view.state.value, state.value)
            self.transitions.append(state)
        self.view.state = state
        if self.listener is not None:
            self.listener(replace(self.view))
