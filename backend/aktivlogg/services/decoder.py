"""QR decoder capability and the channel that carries its output."""
import logging
import queue
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DecodeCallback = Callable[[str], None]

class Decoder:
    """
    Contract for a QR decoder.

    ``start`` begins sampling frames and calls ``on_decode`` with the raw
    text of every frame where a code is found (the same code repeats across
    consecutive frames). ``stop`` releases the camera; no callback fires
    after it returns.
    """

    def start(self, on_decode: DecodeCallback) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

class DecodeChannel:
    """Bounded hand-off between a decoder thread and the workflow consumer."""

    def __init__(self, maxsize: int = 1):
        self._queue = queue.Queue(maxsize=maxsize)

    def offer(self, raw_text: str) -> bool:
        """Push decoded text; drop it if the consumer has not caught up."""
        try:
            self._queue.put_nowait(raw_text)
            return True
        except queue.Full:
            return False

    def take(self, timeout: Optional[float] = None) -> Optional[str]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return

class OpenCVDecoder(Decoder):
    """Camera decoder on OpenCV's QRCodeDetector, run on a worker thread."""

    def __init__(self, camera_index: int = 0, frame_interval: float = 0.05):
        self.camera_index = camera_index
        self.frame_interval = frame_interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._capture = None

    def start(self, on_decode: DecodeCallback) -> None:
        import cv2

        self._capture = cv2.VideoCapture(self.camera_index)
        if not self._capture.isOpened():
            self._capture.release()
            self._capture = None
            raise RuntimeError(f'Could not open camera {self.camera_index}')

        detector = cv2.QRCodeDetector()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, args=(detector, on_decode), name='qr-decoder', daemon=True
        )
        self._thread.start()
        logger.info('QR decoder started on camera %s', self.camera_index)

    def _run(self, detector, on_decode: DecodeCallback) -> None:
        while not self._stop_event.is_set():
            ok, frame = self._capture.read()
            if not ok:
                logger.warning('Camera returned no frame, stopping decoder')
                break
            data, points, _ = detector.detectAndDecode(frame)
            if data and not self._stop_event.is_set():
                on_decode(data)
            self._stop_event.wait(self.frame_interval)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2)
        self._thread = None
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info('QR decoder stopped')
