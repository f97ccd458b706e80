from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

from ..core.constants import DEFAULT_SCAN_INTERVAL_SECONDS
from ..core.exceptions import DecodeWarning
from ..payload.model import ScanEvent
from .decoder import FrameDecoder

logger = logging.getLogger(__name__)

ScanObserver = Callable[[ScanEvent], None]
WarningObserver = Callable[[DecodeWarning], None]


class FrameSource(Protocol):
    def read_frame(self) -> Optional[Any]:
        raise NotImplementedError


class DecodeLoop:
    """Turns the live capture session into discrete scan events.

    After the first successful decode the loop pauses itself before notifying
    its observer, so at most one scan event is ever pending. It samples again
    only after `resume()`.
    """

    def __init__(
        self,
        frames: FrameSource,
        decoder: FrameDecoder,
        *,
        interval: float = DEFAULT_SCAN_INTERVAL_SECONDS,
        on_scan: Optional[ScanObserver] = None,
        on_warning: Optional[WarningObserver] = None,
    ):
        self._frames = frames
        self._decoder = decoder
        self._interval = float(interval)
        self._on_scan = on_scan
        self._on_warning = on_warning
        self._lock = threading.Lock()
        self._paused = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._thread_lock = threading.Lock()

    def set_observer(self, on_scan: Optional[ScanObserver]) -> None:
        self._on_scan = on_scan

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop.is_set()

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def resume(self) -> None:
        with self._lock:
            if not self._paused:
                return
            self._paused = False
        logger.debug("decode loop resumed")

    def _warn(self, warning: DecodeWarning) -> None:
        logger.warning("decode warning: %s", warning)
        if self._on_warning:
            self._on_warning(warning)

    def step(self) -> Optional[ScanEvent]:
        """Run one sampling iteration. Returns the emitted event, if any."""

        if self.is_paused:
            return None

        try:
            frame = self._frames.read_frame()
        except DecodeWarning as w:
            self._warn(w)
            return None
        if frame is None:
            return None

        result = self._decoder.decode(frame)
        if result.error is not None:
            self._warn(DecodeWarning(str(result.error)))
            return None
        if not result.is_found:
            return None

        with self._lock:
            if self._paused:
                return None
            self._paused = True

        event = ScanEvent(raw_payload=result.payload)
        logger.info("scan decoded, pausing decode loop")
        if self._on_scan:
            self._on_scan(event)
        return event

    def _run(self, stop: threading.Event) -> None:
        # Each run owns its event, so a stopped thread can never be revived.
        while not stop.is_set():
            try:
                self.step()
            except Exception:
                logger.exception("decode loop iteration failed")
            stop.wait(self._interval)

    def start(self) -> None:
        with self._thread_lock:
            previous = self._thread
            if previous is not None and previous.is_alive():
                if not self._stop.is_set():
                    return
                # A stopped thread may still be inside step(); let it finish first.
                if previous is not threading.current_thread():
                    previous.join()
            self._stop = threading.Event()
            self._thread = threading.Thread(target=self._run, args=(self._stop,), name="decode-loop", daemon=True)
            self._thread.start()

    def stop(self, *, timeout: float = 2.0) -> None:
        with self._thread_lock:
            self._stop.set()
            thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout)
        with self._thread_lock:
            if self._thread is thread and not thread.is_alive():
                self._thread = None
