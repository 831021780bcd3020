"""
Session Timer and Auto-Submit Coordinator

The countdown is seeded from the remaining time returned by the server
and re-seeded on resume; it is a display hint, the server decides about
expiry. Manual, timeout and violation submissions on the client all go
through one coordinator that allows at most one submission in flight.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
import threading
import time
from typing import Any, Callable, Optional

from ..exceptions import ExamSessionException, ProctoringTransportError

logger = logging.getLogger(__name__)


class SessionTimer:
    """
    Countdown mit injizierbarer Uhr. ``tick`` berechnet die Restzeit aus
    der Uhr neu und löst ``on_expire`` genau einmal aus.
    """

    def __init__(
        self,
        remaining_seconds: float,
        on_expire: Callable[[], Any],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.on_expire = on_expire
        self.clock = clock
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._expired = False
        self._suspended = False
        self.reseed(remaining_seconds)

    def reseed(self, remaining_seconds: float) -> None:
        with self._lock:
            self._initial = max(0.0, float(remaining_seconds))
            self._started = self.clock()

    @property
    def remaining(self) -> float:
        if self._suspended or self._expired:
            return self._frozen if self._suspended else 0.0
        return max(0.0, self._initial - (self.clock() - self._started))

    @property
    def expired(self) -> bool:
        return self._expired

    def suspend(self) -> None:
        """Friert den Countdown ein, z.B. während eine Abgabe läuft."""
        with self._lock:
            if not self._suspended:
                self._frozen = max(0.0, self._initial - (self.clock() - self._started))
                self._suspended = True

    def resume(self) -> None:
        """Setzt einen eingefrorenen Countdown mit der Restzeit fort."""
        with self._lock:
            if self._suspended:
                self._initial = self._frozen
                self._started = self.clock()
                self._suspended = False

    def tick(self) -> float:
        with self._lock:
            if self._suspended or self._expired or self._stop.is_set():
                return self.remaining
            remaining = max(0.0, self._initial - (self.clock() - self._started))
            if remaining > 0:
                return remaining
            self._expired = True

        logger.info("Bearbeitungszeit abgelaufen")
        self.on_expire()
        return 0.0

    def run(self, interval: float = 1.0) -> None:
        """Startet den Countdown in einem Hintergrund-Thread."""
        if self._thread is not None:
            return

        def loop() -> None:
            while not self._stop.wait(interval):
                self.tick()
                if self._expired:
                    return

        self._thread = threading.Thread(target=loop, name="exam-session-timer", daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None


class AutoSubmitCoordinator:
    """
    Serialisiert alle Abgabe-Auslöser des Clients.

    Der erste Aufruf führt ``submit_fn`` aus; weitere Aufrufe während der
    Abgabe oder danach werden unterdrückt und liefern None. Schlägt die
    Übertragung fehl, wird ``on_submit_failed`` aufgerufen und ein erneuter
    Versuch ist erlaubt.
    """

    def __init__(
        self,
        submit_fn: Callable[..., Any],
        on_submit_started: Optional[Callable[[], Any]] = None,
        on_submit_failed: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.submit_fn = submit_fn
        self.on_submit_started = on_submit_started
        self.on_submit_failed = on_submit_failed
        self._lock = threading.Lock()
        self._in_flight = False
        self._submitted = False
        self.trigger: Optional[str] = None
        self.result: Any = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def submitted(self) -> bool:
        return self._submitted

    def request_submit(self, trigger: str, **kwargs: Any) -> Any:
        with self._lock:
            if self._in_flight or self._submitted:
                logger.debug(f"Abgabe ({trigger}) unterdrückt, bereits ausgelöst durch {self.trigger}")
                return None
            self._in_flight = True
            self.trigger = trigger

        if self.on_submit_started is not None:
            self.on_submit_started()

        try:
            result = self.submit_fn(trigger, **kwargs)
        except ProctoringTransportError:
            with self._lock:
                self._in_flight = False
            if self.on_submit_failed is not None:
                self.on_submit_failed()
            raise
        except ExamSessionException:
            # Server hat abgelehnt, die Sitzung ist dort bereits geschlossen
            with self._lock:
                self._in_flight = False
                self._submitted = True
            raise

        with self._lock:
            self._in_flight = False
            self._submitted = True
            self.result = result
        return result
