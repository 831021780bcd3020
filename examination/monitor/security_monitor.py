"""
Security Monitor

Client-side session monitor. Each enabled feature flag attaches listeners
on a browser event source; every attach is paired with a detach. All
detected events go into one queue that the proctored session consumes to
report violations.

The event source is anything with ``add_listener(event, callback)`` and
``remove_listener(event, callback)`` (a browser bridge in production, a
fake in tests).

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
import queue
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..exams.security import (
    SecurityFeatureFlags,
    TAB_SWITCH,
    FULLSCREEN_EXIT,
    DEVTOOLS_OPENED,
    COPY_PASTE,
    RIGHT_CLICK,
    PRINT_ATTEMPT,
    is_critical_violation,
)

logger = logging.getLogger(__name__)

# Browser-Events pro Feature-Flag: (Event-Name, Verstoßtyp)
FEATURE_EVENTS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "dev_tools_detection": (("devtools_shortcut", DEVTOOLS_OPENED),),
    "copy_paste_prevention": (("copy", COPY_PASTE), ("cut", COPY_PASTE), ("paste", COPY_PASTE)),
    "context_menu_disabled": (("contextmenu", RIGHT_CLICK),),
    "print_prevention": (("beforeprint", PRINT_ATTEMPT),),
    "tab_switch_detection": (("visibility_hidden", TAB_SWITCH), ("window_blur", TAB_SWITCH)),
}
FULLSCREEN_EXIT_EVENT = "fullscreen_exit"


class EventSource(Protocol):
    def add_listener(self, event: str, callback: Callable[..., None]) -> None: ...

    def remove_listener(self, event: str, callback: Callable[..., None]) -> None: ...


@dataclass(frozen=True)
class SecurityEvent:
    kind: str
    details: str = ""
    timestamp: float = field(default_factory=time.time)

    @property
    def critical(self) -> bool:
        return is_critical_violation(self.kind)


class SecurityMonitor:
    """
    Überwacht die Sitzung anhand der übergebenen Feature-Flags.

    Der Vollbildmodus kann nur durch eine explizite Benutzeraktion
    betreten werden. Solange er verlangt und unterstützt, aber nicht aktiv
    ist, liefert ``exam_can_start`` False.
    """

    def __init__(
        self,
        flags: SecurityFeatureFlags,
        source: EventSource,
        events: Optional[queue.Queue] = None,
        fullscreen_supported: bool = True,
    ) -> None:
        self.flags = flags
        self.source = source
        self.events: queue.Queue = events if events is not None else queue.Queue()
        self.fullscreen_supported = fullscreen_supported
        self._subscriptions: List[Tuple[str, Callable[..., None]]] = []
        self._fullscreen_active = False

    # --- Listener ---

    def _make_handler(self, kind: str) -> Callable[..., None]:
        def handler(details: Any = "") -> None:
            self.emit(kind, str(details or ""))
        return handler

    def _subscribe(self, event: str, callback: Callable[..., None]) -> None:
        self.source.add_listener(event, callback)
        self._subscriptions.append((event, callback))

    def attach(self) -> None:
        """Hängt alle Listener der aktiven Features an (idempotent)."""
        if self._subscriptions or not self.flags.enabled:
            return
        for feature, events in FEATURE_EVENTS.items():
            if not self.flags.is_enabled(feature):
                continue
            for event, kind in events:
                self._subscribe(event, self._make_handler(kind))
        if self.flags.is_enabled("fullscreen_required") and self.fullscreen_supported:
            self._subscribe(FULLSCREEN_EXIT_EVENT, self._on_fullscreen_exit)
        logger.debug(f"Monitor aktiv mit {len(self._subscriptions)} Listenern")

    def detach(self) -> None:
        """Entfernt genau die Listener, die ``attach`` angehängt hat."""
        while self._subscriptions:
            event, callback = self._subscriptions.pop()
            self.source.remove_listener(event, callback)

    @property
    def attached_events(self) -> List[str]:
        return [event for event, _ in self._subscriptions]

    # --- Vollbild ---

    @property
    def fullscreen_required(self) -> bool:
        return self.flags.is_enabled("fullscreen_required") and self.fullscreen_supported

    @property
    def exam_can_start(self) -> bool:
        return not self.fullscreen_required or self._fullscreen_active

    def enter_fullscreen(self, user_gesture: bool) -> bool:
        """
        Browser erlauben den Vollbildmodus nur nach einer Benutzeraktion;
        ohne Geste bleibt der Zustand unverändert.
        """
        if not self.fullscreen_supported or not user_gesture:
            return False
        self._fullscreen_active = True
        return True

    def _on_fullscreen_exit(self, details: Any = "") -> None:
        if not self._fullscreen_active:
            return
        self._fullscreen_active = False
        self.emit(FULLSCREEN_EXIT, str(details or ""))

    # --- Queue ---

    def emit(self, kind: str, details: str = "") -> None:
        self.events.put(SecurityEvent(kind=kind, details=details))

    def drain(self) -> List[SecurityEvent]:
        drained = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained
