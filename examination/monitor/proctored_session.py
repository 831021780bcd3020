"""
Proctored Session

Client-side orchestration of one exam attempt: monitor, countdown,
answer buffer and the single submission coordinator.

A critical violation locks the session locally before the report is sent
and regardless of whether the server acknowledges it. Reports that could
not be delivered are kept and can be retried with
``retry_pending_reports``.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from ..exams.security import SecurityFeatureFlags
from ..exceptions import ExamSessionException, ProctoringTransportError
from .client import ExamSessionClient
from .security_monitor import EventSource, SecurityEvent, SecurityMonitor
from .session_timer import AutoSubmitCoordinator, SessionTimer

logger = logging.getLogger(__name__)


class ProctoredSession:

    def __init__(
        self,
        client: ExamSessionClient,
        attempt_id: int,
        source: EventSource,
        flags: Optional[SecurityFeatureFlags] = None,
        remaining_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
        fullscreen_supported: bool = True,
    ) -> None:
        self.client = client
        self.attempt_id = attempt_id
        self.monitor = SecurityMonitor(
            flags or SecurityFeatureFlags(), source, fullscreen_supported=fullscreen_supported
        )
        self.timer = SessionTimer(remaining_seconds, self._on_timer_expired, clock=clock)
        self.coordinator = AutoSubmitCoordinator(
            self._send_submission,
            on_submit_started=self.timer.suspend,
            on_submit_failed=self._on_submission_failed,
        )
        self.answers: Dict[int, Dict[str, Any]] = {}
        self.pending_reports: List[SecurityEvent] = []
        self.terminated = False
        self.termination_reason: Optional[str] = None

    @classmethod
    def resume(
        cls,
        client: ExamSessionClient,
        attempt_id: int,
        source: EventSource,
        clock: Callable[[], float] = time.monotonic,
        fullscreen_supported: bool = True,
    ) -> "ProctoredSession":
        """Baut die Sitzung aus dem serverseitigen Zustand auf."""
        state = client.get_attempt(attempt_id)
        flags = SecurityFeatureFlags.from_dict(state.get("exam", {}).get("security_features"))
        remaining = (state.get("timing") or {}).get("remaining_seconds") or 0
        session = cls(
            client,
            attempt_id,
            source,
            flags=flags,
            remaining_seconds=remaining,
            clock=clock,
            fullscreen_supported=fullscreen_supported,
        )
        for answer in state.get("answers", []):
            session._restore_answer(answer)
        if state.get("submitted_at"):
            session._lock("already_submitted")
        return session

    # --- Lebenszyklus ---

    @property
    def exam_can_start(self) -> bool:
        return not self.terminated and self.monitor.exam_can_start

    def begin(self) -> None:
        self.monitor.attach()

    def teardown(self) -> None:
        self.timer.cancel()
        self.monitor.detach()

    def _lock(self, reason: str) -> None:
        if self.terminated:
            return
        self.terminated = True
        self.termination_reason = reason
        self.timer.suspend()
        self.monitor.detach()
        logger.warning(f"Sitzung {self.attempt_id} gesperrt: {reason}")

    # --- Antworten ---

    def _restore_answer(self, answer: Dict[str, Any]) -> None:
        question_id = answer.get("question")
        if answer.get("answer_text") is not None:
            self.answers[question_id] = {"text": answer["answer_text"]}
        elif answer.get("choice") is not None:
            entry = self.answers.setdefault(question_id, {"choice_ids": []})
            entry.setdefault("choice_ids", []).append(answer["choice"])

    def record_answer(self, question_id: int, payload: Dict[str, Any]) -> bool:
        """
        Puffert die Antwort lokal und überträgt sie. Bei Netzwerkfehlern
        bleibt sie gepuffert und wird mit der Abgabe übergeben.

        Returns:
            True, wenn der Server die Antwort bestätigt hat
        """
        if self.terminated:
            return False
        self.answers[question_id] = dict(payload)
        try:
            self.client.save_answer(self.attempt_id, question_id, payload)
        except ProctoringTransportError:
            logger.info(f"Antwort auf Frage {question_id} nur lokal gepuffert")
            return False
        return True

    def buffered_answers(self) -> List[Dict[str, Any]]:
        return [{"question_id": qid, **payload} for qid, payload in self.answers.items()]

    # --- Abgabe ---

    def _send_submission(self, trigger: str, violation: Optional[SecurityEvent] = None) -> Dict[str, Any]:
        if violation is not None:
            return self.client.report_violation(
                self.attempt_id,
                violation.kind,
                details=violation.details,
                answers=self.buffered_answers(),
            )
        return self.client.submit(self.attempt_id, trigger=trigger, answers=self.buffered_answers())

    def _on_submission_failed(self) -> None:
        # Gesperrte Sitzungen bleiben eingefroren
        if not self.terminated:
            self.timer.resume()

    def submit(self) -> Any:
        result = self.coordinator.request_submit("manual")
        if self.coordinator.submitted:
            self._lock("submitted")
        return result

    def _on_timer_expired(self) -> None:
        try:
            self.coordinator.request_submit("timeout")
        except ProctoringTransportError:
            # Der Server gibt abgelaufene Sitzungen selbst ab
            logger.warning(f"Automatische Abgabe von Sitzung {self.attempt_id} nicht übertragen")
        except ExamSessionException as e:
            logger.info(f"Automatische Abgabe von Sitzung {self.attempt_id} abgelehnt: {e.message}")
        self._lock("timeout")

    # --- Verstöße ---

    def process_events(self) -> List[SecurityEvent]:
        """Verarbeitet alle Ereignisse aus der Queue des Monitors."""
        events = self.monitor.drain()
        for event in events:
            if event.critical:
                self._handle_critical(event)
            else:
                self._report(event)
        return events

    def _handle_critical(self, event: SecurityEvent) -> None:
        self._lock(event.kind)
        try:
            result = self.coordinator.request_submit("violation", violation=event)
            if result is None:
                # Eine andere Abgabe läuft bereits, Meldung nachreichen
                self.pending_reports.append(event)
        except ProctoringTransportError:
            self.pending_reports.append(event)
        except ExamSessionException as e:
            logger.info(f"Verstoßmeldung für Sitzung {self.attempt_id} abgelehnt: {e.message}")

    def _report(self, event: SecurityEvent) -> None:
        if self.terminated:
            return
        try:
            self.client.report_violation(self.attempt_id, event.kind, details=event.details)
        except ProctoringTransportError:
            self.pending_reports.append(event)

    def retry_pending_reports(self) -> int:
        """
        Sendet nicht zugestellte Meldungen erneut.

        Returns:
            Anzahl der erfolgreich zugestellten Meldungen
        """
        delivered = 0
        remaining = []
        for event in self.pending_reports:
            try:
                if event.critical and not self.coordinator.submitted:
                    if self.coordinator.request_submit("violation", violation=event) is None:
                        remaining.append(event)
                        continue
                else:
                    self.client.report_violation(self.attempt_id, event.kind, details=event.details)
                delivered += 1
            except ProctoringTransportError:
                remaining.append(event)
            except ExamSessionException as e:
                logger.info(f"Meldung {event.kind} für Sitzung {self.attempt_id} abgelehnt: {e.message}")
        self.pending_reports = remaining
        return delivered
