"""
Monitor Package - Proctored Exam Platform

Clientseitige Sitzungsüberwachung. Dieses Paket benötigt kein
konfiguriertes Django-Projekt.

Struktur:
- client.py: HTTP-Client für die Prüfungs-API (requests)
- security_monitor.py: Listener pro Feature-Flag, eine Ereignis-Queue
- session_timer.py: Countdown und Koordination der Abgabe
- proctored_session.py: Orchestrierung eines Prüfungsversuchs

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .client import ExamSessionClient
from .security_monitor import SecurityEvent, SecurityMonitor
from .session_timer import AutoSubmitCoordinator, SessionTimer
from .proctored_session import ProctoredSession

__all__ = [
    "ExamSessionClient",
    "SecurityEvent",
    "SecurityMonitor",
    "AutoSubmitCoordinator",
    "SessionTimer",
    "ProctoredSession",
]
