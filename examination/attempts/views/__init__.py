"""
Attempts Views Package - Proctored Exam Platform

Dieses Paket enthält alle Views für Prüfungsversuche.

Features:
- Schüler-Views: Start, Fortsetzen, Antworten, Abgabe, Verstoßmeldungen, Ergebnisse
- Lehrer-Views: Verteilung, Bewertung, Neuberechnung, Verstoß-Historie, Statistiken
- Rollenbasierte Zugriffskontrolle (Lehrkräfte = Staff-Benutzer)

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .student_views import *
from .teacher_views import *
