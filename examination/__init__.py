"""
Examination Package - Proctored Exam Platform

Dieses Paket enthält alle Module für das beaufsichtigte Online-Prüfungssystem.
Lehrkräfte erstellen Prüfungen, Studierende legen sie in einer überwachten
Sitzung ab, Antworten werden automatisch oder manuell bewertet.

Features:
- Prüfungsdefinitionen mit Fragen und Antwortoptionen
- Zustandsautomat für Prüfungsversuche (assigned → started → submitted → graded)
- Bewertungs-Engine pro Fragetyp
- Proctoring: Sicherheitsverstöße und erzwungene Abgabe
- Serverseitiger Timer und automatische Abgabe abgelaufener Sitzungen
- Proctoring-Client (Monitor, Countdown, API-Client)

Struktur:
- exceptions.py: Fehlerklassen mit HTTP-Status und Fehlercode
- conf.py: Einstellungen (EXAM_SESSION)
- exams/: Prüfungen, Fragen und Antwortoptionen
- attempts/: Prüfungsversuche, Antworten, Verstoß-Protokoll und API-Views
- services/: Bewertung, Sitzungslogik, Proctoring, Verteilung, Ergebnisse
- monitor/: clientseitige Sitzungsüberwachung
- management/: Django Management Commands

Author: Exam Platform Development Team
Version: 1.0.0
"""
