"""
Attempts Package - Proctored Exam Platform

Dieses Paket enthält alle Module für Prüfungsversuche der Studierenden.

Features:
- Zuweisung einer Prüfung an Studierende (ExamAssignment)
- Antworten pro Frage mit manueller Bewertung für Freitextfragen
- Protokoll aller gemeldeten Sicherheitsverstöße
- Schüler- und Lehrer-spezifische API-Views

Struktur:
- models.py: ExamAssignment, Answer, SecurityViolationLog
- serializers.py: API-Serialisierung für Versuche und Ergebnisse
- permissions.py: Zugriffsregeln für Versuche
- views/: Schüler- und Lehrer-Views

Author: Exam Platform Development Team
Version: 1.0.0
"""
