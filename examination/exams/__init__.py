"""
Exams Package - Proctored Exam Platform

Dieses Paket enthält die Prüfungsdefinitionen: Prüfungen, Fragen und
Antwortoptionen sowie die Sicherheitskonfiguration einer Prüfung.

Struktur:
- models.py: Exam, Question, Choice
- security.py: Verstoßarten und Feature-Flags für die Sitzungsüberwachung
- serializers.py: API-Serialisierung der Prüfungsinhalte für Studierende

Author: Exam Platform Development Team
Version: 1.0.0
"""
