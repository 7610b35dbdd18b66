"""
E-Learning Package - Quiz Engine

Dieses Paket enthält das Quiz-System der Lernplattform: Quiz-Erstellung,
Abgabe und Bewertung von Quizzen, XP-Vergabe und Auswertungen für
Lehrende.

Struktur:
- users/: Rollen, XP-Profil und Berechtigungen
- quizzes/: Quizze, Fragen und Antwortmöglichkeiten
- participation/: Abgaben, Bewertung, XP und Ergebnisse
- analytics/: Auswertungen, Anonymisierung und Exporte
- services/: Gemeinsame Infrastruktur (Cache)
- management/: Django Management Commands

Author: DSP Development Team
Version: 1.0.0
"""
