"""
E-Learning Users Package - DSP (Digital Solutions Platform)

Dieses Paket erweitert Django-User um die Daten, die das Quiz-System braucht.

Features:
- Profil mit Rolle (admin, instructor, learner) und Lebenszeit-XP
- Automatische Profilerstellung durch Django-Signale
- DRF-Berechtigungen nach Rolle

Struktur:
- models.py: Profil, Rollen und Signal-Handler
- permissions.py: Rollenbasierte API-Berechtigungen

Author: DSP Development Team
Version: 1.0.0
"""
