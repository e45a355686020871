"""Tutor Network Application Package — tutor/student booking service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
