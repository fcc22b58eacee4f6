"""Attendance Portal engine.

Feature modules (timetable, sessions, marks, reports, achievements) follow the
same service/repository split; MySQL repositories are wired in ``container``.
"""
