from __future__ import annotations

from dataclasses import dataclass

from .achievements.mysql_achievement_repository import MySQLAchievementRepository
from .achievements.service import AchievementService
from .core.constants import DEFAULTER_THRESHOLD, EDIT_ABUSE_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .engine import AttendanceEngine
from .enrollment.mysql_enrollment_repository import MySQLEnrollmentRepository
from .marks.mysql_mark_repository import MySQLMarkRepository
from .marks.service import MarkLedger
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import SessionService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.service import TimetableService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    timetable_repo: MySQLTimetableRepository
    enrollments_repo: MySQLEnrollmentRepository
    sessions_repo: MySQLSessionRepository
    marks_repo: MySQLMarkRepository
    reports_repo: MySQLReportRepository
    achievements_repo: MySQLAchievementRepository

    timetable_service: TimetableService
    session_service: SessionService
    mark_ledger: MarkLedger
    report_service: ReportService
    achievement_service: AchievementService
    engine: AttendanceEngine


def build_container(
    *,
    db_config: dict,
    defaulter_threshold: int = DEFAULTER_THRESHOLD,
    edit_abuse_threshold: int = EDIT_ABUSE_THRESHOLD,
    require_mark_to_lock: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    timetable_repo = MySQLTimetableRepository(conn)
    enrollments_repo = MySQLEnrollmentRepository(conn)
    sessions_repo = MySQLSessionRepository(conn)
    marks_repo = MySQLMarkRepository(conn)
    reports_repo = MySQLReportRepository(conn)
    achievements_repo = MySQLAchievementRepository(conn)

    timetable_service = TimetableService(timetable_repo)
    session_service = SessionService(
        sessions_repo,
        timetable_repo,
        enrollments_repo,
        require_mark_to_lock=require_mark_to_lock,
    )
    mark_ledger = MarkLedger(marks_repo, enrollments_repo, session_service, edit_abuse_threshold=edit_abuse_threshold)
    report_service = ReportService(reports_repo, enrollments_repo, defaulter_threshold=defaulter_threshold)
    achievement_service = AchievementService(achievements_repo, report_service)
    engine = AttendanceEngine(session_service, mark_ledger, report_service, achievement_service)

    return Container(
        conn=conn,
        timetable_repo=timetable_repo,
        enrollments_repo=enrollments_repo,
        sessions_repo=sessions_repo,
        marks_repo=marks_repo,
        reports_repo=reports_repo,
        achievements_repo=achievements_repo,
        timetable_service=timetable_service,
        session_service=session_service,
        mark_ledger=mark_ledger,
        report_service=report_service,
        achievement_service=achievement_service,
        engine=engine,
    )
