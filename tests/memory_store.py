from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple

from src.attendance_portal.attendance_portal.achievements.model import AchievementDefinition, parse_criteria
from src.attendance_portal.attendance_portal.achievements.service import AchievementService
from src.attendance_portal.attendance_portal.core.enums import MarkStatus
from src.attendance_portal.attendance_portal.core.exceptions import NotFoundError, SessionLockedError
from src.attendance_portal.attendance_portal.engine import AttendanceEngine
from src.attendance_portal.attendance_portal.enrollment.model import StudentEnrollment
from src.attendance_portal.attendance_portal.marks.model import AttendanceMark, FrequentlyEditedMark, MarkAuditEntry
from src.attendance_portal.attendance_portal.marks.service import MarkLedger
from src.attendance_portal.attendance_portal.reports.model import DailyMarkCount, SessionFact, SubjectRef
from src.attendance_portal.attendance_portal.reports.service import ReportService
from src.attendance_portal.attendance_portal.sessions.model import AttendanceSession
from src.attendance_portal.attendance_portal.sessions.service import SessionService
from src.attendance_portal.attendance_portal.timetable.model import SlotDraft, TimetableSlot
from src.attendance_portal.attendance_portal.timetable.service import TimetableService


@dataclass
class Tables:
    slots: Dict[int, TimetableSlot] = field(default_factory=dict)
    enrollments: Dict[int, StudentEnrollment] = field(default_factory=dict)
    sessions: Dict[int, AttendanceSession] = field(default_factory=dict)
    marks: Dict[Tuple[int, int], AttendanceMark] = field(default_factory=dict)
    audit: List[MarkAuditEntry] = field(default_factory=list)
    achievements: Dict[int, AchievementDefinition] = field(default_factory=dict)
    subjects: Dict[int, str] = field(default_factory=dict)
    next_id: int = 0

    def new_id(self) -> int:
        self.next_id += 1
        return self.next_id


class InMemoryTimetable:
    def __init__(self, tables: Tables):
        self._t = tables

    def get_by_id(self, slot_id: int) -> Optional[TimetableSlot]:
        return self._t.slots.get(slot_id)

    def list_for_day(self, day_of_week: int):
        return [s for s in self._t.slots.values() if s.day_of_week == day_of_week]

    def list_for_class(self, class_id: int):
        return [s for s in self._t.slots.values() if s.class_id == class_id]

    def create(self, draft: SlotDraft) -> int:
        slot_id = self._t.new_id()
        self._t.slots[slot_id] = TimetableSlot(slot_id=slot_id, **draft.__dict__)
        return slot_id

    def update(self, slot_id: int, draft: SlotDraft) -> bool:
        if slot_id not in self._t.slots:
            return False
        self._t.slots[slot_id] = TimetableSlot(slot_id=slot_id, **draft.__dict__)
        return True

    def delete(self, slot_id: int) -> bool:
        return self._t.slots.pop(slot_id, None) is not None

    def has_sessions(self, slot_id: int) -> bool:
        return any(s.timetable_slot_id == slot_id for s in self._t.sessions.values())


class InMemoryEnrollments:
    def __init__(self, tables: Tables):
        self._t = tables

    def get_by_student(self, student_id: int) -> Optional[StudentEnrollment]:
        return self._t.enrollments.get(student_id)

    def list_for_class(self, class_id: int, *, batch_id: Optional[int] = None):
        rows = [
            e
            for e in self._t.enrollments.values()
            if e.class_id == class_id and e.is_active and (batch_id is None or e.batch_id == batch_id)
        ]
        return sorted(rows, key=lambda e: (e.roll_no or "", e.student_id))


class InMemorySessions:
    def __init__(self, tables: Tables):
        self._t = tables
        self.insert_calls = 0

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        return self._t.sessions.get(session_id)

    def get_for_slot_and_date(self, *, timetable_slot_id: int, session_date: date):
        for s in self._t.sessions.values():
            if s.timetable_slot_id == timetable_slot_id and s.session_date == session_date:
                return s
        return None

    def insert_or_get(self, *, timetable_slot_id: int, session_date: date):
        self.insert_calls += 1
        existing = self.get_for_slot_and_date(timetable_slot_id=timetable_slot_id, session_date=session_date)
        if existing:
            return existing, False
        session = AttendanceSession(
            session_id=self._t.new_id(),
            timetable_slot_id=timetable_slot_id,
            session_date=session_date,
        )
        self._t.sessions[session.session_id] = session
        return session, True

    def lock(self, *, session_id: int, locked_at: datetime) -> bool:
        session = self._t.sessions.get(session_id)
        if not session or session.locked:
            return False
        self._t.sessions[session_id] = replace(session, locked=True, locked_at=locked_at)
        return True

    def delete_if_unused(self, *, session_id: int, not_before: date) -> bool:
        session = self._t.sessions.get(session_id)
        if not session or session.locked or session.session_date < not_before or self.count_marks(session_id):
            return False
        del self._t.sessions[session_id]
        return True

    def count_marks(self, session_id: int) -> int:
        return sum(1 for (sid, _) in self._t.marks if sid == session_id)

    def list_for_date(self, session_date: date):
        return [s for s in self._t.sessions.values() if s.session_date == session_date]


class InMemoryMarks:
    def __init__(self, tables: Tables):
        self._t = tables

    def write_mark(self, *, session_id, student_id, status, edited_by, edited_at, reason=None) -> AttendanceMark:
        session = self._t.sessions.get(session_id)
        if not session:
            raise NotFoundError("Attendance session not found")
        if session.locked:
            raise SessionLockedError("Attendance session is locked")

        key = (session_id, student_id)
        existing = self._t.marks.get(key)
        if not existing:
            mark = AttendanceMark(
                mark_id=self._t.new_id(),
                session_id=session_id,
                student_id=student_id,
                status=status,
                edited_by=edited_by,
                edited_at=edited_at,
            )
        elif existing.status == status:
            return existing
        else:
            mark = replace(existing, status=status, edited_by=edited_by, edited_at=edited_at, edit_count=existing.edit_count + 1)
            self._t.audit.append(
                MarkAuditEntry(
                    audit_id=self._t.new_id(),
                    mark_id=existing.mark_id,
                    old_status=existing.status,
                    new_status=status,
                    edited_by=edited_by,
                    edited_at=edited_at,
                    reason=reason,
                )
            )
        self._t.marks[key] = mark
        return mark

    def get_mark(self, *, session_id: int, student_id: int):
        return self._t.marks.get((session_id, student_id))

    def list_for_session(self, session_id: int):
        return [m for (sid, _), m in self._t.marks.items() if sid == session_id]

    def list_audit(self, *, session_id: int, student_id: int):
        mark = self._t.marks.get((session_id, student_id))
        if not mark:
            return []
        return [a for a in self._t.audit if a.mark_id == mark.mark_id]

    def list_frequently_edited(self, *, min_edits: int):
        return [
            FrequentlyEditedMark(
                session_id=m.session_id,
                student_id=m.student_id,
                full_name=self._t.enrollments[m.student_id].full_name,
                edit_count=m.edit_count,
            )
            for m in self._t.marks.values()
            if m.edit_count > min_edits
        ]


class InMemoryReports:
    def __init__(self, tables: Tables):
        self._t = tables

    def list_class_sessions(self, class_id: int, *, subject_id: Optional[int] = None):
        facts = []
        for s in self._t.sessions.values():
            slot = self._t.slots[s.timetable_slot_id]
            if slot.class_id != class_id or (subject_id is not None and slot.subject_id != subject_id):
                continue
            facts.append(
                SessionFact(
                    session_id=s.session_id,
                    timetable_slot_id=slot.slot_id,
                    session_date=s.session_date,
                    locked=s.locked,
                    class_id=slot.class_id,
                    subject_id=slot.subject_id,
                    subject_name=self._t.subjects.get(slot.subject_id, ""),
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    batch_id=slot.batch_id,
                )
            )
        return sorted(facts, key=lambda f: (f.session_date, f.start_time, f.session_id))

    def marks_for_sessions(self, session_ids, *, student_id: Optional[int] = None):
        wanted = set(session_ids)
        return {
            key: m.status
            for key, m in self._t.marks.items()
            if key[0] in wanted and (student_id is None or key[1] == student_id)
        }

    def list_class_subjects(self, class_id: int):
        refs = {
            (s.subject_id, s.batch_id): SubjectRef(s.subject_id, self._t.subjects.get(s.subject_id, ""), s.batch_id)
            for s in self._t.slots.values()
            if s.class_id == class_id
        }
        return list(refs.values())

    def daily_mark_counts(self, start: date, end: date):
        present: Dict[date, int] = {}
        marked: Dict[date, int] = {}
        for s in self._t.sessions.values():
            if s.locked and start <= s.session_date <= end:
                present.setdefault(s.session_date, 0)
                marked.setdefault(s.session_date, 0)
        for (sid, _), m in self._t.marks.items():
            s = self._t.sessions[sid]
            if s.session_date in marked and s.locked:
                marked[s.session_date] += 1
                present[s.session_date] += int(m.status == MarkStatus.PRESENT)
        return [DailyMarkCount(day=d, present=present[d], marked=marked[d]) for d in sorted(marked)]


class InMemoryAchievements:
    def __init__(self, tables: Tables):
        self._t = tables

    def list_all(self):
        return [self._t.achievements[k] for k in sorted(self._t.achievements)]

    def get_by_id(self, achievement_id: int):
        return self._t.achievements.get(achievement_id)


class InMemoryStore:
    """Fake persistence for service tests plus small builders for fixtures."""

    def __init__(self):
        self.tables = Tables()
        self.timetable_repo = InMemoryTimetable(self.tables)
        self.enrollments_repo = InMemoryEnrollments(self.tables)
        self.sessions_repo = InMemorySessions(self.tables)
        self.marks_repo = InMemoryMarks(self.tables)
        self.reports_repo = InMemoryReports(self.tables)
        self.achievements_repo = InMemoryAchievements(self.tables)

    # builders

    def add_subject(self, subject_id: int, name: str) -> int:
        self.tables.subjects[subject_id] = name
        return subject_id

    def add_slot(
        self,
        *,
        class_id: int = 1,
        subject_id: int = 1,
        day_of_week: int = 1,
        start: time = time(10, 0),
        end: time = time(11, 0),
        faculty_id: Optional[int] = 100,
        batch_id: Optional[int] = None,
    ) -> TimetableSlot:
        slot_id = self.timetable_repo.create(
            SlotDraft(
                day_of_week=day_of_week,
                start_time=start,
                end_time=end,
                class_id=class_id,
                subject_id=subject_id,
                faculty_id=faculty_id,
                batch_id=batch_id,
            )
        )
        return self.tables.slots[slot_id]

    def enroll(
        self,
        student_id: int,
        name: str,
        *,
        class_id: int = 1,
        batch_id: Optional[int] = None,
        roll_no: Optional[str] = None,
    ) -> StudentEnrollment:
        enrollment = StudentEnrollment(
            student_id=student_id,
            class_id=class_id,
            full_name=name,
            batch_id=batch_id,
            roll_no=roll_no or f"R{student_id:03d}",
        )
        self.tables.enrollments[student_id] = enrollment
        return enrollment

    def add_session(self, slot: TimetableSlot, on: date, *, locked: bool = False, marks: Optional[dict] = None) -> AttendanceSession:
        session, _ = self.sessions_repo.insert_or_get(timetable_slot_id=slot.slot_id, session_date=on)
        for student_id, status in (marks or {}).items():
            self.marks_repo.write_mark(
                session_id=session.session_id,
                student_id=student_id,
                status=MarkStatus(status),
                edited_by=100,
                edited_at=datetime.combine(on, slot.start_time),
            )
        if locked:
            self.sessions_repo.lock(session_id=session.session_id, locked_at=datetime.combine(on, slot.end_time))
        return self.tables.sessions[session.session_id]

    def add_achievement(self, achievement_id: int, title: str, criteria) -> AchievementDefinition:
        definition = AchievementDefinition(achievement_id=achievement_id, title=title, criteria=parse_criteria(criteria))
        self.tables.achievements[achievement_id] = definition
        return definition

    # services

    def timetable_service(self) -> TimetableService:
        return TimetableService(self.timetable_repo)

    def session_service(self, **kwargs) -> SessionService:
        return SessionService(self.sessions_repo, self.timetable_repo, self.enrollments_repo, **kwargs)

    def mark_ledger(self, **kwargs) -> MarkLedger:
        return MarkLedger(self.marks_repo, self.enrollments_repo, self.session_service(), **kwargs)

    def report_service(self, **kwargs) -> ReportService:
        return ReportService(self.reports_repo, self.enrollments_repo, **kwargs)

    def achievement_service(self) -> AchievementService:
        return AchievementService(self.achievements_repo, self.report_service())

    def engine(self) -> AttendanceEngine:
        sessions = self.session_service()
        reports = self.report_service()
        return AttendanceEngine(
            sessions,
            MarkLedger(self.marks_repo, self.enrollments_repo, sessions),
            reports,
            AchievementService(self.achievements_repo, reports),
        )
